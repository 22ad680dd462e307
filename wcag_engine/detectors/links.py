"""
Link detection rules - link purpose, destinations and context changes.
"""

import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from bs4 import Tag

from ..analyzers.accessibility import (
    accessible_name,
    aria_name,
    attr,
    humanize,
    is_hidden,
    link_text,
    normalize_space,
    primary_role,
    url_basename,
    url_extension,
)
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


GENERIC_LINK_TEXT = [
    "click here", "click", "here", "read more", "more", "learn more",
    "more info", "more information", "details", "link", "this link",
    "continue", "go", "this", "view more", "see more",
]

NEW_WINDOW_HINT = re.compile(r"new (?:window|tab)", re.IGNORECASE)
EXTERNAL_HINT = re.compile(r"external|off-?site|leaves? (?:this|the) site", re.IGNORECASE)

DOWNLOAD_TYPES: Dict[str, str] = {
    "pdf": "PDF",
    "doc": "Word",
    "docx": "Word",
    "xls": "Excel",
    "xlsx": "Excel",
    "ppt": "PowerPoint",
    "pptx": "PowerPoint",
    "odt": "ODT",
    "ods": "ODS",
    "odp": "ODP",
    "rtf": "RTF",
    "csv": "CSV",
    "zip": "ZIP",
    "rar": "RAR",
    "7z": "7Z",
    "tar": "TAR",
    "gz": "GZ",
}


def visible_links(doc: Document) -> List[Tag]:
    return [a for a in doc.find_all("a", attrs={"href": True}) if not is_hidden(a)]


def announcement(link: Tag) -> str:
    """Everything a screen reader may read for a link."""
    return normalize_space(" ".join([link_text(link), attr(link, "aria-label"), attr(link, "title")]))


def is_empty_link(link: Tag, doc: Document) -> bool:
    return not link_text(link) and not aria_name(link, doc)


def normalize_link_text(text: str) -> str:
    return normalize_space(re.sub(r"[^\w\s]", " ", text)).lower()


def is_generic_link(link: Tag, doc: Document) -> bool:
    if aria_name(link, doc):
        return False
    return normalize_link_text(link_text(link)) in GENERIC_LINK_TEXT


def link_slug(href: str) -> str:
    """Humanized last path segment of a URL, '' when there is none."""
    if href.lower().startswith(("javascript:", "#", "mailto:", "tel:")):
        return ""
    return humanize(url_basename(href), strip_extension=True)


def normalize_destination(href: str) -> Optional[str]:
    """Comparable form of a link target; None for script and in-page links."""
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith("javascript:"):
        return None
    return href.split("#", 1)[0].rstrip("/").lower()


def duplicate_link_groups(doc: Document) -> Dict[str, Dict[str, Tag]]:
    """
    Links sharing a name but pointing to different places.

    Returns:
        name -> {destination -> first link to it}, only for names with
        more than one distinct destination
    """
    groups: Dict[str, Dict[str, Tag]] = {}
    for link in visible_links(doc):
        name = normalize_space(accessible_name(link, doc)).lower()
        destination = normalize_destination(attr(link, "href"))
        if not name or destination is None:
            continue
        groups.setdefault(name, {}).setdefault(destination, link)
    return {name: targets for name, targets in groups.items() if len(targets) > 1}


def opens_new_window(link: Tag) -> bool:
    return attr(link, "target").lower() == "_blank"


def lacks_new_window_warning(link: Tag) -> bool:
    return opens_new_window(link) and not NEW_WINDOW_HINT.search(announcement(link))


def download_type(link: Tag) -> Optional[str]:
    """File type label for links to documents and archives."""
    return DOWNLOAD_TYPES.get(url_extension(attr(link, "href")))


def lacks_download_type(link: Tag) -> bool:
    label = download_type(link)
    if label is None:
        return False
    extension = url_extension(attr(link, "href"))
    pattern = rf"\b(?:{re.escape(extension)}|{re.escape(label)})\b"
    return not re.search(pattern, announcement(link), re.IGNORECASE)


def link_host(href: str) -> Optional[str]:
    href = href.strip()
    if not href.lower().startswith(("http://", "https://", "//")):
        return None
    host = (urlparse(href).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None


def is_unmarked_external(link: Tag, doc: Document) -> bool:
    site = doc.context.site_host
    if not site:
        return False
    host = link_host(attr(link, "href"))
    if host is None or host == site or host.endswith("." + site):
        return False
    return not EXTERNAL_HINT.search(announcement(link))


def has_dead_destination(link: Tag) -> bool:
    href = attr(link, "href")
    if primary_role(link) == "button":
        return False
    return href in ("", "#") or href.lower().startswith("javascript:")


class EmptyLinkRule(DetectionRule):
    title = "Empty link"
    wcag_criterion = "2.4.4"
    default_severity = Severity.CRITICAL
    message = "Link has no accessible text"
    recommendation = "Add link text, image alt text or an aria-label describing the destination."

    @property
    def id(self) -> str:
        return "empty-link"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, a) for a in visible_links(doc) if is_empty_link(a, doc)]


class GenericLinkTextRule(DetectionRule):
    title = "Ambiguous link text"
    wcag_criterion = "2.4.4"
    default_severity = Severity.WARNING
    message = "Link text does not describe the destination"
    recommendation = "Replace 'click here' and similar text with a description of the target."

    @property
    def id(self) -> str:
        return "generic-link-text"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, a, message=f"Ambiguous link text: '{link_text(a)}'", context={"text": link_text(a)})
            for a in visible_links(doc)
            if is_generic_link(a, doc)
        ]


class DuplicateLinkTextRule(DetectionRule):
    """
    Detects identical link names leading to different destinations.

    Destinations are compared without fragment and trailing slash,
    case-insensitively. One issue is raised per distinct destination,
    anchored at the first link pointing to it.
    """

    title = "Same link text, different destinations"
    wcag_criterion = "2.4.4"
    default_severity = Severity.MODERATE
    message = "Links with the same text go to different destinations"
    recommendation = "Give each link text that distinguishes its destination."

    @property
    def id(self) -> str:
        return "duplicate-link-text"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for name, targets in duplicate_link_groups(doc).items():
            for destination, link in targets.items():
                issues.append(self.make_issue(
                    doc,
                    link,
                    message=f"'{name}' links to {len(targets)} different destinations",
                    context={"text": name, "destination": destination, "destinations": len(targets)},
                ))
        return issues


class NewWindowLinkRule(DetectionRule):
    title = "Unannounced new window"
    wcag_criterion = "3.2.5"
    default_severity = Severity.WARNING
    message = "Link opens a new window without warning"
    recommendation = "Tell users the link opens in a new window."

    @property
    def id(self) -> str:
        return "new-window-link"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, a) for a in visible_links(doc) if lacks_new_window_warning(a)]


class DownloadLinkRule(DetectionRule):
    title = "Download link without file type"
    wcag_criterion = "3.2.4"
    default_severity = Severity.WARNING
    message = "Link to a file does not name the file type"
    recommendation = "Mention the file type in the link text, e.g. 'Annual report (PDF)'."

    @property
    def id(self) -> str:
        return "download-link"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, a, context={"type": download_type(a)})
            for a in visible_links(doc)
            if lacks_download_type(a)
        ]


class ExternalLinkRule(DetectionRule):
    """
    Detects links leaving the site without saying so.

    Needs ScanContext.site_url; without it no link can be judged external
    and the rule reports nothing.
    """

    title = "Unmarked external link"
    wcag_criterion = "3.2.4"
    default_severity = Severity.NOTICE
    message = "External link is not identified as external"
    recommendation = "Indicate that the link leads to another site."

    @property
    def id(self) -> str:
        return "external-link"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, a, context={"host": link_host(attr(a, "href"))})
            for a in visible_links(doc)
            if is_unmarked_external(a, doc)
        ]


class LinkDestinationRule(DetectionRule):
    title = "Link without destination"
    wcag_criterion = "2.4.4"
    default_severity = Severity.WARNING
    message = "Link has no real destination"
    recommendation = "Use a <button> for actions, or give the link a real URL."

    @property
    def id(self) -> str:
        return "link-destination"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, a, context={"href": attr(a, "href")})
            for a in visible_links(doc)
            if has_dead_destination(a)
        ]
