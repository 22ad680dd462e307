"""
Page structure detection rules - landmarks, document metadata, bypass blocks.
"""

import re
from typing import Dict, List, Optional

from bs4 import Tag

from ..analyzers.accessibility import attr, is_hidden, link_text, primary_role
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .aria import SECTIONING_TAGS
from .base_rule import DetectionRule


# role -> native element carrying it
ROLE_TO_TAG: Dict[str, str] = {
    "main": "main",
    "banner": "header",
    "navigation": "nav",
    "contentinfo": "footer",
    "complementary": "aside",
    "article": "article",
}

LANDMARK_ROLES = ["banner", "complementary", "contentinfo", "form", "main", "navigation", "region", "search"]

LANDMARK_NAMES: Dict[str, str] = {
    "banner": "Banner",
    "complementary": "Complementary",
    "contentinfo": "Footer",
    "form": "Form",
    "main": "Main",
    "navigation": "Navigation",
    "region": "Region",
    "search": "Search",
}

SKIP_LINK_TEXT = re.compile(r"\b(skip|jump)\b", re.IGNORECASE)


def semantic_replacement(element: Tag) -> Optional[str]:
    """Native tag for a div/span that only carries a landmark role."""
    if element.name not in ("div", "span"):
        return None
    return ROLE_TO_TAG.get(primary_role(element))


def landmark_type(element: Tag, doc: Document) -> str:
    role = primary_role(element)
    if role:
        return role if role in LANDMARK_ROLES else ""
    if element.name == "nav":
        return "navigation"
    if element.name == "main":
        return "main"
    if element.name == "aside":
        return "complementary"
    if element.name in ("header", "footer") and not doc.has_ancestor(element, SECTIONING_TAGS):
        return "banner" if element.name == "header" else "contentinfo"
    return ""


def is_labelled(element: Tag) -> bool:
    return bool(attr(element, "aria-label") or attr(element, "aria-labelledby"))


def landmark_groups(doc: Document) -> Dict[str, List[Tag]]:
    """Visible landmarks grouped by type, in document order."""
    groups: Dict[str, List[Tag]] = {}
    for element in doc.elements():
        kind = landmark_type(element, doc)
        if kind and not is_hidden(element):
            groups.setdefault(kind, []).append(element)
    return groups


def parse_viewport(content: str) -> Dict[str, str]:
    settings = {}
    for part in re.split(r"[,;]", content or ""):
        if "=" in part:
            key, value = part.split("=", 1)
            settings[key.strip().lower()] = value.strip().lower()
    return settings


def blocks_zoom(meta: Tag) -> bool:
    settings = parse_viewport(attr(meta, "content"))
    if settings.get("user-scalable") in ("no", "0"):
        return True
    try:
        return float(settings.get("maximum-scale", "10")) < 2
    except ValueError:
        return False


def has_skip_link(doc: Document) -> bool:
    for link in doc.find_all("a", attrs={"href": True}):
        if attr(link, "href").startswith("#") and SKIP_LINK_TEXT.search(link_text(link)):
            return True
    return False


def needs_skip_link(doc: Document) -> bool:
    return doc.text_length > doc.context.skip_link_min_length and not has_skip_link(doc)


class SemanticHtmlRule(DetectionRule):
    """Detects div/span elements standing in for a native landmark element."""

    title = "Generic element used as landmark"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Use a native HTML element instead of a landmark role"
    recommendation = "Replace the element with its semantic HTML5 equivalent."

    @property
    def id(self) -> str:
        return "semantic-html"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(["div", "span"], attrs={"role": True}):
            tag = semantic_replacement(element)
            if tag:
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"<{element.name} role=\"{primary_role(element)}\"> should be <{tag}>",
                    context={"replacement": tag},
                ))
        return issues


class LandmarkRoleRule(DetectionRule):
    """
    Detects landmarks that cannot be told apart.

    Every landmark type occurring more than once needs a label on each
    occurrence; more than one main landmark is reported on its own.
    """

    title = "Landmarks are not distinguishable"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Repeated landmark has no label"
    recommendation = "Give each repeated landmark a unique aria-label or aria-labelledby."

    @property
    def id(self) -> str:
        return "landmark-role"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for kind, members in landmark_groups(doc).items():
            if len(members) < 2:
                continue
            for element in members:
                if not is_labelled(element):
                    issues.append(self.make_issue(
                        doc,
                        element,
                        message=f"Repeated {kind} landmark has no label",
                        context={"landmark": kind, "count": len(members)},
                    ))
            if kind == "main":
                for element in members[1:]:
                    issues.append(self.make_issue(
                        doc,
                        element,
                        message="Page has more than one main landmark",
                        context={"landmark": kind, "count": len(members)},
                    ))
        return issues


class PageStructureRule(DetectionRule):
    """Detects authored documents without a language or a title."""

    title = "Document language or title missing"
    wcag_criterion = "3.1.1"
    default_severity = Severity.SERIOUS
    message = "Document metadata missing"

    @property
    def id(self) -> str:
        return "page-structure"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for html in doc.find_all("html"):
            if not attr(html, "lang"):
                issues.append(self.make_issue(
                    doc,
                    html,
                    message="<html> element has no lang attribute",
                    recommendation="Declare the page language, e.g. <html lang=\"en\">.",
                    context={"kind": "lang"},
                ))
        for head in doc.find_all("head"):
            title = head.find("title")
            if title is None or not title.get_text(strip=True):
                issues.append(self.make_issue(
                    doc,
                    head,
                    message="Document has no title",
                    recommendation="Add a descriptive <title> to the <head>.",
                    context={"kind": "title"},
                ))
        return issues


class ViewportRule(DetectionRule):
    """Detects viewport settings that prevent zooming."""

    title = "Zoom disabled"
    wcag_criterion = "1.4.4"
    default_severity = Severity.CRITICAL
    message = "Viewport prevents users from zooming"
    recommendation = "Remove user-scalable=no and keep maximum-scale at 2 or above."

    @property
    def id(self) -> str:
        return "viewport-check"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, meta, context={"content": attr(meta, "content")})
            for meta in doc.find_all("meta", attrs={"name": True})
            if attr(meta, "name").lower() == "viewport" and blocks_zoom(meta)
        ]


class SkipLinkRule(DetectionRule):
    """Detects long content without a skip-navigation link."""

    title = "Skip link missing"
    wcag_criterion = "2.4.1"
    default_severity = Severity.WARNING
    message = "No skip link to bypass repeated content"
    recommendation = "Add a 'Skip to main content' link as the first focusable element."

    @property
    def id(self) -> str:
        return "skip-link"

    def detect(self, doc: Document) -> List[Issue]:
        if not needs_skip_link(doc):
            return []
        return [self.make_issue(doc, context={"length": doc.text_length})]
