"""
Link fix rules - names for empty and ambiguous links, warnings for context
changes, and button semantics for links that go nowhere.
"""

from bs4 import NavigableString, Tag

from ..analyzers.accessibility import (
    accessible_name,
    attr,
    humanize,
    link_text,
    text_of,
    url_basename,
)
from ..analyzers.dom_adapter import Document
from ..detectors.links import (
    NEW_WINDOW_HINT,
    download_type,
    has_dead_destination,
    is_empty_link,
    is_generic_link,
    is_unmarked_external,
    lacks_download_type,
    lacks_new_window_warning,
    link_slug,
    opens_new_window,
    visible_links,
)
from .base_rule import FixRule


def append_notice(link: Tag, notice: str, fallback: str) -> None:
    """
    Append a notice to what the link announces.

    Strategy:
    - existing aria-label -> appended to it
    - visible text -> appended to the text
    - otherwise -> aria-label from the image alt (or `fallback`) plus notice
    """
    label = attr(link, "aria-label")
    if label:
        link["aria-label"] = label + notice
    elif text_of(link):
        link.append(NavigableString(notice))
    else:
        link["aria-label"] = (link_text(link) or fallback) + notice


class EmptyLinkFix(FixRule):
    DEFAULT_LABEL = "Link"

    @property
    def id(self) -> str:
        return "empty-link"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for link in visible_links(doc):
            if is_empty_link(link, doc):
                link["aria-label"] = link_slug(attr(link, "href")) or self.DEFAULT_LABEL
                fixed += 1
        return fixed


class GenericLinkTextFix(FixRule):
    """aria-label "Learn more about <Slug>"; links without a URL slug are left alone."""

    @property
    def id(self) -> str:
        return "generic-link-text"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for link in visible_links(doc):
            if not is_generic_link(link, doc):
                continue
            slug = link_slug(attr(link, "href"))
            if slug:
                link["aria-label"] = f"Learn more about {slug}"
                fixed += 1
        return fixed


class NewWindowLinkFix(FixRule):
    NOTICE = " (opens in new window)"

    @property
    def id(self) -> str:
        return "new-window-link"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for link in visible_links(doc):
            if lacks_new_window_warning(link):
                append_notice(link, self.NOTICE, "Link")
                fixed += 1
        return fixed


class DownloadLinkFix(FixRule):
    @property
    def id(self) -> str:
        return "download-link"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for link in visible_links(doc):
            if not lacks_download_type(link):
                continue
            fallback = humanize(url_basename(attr(link, "href")), strip_extension=True) or "Download"
            append_notice(link, f" ({download_type(link)})", fallback)
            fixed += 1
        return fixed


class ExternalLinkFix(FixRule):
    """
    Labels links to other sites as external.

    The label keeps the link's current name; links opening a new window
    say so too, unless the name already does.
    """

    @property
    def id(self) -> str:
        return "external-link"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for link in visible_links(doc):
            if not is_unmarked_external(link, doc):
                continue
            name = accessible_name(link, doc) or "Link"
            if opens_new_window(link) and not NEW_WINDOW_HINT.search(name):
                link["aria-label"] = f"{name} (external link, opens in new window)"
            else:
                link["aria-label"] = f"{name} (external link)"
            fixed += 1
        return fixed


class LinkDestinationFix(FixRule):
    """Gives script-only links button semantics."""

    @property
    def id(self) -> str:
        return "link-destination"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for link in visible_links(doc):
            if not has_dead_destination(link):
                continue
            link["href"] = "#"
            link["role"] = "button"
            if not link.has_attr("tabindex"):
                link["tabindex"] = "0"
            fixed += 1
        return fixed
