"""
Structure fix rules - native landmarks, landmark labels, document metadata
and skip links.
"""

from typing import Optional

from bs4 import Tag

from ..analyzers.accessibility import text_of, visible_headings
from ..analyzers.dom_adapter import Document
from ..detectors.aria import first_heading
from ..detectors.structure import (
    LANDMARK_NAMES,
    is_labelled,
    landmark_groups,
    needs_skip_link,
    semantic_replacement,
)
from .base_rule import FixRule


class SemanticHtmlFix(FixRule):
    """
    Replaces div/span landmarks with their native element.

    The new element takes over every attribute except role and all child
    nodes, and is put where the old element was.
    """

    @property
    def id(self) -> str:
        return "semantic-html"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(["div", "span"], attrs={"role": True}):
            tag = semantic_replacement(element)
            if not tag:
                continue

            attrs = {name: value for name, value in element.attrs.items() if name != "role"}
            replacement = doc.new_tag(tag, attrs=attrs)
            for child in list(element.contents):
                replacement.append(child.extract())
            element.replace_with(replacement)
            fixed += 1
        return fixed


class LandmarkRoleFix(FixRule):
    """
    Labels repeated landmarks.

    Strategy:
    - landmark has a heading with text -> aria-labelledby to that heading
    - otherwise -> aria-label "<Landmark> <n>" (n = position in its group)
    """

    @property
    def id(self) -> str:
        return "landmark-role"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for kind, members in landmark_groups(doc).items():
            if len(members) < 2:
                continue
            for position, element in enumerate(members, 1):
                if is_labelled(element):
                    continue
                heading = first_heading(element)
                if heading is not None:
                    element["aria-labelledby"] = doc.ensure_id(heading, f"{kind}-heading")
                else:
                    element["aria-label"] = f"{LANDMARK_NAMES.get(kind, kind.title())} {position}"
                fixed += 1
        return fixed


class PageStructureFix(FixRule):
    """Adds the page language and a document title."""

    DEFAULT_TITLE = "Untitled document"

    @property
    def id(self) -> str:
        return "page-structure"

    def _title_text(self, doc: Document) -> str:
        for heading in visible_headings(doc):
            if heading.name == "h1" and text_of(heading):
                return text_of(heading)
        return self.DEFAULT_TITLE

    def transform(self, doc: Document) -> int:
        fixed = 0
        for html in doc.find_all("html"):
            if not (html.get("lang") or "").strip():
                html["lang"] = doc.context.language
                fixed += 1

        for head in doc.find_all("head"):
            title = head.find("title")
            if title is not None and title.get_text(strip=True):
                continue
            if title is None:
                title = doc.new_tag("title")
                head.append(title)
            title.string = self._title_text(doc)
            fixed += 1
        return fixed


class SkipLinkFix(FixRule):
    """
    Inserts a skip link as the first element of the content.

    Target: <main>, else #main-content, else the first div (given
    id="main-content" when it has none). No target means no fix.
    """

    LINK_TEXT = "Skip to main content"

    @property
    def id(self) -> str:
        return "skip-link"

    def _target_id(self, doc: Document) -> Optional[str]:
        main = doc.find("main")
        if main is not None:
            return doc.ensure_id(main, "main-content")
        if doc.by_id("main-content") is not None:
            return "main-content"
        div = doc.find("div")
        if div is not None:
            return doc.ensure_id(div, "main-content")
        return None

    def transform(self, doc: Document) -> int:
        if not needs_skip_link(doc):
            return 0
        target = self._target_id(doc)
        if target is None:
            return 0

        link = doc.new_tag(
            "a",
            attrs={"href": f"#{target}", "class": "skip-link screen-reader-text"},
            text=self.LINK_TEXT,
        )
        container: Optional[Tag] = doc.find("body")
        if container is None:
            container = doc.root
        container.insert(0, link)
        return 1
