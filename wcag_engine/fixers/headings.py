"""
Heading fix rules - repair the outline by renaming, trimming or removing
headings.
"""

from bs4 import NavigableString

from ..analyzers.accessibility import heading_level, text_of, visible_headings
from ..analyzers.dom_adapter import Document
from ..detectors.headings import (
    MAX_HEADING_LENGTH,
    duplicate_headings,
    empty_headings,
    extra_h1s,
    h1_candidate,
    is_removable_heading,
    looks_like_heading,
)
from .base_rule import FixRule


class MissingH1Fix(FixRule):
    @property
    def id(self) -> str:
        return "missing-h1"

    def transform(self, doc: Document) -> int:
        heading = h1_candidate(doc)
        if heading is None:
            return 0
        heading.name = "h1"
        return 1


class MultipleH1Fix(FixRule):
    @property
    def id(self) -> str:
        return "multiple-h1"

    def transform(self, doc: Document) -> int:
        extras = extra_h1s(doc)
        for heading in extras:
            heading.name = "h2"
        return len(extras)


class EmptyHeadingFix(FixRule):
    """Removes headings with no text, no child elements and no ARIA name."""

    @property
    def id(self) -> str:
        return "empty-heading"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for heading in empty_headings(doc):
            if is_removable_heading(heading, doc):
                heading.decompose()
                fixed += 1
        return fixed


class SkippedHeadingLevelFix(FixRule):
    """
    Renames out-of-sequence headings.

    A heading deeper than previous + 1 becomes h{previous + 1}, and the walk
    continues from that corrected level, so h1 h4 h5 becomes h1 h2 h3.
    """

    @property
    def id(self) -> str:
        return "skipped-heading-level"

    def transform(self, doc: Document) -> int:
        fixed = 0
        previous = None
        for heading in visible_headings(doc):
            level = heading_level(heading)
            if previous is not None and level > previous + 1:
                level = previous + 1
                heading.name = f"h{level}"
                fixed += 1
            previous = level
        return fixed


class HeadingLengthFix(FixRule):
    """
    Truncates overlong text-only headings, keeping the full text in title.

    Headings with child elements are left alone: truncating would drop
    markup.
    """

    ELLIPSIS = "..."

    @property
    def id(self) -> str:
        return "heading-length"

    def transform(self, doc: Document) -> int:
        fixed = 0
        limit = MAX_HEADING_LENGTH - len(self.ELLIPSIS)
        for heading in visible_headings(doc):
            text = text_of(heading)
            if len(text) <= MAX_HEADING_LENGTH or heading.find(True) is not None:
                continue
            heading["title"] = text
            heading.string = text[:limit].rstrip() + self.ELLIPSIS
            fixed += 1
        return fixed


class HeadingUniquenessFix(FixRule):
    @property
    def id(self) -> str:
        return "heading-uniqueness"

    def transform(self, doc: Document) -> int:
        duplicates = duplicate_headings(doc)
        if not duplicates:
            return 0

        taken = {text_of(h).lower() for h in visible_headings(doc)}
        for heading in duplicates:
            base = text_of(heading)
            number = 2
            while f"{base} ({number})".lower() in taken:
                number += 1
            heading.append(NavigableString(f" ({number})"))
            taken.add(f"{base} ({number})".lower())
        return len(duplicates)


class HeadingVisualFix(FixRule):
    LEVEL = "2"

    @property
    def id(self) -> str:
        return "heading-visual"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(["div", "span", "p"]):
            if looks_like_heading(element):
                element["role"] = "heading"
                element["aria-level"] = self.LEVEL
                fixed += 1
        return fixed
