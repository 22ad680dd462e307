"""
Heading detection rules - outline, emptiness, length and uniqueness.

Only visible headings take part in the outline. Hidden headings are
skipped entirely so they can never cause or hide a level skip.
"""

from typing import Dict, List, Tuple

from bs4 import Tag

from ..analyzers.accessibility import (
    HEADING_TAGS,
    aria_name,
    classes,
    heading_level,
    is_hidden,
    link_text,
    primary_role,
    text_of,
    visible_headings,
)
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


MAX_HEADING_LENGTH = 150
VISUAL_HEADING_CLASSES = ["heading", "headline", "title", "h1", "h2", "h3", "h4", "h5", "h6"]
MAX_VISUAL_HEADING_LENGTH = 100


def h1_candidate(doc: Document):
    """First heading of the highest level present, when no H1 exists."""
    headings = visible_headings(doc)
    if not headings or any(h.name == "h1" for h in headings):
        return None
    top = min(heading_level(h) for h in headings)
    return next(h for h in headings if heading_level(h) == top)


def extra_h1s(doc: Document) -> List[Tag]:
    return [h for h in visible_headings(doc) if h.name == "h1"][1:]


def empty_headings(doc: Document) -> List[Tag]:
    return [h for h in visible_headings(doc) if not link_text(h)]


def is_removable_heading(heading: Tag, doc: Document) -> bool:
    """No text, no child elements and no ARIA name."""
    return not text_of(heading) and not heading.find(True) and not aria_name(heading, doc)


def skipped_headings(doc: Document) -> List[Tuple[Tag, int, int]]:
    """
    Headings whose level jumps more than one past the previous heading.

    Returns:
        (heading, previous level, level) in document order
    """
    skipped = []
    previous = None
    for heading in visible_headings(doc):
        level = heading_level(heading)
        if previous is not None and level > previous + 1:
            skipped.append((heading, previous, level))
        previous = level
    return skipped


def is_sectioning_without_heading(element: Tag) -> bool:
    if element.find(HEADING_TAGS):
        return False
    return element.find(attrs={"role": "heading"}) is None


def duplicate_headings(doc: Document) -> List[Tag]:
    """Visible headings repeating an earlier heading's text (case-insensitive)."""
    seen: Dict[str, Tag] = {}
    duplicates = []
    for heading in visible_headings(doc):
        key = text_of(heading).lower()
        if not key:
            continue
        if key in seen:
            duplicates.append(heading)
        else:
            seen[key] = heading
    return duplicates


def looks_like_heading(element: Tag) -> bool:
    """div/span/p styled to look like a heading without heading semantics."""
    if element.name not in ("div", "span", "p") or primary_role(element) == "heading":
        return False
    text = text_of(element)
    if not text or is_hidden(element):
        return False
    if element.find(HEADING_TAGS) or element.find_parent(HEADING_TAGS) is not None:
        return False
    if any(token.lower() in VISUAL_HEADING_CLASSES for token in classes(element)):
        return True
    if element.name != "p" or len(text) >= MAX_VISUAL_HEADING_LENGTH:
        return False
    children = [child for child in element.contents if not (isinstance(child, str) and not child.strip())]
    return (
        len(children) == 1
        and isinstance(children[0], Tag)
        and children[0].name in ("b", "strong")
    )


class MissingH1Rule(DetectionRule):
    title = "Missing H1"
    wcag_criterion = "1.3.1"
    default_severity = Severity.SERIOUS
    message = "Page has headings but no H1"
    recommendation = "Use one H1 for the main topic of the page."

    @property
    def id(self) -> str:
        return "missing-h1"

    def detect(self, doc: Document) -> List[Issue]:
        heading = h1_candidate(doc)
        if heading is None:
            return []
        return [self.make_issue(doc, heading, context={"first_level": heading_level(heading)})]


class MultipleH1Rule(DetectionRule):
    title = "Multiple H1 headings"
    wcag_criterion = "1.3.1"
    default_severity = Severity.MODERATE
    message = "Page has more than one H1"
    recommendation = "Keep a single H1 and demote the others."

    @property
    def id(self) -> str:
        return "multiple-h1"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, h) for h in extra_h1s(doc)]


class EmptyHeadingRule(DetectionRule):
    """
    Detects headings with nothing to announce.

    Severity:
    - serious: no content at all
    - moderate: only an image that has no name
    - minor: named through ARIA only
    """

    title = "Empty heading"
    wcag_criterion = "1.3.1"
    default_severity = Severity.SERIOUS
    message = "Heading is empty"
    recommendation = "Add text to the heading or remove it."

    @property
    def id(self) -> str:
        return "empty-heading"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for heading in empty_headings(doc):
            if aria_name(heading, doc):
                severity, message = Severity.MINOR, "Heading has only an ARIA label"
            elif heading.find("img"):
                severity, message = Severity.MODERATE, "Heading contains only an unnamed image"
            else:
                severity, message = Severity.SERIOUS, self.message
            issues.append(self.make_issue(doc, heading, message=message, severity=severity))
        return issues


class SkippedHeadingLevelRule(DetectionRule):
    """
    Detects headings that skip outline levels.

    The first visible heading is exempt; afterwards a heading is flagged
    when its level exceeds the previous visible heading's level plus one.
    """

    title = "Skipped heading level"
    wcag_criterion = "1.3.1"
    default_severity = Severity.MODERATE
    message = "Heading level skipped"
    recommendation = "Do not skip heading levels; go one level deeper at a time."

    @property
    def id(self) -> str:
        return "skipped-heading-level"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(
                doc,
                heading,
                message=f"Heading level skipped: h{previous} followed by h{level}",
                context={"previous_level": previous, "level": level},
            )
            for heading, previous, level in skipped_headings(doc)
        ]


class HeadingNestingRule(DetectionRule):
    title = "Section without heading"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Sectioning element has no heading"
    recommendation = "Start each section or article with a heading."

    @property
    def id(self) -> str:
        return "heading-nesting"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element)
            for element in doc.find_all(["section", "article"])
            if not is_hidden(element) and is_sectioning_without_heading(element)
        ]


class HeadingLengthRule(DetectionRule):
    title = "Heading too long"
    wcag_criterion = "2.4.6"
    default_severity = Severity.WARNING
    message = f"Heading is longer than {MAX_HEADING_LENGTH} characters"
    recommendation = "Keep headings short; move detail into the following content."

    @property
    def id(self) -> str:
        return "heading-length"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, h, context={"length": len(text_of(h))})
            for h in visible_headings(doc)
            if len(text_of(h)) > MAX_HEADING_LENGTH
        ]


class HeadingUniquenessRule(DetectionRule):
    title = "Duplicate heading"
    wcag_criterion = "2.4.6"
    default_severity = Severity.WARNING
    message = "Heading text is repeated"
    recommendation = "Make each heading describe its own section."

    @property
    def id(self) -> str:
        return "heading-uniqueness"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, h, context={"text": text_of(h)})
            for h in duplicate_headings(doc)
        ]


class HeadingVisualRule(DetectionRule):
    title = "Visual heading without semantics"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Text styled as a heading is not marked up as one"
    recommendation = "Use an <h1>-<h6> element, or role=\"heading\" with aria-level."

    @property
    def id(self) -> str:
        return "heading-visual"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, element) for element in doc.find_all(["div", "span", "p"]) if looks_like_heading(element)]
