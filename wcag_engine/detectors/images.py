"""
Image detection rules - text alternatives for img, area, svg and CSS images.

All rules map to WCAG 1.1.1 (Non-text Content). Decorative images are
recognized by filename/class heuristics and take precedence over every
rule that would otherwise ask for descriptive alt text.
"""

import re
from typing import List, Optional

from bs4 import Tag

from ..analyzers.accessibility import (
    EXTENSION,
    attr,
    classes,
    humanize,
    is_hidden,
    link_text,
    primary_role,
    text_of,
    url_basename,
)
from ..analyzers.color import inline_style
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


DECORATIVE_PATTERN = re.compile(
    r"(?:^|[\W_])(decorative|decoration|spacer|divider|separator|ornament|line|bg|background|border|shim)(?:[\W_]|$)",
    re.IGNORECASE,
)

REDUNDANT_PREFIX = re.compile(
    r"^\s*(?:an?\s+|the\s+)?(?:image|picture|photo|photograph|graphic|icon|img|pic)\s+of\s+",
    re.IGNORECASE,
)
IMAGE_EXTENSION = re.compile(r"\.(?:jpe?g|png|gif|svg|webp|bmp|tiff?|avif)\s*$", re.IGNORECASE)

PLACEHOLDER_ALT = re.compile(
    r"^(?:image|img|photo|picture|pic|graphic|untitled|placeholder|test|dsc|screenshot)[\s_-]*\d*$",
    re.IGNORECASE,
)

COMPLEX_PATTERN = re.compile(
    r"\b(chart|graph|diagram|map|infographic|statistics|stats|plot)s?\b",
    re.IGNORECASE,
)

CSS_URL = re.compile(r"url\(\s*['\"]?([^'\")]*)['\"]?\s*\)", re.IGNORECASE)

MIN_ALT_LENGTH = 3
MAX_ALT_LENGTH = 150

PRESENTATION_ROLES = ["presentation", "none"]


# =============================================================================
# PREDICATES
# =============================================================================

def is_decorative_candidate(img: Tag) -> bool:
    """Filename or class suggests the image carries no information."""
    if DECORATIVE_PATTERN.search(url_basename(attr(img, "src"))):
        return True
    return any(DECORATIVE_PATTERN.search(token) for token in classes(img))


def is_presentational(img: Tag) -> bool:
    return primary_role(img) in PRESENTATION_ROLES


def needs_decorative_treatment(img: Tag) -> bool:
    """Decorative-looking image whose alt is missing or non-empty."""
    if not (is_decorative_candidate(img) or is_presentational(img)):
        return False
    return not img.has_attr("alt") or img.get("alt").strip() != ""


def is_logo_candidate(img: Tag) -> bool:
    haystack = " ".join([url_basename(attr(img, "src")), attr(img, "class"), attr(img, "id")])
    return "logo" in haystack.lower() and not is_decorative_candidate(img)


def has_blank_alt(img: Tag) -> bool:
    return not attr(img, "alt")


def is_missing_alt(img: Tag) -> bool:
    return not img.has_attr("alt") and not is_presentational(img)


def is_unmarked_empty_alt(img: Tag) -> bool:
    """alt present but blank without any decorative marker."""
    if not img.has_attr("alt") or attr(img, "alt"):
        return False
    if is_presentational(img) or attr(img, "aria-hidden").lower() == "true":
        return False
    return not is_logo_candidate(img)


def strip_redundant(alt: str) -> str:
    text = alt
    while REDUNDANT_PREFIX.match(text):
        text = REDUNDANT_PREFIX.sub("", text, count=1)
    text = IMAGE_EXTENSION.sub("", text).strip()
    return text[:1].upper() + text[1:]


def has_redundant_alt(img: Tag) -> bool:
    alt = attr(img, "alt")
    return bool(alt) and bool(REDUNDANT_PREFIX.match(alt) or IMAGE_EXTENSION.search(alt))


def is_filename_shaped(alt: str, src: str) -> bool:
    if any(ch.isspace() for ch in alt):
        return False
    name = url_basename(src)
    stem = EXTENSION.sub("", name)
    if alt in (name, stem) and re.search(r"[-_.]", alt):
        return True
    return "_" in alt


def alt_quality_problem(alt: str, src: str) -> Optional[str]:
    """Why an alt text is poor, or None when it is acceptable."""
    if PLACEHOLDER_ALT.match(alt):
        return "placeholder"
    if is_filename_shaped(alt, src):
        return "filename"
    if len(alt) < MIN_ALT_LENGTH:
        return "too_short"
    if len(alt) > MAX_ALT_LENGTH:
        return "too_long"
    return None


def quality_problem(img: Tag) -> Optional[str]:
    alt = attr(img, "alt")
    if not alt or is_decorative_candidate(img) or has_redundant_alt(img):
        return None
    return alt_quality_problem(alt, attr(img, "src"))


def is_complex_image(img: Tag) -> bool:
    if attr(img, "aria-hidden").lower() == "true" or (img.has_attr("alt") and not attr(img, "alt")):
        return False
    if is_decorative_candidate(img):
        return False
    if img.has_attr("longdesc") or attr(img, "aria-describedby") or attr(img, "aria-details"):
        return False
    source = humanize(url_basename(attr(img, "src")), strip_extension=True)
    return bool(COMPLEX_PATTERN.search(attr(img, "alt")) or COMPLEX_PATTERN.search(source))


def is_unnamed_area(area: Tag) -> bool:
    return area.has_attr("href") and not attr(area, "alt") and not attr(area, "aria-label")


def is_unnamed_svg(svg: Tag) -> bool:
    if is_hidden(svg) or primary_role(svg) in PRESENTATION_ROLES:
        return False
    if attr(svg, "aria-label") or attr(svg, "aria-labelledby"):
        return False
    for child in svg.find_all(["title", "desc"], recursive=False):
        if text_of(child):
            return False
    return True


def wraps_named_control(svg: Tag, doc: Document) -> bool:
    """Inside a link or button that already has text of its own."""
    control = doc.closest(svg, ["a", "button"])
    return control is not None and bool(link_text(control))


def background_url(element: Tag) -> str:
    """URL of an inline background image, '' when there is none."""
    style = inline_style(element)
    for prop in ("background-image", "background"):
        match = CSS_URL.search(style.get(prop, ""))
        if match:
            return match.group(1).strip() or "url"
    return ""


def is_unnamed_background(element: Tag) -> bool:
    if not background_url(element) or text_of(element):
        return False
    if attr(element, "aria-label") or attr(element, "aria-labelledby"):
        return False
    return not is_presentational(element) and not is_hidden(element)


# =============================================================================
# RULES
# =============================================================================

class DecorativeImageRule(DetectionRule):
    """
    Detects decorative images that are still announced.

    Strategy:
    - filename or class matches a decorative pattern (spacer, divider, bg...)
    - or role is presentation/none
    - and alt is missing or non-empty
    """

    title = "Decorative image is announced"
    wcag_criterion = "1.1.1"
    default_severity = Severity.WARNING
    message = "Decorative image should have empty alt text"
    recommendation = "Use alt=\"\" (and aria-hidden=\"true\") for purely decorative images."

    @property
    def id(self) -> str:
        return "decorative-image"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, img) for img in doc.find_all("img") if needs_decorative_treatment(img)]


class LogoImageRule(DetectionRule):
    title = "Logo without alt text"
    wcag_criterion = "1.1.1"
    default_severity = Severity.CRITICAL
    message = "Logo image is missing alt text"
    recommendation = "Use the organization name as the logo's alt text."

    @property
    def id(self) -> str:
        return "logo-image"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, img)
            for img in doc.find_all("img")
            if is_logo_candidate(img) and has_blank_alt(img)
        ]


class MissingAltTextRule(DetectionRule):
    """Detects images without an alt attribute."""

    title = "Missing alt text"
    wcag_criterion = "1.1.1"
    default_severity = Severity.CRITICAL
    message = "Image is missing alt text"
    description = "Screen readers announce the file name or nothing at all."
    recommendation = "Add an alt attribute describing the image, or alt=\"\" if it is decorative."

    @property
    def id(self) -> str:
        return "missing-alt-text"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, img, context={"src": attr(img, "src")})
            for img in doc.find_all("img")
            if is_missing_alt(img)
        ]


class EmptyAltTextRule(DetectionRule):
    title = "Empty alt text"
    wcag_criterion = "1.1.1"
    default_severity = Severity.WARNING
    message = "Image has empty alt text but is not marked decorative"
    recommendation = "Describe the image, or mark it role=\"presentation\" if it is decorative."

    @property
    def id(self) -> str:
        return "empty-alt-text"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, img) for img in doc.find_all("img") if is_unmarked_empty_alt(img)]


class RedundantAltTextRule(DetectionRule):
    """Detects alt text that says 'image of' or ends with a file extension."""

    title = "Redundant alt text"
    wcag_criterion = "1.1.1"
    default_severity = Severity.WARNING
    message = "Alt text contains redundant wording"
    recommendation = "Screen readers already announce images; describe only the content."

    @property
    def id(self) -> str:
        return "redundant-alt-text"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, img, context={"alt": attr(img, "alt")})
            for img in doc.find_all("img")
            if has_redundant_alt(img)
        ]


class AltTextQualityRule(DetectionRule):
    """Detects placeholder, filename-shaped, too short or too long alt text."""

    title = "Poor alt text"
    wcag_criterion = "1.1.1"
    default_severity = Severity.WARNING
    message = "Alt text does not describe the image"

    MESSAGES = {
        "placeholder": "Alt text is a placeholder",
        "filename": "Alt text looks like a file name",
        "too_short": "Alt text is too short to be meaningful",
        "too_long": f"Alt text is longer than {MAX_ALT_LENGTH} characters",
    }

    @property
    def id(self) -> str:
        return "alt-text-quality"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for img in doc.find_all("img"):
            problem = quality_problem(img)
            if problem:
                recommendation = (
                    "Move the detail into a long description and keep alt text brief."
                    if problem == "too_long" else
                    "Write alt text that conveys what the image shows."
                )
                issues.append(self.make_issue(
                    doc,
                    img,
                    message=self.MESSAGES[problem],
                    recommendation=recommendation,
                    context={"problem": problem, "alt": attr(img, "alt")},
                ))
        return issues


class ComplexImageRule(DetectionRule):
    """Detects charts, graphs and diagrams without a long description."""

    title = "Complex image without long description"
    wcag_criterion = "1.1.1"
    default_severity = Severity.WARNING
    message = "Complex image needs a detailed description"
    recommendation = "Reference a text description with aria-describedby."

    @property
    def id(self) -> str:
        return "complex-image"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, img) for img in doc.find_all("img") if is_complex_image(img)]


class ImageMapAltRule(DetectionRule):
    title = "Image map area without alt"
    wcag_criterion = "1.1.1"
    default_severity = Severity.CRITICAL
    message = "Image map area has no text alternative"
    recommendation = "Add alt text describing the area's destination."

    @property
    def id(self) -> str:
        return "image-map-alt"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, area) for area in doc.find_all("area") if is_unnamed_area(area)]


class SvgAccessibilityRule(DetectionRule):
    title = "SVG without accessible name"
    wcag_criterion = "1.1.1"
    default_severity = Severity.SERIOUS
    message = "SVG has no accessible name"
    recommendation = "Add a <title>, aria-label or aria-labelledby, or hide decorative SVGs with aria-hidden."

    @property
    def id(self) -> str:
        return "svg-accessibility"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, svg) for svg in doc.find_all("svg") if is_unnamed_svg(svg)]


class BackgroundImageRule(DetectionRule):
    """Detects content-only CSS background images with no text alternative."""

    title = "Background image without text alternative"
    wcag_criterion = "1.1.1"
    default_severity = Severity.WARNING
    message = "Background image conveys no accessible text"
    recommendation = "Add role=\"img\" and an aria-label, or provide visible text."

    @property
    def id(self) -> str:
        return "background-image"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element, context={"url": background_url(element)})
            for element in doc.find_all(attrs={"style": True})
            if is_unnamed_background(element)
        ]
