"""
Color and contrast rules.

Only inline styles are evaluated. Colors coming from stylesheets,
translucent colors and backgrounds that are images or gradients cannot be
measured from markup, so the contrast rule stays silent on them and the
complex-contrast rule flags them for manual review.
"""

import re
from typing import List, Optional, Tuple

from bs4 import NavigableString, Tag

from ..analyzers.color import (
    AA_NORMAL,
    background_color,
    contrast_ratio,
    inline_style,
    is_large_text,
    parse_color,
)
from ..analyzers.accessibility import is_hidden, normalize_space, text_of
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


COLOR_WORDS = r"red|green|blue|yellow|orange|purple|pink|gr[ae]y|black|white"
COLOR_RELIANCE = re.compile(
    rf"\b(?:{COLOR_WORDS})\s+(?:button|link|text|items?|fields?|icons?|boxe?s?|areas?|words?|options?)\b"
    rf"|\b(?:in|marked|shown|highlighted|colored|coloured)\s+(?:in\s+)?(?:{COLOR_WORDS})\b",
    re.IGNORECASE,
)

COMPLEX_BACKGROUND = re.compile(r"gradient\(|url\(", re.IGNORECASE)


def inline_contrast(element: Tag) -> Optional[Tuple[float, bool]]:
    """
    Contrast of an element's inline text and background colors.

    Returns:
        (ratio, large_text), or None when either color is not an explicit,
        opaque, parseable inline value
    """
    style = inline_style(element)
    foreground = parse_color(style.get("color"))
    background = parse_color(background_color(style))
    if foreground is None or background is None:
        return None
    return contrast_ratio(foreground, background), is_large_text(style)


def own_text(element: Tag) -> str:
    """Text of the element's direct text children only."""
    return normalize_space(" ".join(
        str(child) for child in element.children
        if type(child) is NavigableString
    ))


def has_complex_background(element: Tag) -> bool:
    style = inline_style(element)
    background = style.get("background", "") + " " + style.get("background-image", "")
    return bool(COMPLEX_BACKGROUND.search(background)) and bool(text_of(element))


class TextColorContrastRule(DetectionRule):
    """
    Detects inline text/background pairs below the 4.5:1 contrast ratio.

    The threshold is flat. Large text is reported in the issue context only.
    """

    title = "Insufficient color contrast"
    wcag_criterion = "1.4.3"
    default_severity = Severity.WARNING
    message = "Text contrast is below the WCAG AA minimum"
    recommendation = "Darken the text or lighten the background to reach the required ratio."

    @property
    def id(self) -> str:
        return "text-color-contrast"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(attrs={"style": True}):
            if not text_of(element) or is_hidden(element):
                continue
            measured = inline_contrast(element)
            if measured is None:
                continue
            ratio, large = measured
            if ratio < AA_NORMAL:
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Contrast ratio {ratio:.2f}:1 is below {AA_NORMAL}:1",
                    context={"ratio": round(ratio, 2), "required": AA_NORMAL, "large_text": large},
                ))
        return issues


class ColorRelianceRule(DetectionRule):
    title = "Information conveyed by color"
    wcag_criterion = "1.4.1"
    default_severity = Severity.WARNING
    message = "Text refers to content by color alone"
    recommendation = "Identify content by text, shape or position as well as color."

    @property
    def id(self) -> str:
        return "color-reliance"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            if element.name in ("script", "style"):
                continue
            match = COLOR_RELIANCE.search(own_text(element))
            if match:
                issues.append(self.make_issue(doc, element, context={"phrase": match.group(0)}))
        return issues


class ComplexContrastRule(DetectionRule):
    title = "Contrast cannot be verified"
    wcag_criterion = "1.4.3"
    default_severity = Severity.WARNING
    message = "Text over a gradient or image background needs a manual contrast check"
    recommendation = "Verify contrast at the lowest-contrast point of the background."

    @property
    def id(self) -> str:
        return "complex-contrast"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element)
            for element in doc.find_all(attrs={"style": True})
            if has_complex_background(element)
        ]
