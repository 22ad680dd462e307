"""
Keyboard and pointer interaction rules.

Several of these patterns can only be confirmed by running the page
(keyboard traps, focus order, gesture alternatives); from static markup
they are reported as warnings and left for manual review.
"""

import re
from typing import List, Optional

from bs4 import Tag

from ..analyzers.accessibility import (
    HEADING_TAGS,
    NATIVE_INTERACTIVE_TAGS,
    attr,
    classes,
    is_focusable,
    parse_int,
    primary_role,
    text_of,
)
from ..analyzers.color import inline_style
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


KEY_HANDLERS = ["onkeydown", "onkeyup", "onkeypress"]
FOCUS_HANDLERS = ["onfocus", "onblur", "onfocusout", "onfocusin"]
TOUCH_HANDLERS = ["ontouchstart", "ontouchmove", "ontouchend", "ongesturestart", "ongesturechange", "ongestureend"]

# mouse handler -> keyboard equivalents that cover it
MOUSE_EQUIVALENTS = {
    "onmouseover": ["onfocus", "onfocusin"],
    "onmouseout": ["onblur", "onfocusout"],
    "onmousedown": KEY_HANDLERS,
    "onmouseup": KEY_HANDLERS,
    "ondblclick": KEY_HANDLERS,
}

DIALOG_ROLES = ["dialog", "alertdialog"]
DIALOG_CLASSES = ["modal", "dialog"]

OUTLINE_REMOVED = re.compile(r"^(?:none|0(?:px)?)\b", re.IGNORECASE)
FOCUS_OUTLINE_RULE = re.compile(
    r":focus[^{]*\{[^}]*outline\s*:\s*(?:none|0(?:px)?)\b",
    re.IGNORECASE,
)
REVERSED_FLEX = re.compile(r"(?:row|column)-reverse", re.IGNORECASE)
PX_SIZE = re.compile(r"^\s*([\d.]+)\s*px\s*$", re.IGNORECASE)

MIN_TARGET_SIZE = 44


def has_positive_tabindex(element: Tag) -> bool:
    value = parse_int(attr(element, "tabindex"))
    return value is not None and value > 0


def has_key_handler(element: Tag) -> bool:
    return any(element.has_attr(handler) for handler in KEY_HANDLERS)


def click_target_problems(element: Tag) -> List[str]:
    """What a non-native onclick element lacks for keyboard users."""
    if element.name in NATIVE_INTERACTIVE_TAGS or not element.has_attr("onclick"):
        return []
    problems = []
    if not element.has_attr("tabindex"):
        problems.append("tabindex")
    if not element.has_attr("role"):
        problems.append("role")
    if not has_key_handler(element):
        problems.append("key handler")
    return problems


def is_dialog(element: Tag) -> bool:
    if element.name == "dialog":
        return False
    if primary_role(element) in DIALOG_ROLES:
        return True
    return any(token.lower() in DIALOG_CLASSES for token in classes(element))


def dialog_problems(element: Tag) -> List[str]:
    problems = []
    if primary_role(element) not in DIALOG_ROLES:
        problems.append("role")
    if attr(element, "aria-modal").lower() != "true":
        problems.append("aria-modal")
    if not (attr(element, "aria-label") or attr(element, "aria-labelledby")):
        problems.append("name")
    return problems


def dialog_heading(element: Tag) -> Optional[Tag]:
    for heading in element.find_all(HEADING_TAGS):
        if text_of(heading):
            return heading
    return None


def removes_focus_outline(element: Tag) -> bool:
    style = inline_style(element)
    if not OUTLINE_REMOVED.match(style.get("outline", "")):
        return False
    return not any(prop in style for prop in ("border", "background", "background-color", "box-shadow"))


def has_key_trap_risk(element: Tag) -> bool:
    if element.name in NATIVE_INTERACTIVE_TAGS:
        return False
    return any(element.has_attr(handler) for handler in KEY_HANDLERS + FOCUS_HANDLERS)


def reorders_focus(element: Tag) -> bool:
    style = inline_style(element)
    reordered = "order" in style or bool(REVERSED_FLEX.search(style.get("flex-direction", "")))
    if not reordered:
        return False
    return is_focusable(element) or any(is_focusable(desc) for desc in element.find_all(True))


def mouse_only_handlers(element: Tag) -> List[str]:
    handlers = []
    for mouse, keyboard in MOUSE_EQUIVALENTS.items():
        if element.has_attr(mouse) and not any(element.has_attr(key) for key in keyboard):
            handlers.append(mouse)
    return handlers


def small_dimension(element: Tag) -> Optional[float]:
    """Smallest inline width/height in px when below the minimum target size."""
    style = inline_style(element)
    sizes = []
    for prop in ("width", "height"):
        match = PX_SIZE.match(style.get(prop, ""))
        if match:
            sizes.append(float(match.group(1)))
    small = [size for size in sizes if size < MIN_TARGET_SIZE]
    return min(small) if small else None


class PositiveTabindexRule(DetectionRule):
    title = "Positive tabindex"
    wcag_criterion = "2.4.3"
    default_severity = Severity.WARNING
    message = "tabindex greater than 0 disrupts the focus order"
    recommendation = "Use tabindex=\"0\" or rely on the natural document order."

    @property
    def id(self) -> str:
        return "positive-tabindex"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element, context={"tabindex": attr(element, "tabindex")})
            for element in doc.find_all(attrs={"tabindex": True})
            if has_positive_tabindex(element)
        ]


class InteractiveElementRule(DetectionRule):
    """Detects click handlers on elements keyboard users cannot operate."""

    title = "Click handler on non-interactive element"
    wcag_criterion = "2.1.1"
    default_severity = Severity.SERIOUS
    message = "Clickable element is not keyboard accessible"
    recommendation = "Use a <button>, or add role, tabindex and a key handler."

    @property
    def id(self) -> str:
        return "interactive-element"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(attrs={"onclick": True}):
            problems = click_target_problems(element)
            if problems:
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Clickable <{element.name}> is missing: {', '.join(problems)}",
                    context={"missing": problems},
                ))
        return issues


class ModalAccessibilityRule(DetectionRule):
    title = "Inaccessible modal dialog"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "Modal dialog is missing dialog semantics"
    recommendation = "Use role=\"dialog\", aria-modal=\"true\" and label the dialog with its heading."

    @property
    def id(self) -> str:
        return "modal-accessibility"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            if not is_dialog(element):
                continue
            problems = dialog_problems(element)
            if "aria-modal" in problems or "name" in problems:
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Dialog is missing: {', '.join(problems)}",
                    context={"missing": problems},
                ))
        return issues


class FocusIndicatorRule(DetectionRule):
    title = "Focus indicator removed"
    wcag_criterion = "2.4.7"
    default_severity = Severity.WARNING
    message = "Focus outline is removed without a replacement"
    recommendation = "Keep a visible focus style (outline, border or box-shadow)."

    @property
    def id(self) -> str:
        return "focus-indicator"

    def detect(self, doc: Document) -> List[Issue]:
        issues = [
            self.make_issue(doc, element)
            for element in doc.find_all(attrs={"style": True})
            if removes_focus_outline(element)
        ]
        for style in doc.find_all("style"):
            if FOCUS_OUTLINE_RULE.search(style.get_text()):
                issues.append(self.make_issue(doc, style, message="Stylesheet removes the outline on :focus"))
        return issues


class KeyboardTrapRule(DetectionRule):
    title = "Possible keyboard trap"
    wcag_criterion = "2.1.2"
    default_severity = Severity.WARNING
    message = "Element handles keyboard or focus events and may trap focus"
    recommendation = "Verify that focus can always leave the element with the keyboard."

    @property
    def id(self) -> str:
        return "keyboard-trap"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, element) for element in doc.elements() if has_key_trap_risk(element)]


class FocusOrderRule(DetectionRule):
    title = "Visual order differs from focus order"
    wcag_criterion = "2.4.3"
    default_severity = Severity.WARNING
    message = "CSS reordering may make focus order differ from visual order"
    recommendation = "Keep DOM order and visual order the same."

    @property
    def id(self) -> str:
        return "focus-order"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element)
            for element in doc.find_all(attrs={"style": True})
            if reorders_focus(element)
        ]


class CustomWidgetKeyboardRule(DetectionRule):
    title = "Mouse-only interaction"
    wcag_criterion = "2.1.1"
    default_severity = Severity.WARNING
    message = "Mouse event handler has no keyboard equivalent"
    recommendation = "Pair mouse handlers with focus or key handlers."

    @property
    def id(self) -> str:
        return "custom-widget-keyboard"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            handlers = mouse_only_handlers(element)
            if handlers:
                issues.append(self.make_issue(doc, element, context={"handlers": handlers}))
        return issues


class TouchTargetRule(DetectionRule):
    title = "Small touch target"
    wcag_criterion = "2.5.5"
    default_severity = Severity.WARNING
    message = f"Touch target is smaller than {MIN_TARGET_SIZE}px"
    recommendation = f"Make interactive targets at least {MIN_TARGET_SIZE}x{MIN_TARGET_SIZE}px."

    @property
    def id(self) -> str:
        return "touch-target"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(["a", "button", "input"], attrs={"style": True}):
            size = small_dimension(element)
            if size is not None:
                issues.append(self.make_issue(doc, element, context={"size_px": size}))
        return issues


class TouchGestureRule(DetectionRule):
    title = "Gesture without alternative"
    wcag_criterion = "2.5.1"
    default_severity = Severity.WARNING
    message = "Touch gesture handler may lack a single-pointer alternative"
    recommendation = "Offer a simple tap or button alternative to multi-point or path gestures."

    @property
    def id(self) -> str:
        return "touch-gesture"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element)
            for element in doc.elements()
            if any(element.has_attr(handler) for handler in TOUCH_HANDLERS)
        ]