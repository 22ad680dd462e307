"""
Interaction fix rules - tab order, keyboard reachability and dialog
semantics.
"""

from ..analyzers.accessibility import is_natively_focusable
from ..analyzers.dom_adapter import Document
from ..detectors.interaction import (
    click_target_problems,
    dialog_heading,
    dialog_problems,
    has_positive_tabindex,
    is_dialog,
)
from .base_rule import FixRule


class PositiveTabindexFix(FixRule):
    """Natively focusable elements lose the tabindex; others get tabindex="0"."""

    @property
    def id(self) -> str:
        return "positive-tabindex"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(attrs={"tabindex": True}):
            if not has_positive_tabindex(element):
                continue
            if is_natively_focusable(element):
                del element["tabindex"]
            else:
                element["tabindex"] = "0"
            fixed += 1
        return fixed


class InteractiveElementFix(FixRule):
    """
    Makes clickable elements focusable and exposes them as buttons.

    Missing key handlers need script and are left to the developer.
    """

    @property
    def id(self) -> str:
        return "interactive-element"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(attrs={"onclick": True}):
            problems = click_target_problems(element)
            changed = False
            if "role" in problems:
                element["role"] = "button"
                changed = True
            if "tabindex" in problems:
                element["tabindex"] = "0"
                changed = True
            if changed:
                fixed += 1
        return fixed


class ModalAccessibilityFix(FixRule):
    """
    Adds dialog semantics to modals.

    Strategy:
    - role="dialog" when the element has no dialog role
    - aria-modal="true"
    - aria-labelledby pointing at the first heading with text, if any
    """

    @property
    def id(self) -> str:
        return "modal-accessibility"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.elements():
            if not is_dialog(element):
                continue
            problems = dialog_problems(element)
            if "aria-modal" not in problems and "name" not in problems:
                continue
            changed = False
            if "role" in problems:
                element["role"] = "dialog"
                changed = True
            if "aria-modal" in problems:
                element["aria-modal"] = "true"
                changed = True
            if "name" in problems:
                heading = dialog_heading(element)
                if heading is not None:
                    element["aria-labelledby"] = doc.ensure_id(heading, "dialog-title")
                    changed = True
            if changed:
                fixed += 1
        return fixed
