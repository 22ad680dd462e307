"""
Inert fix rules - manual remediation items.

These defects depend on stylesheets, scripts or design decisions that
markup alone cannot settle. Each class only pairs an id with the
InertFixRule behavior so the registry can report it as manual.
"""

from .base_rule import InertFixRule


class ViewportFix(InertFixRule):
    @property
    def id(self) -> str:
        return "viewport-check"


class HeadingNestingFix(InertFixRule):
    """Which heading a section needs is an editorial decision."""

    @property
    def id(self) -> str:
        return "heading-nesting"


class FocusIndicatorFix(InertFixRule):
    @property
    def id(self) -> str:
        return "focus-indicator"


class KeyboardTrapFix(InertFixRule):
    """Trap behavior lives in script handlers."""

    @property
    def id(self) -> str:
        return "keyboard-trap"


class FocusOrderFix(InertFixRule):
    @property
    def id(self) -> str:
        return "focus-order"


class CustomWidgetKeyboardFix(InertFixRule):
    @property
    def id(self) -> str:
        return "custom-widget-keyboard"


class TouchTargetFix(InertFixRule):
    @property
    def id(self) -> str:
        return "touch-target"


class TouchGestureFix(InertFixRule):
    @property
    def id(self) -> str:
        return "touch-gesture"


class TextColorContrastFix(InertFixRule):
    """Picking replacement colors changes the design."""

    @property
    def id(self) -> str:
        return "text-color-contrast"


class ColorRelianceFix(InertFixRule):
    @property
    def id(self) -> str:
        return "color-reliance"


class ComplexContrastFix(InertFixRule):
    @property
    def id(self) -> str:
        return "complex-contrast"
