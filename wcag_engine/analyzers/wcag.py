"""
WCAG 2.x success criteria referenced by the rule set.

Maps criterion number -> (name, level). Rules declare only the criterion;
the level reported on every Issue comes from this table so the two can
never disagree.
"""

from typing import Dict, Tuple

from ..contracts.severity import WcagLevel

WCAG_CRITERIA: Dict[str, Tuple[str, WcagLevel]] = {
    "1.1.1": ("Non-text Content", WcagLevel.A),
    "1.2.1": ("Audio-only and Video-only (Prerecorded)", WcagLevel.A),
    "1.2.2": ("Captions (Prerecorded)", WcagLevel.A),
    "1.3.1": ("Info and Relationships", WcagLevel.A),
    "1.3.5": ("Identify Input Purpose", WcagLevel.AA),
    "1.4.1": ("Use of Color", WcagLevel.A),
    "1.4.2": ("Audio Control", WcagLevel.A),
    "1.4.3": ("Contrast (Minimum)", WcagLevel.AA),
    "1.4.4": ("Resize Text", WcagLevel.AA),
    "2.1.1": ("Keyboard", WcagLevel.A),
    "2.1.2": ("No Keyboard Trap", WcagLevel.A),
    "2.4.1": ("Bypass Blocks", WcagLevel.A),
    "2.4.3": ("Focus Order", WcagLevel.A),
    "2.4.4": ("Link Purpose (In Context)", WcagLevel.A),
    "2.4.6": ("Headings and Labels", WcagLevel.AA),
    "2.4.7": ("Focus Visible", WcagLevel.AA),
    "2.5.1": ("Pointer Gestures", WcagLevel.A),
    "2.5.5": ("Target Size", WcagLevel.AAA),
    "3.1.1": ("Language of Page", WcagLevel.A),
    "3.2.4": ("Consistent Identification", WcagLevel.AA),
    "3.2.5": ("Change on Request", WcagLevel.AAA),
    "3.3.1": ("Error Identification", WcagLevel.A),
    "3.3.2": ("Labels or Instructions", WcagLevel.A),
    "4.1.2": ("Name, Role, Value", WcagLevel.A),
    "4.1.3": ("Status Messages", WcagLevel.AA),
}


def criterion_level(criterion: str) -> WcagLevel:
    """Conformance level of a criterion (A when unknown)."""
    entry = WCAG_CRITERIA.get(criterion)
    return entry[1] if entry else WcagLevel.A


def criterion_name(criterion: str) -> str:
    entry = WCAG_CRITERIA.get(criterion)
    return entry[0] if entry else ""
