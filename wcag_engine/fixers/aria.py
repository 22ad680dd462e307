"""
ARIA fix rules - repair roles, attribute names, state values and live regions.
"""

from typing import Optional

from bs4 import Tag

from ..analyzers.accessibility import primary_role, role_tokens
from ..analyzers.dom_adapter import Document
from ..detectors.aria import (
    ARIA_ATTRIBUTES,
    STATE_EXTRA_VALUES,
    VALID_ROLES,
    focusable_descendants,
    has_invalid_live_value,
    has_redundant_label,
    has_redundant_role,
    invalid_roles,
    invalid_states,
    is_aria_hidden,
    is_unannounced_status,
    missing_required_attributes,
    suggest,
    unknown_aria_attributes,
    unsupported_aria,
)
from .base_rule import FixRule


TRUE_VALUES = ["true", "1", "yes", "on"]
FALSE_VALUES = ["false", "0", "no", "off", ""]


class AriaRoleFix(FixRule):
    """
    Repairs role attributes holding unknown tokens.

    Strategy:
    - typo within two edits of a valid role -> replaced by that role
    - any other unknown token -> dropped
    - nothing left -> role attribute removed
    """

    @property
    def id(self) -> str:
        return "aria-role"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(attrs={"role": True}):
            if not invalid_roles(element):
                continue

            tokens = []
            for token in role_tokens(element):
                if token not in VALID_ROLES:
                    token = suggest(token, VALID_ROLES)
                if token and token not in tokens:
                    tokens.append(token)

            if tokens:
                element["role"] = " ".join(tokens)
            else:
                del element["role"]
            fixed += 1
        return fixed


class AriaAttributeFix(FixRule):
    """
    Renames misspelled aria-* attributes and fills required widget state.

    aria-controls is never invented: it must point at a real element.
    """

    DEFAULTS = {
        "aria-checked": "false",
        "aria-selected": "false",
        "aria-expanded": "false",
        "aria-valuemin": "0",
        "aria-valuemax": "100",
    }

    @property
    def id(self) -> str:
        return "aria-attribute"

    def _default(self, element: Tag, name: str) -> Optional[str]:
        if name == "aria-valuenow":
            return element.get("aria-valuemin") or "0"
        return self.DEFAULTS.get(name)

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.elements():
            changed = False
            for name in unknown_aria_attributes(element):
                hint = suggest(name, ARIA_ATTRIBUTES)
                if hint and not element.has_attr(hint):
                    element[hint] = element[name]
                    del element[name]
                    changed = True

            for name in missing_required_attributes(element):
                value = self._default(element, name)
                if value is not None:
                    element[name] = value
                    changed = True

            if changed:
                fixed += 1
        return fixed


class AriaStateFix(FixRule):
    """Normalizes boolean-ish state values (TRUE, 1, yes, on / 0, no, off)."""

    @property
    def id(self) -> str:
        return "aria-state"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.elements():
            for state in invalid_states(element):
                value = (element.get(state) or "").strip().lower()
                if value in TRUE_VALUES:
                    element[state] = "true"
                elif value in FALSE_VALUES:
                    element[state] = "false"
                elif value in STATE_EXTRA_VALUES.get(state, []):
                    element[state] = value
                else:
                    continue
                fixed += 1
        return fixed


class InvalidAriaCombinationFix(FixRule):
    @property
    def id(self) -> str:
        return "invalid-aria-combination"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.elements():
            for name in unsupported_aria(element, doc):
                del element[name]
                fixed += 1
        return fixed


class RedundantAriaFix(FixRule):
    @property
    def id(self) -> str:
        return "redundant-aria"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.elements():
            if has_redundant_role(element, doc):
                del element["role"]
                fixed += 1
            if has_redundant_label(element):
                del element["aria-label"]
                fixed += 1
        return fixed


class HiddenContentFix(FixRule):
    """Takes focusable descendants of aria-hidden containers out of the tab order."""

    @property
    def id(self) -> str:
        return "hidden-content"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for container in doc.find_all(attrs={"aria-hidden": True}):
            if not is_aria_hidden(container):
                continue
            for element in focusable_descendants(container):
                element["tabindex"] = "-1"
                fixed += 1
        return fixed


class LiveRegionFix(FixRule):
    """
    Repairs live regions.

    Invalid aria-live values become polite (assertive for role alert);
    status-like containers get aria-live="polite" and aria-atomic="true".
    """

    @property
    def id(self) -> str:
        return "live-region"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.elements():
            if has_invalid_live_value(element):
                element["aria-live"] = "assertive" if primary_role(element) == "alert" else "polite"
                fixed += 1
            elif is_unannounced_status(element):
                element["aria-live"] = "polite"
                if not element.has_attr("aria-atomic"):
                    element["aria-atomic"] = "true"
                fixed += 1
        return fixed
