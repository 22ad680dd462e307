"""
ARIA detection rules - roles, attributes, states and live regions.

Covers WCAG 4.1.2 (Name, Role, Value) plus the ARIA-driven parts of
2.4.3 and 4.1.3. The vocabularies and predicates in this module are
imported by the paired fix rules.
"""

from typing import Dict, List, Optional

from bs4 import Tag

from ..analyzers.accessibility import (
    HEADING_TAGS,
    attr,
    classes,
    is_focusable,
    normalize_space,
    parse_int,
    primary_role,
    role_tokens,
    text_of,
)
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


# =============================================================================
# VOCABULARIES
# =============================================================================

VALID_ROLES = [
    # Document structure
    "application", "article", "cell", "columnheader", "definition",
    "directory", "document", "feed", "figure", "generic", "group", "heading",
    "img", "list", "listitem", "math", "none", "note", "presentation",
    "row", "rowgroup", "rowheader", "separator", "table", "term",
    "toolbar", "tooltip",
    # Widgets
    "button", "checkbox", "gridcell", "link", "menuitem", "menuitemcheckbox",
    "menuitemradio", "option", "progressbar", "radio", "scrollbar",
    "searchbox", "slider", "spinbutton", "switch", "tab", "tabpanel",
    "textbox", "treeitem",
    # Composite widgets
    "combobox", "grid", "listbox", "menu", "menubar", "radiogroup",
    "tablist", "tree", "treegrid",
    # Landmarks
    "banner", "complementary", "contentinfo", "form", "main",
    "navigation", "region", "search",
    # Live regions
    "alert", "log", "marquee", "status", "timer",
    # Windows
    "alertdialog", "dialog",
]

ARIA_ATTRIBUTES = [
    "aria-activedescendant", "aria-atomic", "aria-autocomplete",
    "aria-braillelabel", "aria-brailleroledescription", "aria-busy",
    "aria-checked", "aria-colcount", "aria-colindex", "aria-colindextext",
    "aria-colspan", "aria-controls", "aria-current", "aria-describedby",
    "aria-description", "aria-details", "aria-disabled", "aria-dropeffect",
    "aria-errormessage", "aria-expanded", "aria-flowto", "aria-grabbed",
    "aria-haspopup", "aria-hidden", "aria-invalid", "aria-keyshortcuts",
    "aria-label", "aria-labelledby", "aria-level", "aria-live", "aria-modal",
    "aria-multiline", "aria-multiselectable", "aria-orientation", "aria-owns",
    "aria-placeholder", "aria-posinset", "aria-pressed", "aria-readonly",
    "aria-relevant", "aria-required", "aria-roledescription", "aria-rowcount",
    "aria-rowindex", "aria-rowindextext", "aria-rowspan", "aria-selected",
    "aria-setsize", "aria-sort", "aria-valuemax", "aria-valuemin",
    "aria-valuenow", "aria-valuetext",
]

# Attributes a widget role cannot work without
REQUIRED_ATTRIBUTES: Dict[str, List[str]] = {
    "checkbox": ["aria-checked"],
    "combobox": ["aria-expanded", "aria-controls"],
    "option": ["aria-selected"],
    "radio": ["aria-checked"],
    "scrollbar": ["aria-controls", "aria-valuenow", "aria-valuemin", "aria-valuemax"],
    "slider": ["aria-valuenow", "aria-valuemin", "aria-valuemax"],
    "spinbutton": ["aria-valuenow", "aria-valuemin", "aria-valuemax"],
    "switch": ["aria-checked"],
    "tab": ["aria-selected"],
    "treeitem": ["aria-selected"],
}

BOOLEAN_STATES = [
    "aria-hidden", "aria-expanded", "aria-pressed", "aria-checked",
    "aria-disabled", "aria-readonly", "aria-required", "aria-selected",
    "aria-invalid",
]

# Extra tokens some boolean states accept
STATE_EXTRA_VALUES: Dict[str, List[str]] = {
    "aria-checked": ["mixed"],
    "aria-pressed": ["mixed"],
    "aria-invalid": ["grammar", "spelling"],
}

CHECKED_ROLES = ["checkbox", "radio", "switch", "menuitemcheckbox", "menuitemradio", "treeitem", "option"]
SELECTED_ROLES = ["gridcell", "option", "row", "tab", "columnheader", "rowheader", "treeitem"]

LIVE_VALUES = ["off", "polite", "assertive"]
LIVE_ROLES = ["alert", "status", "log", "marquee", "timer"]
STATUS_CLASSES = ["alert", "notice", "notification", "status"]

# Elements whose header/footer loses its landmark role
SECTIONING_TAGS = ["article", "aside", "main", "nav", "section"]

IMPLICIT_ROLES: Dict[str, str] = {
    "article": "article",
    "aside": "complementary",
    "button": "button",
    "dialog": "dialog",
    "fieldset": "group",
    "figure": "figure",
    "form": "form",
    "hr": "separator",
    "li": "listitem",
    "main": "main",
    "nav": "navigation",
    "ol": "list",
    "option": "option",
    "progress": "progressbar",
    "table": "table",
    "tbody": "rowgroup",
    "textarea": "textbox",
    "thead": "rowgroup",
    "tfoot": "rowgroup",
    "tr": "row",
    "td": "cell",
    "th": "columnheader",
    "ul": "list",
    "h1": "heading",
    "h2": "heading",
    "h3": "heading",
    "h4": "heading",
    "h5": "heading",
    "h6": "heading",
}

INPUT_ROLES: Dict[str, str] = {
    "button": "button",
    "checkbox": "checkbox",
    "email": "textbox",
    "image": "button",
    "number": "spinbutton",
    "radio": "radio",
    "range": "slider",
    "reset": "button",
    "search": "searchbox",
    "submit": "button",
    "tel": "textbox",
    "text": "textbox",
    "url": "textbox",
}


# =============================================================================
# PREDICATES
# =============================================================================

def levenshtein(first: str, second: str) -> int:
    """Edit distance (insert, delete, substitute) between two strings."""
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, a in enumerate(first, 1):
        current = [i]
        for j, b in enumerate(second, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (a != b),
            ))
        previous = current
    return previous[-1]


def suggest(value: str, vocabulary: List[str], max_distance: int = 2) -> Optional[str]:
    """
    Closest vocabulary entry within `max_distance` edits.

    Ties go to the entry listed first.
    """
    best, best_distance = None, max_distance + 1
    for candidate in vocabulary:
        distance = levenshtein(value, candidate)
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best


def invalid_roles(element: Tag) -> List[str]:
    return [token for token in role_tokens(element) if token not in VALID_ROLES]


def unknown_aria_attributes(element: Tag) -> List[str]:
    return [
        name for name in element.attrs
        if name.startswith("aria-") and name not in ARIA_ATTRIBUTES
    ]


def missing_required_attributes(element: Tag) -> List[str]:
    """Required ARIA attributes absent from a single-role widget."""
    tokens = role_tokens(element)
    if len(tokens) != 1 or tokens[0] not in REQUIRED_ATTRIBUTES:
        return []
    # native checkbox/radio state comes from the `checked` attribute
    if element.name == "input" and attr(element, "type").lower() in ("checkbox", "radio"):
        return []
    return [name for name in REQUIRED_ATTRIBUTES[tokens[0]] if not element.has_attr(name)]


def invalid_states(element: Tag) -> List[str]:
    """Boolean ARIA states on the element holding an invalid value."""
    bad = []
    for state in BOOLEAN_STATES:
        if not element.has_attr(state):
            continue
        allowed = ["true", "false"] + STATE_EXTRA_VALUES.get(state, [])
        if element.get(state) not in allowed:
            bad.append(state)
    return bad


def implicit_role(element: Tag, doc: Document) -> str:
    """Role an element has without a role attribute ('' when generic)."""
    name = element.name
    if name == "a":
        return "link" if element.has_attr("href") else ""
    if name == "img":
        # alt="" images may carry an explicit presentation role
        return "" if element.get("alt") == "" else "img"
    if name == "input":
        return INPUT_ROLES.get(attr(element, "type").lower() or "text", "")
    if name == "select":
        size = parse_int(attr(element, "size")) or 0
        multiple = element.has_attr("multiple") or size > 1
        return "listbox" if multiple else "combobox"
    if name == "header":
        return "" if doc.has_ancestor(element, SECTIONING_TAGS) else "banner"
    if name == "footer":
        return "" if doc.has_ancestor(element, SECTIONING_TAGS) else "contentinfo"
    return IMPLICIT_ROLES.get(name, "")


def effective_role(element: Tag, doc: Document) -> str:
    return primary_role(element) or implicit_role(element, doc)


def unsupported_aria(element: Tag, doc: Document) -> List[str]:
    """aria-checked / aria-selected on elements whose role ignores them."""
    role = effective_role(element, doc)
    bad = []
    if element.has_attr("aria-checked") and role not in CHECKED_ROLES:
        bad.append("aria-checked")
    if element.has_attr("aria-selected") and role not in SELECTED_ROLES:
        bad.append("aria-selected")
    return bad


def has_redundant_role(element: Tag, doc: Document) -> bool:
    tokens = role_tokens(element)
    if len(tokens) != 1:
        return False
    return tokens[0] == implicit_role(element, doc)


def has_redundant_label(element: Tag) -> bool:
    label = normalize_space(attr(element, "aria-label")).lower()
    return bool(label) and label == text_of(element).lower()


def focusable_descendants(element: Tag) -> List[Tag]:
    return [desc for desc in element.find_all(True) if is_focusable(desc)]


def is_aria_hidden(element: Tag) -> bool:
    return attr(element, "aria-hidden").lower() == "true"


def has_invalid_live_value(element: Tag) -> bool:
    return element.has_attr("aria-live") and attr(element, "aria-live").lower() not in LIVE_VALUES


def is_unannounced_status(element: Tag) -> bool:
    """Status-like container without any live-region semantics."""
    if element.has_attr("aria-live") or primary_role(element) in LIVE_ROLES:
        return False
    return any(token.lower() in STATUS_CLASSES for token in classes(element))


def first_heading(element: Tag) -> Optional[Tag]:
    """First heading inside an element that has text."""
    for heading in element.find_all(HEADING_TAGS):
        if text_of(heading):
            return heading
    return None


# =============================================================================
# RULES
# =============================================================================

class AriaRoleRule(DetectionRule):
    """
    Detects role tokens outside the WAI-ARIA 1.2 role list.

    A role attribute may list fallbacks. The element is only broken when
    none of its tokens is valid (serious); with at least one valid token
    the unknown ones are dead weight (moderate).
    """

    title = "Invalid ARIA role"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "Invalid ARIA role"
    description = "Assistive technologies ignore roles they do not recognize."
    recommendation = "Remove invalid role(s) or replace them with a valid ARIA 1.2 role."

    @property
    def id(self) -> str:
        return "aria-role"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(attrs={"role": True}):
            invalid = invalid_roles(element)
            if not invalid:
                continue

            has_fallback = len(invalid) < len(role_tokens(element))
            suggestions = {token: suggest(token, VALID_ROLES) for token in invalid}
            hints = [value for value in suggestions.values() if value]
            recommendation = None
            if hints:
                recommendation = (
                    f"Did you mean: {' or '.join(hints)}? "
                    f"Otherwise remove the invalid role(s)."
                )

            issues.append(self.make_issue(
                doc,
                element,
                message=f"Invalid ARIA role(s): {', '.join(invalid)}",
                severity=Severity.MODERATE if has_fallback else Severity.SERIOUS,
                recommendation=recommendation,
                context={
                    "invalid_roles": invalid,
                    "has_valid_fallback": has_fallback,
                    "suggestions": {k: v for k, v in suggestions.items() if v},
                },
            ))
        return issues


class AriaAttributeRule(DetectionRule):
    """
    Detects misspelled aria-* attributes and widgets missing required ones.
    """

    title = "Invalid or missing ARIA attribute"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "Invalid ARIA attribute"
    recommendation = "Use attribute names from the ARIA specification and supply every attribute the role requires."

    @property
    def id(self) -> str:
        return "aria-attribute"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            for name in unknown_aria_attributes(element):
                hint = suggest(name, ARIA_ATTRIBUTES)
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Unknown ARIA attribute '{name}'",
                    recommendation=f"Did you mean '{hint}'?" if hint else None,
                    context={"attribute": name, "suggestion": hint or ""},
                ))

            missing = missing_required_attributes(element)
            if missing:
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=(
                        f"Role '{primary_role(element)}' is missing required "
                        f"attribute(s): {', '.join(missing)}"
                    ),
                    context={"role": primary_role(element), "missing": missing},
                ))
        return issues


class AriaStateRule(DetectionRule):
    """Detects boolean ARIA states whose value is not true/false."""

    title = "Invalid ARIA state value"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "Invalid ARIA state value"
    recommendation = "Use 'true' or 'false' ('mixed' is allowed for aria-checked and aria-pressed)."

    @property
    def id(self) -> str:
        return "aria-state"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            for state in invalid_states(element):
                value = element.get(state)
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Invalid value '{value}' for '{state}'",
                    context={"attribute": state, "value": value},
                ))
        return issues


class InvalidAriaCombinationRule(DetectionRule):
    """Detects aria-checked/aria-selected on roles that do not support them."""

    title = "Unsupported ARIA attribute for role"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "ARIA attribute not supported by this role"
    recommendation = "Remove the attribute or give the element a role that supports it."

    @property
    def id(self) -> str:
        return "invalid-aria-combination"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            for name in unsupported_aria(element, doc):
                role = effective_role(element, doc) or "none"
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"'{name}' is not allowed on this element (role '{role}')",
                    context={"attribute": name, "role": role},
                ))
        return issues


class RedundantAriaRule(DetectionRule):
    """
    Detects ARIA that repeats native semantics.

    - role equal to the element's implicit role (header/footer only map to
      banner/contentinfo outside sectioning content)
    - aria-label identical to the visible text
    """

    title = "Redundant ARIA"
    wcag_criterion = "4.1.2"
    default_severity = Severity.MINOR
    message = "Redundant ARIA"
    recommendation = "Remove ARIA that duplicates native semantics or visible text."

    @property
    def id(self) -> str:
        return "redundant-aria"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            if has_redundant_role(element, doc):
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Role '{primary_role(element)}' is already implied by <{element.name}>",
                    context={"kind": "role"},
                ))
            if has_redundant_label(element):
                issues.append(self.make_issue(
                    doc,
                    element,
                    message="aria-label repeats the visible text",
                    context={"kind": "label"},
                ))
        return issues


class HiddenContentRule(DetectionRule):
    """Detects aria-hidden containers that still hold focusable elements."""

    title = "Focusable content inside aria-hidden"
    wcag_criterion = "2.4.3"
    default_severity = Severity.SERIOUS
    message = "aria-hidden element contains focusable content"
    description = "Keyboard users can reach elements that screen readers never announce."
    recommendation = "Remove the focusable elements from the tab order or stop hiding the container."

    @property
    def id(self) -> str:
        return "hidden-content"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(attrs={"aria-hidden": True}):
            if not is_aria_hidden(element):
                continue
            focusable = focusable_descendants(element)
            if focusable:
                issues.append(self.make_issue(
                    doc,
                    element,
                    context={"focusable_count": len(focusable)},
                ))
        return issues


class LiveRegionRule(DetectionRule):
    """Detects invalid aria-live values and status containers without a live region."""

    title = "Live region problem"
    wcag_criterion = "4.1.3"
    default_severity = Severity.WARNING
    message = "Dynamic status content is not announced"
    recommendation = "Use aria-live='polite' (or 'assertive' for alerts) on status containers."

    @property
    def id(self) -> str:
        return "live-region"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.elements():
            if has_invalid_live_value(element):
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Invalid aria-live value '{element.get('aria-live')}'",
                    context={"kind": "value"},
                ))
            elif is_unannounced_status(element):
                issues.append(self.make_issue(
                    doc,
                    element,
                    message="Status container has no live region",
                    context={"kind": "missing"},
                ))
        return issues
