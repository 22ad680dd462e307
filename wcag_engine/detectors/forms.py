"""
Form detection rules - labels, grouping, input purpose and error messages.
"""

import re
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from ..analyzers.accessibility import (
    NATIVE_INTERACTIVE_TAGS,
    accessible_name,
    attr,
    classes,
    has_label,
    is_focusable,
    is_hidden,
    is_labelable_control,
    labelable_controls,
    link_text,
    primary_role,
    text_of,
)
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


VALID_INPUT_TYPES = [
    "button", "checkbox", "color", "date", "datetime-local", "email", "file",
    "hidden", "image", "month", "number", "password", "radio", "range",
    "reset", "search", "submit", "tel", "text", "time", "url", "week",
]

# (pattern over name/id, autocomplete token); first match wins
AUTOCOMPLETE_HINTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"e-?mail"), "email"),
    (re.compile(r"user[-_]?name|login"), "username"),
    (re.compile(r"first[-_]?name|fname|given[-_]?name"), "given-name"),
    (re.compile(r"last[-_]?name|lname|surname|family[-_]?name"), "family-name"),
    (re.compile(r"full[-_]?name|^name$|your[-_]?name"), "name"),
    (re.compile(r"phone|mobile|^tel$|telephone"), "tel"),
    (re.compile(r"zip|postal|postcode"), "postal-code"),
    (re.compile(r"street|address"), "street-address"),
    (re.compile(r"city|town"), "address-level2"),
    (re.compile(r"state|province"), "address-level1"),
    (re.compile(r"country"), "country-name"),
    (re.compile(r"company|organi[sz]ation"), "organization"),
    (re.compile(r"birthday|bday|dob|birth[-_]?date"), "bday"),
    (re.compile(r"cc[-_]?number|card[-_]?number"), "cc-number"),
    (re.compile(r"website|homepage"), "url"),
]

AUTOCOMPLETE_INPUT_TYPES = ["", "text", "email", "tel", "url"]

# (pattern over name/id, input type); first match wins
INPUT_TYPE_HINTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"e-?mail"), "email"),
    (re.compile(r"phone|mobile|^tel$|telephone"), "tel"),
    (re.compile(r"url|website|homepage"), "url"),
    (re.compile(r"date|dob|birth"), "date"),
    (re.compile(r"password|passwd|pwd"), "password"),
    (re.compile(r"search|query|^q$"), "search"),
    (re.compile(r"number|qty|quantity|amount|^age$|count"), "number"),
]

WIDGET_ROLES = [
    "button", "checkbox", "combobox", "link", "menuitem", "radio",
    "searchbox", "slider", "spinbutton", "switch", "tab", "textbox",
]

BUTTON_HINTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"close|dismiss"), "Close"),
    (re.compile(r"search"), "Search"),
    (re.compile(r"menu|hamburger|nav-toggle"), "Menu"),
    (re.compile(r"submit"), "Submit"),
    (re.compile(r"next"), "Next"),
    (re.compile(r"prev"), "Previous"),
    (re.compile(r"play"), "Play"),
    (re.compile(r"pause"), "Pause"),
]

FORM_CONTROL_TAGS = ["input", "select", "textarea", "button"]


# =============================================================================
# PREDICATES
# =============================================================================

def has_aria_label(element: Tag) -> bool:
    return bool(attr(element, "aria-label") or attr(element, "aria-labelledby"))


def is_unlabeled(control: Tag, doc: Document) -> bool:
    if has_label(control, doc) or has_aria_label(control) or attr(control, "title"):
        return False
    return not attr(control, "placeholder")


def is_placeholder_only(control: Tag, doc: Document) -> bool:
    if not attr(control, "placeholder"):
        return False
    return not (has_label(control, doc) or has_aria_label(control) or attr(control, "title"))


def choice_groups(doc: Document) -> Dict[str, List[Tag]]:
    """Visible radio/checkbox controls grouped by name (groups of two or more)."""
    groups: Dict[str, List[Tag]] = {}
    for control in doc.find_all("input", attrs={"name": True}):
        if attr(control, "type").lower() in ("radio", "checkbox") and attr(control, "name") and not is_hidden(control):
            groups.setdefault(attr(control, "name"), []).append(control)
    return {name: members for name, members in groups.items() if len(members) > 1}


def shared_fieldset(members: List[Tag], doc: Document) -> Optional[Tag]:
    """Fieldset enclosing every member, or None."""
    fieldsets = [doc.closest(member, ["fieldset"]) for member in members]
    first = fieldsets[0]
    if first is None or any(fs is not first for fs in fieldsets):
        return None
    return first


def has_legend(fieldset: Tag) -> bool:
    legend = fieldset.find("legend")
    return legend is not None and bool(text_of(legend))


def is_ungrouped(members: List[Tag], doc: Document) -> bool:
    fieldset = shared_fieldset(members, doc)
    return fieldset is None or not has_legend(fieldset)


def label_control(label: Tag, doc: Document) -> Optional[Tag]:
    """Control a label points at, by `for` or by nesting."""
    target = attr(label, "for")
    if target:
        control = doc.by_id(target)
        return control if control is not None and is_labelable_control(control) else None
    for control in label.find_all(["input", "select", "textarea"]):
        if is_labelable_control(control):
            return control
    return None


def unmarked_required(doc: Document) -> List[Tag]:
    """Controls whose label shows '*' but which are not marked required."""
    controls = []
    for label in doc.find_all("label"):
        if "*" not in text_of(label):
            continue
        control = label_control(label, doc)
        if control is None or any(control is seen for seen in controls):
            continue
        if not control.has_attr("required") and attr(control, "aria-required").lower() != "true":
            controls.append(control)
    return controls


def lacks_error_reference(element: Tag) -> bool:
    if attr(element, "aria-invalid").lower() != "true":
        return False
    return not (attr(element, "aria-errormessage") or attr(element, "aria-describedby"))


def adjacent_error(element: Tag) -> Optional[Tag]:
    """Element next to a control that looks like its error message."""
    for sibling in (element.find_next_sibling(True), element.find_previous_sibling(True)):
        if sibling is not None and "error" in attr(sibling, "class").lower():
            return sibling
    return None


def control_hint(control: Tag) -> str:
    return f"{attr(control, 'name')} {attr(control, 'id')}".lower().strip()


def autocomplete_token(control: Tag) -> Optional[str]:
    """Autocomplete token for personal-data text inputs lacking one."""
    if control.name != "input" or control.has_attr("autocomplete"):
        return None
    if attr(control, "type").lower() not in AUTOCOMPLETE_INPUT_TYPES:
        return None
    for value in (attr(control, "name").lower(), attr(control, "id").lower()):
        if not value:
            continue
        for pattern, token in AUTOCOMPLETE_HINTS:
            if pattern.search(value):
                return token
    return None


def has_invalid_type(control: Tag) -> bool:
    return control.has_attr("type") and attr(control, "type").lower() not in VALID_INPUT_TYPES


def suggested_input_type(control: Tag) -> str:
    for value in (attr(control, "name").lower(), attr(control, "id").lower()):
        if not value:
            continue
        for pattern, input_type in INPUT_TYPE_HINTS:
            if pattern.search(value):
                return input_type
    return "text"


def custom_control_problems(element: Tag, doc: Document) -> List[str]:
    if element.name in NATIVE_INTERACTIVE_TAGS or primary_role(element) not in WIDGET_ROLES:
        return []
    if is_hidden(element):
        return []
    problems = []
    if not element.has_attr("tabindex"):
        problems.append("tabindex")
    if not accessible_name(element, doc):
        problems.append("name")
    return problems


def is_unlabeled_button(button: Tag, doc: Document) -> bool:
    if is_hidden(button):
        return False
    return not (link_text(button) or has_aria_label(button) or attr(button, "title"))


def button_label(button: Tag) -> str:
    hint = " ".join(classes(button) + [attr(button, "id"), attr(button, "name")]).lower()
    for pattern, label in BUTTON_HINTS:
        if pattern.search(hint):
            return label
    if attr(button, "type").lower() == "submit":
        return "Submit"
    return "Button"


def is_orphaned_label(label: Tag, doc: Document) -> bool:
    target = attr(label, "for")
    return bool(target) and doc.by_id(target) is None


def next_control(label: Tag) -> Optional[Tag]:
    return label.find_next(lambda tag: isinstance(tag, Tag) and is_labelable_control(tag))


def is_hidden_focusable_control(element: Tag) -> bool:
    return (
        element.name in FORM_CONTROL_TAGS
        and attr(element, "aria-hidden").lower() == "true"
        and is_focusable(element)
    )


# =============================================================================
# RULES
# =============================================================================

class MissingFormLabelRule(DetectionRule):
    """
    Detects form controls with no label of any kind.

    Controls labelled only by a placeholder belong to placeholder-label.
    """

    title = "Missing form label"
    wcag_criterion = "3.3.2"
    default_severity = Severity.CRITICAL
    message = "Form control has no label"
    recommendation = "Associate a <label> with the control or add an aria-label."

    @property
    def id(self) -> str:
        return "missing-form-label"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, control, context={"type": attr(control, "type") or control.name})
            for control in labelable_controls(doc)
            if is_unlabeled(control, doc)
        ]


class PlaceholderLabelRule(DetectionRule):
    title = "Placeholder used as label"
    wcag_criterion = "3.3.2"
    default_severity = Severity.WARNING
    message = "Placeholder is the only label"
    description = "Placeholder text disappears on input and is not a reliable label."
    recommendation = "Add a visible <label> for the control."

    @property
    def id(self) -> str:
        return "placeholder-label"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, control, context={"placeholder": attr(control, "placeholder")})
            for control in labelable_controls(doc)
            if is_placeholder_only(control, doc)
        ]


class FieldsetLegendRule(DetectionRule):
    """Detects radio/checkbox groups that are not grouped with a legend."""

    title = "Choice group without fieldset"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Related choices are not grouped in a fieldset with a legend"
    recommendation = "Wrap the group in <fieldset> with a <legend> naming the question."

    @property
    def id(self) -> str:
        return "fieldset-legend"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, members[0], context={"name": name, "count": len(members)})
            for name, members in choice_groups(doc).items()
            if is_ungrouped(members, doc)
        ]


class RequiredAttributeRule(DetectionRule):
    title = "Required field not marked"
    wcag_criterion = "3.3.2"
    default_severity = Severity.WARNING
    message = "Field looks required but is not marked as required"
    recommendation = "Add required or aria-required=\"true\" to the control."

    @property
    def id(self) -> str:
        return "required-attribute"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, control) for control in unmarked_required(doc)]


class ErrorMessageRule(DetectionRule):
    title = "Error without message"
    wcag_criterion = "3.3.1"
    default_severity = Severity.SERIOUS
    message = "Invalid field is not linked to an error message"
    recommendation = "Reference the error text with aria-describedby or aria-errormessage."

    @property
    def id(self) -> str:
        return "error-message"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element)
            for element in doc.find_all(attrs={"aria-invalid": True})
            if lacks_error_reference(element)
        ]


class AutocompleteRule(DetectionRule):
    title = "Missing autocomplete"
    wcag_criterion = "1.3.5"
    default_severity = Severity.WARNING
    message = "Personal data field has no autocomplete attribute"
    recommendation = "Add the matching autocomplete token so browsers can fill the field."

    @property
    def id(self) -> str:
        return "autocomplete-attribute"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for control in labelable_controls(doc):
            token = autocomplete_token(control)
            if token:
                issues.append(self.make_issue(doc, control, context={"suggested": token}))
        return issues


class InputTypeRule(DetectionRule):
    title = "Invalid input type"
    wcag_criterion = "4.1.2"
    default_severity = Severity.WARNING
    message = "Input has an unknown type"

    @property
    def id(self) -> str:
        return "input-type"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(
                doc,
                control,
                message=f"Unknown input type '{attr(control, 'type')}'",
                recommendation=f"Use type=\"{suggested_input_type(control)}\".",
                context={"type": attr(control, "type")},
            )
            for control in doc.find_all("input", attrs={"type": True})
            if has_invalid_type(control)
        ]


class CustomControlRule(DetectionRule):
    """Detects ARIA widgets built from non-interactive elements that miss focus or a name."""

    title = "Inaccessible custom control"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "Custom control is not focusable or has no name"
    recommendation = "Add tabindex=\"0\" and an accessible name, or use a native control."

    @property
    def id(self) -> str:
        return "custom-control"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(attrs={"role": True}):
            problems = custom_control_problems(element, doc)
            if problems:
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=f"Custom {primary_role(element)} is missing: {', '.join(problems)}",
                    context={"missing": problems},
                ))
        return issues


class ButtonLabelRule(DetectionRule):
    title = "Button without label"
    wcag_criterion = "4.1.2"
    default_severity = Severity.CRITICAL
    message = "Button has no accessible name"
    recommendation = "Add text, an aria-label or a title to the button."

    @property
    def id(self) -> str:
        return "button-label"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, button) for button in doc.find_all("button") if is_unlabeled_button(button, doc)]


class OrphanedLabelRule(DetectionRule):
    title = "Orphaned label"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Label points to a control that does not exist"
    recommendation = "Set the label's for attribute to the id of its control."

    @property
    def id(self) -> str:
        return "orphaned-label"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, label, context={"for": attr(label, "for")})
            for label in doc.find_all("label", attrs={"for": True})
            if is_orphaned_label(label, doc)
        ]


class FormAriaRule(DetectionRule):
    title = "Focusable control hidden from screen readers"
    wcag_criterion = "4.1.2"
    default_severity = Severity.WARNING
    message = "Focusable form control has aria-hidden=\"true\""
    recommendation = "Remove aria-hidden from controls users can reach."

    @property
    def id(self) -> str:
        return "form-aria"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element)
            for element in doc.find_all(FORM_CONTROL_TAGS, attrs={"aria-hidden": True})
            if is_hidden_focusable_control(element)
        ]
