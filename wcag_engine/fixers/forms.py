"""
Form fix rules - labels, grouping, required state, error references and
input purpose.
"""

from typing import List, Optional

from bs4 import Tag

from ..analyzers.accessibility import attr, humanize, labelable_controls, primary_role
from ..analyzers.dom_adapter import Document
from ..detectors.forms import (
    adjacent_error,
    autocomplete_token,
    button_label,
    choice_groups,
    custom_control_problems,
    has_invalid_type,
    is_hidden_focusable_control,
    is_orphaned_label,
    is_placeholder_only,
    is_ungrouped,
    is_unlabeled,
    is_unlabeled_button,
    lacks_error_reference,
    next_control,
    shared_fieldset,
    suggested_input_type,
    unmarked_required,
    FORM_CONTROL_TAGS,
)
from .base_rule import FixRule


TYPE_LABELS = {
    "text": "Text field",
    "email": "Email address",
    "password": "Password",
    "search": "Search",
    "tel": "Phone number",
    "url": "Website",
    "number": "Number",
    "date": "Date",
    "time": "Time",
    "checkbox": "Checkbox",
    "radio": "Option",
    "file": "File upload",
    "range": "Range",
    "color": "Color",
    "select": "Select",
    "textarea": "Text area",
}

TABLE_PARTS = ["table", "thead", "tbody", "tfoot", "tr", "td", "th", "caption"]
LIST_CONTAINERS = ["ul", "ol", "dl", "select"]


class MissingFormLabelFix(FixRule):
    """aria-label from the humanized name or id, else from the control type."""

    DEFAULT_LABEL = "Form field"

    @property
    def id(self) -> str:
        return "missing-form-label"

    def _label_for(self, control: Tag) -> str:
        for value in (attr(control, "name"), attr(control, "id")):
            label = humanize(value.replace("[]", ""))
            if label:
                return label
        kind = control.name if control.name != "input" else (attr(control, "type").lower() or "text")
        return TYPE_LABELS.get(kind, self.DEFAULT_LABEL)

    def transform(self, doc: Document) -> int:
        fixed = 0
        for control in labelable_controls(doc):
            if is_unlabeled(control, doc):
                control["aria-label"] = self._label_for(control)
                fixed += 1
        return fixed


class PlaceholderLabelFix(FixRule):
    @property
    def id(self) -> str:
        return "placeholder-label"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for control in labelable_controls(doc):
            if is_placeholder_only(control, doc):
                control["aria-label"] = attr(control, "placeholder")
                fixed += 1
        return fixed


class FieldsetLegendFix(FixRule):
    """
    Groups radio/checkbox sets under a fieldset with a legend.

    Strategy:
    - members share a fieldset -> fill its empty legend or add one
    - some member already sits in another fieldset -> left alone
    - otherwise wrap the members' nearest common container: the whole
      table for table parts, the list itself for ul/ol/dl/select, or the
      run of its children holding the members
    """

    DEFAULT_LEGEND = "Options"

    @property
    def id(self) -> str:
        return "fieldset-legend"

    def _legend(self, doc: Document, name: str) -> Tag:
        return doc.new_tag("legend", text=humanize(name.replace("[]", "")) or self.DEFAULT_LEGEND)

    def _common_container(self, doc: Document, members: List[Tag]) -> Tag:
        chains = [doc.ancestors(member) + [doc.root] for member in members]
        for candidate in chains[0]:
            if all(any(node is candidate for node in chain) for chain in chains[1:]):
                return candidate
        return doc.root

    def _wrap(self, doc: Document, element: Tag, name: str) -> None:
        fieldset = doc.new_tag("fieldset")
        element.replace_with(fieldset)
        fieldset.append(self._legend(doc, name))
        fieldset.append(element)

    def _wrap_children(self, doc: Document, container: Tag, members: List[Tag], name: str) -> None:
        contents = list(container.contents)
        positions = []
        for member in members:
            node = member
            while node.parent is not container:
                node = node.parent
            positions.append(next(i for i, child in enumerate(contents) if child is node))

        nodes = contents[min(positions):max(positions) + 1]
        fieldset = doc.new_tag("fieldset")
        fieldset.append(self._legend(doc, name))
        nodes[0].insert_before(fieldset)
        for node in nodes:
            fieldset.append(node.extract())

    def transform(self, doc: Document) -> int:
        fixed = 0
        for name, members in choice_groups(doc).items():
            if not is_ungrouped(members, doc):
                continue

            fieldset = shared_fieldset(members, doc)
            if fieldset is not None:
                legend = fieldset.find("legend")
                if legend is None:
                    fieldset.insert(0, self._legend(doc, name))
                else:
                    legend.string = self._legend(doc, name).get_text()
                fixed += 1
                continue

            if any(doc.closest(member, ["fieldset"]) is not None for member in members):
                continue

            container = self._common_container(doc, members)
            if container.name in TABLE_PARTS:
                table = container if container.name == "table" else doc.closest(container, ["table"])
                self._wrap(doc, table if table is not None else container, name)
            elif container.name in LIST_CONTAINERS:
                self._wrap(doc, container, name)
            else:
                self._wrap_children(doc, container, members, name)
            fixed += 1
        return fixed


class RequiredAttributeFix(FixRule):
    @property
    def id(self) -> str:
        return "required-attribute"

    def transform(self, doc: Document) -> int:
        controls = unmarked_required(doc)
        for control in controls:
            control["aria-required"] = "true"
        return len(controls)


class ErrorMessageFix(FixRule):
    """
    Links invalid fields to an error message.

    An adjacent element whose class mentions "error" is referenced (and
    given an id); otherwise an empty polite live region is inserted after
    the field for scripts to fill.
    """

    @property
    def id(self) -> str:
        return "error-message"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(attrs={"aria-invalid": True}):
            if not lacks_error_reference(element):
                continue
            base = f"{attr(element, 'id') or attr(element, 'name') or 'field'}-error"
            message = adjacent_error(element)
            if message is not None:
                element["aria-describedby"] = doc.ensure_id(message, base)
            else:
                message_id = doc.unique_id(base)
                element.insert_after(doc.new_tag(
                    "span",
                    attrs={"id": message_id, "class": "error-message", "aria-live": "polite"},
                ))
                element["aria-describedby"] = message_id
            fixed += 1
        return fixed


class AutocompleteFix(FixRule):
    @property
    def id(self) -> str:
        return "autocomplete-attribute"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for control in labelable_controls(doc):
            token = autocomplete_token(control)
            if token:
                control["autocomplete"] = token
                fixed += 1
        return fixed


class InputTypeFix(FixRule):
    @property
    def id(self) -> str:
        return "input-type"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for control in doc.find_all("input", attrs={"type": True}):
            if has_invalid_type(control):
                control["type"] = suggested_input_type(control)
                fixed += 1
        return fixed


class CustomControlFix(FixRule):
    @property
    def id(self) -> str:
        return "custom-control"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(attrs={"role": True}):
            problems = custom_control_problems(element, doc)
            if not problems:
                continue
            if "tabindex" in problems:
                element["tabindex"] = "0"
            if "name" in problems:
                element["aria-label"] = humanize(primary_role(element))
            fixed += 1
        return fixed


class ButtonLabelFix(FixRule):
    @property
    def id(self) -> str:
        return "button-label"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for button in doc.find_all("button"):
            if is_unlabeled_button(button, doc):
                button["aria-label"] = button_label(button)
                fixed += 1
        return fixed


class OrphanedLabelFix(FixRule):
    """
    Reconnects labels whose `for` points nowhere.

    The next labelable control after the label is used: the label takes its
    id, or the control takes the label's `for` value when it has no id.
    """

    @property
    def id(self) -> str:
        return "orphaned-label"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for label in doc.find_all("label", attrs={"for": True}):
            if not is_orphaned_label(label, doc):
                continue
            control: Optional[Tag] = next_control(label)
            if control is None:
                continue
            if attr(control, "id"):
                label["for"] = attr(control, "id")
            else:
                control["id"] = attr(label, "for")
            fixed += 1
        return fixed


class FormAriaFix(FixRule):
    @property
    def id(self) -> str:
        return "form-aria"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(FORM_CONTROL_TAGS, attrs={"aria-hidden": True}):
            if is_hidden_focusable_control(element):
                del element["aria-hidden"]
                fixed += 1
        return fixed
