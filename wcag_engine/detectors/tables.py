"""
Table detection rules - headers, captions and layout tables.

Data tables and layout tables are told apart structurally: a table with
no header markup whose cells hold block content (nested tables, forms,
headings, lists, images) is treated as layout.
"""

from typing import List, Optional

from bs4 import Tag

from ..analyzers.accessibility import HEADING_TAGS, attr, link_text, parse_int, primary_role, text_of
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


STRUCTURAL_CONTENT = ["table", "div", "form", "img", "ul", "ol", "p"] + HEADING_TAGS


def own(doc: Document, table: Tag, names) -> List[Tag]:
    """Elements of a table that do not belong to a nested table."""
    return [el for el in table.find_all(names) if doc.closest(el, ["table"]) is table]


def own_rows(doc: Document, table: Tag) -> List[Tag]:
    return own(doc, table, "tr")


def is_presentation_table(table: Tag) -> bool:
    return primary_role(table) in ("presentation", "none") or attr(table, "aria-hidden").lower() == "true"


def is_layout_shaped(doc: Document, table: Tag) -> bool:
    if own(doc, table, ["th", "caption", "thead"]) or table.has_attr("summary"):
        return False
    return any(cell.find(STRUCTURAL_CONTENT) for cell in own(doc, table, "td"))


def is_data_table(doc: Document, table: Tag) -> bool:
    return not is_presentation_table(table) and not is_layout_shaped(doc, table)


def lacks_headers(doc: Document, table: Tag) -> bool:
    if not is_data_table(doc, table):
        return False
    return bool(own(doc, table, "td")) and not own(doc, table, "th")


def header_row(doc: Document, table: Tag) -> Optional[Tag]:
    """First row of a table that has data cells."""
    for row in own_rows(doc, table):
        if row.find("td", recursive=False):
            return row
    return None


def lacks_caption(doc: Document, table: Tag) -> bool:
    if is_presentation_table(table) or not own(doc, table, "th"):
        return False
    if attr(table, "aria-label") or attr(table, "aria-labelledby") or attr(table, "summary"):
        return False
    caption = table.find("caption", recursive=False)
    return caption is None or not text_of(caption)


def spans(cell: Tag) -> bool:
    return (parse_int(attr(cell, "colspan")) or 1) > 1 or (parse_int(attr(cell, "rowspan")) or 1) > 1


def unscoped_headers(doc: Document, table: Tag) -> List[Tag]:
    """Header cells lacking scope and id in tables with merged cells."""
    if is_presentation_table(table):
        return []
    if not any(spans(cell) for cell in own(doc, table, ["td", "th"])):
        return []
    return [th for th in own(doc, table, "th") if not th.has_attr("scope") and not th.has_attr("id")]


def header_scope(doc: Document, table: Tag, th: Tag) -> str:
    """Scope for a header cell from its position in the table."""
    colspan = (parse_int(attr(th, "colspan")) or 1) > 1
    rowspan = (parse_int(attr(th, "rowspan")) or 1) > 1
    rows = own_rows(doc, table)
    row = doc.closest(th, ["tr"])
    if doc.closest(th, ["thead"]) is not None or (rows and row is rows[0]):
        return "colgroup" if colspan else "col"
    if row is not None:
        cells = [cell for cell in row.find_all(["td", "th"], recursive=False)]
        if cells and cells[0] is th:
            return "rowgroup" if rowspan else "row"
    return "col"


def is_unmarked_layout(doc: Document, table: Tag) -> bool:
    return not is_presentation_table(table) and is_layout_shaped(doc, table)


def empty_headers(doc: Document, table: Tag) -> List[Tag]:
    return [th for th in own(doc, table, "th") if not link_text(th) and not attr(th, "aria-label")]


def is_corner_cell(doc: Document, table: Tag, cell: Tag) -> bool:
    rows = own_rows(doc, table)
    if not rows:
        return False
    first = rows[0].find(["td", "th"], recursive=False)
    return first is cell


class TableHeaderRule(DetectionRule):
    """
    Detects data tables without header cells.

    Tables marked presentational and layout-shaped tables are skipped.
    """

    title = "Table without headers"
    wcag_criterion = "1.3.1"
    default_severity = Severity.SERIOUS
    message = "Data table has no header cells"
    recommendation = "Mark header cells with <th> and a scope."

    @property
    def id(self) -> str:
        return "table-header"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, table) for table in doc.find_all("table") if lacks_headers(doc, table)]


class TableCaptionRule(DetectionRule):
    title = "Table without caption"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Data table has no caption"
    recommendation = "Add a <caption> describing the table."

    @property
    def id(self) -> str:
        return "table-caption"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, table) for table in doc.find_all("table") if lacks_caption(doc, table)]


class ComplexTableRule(DetectionRule):
    title = "Complex table without header associations"
    wcag_criterion = "1.3.1"
    default_severity = Severity.SERIOUS
    message = "Table with merged cells has headers without scope or id"
    recommendation = "Give every header cell a scope, or use id/headers associations."

    @property
    def id(self) -> str:
        return "complex-table"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for table in doc.find_all("table"):
            headers = unscoped_headers(doc, table)
            if headers:
                issues.append(self.make_issue(doc, table, context={"unscoped_headers": len(headers)}))
        return issues


class LayoutTableRule(DetectionRule):
    title = "Layout table not marked presentational"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Table used for layout is exposed as a data table"
    recommendation = "Add role=\"presentation\", or lay the content out with CSS."

    @property
    def id(self) -> str:
        return "layout-table"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, table) for table in doc.find_all("table") if is_unmarked_layout(doc, table)]


class EmptyTableCellRule(DetectionRule):
    title = "Empty header cell"
    wcag_criterion = "1.3.1"
    default_severity = Severity.WARNING
    message = "Table header cell is empty"
    recommendation = "Use <td> for empty corner cells, or give the header text."

    @property
    def id(self) -> str:
        return "empty-table-cell"

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for table in doc.find_all("table"):
            for th in empty_headers(doc, table):
                issues.append(self.make_issue(doc, th, context={"corner": is_corner_cell(doc, table, th)}))
        return issues
