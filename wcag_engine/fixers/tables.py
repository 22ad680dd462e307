"""
Table fix rules - header cells, captions, scopes and layout tables.
"""

from ..analyzers.accessibility import HEADING_TAGS, text_of
from ..analyzers.dom_adapter import Document
from ..detectors.tables import (
    empty_headers,
    header_row,
    header_scope,
    is_corner_cell,
    is_unmarked_layout,
    lacks_caption,
    lacks_headers,
    unscoped_headers,
)
from .base_rule import FixRule


class TableHeaderFix(FixRule):
    """
    Promotes the first data row to column headers.

    Each converted cell counts as one fix:
    <tr><td>A</td><td>B</td></tr> -> <tr><th scope="col">A</th><th scope="col">B</th></tr>
    """

    @property
    def id(self) -> str:
        return "table-header"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for table in doc.find_all("table"):
            if not lacks_headers(doc, table):
                continue
            row = header_row(doc, table)
            if row is None:
                continue
            for cell in row.find_all("td", recursive=False):
                cell.name = "th"
                cell["scope"] = "col"
                fixed += 1
        return fixed


class TableCaptionFix(FixRule):
    """Caption text comes from a heading right before the table, else 'Data table'."""

    DEFAULT_CAPTION = "Data table"

    @property
    def id(self) -> str:
        return "table-caption"

    def _caption_text(self, table) -> str:
        previous = table.find_previous_sibling(True)
        if previous is not None and previous.name in HEADING_TAGS and text_of(previous):
            return text_of(previous)
        return self.DEFAULT_CAPTION

    def transform(self, doc: Document) -> int:
        fixed = 0
        for table in doc.find_all("table"):
            if not lacks_caption(doc, table):
                continue
            text = self._caption_text(table)
            caption = table.find("caption", recursive=False)
            if caption is None:
                table.insert(0, doc.new_tag("caption", text=text))
            else:
                caption.string = text
            fixed += 1
        return fixed


class ComplexTableFix(FixRule):
    @property
    def id(self) -> str:
        return "complex-table"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for table in doc.find_all("table"):
            for th in unscoped_headers(doc, table):
                th["scope"] = header_scope(doc, table, th)
                fixed += 1
        return fixed


class LayoutTableFix(FixRule):
    @property
    def id(self) -> str:
        return "layout-table"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for table in doc.find_all("table"):
            if is_unmarked_layout(doc, table):
                table["role"] = "presentation"
                fixed += 1
        return fixed


class EmptyTableCellFix(FixRule):
    """
    Empty corner headers become plain cells; other empty headers get
    aria-label="Empty header".
    """

    LABEL = "Empty header"

    @property
    def id(self) -> str:
        return "empty-table-cell"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for table in doc.find_all("table"):
            for th in empty_headers(doc, table):
                if is_corner_cell(doc, table, th):
                    th.name = "td"
                    if th.has_attr("scope"):
                        del th["scope"]
                else:
                    th["aria-label"] = self.LABEL
                fixed += 1
        return fixed
