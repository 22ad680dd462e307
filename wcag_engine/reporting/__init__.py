"""Reporting - export helpers for scan reports."""

from .reporter import CSV_COLUMNS, report_to_csv, report_to_json, report_to_text, summarize

__all__ = ["CSV_COLUMNS", "report_to_csv", "report_to_json", "report_to_text", "summarize"]
