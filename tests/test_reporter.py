"""
Tests for result contracts, scoring and report export.
"""

import csv
import io
import json

import pytest

from wcag_engine.contracts import (
    FixResult,
    Issue,
    RemediationResult,
    RuleFailure,
    ScanReport,
    Severity,
    WcagLevel,
)
from wcag_engine.reporting import CSV_COLUMNS, report_to_csv, report_to_json, report_to_text, summarize


def make_issue(rule_id: str, severity: Severity, selector: str = "") -> Issue:
    return Issue(
        rule_id=rule_id,
        severity=severity,
        wcag_criterion="1.1.1",
        wcag_level=WcagLevel.A,
        message=f"{rule_id} found",
        selector=selector,
    )


@pytest.fixture
def report():
    return ScanReport(
        issues=[
            make_issue("generic-link-text", Severity.WARNING, "a"),
            make_issue("missing-alt-text", Severity.CRITICAL, "#hero > img"),
            make_issue("text-color-contrast", Severity.SERIOUS, "p"),
            make_issue("duplicate-link-text", Severity.MODERATE, "a"),
            make_issue("missing-alt-text", Severity.CRITICAL, "footer > img"),
        ],
        rules_run=["missing-alt-text", "text-color-contrast", "generic-link-text", "duplicate-link-text"],
    )


# =============================================================================
# Severity
# =============================================================================

# Format: (severity, priority, deduction, description)
SEVERITY_CASES = [
    (Severity.CRITICAL, "P0", 10, "Critical"),
    (Severity.SERIOUS, "P1", 5, "Serious"),
    (Severity.MODERATE, "P2", 2, "Moderate"),
    (Severity.MINOR, "P3", 1, "Minor"),
    (Severity.WARNING, "P4", 0, "Warning"),
    (Severity.NOTICE, "P5", 0, "Notice"),
]


class TestSeverity:
    @pytest.mark.parametrize(
        "severity,priority,deduction,description",
        SEVERITY_CASES,
        ids=[case[-1] for case in SEVERITY_CASES]
    )
    def test_priority_and_deduction(self, severity, priority, deduction, description):
        assert severity.priority == priority
        assert severity.deduction == deduction

    def test_ordering(self):
        assert max([Severity.NOTICE, Severity.CRITICAL, Severity.MINOR]) is Severity.CRITICAL
        assert Severity.WARNING < Severity.MINOR

    def test_parse(self):
        assert Severity.parse(" Serious ") is Severity.SERIOUS
        with pytest.raises(ValueError):
            Severity.parse("blocker")


# =============================================================================
# Results
# =============================================================================

class TestScanReport:
    def test_score(self, report):
        # 2 critical + 1 serious + 1 moderate
        assert report.score == 100 - 20 - 5 - 2

    def test_score_floored_at_zero(self):
        issues = [make_issue("empty-link", Severity.CRITICAL) for _ in range(11)]
        assert ScanReport(issues=issues).score == 0

    def test_counts_include_zeros(self, report):
        counts = report.count_by_severity()
        assert list(counts) == list(Severity)
        assert counts[Severity.CRITICAL] == 2
        assert counts[Severity.MINOR] == 0

    def test_sorted_worst_first_keeping_report_order(self, report):
        ordered = report.sorted_by_severity()
        assert [issue.selector for issue in ordered[:2]] == ["#hero > img", "footer > img"]
        assert ordered[-1].severity is Severity.WARNING

    def test_rule_ids_and_filters(self, report):
        assert report.rule_ids() == [
            "generic-link-text", "missing-alt-text", "text-color-contrast", "duplicate-link-text",
        ]
        assert len(report.issues_for("missing-alt-text")) == 2
        assert len(report) == 5
        assert list(report)[0].rule_id == "generic-link-text"

    def test_failures_make_report_incomplete(self, report):
        assert report.complete
        report.failures.append(RuleFailure("exploding", "detect", "RuntimeError", "boom"))
        assert not report.complete
        assert report.to_dict()["failures"][0]["rule_id"] == "exploding"

    def test_to_dict(self, report):
        data = report.to_dict()
        assert set(data) == {"score", "complete", "rules_run", "counts", "issues", "failures"}
        assert data["counts"]["critical"] == 2
        assert data["issues"][1]["priority"] == "P0"


class TestResults:
    def test_fix_result(self):
        assert FixResult(2, "<p/>").changed
        assert not FixResult(0, "").changed
        with pytest.raises(ValueError):
            FixResult(-1, "")

    def test_remediation_result(self):
        result = RemediationResult(content="<p/>", applied={"empty-link": 2, "missing-alt-text": 0})
        assert result.fixed_count == 2
        assert set(result.to_dict()) == {"fixed_count", "applied", "manual", "failures", "content"}

    def test_issue_from_dict(self):
        issue = make_issue("missing-alt-text", Severity.CRITICAL, "img")
        assert Issue.from_dict(issue.to_dict()) == issue

    def test_issue_describe(self):
        issue = make_issue("missing-alt-text", Severity.CRITICAL, "img")
        assert issue.describe() == "[critical] missing-alt-text (WCAG 1.1.1 A): missing-alt-text found at img"


# =============================================================================
# Export
# =============================================================================

class TestExport:
    def test_json(self, report):
        data = json.loads(report_to_json(report))
        assert data["score"] == 73
        assert len(data["issues"]) == 5

    def test_csv(self, report):
        rows = list(csv.reader(io.StringIO(report_to_csv(report))))
        assert rows[0] == CSV_COLUMNS
        assert len(rows) == 6
        assert rows[2][:3] == ["missing-alt-text", "critical", "P0"]

    def test_csv_of_empty_report_is_header_only(self):
        assert report_to_csv(ScanReport()) == ",".join(CSV_COLUMNS) + "\n"

    def test_text(self, report):
        lines = report_to_text(report).splitlines()
        assert lines[0] == "Score: 73/100 (5 issue(s))"
        assert lines[1].startswith("  [critical] missing-alt-text")
        assert len(lines) == 6

    def test_summarize_without_registry(self, report):
        summary = summarize(report)
        assert summary["total"] == 5
        assert summary["counts"]["warning"] == 1
        assert "fixable" not in summary

    def test_summarize_splits_fixable_and_manual(self, report, registry):
        summary = summarize(report, registry)
        assert summary["fixable"] == ["generic-link-text", "missing-alt-text"]
        assert summary["manual"] == ["text-color-contrast", "duplicate-link-text"]
