"""
Report export - JSON, CSV and plain-text renderings of a ScanReport.

Usage:
    from wcag_engine.reporting import report_to_json, report_to_csv, summarize

    report = ScanOrchestrator().run(html)
    print(report_to_json(report))
    summary = summarize(report, registry)
"""

import csv
import io
import json
from typing import Any, Dict, List, Optional

from ..contracts.results import ScanReport
from ..registry import RuleRegistry


CSV_COLUMNS = [
    "rule_id",
    "severity",
    "priority",
    "wcag_criterion",
    "wcag_level",
    "message",
    "selector",
    "recommendation",
    "html_snippet",
]


def report_to_json(report: ScanReport, indent: Optional[int] = 2) -> str:
    """Serialize a report (score, counts, issues, failures) to JSON."""
    return json.dumps(report.to_dict(), indent=indent)


def report_to_csv(report: ScanReport) -> str:
    """
    One row per issue, columns in CSV_COLUMNS order, header included.

    Issues keep report order; failures are not part of the CSV.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for issue in report.issues:
        writer.writerow(issue.to_dict())
    return buffer.getvalue()


def summarize(report: ScanReport, registry: Optional[RuleRegistry] = None) -> Dict[str, Any]:
    """
    Headline numbers of a scan.

    Args:
        report: ScanReport to summarize
        registry: When given, reported rule ids are split into those with a
                  working fixer and those needing manual remediation

    Returns:
        Dict with score, total, counts by severity and failure count (plus
        fixable/manual rule ids with a registry)
    """
    summary: Dict[str, Any] = {
        "score": report.score,
        "total": len(report.issues),
        "counts": {severity.value: count for severity, count in report.count_by_severity().items()},
        "failures": len(report.failures),
    }

    if registry is not None:
        fixable: List[str] = []
        manual: List[str] = []
        for rule_id in report.rule_ids():
            if rule_id in registry and registry.has_fixer(rule_id) and not registry.is_inert(rule_id):
                fixable.append(rule_id)
            else:
                manual.append(rule_id)
        summary["fixable"] = fixable
        summary["manual"] = manual

    return summary


def report_to_text(report: ScanReport) -> str:
    """Human-readable listing, worst issues first."""
    lines = [f"Score: {report.score}/100 ({len(report.issues)} issue(s))"]
    for issue in report.sorted_by_severity():
        lines.append(f"  {issue.describe()}")
    for failure in report.failures:
        lines.append(f"  ! {failure.describe()}")
    return "\n".join(lines)
