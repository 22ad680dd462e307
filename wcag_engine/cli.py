"""
Command line interface.

Usage:
    wcag-engine scan page.html --format json --site-url https://example.com
    wcag-engine fix page.html --rules missing-alt-text,table-header --output fixed.html
    wcag-engine rules

Exit status: scan returns 1 when issues were found, 0 otherwise; 2 means
the file could not be read or a rule id is unknown.
"""

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from .contracts.context import ScanContext
from .contracts.errors import UnknownRuleError
from .core.config import settings
from .monitoring.logger import configure_logging
from .orchestrator import RemediationOrchestrator, ScanOrchestrator
from .registry import RuleRegistry, create_default_registry
from .reporting import report_to_csv, report_to_json, report_to_text, summarize


EXIT_CLEAN = 0
EXIT_ISSUES = 1
EXIT_ERROR = 2


def _rule_list(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def _read(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return None


def _context(args: argparse.Namespace) -> ScanContext:
    context = ScanContext.from_settings(settings)
    if getattr(args, "site_url", None):
        context = dataclasses.replace(context, site_url=args.site_url)
    return context


def _status(registry: RuleRegistry, rule_id: str) -> str:
    if not registry.has_fixer(rule_id):
        return "manual"
    return "inert" if registry.is_inert(rule_id) else "fixable"


def cmd_scan(args: argparse.Namespace, registry: RuleRegistry) -> int:
    content = _read(args.file)
    if content is None:
        return EXIT_ERROR

    scanner = ScanOrchestrator(registry=registry, context=_context(args))
    try:
        report = scanner.run(content, rule_ids=_rule_list(args.rules))
    except UnknownRuleError as e:
        print(str(e), file=sys.stderr)
        return EXIT_ERROR

    if args.format == "json":
        print(report_to_json(report))
    elif args.format == "csv":
        sys.stdout.write(report_to_csv(report))
    else:
        print(report_to_text(report))
        summary = summarize(report, registry)
        if summary["fixable"]:
            print(f"Fixable: {', '.join(summary['fixable'])}")
        if summary["manual"]:
            print(f"Manual: {', '.join(summary['manual'])}")

    return EXIT_ISSUES if report.issues else EXIT_CLEAN


def cmd_fix(args: argparse.Namespace, registry: RuleRegistry) -> int:
    content = _read(args.file)
    if content is None:
        return EXIT_ERROR

    remediator = RemediationOrchestrator(registry=registry, context=_context(args))
    try:
        result = remediator.run(content, rule_ids=_rule_list(args.rules))
    except UnknownRuleError as e:
        print(str(e), file=sys.stderr)
        return EXIT_ERROR

    if args.output:
        Path(args.output).write_text(result.content, encoding="utf-8")
    else:
        print(result.content)

    print(f"Fixed {result.fixed_count} instance(s)", file=sys.stderr)
    if result.manual:
        print(f"Manual remediation: {', '.join(result.manual)}", file=sys.stderr)
    for failure in result.failures:
        print(f"Skipped: {failure.describe()}", file=sys.stderr)
    return EXIT_CLEAN


def cmd_rules(args: argparse.Namespace, registry: RuleRegistry) -> int:
    for detector in registry.detectors:
        description = detector.describe()
        print(
            f"{description.rule_id:<28} {description.default_severity.value:<9} "
            f"{description.wcag_criterion:<7} {description.wcag_level.value:<4} "
            f"{_status(registry, description.rule_id)}"
        )
    return EXIT_CLEAN


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wcag-engine", description="WCAG accessibility rule engine")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at settings.LOG_LEVEL instead of WARNING")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="report accessibility issues in an HTML file")
    scan.add_argument("file")
    scan.add_argument("--format", choices=["json", "csv", "text"], default="text")
    scan.add_argument("--site-url", help="home URL used to tell external links apart")
    scan.add_argument("--rules", help="comma-separated rule ids or aliases")
    scan.set_defaults(handler=cmd_scan)

    fix = subparsers.add_parser("fix", help="apply fix rules to an HTML file")
    fix.add_argument("file")
    fix.add_argument("--rules", help="comma-separated rule ids or aliases, applied in this order")
    fix.add_argument("--site-url", help="home URL used to tell external links apart")
    fix.add_argument("--output", help="write the result here instead of stdout")
    fix.set_defaults(handler=cmd_fix)

    rules = subparsers.add_parser("rules", help="list registered rules")
    rules.set_defaults(handler=cmd_rules)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries reports and fixed markup
    configure_logging(settings.LOG_LEVEL if args.verbose else "WARNING", stream=sys.stderr)
    return args.handler(args, create_default_registry())


if __name__ == "__main__":
    sys.exit(main())
