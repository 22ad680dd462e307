"""
Tests for ScanOrchestrator and RemediationOrchestrator.

Rule selection, disabled rules, failure policies and sequential
remediation semantics.
"""

import logging

import pytest

from wcag_engine.contracts import (
    Issue,
    RuleEvaluationError,
    ScanContext,
    Severity,
    UnknownRuleError,
    WcagLevel,
)
from wcag_engine.detectors import EmptyLinkRule, MissingAltTextRule
from wcag_engine.fixers import MissingAltTextFix
from wcag_engine.fixers.base_rule import FixRule
from wcag_engine.orchestrator import FailurePolicy, RemediationOrchestrator, ScanOrchestrator
from wcag_engine.registry import RuleRegistry


class BrokenEmptyLinkFix(FixRule):
    @property
    def id(self) -> str:
        return "empty-link"

    def transform(self, doc):
        raise ValueError("cannot fix")


def make_issue(rule_id: str) -> Issue:
    return Issue(
        rule_id=rule_id,
        severity=Severity.SERIOUS,
        wcag_criterion="1.1.1",
        wcag_level=WcagLevel.A,
        message="reported",
    )


@pytest.fixture
def scanner(registry):
    return ScanOrchestrator(registry, context=ScanContext(), policy=FailurePolicy.FAIL_OPEN, disabled_rules=[])


@pytest.fixture
def remediator(registry):
    return RemediationOrchestrator(registry, context=ScanContext(), policy=FailurePolicy.FAIL_OPEN)


@pytest.fixture
def broken_registry():
    registry = RuleRegistry()
    registry.register(MissingAltTextRule(), MissingAltTextFix())
    registry.register(EmptyLinkRule(), BrokenEmptyLinkFix())
    return registry


# =============================================================================
# FailurePolicy
# =============================================================================

# Format: (value, expected, description)
POLICY_CASES = [
    (None, FailurePolicy.FAIL_OPEN, "Default"),
    ("fail_open", FailurePolicy.FAIL_OPEN, "Setting value"),
    ("FAIL-CLOSED", FailurePolicy.FAIL_CLOSED, "Upper case with hyphen"),
    (FailurePolicy.FAIL_CLOSED, FailurePolicy.FAIL_CLOSED, "Already a policy"),
]


class TestFailurePolicy:
    @pytest.mark.parametrize(
        "value,expected,description",
        POLICY_CASES,
        ids=[case[-1] for case in POLICY_CASES]
    )
    def test_from_value(self, value, expected, description):
        assert FailurePolicy.from_value(value) is expected

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            FailurePolicy.from_value("retry")


# =============================================================================
# Scan
# =============================================================================

class TestScanSelection:
    def test_all_rules_in_registry_order(self, scanner, registry):
        report = scanner.run("<p>x</p>")
        assert report.rules_run == registry.ids
        assert report.complete

    def test_aliases_resolved_and_deduplicated(self, scanner):
        rules = scanner.select(["contrast", "text-color-contrast", "alt-text"])
        assert [rule.id for rule in rules] == ["text-color-contrast", "missing-alt-text"]

    def test_requested_order_kept(self, scanner):
        report = scanner.run('<a href="/x"></a><img src="a.jpg">', ["empty-link", "missing-alt-text"])
        assert report.rule_ids() == ["empty-link", "missing-alt-text"]

    def test_unknown_rule_raises(self, scanner):
        with pytest.raises(UnknownRuleError):
            scanner.run("<p>x</p>", ["missing-alt-text", "no-such-rule"])

    def test_disabled_rules_never_run(self, registry):
        scanner = ScanOrchestrator(
            registry,
            context=ScanContext(),
            policy=FailurePolicy.FAIL_OPEN,
            disabled_rules=["alt-text", "skip-link"],
        )
        assert "missing-alt-text" not in [rule.id for rule in scanner.select()]
        report = scanner.run('<img src="a.jpg">', ["missing-alt-text", "empty-alt-text"])
        assert report.rules_run == ["empty-alt-text"]
        assert len(report) == 0

    def test_unknown_disabled_rule_is_ignored(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="wcag_engine"):
            scanner = ScanOrchestrator(
                registry,
                context=ScanContext(),
                policy=FailurePolicy.FAIL_OPEN,
                disabled_rules=["no-such-rule"],
            )
        assert len(scanner.select()) == len(registry)
        assert "no-such-rule" in caplog.text

    def test_empty_registry_scores_100(self):
        scanner = ScanOrchestrator(RuleRegistry(), context=ScanContext(), policy="fail_open", disabled_rules=[])
        report = scanner.run('<img src="a.jpg">')
        assert report.rules_run == []
        assert report.score == 100

    def test_context_reaches_rules(self, registry):
        scanner = ScanOrchestrator(
            registry,
            context=ScanContext(site_url="https://example.com"),
            policy=FailurePolicy.FAIL_OPEN,
            disabled_rules=[],
        )
        report = scanner.run('<a href="https://partner.org">Partner</a>', ["external-link"])
        assert len(report) == 1

    def test_malformed_content_never_raises(self, scanner):
        report = scanner.run("<div><img src='a.jpg'><p>unclosed")
        assert report.complete
        assert report.issues_for("missing-alt-text")


# =============================================================================
# Remediation
# =============================================================================

class TestRemediationRun:
    def test_fixers_see_previous_output(self, remediator):
        html = '<div role="main">A</div><div role="main">B</div>'
        result = remediator.run(html, ["semantic-html", "landmark-role"])
        assert result.content == '<main aria-label="Main 1">A</main><main aria-label="Main 2">B</main>'
        assert result.applied == {"semantic-html": 2, "landmark-role": 2}
        assert result.fixed_count == 4

    def test_inert_fixers_listed_as_manual(self, remediator):
        result = remediator.run('<img src="hero.jpg">', ["contrast", "missing-alt-text"])
        assert result.manual == ["text-color-contrast"]
        assert result.applied == {"missing-alt-text": 1}
        assert result.content == '<img src="hero.jpg" alt="Hero"/>'

    def test_cleaned_alt_gets_caption_text(self, remediator, scanner):
        html = '<figure><img src="x.png" alt="image of x.png"><figcaption>Our new office</figcaption></figure>'
        result = remediator.run(html, ["redundant-alt-text", "alt-text-quality"])
        assert result.applied == {"redundant-alt-text": 1, "alt-text-quality": 1}
        assert 'alt="Our new office"' in result.content
        assert len(scanner.run(result.content, ["redundant-alt-text", "alt-text-quality"])) == 0

    def test_cleaned_alt_without_context_stays_reported(self, remediator, scanner):
        result = remediator.run('<img src="x.png" alt="image of x.png">', ["redundant-alt-text", "alt-text-quality"])
        assert result.content == '<img src="x.png" alt="X"/>'
        assert result.applied == {"redundant-alt-text": 1, "alt-text-quality": 0}
        issue = scanner.run(result.content, ["alt-text-quality"]).issues[0]
        assert issue.context["problem"] == "too_short"

    def test_zero_counts_recorded(self, remediator):
        result = remediator.run("<p>x</p>", ["missing-alt-text"])
        assert result.applied == {"missing-alt-text": 0}
        assert result.content == "<p>x</p>"

    def test_rule_without_fixer_rejected_before_running(self, remediator):
        with pytest.raises(UnknownRuleError):
            remediator.run('<img src="hero.jpg">', ["missing-alt-text", "duplicate-link-text"])

    def test_unknown_rule_rejected(self, remediator):
        with pytest.raises(UnknownRuleError):
            remediator.select(["no-such-rule"])

    def test_every_fixer_by_default(self, remediator, registry):
        assert remediator.select() == registry.fixers

    def test_none_content_is_empty(self, remediator):
        assert remediator.run(None, ["missing-alt-text"]).content == ""


class TestRemediationForIssues:
    def test_registry_order_and_manual_ids(self, remediator):
        issues = [
            make_issue("text-color-contrast"),
            make_issue("missing-alt-text"),
            make_issue("duplicate-link-text"),
            make_issue("decorative-image"),
            make_issue("missing-alt-text"),
            make_issue("not-a-rule"),
        ]
        result = remediator.run_for_issues('<img src="hero.jpg">', issues)

        assert list(result.applied) == ["decorative-image", "missing-alt-text"]
        assert result.manual == ["duplicate-link-text", "text-color-contrast"]
        assert result.content == '<img src="hero.jpg" alt="Hero"/>'

    def test_no_issues_no_changes(self, remediator):
        result = remediator.run_for_issues("<p>x</p>", [])
        assert result.applied == {}
        assert result.manual == []
        assert result.content == "<p>x</p>"


class TestRemediationFailures:
    HTML = '<img src="hero.jpg"><a href="/x"></a>'

    def test_fail_open_skips_broken_fixer(self, broken_registry):
        remediator = RemediationOrchestrator(broken_registry, context=ScanContext(), policy=FailurePolicy.FAIL_OPEN)
        result = remediator.run(self.HTML)

        assert result.applied == {"missing-alt-text": 1}
        assert result.content == '<img src="hero.jpg" alt="Hero"/><a href="/x"></a>'
        failure = result.failures[0]
        assert (failure.rule_id, failure.phase, failure.error_type) == ("empty-link", "apply", "ValueError")

    def test_fail_closed_raises(self, broken_registry):
        remediator = RemediationOrchestrator(broken_registry, context=ScanContext(), policy=FailurePolicy.FAIL_CLOSED)
        with pytest.raises(RuleEvaluationError) as exc_info:
            remediator.run(self.HTML)
        assert exc_info.value.failure.phase == "apply"
        assert "cannot fix" in str(exc_info.value)
