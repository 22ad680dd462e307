"""
Engine-level guarantees exercised through the orchestrators.

Rule isolation, role fallback severity, heading and table round trips
and duplicate link text grouping.
"""

import pytest

from wcag_engine.contracts import RuleEvaluationError, ScanContext, Severity
from wcag_engine.detectors import EmptyLinkRule, MissingAltTextRule
from wcag_engine.detectors.base_rule import DetectionRule
from wcag_engine.fixers import EmptyLinkFix, MissingAltTextFix
from wcag_engine.orchestrator import FailurePolicy, RemediationOrchestrator, ScanOrchestrator
from wcag_engine.registry import RuleRegistry


class ExplodingRule(DetectionRule):
    title = "Always fails"
    wcag_criterion = "4.1.2"
    message = "Never reported"

    @property
    def id(self) -> str:
        return "exploding"

    def detect(self, doc):
        raise RuntimeError("boom")


def scanner(registry, policy=FailurePolicy.FAIL_OPEN):
    return ScanOrchestrator(registry, context=ScanContext(), policy=policy, disabled_rules=[])


def fixer(registry):
    return RemediationOrchestrator(registry, context=ScanContext(), policy=FailurePolicy.FAIL_OPEN)


# =============================================================================
# Rule isolation
# =============================================================================

class TestRuleIsolation:
    HTML = '<img src="hero.jpg"><a href="/x"></a>'

    @pytest.fixture
    def isolated_registry(self):
        registry = RuleRegistry()
        registry.register(MissingAltTextRule(), MissingAltTextFix())
        registry.register(ExplodingRule())
        registry.register(EmptyLinkRule(), EmptyLinkFix())
        return registry

    def test_failing_rule_does_not_hide_other_issues(self, isolated_registry):
        report = scanner(isolated_registry).run(self.HTML)

        assert report.rule_ids() == ["missing-alt-text", "empty-link"]
        assert report.rules_run == ["missing-alt-text", "exploding", "empty-link"]
        assert not report.complete

        failure = report.failures[0]
        assert failure.rule_id == "exploding"
        assert failure.phase == "detect"
        assert failure.error_type == "RuntimeError"
        assert failure.message == "boom"

    def test_fail_closed_raises_with_failure(self, isolated_registry):
        with pytest.raises(RuleEvaluationError) as exc_info:
            scanner(isolated_registry, FailurePolicy.FAIL_CLOSED).run(self.HTML)
        assert exc_info.value.failure.rule_id == "exploding"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


# =============================================================================
# Role fallback severity
# =============================================================================

# Format: (role, expected_severity, description)
ROLE_SEVERITY_CASES = [
    ("foo button", Severity.MODERATE, "Valid fallback after invalid token"),
    ("button foo", Severity.MODERATE, "Valid token before invalid one"),
    ("foo", Severity.SERIOUS, "Only invalid token"),
    ("foo bar", Severity.SERIOUS, "Several invalid tokens"),
]


class TestRoleFallbackSeverity:
    @pytest.mark.parametrize(
        "role,expected,description",
        ROLE_SEVERITY_CASES,
        ids=[case[-1] for case in ROLE_SEVERITY_CASES]
    )
    def test_severity(self, registry, role, expected, description):
        report = scanner(registry).run(f'<div role="{role}">x</div>', ["aria-role"])
        assert [issue.severity for issue in report] == [expected]


# =============================================================================
# Round trips through scan and remediation
# =============================================================================

class TestHeadingRoundTrip:
    def test_skipped_level_fixed_and_rescanned(self, registry):
        html = "<h1>Title</h1><h2>Section</h2><h4>Detail</h4>"

        report = scanner(registry).run(html, ["skipped-heading-level"])
        assert len(report) == 1

        result = fixer(registry).run(html, ["skipped-heading-level"])
        assert result.content == "<h1>Title</h1><h2>Section</h2><h3>Detail</h3>"
        assert result.applied == {"skipped-heading-level": 1}

        assert len(scanner(registry).run(result.content, ["skipped-heading-level"])) == 0


class TestTableRoundTrip:
    def test_header_row_fixed_and_rescanned(self, registry):
        html = "<table><tr><td>A</td><td>B</td></tr></table>"

        report = scanner(registry).run(html, ["table-header"])
        assert len(report) == 1

        result = fixer(registry).run(html, ["table-header"])
        assert result.content == '<table><tr><th scope="col">A</th><th scope="col">B</th></tr></table>'
        assert result.fixed_count == 2

        assert len(scanner(registry).run(result.content, ["table-header"])) == 0

    def test_run_for_issues_fixes_reported_rules(self, registry):
        html = "<table><tr><td>A</td><td>B</td></tr></table>"
        report = scanner(registry).run(html)

        result = fixer(registry).run_for_issues(html, report.issues)
        assert result.applied["table-header"] == 2
        assert scanner(registry).run(result.content).issues_for("table-header") == []


class TestDuplicateLinkText:
    TWO_DESTINATIONS = '<a href="/a.pdf">Download</a><a href="/b.pdf">Download</a>'

    def test_one_issue_per_destination(self, registry):
        report = scanner(registry).run(self.TWO_DESTINATIONS, ["duplicate-link-text"])
        assert len(report) == 2
        assert [issue.context["destination"] for issue in report] == ["/a.pdf", "/b.pdf"]

    def test_repeated_destination_adds_nothing(self, registry):
        html = self.TWO_DESTINATIONS + '<a href="/a.pdf">Download</a>'
        assert len(scanner(registry).run(html, ["duplicate-link-text"])) == 2

    def test_same_destination_is_not_a_duplicate(self, registry):
        html = '<a href="/a.pdf">Download</a><a href="/A.pdf#top">Download</a>'
        assert len(scanner(registry).run(html, ["duplicate-link-text"])) == 0
