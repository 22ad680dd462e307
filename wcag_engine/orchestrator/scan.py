"""
ScanOrchestrator - Runs detection rules over one fragment.

Parses the content once, evaluates every selected rule against the same
Document and aggregates the issues in registry order. A rule that raises
never hides the issues of the others.

Usage:
    from wcag_engine.orchestrator import ScanOrchestrator

    scanner = ScanOrchestrator()
    report = scanner.run("<img src='chart.png'>")

    for issue in report.sorted_by_severity():
        print(issue.rule_id, issue.severity.value, issue.message)
"""

import logging
import time
import uuid
from typing import Iterable, List, Optional

from ..analyzers.dom_adapter import DocumentAdapter
from ..contracts.context import ScanContext
from ..contracts.errors import RuleEvaluationError
from ..contracts.results import RuleFailure, ScanReport
from ..core.config import settings
from ..detectors.base_rule import DetectionRule
from ..monitoring.logger import engine_logger
from ..registry import RuleRegistry, create_default_registry
from .contracts import FailurePolicy


logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """
    Coordinates one detection pass.

    Defaults come from settings: context (site URL, language...), failure
    policy and disabled rules.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        context: Optional[ScanContext] = None,
        policy: Optional[FailurePolicy] = None,
        disabled_rules: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: RuleRegistry (default catalogue if not provided)
            context: ScanContext attached to parsed documents
            policy: FailurePolicy (settings.FAILURE_POLICY if not provided)
            disabled_rules: Ids or aliases never evaluated
                            (settings.DISABLED_RULES if not provided)
        """
        self._registry = registry if registry is not None else create_default_registry()
        self._context = context or ScanContext.from_settings(settings)
        self._policy = FailurePolicy.from_value(policy or settings.FAILURE_POLICY)
        self._adapter = DocumentAdapter()
        self._disabled = self._resolve_disabled(
            settings.DISABLED_RULES if disabled_rules is None else disabled_rules
        )

    def _resolve_disabled(self, rule_ids: Iterable[str]) -> List[str]:
        disabled = []
        for rule_id in rule_ids:
            if rule_id in self._registry:
                disabled.append(self._registry.resolve(rule_id))
            else:
                logger.warning(f"Ignoring unknown disabled rule: {rule_id!r}")
        return disabled

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    @property
    def context(self) -> ScanContext:
        return self._context

    @property
    def policy(self) -> FailurePolicy:
        return self._policy

    def select(self, rule_ids: Optional[Iterable[str]] = None) -> List[DetectionRule]:
        """
        Detection rules a run evaluates, in order.

        Args:
            rule_ids: Ids or aliases; None means every registered rule

        Raises:
            UnknownRuleError: an id is not registered
        """
        if rule_ids is None:
            rules = self._registry.detectors
        else:
            rules = []
            for rule_id in rule_ids:
                rule = self._registry.detector(rule_id)
                if rule not in rules:
                    rules.append(rule)
        return [rule for rule in rules if rule.id not in self._disabled]

    def run(self, content, rule_ids: Optional[Iterable[str]] = None) -> ScanReport:
        """
        Scan a fragment.

        Args:
            content: HTML fragment
            rule_ids: Restrict the scan to these ids or aliases

        Returns:
            ScanReport with issues in registry (or requested) order

        Raises:
            UnknownRuleError: an id is not registered
            RuleEvaluationError: a rule raised under FAIL_CLOSED
        """
        rules = self.select(rule_ids)
        run_id = uuid.uuid4().hex[:8]
        start_time = time.time()

        doc = self._adapter.parse(content, self._context)
        report = ScanReport()

        for rule in rules:
            report.rules_run.append(rule.id)
            try:
                issues = rule.detect(doc)
            except Exception as e:
                failure = RuleFailure(
                    rule_id=rule.id,
                    phase="detect",
                    error_type=type(e).__name__,
                    message=str(e),
                )
                engine_logger.log_rule_failure(run_id, rule.id, "detect", e)
                if self._policy is FailurePolicy.FAIL_CLOSED:
                    raise RuleEvaluationError(failure) from e
                report.failures.append(failure)
                continue

            if issues:
                logger.debug(f"Rule {rule.id} reported {len(issues)} issue(s)")
            report.issues.extend(issues)

        engine_logger.log_scan(
            run_id=run_id,
            rules_run=len(report.rules_run),
            issues=len(report.issues),
            failures=len(report.failures),
            duration_ms=(time.time() - start_time) * 1000,
            score=report.score,
        )
        return report

    def __repr__(self) -> str:
        return f"ScanOrchestrator({self._registry!r}, policy={self._policy.value})"
