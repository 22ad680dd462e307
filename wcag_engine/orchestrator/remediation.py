"""
RemediationOrchestrator - Runs fix rules sequentially over one fragment.

Fixers run one after another and each sees the content produced by the
previous one, so structural changes (a div turned into <main>) are
visible to later fixers. Order is the caller's, or registry order.

Usage:
    from wcag_engine.orchestrator import RemediationOrchestrator, ScanOrchestrator

    report = ScanOrchestrator().run(html)
    result = RemediationOrchestrator().run_for_issues(html, report.issues)

    print(result.fixed_count, result.manual)
    fixed_html = result.content
"""

import logging
import time
import uuid
from typing import Iterable, List, Optional

from ..contracts.context import ScanContext
from ..contracts.errors import RuleEvaluationError
from ..contracts.issues import Issue
from ..contracts.results import RemediationResult, RuleFailure
from ..core.config import settings
from ..fixers.base_rule import FixRule
from ..monitoring.logger import engine_logger
from ..registry import RuleRegistry, create_default_registry
from .contracts import FailurePolicy


logger = logging.getLogger(__name__)


class RemediationOrchestrator:
    """
    Coordinates one sequential remediation pass.

    Inert fixers are not executed; their ids are listed in
    RemediationResult.manual.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        context: Optional[ScanContext] = None,
        policy: Optional[FailurePolicy] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: RuleRegistry (default catalogue if not provided)
            context: ScanContext passed to every fixer
            policy: FailurePolicy (settings.FAILURE_POLICY if not provided)
        """
        self._registry = registry if registry is not None else create_default_registry()
        self._context = context or ScanContext.from_settings(settings)
        self._policy = FailurePolicy.from_value(policy or settings.FAILURE_POLICY)

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    @property
    def policy(self) -> FailurePolicy:
        return self._policy

    def select(self, rule_ids: Optional[Iterable[str]] = None) -> List[FixRule]:
        """
        Fixers a run applies, in order.

        Every id is resolved before anything runs.

        Raises:
            UnknownRuleError: unknown id, or a rule without fixer
        """
        if rule_ids is None:
            return self._registry.fixers
        fixers: List[FixRule] = []
        for rule_id in rule_ids:
            fixer = self._registry.fixer(rule_id)
            if fixer not in fixers:
                fixers.append(fixer)
        return fixers

    def run(self, content, rule_ids: Optional[Iterable[str]] = None) -> RemediationResult:
        """
        Apply fixers sequentially.

        Args:
            content: HTML fragment
            rule_ids: Fixers to apply, in this order (ids or aliases);
                      None means every registered fixer in registry order

        Returns:
            RemediationResult with final content and per-rule counts

        Raises:
            UnknownRuleError: an id is unknown or has no fixer
            RuleEvaluationError: a fixer raised under FAIL_CLOSED
        """
        fixers = self.select(rule_ids)
        return self._apply(content, fixers, manual=[])

    def run_for_issues(self, content, issues: Iterable[Issue]) -> RemediationResult:
        """
        Fix what a scan reported.

        Fixers for the distinct rule ids among the issues run in registry
        order. Ids without a fixer are listed as manual along with inert
        ones; ids the registry does not know are ignored.
        """
        reported = {issue.rule_id for issue in issues}
        fixers: List[FixRule] = []
        manual: List[str] = []
        for rule_id in self._registry.ids:
            if rule_id not in reported:
                continue
            if self._registry.has_fixer(rule_id):
                fixers.append(self._registry.fixer(rule_id))
            else:
                manual.append(rule_id)
        return self._apply(content, fixers, manual=manual)

    def _apply(self, content, fixers: List[FixRule], manual: List[str]) -> RemediationResult:
        run_id = uuid.uuid4().hex[:8]
        start_time = time.time()

        current = content if isinstance(content, str) else ("" if content is None else str(content))
        result = RemediationResult(content=current, manual=list(manual))

        for fixer in fixers:
            if fixer.inert:
                result.manual.append(fixer.id)
                continue
            try:
                fix = fixer.apply(current, self._context)
            except Exception as e:
                failure = RuleFailure(
                    rule_id=fixer.id,
                    phase="apply",
                    error_type=type(e).__name__,
                    message=str(e),
                )
                engine_logger.log_rule_failure(run_id, fixer.id, "apply", e)
                if self._policy is FailurePolicy.FAIL_CLOSED:
                    raise RuleEvaluationError(failure) from e
                result.failures.append(failure)
                continue

            current = fix.content
            result.applied[fixer.id] = fix.fixed_count
            if fix.fixed_count:
                logger.debug(f"Fixer {fixer.id} fixed {fix.fixed_count} instance(s)")

        result.content = current
        engine_logger.log_remediation(
            run_id=run_id,
            applied=result.applied,
            manual=len(result.manual),
            failures=len(result.failures),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return result

    def __repr__(self) -> str:
        return f"RemediationOrchestrator({self._registry!r}, policy={self._policy.value})"
