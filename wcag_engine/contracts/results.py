"""
Results - Outputs of fix rules and of the two orchestrators.

These structures carry information back to the caller:
1. FixResult: output of a single fix rule
2. RuleFailure: a rule that raised during detect or apply
3. ScanReport: aggregated issues of one scan
4. RemediationResult: outcome of a sequential remediation run
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from .issues import Issue
from .severity import Severity


@dataclass(frozen=True)
class FixResult:
    """Output of FixRule.apply()."""

    fixed_count: int
    """Number of instances the rule changed (0 when nothing matched)."""

    content: str
    """Resulting HTML fragment."""

    def __post_init__(self):
        if self.fixed_count < 0:
            raise ValueError(f"fixed_count must be non-negative, got {self.fixed_count}")

    @property
    def changed(self) -> bool:
        return self.fixed_count > 0


@dataclass(frozen=True)
class RuleFailure:
    """A rule that raised while the orchestrator was running it."""

    rule_id: str
    """Id of the failing rule."""

    phase: str
    """'detect' or 'apply'."""

    error_type: str
    """Exception class name."""

    message: str
    """Exception message."""

    def to_dict(self) -> Dict[str, str]:
        return {
            "rule_id": self.rule_id,
            "phase": self.phase,
            "error_type": self.error_type,
            "message": self.message,
        }

    def describe(self) -> str:
        return f"{self.rule_id} failed during {self.phase}: {self.error_type}: {self.message}"


@dataclass
class ScanReport:
    """
    Issues found by one ScanOrchestrator run.

    Issues are kept in registry order; use sorted_by_severity() for a
    worst-first view. Iterating the report iterates its issues.
    """

    issues: List[Issue] = field(default_factory=list)
    """Issues in registry order."""

    failures: List[RuleFailure] = field(default_factory=list)
    """Rules that raised during detection (fail-open policy)."""

    rules_run: List[str] = field(default_factory=list)
    """Ids of the rules that were evaluated, in order."""

    @property
    def complete(self) -> bool:
        """True when every selected rule ran without failing."""
        return not self.failures

    @property
    def score(self) -> int:
        """Accessibility score: 100 minus severity deductions, floored at 0."""
        deductions = sum(issue.severity.deduction for issue in self.issues)
        return max(0, 100 - deductions)

    def count_by_severity(self) -> Dict[Severity, int]:
        """Issue counts for every severity (zeros included)."""
        counts = Counter(issue.severity for issue in self.issues)
        return {severity: counts.get(severity, 0) for severity in Severity}

    def sorted_by_severity(self) -> List[Issue]:
        """Issues worst first; registry order is kept within a severity."""
        return sorted(self.issues, key=lambda issue: issue.severity.rank)

    def issues_for(self, rule_id: str) -> List[Issue]:
        return [issue for issue in self.issues if issue.rule_id == rule_id]

    def rule_ids(self) -> List[str]:
        """Distinct ids of rules that reported issues, in report order."""
        seen: List[str] = []
        for issue in self.issues:
            if issue.rule_id not in seen:
                seen.append(issue.rule_id)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "score": self.score,
            "complete": self.complete,
            "rules_run": list(self.rules_run),
            "counts": {s.value: n for s, n in self.count_by_severity().items()},
            "issues": [issue.to_dict() for issue in self.issues],
            "failures": [failure.to_dict() for failure in self.failures],
        }

    def __iter__(self) -> Iterator[Issue]:
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)


@dataclass
class RemediationResult:
    """Outcome of a RemediationOrchestrator run."""

    content: str
    """Final content after every fixer ran."""

    applied: Dict[str, int] = field(default_factory=dict)
    """Fixed count per rule id, in execution order."""

    manual: List[str] = field(default_factory=list)
    """Rules needing manual remediation: inert fixers and rules without one."""

    failures: List[RuleFailure] = field(default_factory=list)
    """Fixers that raised and were skipped."""

    @property
    def fixed_count(self) -> int:
        """Total number of fixes across all fixers."""
        return sum(self.applied.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed_count": self.fixed_count,
            "applied": dict(self.applied),
            "manual": list(self.manual),
            "failures": [failure.to_dict() for failure in self.failures],
            "content": self.content,
        }
