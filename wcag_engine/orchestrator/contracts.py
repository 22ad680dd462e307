"""
Orchestrator Contracts - Policies shared by the scan and remediation runs.
"""

from enum import Enum
from typing import Union


class FailurePolicy(Enum):
    """
    What an orchestrator does when a single rule raises.

    The same policy applies to detect() during scans and to apply() during
    remediation.
    """

    FAIL_OPEN = "fail_open"
    """Record a RuleFailure, skip the rule and keep going."""

    FAIL_CLOSED = "fail_closed"
    """Abort the run with RuleEvaluationError."""

    @classmethod
    def from_value(cls, value: Union["FailurePolicy", str, None]) -> "FailurePolicy":
        """
        Coerce a setting value ("fail_open", "FAIL-CLOSED", ...) to a policy.

        None means the default, FAIL_OPEN.
        """
        if value is None:
            return cls.FAIL_OPEN
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ValueError(f"Unknown failure policy: {value!r}")
