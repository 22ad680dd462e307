# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------
# Malformed markup is never an exception: the adapter recovers it.
# These cover rule faults under the fail-closed policy and caller mistakes.

from .results import RuleFailure


class WcagEngineError(Exception):
    """Base exception for all engine errors."""
    pass


class RuleEvaluationError(WcagEngineError):
    """Raised when a rule faults and the failure policy is fail-closed."""

    def __init__(self, failure: RuleFailure):
        super().__init__(failure.describe())
        self.failure = failure


class UnknownRuleError(WcagEngineError, KeyError):
    """Raised when a rule id or alias is not registered."""

    def __init__(self, rule_id: str):
        super().__init__(rule_id)
        self.rule_id = rule_id

    def __str__(self) -> str:
        return f"Unknown rule id: {self.rule_id!r}"


class RuleRegistrationError(WcagEngineError, ValueError):
    """Raised on duplicate ids or a fixer paired with the wrong detector."""
    pass
