"""
Contracts - Data structures shared by rules and orchestrators.

Provides:
- ScanContext: ambient per-call configuration
- Severity, WcagLevel: ordered impact and conformance levels
- Issue, RuleDescription: detection output and rule metadata
- FixResult, RuleFailure, ScanReport, RemediationResult: run outputs
- Engine exceptions
"""

from .severity import Severity, WcagLevel
from .context import ScanContext
from .issues import Issue, RuleDescription
from .results import FixResult, RuleFailure, ScanReport, RemediationResult
from .errors import (
    WcagEngineError,
    RuleEvaluationError,
    UnknownRuleError,
    RuleRegistrationError,
)

__all__ = [
    "ScanContext",
    "Severity",
    "WcagLevel",
    "Issue",
    "RuleDescription",
    "FixResult",
    "RuleFailure",
    "ScanReport",
    "RemediationResult",
    "WcagEngineError",
    "RuleEvaluationError",
    "UnknownRuleError",
    "RuleRegistrationError",
]
