"""
WCAG Rule Engine - detect and remediate accessibility issues in HTML fragments.

Components:
- analyzers: DocumentAdapter (parse/serialize) and pure DOM helpers
- detectors: read-only DetectionRules producing Issues
- fixers: FixRules rewriting the markup a detector reports
- registry: ordered (detector, fixer) catalogue with legacy aliases
- orchestrator: ScanOrchestrator and RemediationOrchestrator
- reporting: JSON/CSV export and summaries

Usage:
    from wcag_engine import ScanOrchestrator, RemediationOrchestrator

    report = ScanOrchestrator().run(html)
    result = RemediationOrchestrator().run_for_issues(html, report.issues)
"""

from .contracts import (
    FixResult,
    Issue,
    RemediationResult,
    RuleDescription,
    RuleEvaluationError,
    RuleFailure,
    RuleRegistrationError,
    ScanContext,
    ScanReport,
    Severity,
    UnknownRuleError,
    WcagEngineError,
    WcagLevel,
)
from .analyzers import Document, DocumentAdapter
from .registry import RuleRegistry, create_default_registry
from .orchestrator import FailurePolicy, RemediationOrchestrator, ScanOrchestrator

__version__ = "1.0.0"

__all__ = [
    # Contracts
    "FixResult",
    "Issue",
    "RemediationResult",
    "RuleDescription",
    "RuleFailure",
    "ScanContext",
    "ScanReport",
    "Severity",
    "WcagLevel",
    # Errors
    "WcagEngineError",
    "RuleEvaluationError",
    "RuleRegistrationError",
    "UnknownRuleError",
    # Components
    "Document",
    "DocumentAdapter",
    "RuleRegistry",
    "create_default_registry",
    "FailurePolicy",
    "ScanOrchestrator",
    "RemediationOrchestrator",
]
