"""
Orchestrator module - Coordinates scans and remediation runs.

Usage:
    from wcag_engine.orchestrator import ScanOrchestrator, RemediationOrchestrator

    report = ScanOrchestrator().run(html)
    result = RemediationOrchestrator().run_for_issues(html, report.issues)
"""

from .contracts import FailurePolicy
from .scan import ScanOrchestrator
from .remediation import RemediationOrchestrator


__all__ = [
    # Contracts
    "FailurePolicy",
    # Main
    "ScanOrchestrator",
    "RemediationOrchestrator",
]
