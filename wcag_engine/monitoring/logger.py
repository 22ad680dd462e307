"""
Engine Logger - Structured logging for scans and remediation runs.

This module configures the "wcag_engine" package logger (module loggers
such as "wcag_engine.registry" propagate to it) and provides EngineLogger
for structured run events.

Log Format:
==========
Each structured entry is one JSON object with:
- event name (scan_completed, remediation_completed, rule_failed)
- run id (for tracing)
- counts and duration
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

# Configure the engine logger
logger = logging.getLogger("wcag_engine")
logger.setLevel(logging.INFO)

# Create console handler if not exists
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Apply a level name (e.g. settings.LOG_LEVEL) to the engine logger.

    Unknown names fall back to INFO. When `stream` is given the console
    handler writes there instead of stdout.
    """
    if stream is not None:
        for existing in logger.handlers:
            if isinstance(existing, logging.StreamHandler):
                existing.setStream(stream)
    resolved = logging.getLevelName(level.upper()) if level else logging.INFO
    if not isinstance(resolved, int):
        logger.warning(f"Unknown log level {level!r}, using INFO")
        resolved = logging.INFO
    logger.setLevel(resolved)


class EngineLogger:
    """
    Structured logger for orchestrator runs.

    Usage:
        engine_logger = EngineLogger()
        engine_logger.log_scan(run_id="a1b2", rules_run=70, issues=12,
                               failures=0, duration_ms=8.4)
    """

    def __init__(self):
        """Initialize the engine logger."""
        self._logger = logger

    def log_scan(
        self,
        run_id: str,
        rules_run: int,
        issues: int,
        failures: int,
        duration_ms: float,
        score: Optional[int] = None,
    ) -> None:
        """
        Log a completed scan.

        Args:
            run_id: Identifier of the scan run
            rules_run: Number of detection rules evaluated
            issues: Number of issues found
            failures: Number of rules that raised
            duration_ms: Wall time of the scan
            score: Accessibility score of the report
        """
        log_data = {
            "event": "scan_completed",
            "run_id": run_id,
            "rules_run": rules_run,
            "issues": issues,
            "failures": failures,
            "score": score,
            "duration_ms": round(duration_ms, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        level = logging.INFO if failures == 0 else logging.WARNING
        self._logger.log(level, f"Scan: {json.dumps(log_data)}")

    def log_remediation(
        self,
        run_id: str,
        applied: Dict[str, int],
        manual: int,
        failures: int,
        duration_ms: float,
    ) -> None:
        """
        Log a completed remediation run.

        Args:
            run_id: Identifier of the remediation run
            applied: Fixed count per rule id
            manual: Number of selected inert rules
            failures: Number of fixers that raised
            duration_ms: Wall time of the run
        """
        log_data = {
            "event": "remediation_completed",
            "run_id": run_id,
            "fixers_run": len(applied),
            "fixed_count": sum(applied.values()),
            "changed_rules": [rule_id for rule_id, count in applied.items() if count],
            "manual": manual,
            "failures": failures,
            "duration_ms": round(duration_ms, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        level = logging.INFO if failures == 0 else logging.WARNING
        self._logger.log(level, f"Remediation: {json.dumps(log_data)}")

    def log_rule_failure(
        self,
        run_id: str,
        rule_id: str,
        phase: str,
        error: Exception,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a rule that raised.

        Args:
            run_id: Identifier of the run
            rule_id: Failing rule id
            phase: 'detect' or 'apply'
            error: The exception raised
            metadata: Additional metadata
        """
        log_data = {
            "event": "rule_failed",
            "run_id": run_id,
            "rule_id": rule_id,
            "phase": phase,
            "error_type": type(error).__name__,
            "error": str(error),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            log_data["metadata"] = metadata
        self._logger.error(f"Rule failure: {json.dumps(log_data)}")


# Singleton instance for convenience
engine_logger = EngineLogger()
