"""
Issues - Structured findings produced by detection rules.

An Issue is a detached snapshot: selector and snippet are captured as
strings when the rule runs, so an Issue never keeps a DOM node alive and
can outlive the Document it was found in.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from .severity import Severity, WcagLevel


@dataclass(frozen=True)
class RuleDescription:
    """
    Static metadata of a detection rule.

    Returned by DetectionRule.describe() and used by reporting layers to
    render rule catalogues without running a scan.
    """

    rule_id: str
    """Stable kebab-case rule id."""

    title: str
    """Short human-readable rule name."""

    message: str
    """Default message attached to issues of this rule."""

    wcag_criterion: str
    """WCAG success criterion number (e.g. '1.1.1')."""

    wcag_level: WcagLevel
    """Conformance level of the criterion."""

    default_severity: Severity
    """Severity used when the rule does not override it per issue."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.rule_id,
            "title": self.title,
            "message": self.message,
            "wcag_criterion": self.wcag_criterion,
            "wcag_level": self.wcag_level.value,
            "severity": self.default_severity.value,
        }


@dataclass(frozen=True)
class Issue:
    """
    A single accessibility violation found in a document.

    Example:
        Issue(
            rule_id="missing-alt-text",
            severity=Severity.CRITICAL,
            wcag_criterion="1.1.1",
            wcag_level=WcagLevel.A,
            message="Image is missing alt text",
            selector="div.hero > img",
            html_snippet='<img src="hero.jpg"/>',
        )
    """

    rule_id: str
    """Id of the detection rule that produced this issue."""

    severity: Severity
    """Impact of the issue."""

    wcag_criterion: str
    """WCAG success criterion number."""

    wcag_level: WcagLevel
    """Conformance level of the criterion."""

    message: str
    """One-line summary of what is wrong."""

    description: str = ""
    """Longer explanation of why it matters."""

    selector: str = ""
    """CSS selector locating the offending element at detection time."""

    html_snippet: str = ""
    """Outer HTML of the offending element (truncated)."""

    recommendation: str = ""
    """How to fix it."""

    context: Dict[str, Any] = field(default_factory=dict)
    """Rule-specific details (suggestions, ratios, destinations...)."""

    @property
    def priority(self) -> str:
        """Triage priority derived from severity."""
        return self.severity.priority

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "priority": self.priority,
            "wcag_criterion": self.wcag_criterion,
            "wcag_level": self.wcag_level.value,
            "message": self.message,
            "description": self.description,
            "selector": self.selector,
            "html_snippet": self.html_snippet,
            "recommendation": self.recommendation,
            "context": dict(self.context),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """Create from dictionary."""
        return cls(
            rule_id=data["rule_id"],
            severity=Severity.parse(data["severity"]),
            wcag_criterion=data.get("wcag_criterion", ""),
            wcag_level=WcagLevel(data.get("wcag_level", "A")),
            message=data.get("message", ""),
            description=data.get("description", ""),
            selector=data.get("selector", ""),
            html_snippet=data.get("html_snippet", ""),
            recommendation=data.get("recommendation", ""),
            context=dict(data.get("context", {})),
        )

    def describe(self) -> str:
        """Generate human-readable description of the issue."""
        text = (
            f"[{self.severity.value}] {self.rule_id} "
            f"(WCAG {self.wcag_criterion} {self.wcag_level.value}): {self.message}"
        )
        if self.selector:
            text += f" at {self.selector}"
        return text
