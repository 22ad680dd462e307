"""
DetectionRule - Abstract base class for read-only accessibility checks.

Each rule inspects a parsed Document and returns Issues. Rules never
mutate the tree, never depend on other rules, and keep no state between
calls, so one instance can serve any number of scans.

Usage:
    class MyRule(DetectionRule):
        title = "Something is wrong"
        wcag_criterion = "1.1.1"
        default_severity = Severity.SERIOUS
        message = "Element is wrong"

        @property
        def id(self) -> str:
            return "my-rule"

        def detect(self, doc: Document) -> List[Issue]:
            return [self.make_issue(doc, el) for el in doc.find_all("blink")]
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bs4 import Tag

from ..analyzers.accessibility import build_selector, snippet
from ..analyzers.dom_adapter import Document
from ..analyzers.wcag import criterion_level
from ..contracts.issues import Issue, RuleDescription
from ..contracts.severity import Severity, WcagLevel


class DetectionRule(ABC):
    """
    Abstract base class for detection rules.

    Subclasses must implement:
    - id: Stable kebab-case id, shared with the paired fix rule
    - detect(): Return the issues found in a document

    and set the class metadata:
    - title, wcag_criterion, default_severity, message
    - description, recommendation (optional)
    """

    title: str = ""
    wcag_criterion: str = ""
    default_severity: Severity = Severity.WARNING
    message: str = ""
    description: str = ""
    recommendation: str = ""

    @property
    @abstractmethod
    def id(self) -> str:
        """
        Stable rule id.

        Returns:
            Kebab-case id (e.g. 'missing-alt-text')
        """
        pass

    @property
    def name(self) -> str:
        """
        Rule name for logging and debugging.

        Returns:
            Class name by default
        """
        return self.__class__.__name__

    @property
    def wcag_level(self) -> WcagLevel:
        return criterion_level(self.wcag_criterion)

    def describe(self) -> RuleDescription:
        """Static metadata of this rule."""
        return RuleDescription(
            rule_id=self.id,
            title=self.title,
            message=self.message,
            wcag_criterion=self.wcag_criterion,
            wcag_level=self.wcag_level,
            default_severity=self.default_severity,
        )

    @abstractmethod
    def detect(self, doc: Document) -> List[Issue]:
        """
        Inspect a document.

        Args:
            doc: Parsed document (read-only)

        Returns:
            Issues in document order; empty when nothing matches
        """
        pass

    def make_issue(
        self,
        doc: Document,
        element: Optional[Tag] = None,
        message: Optional[str] = None,
        severity: Optional[Severity] = None,
        recommendation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Issue:
        """
        Build an Issue with this rule's defaults.

        Selector and snippet are captured now, as strings.
        """
        return Issue(
            rule_id=self.id,
            severity=severity or self.default_severity,
            wcag_criterion=self.wcag_criterion,
            wcag_level=self.wcag_level,
            message=message or self.message,
            description=self.description,
            selector=build_selector(element) if element is not None else "",
            html_snippet=(
                snippet(element, doc.context.snippet_max_length)
                if element is not None else ""
            ),
            recommendation=recommendation or self.recommendation,
            context=dict(context or {}),
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.name}(id={self.id!r}, severity={self.default_severity.value})"

    def __eq__(self, other: object) -> bool:
        """Equality check based on class type."""
        if not isinstance(other, DetectionRule):
            return False
        return self.__class__ == other.__class__

    def __hash__(self) -> int:
        """Hash based on class name."""
        return hash(self.__class__.__name__)
