"""
FixRule - Abstract base class for markup remediation rules.

Each rule shares its id with the detection rule whose issues it resolves.
apply() parses the raw fragment, lets transform() mutate the tree and
serializes the result. When transform() changes nothing, the raw input is
returned untouched so clean content is never re-formatted.

Usage:
    class MyFixRule(FixRule):
        @property
        def id(self) -> str:
            return "my-rule"

        def transform(self, doc: Document) -> int:
            fixed = 0
            for el in doc.find_all("blink"):
                el.name = "span"
                fixed += 1
            return fixed
"""

from abc import ABC, abstractmethod
import logging
from typing import Optional

from ..analyzers.dom_adapter import Document, DocumentAdapter
from ..contracts.context import ScanContext
from ..contracts.results import FixResult


logger = logging.getLogger(__name__)

_adapter = DocumentAdapter()


class FixRule(ABC):
    """
    Abstract base class for fix rules.

    Subclasses must implement:
    - id: Same id as the paired DetectionRule
    - transform(): Mutate the document, return the number of fixes

    Invariants every subclass keeps:
    - Idempotent: a second apply() on its own output fixes nothing
    - No-op on clean input: content is returned unchanged
    """

    inert: bool = False
    """True for rules that never change markup (manual remediation)."""

    @property
    @abstractmethod
    def id(self) -> str:
        """
        Id of the detection rule this fixer remediates.

        Returns:
            Kebab-case id
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

    def apply(self, raw: str, context: Optional[ScanContext] = None) -> FixResult:
        """
        Fix every instance of the pattern in a fragment.

        Args:
            raw: HTML fragment
            context: Ambient configuration (site URL, language...)

        Returns:
            FixResult with the fixed count and resulting content
        """
        raw = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
        doc = _adapter.parse(raw, context)
        fixed = self.transform(doc)
        if fixed <= 0:
            return FixResult(fixed_count=0, content=raw)

        logger.debug(f"Rule {self.name} fixed {fixed} instance(s)")
        return FixResult(fixed_count=fixed, content=_adapter.serialize(doc))

    @abstractmethod
    def transform(self, doc: Document) -> int:
        """
        Mutate the document in place.

        Args:
            doc: Parsed document owned by this call

        Returns:
            Number of instances fixed
        """
        pass

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.name}(id={self.id!r}, inert={self.inert})"

    def __eq__(self, other: object) -> bool:
        """Equality check based on class type."""
        if not isinstance(other, FixRule):
            return False
        return self.__class__ == other.__class__

    def __hash__(self) -> int:
        """Hash based on class name."""
        return hash(self.__class__.__name__)


class InertFixRule(FixRule):
    """
    Fix rule for defects that cannot be corrected from markup alone.

    Always returns fixed_count == 0 and the content unchanged. Callers list
    these ids as manual-remediation items instead of treating the issue as
    resolved.
    """

    inert = True

    def apply(self, raw: str, context: Optional[ScanContext] = None) -> FixResult:
        raw = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
        return FixResult(fixed_count=0, content=raw)

    def transform(self, doc: Document) -> int:
        return 0
