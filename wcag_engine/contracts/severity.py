"""
Severity - Ordered impact levels for accessibility findings.

Severity is used only for sorting and reporting. It never decides the
order in which rules run.

    critical > serious > moderate > minor > warning > notice
"""

from enum import Enum


class Severity(Enum):
    """Impact of an accessibility issue, most severe first."""

    CRITICAL = "critical"
    """Blocks access to content for some users."""

    SERIOUS = "serious"
    """Causes significant difficulty for assistive technology users."""

    MODERATE = "moderate"
    """Causes some difficulty; a workaround usually exists."""

    MINOR = "minor"
    """Annoyance or redundancy with little functional impact."""

    WARNING = "warning"
    """Likely problem that needs human review."""

    NOTICE = "notice"
    """Informational; review when convenient."""

    @property
    def rank(self) -> int:
        """Position in the severity order (0 = most severe)."""
        return _ORDER.index(self)

    @property
    def priority(self) -> str:
        """Triage priority label (P0 = fix first)."""
        return f"P{self.rank}"

    @property
    def deduction(self) -> int:
        """Points this severity removes from the 100-point score."""
        return _DEDUCTIONS.get(self, 0)

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a severity name case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r}") from None

    def __lt__(self, other: "Severity") -> bool:
        # "less" means less severe so that max() returns the worst one
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank


class WcagLevel(Enum):
    """WCAG conformance level of a success criterion."""

    A = "A"
    AA = "AA"
    AAA = "AAA"


_ORDER = [
    Severity.CRITICAL,
    Severity.SERIOUS,
    Severity.MODERATE,
    Severity.MINOR,
    Severity.WARNING,
    Severity.NOTICE,
]

_DEDUCTIONS = {
    Severity.CRITICAL: 10,
    Severity.SERIOUS: 5,
    Severity.MODERATE: 2,
    Severity.MINOR: 1,
}
