"""
ScanContext - Ambient platform state passed explicitly to every run.

Rules never read global settings; orchestrators attach a ScanContext to
each Document they parse.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse


@dataclass(frozen=True)
class ScanContext:
    """Per-call configuration consumed by context-aware rules."""

    site_url: str = ""
    """Home URL of the scanned site (external-link rule)."""

    language: str = "en"
    """Language code written by the page-structure fixer."""

    skip_link_min_length: int = 1000
    """Content length above which a skip link is expected."""

    snippet_max_length: int = 250
    """Truncation length of Issue.html_snippet."""

    @property
    def site_host(self) -> Optional[str]:
        """Lower-cased host of site_url without 'www.', or None if unknown."""
        if not self.site_url:
            return None
        url = self.site_url if "//" in self.site_url else f"//{self.site_url}"
        host = (urlparse(url).hostname or "").lower()
        if host.startswith("www."):
            host = host[4:]
        return host or None

    @classmethod
    def from_settings(cls, settings) -> "ScanContext":
        """Build a context from a Settings instance."""
        return cls(
            site_url=settings.SITE_URL,
            language=settings.DEFAULT_LANGUAGE,
            skip_link_min_length=settings.SKIP_LINK_MIN_LENGTH,
            snippet_max_length=settings.SNIPPET_MAX_LENGTH,
        )
