"""
Analyzers - DOM access and the pure helpers rules are built on.
"""

from .dom_adapter import Document, DocumentAdapter, ROOT_TAG
from .color import contrast_ratio, parse_color, relative_luminance
from .wcag import WCAG_CRITERIA, criterion_level, criterion_name

__all__ = [
    "Document",
    "DocumentAdapter",
    "ROOT_TAG",
    "contrast_ratio",
    "parse_color",
    "relative_luminance",
    "WCAG_CRITERIA",
    "criterion_level",
    "criterion_name",
]
