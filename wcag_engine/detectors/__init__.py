"""
Detection Rules - Read-only accessibility checks.

Each rule inspects a parsed Document and returns Issues tagged with a
stable id, a severity and the WCAG success criterion it tests.

Components:
- DetectionRule: Abstract base class for all detection rules
- Concrete Rules: one class per rule id, grouped by topic

Usage:
    from wcag_engine.detectors import MissingAltTextRule

    issues = MissingAltTextRule().detect(doc)
"""

from .base_rule import DetectionRule
from .aria import (
    AriaAttributeRule,
    AriaRoleRule,
    AriaStateRule,
    HiddenContentRule,
    InvalidAriaCombinationRule,
    LiveRegionRule,
    RedundantAriaRule,
)
from .structure import (
    LandmarkRoleRule,
    PageStructureRule,
    SemanticHtmlRule,
    SkipLinkRule,
    ViewportRule,
)
from .images import (
    AltTextQualityRule,
    BackgroundImageRule,
    ComplexImageRule,
    DecorativeImageRule,
    EmptyAltTextRule,
    ImageMapAltRule,
    LogoImageRule,
    MissingAltTextRule,
    RedundantAltTextRule,
    SvgAccessibilityRule,
)
from .headings import (
    EmptyHeadingRule,
    HeadingLengthRule,
    HeadingNestingRule,
    HeadingUniquenessRule,
    HeadingVisualRule,
    MissingH1Rule,
    MultipleH1Rule,
    SkippedHeadingLevelRule,
)
from .links import (
    DownloadLinkRule,
    DuplicateLinkTextRule,
    EmptyLinkRule,
    ExternalLinkRule,
    GenericLinkTextRule,
    LinkDestinationRule,
    NewWindowLinkRule,
)
from .forms import (
    AutocompleteRule,
    ButtonLabelRule,
    CustomControlRule,
    ErrorMessageRule,
    FieldsetLegendRule,
    FormAriaRule,
    InputTypeRule,
    MissingFormLabelRule,
    OrphanedLabelRule,
    PlaceholderLabelRule,
    RequiredAttributeRule,
)
from .tables import (
    ComplexTableRule,
    EmptyTableCellRule,
    LayoutTableRule,
    TableCaptionRule,
    TableHeaderRule,
)
from .media import (
    AudioAccessibilityRule,
    IframeTitleRule,
    MediaAlternativeRule,
    VideoAccessibilityRule,
)
from .interaction import (
    CustomWidgetKeyboardRule,
    FocusIndicatorRule,
    FocusOrderRule,
    InteractiveElementRule,
    KeyboardTrapRule,
    ModalAccessibilityRule,
    PositiveTabindexRule,
    TouchGestureRule,
    TouchTargetRule,
)
from .contrast import ColorRelianceRule, ComplexContrastRule, TextColorContrastRule


__all__ = [
    # Base
    "DetectionRule",
    # ARIA and structure
    "AriaRoleRule",
    "AriaAttributeRule",
    "AriaStateRule",
    "InvalidAriaCombinationRule",
    "SemanticHtmlRule",
    "LandmarkRoleRule",
    "RedundantAriaRule",
    "HiddenContentRule",
    "LiveRegionRule",
    "PageStructureRule",
    "ViewportRule",
    "SkipLinkRule",
    # Images
    "DecorativeImageRule",
    "LogoImageRule",
    "MissingAltTextRule",
    "EmptyAltTextRule",
    "RedundantAltTextRule",
    "AltTextQualityRule",
    "ComplexImageRule",
    "ImageMapAltRule",
    "SvgAccessibilityRule",
    "BackgroundImageRule",
    # Headings
    "MissingH1Rule",
    "MultipleH1Rule",
    "EmptyHeadingRule",
    "SkippedHeadingLevelRule",
    "HeadingNestingRule",
    "HeadingLengthRule",
    "HeadingUniquenessRule",
    "HeadingVisualRule",
    # Links
    "EmptyLinkRule",
    "GenericLinkTextRule",
    "DuplicateLinkTextRule",
    "NewWindowLinkRule",
    "DownloadLinkRule",
    "ExternalLinkRule",
    "LinkDestinationRule",
    # Forms
    "MissingFormLabelRule",
    "PlaceholderLabelRule",
    "FieldsetLegendRule",
    "RequiredAttributeRule",
    "ErrorMessageRule",
    "AutocompleteRule",
    "InputTypeRule",
    "CustomControlRule",
    "ButtonLabelRule",
    "OrphanedLabelRule",
    "FormAriaRule",
    # Tables
    "TableHeaderRule",
    "TableCaptionRule",
    "ComplexTableRule",
    "LayoutTableRule",
    "EmptyTableCellRule",
    # Media
    "IframeTitleRule",
    "VideoAccessibilityRule",
    "AudioAccessibilityRule",
    "MediaAlternativeRule",
    # Interaction
    "PositiveTabindexRule",
    "InteractiveElementRule",
    "ModalAccessibilityRule",
    "FocusIndicatorRule",
    "KeyboardTrapRule",
    "FocusOrderRule",
    "CustomWidgetKeyboardRule",
    "TouchTargetRule",
    "TouchGestureRule",
    # Color
    "TextColorContrastRule",
    "ColorRelianceRule",
    "ComplexContrastRule",
]
