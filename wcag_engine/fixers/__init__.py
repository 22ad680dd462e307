"""
Fix Rules - Markup remediation paired with detection rules.

Each fixer shares its id with a detection rule and rewrites the markup
pattern that rule reports. Inert fixers exist for defects that need a
human: they never change content and are reported as manual items.

Usage:
    from wcag_engine.fixers import TableHeaderFix

    result = TableHeaderFix().apply("<table><tr><td>A</td></tr></table>")
    result.fixed_count  # 1
"""

from .base_rule import FixRule, InertFixRule
from .aria import (
    AriaAttributeFix,
    AriaRoleFix,
    AriaStateFix,
    HiddenContentFix,
    InvalidAriaCombinationFix,
    LiveRegionFix,
    RedundantAriaFix,
)
from .structure import LandmarkRoleFix, PageStructureFix, SemanticHtmlFix, SkipLinkFix
from .images import (
    AltTextQualityFix,
    BackgroundImageFix,
    ComplexImageFix,
    DecorativeImageFix,
    EmptyAltTextFix,
    ImageMapAltFix,
    LogoImageFix,
    MissingAltTextFix,
    RedundantAltTextFix,
    SvgAccessibilityFix,
)
from .headings import (
    EmptyHeadingFix,
    HeadingLengthFix,
    HeadingUniquenessFix,
    HeadingVisualFix,
    MissingH1Fix,
    MultipleH1Fix,
    SkippedHeadingLevelFix,
)
from .links import (
    DownloadLinkFix,
    EmptyLinkFix,
    ExternalLinkFix,
    GenericLinkTextFix,
    LinkDestinationFix,
    NewWindowLinkFix,
)
from .forms import (
    AutocompleteFix,
    ButtonLabelFix,
    CustomControlFix,
    ErrorMessageFix,
    FieldsetLegendFix,
    FormAriaFix,
    InputTypeFix,
    MissingFormLabelFix,
    OrphanedLabelFix,
    PlaceholderLabelFix,
    RequiredAttributeFix,
)
from .tables import (
    ComplexTableFix,
    EmptyTableCellFix,
    LayoutTableFix,
    TableCaptionFix,
    TableHeaderFix,
)
from .media import (
    AudioAccessibilityFix,
    IframeTitleFix,
    MediaAlternativeFix,
    VideoAccessibilityFix,
)
from .interaction import InteractiveElementFix, ModalAccessibilityFix, PositiveTabindexFix
from .inert import (
    ColorRelianceFix,
    ComplexContrastFix,
    CustomWidgetKeyboardFix,
    FocusIndicatorFix,
    FocusOrderFix,
    HeadingNestingFix,
    KeyboardTrapFix,
    TextColorContrastFix,
    TouchGestureFix,
    TouchTargetFix,
    ViewportFix,
)


__all__ = [
    # Base
    "FixRule",
    "InertFixRule",
    # ARIA and structure
    "AriaRoleFix",
    "AriaAttributeFix",
    "AriaStateFix",
    "InvalidAriaCombinationFix",
    "SemanticHtmlFix",
    "LandmarkRoleFix",
    "RedundantAriaFix",
    "HiddenContentFix",
    "LiveRegionFix",
    "PageStructureFix",
    "SkipLinkFix",
    # Images
    "DecorativeImageFix",
    "LogoImageFix",
    "MissingAltTextFix",
    "EmptyAltTextFix",
    "RedundantAltTextFix",
    "AltTextQualityFix",
    "ComplexImageFix",
    "ImageMapAltFix",
    "SvgAccessibilityFix",
    "BackgroundImageFix",
    # Headings
    "MissingH1Fix",
    "MultipleH1Fix",
    "EmptyHeadingFix",
    "SkippedHeadingLevelFix",
    "HeadingLengthFix",
    "HeadingUniquenessFix",
    "HeadingVisualFix",
    # Links
    "EmptyLinkFix",
    "GenericLinkTextFix",
    "NewWindowLinkFix",
    "DownloadLinkFix",
    "ExternalLinkFix",
    "LinkDestinationFix",
    # Forms
    "MissingFormLabelFix",
    "PlaceholderLabelFix",
    "FieldsetLegendFix",
    "RequiredAttributeFix",
    "ErrorMessageFix",
    "AutocompleteFix",
    "InputTypeFix",
    "CustomControlFix",
    "ButtonLabelFix",
    "OrphanedLabelFix",
    "FormAriaFix",
    # Tables
    "TableHeaderFix",
    "TableCaptionFix",
    "ComplexTableFix",
    "LayoutTableFix",
    "EmptyTableCellFix",
    # Media
    "IframeTitleFix",
    "VideoAccessibilityFix",
    "AudioAccessibilityFix",
    "MediaAlternativeFix",
    # Interaction
    "PositiveTabindexFix",
    "InteractiveElementFix",
    "ModalAccessibilityFix",
    # Manual remediation
    "ViewportFix",
    "HeadingNestingFix",
    "FocusIndicatorFix",
    "KeyboardTrapFix",
    "FocusOrderFix",
    "CustomWidgetKeyboardFix",
    "TouchTargetFix",
    "TouchGestureFix",
    "TextColorContrastFix",
    "ColorRelianceFix",
    "ComplexContrastFix",
]
