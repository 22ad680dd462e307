"""
RuleRegistry - Ordered catalogue of detection rules and their fixers.

Each entry pairs a DetectionRule with the FixRule sharing its id (or no
fixer, for issues that need a human). Order is registration order and is
significant: remediation runs fixers in that order.

Usage:
    from wcag_engine.registry import create_default_registry

    registry = create_default_registry()
    registry.detector("missing-alt-text").detect(doc)
    registry.fixer("contrast")        # alias of text-color-contrast
    registry.is_inert("keyboard-trap")  # True

    # Or build a custom registry
    registry = RuleRegistry()
    registry.register(MissingAltTextRule(), MissingAltTextFix())
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from .contracts.errors import RuleRegistrationError, UnknownRuleError
from .detectors.base_rule import DetectionRule
from .fixers.base_rule import FixRule


logger = logging.getLogger(__name__)


# Short legacy keys -> canonical rule ids
ALIASES: Dict[str, str] = {
    "contrast": "text-color-contrast",
    "color-contrast": "text-color-contrast",
    "missing-label": "missing-form-label",
    "form-label": "missing-form-label",
    "skipped-heading": "skipped-heading-level",
    "heading-order": "skipped-heading-level",
    "widget-keyboard": "custom-widget-keyboard",
    "alt-text": "missing-alt-text",
    "missing-alt": "missing-alt-text",
    "empty-alt": "empty-alt-text",
    "redundant-alt": "redundant-alt-text",
    "decorative": "decorative-image",
    "logo": "logo-image",
    "svg": "svg-accessibility",
    "image-map": "image-map-alt",
    "viewport": "viewport-check",
    "lang": "page-structure",
    "landmarks": "landmark-role",
    "live-regions": "live-region",
    "link-text": "generic-link-text",
    "new-window": "new-window-link",
    "autocomplete": "autocomplete-attribute",
    "fieldset": "fieldset-legend",
    "button-name": "button-label",
    "table-headers": "table-header",
    "iframe": "iframe-title",
    "video": "video-accessibility",
    "audio": "audio-accessibility",
    "tabindex": "positive-tabindex",
    "modal": "modal-accessibility",
    "focus-visible": "focus-indicator",
}


class RuleRegistry:
    """
    Ordered registry of (detector, fixer) pairs indexed by rule id.

    Features:
    - Registration order is execution order
    - Legacy aliases resolve to canonical ids
    - Inert fixers are reported as manual remediation
    """

    def __init__(self, aliases: Optional[Dict[str, str]] = None):
        """
        Initialize an empty registry.

        Args:
            aliases: Alias map (defaults to ALIASES)
        """
        self._detectors: Dict[str, DetectionRule] = {}
        self._fixers: Dict[str, FixRule] = {}
        self._order: List[str] = []
        self._aliases: Dict[str, str] = dict(ALIASES if aliases is None else aliases)

    def register(self, detector: DetectionRule, fixer: Optional[FixRule] = None) -> None:
        """
        Register a detection rule and its optional fixer.

        Args:
            detector: DetectionRule instance
            fixer: FixRule with the same id, or None for manual-only rules

        Raises:
            RuleRegistrationError: duplicate id, or fixer id differs
        """
        rule_id = detector.id
        if rule_id in self._detectors:
            raise RuleRegistrationError(f"Rule already registered: {rule_id!r}")
        if fixer is not None and fixer.id != rule_id:
            raise RuleRegistrationError(
                f"Fixer {fixer.name} has id {fixer.id!r}, expected {rule_id!r}"
            )

        self._detectors[rule_id] = detector
        if fixer is not None:
            self._fixers[rule_id] = fixer
        self._order.append(rule_id)
        logger.debug(f"Registered rule: {rule_id} ({detector.name})")

    def register_all(self, pairs: Iterable[Tuple[DetectionRule, Optional[FixRule]]]) -> None:
        """
        Register multiple rules at once.

        Args:
            pairs: (detector, fixer) tuples in execution order
        """
        for detector, fixer in pairs:
            self.register(detector, fixer)

    def unregister(self, rule_id: str) -> bool:
        """
        Remove a rule and its fixer.

        Args:
            rule_id: Id or alias of the rule

        Returns:
            True if the rule was found and removed
        """
        canonical = self._aliases.get(rule_id, rule_id)
        if canonical not in self._detectors:
            return False
        del self._detectors[canonical]
        self._fixers.pop(canonical, None)
        self._order.remove(canonical)
        logger.debug(f"Unregistered rule: {canonical}")
        return True

    def resolve(self, rule_id: str) -> str:
        """
        Canonical id for an id or alias.

        Raises:
            UnknownRuleError: neither a registered id nor an alias of one
        """
        if rule_id in self._detectors:
            return rule_id
        canonical = self._aliases.get(rule_id)
        if canonical is not None and canonical in self._detectors:
            return canonical
        raise UnknownRuleError(rule_id)

    def detector(self, rule_id: str) -> DetectionRule:
        return self._detectors[self.resolve(rule_id)]

    def fixer(self, rule_id: str) -> FixRule:
        """
        Fixer for a rule id or alias.

        Raises:
            UnknownRuleError: unknown id, or the rule has no fixer
        """
        canonical = self.resolve(rule_id)
        if canonical not in self._fixers:
            raise UnknownRuleError(rule_id)
        return self._fixers[canonical]

    def has_fixer(self, rule_id: str) -> bool:
        return self.resolve(rule_id) in self._fixers

    def is_inert(self, rule_id: str) -> bool:
        """True when the rule's fixer never changes markup."""
        fixer = self._fixers.get(self.resolve(rule_id))
        return fixer is not None and fixer.inert

    @property
    def detectors(self) -> List[DetectionRule]:
        """Detection rules in registration order."""
        return [self._detectors[rule_id] for rule_id in self._order]

    @property
    def fixers(self) -> List[FixRule]:
        """Fixers in registration order."""
        return [self._fixers[rule_id] for rule_id in self._order if rule_id in self._fixers]

    @property
    def ids(self) -> List[str]:
        return list(self._order)

    @property
    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, rule_id: object) -> bool:
        if not isinstance(rule_id, str):
            return False
        return rule_id in self._detectors or self._aliases.get(rule_id) in self._detectors

    def __repr__(self) -> str:
        return f"RuleRegistry({len(self._order)} rules, {len(self._fixers)} fixers)"


def create_default_registry() -> RuleRegistry:
    """
    Create a RuleRegistry with the full rule catalogue registered.

    Decorative image handling is registered before alt-text generation so
    decorative images are never given generated alt text.

    Returns:
        Configured RuleRegistry ready to use
    """
    from . import detectors as d
    from . import fixers as f

    registry = RuleRegistry()
    registry.register_all([
        # ARIA and structure
        (d.AriaRoleRule(), f.AriaRoleFix()),
        (d.AriaAttributeRule(), f.AriaAttributeFix()),
        (d.AriaStateRule(), f.AriaStateFix()),
        (d.InvalidAriaCombinationRule(), f.InvalidAriaCombinationFix()),
        (d.SemanticHtmlRule(), f.SemanticHtmlFix()),
        (d.LandmarkRoleRule(), f.LandmarkRoleFix()),
        (d.RedundantAriaRule(), f.RedundantAriaFix()),
        (d.HiddenContentRule(), f.HiddenContentFix()),
        (d.LiveRegionRule(), f.LiveRegionFix()),
        (d.PageStructureRule(), f.PageStructureFix()),
        (d.ViewportRule(), f.ViewportFix()),
        (d.SkipLinkRule(), f.SkipLinkFix()),
        # Images
        (d.DecorativeImageRule(), f.DecorativeImageFix()),
        (d.LogoImageRule(), f.LogoImageFix()),
        (d.MissingAltTextRule(), f.MissingAltTextFix()),
        (d.EmptyAltTextRule(), f.EmptyAltTextFix()),
        (d.RedundantAltTextRule(), f.RedundantAltTextFix()),
        (d.AltTextQualityRule(), f.AltTextQualityFix()),
        (d.ComplexImageRule(), f.ComplexImageFix()),
        (d.ImageMapAltRule(), f.ImageMapAltFix()),
        (d.SvgAccessibilityRule(), f.SvgAccessibilityFix()),
        (d.BackgroundImageRule(), f.BackgroundImageFix()),
        # Headings
        (d.MissingH1Rule(), f.MissingH1Fix()),
        (d.MultipleH1Rule(), f.MultipleH1Fix()),
        (d.EmptyHeadingRule(), f.EmptyHeadingFix()),
        (d.SkippedHeadingLevelRule(), f.SkippedHeadingLevelFix()),
        (d.HeadingNestingRule(), f.HeadingNestingFix()),
        (d.HeadingLengthRule(), f.HeadingLengthFix()),
        (d.HeadingUniquenessRule(), f.HeadingUniquenessFix()),
        (d.HeadingVisualRule(), f.HeadingVisualFix()),
        # Links
        (d.EmptyLinkRule(), f.EmptyLinkFix()),
        (d.GenericLinkTextRule(), f.GenericLinkTextFix()),
        (d.DuplicateLinkTextRule(), None),
        (d.NewWindowLinkRule(), f.NewWindowLinkFix()),
        (d.DownloadLinkRule(), f.DownloadLinkFix()),
        (d.ExternalLinkRule(), f.ExternalLinkFix()),
        (d.LinkDestinationRule(), f.LinkDestinationFix()),
        # Forms
        (d.MissingFormLabelRule(), f.MissingFormLabelFix()),
        (d.PlaceholderLabelRule(), f.PlaceholderLabelFix()),
        (d.FieldsetLegendRule(), f.FieldsetLegendFix()),
        (d.RequiredAttributeRule(), f.RequiredAttributeFix()),
        (d.ErrorMessageRule(), f.ErrorMessageFix()),
        (d.AutocompleteRule(), f.AutocompleteFix()),
        (d.InputTypeRule(), f.InputTypeFix()),
        (d.CustomControlRule(), f.CustomControlFix()),
        (d.ButtonLabelRule(), f.ButtonLabelFix()),
        (d.OrphanedLabelRule(), f.OrphanedLabelFix()),
        (d.FormAriaRule(), f.FormAriaFix()),
        # Tables
        (d.TableHeaderRule(), f.TableHeaderFix()),
        (d.TableCaptionRule(), f.TableCaptionFix()),
        (d.ComplexTableRule(), f.ComplexTableFix()),
        (d.LayoutTableRule(), f.LayoutTableFix()),
        (d.EmptyTableCellRule(), f.EmptyTableCellFix()),
        # Media
        (d.IframeTitleRule(), f.IframeTitleFix()),
        (d.VideoAccessibilityRule(), f.VideoAccessibilityFix()),
        (d.AudioAccessibilityRule(), f.AudioAccessibilityFix()),
        (d.MediaAlternativeRule(), f.MediaAlternativeFix()),
        # Interaction
        (d.PositiveTabindexRule(), f.PositiveTabindexFix()),
        (d.InteractiveElementRule(), f.InteractiveElementFix()),
        (d.ModalAccessibilityRule(), f.ModalAccessibilityFix()),
        (d.FocusIndicatorRule(), f.FocusIndicatorFix()),
        (d.KeyboardTrapRule(), f.KeyboardTrapFix()),
        (d.FocusOrderRule(), f.FocusOrderFix()),
        (d.CustomWidgetKeyboardRule(), f.CustomWidgetKeyboardFix()),
        (d.TouchTargetRule(), f.TouchTargetFix()),
        (d.TouchGestureRule(), f.TouchGestureFix()),
        # Color
        (d.TextColorContrastRule(), f.TextColorContrastFix()),
        (d.ColorRelianceRule(), f.ColorRelianceFix()),
        (d.ComplexContrastRule(), f.ComplexContrastFix()),
    ])

    logger.info(f"Created default registry with {len(registry)} rules")
    return registry
