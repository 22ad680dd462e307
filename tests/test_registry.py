"""
Tests for RuleRegistry and the default catalogue.
"""

import pytest

from wcag_engine.contracts import RuleRegistrationError, UnknownRuleError, WcagEngineError
from wcag_engine.detectors import EmptyLinkRule, MissingAltTextRule
from wcag_engine.fixers import EmptyLinkFix, MissingAltTextFix
from wcag_engine.registry import ALIASES, RuleRegistry


INERT_IDS = [
    "viewport-check",
    "heading-nesting",
    "focus-indicator",
    "keyboard-trap",
    "focus-order",
    "custom-widget-keyboard",
    "touch-target",
    "touch-gesture",
    "text-color-contrast",
    "color-reliance",
    "complex-contrast",
]

# Format: (alias, canonical_id, description)
ALIAS_CASES = [
    ("contrast", "text-color-contrast", "Legacy contrast key"),
    ("viewport", "viewport-check", "Viewport"),
    ("lang", "page-structure", "Language lives in page structure"),
    ("modal", "modal-accessibility", "Modal"),
    ("missing-alt-text", "missing-alt-text", "Canonical id resolves to itself"),
]


class TestDefaultRegistry:
    def test_ids_are_unique_and_ordered(self, registry):
        ids = registry.ids
        assert len(ids) == len(set(ids)) == len(registry)
        assert ids[0] == "aria-role"
        assert ids[-1] == "complex-contrast"

    def test_decorative_images_handled_before_alt_generation(self, registry):
        ids = registry.ids
        assert ids.index("decorative-image") < ids.index("missing-alt-text")

    def test_every_detector_has_metadata(self, registry):
        for detector in registry.detectors:
            assert detector.title, detector.id
            assert detector.wcag_criterion, detector.id
            assert detector.message, detector.id

    def test_fixers_share_detector_ids(self, registry):
        for fixer in registry.fixers:
            assert registry.detector(fixer.id).id == fixer.id

    def test_only_duplicate_link_text_lacks_a_fixer(self, registry):
        missing = [rule_id for rule_id in registry.ids if not registry.has_fixer(rule_id)]
        assert missing == ["duplicate-link-text"]

    def test_inert_fixers(self, registry):
        inert = [fixer.id for fixer in registry.fixers if fixer.inert]
        assert inert == INERT_IDS
        assert all(registry.is_inert(rule_id) for rule_id in INERT_IDS)
        assert not registry.is_inert("missing-alt-text")
        assert not registry.is_inert("duplicate-link-text")

    def test_aliases_point_at_registered_rules(self, registry):
        for alias, canonical in ALIASES.items():
            assert canonical in registry.ids, alias


class TestLookup:
    @pytest.mark.parametrize(
        "alias,canonical,description",
        ALIAS_CASES,
        ids=[case[-1] for case in ALIAS_CASES]
    )
    def test_resolve(self, registry, alias, canonical, description):
        assert registry.resolve(alias) == canonical
        assert registry.detector(alias).id == canonical
        assert alias in registry

    def test_unknown_id(self, registry):
        with pytest.raises(UnknownRuleError) as exc_info:
            registry.detector("no-such-rule")
        error = exc_info.value
        assert error.rule_id == "no-such-rule"
        assert str(error) == "Unknown rule id: 'no-such-rule'"
        assert isinstance(error, KeyError)
        assert isinstance(error, WcagEngineError)

    def test_fixer_for_manual_rule_raises(self, registry):
        with pytest.raises(UnknownRuleError):
            registry.fixer("duplicate-link-text")

    def test_contains(self, registry):
        assert "empty-link" in registry
        assert "no-such-rule" not in registry
        assert 42 not in registry
        assert None not in registry


class TestRegistration:
    def test_register_keeps_order(self):
        registry = RuleRegistry()
        registry.register(EmptyLinkRule(), EmptyLinkFix())
        registry.register(MissingAltTextRule())
        assert registry.ids == ["empty-link", "missing-alt-text"]
        assert [fixer.id for fixer in registry.fixers] == ["empty-link"]
        assert not registry.has_fixer("missing-alt-text")

    def test_duplicate_id_rejected(self):
        registry = RuleRegistry()
        registry.register(EmptyLinkRule())
        with pytest.raises(RuleRegistrationError):
            registry.register(EmptyLinkRule())

    def test_mismatched_fixer_rejected(self):
        registry = RuleRegistry()
        with pytest.raises(RuleRegistrationError):
            registry.register(EmptyLinkRule(), MissingAltTextFix())
        assert len(registry) == 0

    def test_unregister_by_alias(self):
        registry = RuleRegistry()
        registry.register_all([
            (MissingAltTextRule(), MissingAltTextFix()),
            (EmptyLinkRule(), EmptyLinkFix()),
        ])
        assert registry.unregister("alt-text")
        assert registry.ids == ["empty-link"]
        assert not registry.unregister("alt-text")

    def test_custom_aliases(self):
        registry = RuleRegistry(aliases={"links": "empty-link"})
        registry.register(EmptyLinkRule(), EmptyLinkFix())
        assert registry.resolve("links") == "empty-link"
        assert "contrast" not in registry.aliases

    def test_empty_registry(self):
        registry = RuleRegistry()
        assert len(registry) == 0
        assert registry.detectors == []
        assert registry.fixers == []
