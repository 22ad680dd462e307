"""
Pytest configuration for wcag_engine tests.

Shared fixtures: the default registry, a DocumentAdapter and small helpers
to run a single detector or fixer by id.
"""

import pytest

from wcag_engine.analyzers import DocumentAdapter
from wcag_engine.contracts import ScanContext
from wcag_engine.registry import create_default_registry


SITE_CONTEXT = ScanContext(site_url="https://example.com")


@pytest.fixture(scope="session")
def registry():
    """Default registry; rules are stateless so one instance serves every test."""
    return create_default_registry()


@pytest.fixture
def adapter():
    return DocumentAdapter()


@pytest.fixture
def site_context():
    return SITE_CONTEXT


@pytest.fixture
def detect(registry, adapter):
    """Run one detection rule: detect(html, rule_id, context=None) -> List[Issue]."""
    def _detect(html, rule_id, context=None):
        doc = adapter.parse(html, context)
        return registry.detector(rule_id).detect(doc)
    return _detect


@pytest.fixture
def fix(registry):
    """Apply one fix rule: fix(html, rule_id, context=None) -> FixResult."""
    def _fix(html, rule_id, context=None):
        return registry.fixer(rule_id).apply(html, context)
    return _fix


@pytest.fixture
def find(adapter):
    """First element named `name` in a fragment, or None."""
    def _find(html, name):
        return adapter.parse(html).find(name)
    return _find
