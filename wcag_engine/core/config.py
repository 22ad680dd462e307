"""
Configuration module - centralized settings for the rule engine.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    Every variable carries the WCAG_ prefix, e.g.:
        export WCAG_SITE_URL=https://example.com
        export WCAG_FAILURE_POLICY=fail_closed
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",            # Load from .env file in project root
        env_file_encoding="utf-8",  # File encoding
        env_prefix="WCAG_",         # WCAG_LOG_LEVEL, WCAG_SITE_URL, ...
        extra="ignore",             # Ignore extra env vars not defined here
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name used in logs and reports
    APP_NAME: str = "WCAG Rule Engine"

    # LOG_LEVEL: Level applied to the "wcag_engine" logger
    # DEBUG logs every rule run and every registration
    LOG_LEVEL: str = "INFO"

    # ---------------------------------------------------------------------------
    # SCAN CONTEXT
    # ---------------------------------------------------------------------------
    # SITE_URL: Home URL of the site whose content is scanned
    # - Links to any other host are "external" (external-link rule)
    # - Empty disables the external-link check
    SITE_URL: str = ""

    # DEFAULT_LANGUAGE: Value written to <html lang> by the page-structure fixer
    DEFAULT_LANGUAGE: str = "en"

    # SKIP_LINK_MIN_LENGTH: Fragments shorter than this never need a skip link
    SKIP_LINK_MIN_LENGTH: int = 1000

    # SNIPPET_MAX_LENGTH: Truncation length of Issue.html_snippet
    SNIPPET_MAX_LENGTH: int = 250

    # ---------------------------------------------------------------------------
    # ORCHESTRATION
    # ---------------------------------------------------------------------------
    # FAILURE_POLICY: What happens when a single rule raises
    # - fail_open: record the failure, keep evaluating the other rules
    # - fail_closed: abort the run with RuleEvaluationError
    FAILURE_POLICY: Literal["fail_open", "fail_closed"] = "fail_open"

    # DISABLED_RULES: Rule ids skipped by the scan orchestrator
    # Set as JSON: WCAG_DISABLED_RULES='["external-link", "skip-link"]'
    DISABLED_RULES: List[str] = []

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name ('debug' -> 'DEBUG')."""
        return (v or "INFO").strip().upper()

    @field_validator("SITE_URL", "DEFAULT_LANGUAGE")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("SKIP_LINK_MIN_LENGTH", "SNIPPET_MAX_LENGTH")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 0:
            raise ValueError("length limits cannot be negative")
        return v


# Create a global settings instance
# Usage: from wcag_engine.core.config import settings
# Then:  settings.SITE_URL, settings.FAILURE_POLICY, etc.
settings = Settings()
