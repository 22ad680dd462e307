"""Core - configuration shared by every component."""

from .config import Settings, settings

__all__ = ["Settings", "settings"]
