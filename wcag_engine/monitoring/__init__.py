"""Monitoring - logging for the rule engine."""

from .logger import EngineLogger, configure_logging, engine_logger, logger

__all__ = ["EngineLogger", "configure_logging", "engine_logger", "logger"]
