"""Logging module."""

from polygen.core.logger.logger import bridge_engine_logging, get_console, get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "get_console", "bridge_engine_logging"]
