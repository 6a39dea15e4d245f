"""Logging infrastructure module."""

from reparai.infrastructure.logging.logger import StructuredLogger, setup_logging

__all__ = ["StructuredLogger", "setup_logging"]
