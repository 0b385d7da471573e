"""
Image Colors Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Optional

from loguru import logger

from imagecolors.config import config


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message} | {extra}"


class StructuredLogger:
    """Owns the process loguru sink; modules log through `loguru.logger` directly."""

    def __init__(self, level: Optional[str] = None, serialize: bool = False):
        self.level = level or config.LOG_LEVEL
        self._configure_logger(serialize)

    def _configure_logger(self, serialize: bool):
        """Replace loguru's default sink with the service format."""
        logger.remove()
        logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            level=self.level,
            serialize=serialize  # True for JSON lines
        )


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
