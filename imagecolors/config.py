"""
Image Colors Configuration
Manages environment variables and defaults for the extraction service.
"""
import os
from typing import Optional

from loguru import logger


def env_int(name: str, default: Optional[int]) -> Optional[int]:
    """Integer env var; unset, empty or non-numeric values give the default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
        return default


class Config:
    """Configuration class for the image colors service."""

    # Upload limits
    MAX_FILE_MB: int = env_int("IMAGECOLORS_MAX_FILE_MB", 10)
    MAX_EDGE: int = env_int("IMAGECOLORS_MAX_EDGE", 0)  # 0 disables resizing

    # Extraction defaults
    DEFAULT_FALLBACK: str = os.environ.get("IMAGECOLORS_DEFAULT_FALLBACK", "#000000")
    DEFAULT_PIXEL_SPACING: int = env_int("IMAGECOLORS_DEFAULT_PIXEL_SPACING", 1)
    PLATFORM_TAG: str = os.environ.get("IMAGECOLORS_PLATFORM_TAG", "python")

    # Logging
    LOG_LEVEL: str = os.environ.get("IMAGECOLORS_LOG_LEVEL", "INFO")

    # Result cache
    CACHE_MAX_SIZE: int = env_int("IMAGECOLORS_CACHE_MAX_SIZE", 500)
    CACHE_TTL: Optional[int] = env_int("IMAGECOLORS_CACHE_TTL", None)
    CACHE_KEY_MAX_LENGTH: int = 500

    # Observability
    METRICS_ENABLED: bool = bool(env_int("IMAGECOLORS_METRICS_ENABLED", 1))

    # Supported upload formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif", "image/bmp"]

    @classmethod
    def validate_max_edge(cls, max_edge: int) -> bool:
        """Validate max_edge parameter (0 means keep original size)."""
        return max_edge == 0 or 16 <= max_edge <= 4096


# Global config instance
config = Config()
