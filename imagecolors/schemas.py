"""
Image Colors API Schemas
Pydantic models for extraction config and color results.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from imagecolors.config import config
from imagecolors.services.colors.utils import Color, parse_hex_or_default


HEX_COLOR_PATTERN = r"^#[0-9A-F]{6}$"


class ExtractionProfile(str, Enum):
    """Which set of result fields an extraction fills."""
    PALETTE = "palette"   # dominant, average and six swatches
    SUMMARY = "summary"   # background, primary, secondary, detail


class ExtractionConfig(BaseModel):
    """Options for a single extraction request."""
    model_config = ConfigDict(populate_by_name=True)

    fallback: str = Field(
        config.DEFAULT_FALLBACK,
        description="Hex color used for every field when the image cannot be loaded"
    )
    pixel_spacing: int = Field(
        config.DEFAULT_PIXEL_SPACING,
        ge=1,
        alias="pixelSpacing",
        description="Sampling stride along both axes; 1 visits every pixel"
    )
    cache: bool = Field(True, description="Consult and populate the result cache")
    key: str = Field("", description="Explicit cache key; the image locator is used when empty")
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers for the image fetch step (unused by extraction)"
    )
    profile: ExtractionProfile = Field(
        ExtractionProfile.PALETTE,
        description="Result profile: full palette or four-color summary"
    )

    @property
    def fallback_color(self) -> Color:
        """Fallback parsed to a Color; malformed hex resolves to black."""
        return parse_hex_or_default(self.fallback)


class ColorResult(BaseModel):
    """Extracted colors. Fields the active profile does not compute stay None."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    platform: str = Field(..., description="Tag identifying the engine that produced the result")

    # Summary profile
    background: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    primary: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    secondary: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    detail: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    # Palette profile
    dominant: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    average: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    vibrant: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    dark_vibrant: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, alias="darkVibrant")
    light_vibrant: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, alias="lightVibrant")
    muted: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    dark_muted: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, alias="darkMuted")
    light_muted: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, alias="lightMuted")


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("imagecolors", description="Service name")


class MetricsResponse(BaseModel):
    """In-process metrics snapshot."""
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, Any]]


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")
