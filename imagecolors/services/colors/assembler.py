"""
Result assembly for both extraction profiles.

Computed colors are serialised as #RRGGBB. Absent swatches stay None; only
the fallback path fills every field of a profile, with the configured
fallback color.
"""

from typing import Dict, Optional, Tuple

from imagecolors.config import config
from imagecolors.schemas import ColorResult, ExtractionConfig, ExtractionProfile

from .swatches import SWATCH_NAMES, SummaryColors, Swatch
from .utils import Color


PROFILE_FIELDS: Dict[ExtractionProfile, Tuple[str, ...]] = {
    ExtractionProfile.PALETTE: ("dominant", "average") + SWATCH_NAMES,
    ExtractionProfile.SUMMARY: ("background", "primary", "secondary", "detail"),
}


def assemble_palette(average: Color,
                     dominant: Color,
                     swatches: Dict[str, Optional[Swatch]],
                     platform: Optional[str] = None) -> ColorResult:
    fields = {
        "average": average.hex,
        "dominant": dominant.hex,
    }
    for name in SWATCH_NAMES:
        swatch = swatches.get(name)
        fields[name] = swatch.hex if swatch is not None else None

    return ColorResult(platform=platform or config.PLATFORM_TAG, **fields)


def assemble_summary(summary: SummaryColors, platform: Optional[str] = None) -> ColorResult:
    return ColorResult(
        platform=platform or config.PLATFORM_TAG,
        **{name: color.hex for name, color in summary._asdict().items()}
    )


def fallback_result(extraction_config: ExtractionConfig,
                    platform: Optional[str] = None) -> ColorResult:
    """Result used when no pixel source could be obtained."""
    fallback_hex = extraction_config.fallback_color.hex
    fields = PROFILE_FIELDS[extraction_config.profile]
    return ColorResult(
        platform=platform or config.PLATFORM_TAG,
        **{name: fallback_hex for name in fields}
    )
