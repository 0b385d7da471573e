"""
Color extraction pipeline.

One sampling pass over the pixel grid feeds the average accumulator, the
dominant-color frequency table and (for the palette profile) the swatch
extractor. Everything here is synchronous and free of I/O; callers on an
event loop should run it in a worker thread.
"""

import time
from typing import Optional

from loguru import logger

from imagecolors.schemas import ColorResult, ExtractionConfig, ExtractionProfile
from imagecolors.utils.metrics import get_metrics

from ..imaging import PixelSource
from .accumulators import AverageColorAccumulator, DominantColorFinder
from .assembler import assemble_palette, assemble_summary
from .sampling import PixelSample, sample_pixels
from .swatches import SwatchExtractor, summarize


_default_extractor = SwatchExtractor()


def _accumulate(sample: PixelSample):
    average = AverageColorAccumulator()
    finder = DominantColorFinder()
    average.add(sample.pixels)
    finder.add(sample.pixels)
    return average, finder


def extract_palette(source: PixelSource,
                    extraction_config: Optional[ExtractionConfig] = None,
                    swatch_extractor: Optional[SwatchExtractor] = None) -> ColorResult:
    """
    Compute average, dominant and the six named swatches.

    Args:
        source: Decoded RGBA pixel grid
        extraction_config: Extraction options (pixel_spacing is used)
        swatch_extractor: Custom swatch extractor; the default bands otherwise

    Returns:
        ColorResult with the palette fields set
    """
    extraction_config = extraction_config or ExtractionConfig()
    extractor = swatch_extractor or _default_extractor

    sample = sample_pixels(source, extraction_config.pixel_spacing)
    average, finder = _accumulate(sample)
    swatches = extractor.extract(sample.pixels)

    logger.debug(f"Palette extraction: {sample.opaque}/{sample.visited} opaque pixels, "
                 f"{len(finder)} buckets")

    return assemble_palette(average.average(), finder.dominant(), swatches)


def extract_summary(source: PixelSource,
                    extraction_config: Optional[ExtractionConfig] = None) -> ColorResult:
    """Compute the four-color summary (background, primary, secondary, detail)."""
    extraction_config = extraction_config or ExtractionConfig()

    sample = sample_pixels(source, extraction_config.pixel_spacing)
    average, finder = _accumulate(sample)
    summary = summarize(average.average(), finder)

    logger.debug(f"Summary extraction: {sample.opaque}/{sample.visited} opaque pixels, "
                 f"{len(finder)} buckets")

    return assemble_summary(summary)


def extract_colors(source: PixelSource,
                   extraction_config: Optional[ExtractionConfig] = None) -> ColorResult:
    """Run the extraction profile selected by the config."""
    extraction_config = extraction_config or ExtractionConfig()
    start_time = time.time()

    if extraction_config.profile == ExtractionProfile.SUMMARY:
        result = extract_summary(source, extraction_config)
    else:
        result = extract_palette(source, extraction_config)

    duration_ms = (time.time() - start_time) * 1000
    metrics = get_metrics()
    metrics.increment_profile_count(extraction_config.profile.value)
    metrics.record_timing("extract", duration_ms)

    logger.info(f"Extracted {extraction_config.profile.value} colors from "
                f"{source.width}x{source.height} image in {duration_ms:.1f}ms")
    return result
