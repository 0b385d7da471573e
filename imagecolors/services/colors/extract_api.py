"""
Color Extraction Orchestrator

Wraps the synchronous extraction core for async callers: resolves the cache
key, consults the injected result cache, awaits the pixel loader, runs the
core in a worker thread and stores the result. Loading problems never reach
the caller; they produce the fallback result instead.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional, Union

from loguru import logger

from imagecolors.config import config
from imagecolors.schemas import ColorResult, ExtractionConfig
from imagecolors.services.cache import CacheBackend, resolve_cache_key
from imagecolors.services.imaging import PixelSource, decode_image
from imagecolors.utils.ids import generate_request_id
from imagecolors.utils.metrics import get_metrics

from .assembler import fallback_result
from .extraction import extract_colors


ImageLocator = Union[str, int, float]
PixelLoader = Callable[[ImageLocator], Awaitable[Optional[PixelSource]]]


def make_bytes_loader(data: bytes, max_edge: Optional[int] = None) -> PixelLoader:
    """Loader that decodes already-fetched image bytes off the event loop."""
    async def load(_locator: ImageLocator) -> PixelSource:
        return await asyncio.to_thread(decode_image, data, max_edge or None)
    return load


async def get_colors(source: ImageLocator,
                     extraction_config: Optional[ExtractionConfig] = None,
                     *,
                     loader: PixelLoader,
                     cache: Optional[CacheBackend] = None) -> ColorResult:
    """
    Extract colors for an image, using the cache when enabled.

    Args:
        source: Image locator (URI string or numeric resource id); used for
            the cache key and handed to the loader
        extraction_config: Extraction options
        loader: Coroutine function returning a PixelSource (or None) for source
        cache: Result cache shared across requests

    Returns:
        ColorResult; the fallback result when the image could not be loaded
    """
    extraction_config = extraction_config or ExtractionConfig()
    request_id = generate_request_id("colors")
    log = logger.bind(request_id=request_id)
    metrics = get_metrics()
    start_time = time.time()

    metrics.increment_counter("colors_requests_total")
    # One image yields different fields per profile, so entries are per profile
    cache_key = f"{resolve_cache_key(source, extraction_config.key)}|{extraction_config.profile.value}"
    use_cache = extraction_config.cache and cache is not None

    if use_cache:
        cached = cache.get(cache_key)
        if cached is not None:
            metrics.increment_counter("colors_cache_hits_total")
            log.debug(f"Cache hit for {cache_key[:64]}")
            return cached
        metrics.increment_counter("colors_cache_misses_total")

    try:
        pixel_source = await loader(source)
    except Exception as e:
        log.warning(f"Image load failed: {type(e).__name__}: {e}")
        pixel_source = None

    if pixel_source is None:
        metrics.increment_counter("colors_fallback_total")
        log.info(f"Using fallback {extraction_config.fallback_color.hex} for {cache_key[:64]}")
        result = fallback_result(extraction_config)
    else:
        try:
            result = await asyncio.to_thread(extract_colors, pixel_source, extraction_config)
        except Exception:
            log.exception("Color extraction failed; returning fallback result")
            metrics.increment_counter("colors_failed_total")
            return fallback_result(extraction_config)

    # Concurrent misses on one key may both reach this point; last write wins
    if use_cache:
        cache.set(cache_key, result)

    duration_ms = (time.time() - start_time) * 1000
    metrics.record_timing("get_colors", duration_ms)
    log.bind(profile=extraction_config.profile.value,
             ms_total=round(duration_ms, 2)).info(f"Colors ready for {cache_key[:64]}")
    return result


async def get_colors_from_bytes(data: bytes,
                                locator: ImageLocator,
                                extraction_config: Optional[ExtractionConfig] = None,
                                cache: Optional[CacheBackend] = None) -> ColorResult:
    """get_colors for image bytes the caller has already fetched."""
    max_edge = config.MAX_EDGE
    if not config.validate_max_edge(max_edge):
        logger.warning(f"Ignoring invalid IMAGECOLORS_MAX_EDGE={max_edge}")
        max_edge = 0

    return await get_colors(
        locator,
        extraction_config,
        loader=make_bytes_loader(data, max_edge),
        cache=cache,
    )
