"""
Image Colors v1 API Routes
Implements /v1/colors and supporting routes.
"""
import time
from typing import Any, Dict

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from loguru import logger

from imagecolors.config import config
from imagecolors.schemas import ColorResult, ErrorResponse, ExtractionConfig, ExtractionProfile, MetricsResponse
from imagecolors.services.cache import create_result_cache
from imagecolors.services.colors.extract_api import get_colors_from_bytes
from imagecolors.services.fingerprint import content_locator
from imagecolors.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Colors"])

# Process-wide result cache shared by all requests
result_cache = create_result_cache()


@router.post("/colors",
             response_model=ColorResult,
             responses={413: {"model": ErrorResponse}, 415: {"model": ErrorResponse}},
             summary="Extract Image Colors",
             description="Extract average, dominant and palette colors (or the four-color summary) from an uploaded image")
async def post_colors(
    file: UploadFile = File(..., description="Image file to analyse"),
    fallback: str = Form(config.DEFAULT_FALLBACK, description="Hex color returned when the image cannot be decoded"),
    pixel_spacing: int = Form(config.DEFAULT_PIXEL_SPACING, ge=1, le=64, description="Sampling stride"),
    cache: bool = Form(True, description="Use the result cache"),
    key: str = Form("", max_length=500, description="Explicit cache key"),
    profile: ExtractionProfile = Form(ExtractionProfile.PALETTE, description="palette or summary")
) -> ColorResult:
    """
    Extract colors from an uploaded image.

    Images Pillow cannot decode yield the fallback result with status 200.
    """
    if file.content_type and not file.content_type.startswith("image/") \
            and file.content_type != "application/octet-stream":
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    data = await file.read()
    if len(data) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    extraction_config = ExtractionConfig(
        fallback=fallback,
        pixel_spacing=pixel_spacing,
        cache=cache,
        key=key,
        profile=profile,
    )

    logger.debug(f"POST /v1/colors {file.filename!r} ({len(data)} bytes, profile={profile.value})")
    return await get_colors_from_bytes(data, content_locator(data), extraction_config, result_cache)


@router.get("/metrics", response_model=MetricsResponse, summary="Metrics Snapshot")
async def metrics_snapshot() -> Dict[str, Any]:
    return get_metrics().get_summary()


@router.get("/cache/stats", summary="Result Cache Statistics")
async def cache_stats() -> Dict[str, Any]:
    return result_cache.get_cache_stats()


@router.delete("/cache", summary="Clear Result Cache")
async def clear_cache() -> Dict[str, Any]:
    result_cache.clear()
    return {"cleared": True, "timestamp": int(time.time())}
