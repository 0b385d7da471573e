"""
Stride sampling of opaque pixels.

Pixels are visited at x, y in {0, S, 2S, ...} in row-major order (y outer,
x inner). Pixels with alpha below OPACITY_THRESHOLD are dropped before they
reach any accumulator.
"""

from dataclasses import dataclass
from typing import Iterator

import numpy as np
from loguru import logger

from ..imaging import Pixel, PixelSource


# Equivalent to alpha < 0.5 once normalised to [0, 1]
OPACITY_THRESHOLD = 128


@dataclass(frozen=True)
class PixelSample:
    """Opaque pixels surviving a sampling pass."""
    pixels: np.ndarray  # (N, 3) uint8 RGB in scan order
    visited: int
    opaque: int

    @property
    def is_empty(self) -> bool:
        return self.opaque == 0


def _validate_spacing(pixel_spacing: int) -> int:
    spacing = int(pixel_spacing)
    if spacing < 1:
        raise ValueError(f"pixel_spacing must be >= 1, got {pixel_spacing}")
    return spacing


def sample_pixels(source: PixelSource, pixel_spacing: int = 1) -> PixelSample:
    """
    Sample a pixel grid at a fixed stride and filter transparent pixels.

    Args:
        source: Decoded RGBA pixel grid
        pixel_spacing: Stride along both axes (1 visits every pixel)

    Returns:
        PixelSample with opaque RGB pixels and visit counts

    Raises:
        ValueError: If pixel_spacing < 1
    """
    spacing = _validate_spacing(pixel_spacing)

    strided = source.rgba[::spacing, ::spacing].reshape(-1, 4)
    visited = strided.shape[0]

    opaque_mask = strided[:, 3] >= OPACITY_THRESHOLD
    pixels = np.ascontiguousarray(strided[opaque_mask, :3])

    logger.debug(f"Sampled {source.width}x{source.height} at spacing={spacing}: "
                 f"visited={visited} opaque={pixels.shape[0]}")

    return PixelSample(pixels=pixels, visited=visited, opaque=int(pixels.shape[0]))


def iter_pixels(source: PixelSource, pixel_spacing: int = 1) -> Iterator[Pixel]:
    """Lazily yield opaque pixels in the same order as sample_pixels."""
    spacing = _validate_spacing(pixel_spacing)
    for y in range(0, source.height, spacing):
        for x in range(0, source.width, spacing):
            pixel = source.get_pixel(x, y)
            if pixel.a < OPACITY_THRESHOLD:
                continue
            yield pixel
