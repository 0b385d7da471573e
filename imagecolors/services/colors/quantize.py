"""
Channel quantization for frequency bucketing.

Each channel is truncated to a grid of width 32 (eight levels per channel),
which merges anti-aliased near-duplicates before counting.
"""

import numpy as np

from .utils import Color


BUCKET_WIDTH = 32


def quantize_channel(value: int, width: int = BUCKET_WIDTH) -> int:
    return (int(value) // width) * width


def quantize_color(color: Color, width: int = BUCKET_WIDTH) -> Color:
    """Map a color onto its bucket's grid color."""
    return Color(*(quantize_channel(c, width) for c in color))


def quantize_pixels(pixels_rgb_u8: np.ndarray, width: int = BUCKET_WIDTH) -> np.ndarray:
    """Vectorised quantize_color over an (N, 3) uint8 array."""
    return (np.asarray(pixels_rgb_u8, dtype=np.uint8) // width) * width


def pack_rgb(pixels_rgb_u8: np.ndarray) -> np.ndarray:
    """Pack (N, 3) RGB into int64 keys of the form 0xRRGGBB."""
    px = np.asarray(pixels_rgb_u8, dtype=np.int64).reshape(-1, 3)
    return (px[:, 0] << 16) | (px[:, 1] << 8) | px[:, 2]


def bucket_keys(pixels_rgb_u8: np.ndarray, width: int = BUCKET_WIDTH) -> np.ndarray:
    """Packed quantized bucket keys for each pixel, in input order."""
    return pack_rgb(quantize_pixels(pixels_rgb_u8, width))


def unpack_key(key: int) -> Color:
    key = int(key)
    return Color((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)
