"""
Color value type and conversion helpers.

Hex formatting follows the #RRGGBB uppercase convention used throughout the
API. HSL conversions go through OpenCV's float32 path, where hue is reported
in degrees [0, 360) and lightness/saturation in [0, 1].
"""

import re
from typing import NamedTuple, Optional, Tuple

import cv2
import numpy as np
from loguru import logger


HEX_PATTERN = re.compile(r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


class Color(NamedTuple):
    """Opaque 8-bit RGB color."""
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return rgb_to_hex(self)

    @classmethod
    def from_hex(cls, hex_color: str) -> "Color":
        return cls(*hex_to_rgb(hex_color))


BLACK = Color(0, 0, 0)


def rgb_to_hex(rgb) -> str:
    """Convert an RGB triple (tuple, Color or uint8 array) to #RRGGBB."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert a hex color string to an RGB tuple.

    Accepts #RRGGBB, RRGGBB and the #RGB shorthand.

    Raises:
        ValueError: If the string is not a hex color
    """
    match = HEX_PATTERN.match(hex_color.strip()) if isinstance(hex_color, str) else None
    if match is None:
        raise ValueError(f"Invalid hex color: {hex_color!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return tuple(int(digits[i:i+2], 16) for i in (0, 2, 4))


def parse_hex_or_default(hex_color: Optional[str], default: Color = BLACK) -> Color:
    """Parse a hex string, falling back to `default` for missing or malformed input."""
    if not hex_color:
        return default
    try:
        return Color.from_hex(hex_color)
    except ValueError:
        logger.warning(f"Malformed fallback color {hex_color!r}, using {default.hex}")
        return default


def rgb_to_hsl(colors_u8: np.ndarray) -> np.ndarray:
    """
    Convert RGB colors to HSL.

    Args:
        colors_u8: RGB colors (N, 3) with values 0-255

    Returns:
        Float32 array (N, 3) of (hue_degrees, saturation, lightness)
    """
    colors = np.asarray(colors_u8, dtype=np.float32).reshape(-1, 1, 3) / 255.0
    if colors.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.float32)

    # OpenCV orders the float result as H, L, S
    hls = cv2.cvtColor(colors, cv2.COLOR_RGB2HLS).reshape(-1, 3)
    return hls[:, [0, 2, 1]]


def hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
    """Convert HSL (N, 3) floats back to RGB uint8, rounding to nearest."""
    hsl = np.asarray(hsl, dtype=np.float32).reshape(-1, 3)
    hls = hsl[:, [0, 2, 1]].reshape(-1, 1, 3)
    rgb = cv2.cvtColor(hls, cv2.COLOR_HLS2RGB).reshape(-1, 3)
    return np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8)


def shift_lightness(color: Color, amount: float) -> Color:
    """Shift a color's HSL lightness by `amount`, clamped to [0, 1]."""
    hsl = rgb_to_hsl(np.array([color], dtype=np.uint8))
    hsl[0, 2] = min(1.0, max(0.0, float(hsl[0, 2]) + amount))
    r, g, b = hsl_to_rgb(hsl)[0]
    return Color(int(r), int(g), int(b))
