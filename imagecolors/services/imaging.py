"""
Image Colors Imaging Utilities
Wraps decoded images as RGBA pixel grids and decodes uploads with Pillow.
"""
import io
from typing import NamedTuple, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError
from loguru import logger


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be turned into a pixel grid."""


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int


class PixelSource:
    """
    Decoded image as a row-major RGBA grid.

    The backing array has shape (height, width, 4) and dtype uint8. RGB input
    is promoted to fully opaque RGBA.
    """

    def __init__(self, rgba: np.ndarray):
        rgba = np.asarray(rgba)
        if rgba.ndim != 3 or rgba.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) pixel array, got shape {rgba.shape}")

        if rgba.shape[2] == 3:
            alpha = np.full(rgba.shape[:2] + (1,), 255, dtype=np.uint8)
            rgba = np.concatenate([rgba.astype(np.uint8), alpha], axis=2)

        self.rgba = np.ascontiguousarray(rgba, dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.rgba.shape[1]

    @property
    def height(self) -> int:
        return self.rgba.shape[0]

    def get_pixel(self, x: int, y: int) -> Pixel:
        r, g, b, a = self.rgba[y, x]
        return Pixel(int(r), int(g), int(b), int(a))

    @classmethod
    def from_buffer(cls, width: int, height: int, buffer: bytes, channels: int = 4) -> "PixelSource":
        """Build a source from a raw row-major RGBA or RGB byte buffer."""
        expected = width * height * channels
        if len(buffer) != expected:
            raise ValueError(f"Buffer size {len(buffer)} does not match {width}x{height}x{channels}")
        array = np.frombuffer(buffer, dtype=np.uint8).reshape(height, width, channels)
        return cls(array)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelSource":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image))

    def __repr__(self) -> str:
        return f"PixelSource({self.width}x{self.height})"


def decode_image(data: bytes, max_edge: Optional[int] = None) -> PixelSource:
    """
    Decode encoded image bytes into a PixelSource.

    Args:
        data: Encoded image bytes (any format Pillow can open)
        max_edge: If set, downscale so the longer edge is at most this size

    Returns:
        PixelSource with RGBA pixels

    Raises:
        ImageDecodeError: If the bytes are empty or not a readable image
    """
    if not data:
        raise ImageDecodeError("Empty image data")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Failed to decode image data: {e}") from e

    original_size = image.size
    image = image.convert("RGBA")

    if max_edge and max(image.size) > max_edge:
        image.thumbnail((max_edge, max_edge), Image.Resampling.LANCZOS)
        logger.debug(f"Resized image {original_size} -> {image.size}")

    return PixelSource.from_image(image)
