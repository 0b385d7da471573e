"""
Test configuration and fixtures for image color extraction tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from imagecolors.services.imaging import PixelSource


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def make_source(pixels) -> PixelSource:
    """Build a PixelSource from a nested list or array of RGBA/RGB pixels."""
    return PixelSource(np.array(pixels, dtype=np.uint8))


def solid_rgba(width: int, height: int, rgba) -> np.ndarray:
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :] = rgba
    return image


def encode_png(rgba: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(rgba).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_blue_rgba():
    """4x4 image: top two rows opaque red, bottom two rows opaque blue."""
    image = np.zeros((4, 4, 4), dtype=np.uint8)
    image[:2] = RED
    image[2:] = BLUE
    return image


@pytest.fixture
def red_blue_source(red_blue_rgba):
    return PixelSource(red_blue_rgba)


@pytest.fixture
def uniform_source():
    """16x16 image of opaque (200, 100, 50)."""
    return PixelSource(solid_rgba(16, 16, (200, 100, 50, 255)))


@pytest.fixture
def transparent_source():
    """8x8 image whose pixels are all below the opacity threshold."""
    return PixelSource(solid_rgba(8, 8, (200, 100, 50, 100)))


@pytest.fixture
def noisy_source():
    rng = np.random.default_rng(42)
    return PixelSource(rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8))


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    from main import app
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from imagecolors.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture(autouse=True)
def clear_api_cache():
    """Keep the API's process-wide result cache isolated between tests."""
    from imagecolors.api.v1 import result_cache
    result_cache.clear()
    yield
    result_cache.clear()
