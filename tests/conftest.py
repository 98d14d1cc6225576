"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator

import pytest
from PIL import Image

from logocrop.config import Settings
from logocrop.utils.logging import clear_correlation_context


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
        MAX_SURFACE_PIXELS=1_000_000,
    )


def _quadrant_image(width: int = 100, height: int = 100) -> Image.Image:
    """Build an RGBA image whose four quadrants have distinct opaque colours.

    Top-left red, top-right green, bottom-left blue, bottom-right white.
    """
    image = Image.new("RGBA", (width, height))
    half_w = width // 2
    half_h = height // 2
    image.paste((255, 0, 0, 255), (0, 0, half_w, half_h))
    image.paste((0, 255, 0, 255), (half_w, 0, width, half_h))
    image.paste((0, 0, 255, 255), (0, half_h, half_w, height))
    image.paste((255, 255, 255, 255), (half_w, half_h, width, height))
    return image


def _gradient_image(width: int = 100, height: int = 100) -> Image.Image:
    """Build an RGBA image where every pixel is unique: (x, y, x ^ y, 255)."""
    image = Image.new("RGBA", (width, height))
    image.putdata(
        [
            (x % 256, y % 256, (x ^ y) % 256, 255)
            for y in range(height)
            for x in range(width)
        ]
    )
    return image


@pytest.fixture
def quadrant_image() -> Image.Image:
    """100x100 four-colour test image."""
    return _quadrant_image()


@pytest.fixture
def gradient_image() -> Image.Image:
    """100x100 image with a unique colour per pixel."""
    return _gradient_image()


@pytest.fixture
def quadrant_image_factory() -> Callable[[int, int], Image.Image]:
    """Factory for four-colour test images of any size."""
    return _quadrant_image


@pytest.fixture
def gradient_image_factory() -> Callable[[int, int], Image.Image]:
    """Factory for unique-pixel test images of any size."""
    return _gradient_image
