"""Drawable surface allocation for the compositor.

A surface is a transparent RGBA Pillow image owned by exactly one commit.
Allocation goes through a SurfaceFactory so the pixel budget is enforced in
one place and tests can inject allocation failures.
"""

from __future__ import annotations

import logging
from typing import Protocol

from PIL import Image

from logocrop.config import settings
from logocrop.geometry import Size
from logocrop.raster.exceptions import ImageLoadError, SurfaceAllocationError

logger = logging.getLogger(__name__)

SURFACE_MODE = "RGBA"
TRANSPARENT: tuple[int, int, int, int] = (0, 0, 0, 0)


class SurfaceFactory(Protocol):
    """Protocol for objects that hand out drawable surfaces.

    This protocol allows for dependency injection and testing with
    failing or instrumented implementations.
    """

    def allocate(self, size: Size) -> Image.Image:
        """Return a new, fully transparent RGBA surface of the given size.

        Raises:
            SurfaceAllocationError: If the surface cannot be obtained.
        """
        ...


class PillowSurfaceFactory:
    """Allocate surfaces with ``Image.new`` under a pixel budget.

    Example:
        >>> factory = PillowSurfaceFactory(max_pixels=1_000_000)
        >>> surface = factory.allocate(Size(width=64, height=32))
        >>> surface.mode, surface.size
        ('RGBA', (64, 32))
    """

    __slots__ = ("_max_pixels",)

    def __init__(self, max_pixels: int | None = None) -> None:
        """Initialize the factory.

        Args:
            max_pixels: Largest surface area allowed, in pixels. Defaults to
                settings.MAX_SURFACE_PIXELS. Zero or negative disables the
                check.
        """
        self._max_pixels = (
            settings.MAX_SURFACE_PIXELS if max_pixels is None else max_pixels
        )

    @property
    def max_pixels(self) -> int:
        """Return the configured pixel budget."""
        return self._max_pixels

    def allocate(self, size: Size) -> Image.Image:
        """Return a new transparent RGBA surface.

        Raises:
            SurfaceAllocationError: If the area exceeds the pixel budget or
                Pillow cannot allocate the buffer.
        """
        if self._max_pixels > 0 and size.area > self._max_pixels:
            raise SurfaceAllocationError(
                f"Surface of {size.area} pixels exceeds limit of "
                f"{self._max_pixels} pixels",
                size=size.to_tuple(),
            )
        try:
            surface = Image.new(SURFACE_MODE, size.to_tuple(), TRANSPARENT)
        except (MemoryError, ValueError) as e:
            raise SurfaceAllocationError(
                f"Failed to allocate surface: {e}", size=size.to_tuple()
            ) from e
        logger.debug("Allocated surface", extra={"size": size.to_tuple()})
        return surface


def ensure_loaded(image: object) -> Image.Image:
    """Check that an object is a decoded, non-empty Pillow image.

    Compose refuses anything else as a precondition violation.

    Raises:
        ImageLoadError: If the object is not a usable image.
    """
    if not isinstance(image, Image.Image):
        raise ImageLoadError(
            f"Expected a PIL image, got {type(image).__name__}",
        )
    if image.width < 1 or image.height < 1:
        raise ImageLoadError(f"Image has empty size {image.width}x{image.height}")
    return image
