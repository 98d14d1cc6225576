"""Geometry primitives for logocrop.

This module provides immutable Pydantic models for sizes, offsets and
rectangles. All coordinates follow the screen convention where (0, 0) is
the top-left corner, x grows rightward and y grows downward.

Two coordinate frames are in play during a crop and they are easy to mix up:

- Source frame: pixels of the unrotated source image.
- Rotated frame: pixels of the axis-aligned bounding box that contains the
  rotated source image. Crop rectangles reported by a cropper UI live here.

Each frame has its own rectangle class (SourceRect, RotatedFrameRect). They
share geometry helpers but never compare equal (pydantic compares the model
class as well as the fields), and the compositor only accepts
RotatedFrameRect.
"""

from __future__ import annotations

import math
from typing import Self

from pydantic import BaseModel, Field


class Size(BaseModel, frozen=True):
    """A 2D size representing width and height.

    Both dimensions must be strictly positive (> 0).

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def area(self) -> int:
        """Calculate the area in square pixels."""
        return self.width * self.height

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    @classmethod
    def from_tuple(cls, size: tuple[int, int]) -> Self:
        """Create Size from (width, height) tuple."""
        return cls(width=size[0], height=size[1])


class Offset(BaseModel, frozen=True):
    """A 2D displacement in (possibly fractional) pixels.

    Used for pan offsets and for points that may land between pixels or
    outside an image after a rotation.
    """

    x: float = 0.0
    y: float = 0.0

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)


class BoundingBox(BaseModel, frozen=True):
    """Exact (floating point) extent of a rotated rectangle.

    Attributes:
        width: Horizontal extent, not rounded.
        height: Vertical extent, not rounded.
    """

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    def surface_size(self) -> Size:
        """Return the whole-pixel surface that holds this box (ceil per side)."""
        return Size(width=math.ceil(self.width), height=math.ceil(self.height))

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)


def _round_half_up(value: float) -> int:
    # Halves round up: 2.5 -> 3, -2.5 -> -2
    return math.floor(value + 0.5)


class _Rect(BaseModel, frozen=True):
    """Shared fields and helpers for frame-tagged rectangles.

    The region is defined as:
    - Top-left: (x, y)
    - Bottom-right: (x + width, y + height) [exclusive]

    x and y may be negative: a crop rectangle is allowed to hang over the
    edge of the surface it is measured against.
    """

    x: int = Field(..., description="Left edge X coordinate")
    y: int = Field(..., description="Top edge Y coordinate")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def area(self) -> int:
        """Calculate the area in square pixels."""
        return self.width * self.height

    @property
    def right(self) -> int:
        """Return the X coordinate of the right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Return the Y coordinate of the bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def size(self) -> Size:
        """Return the dimensions as a Size."""
        return Size(width=self.width, height=self.height)

    @property
    def center(self) -> tuple[float, float]:
        """Return the exact center point as (x, y) tuple."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def to_box(self) -> tuple[int, int, int, int]:
        """Convert to a Pillow (left, upper, right, lower) box."""
        return (self.x, self.y, self.right, self.bottom)

    @classmethod
    def from_tuple(cls, bbox: tuple[int, int, int, int]) -> Self:
        """Create a rectangle from (x, y, width, height) tuple."""
        return cls(x=bbox[0], y=bbox[1], width=bbox[2], height=bbox[3])

    @classmethod
    def from_area(cls, x: float, y: float, width: float, height: float) -> Self:
        """Create a rectangle from fractional pixel values.

        Cropper widgets report their area in floating point pixels; each
        field is rounded to the nearest whole pixel, halves rounding up.

        Raises:
            pydantic.ValidationError: If width or height round to zero.
        """
        return cls(
            x=_round_half_up(x),
            y=_round_half_up(y),
            width=_round_half_up(width),
            height=_round_half_up(height),
        )

    def intersection_with(self, size: Size) -> Self | None:
        """Return the part of this rectangle inside a (0, 0, size) surface.

        Args:
            size: Dimensions of the surface the rectangle is measured against.

        Returns:
            The overlapping rectangle in the same frame, or None if the
            rectangle lies completely outside the surface.
        """
        left = max(self.x, 0)
        top = max(self.y, 0)
        right = min(self.right, size.width)
        bottom = min(self.bottom, size.height)
        if right <= left or bottom <= top:
            return None
        return type(self)(x=left, y=top, width=right - left, height=bottom - top)


class SourceRect(_Rect, frozen=True):
    """A rectangle in the unrotated source image's pixel frame."""


class RotatedFrameRect(_Rect, frozen=True):
    """A rectangle in the rotated bounding box's pixel frame.

    This is the frame the compositor's intermediate surface uses, so crop
    rectangles handed to compose must be of this type.
    """
