"""Rotation geometry for logocrop.

Pure functions that size the rotated bounding box of an image and move
points and rectangles between the source frame and the rotated frame.

Conventions:
    - Angles are degrees, any finite value, normalised modulo 360 before use.
    - Positive angles rotate clockwise on screen (y grows downward), the same
      convention as an HTML canvas ``rotate()`` call.
    - The rotated frame is the pixel grid of the intermediate surface, which
      is the bounding box rounded up to whole pixels. The rotated image is
      centred on that surface.

The image is placed by translate(surface centre) -> rotate(angle) ->
translate(-width/2, -height/2). Pillow's affine transform wants the inverse
mapping (output pixel -> source pixel), which ``rotation_affine`` returns.
"""

from __future__ import annotations

import math

from logocrop.geometry.primitives import (
    BoundingBox,
    Offset,
    RotatedFrameRect,
    Size,
    SourceRect,
)

__all__ = [
    "centered_crop",
    "normalize_angle",
    "quarter_turns",
    "rotated_bounding_box",
    "rotated_frame_point_to_source",
    "rotation_affine",
    "rotation_sin_cos",
    "source_point_to_rotated_frame",
    "source_rect_to_rotated_frame",
]

# (sin, cos) at 0, 90, 180 and 270 degrees. math.cos(math.pi / 2) is 6e-17,
# not 0, which would push a 200x100 box at 90 degrees to 101 pixels wide.
_QUARTER_TURNS: tuple[tuple[float, float], ...] = (
    (0.0, 1.0),
    (1.0, 0.0),
    (0.0, -1.0),
    (-1.0, 0.0),
)

# Decimal places kept before snapping a float coordinate to whole pixels.
_PIXEL_SNAP_DIGITS = 9


def normalize_angle(angle: float) -> float:
    """Normalise an angle in degrees to the half-open range [0, 360).

    Raises:
        ValueError: If the angle is NaN or infinite.
    """
    if not math.isfinite(angle):
        raise ValueError(f"angle must be finite, got {angle}")
    normalized = float(angle) % 360.0
    # -1e-20 % 360.0 rounds to 360.0
    if normalized >= 360.0:
        return 0.0
    return normalized


def quarter_turns(angle: float) -> int | None:
    """Return 0-3 if the angle is an exact multiple of 90 degrees, else None."""
    normalized = normalize_angle(angle)
    if normalized % 90.0 != 0.0:
        return None
    return int(normalized // 90.0)


def rotation_sin_cos(angle: float) -> tuple[float, float]:
    """Return (sin, cos) of an angle in degrees.

    Exact at multiples of 90 degrees; ordinary floating point elsewhere.
    """
    turns = quarter_turns(angle)
    if turns is not None:
        return _QUARTER_TURNS[turns]
    radians = math.radians(normalize_angle(angle))
    return (math.sin(radians), math.cos(radians))


def rotated_bounding_box(width: float, height: float, angle: float) -> BoundingBox:
    """Compute the axis-aligned bounding box of a rotated rectangle.

    For a width x height rectangle rotated by angle about its centre::

        bbox_width  = |cos a| * width + |sin a| * height
        bbox_height = |sin a| * width + |cos a| * height

    Args:
        width: Rectangle width in pixels (> 0).
        height: Rectangle height in pixels (> 0).
        angle: Rotation in degrees (any finite value).

    Returns:
        BoundingBox with exact (unrounded) dimensions.

    Raises:
        ValueError: If width or height is not positive or angle is not finite.

    Example:
        >>> rotated_bounding_box(200, 100, 90).to_tuple()
        (100.0, 200.0)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"width and height must be positive, got {width}x{height}")
    sin_a, cos_a = rotation_sin_cos(angle)
    abs_sin = abs(sin_a)
    abs_cos = abs(cos_a)
    return BoundingBox(
        width=abs_cos * width + abs_sin * height,
        height=abs_sin * width + abs_cos * height,
    )


def rotation_affine(
    source_size: Size,
    angle: float,
    surface_size: Size | None = None,
) -> tuple[float, float, float, float, float, float]:
    """Return Pillow AFFINE coefficients that draw the rotated source.

    The coefficients (a, b, c, d, e, f) map an output (surface) coordinate
    to the source coordinate it samples::

        x_src = a * x + b * y + c
        y_src = d * x + e * y + f

    Args:
        source_size: Dimensions of the unrotated image.
        angle: Rotation in degrees, clockwise-positive.
        surface_size: Surface the image is drawn on. Defaults to the
            bounding box rounded up to whole pixels.

    Returns:
        Six-tuple suitable for ``Image.transform(size, Image.Transform.AFFINE, data)``.
    """
    if surface_size is None:
        surface_size = rotated_bounding_box(
            source_size.width, source_size.height, angle
        ).surface_size()
    sin_a, cos_a = rotation_sin_cos(angle)
    cx = surface_size.width / 2
    cy = surface_size.height / 2
    half_w = source_size.width / 2
    half_h = source_size.height / 2
    return (
        cos_a,
        sin_a,
        half_w - cx * cos_a - cy * sin_a,
        -sin_a,
        cos_a,
        half_h + cx * sin_a - cy * cos_a,
    )


def source_point_to_rotated_frame(
    point: Offset,
    source_size: Size,
    angle: float,
) -> Offset:
    """Map a point from the source frame into the rotated frame."""
    surface = rotated_bounding_box(
        source_size.width, source_size.height, angle
    ).surface_size()
    sin_a, cos_a = rotation_sin_cos(angle)
    dx = point.x - source_size.width / 2
    dy = point.y - source_size.height / 2
    return Offset(
        x=dx * cos_a - dy * sin_a + surface.width / 2,
        y=dx * sin_a + dy * cos_a + surface.height / 2,
    )


def rotated_frame_point_to_source(
    point: Offset,
    source_size: Size,
    angle: float,
) -> Offset:
    """Map a point from the rotated frame back into the source frame.

    Inverse of ``source_point_to_rotated_frame`` and the same mapping that
    ``rotation_affine`` encodes.
    """
    a, b, c, d, e, f = rotation_affine(source_size, angle)
    return Offset(x=a * point.x + b * point.y + c, y=d * point.x + e * point.y + f)


def source_rect_to_rotated_frame(
    rect: SourceRect,
    source_size: Size,
    angle: float,
) -> RotatedFrameRect:
    """Return the rotated-frame bounds of a source-frame rectangle.

    The four corners are rotated and the smallest whole-pixel rectangle that
    contains them is returned. At quarter turns this is exact.
    """
    corners = [
        source_point_to_rotated_frame(Offset(x=x, y=y), source_size, angle)
        for x in (rect.x, rect.right)
        for y in (rect.y, rect.bottom)
    ]
    xs = [round(corner.x, _PIXEL_SNAP_DIGITS) for corner in corners]
    ys = [round(corner.y, _PIXEL_SNAP_DIGITS) for corner in corners]
    left = math.floor(min(xs))
    top = math.floor(min(ys))
    return RotatedFrameRect(
        x=left,
        y=top,
        width=max(1, math.ceil(max(xs)) - left),
        height=max(1, math.ceil(max(ys)) - top),
    )


def centered_crop(
    source_size: Size,
    angle: float,
    aspect_ratio: float,
    zoom: float = 1.0,
    pan: Offset | None = None,
) -> RotatedFrameRect:
    """Compute the crop rectangle a cropper shows for the given controls.

    The crop is the largest ``aspect_ratio`` rectangle that fits inside the
    unrotated image, shrunk by ``zoom`` and centred on the rotated frame.
    ``pan`` is the displacement of the image in rotated-frame pixels, so the
    crop moves the opposite way.

    Raises:
        ValueError: If aspect_ratio or zoom is not positive.
    """
    if aspect_ratio <= 0:
        raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
    if zoom <= 0:
        raise ValueError(f"zoom must be positive, got {zoom}")
    pan = pan or Offset()

    if source_size.width / source_size.height > aspect_ratio:
        crop_height = float(source_size.height)
        crop_width = crop_height * aspect_ratio
    else:
        crop_width = float(source_size.width)
        crop_height = crop_width / aspect_ratio
    crop_width /= zoom
    crop_height /= zoom

    surface = rotated_bounding_box(
        source_size.width, source_size.height, angle
    ).surface_size()
    center_x = surface.width / 2 - pan.x
    center_y = surface.height / 2 - pan.y
    return RotatedFrameRect.from_area(
        x=center_x - crop_width / 2,
        y=center_y - crop_height / 2,
        width=max(crop_width, 1.0),
        height=max(crop_height, 1.0),
    )
