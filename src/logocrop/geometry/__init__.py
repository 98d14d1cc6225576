"""Geometry module for logocrop.

This package provides the coordinate primitives and the rotation math used
to turn a {source image, rotation, crop rectangle} request into surface
sizes and sampling transforms.

Key Components:
    - Primitives: Size, Offset, BoundingBox and the frame-tagged
      SourceRect / RotatedFrameRect rectangles
    - Transforms: rotated bounding box, Pillow affine coefficients and
      source <-> rotated frame conversions

Example:
    from logocrop.geometry import RotatedFrameRect, rotated_bounding_box

    bbox = rotated_bounding_box(200, 100, 90)
    surface = bbox.surface_size()  # Size(width=100, height=200)

    # Crop rectangles reported by a cropper UI live in the rotated frame
    crop = RotatedFrameRect(x=0, y=50, width=100, height=100)
"""

from logocrop.geometry.primitives import (
    BoundingBox,
    Offset,
    RotatedFrameRect,
    Size,
    SourceRect,
)
from logocrop.geometry.transforms import (
    centered_crop,
    normalize_angle,
    quarter_turns,
    rotated_bounding_box,
    rotated_frame_point_to_source,
    rotation_affine,
    rotation_sin_cos,
    source_point_to_rotated_frame,
    source_rect_to_rotated_frame,
)

__all__ = [
    "BoundingBox",
    "Offset",
    "RotatedFrameRect",
    "Size",
    "SourceRect",
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
