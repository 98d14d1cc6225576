"""Raster layer for logocrop.

This package owns everything that touches pixel memory directly: loading
and decoding source images, allocating drawable surfaces, and the error
taxonomy shared by the whole pipeline.

Key Components:
    - load_image: Decode a path, bytes or URL into a fully loaded image
    - SurfaceFactory / PillowSurfaceFactory: Transparent RGBA surfaces
    - CropError and subclasses: Pipeline error taxonomy
"""

from logocrop.raster.exceptions import (
    CommitInProgressError,
    CropError,
    EncodingError,
    ImageLoadError,
    NoCropAreaError,
    SurfaceAllocationError,
)
from logocrop.raster.loader import load_image, load_image_bytes
from logocrop.raster.surface import (
    TRANSPARENT,
    PillowSurfaceFactory,
    SurfaceFactory,
    ensure_loaded,
)

__all__ = [
    "TRANSPARENT",
    "CommitInProgressError",
    "CropError",
    "EncodingError",
    "ImageLoadError",
    "NoCropAreaError",
    "PillowSurfaceFactory",
    "SurfaceAllocationError",
    "SurfaceFactory",
    "ensure_loaded",
    "load_image",
    "load_image_bytes",
]
