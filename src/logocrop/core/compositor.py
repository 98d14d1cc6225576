"""Rotate-then-crop raster compositing for logocrop.

This module turns a {source image, crop rectangle, rotation} triple into the
pixels of the final cropped image, the same way the browser crop dialog
draws onto a canvas:

    1. Size the rotated bounding box of the source.
    2. Allocate an intermediate transparent surface of that size (rounded up).
    3. Draw the source onto it with translate(centre) -> rotate(angle) ->
       translate(-w/2, -h/2).
    4. Copy the crop rectangle out of the intermediate surface into an output
       surface of exactly crop.width x crop.height.

Boundary Behavior:
    The crop rectangle may hang over the intermediate surface or miss it
    entirely. Pixels outside the surface read as fully transparent
    (alpha = 0); this is never an error.

Resampling:
    Quarter turns (0, 90, 180, 270 degrees) use Image.transpose and are
    lossless. Other angles are resampled with bicubic filtering.
"""

from __future__ import annotations

import logging

from PIL import Image

from logocrop.core.types import CropRequest
from logocrop.geometry import (
    RotatedFrameRect,
    Size,
    quarter_turns,
    rotated_bounding_box,
    rotation_affine,
)
from logocrop.raster.surface import (
    SURFACE_MODE,
    TRANSPARENT,
    PillowSurfaceFactory,
    SurfaceFactory,
    ensure_loaded,
)

logger = logging.getLogger(__name__)

# Clockwise quarter turns -> Pillow transpose. Pillow's ROTATE_* constants
# turn counter-clockwise, so 90 degrees clockwise is ROTATE_270.
_QUARTER_TURN_TRANSPOSE: dict[int, Image.Transpose] = {
    1: Image.Transpose.ROTATE_270,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,
}


class Compositor:
    """Draws a rotated source image and extracts a crop from it.

    The compositor is stateless apart from its surface factory; every call
    allocates its own surfaces, and the intermediate surface is released
    before compose returns or raises.

    Example:
        >>> from PIL import Image
        >>> from logocrop.geometry import RotatedFrameRect
        >>>
        >>> source = Image.new("RGBA", (200, 100), (255, 0, 0, 255))
        >>> crop = RotatedFrameRect(x=0, y=50, width=100, height=100)
        >>> out = Compositor().compose(source, crop, rotation=90)
        >>> out.size
        (100, 100)
    """

    __slots__ = ("_surfaces",)

    def __init__(self, surface_factory: SurfaceFactory | None = None) -> None:
        """Initialize the compositor.

        Args:
            surface_factory: Source of drawable surfaces. Defaults to
                PillowSurfaceFactory with the configured pixel budget.
        """
        self._surfaces = surface_factory or PillowSurfaceFactory()

    def compose(
        self,
        image: Image.Image,
        crop: RotatedFrameRect,
        rotation: float = 0.0,
    ) -> Image.Image:
        """Render the rotated image and return the requested crop.

        Args:
            image: Loaded source image (any Pillow mode; drawn as RGBA).
            crop: Crop rectangle in the rotated frame.
            rotation: Rotation in degrees, clockwise-positive.

        Returns:
            New RGBA image of exactly crop.width x crop.height. The caller
            owns it.

        Raises:
            ImageLoadError: If image is not a loaded, non-empty PIL image.
            SurfaceAllocationError: If a surface cannot be allocated.
        """
        source = ensure_loaded(image)
        if not isinstance(crop, RotatedFrameRect):
            raise TypeError(
                f"crop must be a RotatedFrameRect, got {type(crop).__name__}"
            )

        # Step 1: Size the rotated frame
        bbox = rotated_bounding_box(source.width, source.height, rotation)
        surface_size = bbox.surface_size()

        # Step 2: Allocate the intermediate surface
        surface = self._surfaces.allocate(surface_size)
        try:
            # Step 3: Draw the rotated source onto it
            self._draw_rotated(surface, source, rotation)

            # Steps 4-5: Copy out the crop, transparent outside the surface
            output = self._surfaces.allocate(crop.size)
            overlap = crop.intersection_with(surface_size)
            if overlap is not None:
                region = surface.crop(overlap.to_box())
                output.paste(region, (overlap.x - crop.x, overlap.y - crop.y))
                region.close()
        finally:
            surface.close()

        logger.debug(
            "Composed crop",
            extra={
                "source_size": source.size,
                "rotation": rotation,
                "surface_size": surface_size.to_tuple(),
                "crop": crop.to_tuple(),
                "covered": overlap is not None,
            },
        )
        return output

    def compose_request(self, request: CropRequest) -> Image.Image:
        """Compose a CropRequest. See compose()."""
        return self.compose(request.image, request.crop, request.rotation)

    def _draw_rotated(
        self,
        surface: Image.Image,
        source: Image.Image,
        rotation: float,
    ) -> None:
        """Draw source onto surface, rotated about the surface centre."""
        rgba = source
        if source.mode != SURFACE_MODE:
            rgba = source.convert(SURFACE_MODE)
        turns = quarter_turns(rotation)

        if turns == 0:
            rotated = rgba
        elif turns is not None:
            # Surface size equals the swapped (or same) source size exactly
            rotated = rgba.transpose(_QUARTER_TURN_TRANSPOSE[turns])
        else:
            coefficients = rotation_affine(
                Size(width=source.width, height=source.height),
                rotation,
                Size(width=surface.width, height=surface.height),
            )
            rotated = rgba.transform(
                surface.size,
                Image.Transform.AFFINE,
                coefficients,
                resample=Image.Resampling.BICUBIC,
                fillcolor=TRANSPARENT,
            )

        surface.paste(rotated, (0, 0))

        if rotated is not source and rotated is not rgba:
            rotated.close()
        if rgba is not source:
            rgba.close()
