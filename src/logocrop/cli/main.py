"""logocrop CLI - rotate and crop an image into a PNG.

Command-line front end for the crop pipeline, mainly for scripting and for
checking crop geometry without the dashboard dialog.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer

from logocrop import __version__
from logocrop.config import settings
from logocrop.core import CropSession
from logocrop.geometry import (
    RotatedFrameRect,
    Size,
    centered_crop,
    rotated_bounding_box,
)
from logocrop.raster import CropError, load_image
from logocrop.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="logocrop",
    help="logocrop: rotate and crop images into lossless PNGs",
    add_completion=False,
)

_CROP_FIELDS = 4


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"logocrop {__version__}")


@app.command()
def bbox(
    width: Annotated[float, typer.Argument(help="Image width in pixels")],
    height: Annotated[float, typer.Argument(help="Image height in pixels")],
    angle: Annotated[float, typer.Argument(help="Rotation in degrees")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Print the bounding box of a rotated image."""
    try:
        box = rotated_bounding_box(width, height, angle)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    surface = box.surface_size()
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "width": box.width,
                    "height": box.height,
                    "surface_width": surface.width,
                    "surface_height": surface.height,
                }
            )
        )
    else:
        typer.echo(f"Bounding box: {box.width:.6f} x {box.height:.6f}")
        typer.echo(f"Surface: {surface.width} x {surface.height}")


@app.command()
def crop(  # noqa: PLR0913
    source: Annotated[
        str, typer.Argument(help="Source image path or http(s) URL")
    ],
    output: Annotated[Path, typer.Argument(help="Destination PNG path")],
    crop_area: Annotated[
        str | None,
        typer.Option(
            "--crop",
            "-c",
            help="Crop rectangle x,y,width,height in rotated-frame pixels",
        ),
    ] = None,
    rotation: Annotated[
        float, typer.Option("--rotation", "-r", help="Clockwise rotation in degrees")
    ] = 0.0,
    zoom: Annotated[
        float,
        typer.Option("--zoom", "-z", help="Zoom for the default centred crop"),
    ] = 1.0,
    aspect: Annotated[
        float | None,
        typer.Option("--aspect", "-a", help="Width/height ratio of the default crop"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Rotate SOURCE, crop it and write the result to OUTPUT as PNG."""
    explicit_crop = _parse_crop(crop_area) if crop_area is not None else None

    _configure_logging(verbose)
    logger = get_logger(__name__)
    logger.info("Starting crop", source=source, rotation=rotation)

    try:
        image = load_image(source)
        session = CropSession(
            image=image,
            aspect_ratio=settings.DEFAULT_ASPECT_RATIO if aspect is None else aspect,
        )
        session.set_zoom(zoom)
        session.set_rotation(rotation)
        area = explicit_crop or centered_crop(
            Size(width=image.width, height=image.height),
            session.rotation,
            session.aspect_ratio,
            zoom=session.zoom,
        )
        session.on_crop_complete(area)
        blob = asyncio.run(session.commit())
        blob.write_to(output)
    except (CropError, ValueError) as e:
        logger.error("Crop failed", error=str(e))
        if json_output:
            typer.echo(json.dumps({"error": str(e)}))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    logger.info("Crop written", path=str(output), bytes=blob.size)
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "output": str(output),
                    "media_type": blob.media_type,
                    "width": blob.width,
                    "height": blob.height,
                    "bytes": blob.size,
                    "crop": list(area.to_tuple()),
                    "rotation": rotation,
                }
            )
        )
    else:
        typer.echo(f"Wrote {blob.width}x{blob.height} PNG to {output}")


# =============================================================================
# Helpers
# =============================================================================


def _parse_crop(value: str) -> RotatedFrameRect:
    """Parse an ``x,y,width,height`` option into a RotatedFrameRect."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != _CROP_FIELDS:
        raise typer.BadParameter(
            "expected x,y,width,height", param_hint="--crop"
        )
    try:
        x, y, width, height = (float(part) for part in parts)
        return RotatedFrameRect.from_area(x, y, width, height)
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise typer.BadParameter(str(e), param_hint="--crop") from e


def _configure_logging(verbose: int) -> None:
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


if __name__ == "__main__":  # pragma: no cover
    app()
