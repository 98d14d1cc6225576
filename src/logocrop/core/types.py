"""Request and result types for the crop pipeline."""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from pathlib import Path

from PIL import Image
from pydantic import BaseModel, ConfigDict, field_validator

from logocrop.geometry import RotatedFrameRect

PNG_MEDIA_TYPE = "image/png"


class CropRequest(BaseModel):
    """Everything one commit needs: the image, the crop and the rotation.

    Attributes:
        image: Loaded source image. Read-only for the duration of the commit.
        crop: Crop rectangle in the rotated frame.
        rotation: Rotation in degrees, clockwise-positive.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    image: Image.Image
    crop: RotatedFrameRect
    rotation: float = 0.0

    @field_validator("rotation")
    @classmethod
    def _rotation_is_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("rotation must be finite")
        return value


@dataclass(frozen=True)
class EncodedBlob:
    """Encoded output image handed back to the caller.

    Attributes:
        data: Complete encoded file bytes.
        media_type: MIME type of ``data``.
        width: Pixel width of the encoded image.
        height: Pixel height of the encoded image.
    """

    data: bytes
    media_type: str
    width: int
    height: int

    @property
    def size(self) -> int:
        """Return the encoded length in bytes."""
        return len(self.data)

    def to_base64(self) -> str:
        """Return standard Base64 (no URL-safe alphabet, no newlines)."""
        return base64.b64encode(self.data).decode("ascii")

    def write_to(self, path: Path | str) -> Path:
        """Write the encoded bytes to a file and return its path."""
        target = Path(path)
        target.write_bytes(self.data)
        return target
