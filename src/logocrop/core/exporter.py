"""Asynchronous PNG export for composed crops.

Encoding a large surface is not instantaneous, so the Pillow encoder runs in
a worker thread and the caller awaits the result. The output format is fixed
to PNG: lossless, so "maximum quality" needs no knob.
"""

from __future__ import annotations

import asyncio
import logging
from io import BytesIO

from PIL import Image

from logocrop.core.types import PNG_MEDIA_TYPE, EncodedBlob
from logocrop.raster.exceptions import EncodingError
from logocrop.raster.surface import ensure_loaded

logger = logging.getLogger(__name__)

_PNG_FORMAT = "PNG"


class Exporter:
    """Encodes a composed surface into an EncodedBlob.

    Exactly one outcome per call: a complete blob, or EncodingError. Nothing
    is retried and no partial bytes are ever returned.

    Usage:
        exporter = Exporter()
        blob = await exporter.encode(surface)
        blob.write_to("logo.png")
    """

    media_type = PNG_MEDIA_TYPE

    async def encode(self, surface: Image.Image) -> EncodedBlob:
        """Encode a surface as PNG off the event loop thread.

        Args:
            surface: Image to encode. Not modified or closed.

        Returns:
            EncodedBlob holding the full PNG file.

        Raises:
            ImageLoadError: If surface is not a loaded, non-empty image.
            EncodingError: If the encoder fails or produces no bytes.
        """
        image = ensure_loaded(surface)
        data = await asyncio.to_thread(self._encode_png, image)
        if not data:
            raise EncodingError("Encoder produced no data", media_type=self.media_type)

        logger.debug(
            "Encoded surface",
            extra={"size": image.size, "bytes": len(data)},
        )
        return EncodedBlob(
            data=data,
            media_type=self.media_type,
            width=image.width,
            height=image.height,
        )

    def _encode_png(self, image: Image.Image) -> bytes:
        """Encode image as PNG bytes.

        Raises:
            EncodingError: If Pillow cannot write the image.
        """
        buffer = BytesIO()
        try:
            image.save(buffer, format=_PNG_FORMAT)
        except (OSError, ValueError) as e:
            raise EncodingError(
                f"PNG encoding failed: {e}", media_type=self.media_type
            ) from e
        return buffer.getvalue()
