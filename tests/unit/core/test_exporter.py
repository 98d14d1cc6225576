"""Unit tests for the asynchronous PNG exporter."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from logocrop.core.exporter import Exporter
from logocrop.core.types import PNG_MEDIA_TYPE, EncodedBlob
from logocrop.raster.exceptions import EncodingError, ImageLoadError

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestExporterEncode:
    """Tests for Exporter.encode."""

    @pytest.mark.asyncio
    async def test_encodes_png(self, gradient_image: Image.Image) -> None:
        blob = await Exporter().encode(gradient_image)
        assert blob.media_type == PNG_MEDIA_TYPE
        assert blob.data.startswith(_PNG_SIGNATURE)
        assert (blob.width, blob.height) == (100, 100)

    @pytest.mark.asyncio
    async def test_png_is_lossless(self, gradient_image: Image.Image) -> None:
        blob = await Exporter().encode(gradient_image)
        with Image.open(BytesIO(blob.data)) as decoded:
            assert decoded.mode == "RGBA"
            assert decoded.tobytes() == gradient_image.tobytes()

    @pytest.mark.asyncio
    async def test_preserves_transparency(self) -> None:
        surface = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
        surface.putpixel((1, 1), (10, 20, 30, 255))
        blob = await Exporter().encode(surface)
        with Image.open(BytesIO(blob.data)) as decoded:
            assert decoded.getpixel((0, 0))[3] == 0
            assert decoded.getpixel((1, 1)) == (10, 20, 30, 255)

    @pytest.mark.asyncio
    async def test_surface_is_left_open(self, quadrant_image: Image.Image) -> None:
        await Exporter().encode(quadrant_image)
        assert quadrant_image.getpixel((0, 0)) == (255, 0, 0, 255)

    @pytest.mark.asyncio
    async def test_empty_output_is_an_error(self, quadrant_image: Image.Image) -> None:
        exporter = Exporter()
        with patch.object(exporter, "_encode_png", return_value=b""):
            with pytest.raises(EncodingError, match="no data") as exc:
                await exporter.encode(quadrant_image)
        assert exc.value.media_type == PNG_MEDIA_TYPE

    @pytest.mark.asyncio
    async def test_encoder_failure_is_wrapped(self) -> None:
        # PNG has no CMYK mode, Pillow refuses to write it
        surface = Image.new("CMYK", (4, 4))
        with pytest.raises(EncodingError, match="PNG encoding failed") as exc:
            await Exporter().encode(surface)
        assert isinstance(exc.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_rejects_non_image(self) -> None:
        with pytest.raises(ImageLoadError):
            await Exporter().encode(b"raw bytes")  # type: ignore[arg-type]


class TestEncodedBlob:
    """Tests for EncodedBlob helpers."""

    def test_size_is_byte_length(self) -> None:
        blob = EncodedBlob(data=b"abcd", media_type=PNG_MEDIA_TYPE, width=1, height=1)
        assert blob.size == 4

    def test_to_base64_is_standard_alphabet(self) -> None:
        data = bytes([0xFB, 0xFF, 0xFE]) * 40
        blob = EncodedBlob(data=data, media_type=PNG_MEDIA_TYPE, width=1, height=1)
        encoded = blob.to_base64()
        assert "\n" not in encoded
        assert "+" in encoded or "/" in encoded
        assert base64.b64decode(encoded) == data

    def test_write_to(self, tmp_path: Path) -> None:
        blob = EncodedBlob(data=b"png!", media_type=PNG_MEDIA_TYPE, width=1, height=1)
        target = blob.write_to(str(tmp_path / "out.png"))
        assert target == tmp_path / "out.png"
        assert target.read_bytes() == b"png!"

    def test_is_frozen(self) -> None:
        blob = EncodedBlob(data=b"x", media_type=PNG_MEDIA_TYPE, width=1, height=1)
        with pytest.raises(AttributeError):
            blob.width = 2  # type: ignore[misc]
