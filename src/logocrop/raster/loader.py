"""Source image loading.

Turns a filesystem path, an http(s) URL or raw bytes into a fully decoded
Pillow image. Decoding happens eagerly so that a truncated or corrupt file
fails here with ImageLoadError instead of midway through a compose.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import httpx
from PIL import Image, UnidentifiedImageError

from logocrop.config import settings
from logocrop.raster.exceptions import ImageLoadError

logger = logging.getLogger(__name__)

_URL_SCHEMES = ("http://", "https://")


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.lower().startswith(_URL_SCHEMES)


def load_image_bytes(data: bytes, *, source: str | None = None) -> Image.Image:
    """Decode an in-memory encoded image.

    Args:
        data: Encoded image bytes (PNG, JPEG, ...).
        source: Where the bytes came from, for error messages.

    Returns:
        Fully loaded PIL Image.

    Raises:
        ImageLoadError: If the bytes are empty or not a decodable image.
    """
    if not data:
        raise ImageLoadError("Image data is empty", source=source)
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageLoadError(f"Cannot decode image: {e}", source=source) from e
    return image


def _fetch(url: str, timeout: float) -> bytes:
    """Download a URL and return the response body."""
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            resp = client.get(url)
            resp.raise_for_status()
    except httpx.HTTPError as e:
        raise ImageLoadError(f"Failed to fetch image: {e}", source=url) from e
    return resp.content


def load_image(
    source: str | Path | bytes,
    *,
    timeout: float | None = None,
) -> Image.Image:
    """Load and decode a source image.

    Args:
        source: Local path, http(s) URL, or encoded bytes.
        timeout: Fetch timeout in seconds for URLs. Defaults to
            settings.FETCH_TIMEOUT_SECONDS.

    Returns:
        Fully loaded PIL Image. The caller owns it for the crop session.

    Raises:
        ImageLoadError: If the image cannot be fetched, read or decoded.
    """
    if isinstance(source, bytes):
        return load_image_bytes(source)

    if _is_url(source):
        url = str(source)
        effective_timeout = (
            settings.FETCH_TIMEOUT_SECONDS if timeout is None else timeout
        )
        logger.debug("Fetching source image", extra={"url": url})
        return load_image_bytes(_fetch(url, effective_timeout), source=url)

    path = Path(source)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageLoadError(f"Cannot read image file: {e}", source=str(path)) from e
    return load_image_bytes(data, source=str(path))
