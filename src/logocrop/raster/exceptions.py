"""Custom exceptions for the crop pipeline.

Every failure a commit can hit derives from CropError, so callers can
catch the whole family at the boundary while still telling resource
exhaustion, encoder failures and bad inputs apart.
"""

from __future__ import annotations

from typing import Any


class CropError(Exception):
    """Base exception for all crop pipeline errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize crop error with optional operation context.

        Args:
            message: Human-readable error description.
            **context: Extra key/value details (sizes, sources, formats)
                appended to the message. None values are skipped.
        """
        self.message = message
        self.context = {
            key: value for key, value in context.items() if value is not None
        }
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class SurfaceAllocationError(CropError):
    """Raised when a drawable surface of the required size cannot be obtained.

    This error is raised when:
    - The requested surface exceeds the configured pixel budget
    - Pillow runs out of memory allocating the surface
    """

    def __init__(self, message: str, *, size: tuple[int, int] | None = None) -> None:
        self.size = size
        super().__init__(message, size=size)


class EncodingError(CropError):
    """Raised when the encoder produces no output for a surface."""

    def __init__(self, message: str, *, media_type: str | None = None) -> None:
        self.media_type = media_type
        super().__init__(message, media_type=media_type)


class ImageLoadError(CropError):
    """Raised when a source image cannot be resolved.

    This error is raised when:
    - The file does not exist or cannot be read
    - The URL cannot be fetched
    - The bytes are not a decodable image
    - An object that is not a loaded image is handed to compose
    """

    def __init__(self, message: str, *, source: str | None = None) -> None:
        self.source = source
        super().__init__(message, source=source)


class CommitInProgressError(CropError):
    """Raised when a commit is requested while another is still running."""


class NoCropAreaError(CropError):
    """Raised when a commit is requested before any crop area was reported."""
