"""Core crop pipeline for logocrop.

This package contains the compositing, export and session components that
turn a source image plus user adjustments into an encoded crop.

Public API:
    - Compositor: Draws the rotated source and extracts the crop.
    - Exporter: Asynchronously encodes a surface into an EncodedBlob.
    - CropSession: Idle/Adjusting/Committing state machine for one dialog.
    - CropRequest / EncodedBlob: Pipeline input and output types.
"""

from logocrop.core.compositor import Compositor
from logocrop.core.exporter import Exporter
from logocrop.core.session import CropSession, SessionState, TransformSnapshot
from logocrop.core.types import PNG_MEDIA_TYPE, CropRequest, EncodedBlob

__all__ = [
    "PNG_MEDIA_TYPE",
    "Compositor",
    "CropRequest",
    "CropSession",
    "EncodedBlob",
    "Exporter",
    "SessionState",
    "TransformSnapshot",
]
