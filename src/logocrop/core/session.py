"""Interactive transform state for one crop dialog session.

The session holds what the user is adjusting (pan, zoom, rotation and the
last crop rectangle the cropper widget reported) and runs compose + encode
when the user saves.

The session has three states:
- IDLE: Nothing changed since opening, the last commit or a reset
- ADJUSTING: The user has changed at least one control
- COMMITTING: A save is in flight; further saves are refused

Adjustments only update in-memory fields. No pixels are touched until
commit(), and commit() always lands back in IDLE whether it succeeds or
fails, so a failed save never leaves the dialog stuck disabled.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum

from PIL import Image

from logocrop.config import settings
from logocrop.core.compositor import Compositor
from logocrop.core.exporter import Exporter
from logocrop.core.types import EncodedBlob
from logocrop.geometry import Offset, RotatedFrameRect
from logocrop.raster.exceptions import (
    CommitInProgressError,
    CropError,
    NoCropAreaError,
)
from logocrop.raster.surface import ensure_loaded
from logocrop.utils.logging import (
    clear_commit_context,
    get_logger,
    set_correlation_context,
)

logger = get_logger(__name__)

_DEFAULT_ZOOM = 1.0
_DEFAULT_ROTATION = 0.0


class SessionState(Enum):
    """Crop session states."""

    IDLE = "idle"
    ADJUSTING = "adjusting"
    COMMITTING = "committing"


@dataclass(frozen=True)
class TransformSnapshot:
    """Immutable copy of the session's adjustable fields.

    Attributes:
        pan: Image displacement in rotated-frame pixels.
        zoom: Current zoom factor.
        rotation: Current rotation in degrees, as set (not normalised).
        crop: Last crop rectangle reported by the cropper, if any.
    """

    pan: Offset
    zoom: float
    rotation: float
    crop: RotatedFrameRect | None


def _require_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return float(value)


@dataclass
class CropSession:
    """State machine behind a crop-and-rotate dialog.

    Usage:
        session = CropSession(image=load_image("logo.png"), aspect_ratio=1.0)

        # Cropper widget callbacks
        session.set_zoom(1.5)
        session.set_rotation(90)
        session.on_crop_complete(RotatedFrameRect(x=10, y=10, width=80, height=80))

        # Save button
        if session.can_commit:
            blob = await session.commit()
    """

    image: Image.Image
    aspect_ratio: float = field(default_factory=lambda: settings.DEFAULT_ASPECT_RATIO)
    compositor: Compositor = field(default_factory=Compositor)
    exporter: Exporter = field(default_factory=Exporter)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    zoom_min: float = field(default_factory=lambda: settings.ZOOM_MIN)
    zoom_max: float = field(default_factory=lambda: settings.ZOOM_MAX)

    # Internal state
    _state: SessionState = field(default=SessionState.IDLE, init=False)
    _pan: Offset = field(default_factory=Offset, init=False)
    _zoom: float = field(default=_DEFAULT_ZOOM, init=False)
    _rotation: float = field(default=_DEFAULT_ROTATION, init=False)
    _crop: RotatedFrameRect | None = field(default=None, init=False)
    _commit_count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        ensure_loaded(self.image)
        if not self.aspect_ratio > 0:
            raise ValueError(
                f"aspect_ratio must be positive, got {self.aspect_ratio}"
            )
        if not 0 < self.zoom_min <= self.zoom_max:
            raise ValueError(
                f"Invalid zoom range [{self.zoom_min}, {self.zoom_max}]"
            )

    # --- State ---

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        return self._state

    @property
    def is_committing(self) -> bool:
        """Check if a commit is in flight."""
        return self._state == SessionState.COMMITTING

    @property
    def can_commit(self) -> bool:
        """Check if the save action should be enabled."""
        return not self.is_committing and self._crop is not None

    @property
    def pan(self) -> Offset:
        return self._pan

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def rotation(self) -> float:
        return self._rotation

    @property
    def crop(self) -> RotatedFrameRect | None:
        return self._crop

    def snapshot(self) -> TransformSnapshot:
        """Return an immutable copy of the adjustable fields."""
        return TransformSnapshot(
            pan=self._pan,
            zoom=self._zoom,
            rotation=self._rotation,
            crop=self._crop,
        )

    def _transition(self, new_state: SessionState) -> None:
        if new_state == self._state:
            return
        logger.debug(
            "Session state change",
            session_id=self.session_id,
            old=self._state.value,
            new=new_state.value,
        )
        self._state = new_state

    def _mark_adjusted(self) -> None:
        # A save snapshots its inputs up front, so edits made while it runs
        # apply to the next commit and leave the state alone.
        if self._state == SessionState.IDLE:
            self._transition(SessionState.ADJUSTING)

    # --- Adjustments (cropper widget callbacks) ---

    def set_pan(self, x: float, y: float) -> None:
        """Record the image displacement reported by a drag gesture."""
        self._pan = Offset(
            x=_require_finite("pan x", x),
            y=_require_finite("pan y", y),
        )
        self._mark_adjusted()

    def set_zoom(self, zoom: float) -> None:
        """Record a zoom change, clamped to [zoom_min, zoom_max]."""
        zoom = _require_finite("zoom", zoom)
        self._zoom = min(max(zoom, self.zoom_min), self.zoom_max)
        self._mark_adjusted()

    def set_rotation(self, angle: float) -> None:
        """Record a rotation change in degrees (any finite value)."""
        self._rotation = _require_finite("rotation", angle)
        self._mark_adjusted()

    def on_crop_complete(
        self,
        crop: RotatedFrameRect,
        zoom: float | None = None,
    ) -> None:
        """Record the crop rectangle the cropper computed after a gesture.

        Args:
            crop: Crop rectangle in the rotated frame.
            zoom: Zoom the cropper used, if it reports one.
        """
        if not isinstance(crop, RotatedFrameRect):
            raise TypeError(
                f"crop must be a RotatedFrameRect, got {type(crop).__name__}"
            )
        if zoom is not None:
            zoom = _require_finite("zoom", zoom)
        self._crop = crop
        if zoom is not None:
            self.set_zoom(zoom)
        self._mark_adjusted()

    def reset(self) -> None:
        """Restore pan, zoom and rotation to their defaults.

        The source image and the last reported crop are left untouched. An
        in-flight commit is not interrupted and still settles to IDLE.
        """
        self._pan = Offset()
        self._zoom = _DEFAULT_ZOOM
        self._rotation = _DEFAULT_ROTATION
        if not self.is_committing:
            self._transition(SessionState.IDLE)
        logger.debug("Session reset", session_id=self.session_id)

    # --- Commit ---

    async def commit(self) -> EncodedBlob:
        """Compose and encode the current crop.

        Returns:
            EncodedBlob with the PNG of the cropped, rotated image.

        Raises:
            CommitInProgressError: If another commit is still running.
            NoCropAreaError: If the cropper has not reported a crop yet.
            ImageLoadError: If the source image is unusable.
            SurfaceAllocationError: If compose cannot allocate a surface.
            EncodingError: If the encoder produced no output.
        """
        if self.is_committing:
            raise CommitInProgressError(
                "A commit is already in progress", session_id=self.session_id
            )
        if self._crop is None:
            raise NoCropAreaError(
                "No crop area reported yet", session_id=self.session_id
            )

        crop = self._crop
        rotation = self._rotation
        self._commit_count += 1
        commit_id = f"{self.session_id}-{self._commit_count}"
        set_correlation_context(session_id=self.session_id, commit_id=commit_id)

        self._transition(SessionState.COMMITTING)
        try:
            output = self.compositor.compose(self.image, crop, rotation)
            try:
                blob = await self.exporter.encode(output)
            finally:
                output.close()
        except CropError as e:
            logger.warning(
                "Commit failed",
                error_type=type(e).__name__,
                error=str(e),
                crop=crop.to_tuple(),
                rotation=rotation,
            )
            raise
        finally:
            clear_commit_context()
            self._transition(SessionState.IDLE)

        logger.info(
            "Commit complete",
            commit_id=commit_id,
            crop=crop.to_tuple(),
            rotation=rotation,
            bytes=blob.size,
        )
        return blob
