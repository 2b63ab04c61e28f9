"""
ObservationSource interface for pluggable frame sources.

A detection pass reads one frame from either:
- a live camera (OpenCV VideoCapture)
- a decoded still image (uploaded bytes or a file on disk)

Both expose the same FrameData view, so the pipeline never needs to know
where the pixels came from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional

from models.frame import FrameData


class CaptureFailure(str, Enum):
    """Reasons a capture device could not be acquired."""
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    UNSUPPORTED = "unsupported"


CAPTURE_FAILURE_MESSAGES = {
    CaptureFailure.PERMISSION_DENIED: (
        "Camera access failed. Please allow camera permissions for this user."
    ),
    CaptureFailure.NOT_FOUND: (
        "Camera access failed. No camera found. Please use image upload instead."
    ),
    CaptureFailure.UNSUPPORTED: (
        "Camera access failed. Please try using image upload feature."
    ),
}


class CaptureError(RuntimeError):
    """Raised when a capture device cannot be opened."""

    def __init__(self, reason: CaptureFailure, detail: str = ""):
        super().__init__(detail or reason.value)
        self.reason = reason
        self.detail = detail

    @property
    def user_message(self) -> str:
        return CAPTURE_FAILURE_MESSAGES[self.reason]


@dataclass
class ObservationConfig:
    """
    Base configuration for observation sources.

    Attributes:
        source_id: Unique identifier for this source (e.g., "webcam", "upload").
        resolution: Target resolution as (width, height). None = use source default.
        fps: Target frames per second. None = use source default.
        metadata: Additional source-specific configuration.
    """
    source_id: str = "default"
    resolution: Optional[tuple[int, int]] = None
    fps: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ObservationSource(ABC):
    """
    Abstract base class for observation sources.

    Lifecycle:
        1. Create instance with config
        2. Call open() to acquire the device or decode the image
        3. Call read() to get frames
        4. Call close() to release resources

    Can also be used as a context manager:
        with CameraSource(config) as source:
            frame_data = source.read()
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        """Unique identifier for this source."""
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        """Whether the source is currently open and ready to read."""
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Number of frames read since open."""
        return self._frame_index

    @abstractmethod
    def open(self) -> None:
        """
        Open/initialize the observation source.

        Raises:
            CaptureError: If a camera cannot be acquired.
            ImageDecodeError: If an image cannot be decoded.
        """

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        """
        Read the current frame.

        Returns:
            FrameData, or None if no frame is available.
        """

    @abstractmethod
    def close(self) -> None:
        """
        Release the source. Safe to call multiple times.
        """

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FrameData]:
        """Yield frames until the source returns None."""
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")

        while True:
            frame_data = self.read()
            if frame_data is None:
                break
            yield frame_data
