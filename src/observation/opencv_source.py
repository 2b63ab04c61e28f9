"""
OpenCV camera source.

Opens a local capture device (index) or a stream URL through cv2.VideoCapture
and classifies acquisition failures into CaptureFailure reasons. Failures are
never retried here; the controller reports them and stays idle.
"""

from __future__ import annotations

import errno
import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

import cv2
import numpy as np

from models.frame import FrameData
from .base import CaptureError, CaptureFailure, ObservationConfig, ObservationSource


@dataclass
class CameraSourceConfig(ObservationConfig):
    """
    Configuration for the OpenCV camera source.

    Attributes:
        device_id: Camera index (int) or stream URL (str).
        buffer_size: OpenCV capture buffer size (keeps latency low for live feeds).
        swap_rb: Swap R/B channels (fixes RGB vs BGR drivers).
        flip_horizontal: Mirror the frame, as a selfie camera preview does.
    """
    device_id: Union[int, str] = 0
    buffer_size: int = 1
    swap_rb: bool = False
    flip_horizontal: bool = False

    @classmethod
    def from_camera_config(cls, camera_cfg: Dict[str, Any], source_id: str = "webcam") -> "CameraSourceConfig":
        """
        Adapter: Create CameraSourceConfig from the camera config dict.
        """
        resolution = camera_cfg.get("resolution")
        if resolution:
            resolution = tuple(resolution)

        return cls(
            source_id=source_id,
            resolution=resolution,
            fps=camera_cfg.get("fps"),
            device_id=camera_cfg.get("device_id", 0),
            buffer_size=camera_cfg.get("buffer_size", 1),
            swap_rb=camera_cfg.get("swap_rb", False),
            flip_horizontal=camera_cfg.get("flip_horizontal", False),
        )


def classify_device(device_id: Union[int, str]) -> Optional[CaptureFailure]:
    """
    Check a local capture device before opening it.

    On Linux, index N maps to /dev/videoN: a missing node means no device and an
    unreadable node means the user lacks permission. Other platforms and stream
    URLs are not pre-checked.
    """
    if not isinstance(device_id, int) or not sys.platform.startswith("linux"):
        return None
    node = f"/dev/video{device_id}"
    if not os.path.exists(node):
        return CaptureFailure.NOT_FOUND
    if not os.access(node, os.R_OK | os.W_OK):
        return CaptureFailure.PERMISSION_DENIED
    return None


class CameraSource(ObservationSource):
    """
    OpenCV-based camera source.

    Example:
        config = CameraSourceConfig(device_id=0, resolution=(1280, 720))
        with CameraSource(config) as source:
            frame_data = source.read()
    """

    def __init__(
        self,
        config: CameraSourceConfig,
        capture_factory: Callable[[Union[int, str]], Any] = cv2.VideoCapture,
        device_check: Callable[[Union[int, str]], Optional[CaptureFailure]] = classify_device,
    ):
        super().__init__(config)
        self._camera_config = config
        self._capture_factory = capture_factory
        self._device_check = device_check
        self._cap: Optional[Any] = None

    @property
    def device_id(self) -> Union[int, str]:
        return self._camera_config.device_id

    def open(self) -> None:
        """Acquire the capture device."""
        if self._is_open:
            return

        failure = self._device_check(self.device_id)
        if failure is not None:
            raise CaptureError(failure, f"device {self.device_id}: {failure.value}")

        try:
            cap = self._capture_factory(self.device_id)
        except PermissionError as e:
            raise CaptureError(CaptureFailure.PERMISSION_DENIED, str(e)) from e
        except cv2.error as e:
            raise CaptureError(CaptureFailure.UNSUPPORTED, str(e)) from e
        except OSError as e:
            reason = CaptureFailure.PERMISSION_DENIED if e.errno in (errno.EACCES, errno.EPERM) else CaptureFailure.NOT_FOUND
            raise CaptureError(reason, str(e)) from e

        if not cap.isOpened():
            cap.release()
            raise CaptureError(CaptureFailure.NOT_FOUND, f"Failed to open device {self.device_id}")

        if isinstance(self.device_id, int) and self._camera_config.resolution:
            w, h = self._camera_config.resolution
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
            if self._camera_config.fps:
                cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)
            cap.set(cv2.CAP_PROP_BUFFERSIZE, self._camera_config.buffer_size)
            logging.info(
                f"Camera actual settings - Resolution: ({cap.get(cv2.CAP_PROP_FRAME_WIDTH)}x"
                f"{cap.get(cv2.CAP_PROP_FRAME_HEIGHT)}), FPS: {cap.get(cv2.CAP_PROP_FPS)}"
            )

        self._cap = cap
        self._is_open = True
        self._frame_index = 0
        logging.info(f"CameraSource opened: source_id={self.source_id}, device={self.device_id}")

    def read(self) -> Optional[FrameData]:
        """Grab the latest frame from the camera."""
        if not self._is_open or self._cap is None:
            return None

        ret, frame = self._cap.read()
        if not ret or frame is None:
            logging.warning(f"Failed to read frame from {self.source_id}")
            return None

        frame = self._apply_transforms(frame)
        self._frame_index += 1

        return FrameData.from_numpy(
            frame,
            timestamp=time.time(),
            frame_index=self._frame_index,
            source=self.source_id,
            color_order="BGR",
        )

    def _apply_transforms(self, frame: np.ndarray) -> np.ndarray:
        """Apply configured image transforms (flip, swap_rb)."""
        if self._camera_config.flip_horizontal:
            frame = cv2.flip(frame, 1)
        if self._camera_config.swap_rb:
            frame = frame[..., ::-1].copy()
        return frame

    def close(self) -> None:
        """Release the capture device."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        if self._is_open:
            logging.info(f"CameraSource closed: source_id={self.source_id}")
        self._is_open = False
