"""
Still-image source for uploaded files.

Image bytes are decoded with cv2.imdecode. The decoded frame is static:
every read() returns the same FrameData until the source is closed.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np

from models.frame import FrameData
from .base import ObservationConfig, ObservationSource


class ImageDecodeError(ValueError):
    """Raised when uploaded bytes are not a decodable image."""


def decode_image(data: bytes, name: str = "upload") -> FrameData:
    """
    Decode encoded image bytes (JPEG, PNG, ...) into a FrameData.

    Alpha channels are kept in the frame (BGRA) and ignored downstream.
    """
    if not data:
        raise ImageDecodeError(f"{name}: empty image")
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError(f"{name}: not a supported image format")
    if image.dtype != np.uint8:
        # 16-bit PNG/TIFF
        image = cv2.convertScaleAbs(image, alpha=255.0 / 65535.0)
    return FrameData.from_numpy(image, timestamp=time.time(), frame_index=1, source=name)


DEMO_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


def list_demo_images(images_dir: str) -> List[str]:
    """Names (without extension) of the images bundled in images_dir."""
    if not os.path.isdir(images_dir):
        return []
    names = []
    for entry in sorted(os.listdir(images_dir)):
        stem, ext = os.path.splitext(entry)
        if ext.lower() in DEMO_IMAGE_EXTENSIONS:
            names.append(stem)
    return names


def find_demo_image(images_dir: str, name: str) -> Optional[str]:
    """
    Resolve a demo image name to a file inside images_dir.

    Accepts "classroom" or "classroom.jpg". Names containing a path component
    never resolve.
    """
    if not name or os.path.basename(name) != name or name in (".", ".."):
        return None
    candidates = [name] + [name + ext for ext in DEMO_IMAGE_EXTENSIONS]
    for candidate in candidates:
        path = os.path.join(images_dir, candidate)
        if os.path.splitext(candidate)[1].lower() in DEMO_IMAGE_EXTENSIONS and os.path.isfile(path):
            return path
    return None


async def decode_image_async(data: bytes, name: str = "upload") -> FrameData:
    """Decode off the event loop; completion publishes the frame."""
    return await asyncio.to_thread(decode_image, data, name)


@dataclass
class ImageSourceConfig(ObservationConfig):
    """
    Attributes:
        data: Encoded image bytes.
        filename: Name shown to the user.
    """
    data: bytes = b""
    filename: str = "upload"


class ImageSource(ObservationSource):
    """Observation source backed by one decoded image."""

    def __init__(self, config: ImageSourceConfig, frame: Optional[FrameData] = None):
        super().__init__(config)
        self._image_config = config
        self._frame: Optional[FrameData] = frame
        if frame is not None:
            self._is_open = True

    @classmethod
    def from_frame(cls, frame: FrameData, filename: str = "upload") -> "ImageSource":
        return cls(ImageSourceConfig(source_id=filename, filename=filename), frame=frame)

    @property
    def filename(self) -> str:
        return self._image_config.filename

    def open(self) -> None:
        if self._is_open:
            return
        self._frame = decode_image(self._image_config.data, self.filename)
        self._is_open = True
        logging.info(f"ImageSource opened: {self.filename} ({self._frame.width}x{self._frame.height})")

    def read(self) -> Optional[FrameData]:
        if not self._is_open:
            return None
        self._frame_index += 1
        return self._frame

    def __iter__(self):
        # A still image would otherwise yield forever.
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")
        yield self.read()

    def close(self) -> None:
        self._frame = None
        self._is_open = False
