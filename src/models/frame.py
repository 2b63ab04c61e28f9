"""
FrameData model for captured video frames and decoded images.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

COLOR_ORDERS = ("BGR", "RGB", "BGRA", "RGBA", "GRAY")


@dataclass(frozen=True)
class FrameData:
    """
    One raster frame, the input of a detection pass.

    Attributes:
        frame: Pixel array, (H, W) for grayscale or (H, W, C) otherwise.
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Unix timestamp when the frame was captured or decoded.
        frame_index: Sequential frame number since the source was opened.
        source: Identifier for the camera or image the frame came from.
        color_order: Channel layout of ``frame``, one of COLOR_ORDERS.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None
    color_order: str = "BGR"

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float,
        frame_index: int = 0,
        source: Optional[str] = None,
        color_order: Optional[str] = None,
    ) -> "FrameData":
        """Create FrameData from a numpy array, guessing the colour order from its shape."""
        h, w = frame.shape[:2]
        if color_order is None:
            if frame.ndim == 2 or frame.shape[2] == 1:
                color_order = "GRAY"
            elif frame.shape[2] == 4:
                color_order = "BGRA"
            else:
                color_order = "BGR"
        if color_order not in COLOR_ORDERS:
            raise ValueError(f"Unsupported colour order: {color_order}")
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
            color_order=color_order,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def has_alpha(self) -> bool:
        return self.color_order in ("BGRA", "RGBA")

    def to_bgr(self) -> np.ndarray:
        """Return a 3-channel BGR copy suitable for drawing and encoding."""
        conversions = {
            "RGB": cv2.COLOR_RGB2BGR,
            "BGRA": cv2.COLOR_BGRA2BGR,
            "RGBA": cv2.COLOR_RGBA2BGR,
            "GRAY": cv2.COLOR_GRAY2BGR,
        }
        if self.color_order == "BGR":
            return self.frame.copy()
        return cv2.cvtColor(self.frame, conversions[self.color_order])
