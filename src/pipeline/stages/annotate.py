"""
Annotate stage: draws detections over the source frame.

Every call repaints the output surface from the frame, so calling it once per
pass never accumulates stale boxes.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import cv2
import numpy as np

from models.detection import Detection
from models.frame import FrameData

# Colors (BGR), matched against the label in order
LABEL_COLORS: Tuple[Tuple[Tuple[str, ...], Tuple[int, int, int]], ...] = (
    (("person",), (68, 68, 239)),             # red
    (("car", "truck", "bus"), (11, 158, 245)),  # orange
    (("chair",), (129, 185, 16)),             # emerald
    (("door",), (246, 130, 59)),              # blue
)
DEFAULT_COLOR = (0, 255, 0)
TEXT_COLOR = (0, 0, 0)

BOX_THICKNESS = 3
LABEL_HEIGHT = 25
LABEL_PADDING = 10
FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_SCALE = 0.5
FONT_THICKNESS = 1


def color_for(label: str) -> Tuple[int, int, int]:
    for keys, color in LABEL_COLORS:
        if any(key in label for key in keys):
            return color
    return DEFAULT_COLOR


class AnnotateStage:
    def __init__(self):
        self._surface: Optional[np.ndarray] = None

    @property
    def surface(self) -> Optional[np.ndarray]:
        """The most recently rendered frame (BGR)."""
        return self._surface

    def process(self, frame: FrameData, detections: Iterable[Detection]) -> np.ndarray:
        canvas = frame.to_bgr()

        for det in detections:
            x, y, w, h = (int(round(v)) for v in det.bbox.as_tuple())
            color = color_for(det.label)
            caption = det.caption

            cv2.rectangle(canvas, (x, y), (x + w, y + h), color, BOX_THICKNESS)

            (tw, _), _ = cv2.getTextSize(caption, FONT, FONT_SCALE, FONT_THICKNESS)
            cv2.rectangle(canvas, (x, y - LABEL_HEIGHT), (x + tw + LABEL_PADDING, y), color, -1)
            cv2.putText(canvas, caption, (x + 5, y - 8), FONT, FONT_SCALE, TEXT_COLOR, FONT_THICKNESS, cv2.LINE_AA)

        self._surface = canvas
        return canvas
