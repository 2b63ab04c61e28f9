"""
Preprocess stage: frame -> normalized channels-first tensor.

The frame is stretched (no aspect-ratio preservation, no padding) to the
model's square input size, reordered to RGB, scaled to [0, 1] and laid out as
three contiguous planes R, G, B. PostprocessStage undoes the same stretch
when mapping boxes back, so the two must agree on the resize strategy.
"""

from __future__ import annotations

from dataclasses import dataclass

import cv2
import numpy as np

from models.frame import FrameData

_TO_RGB = {
    "BGR": cv2.COLOR_BGR2RGB,
    "BGRA": cv2.COLOR_BGRA2RGB,
    "RGBA": cv2.COLOR_RGBA2RGB,
    "GRAY": cv2.COLOR_GRAY2RGB,
}


@dataclass
class PreprocessStageConfig:
    """
    Attributes:
        input_size: Side length S of the square model input.
        interpolation: OpenCV interpolation flag used for the stretch.
    """
    input_size: int = 640
    interpolation: int = cv2.INTER_LINEAR


def to_rgb(frame: FrameData) -> np.ndarray:
    """Return the frame as an (H, W, 3) uint8 RGB array, dropping any alpha."""
    if frame.color_order == "RGB":
        return frame.frame
    return cv2.cvtColor(frame.frame, _TO_RGB[frame.color_order])


class PreprocessStage:
    """
    Example:
        stage = PreprocessStage(PreprocessStageConfig(input_size=640))
        tensor = stage.process(frame_data)   # shape (1, 3, 640, 640)
    """

    def __init__(self, config: PreprocessStageConfig):
        self._config = config

    @property
    def input_size(self) -> int:
        return self._config.input_size

    def process(self, frame: FrameData) -> np.ndarray:
        size = self._config.input_size
        rgb = to_rgb(frame)
        if rgb.shape[:2] != (size, size):
            rgb = cv2.resize(rgb, (size, size), interpolation=self._config.interpolation)
        planes = rgb.astype(np.float32).transpose(2, 0, 1) / 255.0
        return np.ascontiguousarray(planes)[np.newaxis, ...]
