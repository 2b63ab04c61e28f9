"""
Postprocess stage: backend output -> Detection objects.

Raw rows are [x1, y1, x2, y2, confidence, class_id] in model-input pixels.
Rows at or below the confidence threshold are dropped (strict greater-than),
boxes are scaled back to the source frame assuming the stretch resize done by
PreprocessStage, and class ids are resolved against the label table.

Decoded detections are already thresholded and scaled by their backend and
pass through unchanged apart from the shape conversion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from inference.labels import class_id_for, class_index, resolve_label
from models.detection import BoundingBox, DecodedDetection, Detection

ROW_WIDTH = 6


@dataclass
class PostprocessStageConfig:
    input_size: int = 640
    conf_threshold: float = 0.5


class PostprocessStage:
    def __init__(self, config: PostprocessStageConfig, labels: Sequence[str]):
        self._config = config
        self._labels = tuple(labels)

    @property
    def labels(self) -> Sequence[str]:
        return self._labels

    def from_rows(self, rows: np.ndarray, original_width: int, original_height: int) -> List[Detection]:
        """
        Convert a flat (or (N, 6)) array of raw rows into detections.

        Args:
            rows: Backend output; any shape whose element count is a multiple of 6.
            original_width: Source frame width.
            original_height: Source frame height.
        """
        flat = np.asarray(rows, dtype=np.float64).reshape(-1)
        if flat.size % ROW_WIDTH:
            logging.warning(f"Ignoring {flat.size % ROW_WIDTH} trailing values in model output")
            flat = flat[: flat.size - flat.size % ROW_WIDTH]
        table = flat.reshape(-1, ROW_WIDTH)

        size = self._config.input_size
        scale_x = original_width / size
        scale_y = original_height / size

        detections: List[Detection] = []
        for x1, y1, x2, y2, confidence, class_id in table.tolist():
            if not confidence > self._config.conf_threshold:
                continue
            detections.append(
                Detection(
                    bbox=BoundingBox(
                        x=x1 * scale_x,
                        y=y1 * scale_y,
                        width=(x2 - x1) * scale_x,
                        height=(y2 - y1) * scale_y,
                    ),
                    confidence=confidence,
                    class_id=class_index(class_id),
                    label=resolve_label(class_id, self._labels),
                )
            )
        return detections

    def from_decoded(self, decoded: Iterable[DecodedDetection]) -> List[Detection]:
        """Adapt decoded backend output; no threshold is applied here."""
        return [
            Detection(
                bbox=BoundingBox.from_tuple(d.box),
                confidence=float(d.score),
                class_id=class_id_for(d.class_name, self._labels),
                label=d.class_name,
            )
            for d in decoded
        ]
