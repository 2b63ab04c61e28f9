"""
CPU decoded-detection backend.

Uses Ultralytics if installed. Ultralytics does its own letterboxing and
returns boxes in source-frame pixels, so its results skip our pre- and
post-processing and arrive as DecodedDetection objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from models.detection import DecodedDetection
from .backend import BackendKind, ModelLoadError


@dataclass(frozen=True)
class CpuYoloConfig:
    model: str
    conf_threshold: float = 0.25
    iou_threshold: float = 0.45
    classes: Optional[Sequence[int]] = None
    class_name_overrides: Optional[Dict[int, str]] = None


class UltralyticsCpuBackend:
    kind = BackendKind.DECODED
    name = "YOLOv8 (Ultralytics)"

    def __init__(self, cfg: CpuYoloConfig):
        self.cfg = cfg
        try:
            from ultralytics import YOLO  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ModelLoadError(
                "Ultralytics is not installed. Install with `pip install ultralytics` "
                "or configure model.onnx_path."
            ) from e

        try:
            self._model = YOLO(cfg.model)
        except Exception as e:
            raise ModelLoadError(f"Failed to load Ultralytics model {cfg.model}: {e}") from e

    def detect(self, image: np.ndarray) -> List[DecodedDetection]:
        results = self._model.predict(
            source=image,
            conf=self.cfg.conf_threshold,
            iou=self.cfg.iou_threshold,
            classes=list(self.cfg.classes) if self.cfg.classes is not None else None,
            verbose=False,
        )
        if not results:
            return []

        r0 = results[0]
        names = getattr(r0, "names", None) or {}
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return []

        xyxy = boxes.xyxy.cpu().numpy() if hasattr(boxes.xyxy, "cpu") else np.asarray(boxes.xyxy)
        conf = boxes.conf.cpu().numpy() if hasattr(boxes.conf, "cpu") else np.asarray(boxes.conf)
        cls = boxes.cls.cpu().numpy() if hasattr(boxes.cls, "cpu") else np.asarray(boxes.cls)

        out: List[DecodedDetection] = []
        for (x1, y1, x2, y2), c, k in zip(xyxy, conf, cls):
            class_id = int(k)
            class_name = (
                (self.cfg.class_name_overrides or {}).get(class_id)
                or names.get(class_id)
                or str(class_id)
            )
            out.append(
                DecodedDetection(
                    box=(float(x1), float(y1), float(x2 - x1), float(y2 - y1)),
                    score=float(c),
                    class_name=class_name,
                )
            )

        return out
