"""
ONNX Runtime backend for YOLO models exported with built-in NMS.

The exported graph takes a (1, 3, S, S) float32 tensor and returns
``output0`` holding rows of [x1, y1, x2, y2, confidence, class_id].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np
import onnxruntime as ort

from .backend import BackendKind, ModelLoadError


@dataclass(frozen=True)
class OnnxConfig:
    model: str
    providers: List[str] = field(default_factory=lambda: ["CPUExecutionProvider"])
    input_name: Optional[str] = None
    output_name: str = "output0"


class OnnxRowBackend:
    kind = BackendKind.RAW_ROWS
    name = "YOLOv8 (ONNX)"

    def __init__(self, cfg: OnnxConfig, session: Optional[Any] = None):
        self.cfg = cfg
        if session is None:
            try:
                session = ort.InferenceSession(cfg.model, providers=list(cfg.providers))
            except Exception as e:
                raise ModelLoadError(f"Failed to load ONNX model {cfg.model}: {e}") from e
        self._session = session
        self._input_name = cfg.input_name or session.get_inputs()[0].name
        output_names = [o.name for o in session.get_outputs()]
        self._output_name = cfg.output_name if cfg.output_name in output_names else output_names[0]
        logging.info(
            f"ONNX model loaded: {cfg.model} input={self._input_name} output={self._output_name} "
            f"providers={session.get_providers()}"
        )

    def run(self, tensor: np.ndarray) -> np.ndarray:
        outputs = self._session.run([self._output_name], {self._input_name: tensor.astype(np.float32, copy=False)})
        return np.asarray(outputs[0], dtype=np.float32).reshape(-1)
