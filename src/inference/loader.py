"""
Backend selection.

Order: ONNX model first, then the decoded Ultralytics backend, then no
backend at all (the pipeline falls back to demo detections).
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from models.config import ModelConfig
from .backend import InferenceBackend, ModelLoadError
from .cpu_backend import CpuYoloConfig, UltralyticsCpuBackend
from .onnx_backend import OnnxConfig, OnnxRowBackend


def load_backend(cfg: ModelConfig) -> Optional[InferenceBackend]:
    """Return the first backend that initialises, or None for demo mode."""
    if cfg.onnx_path:
        if os.path.exists(cfg.onnx_path):
            try:
                return OnnxRowBackend(
                    OnnxConfig(
                        model=cfg.onnx_path,
                        providers=list(cfg.providers),
                        input_name=cfg.input_name,
                        output_name=cfg.output_name,
                    )
                )
            except ModelLoadError as e:
                logging.warning(f"ONNX model failed, trying decoded backend: {e}")
        else:
            logging.warning(f"ONNX model not found at {cfg.onnx_path}, trying decoded backend")

    if cfg.decoded_model:
        try:
            backend = UltralyticsCpuBackend(
                CpuYoloConfig(model=cfg.decoded_model, conf_threshold=cfg.conf_threshold)
            )
            logging.info(f"Decoded backend loaded: {cfg.decoded_model}")
            return backend
        except ModelLoadError as e:
            logging.error(f"Decoded backend failed: {e}")

    logging.error("Model loading failed, using demo mode")
    return None
