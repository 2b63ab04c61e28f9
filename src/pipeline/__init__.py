"""
Pipeline module for the AutoWheel detector.

A detection pass runs:
- preprocess (stretch resize, normalise, channels-first)
- detect (ONNX rows, decoded backend, or demo fallback)
- postprocess (threshold, rescale, label lookup)
- annotate (boxes and captions over the frame)
"""

from .engine import DetectionPipeline, create_pipeline_from_config
from .fps import FpsMeter

__all__ = [
    "DetectionPipeline",
    "create_pipeline_from_config",
    "FpsMeter",
]
