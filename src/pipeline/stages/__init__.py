"""
Pipeline stages for the AutoWheel detector.

Each stage handles one step of a detection pass:
- preprocess: stretch resize and normalise the frame
- detect: run the model backend (or the demo fallback)
- postprocess: threshold, rescale and label raw model rows
- annotate: draw boxes and labels over the frame
"""

from .annotate import AnnotateStage, color_for
from .detect import DEMO_DETECTIONS, DetectStage
from .postprocess import PostprocessStage, PostprocessStageConfig
from .preprocess import PreprocessStage, PreprocessStageConfig

__all__ = [
    "AnnotateStage",
    "color_for",
    "DEMO_DETECTIONS",
    "DetectStage",
    "PostprocessStage",
    "PostprocessStageConfig",
    "PreprocessStage",
    "PreprocessStageConfig",
]
