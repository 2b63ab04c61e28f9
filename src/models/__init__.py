"""
Typed models for the AutoWheel detector.

Frames, detections, status and configuration are plain dataclasses shared by
the observation, inference, pipeline and runtime layers.
"""

from .frame import FrameData
from .detection import (
    BoundingBox,
    DecodedDetection,
    Detection,
    confidence_tier,
    sort_by_confidence,
)
from .status import ControllerState, MessageLevel, PassMetrics, PassResult, StatusMessage
from .config import Config, CameraConfig, ModelConfig, LoopConfig, WebConfig, DemoConfig

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "BoundingBox",
    "DecodedDetection",
    "Detection",
    "confidence_tier",
    "sort_by_confidence",
    # Status
    "ControllerState",
    "MessageLevel",
    "PassMetrics",
    "PassResult",
    "StatusMessage",
    # Config
    "Config",
    "CameraConfig",
    "ModelConfig",
    "LoopConfig",
    "WebConfig",
    "DemoConfig",
]
