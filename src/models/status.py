"""
Status models: controller state, per-pass metrics and transient messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from .detection import Detection


class ControllerState(str, Enum):
    """Loop controller states."""
    IDLE = "idle"
    CAMERA_SINGLE = "camera_single"
    CAMERA_REALTIME = "camera_realtime"
    IMAGE_LOADED = "image_loaded"

    @property
    def camera_active(self) -> bool:
        return self in (ControllerState.CAMERA_SINGLE, ControllerState.CAMERA_REALTIME)


class MessageLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    """A transient, user-facing status message."""
    text: str
    level: MessageLevel = MessageLevel.INFO
    created_at: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "level": self.level.value, "created_at": self.created_at}


@dataclass
class PassMetrics:
    """
    Aggregate metrics published after each detection pass.

    Attributes:
        object_count: Number of detections in the pass.
        avg_confidence: Mean confidence (0-1), 0 when nothing was detected.
        processing_ms: Wall-clock time of the pass in milliseconds.
        fps: Latest realtime frames-per-second sample.
        model_status: Name of the active model backend.
        detection_status: "Real-time (NFPS)" or "Single Detection".
    """
    object_count: int = 0
    avg_confidence: float = 0.0
    processing_ms: float = 0.0
    fps: int = 0
    model_status: str = "Demo mode"
    detection_status: str = "Single Detection"

    @classmethod
    def from_detections(
        cls,
        detections: List[Detection],
        processing_ms: float,
        model_status: str = "Demo mode",
    ) -> "PassMetrics":
        count = len(detections)
        avg = sum(d.confidence for d in detections) / count if count else 0.0
        return cls(
            object_count=count,
            avg_confidence=avg,
            processing_ms=processing_ms,
            model_status=model_status,
        )

    def set_rate(self, fps: int, realtime: bool) -> None:
        """Attach the latest fps sample and the matching status text."""
        self.fps = fps
        self.detection_status = f"Real-time ({fps}FPS)" if realtime else "Single Detection"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "object_count": self.object_count,
            "objects_text": f"{self.object_count} objects",
            "avg_confidence": self.avg_confidence,
            "confidence_text": f"{self.avg_confidence * 100:.1f}% avg",
            "processing_ms": self.processing_ms,
            "processing_text": f"{self.processing_ms:.1f} ms",
            "fps": self.fps,
            "model_status": self.model_status,
            "detection_status": self.detection_status,
        }


@dataclass
class PassResult:
    """Outcome of one detection pass."""
    detections: List[Detection] = field(default_factory=list)
    metrics: PassMetrics = field(default_factory=PassMetrics)
    source: Optional[str] = None
    annotated: Optional[np.ndarray] = None
