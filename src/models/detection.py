"""
Detection models for object detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    A bounding box in source-frame pixel coordinates.

    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Box width.
        height: Box height.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (x, y, width, height) tuple."""
        return (int(self.x), int(self.y), int(self.width), int(self.height))

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> "BoundingBox":
        """Create from (x, y, width, height) sequence."""
        return cls(x=float(t[0]), y=float(t[1]), width=float(t[2]), height=float(t[3]))

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from corner (x1, y1, x2, y2) format."""
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


@dataclass(frozen=True)
class Detection:
    """
    A single detection from an object detector.

    Attributes:
        bbox: Bounding box in source-frame pixel coordinates.
        confidence: Detection confidence score (0-1).
        class_id: Class index into the label table, None for fallback entries.
        label: Human-readable class name.
    """
    bbox: BoundingBox
    confidence: float
    class_id: Optional[int] = None
    label: str = "unknown"

    @property
    def percent(self) -> str:
        """Confidence as a percentage string with one decimal place."""
        return f"{self.confidence * 100:.1f}%"

    @property
    def caption(self) -> str:
        return f"{self.label} {self.percent}"

    def to_dict(self) -> dict:
        return {
            "bbox": list(self.bbox.as_tuple()),
            "confidence": self.confidence,
            "class_id": self.class_id,
            "label": self.label,
        }


@dataclass(frozen=True)
class DecodedDetection:
    """
    Native output of a decoded backend, already in source-frame coordinates.

    Attributes:
        box: (x, y, width, height).
        score: Confidence score (0-1).
        class_name: Label chosen by the backend.
    """
    box: Tuple[float, float, float, float]
    score: float
    class_name: str


def sort_by_confidence(detections: List[Detection]) -> List[Detection]:
    """Return detections ordered from most to least confident."""
    return sorted(detections, key=lambda d: d.confidence, reverse=True)


def confidence_tier(confidence: float) -> str:
    """Bucket a confidence for the results list: high, medium or low."""
    if confidence > 0.7:
        return "high"
    if confidence > 0.5:
        return "medium"
    return "low"
