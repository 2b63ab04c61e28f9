from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class DetectionItem(BaseModel):
    label: str
    confidence: float
    percent: str = Field(..., description="Confidence formatted as e.g. '92.0%'")
    tier: str = Field(..., description="high|medium|low")
    class_id: Optional[int] = None
    bbox: List[float] = Field(..., description="[x, y, width, height] in frame pixels")


class MetricsResponse(BaseModel):
    object_count: int
    objects_text: str
    avg_confidence: float
    confidence_text: str
    processing_ms: float
    processing_text: str
    fps: int
    model_status: str
    detection_status: str


class MessageResponse(BaseModel):
    text: str
    level: str
    created_at: float


class StatusResponse(BaseModel):
    """
    Everything the page needs to refresh itself in one poll.
    """
    state: str = Field(..., description="idle|camera_single|camera_realtime|image_loaded")
    camera_active: bool
    realtime: bool
    metrics: MetricsResponse
    results: List[DetectionItem]
    message: Optional[MessageResponse] = None
    file_info: Optional[str] = None


class IntentResponse(BaseModel):
    ok: bool
    state: str
    message: Optional[MessageResponse] = None


class DemoImagesResponse(BaseModel):
    images: List[str] = Field(..., description="Names accepted by POST /api/demo/{name}")


class VisibilityRequest(BaseModel):
    hidden: bool
