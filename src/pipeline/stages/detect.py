"""
Detect stage: runs the active backend and adapts its output to Detections.

Each backend variant has its own adapter:
- raw rows: preprocess -> run -> postprocess rows
- decoded:  detect on the BGR frame -> adapt decoded objects

Without a backend the stage returns DEMO_DETECTIONS so the UI stays populated.
Blocking backend calls run in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from inference.backend import BackendKind, InferenceBackend, backend_kind
from models.detection import BoundingBox, Detection
from models.frame import FrameData
from .postprocess import PostprocessStage
from .preprocess import PreprocessStage

DEMO_MODEL_STATUS = "Demo mode"

# Placeholder results shown when no model could be loaded.
DEMO_DETECTIONS = (
    Detection(bbox=BoundingBox(100, 100, 150, 300), confidence=0.92, class_id=0, label="person"),
    Detection(bbox=BoundingBox(300, 200, 100, 150), confidence=0.88, class_id=56, label="chair"),
    Detection(bbox=BoundingBox(500, 150, 120, 200), confidence=0.85, class_id=None, label="door"),
)


class DetectStage:
    def __init__(
        self,
        backend: Optional[InferenceBackend],
        preprocess: PreprocessStage,
        postprocess: PostprocessStage,
    ):
        self._backend = backend
        self._preprocess = preprocess
        self._postprocess = postprocess
        self._kind = backend_kind(backend) if backend is not None else None
        self._adapters: Dict[BackendKind, Callable[[FrameData], Awaitable[List[Detection]]]] = {
            BackendKind.RAW_ROWS: self._detect_rows,
            BackendKind.DECODED: self._detect_decoded,
        }

    @property
    def has_model(self) -> bool:
        return self._backend is not None

    @property
    def kind(self) -> Optional[BackendKind]:
        return self._kind

    @property
    def model_status(self) -> str:
        if self._backend is None:
            return DEMO_MODEL_STATUS
        return getattr(self._backend, "name", type(self._backend).__name__)

    async def process(self, frame: FrameData) -> List[Detection]:
        if self._kind is None:
            return list(DEMO_DETECTIONS)
        return await self._adapters[self._kind](frame)

    async def _detect_rows(self, frame: FrameData) -> List[Detection]:
        tensor = self._preprocess.process(frame)
        rows = await asyncio.to_thread(self._backend.run, tensor)
        return self._postprocess.from_rows(rows, frame.width, frame.height)

    async def _detect_decoded(self, frame: FrameData) -> List[Detection]:
        decoded = await asyncio.to_thread(self._backend.detect, frame.to_bgr())
        return self._postprocess.from_decoded(decoded)
