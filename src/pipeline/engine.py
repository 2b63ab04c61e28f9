"""
Detection pipeline for the AutoWheel detector.

One pass takes a FrameData through detect (preprocess + model + postprocess)
and annotate, then summarises the result into PassMetrics. The pipeline has
no loop of its own; the runtime LoopController decides when passes run.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from inference.backend import InferenceBackend
from inference.labels import get_label_table
from models.config import ModelConfig
from models.detection import sort_by_confidence
from models.frame import FrameData
from models.status import PassMetrics, PassResult
from pipeline.stages.annotate import AnnotateStage
from pipeline.stages.detect import DetectStage
from pipeline.stages.postprocess import PostprocessStage, PostprocessStageConfig
from pipeline.stages.preprocess import PreprocessStage, PreprocessStageConfig


class DetectionPipeline:
    """
    Runs single detection passes.

    Example:
        pipeline = create_pipeline_from_config(model_cfg, backend)
        result = await pipeline.run_pass(frame_data)
    """

    def __init__(
        self,
        detect_stage: DetectStage,
        annotate_stage: AnnotateStage,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._detect = detect_stage
        self._annotate = annotate_stage
        self._clock = clock
        self._callbacks: List[Callable[[FrameData, PassResult], None]] = []

    @property
    def model_status(self) -> str:
        return self._detect.model_status

    @property
    def has_model(self) -> bool:
        return self._detect.has_model

    @property
    def surface(self):
        return self._annotate.surface

    def add_callback(self, callback: Callable[[FrameData, PassResult], None]) -> None:
        """
        Add a callback to be called after each completed pass.

        Args:
            callback: Function taking (frame_data, result) as arguments.
        """
        self._callbacks.append(callback)

    async def run_pass(self, frame: FrameData) -> PassResult:
        """
        Run one full pass. Exceptions from the backend propagate to the caller.
        """
        start = self._clock()

        detections = await self._detect.process(frame)
        annotated = self._annotate.process(frame, detections)

        processing_ms = (self._clock() - start) * 1000.0
        result = PassResult(
            detections=sort_by_confidence(detections),
            metrics=PassMetrics.from_detections(
                detections,
                processing_ms=processing_ms,
                model_status=self.model_status,
            ),
            source=frame.source,
            annotated=annotated,
        )
        logging.debug(
            f"Pass complete: source={frame.source} objects={result.metrics.object_count} "
            f"time={processing_ms:.1f}ms"
        )

        for callback in self._callbacks:
            try:
                callback(frame, result)
            except Exception as e:
                logging.warning(f"Callback error: {e}")

        return result


def create_pipeline_from_config(
    model_cfg: ModelConfig,
    backend: Optional[InferenceBackend],
) -> DetectionPipeline:
    """
    Factory function to create a DetectionPipeline from the model config.

    Preprocess and postprocess read the same input_size so the stretch resize
    and the box rescale always agree.
    """
    labels = get_label_table(model_cfg.labels)
    preprocess = PreprocessStage(PreprocessStageConfig(input_size=model_cfg.input_size))
    postprocess = PostprocessStage(
        PostprocessStageConfig(
            input_size=model_cfg.input_size,
            conf_threshold=model_cfg.conf_threshold,
        ),
        labels,
    )
    detect = DetectStage(backend, preprocess, postprocess)
    return DetectionPipeline(detect, AnnotateStage())
