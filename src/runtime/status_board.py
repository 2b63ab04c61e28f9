"""
Status board shared between the loop controller and the web layer.

The controller is the only writer: it publishes pass results, the annotated
frame and transient status messages. Web routes read copies.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

import numpy as np

from models.detection import Detection
from models.status import ControllerState, MessageLevel, PassMetrics, PassResult, StatusMessage

_LOG_LEVELS = {
    MessageLevel.INFO: logging.INFO,
    MessageLevel.SUCCESS: logging.INFO,
    MessageLevel.WARNING: logging.WARNING,
    MessageLevel.ERROR: logging.ERROR,
}


class StatusBoard:
    def __init__(self, message_ttl_s: float = 4.0, clock: Callable[[], float] = time.time):
        self._lock = threading.Lock()
        self._clock = clock
        self._message_ttl_s = message_ttl_s
        self._message: Optional[StatusMessage] = None
        self._metrics = PassMetrics()
        self._results: List[Detection] = []
        self._frame: Optional[np.ndarray] = None
        self._state = ControllerState.IDLE
        self._file_info: Optional[str] = None

    def publish_message(self, text: str, level: MessageLevel = MessageLevel.INFO) -> None:
        logging.log(_LOG_LEVELS[level], f"[status] {text}")
        with self._lock:
            self._message = StatusMessage(text=text, level=level, created_at=self._clock())

    def current_message(self) -> Optional[StatusMessage]:
        """The latest message, or None once it is older than the TTL."""
        with self._lock:
            message = self._message
        if message is None or self._clock() - message.created_at > self._message_ttl_s:
            return None
        return message

    def publish_result(self, result: PassResult) -> None:
        with self._lock:
            self._metrics = result.metrics
            self._results = list(result.detections)
            if result.annotated is not None:
                self._frame = result.annotated

    def set_model_status(self, model_status: str) -> None:
        with self._lock:
            self._metrics.model_status = model_status

    def set_state(self, state: ControllerState) -> None:
        with self._lock:
            self._state = state

    def set_file_info(self, text: Optional[str]) -> None:
        with self._lock:
            self._file_info = text

    def clear_frame(self) -> None:
        with self._lock:
            self._frame = None

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def metrics(self) -> PassMetrics:
        return self._metrics

    @property
    def results(self) -> List[Detection]:
        with self._lock:
            return list(self._results)

    @property
    def file_info(self) -> Optional[str]:
        return self._file_info

    def get_frame(self) -> Optional[np.ndarray]:
        with self._lock:
            if self._frame is None:
                return None
            return self._frame.copy()
