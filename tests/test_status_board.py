"""
Tests for the status board.
"""

import numpy as np

from models.detection import BoundingBox, Detection
from models.status import ControllerState, MessageLevel, PassMetrics, PassResult
from runtime.status_board import StatusBoard


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


class TestMessages:
    def test_message_expires_after_ttl(self):
        clock = FakeClock()
        board = StatusBoard(message_ttl_s=4.0, clock=clock)

        board.publish_message("Camera started successfully!", MessageLevel.SUCCESS)
        clock.now += 3.9
        assert board.current_message().text == "Camera started successfully!"

        clock.now += 0.2
        assert board.current_message() is None

    def test_newer_message_replaces_older(self):
        clock = FakeClock()
        board = StatusBoard(clock=clock)

        board.publish_message("first")
        clock.now += 3.0
        board.publish_message("second", MessageLevel.ERROR)
        clock.now += 3.0

        message = board.current_message()
        assert message.text == "second"
        assert message.level == MessageLevel.ERROR

    def test_no_message(self):
        assert StatusBoard().current_message() is None


class TestResults:
    def _result(self):
        det = Detection(bbox=BoundingBox(0, 0, 1, 1), confidence=0.8, label="person")
        return PassResult(
            detections=[det],
            metrics=PassMetrics(object_count=1, avg_confidence=0.8),
            annotated=np.ones((4, 4, 3), dtype=np.uint8),
        )

    def test_publish_result(self):
        board = StatusBoard()
        board.publish_result(self._result())

        assert board.metrics.object_count == 1
        assert [d.label for d in board.results] == ["person"]
        assert board.get_frame().shape == (4, 4, 3)

    def test_frame_is_a_copy(self):
        board = StatusBoard()
        board.publish_result(self._result())

        board.get_frame()[:] = 0

        assert board.get_frame().all()

    def test_clear_frame(self):
        board = StatusBoard()
        board.publish_result(self._result())
        board.clear_frame()
        assert board.get_frame() is None

    def test_state_and_file_info(self):
        board = StatusBoard()
        board.set_state(ControllerState.IMAGE_LOADED)
        board.set_file_info("File: a.png")
        board.set_model_status("YOLOv8 (ONNX)")

        assert board.state == ControllerState.IMAGE_LOADED
        assert board.file_info == "File: a.png"
        assert board.metrics.model_status == "YOLOv8 (ONNX)"
