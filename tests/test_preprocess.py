"""
Tests for the preprocess stage.
"""

import numpy as np
import pytest

from models.frame import FrameData
from pipeline.stages.preprocess import PreprocessStage, PreprocessStageConfig


def _stage(size=640):
    return PreprocessStage(PreprocessStageConfig(input_size=size))


class TestPreprocessStage:
    def test_output_shape_and_dtype(self, bgr_frame):
        tensor = _stage().process(bgr_frame)

        assert tensor.shape == (1, 3, 640, 640)
        assert tensor.dtype == np.float32
        assert tensor.flags["C_CONTIGUOUS"]

    def test_planes_are_rgb_scaled(self, bgr_frame):
        # bgr_frame is B=10, G=20, R=30 everywhere
        tensor = _stage(32).process(bgr_frame)

        np.testing.assert_allclose(tensor[0, 0], 30 / 255.0, rtol=1e-6)
        np.testing.assert_allclose(tensor[0, 1], 20 / 255.0, rtol=1e-6)
        np.testing.assert_allclose(tensor[0, 2], 10 / 255.0, rtol=1e-6)

    def test_values_in_unit_range(self):
        rng = np.random.default_rng(0)
        image = rng.integers(0, 256, size=(50, 70, 3), dtype=np.uint8)
        tensor = _stage(64).process(FrameData.from_numpy(image, 0.0))

        assert tensor.min() >= 0.0
        assert tensor.max() <= 1.0

    def test_alpha_is_ignored(self):
        rgba = np.zeros((16, 16, 4), dtype=np.uint8)
        rgba[..., 0] = 255
        rgba[..., 3] = 0
        tensor = _stage(16).process(FrameData.from_numpy(rgba, 0.0, color_order="RGBA"))

        assert tensor.shape == (1, 3, 16, 16)
        np.testing.assert_allclose(tensor[0, 0], 1.0)
        np.testing.assert_allclose(tensor[0, 1:], 0.0)

    def test_grayscale_fills_all_planes(self):
        gray = np.full((10, 10), 51, dtype=np.uint8)
        tensor = _stage(10).process(FrameData.from_numpy(gray, 0.0))

        np.testing.assert_allclose(tensor[0], 51 / 255.0, rtol=1e-6)

    def test_stretch_keeps_layout_row_major(self):
        # Left half red, right half blue; stretching to a square keeps halves apart
        image = np.zeros((20, 80, 3), dtype=np.uint8)
        image[:, :40] = (0, 0, 255)
        image[:, 40:] = (255, 0, 0)
        tensor = _stage(40).process(FrameData.from_numpy(image, 0.0))

        red, blue = tensor[0, 0], tensor[0, 2]
        assert red[:, :15].min() == pytest.approx(1.0)
        assert red[:, 25:].max() == pytest.approx(0.0)
        assert blue[:, 25:].min() == pytest.approx(1.0)

    def test_deterministic(self, bgr_frame):
        stage = _stage(64)
        np.testing.assert_array_equal(stage.process(bgr_frame), stage.process(bgr_frame))
