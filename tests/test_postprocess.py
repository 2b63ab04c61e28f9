"""
Tests for the postprocess stage and label lookup.
"""

import numpy as np
import pytest

from inference.labels import (
    AUTOWHEEL_LABELS,
    COCO_LABELS,
    UNKNOWN_LABEL,
    class_id_for,
    get_label_table,
    resolve_label,
)
from models.detection import DecodedDetection
from pipeline.stages.postprocess import PostprocessStage, PostprocessStageConfig


def _stage(labels=COCO_LABELS, size=640, threshold=0.5):
    return PostprocessStage(PostprocessStageConfig(input_size=size, conf_threshold=threshold), labels)


class TestLabels:
    def test_table_sizes(self):
        assert len(COCO_LABELS) == 80
        assert len(AUTOWHEEL_LABELS) == 81
        assert AUTOWHEEL_LABELS[-1] == "wheelchair"

    def test_get_label_table(self):
        assert get_label_table("coco") is COCO_LABELS
        with pytest.raises(ValueError):
            get_label_table("voc")

    def test_resolve_truncates(self):
        assert resolve_label(2.9, COCO_LABELS) == "car"

    @pytest.mark.parametrize("class_id", [999, 80, -1, float("nan"), float("inf"), float("-inf")])
    def test_out_of_range_is_unknown(self, class_id):
        assert resolve_label(class_id, COCO_LABELS) == UNKNOWN_LABEL

    def test_class_id_for(self):
        assert class_id_for("person", COCO_LABELS) == 0
        assert class_id_for("door", COCO_LABELS) is None


class TestRawRows:
    def test_threshold_boundary(self):
        rows = np.array([
            [0, 0, 10, 10, 0.5, 0],
            [0, 0, 10, 10, 0.50001, 1],
            [0, 0, 10, 10, 0.49, 2],
            [0, 0, 10, 10, 0.99, 3],
        ], dtype=np.float32)

        dets = _stage().from_rows(rows, 640, 640)

        assert [d.class_id for d in dets] == [1, 3]
        assert all(d.confidence > 0.5 for d in dets)

    def test_rescale_exact(self):
        rows = np.array([100, 100, 200, 200, 0.9, 0], dtype=np.float32)

        (det,) = _stage().from_rows(rows, 1280, 720)

        assert det.bbox.as_tuple() == (200.0, 112.5, 200.0, 112.5)
        assert det.label == "person"
        assert det.class_id == 0

    def test_non_finite_class_keeps_other_rows(self):
        rows = [
            10, 10, 20, 20, 0.9, float("nan"),
            10, 10, 20, 20, 0.8, 0,
        ]

        bad, good = _stage().from_rows(rows, 1280, 720)

        assert bad.label == "unknown"
        assert bad.class_id is None
        assert good.label == "person"

    def test_unknown_class(self):
        rows = [10, 10, 20, 20, 0.8, 999]

        (det,) = _stage().from_rows(rows, 640, 640)

        assert det.label == "unknown"
        assert det.class_id == 999

    def test_wheelchair_only_in_autowheel_table(self):
        rows = [10, 10, 20, 20, 0.8, 80]

        assert _stage(COCO_LABELS).from_rows(rows, 640, 640)[0].label == "unknown"
        assert _stage(AUTOWHEEL_LABELS).from_rows(rows, 640, 640)[0].label == "wheelchair"

    def test_batched_output_shape(self):
        rows = np.zeros((1, 3, 6), dtype=np.float32)
        rows[0, :, 4] = 0.9

        assert len(_stage().from_rows(rows, 640, 640)) == 3

    def test_empty_output(self):
        assert _stage().from_rows(np.zeros((0,), dtype=np.float32), 640, 480) == []

    def test_trailing_partial_row_ignored(self):
        rows = [0, 0, 10, 10, 0.9, 1, 5, 5, 5]

        dets = _stage().from_rows(rows, 640, 640)

        assert len(dets) == 1

    def test_preserves_row_order(self):
        rows = [
            0, 0, 1, 1, 0.6, 0,
            0, 0, 1, 1, 0.9, 1,
        ]
        dets = _stage().from_rows(rows, 640, 640)
        assert [d.class_id for d in dets] == [0, 1]

    def test_custom_threshold(self):
        rows = [0, 0, 1, 1, 0.3, 0]
        assert len(_stage(threshold=0.25).from_rows(rows, 640, 640)) == 1


class TestDecoded:
    def test_passes_through_without_threshold(self):
        decoded = [
            DecodedDetection(box=(5, 6, 7, 8), score=0.3, class_name="dog"),
            DecodedDetection(box=(1, 2, 3, 4), score=0.95, class_name="couch"),
        ]

        dets = _stage().from_decoded(decoded)

        assert len(dets) == 2
        assert dets[0].bbox.as_tuple() == (5, 6, 7, 8)
        assert dets[0].confidence == 0.3
        assert dets[0].label == "dog"
        assert dets[0].class_id == COCO_LABELS.index("dog")

    def test_name_outside_table_has_no_id(self):
        (det,) = _stage().from_decoded([DecodedDetection(box=(0, 0, 1, 1), score=0.9, class_name="door")])
        assert det.class_id is None
        assert det.label == "door"
