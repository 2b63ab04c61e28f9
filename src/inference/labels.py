"""
Label tables for detection class ids.

The ONNX model exported for AutoWheel was trained on COCO plus one extra
class, so its table is the 80 COCO names followed by "wheelchair".
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

UNKNOWN_LABEL = "unknown"

COCO_LABELS: Tuple[str, ...] = (
    "person", "bicycle", "car", "motorcycle", "airplane", "bus", "train", "truck",
    "boat", "traffic light", "fire hydrant", "stop sign", "parking meter", "bench",
    "bird", "cat", "dog", "horse", "sheep", "cow", "elephant", "bear", "zebra",
    "giraffe", "backpack", "umbrella", "handbag", "tie", "suitcase", "frisbee",
    "skis", "snowboard", "sports ball", "kite", "baseball bat", "baseball glove",
    "skateboard", "surfboard", "tennis racket", "bottle", "wine glass", "cup",
    "fork", "knife", "spoon", "bowl", "banana", "apple", "sandwich", "orange",
    "broccoli", "carrot", "hot dog", "pizza", "donut", "cake", "chair", "couch",
    "potted plant", "bed", "dining table", "toilet", "tv", "laptop", "mouse",
    "remote", "keyboard", "cell phone", "microwave", "oven", "toaster", "sink",
    "refrigerator", "book", "clock", "vase", "scissors", "teddy bear", "hair drier",
    "toothbrush",
)

AUTOWHEEL_LABELS: Tuple[str, ...] = COCO_LABELS + ("wheelchair",)

LABEL_TABLES = {
    "coco": COCO_LABELS,
    "autowheel": AUTOWHEEL_LABELS,
}


def get_label_table(name: str) -> Tuple[str, ...]:
    """Look up a label table by config name."""
    try:
        return LABEL_TABLES[name]
    except KeyError:
        raise ValueError(
            f"Unknown label table '{name}', expected one of: {', '.join(LABEL_TABLES)}"
        ) from None


def class_index(class_id: float) -> Optional[int]:
    """Truncate a raw class id to an int; NaN and infinities give None."""
    if not math.isfinite(class_id):
        return None
    return int(class_id)


def resolve_label(class_id: float, labels: Sequence[str]) -> str:
    """
    Map a raw class id to its label.

    The id is truncated to an integer; non-finite ids and ids outside the
    table resolve to "unknown" instead of raising.
    """
    index = class_index(class_id)
    if index is not None and 0 <= index < len(labels):
        return labels[index]
    return UNKNOWN_LABEL


def class_id_for(label: str, labels: Sequence[str]) -> Optional[int]:
    """Reverse lookup used for decoded backends that only report names."""
    try:
        return list(labels).index(label)
    except ValueError:
        return None
