"""
Inference backend interface.

Two capability variants are supported:

- RawRowBackend: run(tensor) returns a flat array of rows
  [x1, y1, x2, y2, confidence, class_id] in model-input pixels.
- DecodedBackend: detect(image) returns DecodedDetection objects already in
  source-frame coordinates.

Backends declare which variant they are through a ``kind`` attribute.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Protocol, Union

import numpy as np

from models.detection import DecodedDetection


class BackendKind(str, Enum):
    RAW_ROWS = "raw_rows"
    DECODED = "decoded"


class ModelLoadError(RuntimeError):
    """Raised when a backend cannot be initialised."""


class RawRowBackend(Protocol):
    kind: BackendKind
    name: str

    def run(self, tensor: np.ndarray) -> np.ndarray:
        ...


class DecodedBackend(Protocol):
    kind: BackendKind
    name: str

    def detect(self, image: np.ndarray) -> List[DecodedDetection]:
        ...


InferenceBackend = Union[RawRowBackend, DecodedBackend]


def backend_kind(backend: object) -> BackendKind:
    """
    Return the capability variant of a backend.

    Objects without an explicit ``kind`` are classified by the method they
    expose.
    """
    kind = getattr(backend, "kind", None)
    if kind is not None:
        return BackendKind(kind)
    if callable(getattr(backend, "run", None)):
        return BackendKind.RAW_ROWS
    if callable(getattr(backend, "detect", None)):
        return BackendKind.DECODED
    raise TypeError(f"{type(backend).__name__} exposes neither run() nor detect()")
