from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from models.config import Config
from pipeline.engine import DetectionPipeline
from .controller import LoopController
from .status_board import StatusBoard


@dataclass
class RuntimeContext:
    """Holds runtime state and service references; avoids global singletons."""

    config: Config
    pipeline: DetectionPipeline
    controller: LoopController
    board: StatusBoard

    def latest_frame(self) -> Optional[np.ndarray]:
        return self.board.get_frame()

