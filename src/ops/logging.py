"""
Logging setup.
"""

from __future__ import annotations

import logging
import os

# Libraries that log every request or model call at INFO.
NOISY_LOGGERS = ("uvicorn.access", "ultralytics")


def setup_logging(log_path: str, log_level: str) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    if log_level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
