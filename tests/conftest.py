"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import time

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.frame import FrameData  # noqa: E402


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  device_id: 0
  resolution: [640, 480]
  fps: 30

model:
  onnx_path: "model/best.onnx"
  input_size: 640
  labels: "autowheel"
  conf_threshold: 0.5

loop:
  tick_interval_ms: 16
  message_ttl_s: 4

web:
  host: "127.0.0.1"
  port: 5000

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "device_id": 0,
            "resolution": [1280, 720],
            "fps": 30,
        },
        "model": {
            "onnx_path": "model/best.onnx",
            "input_size": 640,
            "labels": "coco",
            "conf_threshold": 0.5,
        },
        "loop": {
            "tick_interval_ms": 16,
            "message_ttl_s": 4,
        },
        "web": {"host": "127.0.0.1", "port": 5000},
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


@pytest.fixture
def bgr_frame():
    """A 1280x720 BGR frame filled with one colour (B=10, G=20, R=30)."""
    image = np.zeros((720, 1280, 3), dtype=np.uint8)
    image[..., 0] = 10
    image[..., 1] = 20
    image[..., 2] = 30
    return FrameData.from_numpy(image, timestamp=time.time(), source="test")
