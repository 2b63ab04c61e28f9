"""
Observation layer: frame sources for the detection pipeline.

A source is either a live camera or a decoded still image. Each implements
the ObservationSource interface and returns FrameData objects.
"""

from .base import (
    CAPTURE_FAILURE_MESSAGES,
    CaptureError,
    CaptureFailure,
    ObservationConfig,
    ObservationSource,
)
from .image_source import (
    ImageDecodeError,
    ImageSource,
    ImageSourceConfig,
    decode_image,
    decode_image_async,
    find_demo_image,
    list_demo_images,
)
from .opencv_source import CameraSource, CameraSourceConfig, classify_device

__all__ = [
    "CAPTURE_FAILURE_MESSAGES",
    "CaptureError",
    "CaptureFailure",
    "ObservationConfig",
    "ObservationSource",
    "ImageDecodeError",
    "ImageSource",
    "ImageSourceConfig",
    "decode_image",
    "decode_image_async",
    "find_demo_image",
    "list_demo_images",
    "CameraSource",
    "CameraSourceConfig",
    "classify_device",
]
