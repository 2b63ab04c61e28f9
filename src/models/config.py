"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """Camera configuration."""
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [1280, 720])
    fps: int = 30
    swap_rb: bool = False
    flip_horizontal: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution", [1280, 720]),
            fps=d.get("fps", 30),
            swap_rb=d.get("swap_rb", False),
            flip_horizontal=d.get("flip_horizontal", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "swap_rb": self.swap_rb,
            "flip_horizontal": self.flip_horizontal,
        }


@dataclass
class ModelConfig:
    """Detection model configuration."""
    onnx_path: Optional[str] = "model/best.onnx"
    decoded_model: Optional[str] = None
    input_size: int = 640
    labels: str = "autowheel"
    conf_threshold: float = 0.5
    providers: List[str] = field(default_factory=lambda: ["CPUExecutionProvider"])
    input_name: Optional[str] = None
    output_name: str = "output0"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ModelConfig":
        return cls(
            onnx_path=d.get("onnx_path", "model/best.onnx"),
            decoded_model=d.get("decoded_model"),
            input_size=d.get("input_size", 640),
            labels=d.get("labels", "autowheel"),
            conf_threshold=d.get("conf_threshold", 0.5),
            providers=d.get("providers") or ["CPUExecutionProvider"],
            input_name=d.get("input_name"),
            output_name=d.get("output_name", "output0"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "onnx_path": self.onnx_path,
            "input_size": self.input_size,
            "labels": self.labels,
            "conf_threshold": self.conf_threshold,
            "providers": self.providers,
            "output_name": self.output_name,
        }
        if self.decoded_model is not None:
            d["decoded_model"] = self.decoded_model
        if self.input_name is not None:
            d["input_name"] = self.input_name
        return d


@dataclass
class LoopConfig:
    """Realtime loop and status message configuration."""
    tick_interval_ms: float = 16.0
    message_ttl_s: float = 4.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LoopConfig":
        return cls(
            tick_interval_ms=d.get("tick_interval_ms", 16.0),
            message_ttl_s=d.get("message_ttl_s", 4.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick_interval_ms": self.tick_interval_ms,
            "message_ttl_s": self.message_ttl_s,
        }


@dataclass
class WebConfig:
    """HTTP surface configuration."""
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(host=d.get("host", "0.0.0.0"), port=d.get("port", 5000))

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port}


@dataclass
class DemoConfig:
    """Bundled demo images."""
    images_dir: str = "assets/demo-images"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DemoConfig":
        return cls(images_dir=d.get("images_dir", "assets/demo-images"))

    def to_dict(self) -> Dict[str, Any]:
        return {"images_dir": self.images_dir}


@dataclass
class Config:
    """Complete application configuration."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    web: WebConfig = field(default_factory=WebConfig)
    demo: DemoConfig = field(default_factory=DemoConfig)
    log_path: str = "logs/autowheel.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create from the merged config dictionary."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            model=ModelConfig.from_dict(d.get("model", {}) or {}),
            loop=LoopConfig.from_dict(d.get("loop", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            demo=DemoConfig.from_dict(d.get("demo", {}) or {}),
            log_path=d.get("log_path", "logs/autowheel.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": self.camera.to_dict(),
            "model": self.model.to_dict(),
            "loop": self.loop.to_dict(),
            "web": self.web.to_dict(),
            "demo": self.demo.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
