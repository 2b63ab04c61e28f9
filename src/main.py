"""
AutoWheel object detection demo.

Loads the detection model (ONNX first, then the decoded backend, then demo
mode), builds the loop controller and serves the HTTP interface.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --host / --port: Override the web.host / web.port settings
    --model: Override model.onnx_path
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from inference.labels import LABEL_TABLES
from inference.loader import load_backend
from models.config import Config
from models.status import MessageLevel
from ops.logging import setup_logging
from pipeline.engine import create_pipeline_from_config
from runtime.context import RuntimeContext
from runtime.controller import create_controller_from_config
from runtime.status_board import StatusBoard
from web.app import create_app


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        if (
            os.path.exists(config_path)
            and os.path.abspath(config_path) != os.path.abspath(local_overrides_path)
            and os.path.abspath(config_path) != os.path.abspath(base_path)
        ):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'model', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    camera = config.get('camera', {}) or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    if not isinstance(camera['device_id'], (int, str)) or isinstance(camera['device_id'], bool):
        return False, "camera.device_id must be an integer (index) or string (URL)"
    if isinstance(camera['device_id'], int) and camera['device_id'] < 0:
        return False, "camera.device_id integer must be non-negative"
    if 'resolution' in camera:
        res = camera['resolution']
        if not isinstance(res, list) or len(res) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in res):
            return False, "camera.resolution values must be positive integers"
    if 'fps' in camera and (not isinstance(camera['fps'], int) or camera['fps'] <= 0):
        return False, "camera.fps must be a positive integer"

    model = config.get('model', {}) or {}
    input_size = model.get('input_size', 640)
    if not isinstance(input_size, int) or input_size <= 0:
        return False, "model.input_size must be a positive integer"
    labels = model.get('labels', 'autowheel')
    if labels not in LABEL_TABLES:
        return False, f"model.labels must be one of: {', '.join(LABEL_TABLES)}"
    threshold = model.get('conf_threshold', 0.5)
    if not isinstance(threshold, (int, float)) or not (0 <= threshold <= 1):
        return False, "model.conf_threshold must be between 0 and 1"
    if 'providers' in model and not isinstance(model['providers'], list):
        return False, "model.providers must be a list of execution provider names"

    loop = config.get('loop', {}) or {}
    if 'tick_interval_ms' in loop:
        tick = loop['tick_interval_ms']
        if not isinstance(tick, (int, float)) or tick < 0:
            return False, "loop.tick_interval_ms must be a non-negative number"
    if 'message_ttl_s' in loop:
        ttl = loop['message_ttl_s']
        if not isinstance(ttl, (int, float)) or ttl <= 0:
            return False, "loop.message_ttl_s must be a positive number"

    web = config.get('web', {}) or {}
    if 'port' in web and (not isinstance(web['port'], int) or not (0 < web['port'] < 65536)):
        return False, "web.port must be a valid TCP port"

    demo = config.get('demo', {}) or {}
    if 'images_dir' in demo and not isinstance(demo['images_dir'], str):
        return False, "demo.images_dir must be a directory path"

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def build_context(cfg: Config) -> RuntimeContext:
    """Load the model and wire pipeline, controller and status board."""
    board = StatusBoard(message_ttl_s=cfg.loop.message_ttl_s)
    board.publish_message("Loading YOLOv8 AI model...")

    backend = load_backend(cfg.model)
    pipeline = create_pipeline_from_config(cfg.model, backend)
    if pipeline.has_model:
        board.publish_message(f"{pipeline.model_status} model loaded successfully!", MessageLevel.SUCCESS)
    else:
        board.publish_message("AI model failed to load. Using demo mode.", MessageLevel.ERROR)

    controller = create_controller_from_config(cfg, pipeline, board)
    return RuntimeContext(config=cfg, pipeline=pipeline, controller=controller, board=board)


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='AutoWheel object detection demo')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--host', type=str, default=None,
                        help='Bind address (overrides web.host)')
    parser.add_argument('--port', type=int, default=None,
                        help='Bind port (overrides web.port)')
    parser.add_argument('--model', type=str, default=None,
                        help='ONNX model path (overrides model.onnx_path)')
    args = parser.parse_args()

    config = load_config(args.config)
    if args.host:
        config.setdefault('web', {})['host'] = args.host
    if args.port:
        config.setdefault('web', {})['port'] = args.port
    if args.model:
        config.setdefault('model', {})['onnx_path'] = args.model

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    setup_logging(config['log_path'], config['log_level'])
    logging.info("Starting AutoWheel detector")

    cfg = Config.from_dict(config)
    ctx = build_context(cfg)

    logging.info(f"Web interface starting on {cfg.web.host}:{cfg.web.port}")
    uvicorn.run(
        create_app(ctx),
        host=cfg.web.host,
        port=cfg.web.port,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
