"""
Smoke tests for configuration loading and validation.
"""

import pytest

from main import load_config, validate_config


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    @pytest.mark.parametrize("section", ["camera", "model", "log_path", "log_level"])
    def test_missing_required_section(self, valid_config, section):
        del valid_config[section]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert section in error

    def test_loop_and_web_sections_optional(self, valid_config):
        del valid_config["loop"]
        del valid_config["web"]

        is_valid, _ = validate_config(valid_config)

        assert is_valid is True

    def test_invalid_device_id_type(self, valid_config):
        valid_config["camera"]["device_id"] = 1.5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    def test_negative_device_id(self, valid_config):
        valid_config["camera"]["device_id"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "non-negative" in error

    def test_string_device_id_valid(self, valid_config):
        valid_config["camera"]["device_id"] = "rtsp://192.168.1.100/stream"

        is_valid, _ = validate_config(valid_config)

        assert is_valid is True

    def test_invalid_resolution_length(self, valid_config):
        valid_config["camera"]["resolution"] = [1280]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "resolution" in error

    def test_invalid_fps(self, valid_config):
        valid_config["camera"]["fps"] = 0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "fps" in error

    def test_invalid_input_size(self, valid_config):
        valid_config["model"]["input_size"] = "640"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "input_size" in error

    def test_unknown_label_table(self, valid_config):
        valid_config["model"]["labels"] = "imagenet"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "labels" in error

    @pytest.mark.parametrize("threshold", [-0.1, 1.5, "high"])
    def test_invalid_conf_threshold(self, valid_config, threshold):
        valid_config["model"]["conf_threshold"] = threshold

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "conf_threshold" in error

    def test_invalid_providers(self, valid_config):
        valid_config["model"]["providers"] = "CPUExecutionProvider"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "providers" in error

    def test_invalid_tick_interval(self, valid_config):
        valid_config["loop"]["tick_interval_ms"] = -5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "tick_interval_ms" in error

    def test_invalid_port(self, valid_config):
        valid_config["web"]["port"] = 70000

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "port" in error

    def test_invalid_demo_dir(self, valid_config):
        valid_config["demo"] = {"images_dir": 42}

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "demo.images_dir" in error

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_default_yaml(self, temp_config_dir):
        """Config loads from default.yaml when only it exists."""
        config_path = str(temp_config_dir / "config.yaml")

        config = load_config(config_path)

        assert config["camera"]["device_id"] == 0
        assert config["camera"]["resolution"] == [640, 480]
        assert config["model"]["labels"] == "autowheel"

    def test_local_overrides_merge(self, temp_config_dir):
        """Local config.yaml overrides default.yaml."""
        config_yaml = temp_config_dir / "config.yaml"
        config_yaml.write_text("""
camera:
  resolution: [1920, 1080]
  fps: 60
""")

        config = load_config(str(config_yaml))

        assert config["camera"]["resolution"] == [1920, 1080]
        assert config["camera"]["fps"] == 60
        assert config["camera"]["device_id"] == 0

    def test_deep_merge_preserves_nested(self, temp_config_dir):
        config_yaml = temp_config_dir / "config.yaml"
        config_yaml.write_text("""
model:
  onnx_path: "weights/custom.onnx"
""")

        config = load_config(str(config_yaml))

        assert config["model"]["onnx_path"] == "weights/custom.onnx"
        assert config["model"]["input_size"] == 640
        assert config["model"]["conf_threshold"] == 0.5

    def test_explicit_config_applied_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("web:\n  port: 6000\n")
        explicit = temp_config_dir / "kiosk.yaml"
        explicit.write_text("web:\n  port: 7000\n")

        config = load_config(str(explicit))

        assert config["web"]["port"] == 7000
        assert config["web"]["host"] == "127.0.0.1"

    def test_invalid_yaml_exits(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("camera: [unclosed\n")

        with pytest.raises(SystemExit):
            load_config(str(temp_config_dir / "config.yaml"))


class TestBuildContext:
    def test_demo_mode_without_model(self, valid_config, tmp_path):
        from main import build_context
        from models.config import Config
        from models.status import ControllerState

        valid_config["model"]["onnx_path"] = str(tmp_path / "missing.onnx")
        ctx = build_context(Config.from_dict(valid_config))

        assert ctx.pipeline.has_model is False
        assert ctx.board.metrics.model_status == "Demo mode"
        assert ctx.board.current_message().text == "AI model failed to load. Using demo mode."
        assert ctx.controller.state == ControllerState.IDLE
        assert ctx.latest_frame() is None
