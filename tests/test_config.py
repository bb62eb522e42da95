"""Unit tests for configuration loading"""

import pytest
from pathlib import Path


class TestConfig:
    """Test config defaults, YAML overrides and environment overrides"""

    def test_defaults(self):
        from tonalvalues.pipeline.config import Config

        config = Config()
        assert config.tones == [2, 3, 4, 5, 6]
        assert config.method == "staircase"
        assert config.output_path == "./output.jpg"
        assert config.include_header is True
        assert config.input_formats == ["JPEG"]
        assert config.get_validation_config()["max_width"] == 5000

    def test_default_config_file_exists(self):
        import yaml

        config_path = Path(__file__).parent.parent / "configs" / "default_config.yaml"
        assert config_path.exists(), "default_config.yaml should exist"

        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
        assert loaded["pipeline"]["tones"] == [2, 3, 4, 5, 6]
        assert loaded["output"]["path"] == "./output.jpg"

    def test_yaml_override_keeps_other_defaults(self, temp_dir):
        from tonalvalues.pipeline.config import Config

        config_path = temp_dir / "config.yaml"
        config_path.write_text("pipeline:\n  tones: [3, 7]\nquantization:\n  method: lookup\n")

        config = Config(str(config_path))
        assert config.tones == [3, 7]
        assert config.method == "lookup"
        assert config.include_header is True
        assert config.get("validation.min_width") == 10

    def test_env_overrides(self, monkeypatch):
        from tonalvalues.pipeline.config import Config

        monkeypatch.setenv("TONALVALUES_OUTPUT_PATH", "/tmp/sheet.jpg")
        monkeypatch.setenv("TONALVALUES_TONES", "2, 8")
        monkeypatch.setenv("TONALVALUES_METHOD", "lookup")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        config = Config()
        assert config.output_path == "/tmp/sheet.jpg"
        assert config.tones == [2, 8]
        assert config.method == "lookup"
        assert config.get("logging.level") == "DEBUG"

    def test_get_missing_key(self):
        from tonalvalues.pipeline.config import Config

        config = Config()
        assert config.get("pipeline.nothing.here", "fallback") == "fallback"

    def test_missing_file(self, temp_dir):
        from tonalvalues.pipeline.config import Config
        from tonalvalues.utils.error_handler import ConfigError

        with pytest.raises(ConfigError, match="not found"):
            Config(str(temp_dir / "nope.yaml"))

    def test_unknown_method(self, temp_dir):
        from tonalvalues.pipeline.config import Config
        from tonalvalues.utils.error_handler import ConfigError

        config_path = temp_dir / "config.yaml"
        config_path.write_text("quantization:\n  method: kmeans\n")

        with pytest.raises(ConfigError, match="Unknown quantization method"):
            Config(str(config_path))

    def test_invalid_tone_list(self, monkeypatch):
        from tonalvalues.pipeline.config import Config
        from tonalvalues.utils.error_handler import ConfigError

        monkeypatch.setenv("TONALVALUES_TONES", "two,three")
        with pytest.raises(ConfigError):
            Config()

    def test_global_instance(self):
        from tonalvalues.pipeline.config import get_config, reset_config

        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first

    def test_invalid_tone_list_keeps_cause(self):
        from tonalvalues.pipeline.config import parse_tones
        from tonalvalues.utils.error_handler import ConfigError

        with pytest.raises(ConfigError) as exc_info:
            parse_tones("2,x")
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.parametrize("tones", ["['2', '3']", '"2,3"', "4", "[2, true]", "[2.5]"])
    def test_tones_must_be_integer_list(self, temp_dir, tones):
        from tonalvalues.pipeline.config import Config
        from tonalvalues.utils.error_handler import ConfigError

        config_path = temp_dir / "config.yaml"
        config_path.write_text(f"pipeline:\n  tones: {tones}\n")

        with pytest.raises(ConfigError, match="pipeline.tones must be a list of integers"):
            Config(str(config_path))

    def test_negative_tone_count(self, temp_dir):
        from tonalvalues.pipeline.config import Config
        from tonalvalues.utils.error_handler import ConfigError

        config_path = temp_dir / "config.yaml"
        config_path.write_text("pipeline:\n  tones: [2, -1]\n")

        with pytest.raises(ConfigError, match="must not be negative"):
            Config(str(config_path))

    def test_missing_default_file_is_logged(self, temp_dir, monkeypatch):
        from structlog.testing import capture_logs
        from tonalvalues.pipeline import config as config_module

        missing = temp_dir / "default_config.yaml"
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", missing)

        with capture_logs() as logs:
            config = config_module.Config()

        assert config.tones == [2, 3, 4, 5, 6]
        assert config.output_path == "./output.jpg"
        assert any(
            entry["event"] == "default_config_missing"
            and entry["log_level"] == "debug"
            and entry["path"] == str(missing)
            for entry in logs
        )
