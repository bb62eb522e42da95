"""Configuration management for the pipeline"""

import copy
import os
import threading
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

from tonalvalues.utils.error_handler import ConfigError
from tonalvalues.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "configs" / "default_config.yaml"

DEFAULTS: Dict[str, Any] = {
    "pipeline": {
        "version": "1.0.0",
        "tones": [2, 3, 4, 5, 6],
        "include_header": True,
    },
    "quantization": {
        "method": "staircase",
    },
    "validation": {
        "min_width": 10,
        "max_width": 5000,
        "min_height": 10,
        "max_height": 5000,
        "formats": ["JPEG"],
    },
    "output": {
        "path": "./output.jpg",
        "format": "JPEG",
    },
    "logging": {
        "level": "INFO",
        "format": "console",
        "file": None,
    },
}

QUANTIZATION_METHODS = ("staircase", "lookup")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, recursing into nested dicts"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def parse_tones(value: str) -> List[int]:
    """Parse a comma separated list of tone counts such as "2,3,4" """
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError as e:
        raise ConfigError(f"Invalid tone list: {value!r}") from e


class Config:
    """Pipeline configuration loader and manager"""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration from built-in defaults, YAML file and environment variables"""
        load_dotenv()

        if config_path is None:
            path = DEFAULT_CONFIG_PATH
        else:
            path = Path(config_path)
            if not path.exists():
                raise ConfigError(f"Config file not found: {config_path}")

        self._config = copy.deepcopy(DEFAULTS)
        if path.exists():
            with open(path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigError(f"Config file must contain a mapping: {path}")
            self._config = _deep_merge(self._config, loaded)
        else:
            logger.debug("default_config_missing", path=str(path))

        self._apply_env_overrides()
        self._validate()

    def _apply_env_overrides(self):
        """Apply environment variable overrides"""
        if os.getenv("TONALVALUES_OUTPUT_PATH"):
            self._config["output"]["path"] = os.getenv("TONALVALUES_OUTPUT_PATH")
        if os.getenv("TONALVALUES_TONES"):
            self._config["pipeline"]["tones"] = parse_tones(os.getenv("TONALVALUES_TONES"))
        if os.getenv("TONALVALUES_METHOD"):
            self._config["quantization"]["method"] = os.getenv("TONALVALUES_METHOD")
        if os.getenv("LOG_LEVEL"):
            self._config["logging"]["level"] = os.getenv("LOG_LEVEL")

    def _validate(self):
        if self.method not in QUANTIZATION_METHODS:
            raise ConfigError(
                f"Unknown quantization method: {self.method}. Must be one of {QUANTIZATION_METHODS}"
            )
        tones = self.get("pipeline.tones")
        if not isinstance(tones, list) or not all(
            isinstance(n, int) and not isinstance(n, bool) for n in tones
        ):
            raise ConfigError(f"pipeline.tones must be a list of integers, got {tones!r}")
        if any(n < 0 for n in tones):
            raise ConfigError(f"Tone counts must not be negative: {self.tones}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key path"""
        keys = key_path.split('.')
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_validation_config(self) -> Dict[str, Any]:
        """Get input validation bounds and formats"""
        return self._config.get("validation", {})

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration"""
        return self._config.get("output", {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration"""
        return self._config.get("logging", {})

    @property
    def tones(self) -> List[int]:
        """Tone counts rendered as rows of the comparison sheet"""
        return list(self.get("pipeline.tones", [2, 3, 4, 5, 6]))

    @property
    def include_header(self) -> bool:
        """Whether the sheet starts with the original next to its grayscale version"""
        return bool(self.get("pipeline.include_header", True))

    @property
    def method(self) -> str:
        """Quantization method (staircase/lookup)"""
        return self.get("quantization.method", "staircase")

    @property
    def output_path(self) -> str:
        """Where the comparison sheet is written"""
        return self.get("output.path", "./output.jpg")

    @property
    def input_formats(self) -> List[str]:
        """Accepted input image formats"""
        return list(self.get("validation.formats", ["JPEG"]))


# Global config instance
_config_instance: Optional[Config] = None
_config_lock = threading.Lock()


def get_config(config_path: Optional[str] = None) -> Config:
    """Get or create global config instance"""
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    with _config_lock:
        if _config_instance is None:
            _config_instance = Config(config_path)
        return _config_instance


def reset_config():
    """Drop the global config instance so the next get_config() reloads it"""
    global _config_instance
    with _config_lock:
        _config_instance = None
