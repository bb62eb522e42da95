"""Pytest fixtures and test configuration"""

import logging
import pytest
import numpy as np
import structlog
from pathlib import Path
from PIL import Image
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep environment overrides and the global config out of tests"""
    for name in ("TONALVALUES_OUTPUT_PATH", "TONALVALUES_TONES", "TONALVALUES_METHOD", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    from tonalvalues.pipeline.config import reset_config
    reset_config()
    yield
    reset_config()

    # Drop handlers bound to streams captured by this test
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    from tonalvalues.utils.logger import _log_handlers
    root_logger = logging.getLogger()
    for handler in _log_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _log_handlers.clear()


@pytest.fixture
def sample_image():
    """Create a sample RGB test image"""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, (48, 64, 3), dtype=np.uint8)


@pytest.fixture
def gradient_image():
    """Grayscale image holding every luminance value 0..255 once per row"""
    row = np.arange(256, dtype=np.uint8)
    return np.tile(row, (16, 1))


@pytest.fixture
def uniform_image():
    """Grayscale image with a single luminance"""
    return np.full((20, 30), 117, dtype=np.uint8)


@pytest.fixture
def make_jpeg(tmp_path):
    """Factory writing a real JPEG of the given size into tmp_path"""
    def _make(width=64, height=48, name="photo.jpg", format="JPEG"):
        x = np.linspace(0, 255, width, dtype=np.float64)
        y = np.linspace(0, 255, height, dtype=np.float64)
        red = np.tile(x, (height, 1))
        green = np.tile(y[:, None], (1, width))
        blue = np.full((height, width), 128.0)
        pixels = np.stack([red, green, blue], axis=-1).astype(np.uint8)

        path = tmp_path / name
        Image.fromarray(pixels).save(path, format=format)
        return path
    return _make


@pytest.fixture
def config(tmp_path):
    """Config built from defaults with output inside tmp_path"""
    from tonalvalues.pipeline.config import Config

    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"output:\n  path: {tmp_path / 'output.jpg'}\n")
    return Config(str(config_path))


@pytest.fixture
def temp_dir(tmp_path):
    """Create a temporary directory for test outputs"""
    return tmp_path
