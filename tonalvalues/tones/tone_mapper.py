"""Apply tone quantizers across grayscale images"""

from typing import Tuple

import numpy as np

from tonalvalues.staircase.quantizer import Staircase


def value_range(image: np.ndarray) -> Tuple[int, int]:
    """
    Darkest and brightest luminance actually present in a grayscale image.

    Raises:
        ValueError: If the image has no pixels
    """
    if image.size == 0:
        raise ValueError("Empty image has no luminance range")
    return int(image.min()), int(image.max())


def apply_table(image: np.ndarray, table: np.ndarray) -> np.ndarray:
    """
    Map every pixel of a grayscale image through a 256-entry table.

    Args:
        image: (H, W) uint8 array
        table: 256 tone values, clamped into 0..255

    Returns:
        New (H, W) uint8 array
    """
    if image.ndim != 2:
        raise ValueError(f"Expected a grayscale image, got shape {image.shape}")
    if len(table) != 256:
        raise ValueError(f"Tone table must have 256 entries, got {len(table)}")

    lut = np.clip(np.asarray(table), 0, 255).astype(np.uint8)
    return lut[image.astype(np.uint8, copy=False)]


def quantize(image: np.ndarray, staircase: Staircase) -> np.ndarray:
    """Quantize a grayscale image to the tones of a staircase"""
    return apply_table(image, staircase.table())
