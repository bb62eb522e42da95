"""Fixed 256-entry tone tables that assume the full 0..255 range"""

import math

import numpy as np

from tonalvalues.utils.error_handler import InvalidStepCountError

# 8 bit gray doesn't allow for more than 256 tones
MAX_TONES = 256


def lookup_table(n: int) -> np.ndarray:
    """
    Build a table mapping every byte value onto one of n tones.

    Unlike Staircase, buckets and tones always span 0..255 regardless of the
    luminance actually present in the image, and tones are rounded up.

    Args:
        n: Number of tones; 0 and 1 give the identity table

    Returns:
        uint8 array of 256 entries
    """
    if n < 0:
        raise InvalidStepCountError(n)

    if n < 2:
        return np.arange(256, dtype=np.uint8)

    n = min(n, MAX_TONES)

    # n=2 -> 128.0, n=3 -> 85.33, n=4 -> 64.0, n=5 -> 51.2
    step_width = 256 / n
    step_height = 255 / (n - 1)

    table = np.empty(256, dtype=np.uint8)
    for i in range(256):
        step_index = math.floor(i / step_width)
        table[i] = min(255, math.ceil(step_index * step_height))
    return table
