"""Range-aware staircase quantization of 8-bit luminance values"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from tonalvalues.utils.error_handler import InvalidRangeError, InvalidStepCountError


@dataclass(frozen=True)
class Staircase:
    """
    Maps luminance values in [min, max] onto n evenly spaced tones.

    The input range is split into n buckets of width (max - min) / n, while
    the output tones are spaced (max - min) / (n - 1) apart. The lowest bucket
    renders as min; only values at or above max render as max.

    Args:
        min: Darkest luminance present in the image
        max: Brightest luminance present in the image
        n: Number of tones. 0 and 1 map every value to itself, clamped to
            [min, max].

    Raises:
        InvalidRangeError: If max < min
        InvalidStepCountError: If n < 0
    """
    min: int
    max: int
    n: int
    step_width: float = field(init=False)
    step_height: Optional[float] = field(init=False)

    def __post_init__(self):
        if self.max < self.min:
            raise InvalidRangeError(self.min, self.max)
        if self.n < 0:
            raise InvalidStepCountError(self.n)

        span = self.max - self.min
        step_width = span / self.n if self.n > 0 else float(span)
        step_height = span / (self.n - 1) if self.n > 1 else None

        object.__setattr__(self, "step_width", step_width)
        object.__setattr__(self, "step_height", step_height)

    @property
    def degenerate(self) -> bool:
        """True when there is no staircase to climb (n < 2 or min == max)"""
        return self.n < 2 or self.min == self.max

    def step_index(self, value: int) -> int:
        """
        Index of the bucket value falls into, from 0 to n - 1.

        Only defined for min <= value < max; value == max may land on n.
        """
        if value < self.min or value > self.max:
            raise ValueError(f"value {value} outside [{self.min}, {self.max}]")
        if self.degenerate:
            return 0
        return math.floor((value - self.min) / self.step_width)

    def transform(self, value: int) -> int:
        """Tone the given luminance value is rendered as"""
        if value <= self.min:
            return self.min
        if value >= self.max:
            return self.max
        if self.n < 2:
            return value
        return self.min + math.floor(self.step_index(value) * self.step_height)

    def table(self) -> np.ndarray:
        """Transform of every byte value 0..255 as a uint8 lookup table"""
        values = np.array([self.transform(v) for v in range(256)])
        return np.clip(values, 0, 255).astype(np.uint8)

    def levels(self) -> List[int]:
        """Distinct tones produced for inputs in [min, max]"""
        return sorted({self.transform(v) for v in range(self.min, self.max + 1)})

    def __str__(self) -> str:
        height = "undefined" if self.step_height is None else f"{self.step_height:f}"
        return (
            f"[min={self.min}, max={self.max}, n={self.n}, "
            f"stepWidth={self.step_width:f}, stepHeight={height}]"
        )
