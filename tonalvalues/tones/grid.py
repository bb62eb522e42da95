"""Composition of images into comparison sheets"""

from typing import Sequence

import numpy as np


def _is_color(image: np.ndarray) -> bool:
    return image.ndim == 3 and image.shape[2] > 1


def _to_canvas_format(image: np.ndarray, color: bool) -> np.ndarray:
    """Bring an image into the pixel format of the canvas it is pasted on"""
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if not color:
        return image

    if image.ndim == 2:
        return np.stack([image] * 3, axis=-1)
    # Alpha is dropped
    return image[:, :, :3]


def _new_canvas(height: int, width: int, color: bool) -> np.ndarray:
    shape = (height, width, 3) if color else (height, width)
    return np.zeros(shape, dtype=np.uint8)


def concat_horizontal(images: Sequence[np.ndarray]) -> np.ndarray:
    """
    Place images left to right, top-aligned.

    The canvas is as wide as all images together and as tall as the tallest
    one. Area not covered by any image is black. Grayscale images are promoted
    to RGB when any of the images has color.
    """
    color = any(_is_color(img) for img in images)
    width = sum(img.shape[1] for img in images)
    height = max((img.shape[0] for img in images), default=0)

    canvas = _new_canvas(height, width, color)
    offset_x = 0
    for img in images:
        h, w = img.shape[:2]
        canvas[:h, offset_x:offset_x + w] = _to_canvas_format(img, color)
        offset_x += w
    return canvas


def concat_vertical(images: Sequence[np.ndarray]) -> np.ndarray:
    """Place images top to bottom, left-aligned"""
    color = any(_is_color(img) for img in images)
    width = max((img.shape[1] for img in images), default=0)
    height = sum(img.shape[0] for img in images)

    canvas = _new_canvas(height, width, color)
    offset_y = 0
    for img in images:
        h, w = img.shape[:2]
        canvas[offset_y:offset_y + h, :w] = _to_canvas_format(img, color)
        offset_y += h
    return canvas
