"""Color to luminance conversion"""

import numpy as np
from PIL import Image


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to single-channel luminance.

    Uses Pillow's "L" conversion (ITU-R 601-2 luma). Alpha is ignored.

    Args:
        image: Grayscale (H, W) or color (H, W, C) uint8 array

    Returns:
        New (H, W) uint8 array

    Raises:
        ValueError: If the array is not an image
    """
    if image.ndim == 2:
        return image.astype(np.uint8, copy=True)

    if image.ndim != 3 or image.shape[2] not in (1, 3, 4):
        raise ValueError(f"Unsupported image shape: {image.shape}")

    height, width = image.shape[:2]
    if height == 0 or width == 0:
        return np.zeros((height, width), dtype=np.uint8)

    if image.shape[2] == 1:
        return image[:, :, 0].astype(np.uint8, copy=True)

    # Pillow infers RGB or RGBA from the channel count
    pil_img = Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
    return np.array(pil_img.convert("L"))
