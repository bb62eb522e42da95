"""Image loading, validation and saving"""

import io
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from tonalvalues.utils.error_handler import (
    DecodeConfigError,
    FileCreateError,
    FileOpenError,
    ImageDecodeError,
    ImageEncodeError,
    ImageTooNarrowError,
    ImageTooShortError,
    ImageTooTallError,
    ImageTooWideError,
)
from tonalvalues.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BOUNDS = {
    "min_width": 10,
    "max_width": 5000,
    "min_height": 10,
    "max_height": 5000,
}


def read_image_size(path: Union[str, Path], formats: Sequence[str] = ("JPEG",)) -> Tuple[int, int]:
    """
    Read image dimensions from the file header without decoding pixel data.

    Args:
        path: Path to the image file
        formats: Accepted Pillow format names

    Returns:
        (width, height)

    Raises:
        FileOpenError: If the file cannot be opened
        DecodeConfigError: If the header is not one of the accepted formats
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise FileOpenError(path, "opening image", e) from e

    with f:
        try:
            # Image.open only parses the header; pixels are decoded on load()
            with Image.open(f, formats=list(formats)) as img:
                return img.size
        except (OSError, SyntaxError, ValueError) as e:
            raise DecodeConfigError(path, "decoding image config", e) from e


def validate_image_config(
    path: Union[str, Path],
    bounds: Optional[Dict[str, int]] = None,
    formats: Sequence[str] = ("JPEG",)
) -> Tuple[int, int]:
    """
    Check the image header against dimension bounds before any decode work.

    Raises:
        ImageTooWideError, ImageTooTallError, ImageTooNarrowError,
        ImageTooShortError: If a dimension is out of bounds
    """
    limits = dict(DEFAULT_BOUNDS)
    limits.update(bounds or {})

    width, height = read_image_size(path, formats)

    if width > limits["max_width"]:
        raise ImageTooWideError(limits["max_width"], width)
    if height > limits["max_height"]:
        raise ImageTooTallError(limits["max_height"], height)
    if width < limits["min_width"]:
        raise ImageTooNarrowError(limits["min_width"], width)
    if height < limits["min_height"]:
        raise ImageTooShortError(limits["min_height"], height)

    logger.debug("image_config_valid", path=str(path), width=width, height=height)
    return width, height


def load_image(path: Union[str, Path], formats: Sequence[str] = ("JPEG",)) -> np.ndarray:
    """
    Decode an image into an RGB numpy array.

    Raises:
        FileOpenError: If the file cannot be opened
        ImageDecodeError: If the pixel data cannot be decoded
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise FileOpenError(path, "opening image", e) from e

    with f:
        try:
            with Image.open(f, formats=list(formats)) as img:
                img.load()
                return np.array(img.convert("RGB"))
        except (OSError, SyntaxError, ValueError) as e:
            raise ImageDecodeError(path, "decoding image", e) from e


def image_to_bytes(img: np.ndarray, format: str = "JPEG") -> bytes:
    """
    Encode a numpy image with the default encoder options.

    Raises:
        ImageEncodeError: If the format is unsupported or encoding fails
    """
    format_upper = format.upper()
    try:
        pil_img = Image.fromarray(np.ascontiguousarray(img, dtype=np.uint8))
        with io.BytesIO() as buf:
            pil_img.save(buf, format=format_upper)
            return buf.getvalue()
    except (OSError, KeyError, ValueError, TypeError, SystemError) as e:
        raise ImageEncodeError(f"<{format_upper}>", "encoding image", e) from e


def _umask() -> int:
    # mkstemp creates files as 0600; reading the umask means setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save_image(img: np.ndarray, path: Union[str, Path], format: str = "JPEG") -> Path:
    """
    Encode an image and write it to path, overwriting any existing file.

    The image is fully encoded in memory, written to a temporary file in the
    target directory and then renamed over path. A failure at any step leaves
    an existing file at path untouched.

    Raises:
        ImageEncodeError: If encoding fails
        FileCreateError: If the file cannot be written
    """
    data = image_to_bytes(img, format)

    path_obj = Path(path)
    try:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path_obj.parent, prefix=f".{path_obj.name}.", suffix=".tmp")
    except OSError as e:
        raise FileCreateError(path, "creating file", e) from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, 0o666 & ~_umask())
        os.replace(tmp_name, path_obj)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise FileCreateError(path, "writing file", e) from e

    logger.debug("image_saved", path=str(path_obj), bytes=len(data))
    return path_obj
