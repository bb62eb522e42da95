"""Comparison sheet pipeline: validate, decode, grayscale, quantize rows, encode"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from tonalvalues.pipeline.config import Config, QUANTIZATION_METHODS, get_config
from tonalvalues.staircase.lookup_table import lookup_table
from tonalvalues.staircase.quantizer import Staircase
from tonalvalues.tones.grayscale import to_grayscale
from tonalvalues.tones.grid import concat_horizontal, concat_vertical
from tonalvalues.tones.tone_mapper import apply_table, quantize, value_range
from tonalvalues.utils.error_handler import ConfigError, EmptyPathError, stage
from tonalvalues.utils.image_utils import load_image, save_image, validate_image_config
from tonalvalues.utils.logger import get_logger, set_correlation_id

logger = get_logger(__name__)


class TonalValuesPipeline:
    """Builds the tonal values comparison sheet for a photograph"""

    def __init__(self, config: Optional[Config] = None, config_path: Optional[str] = None):
        if config is None:
            config = Config(config_path) if config_path else get_config()
        self.config = config
        logger.debug("pipeline_initialized", version=self.config.get("pipeline.version"))

    def quantize_row(self, gray: np.ndarray, n: int, method: str = "staircase") -> np.ndarray:
        """
        Build one sheet row: the grayscale image next to its n-tone version.

        Args:
            gray: Grayscale image (H, W)
            n: Number of tones
            method: "staircase" to use the image's own luminance range,
                "lookup" for fixed tables over 0..255

        Returns:
            (H, 2W) grayscale row
        """
        if method == "staircase":
            low, high = value_range(gray)
            staircase = Staircase(low, high, n)
            logger.debug("staircase_built", n=n, staircase=str(staircase))
            quantized = quantize(gray, staircase)
        elif method == "lookup":
            quantized = apply_table(gray, lookup_table(n))
        else:
            raise ConfigError(f"Unknown quantization method: {method}. Must be one of {QUANTIZATION_METHODS}")

        return concat_horizontal([gray, quantized])

    def build_sheet(
        self,
        original: np.ndarray,
        tones: Sequence[int],
        method: str = "staircase",
        include_header: bool = True
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Compose the comparison sheet from a decoded image.

        Returns:
            Tuple of (sheet, metadata_dict)
        """
        with stage("grayscale", "converting to grayscale"):
            gray = to_grayscale(original)
            low, high = value_range(gray)
        logger.info("value_range", min=low, max=high)

        rows: List[np.ndarray] = []
        if include_header:
            rows.append(concat_horizontal([original, gray]))

        for n in tones:
            with stage("quantize", f"quantizing to {n} tones"):
                rows.append(self.quantize_row(gray, n, method))
            logger.debug("row_appended", n=n)

        with stage("compose", "composing sheet"):
            sheet = concat_vertical(rows)

        metadata = {
            "input_shape": original.shape,
            "output_shape": sheet.shape,
            "value_range": (low, high),
            "tones": list(tones),
            "method": method,
        }
        return sheet, metadata

    def process_image(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        tones: Optional[Sequence[int]] = None,
        method: Optional[str] = None
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Run the whole pipeline and write the comparison sheet.

        Nothing is written unless every stage succeeds.

        Args:
            input_path: JPEG photograph
            output_path: Destination, defaults to the configured output path
            tones: Tone counts, one row each, defaults to the configured list
            method: Quantization method, defaults to the configured one

        Returns:
            Tuple of (sheet, metadata_dict)

        Raises:
            EmptyPathError: If input_path is empty
            StageError: If any stage fails
        """
        if not str(input_path):
            raise EmptyPathError()

        correlation_id = str(uuid.uuid4())
        set_correlation_id(correlation_id)
        start_time = datetime.now()

        output_path = Path(output_path or self.config.output_path)
        tones = list(self.config.tones if tones is None else tones)
        method = method or self.config.method
        if method not in QUANTIZATION_METHODS:
            raise ConfigError(f"Unknown quantization method: {method}. Must be one of {QUANTIZATION_METHODS}")
        formats = self.config.input_formats

        logger.info("pipeline_start", input_path=str(input_path), tones=tones, method=method)

        with stage("validate", "validating image config"):
            width, height = validate_image_config(
                input_path,
                bounds=self.config.get_validation_config(),
                formats=formats
            )
        logger.info("image_validated", width=width, height=height)

        with stage("decode", "loading image"):
            original = load_image(input_path, formats=formats)

        sheet, metadata = self.build_sheet(
            original,
            tones,
            method=method,
            include_header=self.config.include_header
        )

        output_format = self.config.get_output_config().get("format", "JPEG")
        with stage("encode", "saving output image"):
            save_image(sheet, output_path, format=output_format)

        end_time = datetime.now()
        metadata.update({
            "output_path": str(output_path),
            "correlation_id": correlation_id,
            "processing_time_ms": (end_time - start_time).total_seconds() * 1000,
        })
        logger.info(
            "pipeline_complete",
            output_path=str(output_path),
            output_shape=sheet.shape,
            processing_time_ms=metadata["processing_time_ms"]
        )
        return sheet, metadata
