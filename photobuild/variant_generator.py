"""
VariantGenerator - Handles image resizing and WebP re-encoding.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image


class VariantError(Exception):
    """Base class for variant generation failures."""


class DecodeError(VariantError):
    """Source bytes could not be interpreted as an image."""


class EncodeError(VariantError):
    """The derived image could not be written in the output format."""


@dataclass
class GeneratedVariant:
    """
    One encoded variant, before it is written anywhere.

    Attributes:
        data: Encoded image bytes
        width: Actual output width in pixels
        height: Actual output height in pixels
    """
    data: bytes
    width: int
    height: int


def read_dimensions(image_data: bytes) -> Tuple[int, int]:
    """
    Read (width, height) from the image header without decoding pixels.

    Works for files whose pixel data is truncated or otherwise undecodable,
    as long as the header is intact.

    Raises:
        DecodeError: If no known image header is found
    """
    try:
        with Image.open(io.BytesIO(image_data)) as img:
            width, height = img.size
    except Exception as e:
        raise DecodeError(f"Cannot read image header: {e}") from e
    if width <= 0 or height <= 0:
        raise DecodeError(f"Invalid image dimensions {width}x{height}")
    return width, height


class VariantGenerator:
    """
    Generates resized WebP variants from original images using Pillow.
    """

    OUTPUT_FORMAT = 'WEBP'
    OUTPUT_EXTENSION = '.webp'

    def __init__(
        self,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize variant generator.

        Args:
            quality: WebP quality for output (default: 85)
            logger: Optional logger instance
        """
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def probe(self, image_data: bytes) -> Tuple[int, int]:
        """
        Decode an image and return its native dimensions.

        Args:
            image_data: Original image as bytes

        Returns:
            Tuple of (width, height)

        Raises:
            DecodeError: If the bytes cannot be decoded
        """
        img = self._open(image_data)
        return img.size

    def generate(
        self,
        image_data: bytes,
        native_width: int,
        native_height: int,
        target_width: Optional[int] = None
    ) -> GeneratedVariant:
        """
        Generate one variant from image data.

        The resize is width-driven and keeps the aspect ratio. The caller is
        responsible for never asking for a width wider than the source.

        Args:
            image_data: Original image as bytes
            native_width: Source width in pixels
            native_height: Source height in pixels
            target_width: Requested width, or None to re-encode at native size

        Returns:
            GeneratedVariant with the encoded bytes and actual dimensions

        Raises:
            ValueError: If target_width exceeds native_width
            DecodeError: If the source cannot be decoded
            EncodeError: If the WebP write fails
        """
        if target_width is not None and target_width > native_width:
            raise ValueError(
                f"Refusing to upscale: target {target_width}px > native {native_width}px"
            )

        img = self._convert_color_mode(self._open(image_data))

        if target_width is not None and target_width != img.width:
            height = max(1, round(native_height * target_width / native_width))
            img = img.resize((target_width, height), Image.Resampling.LANCZOS)

        output = io.BytesIO()
        try:
            img.save(output, format=self.OUTPUT_FORMAT, quality=self.quality)
        except Exception as e:
            raise EncodeError(f"WebP encoding failed: {e}") from e

        return GeneratedVariant(data=output.getvalue(), width=img.width, height=img.height)

    def _open(self, image_data: bytes) -> Image.Image:
        """Open and fully decode image bytes."""
        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
        except Exception as e:
            raise DecodeError(f"Cannot decode image: {e}") from e
        return img

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to a color mode WebP can store."""
        if img.mode in ('RGB', 'RGBA'):
            return img
        if img.mode in ('P', 'PA', 'LA'):
            return img.convert('RGBA')
        return img.convert('RGB')
