"""Raster decoding, resizing and PNG encoding, backed by Pillow."""

import io
import logging

from PIL import Image, UnidentifiedImageError

from imgico.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

RESAMPLE_FILTERS = {
    "lanczos": Image.LANCZOS,
    "bicubic": Image.BICUBIC,
    "bilinear": Image.BILINEAR,
    "nearest": Image.NEAREST,
}
DEFAULT_RESAMPLE = "lanczos"


def resample_filter(name: str) -> int:
    """Look up a Pillow resampling filter by its config name."""
    try:
        return RESAMPLE_FILTERS[name.lower()]
    except (KeyError, AttributeError):
        choices = ", ".join(sorted(RESAMPLE_FILTERS))
        raise ValueError(
            f"Unknown resample filter {name!r} (expected one of: {choices})"
        ) from None


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded Pillow image."""
    if not data:
        raise DecodeError("Failed to load image: input is empty")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError,
            OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Failed to load image: {e}") from e
    logger.debug("Decoded %s image %dx%d (%s)",
                 img.format, img.width, img.height, img.mode)
    return img


def to_rgba(img: Image.Image) -> Image.Image:
    if img.mode == "RGBA":
        return img
    return img.convert("RGBA")


def resize_square(img: Image.Image, size: int,
                  resample: str = DEFAULT_RESAMPLE) -> Image.Image:
    """Return an RGBA copy of img resized to exactly size x size."""
    return to_rgba(img).resize((size, size), resample_filter(resample))


def encode_png(img: Image.Image) -> bytes:
    """Encode a raster as PNG bytes."""
    buffer = io.BytesIO()
    try:
        img.save(buffer, format="PNG")
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to write PNG: {e}") from e
    return buffer.getvalue()


def render_png(img: Image.Image, size: int,
               resample: str = DEFAULT_RESAMPLE) -> bytes:
    """Resize img to a square icon and encode it as PNG."""
    data = encode_png(resize_square(img, size, resample))
    logger.debug("Rendered %dx%d PNG (%d bytes)", size, size, len(data))
    return data
