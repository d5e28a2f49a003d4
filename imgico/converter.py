"""Conversion entry points: image bytes in, ICO or SVG bytes out."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from imgico.ico import IconImage, assemble_ico
from imgico.raster import (
    DEFAULT_RESAMPLE,
    decode_image,
    encode_png,
    resample_filter,
    render_png,
    resize_square,
    to_rgba,
)
from imgico.sizes import DEFAULT_SIZES, validate_size, validate_sizes
from imgico.svg import wrap_svg

logger = logging.getLogger(__name__)


def to_ico(input_bytes: bytes, sizes: Iterable[int] | None = None, *,
           resample: str = DEFAULT_RESAMPLE, workers: int = 1) -> bytes:
    """
    Convert an image into a multi-size ICO file.

    Args:
        input_bytes: Encoded source image (any format Pillow can read).
        sizes: Square icon sizes to embed, in order. Defaults to DEFAULT_SIZES.
        resample: Resampling filter name (see raster.RESAMPLE_FILTERS).
        workers: Render sizes on this many threads when greater than 1.

    Raises:
        InvalidSizeError, DecodeError, EncodeError. Nothing is returned
        unless every size succeeds. ValueError for a bad resample name
        or worker count.
    """
    sizes = validate_sizes(DEFAULT_SIZES if sizes is None else sizes)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ValueError(f"workers must be a positive integer, not {workers!r}")
    resample_filter(resample)
    img = decode_image(input_bytes)

    if workers > 1 and len(sizes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields results in submission order
            payloads = list(pool.map(lambda s: render_png(img, s, resample), sizes))
    else:
        payloads = [render_png(img, s, resample) for s in sizes]

    images = [IconImage(data, size) for data, size in zip(payloads, sizes)]
    ico = assemble_ico(images)
    logger.info("Built ICO with sizes %s (%d bytes)", sizes, len(ico))
    return ico


def to_svg(input_bytes: bytes, size: int | None = None, *,
           resample: str = DEFAULT_RESAMPLE) -> bytes:
    """
    Convert an image into an SVG embedding it as a PNG data URI.

    Without a size the image keeps its native dimensions; otherwise it
    is resized to size x size.
    """
    if size is not None:
        validate_size(size)
    resample_filter(resample)
    img = decode_image(input_bytes)

    if size is None:
        raster = to_rgba(img)
    else:
        raster = resize_square(img, size, resample)

    png = encode_png(raster)
    width, height = raster.size
    logger.info("Built %dx%d SVG", width, height)
    return wrap_svg(png, width, height)
