"""imgico — Convert raster images into multi-size ICO files or PNG-embedding SVGs."""

import os as _os
from pathlib import Path as _Path

__version__ = "0.1.0"

# Project root (parent of the imgico package directory)
ROOT_DIR = _Path(_os.path.dirname(_os.path.abspath(__file__))).parent

from imgico.errors import (  # noqa: E402
    DecodeError,
    EncodeError,
    FormatError,
    ImgicoError,
    InvalidSizeError,
    IoError,
)
from imgico.sizes import DEFAULT_SIZES, is_valid_size, validate_sizes  # noqa: E402
from imgico.ico import IconImage, assemble_ico, read_ico  # noqa: E402
from imgico.svg import wrap_svg  # noqa: E402
from imgico.converter import to_ico, to_svg  # noqa: E402

__all__ = [
    "DEFAULT_SIZES",
    "DecodeError",
    "EncodeError",
    "FormatError",
    "IconImage",
    "ImgicoError",
    "InvalidSizeError",
    "IoError",
    "assemble_ico",
    "is_valid_size",
    "read_ico",
    "to_ico",
    "to_svg",
    "validate_sizes",
    "wrap_svg",
]
