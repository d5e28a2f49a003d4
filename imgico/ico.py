"""ICO container assembly and inspection.

Layout of a file produced by assemble_ico():

    ICONDIR        6 bytes   reserved=0, type=1, count
    ICONDIRENTRY  16 bytes   one per image, in input order
    payloads                 PNG data for each entry, same order, no padding

All integers are little-endian. Width and height are single bytes, so a
256 px image is stored as 0.
"""

import logging
import struct
from typing import Iterable

from imgico.errors import FormatError
from imgico.sizes import validate_size

logger = logging.getLogger(__name__)

HEADER_SIZE = 6
ENTRY_SIZE = 16
ICON_TYPE = 1
PLANES = 1
BIT_COUNT = 32

_HEADER = struct.Struct("<HHH")
_ENTRY = struct.Struct("<BBBBHHII")


# =============================================================================
# Field Writers
# =============================================================================

def _pack(fmt: str, value: int, name: str) -> bytes:
    try:
        return struct.pack(fmt, value)
    except struct.error as e:
        raise FormatError(f"Value {value!r} does not fit in {name}") from e


def u8(value: int) -> bytes:
    """Encode a single unsigned byte."""
    return _pack("<B", value, "u8")


def u16le(value: int) -> bytes:
    """Encode an unsigned 16-bit little-endian integer."""
    return _pack("<H", value, "u16")


def u32le(value: int) -> bytes:
    """Encode an unsigned 32-bit little-endian integer."""
    return _pack("<I", value, "u32")


# =============================================================================
# Data Types
# =============================================================================

class IconImage:
    """A PNG payload paired with its nominal square size."""

    def __init__(self, data: bytes, size: int):
        self.data = bytes(data)
        self.size = size

    def __repr__(self):
        return f"IconImage(size={self.size}, {len(self.data)} bytes)"


class IcoDirectoryEntry:
    """One parsed ICONDIRENTRY."""

    def __init__(self, width: int, height: int, palette_count: int,
                 reserved: int, planes: int, bit_count: int,
                 length: int, offset: int):
        self.width = width
        self.height = height
        self.palette_count = palette_count
        self.reserved = reserved
        self.planes = planes
        self.bit_count = bit_count
        self.length = length
        self.offset = offset

    @property
    def size(self) -> int:
        """Nominal size in pixels; a stored 0 means 256."""
        return self.width or 256

    def __repr__(self):
        return (f"IcoDirectoryEntry({self.width}x{self.height}, "
                f"length={self.length}, offset={self.offset})")


def dimension_byte(size: int) -> int:
    """Width/height byte for a nominal size (256 is stored as 0)."""
    return 0 if size >= 256 else size


def _coerce(image) -> IconImage:
    if isinstance(image, IconImage):
        return image
    data, size = image
    return IconImage(data, size)


# =============================================================================
# Assembly
# =============================================================================

def header(count: int) -> bytes:
    """Build the 6-byte ICONDIR header."""
    return u16le(0) + u16le(ICON_TYPE) + u16le(count)


def directory_entry(image, offset: int) -> bytes:
    """Build the 16-byte directory entry for image at the given payload offset."""
    image = _coerce(image)
    dim = dimension_byte(image.size)
    return b"".join((
        u8(dim),                # width
        u8(dim),                # height
        u8(0),                  # palette count
        u8(0),                  # reserved
        u16le(PLANES),
        u16le(BIT_COUNT),
        u32le(len(image.data)),
        u32le(offset),
    ))


def assemble_ico(images: Iterable) -> bytes:
    """Assemble PNG payloads into a single ICO file.

    Args:
        images: Ordered IconImage objects or (png_bytes, size) pairs.

    Returns:
        The complete ICO file as bytes.

    Raises:
        InvalidSizeError: A size is outside 1..256. Checked for every
            image before any bytes are produced.
        FormatError: Too many images, or payloads too large for the
            32-bit length/offset fields.
    """
    images = [_coerce(image) for image in images]
    for image in images:
        validate_size(image.size)

    count = len(images)
    if count > 0xFFFF:
        raise FormatError(f"Too many images for one ICO file: {count}")

    offset = HEADER_SIZE + ENTRY_SIZE * count
    entries = []
    for image in images:
        entries.append(directory_entry(image, offset))
        offset += len(image.data)

    # Offsets were checked per entry; the end of the last payload must fit too
    if offset > 0xFFFFFFFF:
        raise FormatError(f"ICO file too large: {offset} bytes")

    out = bytearray(header(count))
    for entry in entries:
        out += entry
    for image in images:
        out += image.data

    logger.debug("Assembled ICO: %d image(s), %d bytes", count, len(out))
    return bytes(out)


# =============================================================================
# Inspection
# =============================================================================

def read_ico(data: bytes) -> list[IcoDirectoryEntry]:
    """Parse the header and directory of an ICO file.

    Raises FormatError if the buffer is not a well-formed icon file or
    an entry points outside of it.
    """
    if len(data) < HEADER_SIZE:
        raise FormatError("Truncated ICO header")

    reserved, kind, count = _HEADER.unpack_from(data, 0)
    if reserved != 0:
        raise FormatError(f"Bad ICO reserved field: {reserved}")
    if kind != ICON_TYPE:
        raise FormatError(f"Not an icon file (type {kind})")

    directory_end = HEADER_SIZE + ENTRY_SIZE * count
    if len(data) < directory_end:
        raise FormatError(f"Truncated ICO directory: expected {count} entries")

    entries = []
    for i in range(count):
        fields = _ENTRY.unpack_from(data, HEADER_SIZE + ENTRY_SIZE * i)
        entry = IcoDirectoryEntry(*fields)
        if entry.offset < directory_end or entry.offset + entry.length > len(data):
            raise FormatError(
                f"Entry {i} range {entry.offset}+{entry.length} "
                f"is outside the file ({len(data)} bytes)"
            )
        entries.append(entry)
    return entries


def extract_images(data: bytes) -> list[bytes]:
    """Return the payload of every directory entry, in directory order."""
    return [
        bytes(data[e.offset:e.offset + e.length]) for e in read_ico(data)
    ]
