"""Error types raised by imgico.

Every library error derives from ImgicoError so callers can catch the
whole family, or branch on the concrete class.
"""


class ImgicoError(Exception):
    """Base class for all imgico errors."""


class DecodeError(ImgicoError):
    """Input bytes are not a recognizable image."""


class EncodeError(ImgicoError):
    """Encoding a raster to PNG failed."""


class FormatError(ImgicoError):
    """An ICO container could not be built or parsed."""


class InvalidSizeError(FormatError, ValueError):
    """A requested icon size is outside 1..256."""

    def __init__(self, value):
        self.value = value
        super().__init__(
            f"Invalid icon size: {value}. Size must be between 1 and 256."
        )


class IoError(ImgicoError):
    """Reading or writing a file on behalf of the CLI failed."""

    def __init__(self, message: str, path=None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
