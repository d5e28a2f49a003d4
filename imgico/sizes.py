"""Icon size validation."""

from typing import Iterable

from imgico.errors import InvalidSizeError

MIN_SIZE = 1
MAX_SIZE = 256

# Sizes produced when the caller does not ask for any
DEFAULT_SIZES = (16, 32, 48, 64, 128, 256)


def is_valid_size(value) -> bool:
    """Return True if value is an integer icon size in 1..256."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_SIZE <= value <= MAX_SIZE


def validate_size(value) -> int:
    """Return value unchanged, or raise InvalidSizeError."""
    if not is_valid_size(value):
        raise InvalidSizeError(value)
    return value


def validate_sizes(values: Iterable) -> list[int]:
    """Validate every size up front, keeping order and duplicates.

    Raises InvalidSizeError for the first offending value, before the
    caller has done any decode or resize work. A value that is not a
    sequence of sizes at all is rejected as a whole.
    """
    if isinstance(values, (str, bytes)):
        raise InvalidSizeError(values)
    try:
        values = list(values)
    except TypeError:
        raise InvalidSizeError(values) from None
    return [validate_size(v) for v in values]
