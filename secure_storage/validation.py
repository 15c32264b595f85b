"""
Input validation for secure storage.

Stateless guards applied to every externally supplied string before it is
used as a storage key or stored as a value. Lengths are measured in UTF-8
bytes, not characters.
"""
from collections.abc import Sized

from .config import (
    MAX_BATCH_SIZE,
    MAX_STORAGE_KEY_LENGTH,
    MAX_STORAGE_VALUE_LENGTH,
)
from .exceptions import (
    BatchTooLarge,
    InvalidCharacters,
    InvalidKey,
    TooLong,
)

_PATH_SEPARATORS = ("/", "\\")


def byte_length(value: str) -> int:
    """Return the UTF-8 encoded length of ``value``."""
    return len(value.encode("utf-8"))


def validate_input(value: str, field_name: str, max_length: int) -> None:
    """Reject oversized input or input containing null bytes.

    Args:
        value: Externally supplied string.
        field_name: Label used in the error message.
        max_length: Maximum allowed length in bytes.

    Raises:
        TooLong: If the encoded value is longer than ``max_length`` bytes.
        InvalidCharacters: If the value contains a null byte, or a lone
            surrogate that cannot be encoded as UTF-8.
    """
    try:
        size = byte_length(value)
    except UnicodeEncodeError as err:
        raise InvalidCharacters(field_name) from err
    if size > max_length:
        raise TooLong(field_name, max_length)
    if "\0" in value:
        raise InvalidCharacters(field_name)


def validate_storage_key(
    key: str, max_length: int = MAX_STORAGE_KEY_LENGTH
) -> None:
    """Validate a storage key.

    Keys map 1:1 to file names inside the storage directory, so besides the
    generic checks they must be non-empty and a single path component.

    Raises:
        InvalidKey: If key is not a string, is empty, or is path-like.
        TooLong: If key exceeds ``max_length`` bytes.
        InvalidCharacters: If key contains a null byte.
    """
    if not isinstance(key, str) or not key:
        raise InvalidKey(key, "Invalid storage key: key cannot be empty")
    validate_input(key, "storage key", max_length)
    if key in (".", "..") or any(sep in key for sep in _PATH_SEPARATORS):
        raise InvalidKey(
            key, "Invalid storage key: path separators are not allowed"
        )


def validate_storage_value(
    value: str, max_length: int = MAX_STORAGE_VALUE_LENGTH
) -> None:
    """Validate a value before encryption."""
    validate_input(value, "storage value", max_length)


def validate_batch_size(items: Sized, max_size: int = MAX_BATCH_SIZE) -> None:
    """Raise BatchTooLarge when ``items`` holds more than ``max_size`` entries."""
    if len(items) > max_size:
        raise BatchTooLarge(len(items), max_size)
