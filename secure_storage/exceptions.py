"""Secure Storage errors.

Every error raised by this package derives from ``SecureStorageError``.
Validation, I/O and lifecycle errors additionally derive from the
matching builtin (``ValueError``, ``OSError``, ``RuntimeError``) so callers
may catch them either way.
"""


class SecureStorageError(Exception):
    """Base class for secure storage failures."""


class ValidationError(SecureStorageError, ValueError):
    """Externally supplied input was rejected before reaching storage."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(message)


class TooLong(ValidationError):
    """Input exceeds the allowed byte length."""

    def __init__(self, field_name: str, max_length: int):
        self.max_length = max_length
        super().__init__(
            field_name,
            f"{field_name} exceeds maximum length of {max_length} bytes",
        )


class InvalidCharacters(ValidationError):
    """Input contains a forbidden character (null byte)."""

    def __init__(self, field_name: str):
        super().__init__(field_name, f"{field_name} contains null bytes")


class InvalidKey(ValidationError):
    """Storage key is empty or cannot be used as a record name."""

    def __init__(self, key: str, reason: str = "Invalid storage key"):
        self.key = key
        super().__init__("storage key", reason)


class BatchTooLarge(ValidationError):
    """Batch holds more items than allowed."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(
            "batch", f"Batch too large ({size} items, max {max_size} items)"
        )


class EncryptionFailed(SecureStorageError):
    """The cipher or the record serialization failed while storing."""


class DecryptionFailed(SecureStorageError):
    """A stored record could not be turned back into plaintext."""


class AuthenticationFailed(DecryptionFailed):
    """Integrity tag did not verify.

    Raised for a wrong key, tampered ciphertext or mismatched nonce alike.
    """

    def __init__(self, message: str = "Decryption failed: authentication error"):
        super().__init__(message)


class InvalidEncoding(DecryptionFailed):
    """Record fields or decrypted bytes are not validly encoded."""


class InvalidFormat(SecureStorageError):
    """A persisted record is structurally malformed."""


class StorageIOError(SecureStorageError, OSError):
    """Filesystem failure while reading or writing records."""


class NotInitialized(SecureStorageError, RuntimeError):
    """An operation ran before the storage handle was initialized."""

    def __init__(self, message: str = "Secure storage not initialized"):
        super().__init__(message)


class AlreadyInitialized(SecureStorageError, RuntimeError):
    """A second initialization was attempted on the same handle."""

    def __init__(self, message: str = "Secure storage already initialized"):
        super().__init__(message)
