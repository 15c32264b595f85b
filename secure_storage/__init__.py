"""Secure Storage — Encrypted secret storage for desktop applications.

Security Note (Threat Model):
    The master key is derived from the application name and public machine
    information (host and user name). It protects secrets on disk against
    casual inspection (backups, other local users). Anyone able to
    reproduce the derivation inputs or read process memory can recover
    every secret. This is an accepted limitation — a passphrase or an OS
    keychain would be required to go further and is out of scope.
"""

from .version import __version__
from .config import StorageConfig, default_app_data_dir
from .exceptions import (
    SecureStorageError,
    ValidationError,
    TooLong,
    InvalidCharacters,
    InvalidKey,
    BatchTooLarge,
    EncryptionFailed,
    DecryptionFailed,
    AuthenticationFailed,
    InvalidEncoding,
    InvalidFormat,
    StorageIOError,
    NotInitialized,
    AlreadyInitialized,
)
from .identity import (
    IdentityProvider,
    StaticIdentityProvider,
    default_identity_provider,
)
from .record import EncryptedRecord
from .crypto import derive_master_key
from .manager import SecureStorageManager
from .context import (
    StorageContext,
    default_context,
    init_secure_storage,
    get_secure_storage,
)
from .named_secret import NamedSecret
from .key_rotation import rotate_master_key

__all__ = [
    "__version__",
    "StorageConfig",
    "default_app_data_dir",
    "SecureStorageError",
    "ValidationError",
    "TooLong",
    "InvalidCharacters",
    "InvalidKey",
    "BatchTooLarge",
    "EncryptionFailed",
    "DecryptionFailed",
    "AuthenticationFailed",
    "InvalidEncoding",
    "InvalidFormat",
    "StorageIOError",
    "NotInitialized",
    "AlreadyInitialized",
    "IdentityProvider",
    "StaticIdentityProvider",
    "default_identity_provider",
    "EncryptedRecord",
    "derive_master_key",
    "SecureStorageManager",
    "StorageContext",
    "default_context",
    "init_secure_storage",
    "get_secure_storage",
    "NamedSecret",
    "rotate_master_key",
]
