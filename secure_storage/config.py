"""
Storage Configuration — limits, on-disk naming and validated settings.

Reads optional overrides from environment variables:
    SECURE_STORAGE_DIRNAME      = <storage directory name under app data dir>
    SECURE_STORAGE_EXTENSION    = <record file extension, e.g. ".enc">
    SECURE_STORAGE_SALT         = <key derivation salt literal>
    SECURE_STORAGE_APP_DATA_DIR = <application data directory>

Security Note:
    Never log key material or the derivation salt together with the
    machine identity. Only log directory names and limits.
"""
import os
import sys
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("secure_storage")

MAX_STORAGE_VALUE_LENGTH = 8192  # 8KB ceiling for a single secret
MAX_STORAGE_KEY_LENGTH = 255
MAX_BATCH_SIZE = 100

STORAGE_DIRNAME = "secure_storage"
RECORD_EXTENSION = ".enc"
RECORD_VERSION = 1

# Fixed literal mixed into the master key derivation. Changing it makes
# every existing record undecryptable.
KEY_DERIVATION_SALT = "ryu_secure_storage_v1"


def default_app_data_dir(app_name: str) -> Path:
    """Return the per-user application data directory for ``app_name``.

    ``SECURE_STORAGE_APP_DATA_DIR`` wins when set, otherwise:
      - Windows: %APPDATA%/<app_name>
      - macOS:   ~/Library/Application Support/<app_name>
      - POSIX:   $XDG_DATA_HOME/<app_name> (default ~/.local/share)

    The directory is not created here; the manager creates its own
    storage directory below it.
    """
    override = os.environ.get("SECURE_STORAGE_APP_DATA_DIR")
    if override:
        return Path(override)
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / app_name


class StorageConfig(BaseModel):
    """Validated secure storage configuration."""

    storage_dirname: str = Field(default=STORAGE_DIRNAME, min_length=1)
    record_extension: str = Field(default=RECORD_EXTENSION)
    key_salt: str = Field(default=KEY_DERIVATION_SALT, min_length=1)
    max_value_length: int = Field(
        default=MAX_STORAGE_VALUE_LENGTH, ge=1, le=MAX_STORAGE_VALUE_LENGTH
    )
    max_key_length: int = Field(
        default=MAX_STORAGE_KEY_LENGTH, ge=1, le=MAX_STORAGE_KEY_LENGTH
    )
    max_batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)

    @field_validator("storage_dirname")
    @classmethod
    def validate_dirname(cls, v: str) -> str:
        """Storage directory must be a single path component."""
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"Invalid storage directory name: {v!r}")
        return v

    @field_validator("record_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Record extension must look like '.ext'."""
        if len(v) < 2 or not v.startswith(".") or "/" in v or "\\" in v:
            raise ValueError(f"Invalid record extension: {v!r}")
        return v

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Create StorageConfig from environment overrides.

        Returns:
            Populated StorageConfig instance.
        """
        values: dict[str, str] = {}
        for env_name, field in (
            ("SECURE_STORAGE_DIRNAME", "storage_dirname"),
            ("SECURE_STORAGE_EXTENSION", "record_extension"),
            ("SECURE_STORAGE_SALT", "key_salt"),
        ):
            raw = os.environ.get(env_name)
            if raw:
                values[field] = raw
        if values:
            logger.debug(
                "Storage config overrides from environment: %s",
                sorted(k for k in values if k != "key_salt"),
            )
        return cls(**values)
