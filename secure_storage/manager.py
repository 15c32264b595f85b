"""
SecureStorageManager — encrypted key-value records on the local filesystem.

Provides the record store used by the application:
- ``store(key, value)`` — encrypt and persist a secret (overwrite)
- ``retrieve(key)`` — decrypt and return a secret, ``None`` when missing
- ``remove(key)`` / ``exists(key)`` — delete and check records
- ``list_keys()`` / ``clear_all()`` — enumerate and wipe the store
- ``store_batch(items)`` / ``retrieve_batch(keys)`` — bounded batches

On-disk layout::

    <app_data_dir>/secure_storage/<key>.enc

Security Note:
    Never log plaintext or ciphertext values. Only log key names, counts
    and operations. The master key lives only in this object.
"""
import os
import shutil
import logging
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path

from .config import StorageConfig
from .crypto import derive_master_key, encrypt_value, decrypt_record
from .exceptions import (
    EncryptionFailed,
    StorageIOError,
    ValidationError,
)
from .identity import IdentityProvider
from .record import EncryptedRecord, dump_record, load_record
from .validation import (
    validate_batch_size,
    validate_storage_key,
    validate_storage_value,
)

logger = logging.getLogger("secure_storage")

_TMP_PREFIX = ".tmp-"


class SecureStorageManager:
    """Owner of the master key and the storage directory.

    The manager holds no mutable state after construction, so it can be
    shared freely. Concurrent writers to the same key race at the
    filesystem level and the last write wins.
    """

    def __init__(
        self,
        app_name: str,
        app_data_dir: str | os.PathLike,
        *,
        identity_provider: IdentityProvider | None = None,
        config: StorageConfig | None = None,
    ):
        self._config = config or StorageConfig()
        self._storage_dir = Path(app_data_dir) / self._config.storage_dirname
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StorageIOError(
                f"IO error: cannot create storage directory: {err}"
            ) from err
        self._master_key = derive_master_key(
            app_name, identity_provider, salt=self._config.key_salt,
        )
        logger.info(
            "Secure storage ready for app=%s at %s", app_name, self._storage_dir,
        )

    def __repr__(self) -> str:
        return f"<SecureStorageManager dir={str(self._storage_dir)!r}>"

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    @property
    def config(self) -> StorageConfig:
        return self._config

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_key(self, key: str) -> None:
        validate_storage_key(key, self._config.max_key_length)

    def _record_path(self, key: str) -> Path:
        return self._storage_dir / f"{key}{self._config.record_extension}"

    def _write_atomic(self, path: Path, data: bytes) -> None:
        """Write ``data`` to a temp file beside ``path`` then rename over it."""
        fd, tmp_name = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=self._storage_dir)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_raw(self, key: str) -> bytes | None:
        try:
            return self._record_path(key).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as err:
            raise StorageIOError(f"IO error: {err}") from err

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    def encrypt(self, value: str) -> EncryptedRecord:
        """Encrypt ``value`` with the master key and a fresh nonce."""
        return encrypt_value(value, self._master_key)

    def decrypt(self, record: EncryptedRecord) -> str:
        """Decrypt ``record`` with the master key."""
        return decrypt_record(record, self._master_key)

    # ------------------------------------------------------------------
    # Record store
    # ------------------------------------------------------------------

    def store(self, key: str, value: str) -> None:
        """Encrypt and persist a secret, replacing any previous record.

        Raises:
            ValidationError: If key or value is invalid.
            EncryptionFailed: If encryption or serialization fails.
            StorageIOError: If the record cannot be written.
        """
        self._validate_key(key)
        validate_storage_value(value, self._config.max_value_length)
        record = self.encrypt(value)
        try:
            payload = dump_record(record)
        except TypeError as err:
            raise EncryptionFailed(
                f"Encryption failed: JSON serialization failed: {err}"
            ) from err
        try:
            self._write_atomic(self._record_path(key), payload)
        except OSError as err:
            raise StorageIOError(f"IO error: {err}") from err
        logger.debug("Secure storage store: key=%s", key)

    def retrieve(self, key: str) -> str | None:
        """Read and decrypt a secret.

        Returns:
            The secret, or None if no record exists for ``key``.

        Raises:
            InvalidFormat: If the record file is malformed.
            DecryptionFailed: If the record does not decrypt.
            StorageIOError: If the record cannot be read.
        """
        self._validate_key(key)
        raw = self._read_raw(key)
        if raw is None:
            return None
        value = self.decrypt(load_record(raw))
        logger.debug("Secure storage retrieve: key=%s", key)
        return value

    def remove(self, key: str) -> bool:
        """Delete a record.

        Returns:
            True if the record existed, False otherwise.
        """
        self._validate_key(key)
        try:
            self._record_path(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as err:
            raise StorageIOError(f"IO error: {err}") from err
        logger.debug("Secure storage remove: key=%s", key)
        return True

    def exists(self, key: str) -> bool:
        """Check whether a record exists, without decrypting it."""
        self._validate_key(key)
        return os.path.isfile(self._record_path(key))

    def list_keys(self) -> list[str]:
        """List stored keys, sorted.

        Files that do not follow the record naming pattern are skipped.
        An unreadable storage directory yields an empty list.
        """
        ext = self._config.record_extension
        keys: list[str] = []
        try:
            entries = list(os.scandir(self._storage_dir))
        except OSError as err:
            logger.warning(
                "Secure storage directory %s unreadable, listing no keys: %s",
                self._storage_dir, err,
            )
            return keys
        for entry in entries:
            name = entry.name
            if not name.endswith(ext) or not entry.is_file():
                continue
            key = name[:-len(ext)]
            if key:
                keys.append(key)
        return sorted(keys)

    def clear_all(self) -> None:
        """Remove every record by recreating an empty storage directory."""
        try:
            if self._storage_dir.exists():
                shutil.rmtree(self._storage_dir)
            self._storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StorageIOError(f"IO error: {err}") from err
        logger.info("Secure storage cleared: %s", self._storage_dir)

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def store_batch(self, items: Sequence[tuple[str, str]]) -> None:
        """Store several secrets as one all-or-nothing unit.

        Every key and value is validated before anything is written. If a
        write fails part way, records touched by the batch are restored to
        their previous content (or removed) and the original error is
        raised.

        Raises:
            BatchTooLarge: More than ``max_batch_size`` items.
            ValidationError: Any key or value is invalid; nothing is written.
        """
        items = list(items)
        validate_batch_size(items, self._config.max_batch_size)
        for key, value in items:
            self._validate_key(key)
            validate_storage_value(value, self._config.max_value_length)

        previous: list[tuple[str, bytes | None]] = []
        try:
            for key, value in items:
                previous.append((key, self._read_raw(key)))
                self.store(key, value)
        except Exception:
            self._restore(reversed(previous))
            raise
        logger.debug("Secure storage store_batch: %d item(s)", len(items))

    def _restore(self, snapshot: Iterable[tuple[str, bytes | None]]) -> None:
        for key, raw in snapshot:
            path = self._record_path(key)
            try:
                if raw is None:
                    path.unlink(missing_ok=True)
                else:
                    self._write_atomic(path, raw)
            except OSError as err:
                logger.error(
                    "Secure storage rollback failed for key=%s: %s", key, err,
                )

    def retrieve_batch(self, keys: Sequence[str]) -> dict[str, str | None]:
        """Retrieve several secrets.

        Returns:
            Mapping of key to secret (None for missing keys).
        """
        keys = list(keys)
        validate_batch_size(keys, self._config.max_batch_size)
        for key in keys:
            self._validate_key(key)
        return {key: self.retrieve(key) for key in keys}

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            return self.exists(key)
        except ValidationError:
            return False
