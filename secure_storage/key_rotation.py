"""
Master Key Rotation — re-encryption of all records under a new identity.

The master key depends on the machine identity, so a host or user rename
makes every record undecryptable. Before such a change, records can be
re-encrypted from a manager holding the current key (``source``) into a
manager holding the future key (``target``). Both managers may point at the
same storage directory.

The operation is resumable: records already rotated no longer decrypt under
the source key and are counted as errors on a second run, without touching
them.

Security Note:
    Plaintext exists in memory only during re-encryption of each record.
    Never log plaintext or ciphertext values.
"""
import logging

from .exceptions import SecureStorageError
from .manager import SecureStorageManager

logger = logging.getLogger("secure_storage")


def rotate_master_key(
    source: SecureStorageManager,
    target: SecureStorageManager,
    batch_size: int = 100,
) -> dict:
    """Re-encrypt every record readable by ``source`` into ``target``.

    Args:
        source: Manager holding the key the records are encrypted with.
        target: Manager holding the key to re-encrypt with.
        batch_size: Number of records processed per batch.

    Returns:
        Stats dict with keys: total, rotated, errors, skipped.

    Raises:
        ValueError: If batch_size is not positive.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    keys = source.list_keys()
    stats = {"total": 0, "rotated": 0, "errors": 0, "skipped": 0}

    logger.info(
        "Starting key rotation of %d record(s) from %s to %s (batch_size=%d)",
        len(keys), source.storage_dir, target.storage_dir, batch_size,
    )

    for offset in range(0, len(keys), batch_size):
        batch = keys[offset:offset + batch_size]
        batch_num = (offset // batch_size) + 1
        logger.info("Processing batch %d (%d records)", batch_num, len(batch))

        for key in batch:
            stats["total"] += 1
            try:
                value = source.retrieve(key)
                if value is None:
                    # removed between listing and reading
                    stats["skipped"] += 1
                    continue
                target.store(key, value)
                stats["rotated"] += 1
            except SecureStorageError as err:
                logger.error("Error rotating record key=%s: %s", key, err)
                stats["errors"] += 1

    logger.info("Key rotation complete: %s", stats)
    return stats
