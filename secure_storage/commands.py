"""
Boundary operations for the host application.

Each function takes and returns plain strings or simple aggregates so it can
be exposed across any UI/process boundary. Inputs are validated before the
storage context is consulted; failures propagate once, as
``SecureStorageError`` subclasses.
"""
import logging
from collections.abc import Sequence

from .config import (
    MAX_BATCH_SIZE,
    MAX_STORAGE_KEY_LENGTH,
    MAX_STORAGE_VALUE_LENGTH,
)
from .context import StorageContext, default_context
from .validation import (
    validate_batch_size,
    validate_storage_key,
    validate_storage_value,
)

logger = logging.getLogger("secure_storage")


def _ctx(context: StorageContext | None) -> StorageContext:
    return context if context is not None else default_context


def secure_storage_store(
    key: str, value: str, *, context: StorageContext | None = None
) -> None:
    validate_storage_key(key, MAX_STORAGE_KEY_LENGTH)
    validate_storage_value(value, MAX_STORAGE_VALUE_LENGTH)
    _ctx(context).get().store(key, value)


def secure_storage_retrieve(
    key: str, *, context: StorageContext | None = None
) -> str | None:
    validate_storage_key(key, MAX_STORAGE_KEY_LENGTH)
    return _ctx(context).get().retrieve(key)


def secure_storage_remove(
    key: str, *, context: StorageContext | None = None
) -> bool:
    """Remove an encrypted secret; returns whether it existed."""
    validate_storage_key(key, MAX_STORAGE_KEY_LENGTH)
    return _ctx(context).get().remove(key)


def secure_storage_exists(
    key: str, *, context: StorageContext | None = None
) -> bool:
    validate_storage_key(key, MAX_STORAGE_KEY_LENGTH)
    return _ctx(context).get().exists(key)


def secure_storage_store_batch(
    items: Sequence[tuple[str, str]],
    *,
    context: StorageContext | None = None,
) -> None:
    """Store up to 100 (key, value) pairs; nothing is kept if any item fails."""
    validate_batch_size(items, MAX_BATCH_SIZE)
    pairs = [(key, value) for key, value in items]
    for key, value in pairs:
        validate_storage_key(key, MAX_STORAGE_KEY_LENGTH)
        validate_storage_value(value, MAX_STORAGE_VALUE_LENGTH)
    _ctx(context).get().store_batch(pairs)


def secure_storage_retrieve_batch(
    keys: Sequence[str],
    *,
    context: StorageContext | None = None,
) -> dict[str, str | None]:
    """Retrieve up to 100 secrets as a key -> optional value mapping."""
    validate_batch_size(keys, MAX_BATCH_SIZE)
    for key in keys:
        validate_storage_key(key, MAX_STORAGE_KEY_LENGTH)
    return _ctx(context).get().retrieve_batch(list(keys))


def secure_storage_list_keys(
    *, context: StorageContext | None = None
) -> list[str]:
    return _ctx(context).get().list_keys()


def secure_storage_clear_all(*, context: StorageContext | None = None) -> None:
    """Irreversibly delete every stored secret.

    Confirmation is the caller's responsibility.
    """
    manager = _ctx(context).get()
    manager.clear_all()
    logger.info("Secure storage cleared through boundary call")
