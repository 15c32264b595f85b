"""
Named secrets — a fixed storage key wrapped for application features.

Example::

    gemini_api_key = NamedSecret("gemini_api_key")
    gemini_api_key.set(user_input)   # empty input removes the secret
    if gemini_api_key.is_set():
        client = Client(api_key=gemini_api_key.get())

Reads degrade to "no secret" on storage errors (logged); writes re-raise.
"""
import logging

from .commands import (
    secure_storage_exists,
    secure_storage_remove,
    secure_storage_retrieve,
    secure_storage_store,
)
from .context import StorageContext
from .exceptions import SecureStorageError
from .validation import validate_storage_key

logger = logging.getLogger("secure_storage")


class NamedSecret:
    """Accessor for one well-known secret."""

    def __init__(self, name: str, context: StorageContext | None = None):
        validate_storage_key(name)
        self.name = name
        self._context = context

    def __repr__(self) -> str:
        return f"<NamedSecret {self.name!r}>"

    def get(self) -> str | None:
        """Return the secret, or None when missing or unreadable."""
        try:
            return secure_storage_retrieve(self.name, context=self._context)
        except SecureStorageError as err:
            logger.error("Failed to load secret %s: %s", self.name, err)
            return None

    def set(self, value: str) -> None:
        """Store ``value``; an empty value removes the secret instead."""
        if not value:
            self.remove()
            return
        try:
            secure_storage_store(self.name, value, context=self._context)
        except SecureStorageError as err:
            logger.error("Failed to save secret %s: %s", self.name, err)
            raise

    def remove(self) -> None:
        try:
            secure_storage_remove(self.name, context=self._context)
        except SecureStorageError as err:
            logger.error("Failed to remove secret %s: %s", self.name, err)
            raise

    def is_set(self) -> bool:
        try:
            return secure_storage_exists(self.name, context=self._context)
        except SecureStorageError as err:
            logger.error("Failed to check secret %s: %s", self.name, err)
            return False
