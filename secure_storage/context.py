"""
Storage context — the single-construction handle for the manager.

The host application initializes one context at startup and every boundary
operation reads the manager from it. A context refuses a second
initialization instead of replacing its manager, and refuses access before
the first one.

Tests build their own ``StorageContext`` instances; the application uses
``default_context`` through ``init_secure_storage`` / ``get_secure_storage``.
"""
import os
import threading

from .config import StorageConfig
from .exceptions import AlreadyInitialized, NotInitialized
from .identity import IdentityProvider
from .manager import SecureStorageManager


class StorageContext:
    """Holds at most one SecureStorageManager for its whole lifetime."""

    def __init__(self):
        self._manager: SecureStorageManager | None = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._manager is not None

    def init(
        self,
        app_name: str,
        app_data_dir: str | os.PathLike,
        *,
        identity_provider: IdentityProvider | None = None,
        config: StorageConfig | None = None,
    ) -> SecureStorageManager:
        """Construct the manager once.

        Returns:
            The newly constructed manager.

        Raises:
            AlreadyInitialized: If this context already holds a manager.
            StorageIOError: If the storage directory cannot be created.
        """
        with self._lock:
            if self._manager is not None:
                raise AlreadyInitialized()
            self._manager = SecureStorageManager(
                app_name,
                app_data_dir,
                identity_provider=identity_provider,
                config=config,
            )
        return self._manager

    def get(self) -> SecureStorageManager:
        """Return the manager.

        Raises:
            NotInitialized: If ``init`` has not completed.
        """
        manager = self._manager
        if manager is None:
            raise NotInitialized()
        return manager

    @property
    def manager(self) -> SecureStorageManager:
        return self.get()


default_context = StorageContext()


def init_secure_storage(
    app_name: str,
    app_data_dir: str | os.PathLike,
    *,
    identity_provider: IdentityProvider | None = None,
    config: StorageConfig | None = None,
) -> SecureStorageManager:
    """Initialize the process-wide default context."""
    return default_context.init(
        app_name,
        app_data_dir,
        identity_provider=identity_provider,
        config=config,
    )


def get_secure_storage() -> SecureStorageManager:
    """Return the manager of the process-wide default context."""
    return default_context.get()
