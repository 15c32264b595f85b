"""Shared fixtures for secure storage tests."""
import pytest

from secure_storage.context import StorageContext
from secure_storage.identity import StaticIdentityProvider
from secure_storage.manager import SecureStorageManager

APP_NAME = "ryu-test"


@pytest.fixture
def identity():
    """Deterministic machine identity."""
    return StaticIdentityProvider("test-host" + "test-user")


@pytest.fixture
def app_data_dir(tmp_path):
    return tmp_path / "app-data"


@pytest.fixture
def manager(app_data_dir, identity):
    """Manager writing under a temporary app data directory."""
    return SecureStorageManager(
        APP_NAME, app_data_dir, identity_provider=identity,
    )


@pytest.fixture
def context(app_data_dir, identity):
    """Initialized storage context."""
    ctx = StorageContext()
    ctx.init(APP_NAME, app_data_dir, identity_provider=identity)
    return ctx
