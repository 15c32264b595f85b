"""
Tests for StorageConfig and data directory resolution.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from secure_storage.config import (
    KEY_DERIVATION_SALT,
    StorageConfig,
    default_app_data_dir,
)


class TestStorageConfig:
    """Tests for StorageConfig validation."""

    def test_defaults(self):
        """Test default limits and naming."""
        config = StorageConfig()
        assert config.storage_dirname == "secure_storage"
        assert config.record_extension == ".enc"
        assert config.key_salt == KEY_DERIVATION_SALT
        assert config.max_value_length == 8192
        assert config.max_key_length == 255
        assert config.max_batch_size == 100

    @pytest.mark.parametrize("dirname", ["", "a/b", "..", "a\\b"])
    def test_invalid_dirname(self, dirname):
        """Test the storage directory must be one path component."""
        with pytest.raises(ValidationError):
            StorageConfig(storage_dirname=dirname)

    @pytest.mark.parametrize("ext", ["enc", ".", "", "./x"])
    def test_invalid_extension(self, ext):
        """Test the extension must look like '.ext'."""
        with pytest.raises(ValidationError):
            StorageConfig(record_extension=ext)

    def test_limits_cannot_be_raised(self):
        """Test limits can only be tightened."""
        with pytest.raises(ValidationError):
            StorageConfig(max_value_length=8193)
        with pytest.raises(ValidationError):
            StorageConfig(max_batch_size=101)
        assert StorageConfig(max_batch_size=10).max_batch_size == 10

    def test_from_env(self, monkeypatch):
        """Test environment overrides are applied."""
        monkeypatch.setenv("SECURE_STORAGE_DIRNAME", "vault")
        monkeypatch.setenv("SECURE_STORAGE_EXTENSION", ".sec")
        monkeypatch.setenv("SECURE_STORAGE_SALT", "other_scheme_v1")
        config = StorageConfig.from_env()
        assert config.storage_dirname == "vault"
        assert config.record_extension == ".sec"
        assert config.key_salt == "other_scheme_v1"

    def test_from_env_without_overrides(self, monkeypatch):
        """Test an empty environment yields defaults."""
        for name in (
            "SECURE_STORAGE_DIRNAME",
            "SECURE_STORAGE_EXTENSION",
            "SECURE_STORAGE_SALT",
        ):
            monkeypatch.delenv(name, raising=False)
        assert StorageConfig.from_env() == StorageConfig()


class TestAppDataDir:
    """Tests for default_app_data_dir."""

    def test_override(self, monkeypatch, tmp_path):
        """Test SECURE_STORAGE_APP_DATA_DIR wins."""
        monkeypatch.setenv("SECURE_STORAGE_APP_DATA_DIR", str(tmp_path))
        assert default_app_data_dir("ryu") == tmp_path

    def test_ends_with_app_name(self, monkeypatch):
        """Test the platform default is scoped to the application."""
        monkeypatch.delenv("SECURE_STORAGE_APP_DATA_DIR", raising=False)
        path = default_app_data_dir("ryu")
        assert isinstance(path, Path)
        assert path.name == "ryu"
