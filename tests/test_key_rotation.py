"""
Tests for master key rotation between machine identities.
"""
import pytest

from secure_storage.exceptions import AuthenticationFailed
from secure_storage.identity import StaticIdentityProvider
from secure_storage.key_rotation import rotate_master_key
from secure_storage.manager import SecureStorageManager


def _manager(path, identity: str) -> SecureStorageManager:
    return SecureStorageManager(
        "ryu", path, identity_provider=StaticIdentityProvider(identity),
    )


@pytest.fixture
def source(tmp_path):
    return _manager(tmp_path, "old-hostalice")


@pytest.fixture
def target(tmp_path):
    return _manager(tmp_path, "new-hostalice")


class TestRotateMasterKey:
    """Tests for rotate_master_key."""

    def test_rotates_in_place(self, source, target):
        """Test records move to the new key in the same directory."""
        source.store_batch([("a", "1"), ("b", "2"), ("c", "3")])
        stats = rotate_master_key(source, target)
        assert stats == {"total": 3, "rotated": 3, "errors": 0, "skipped": 0}
        assert target.retrieve_batch(["a", "b", "c"]) == {
            "a": "1", "b": "2", "c": "3",
        }
        with pytest.raises(AuthenticationFailed):
            source.retrieve("a")

    def test_second_run_touches_nothing(self, source, target):
        """Test already rotated records are reported as errors, not damaged."""
        source.store("a", "1")
        rotate_master_key(source, target)
        stats = rotate_master_key(source, target)
        assert stats == {"total": 1, "rotated": 0, "errors": 1, "skipped": 0}
        assert target.retrieve("a") == "1"

    def test_batches(self, source, target):
        """Test records are processed across several batches."""
        source.store_batch([(f"k{i}", str(i)) for i in range(5)])
        stats = rotate_master_key(source, target, batch_size=2)
        assert stats["total"] == 5
        assert stats["rotated"] == 5

    def test_into_other_directory(self, source, tmp_path):
        """Test rotation into a separate storage location."""
        other = _manager(tmp_path / "elsewhere", "new-hostalice")
        source.store("token", "secret123")
        rotate_master_key(source, other)
        assert other.retrieve("token") == "secret123"
        assert source.retrieve("token") == "secret123"

    def test_bad_record_is_counted(self, source, target):
        """Test one broken record does not stop the rotation."""
        source.store("good", "1")
        (source.storage_dir / "bad.enc").write_text("garbage")
        stats = rotate_master_key(source, target)
        assert stats == {"total": 2, "rotated": 1, "errors": 1, "skipped": 0}

    def test_vanished_record_is_skipped(self, source, target, monkeypatch):
        """Test a record removed after listing counts as skipped."""
        source.store("gone", "1")
        monkeypatch.setattr(source, "list_keys", lambda: ["gone", "never"])
        stats = rotate_master_key(source, target)
        assert stats["skipped"] == 1
        assert stats["rotated"] == 1

    def test_empty_store(self, source, target):
        """Test rotating an empty store is a no-op."""
        assert rotate_master_key(source, target) == {
            "total": 0, "rotated": 0, "errors": 0, "skipped": 0,
        }

    def test_invalid_batch_size(self, source, target):
        """Test batch_size must be positive."""
        with pytest.raises(ValueError):
            rotate_master_key(source, target, batch_size=0)
