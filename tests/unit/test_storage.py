"""Unit tests for the local blob stores."""

import json
from pathlib import Path

import pytest

from jot.config import StorageConfig
from jot.storage import create_blob_store
from jot.storage.blob import JSONFileBlobStore, MemoryBlobStore, PersistenceError


class TestMemoryBlobStore:
    """Tests for MemoryBlobStore."""

    def test_get_missing(self) -> None:
        """Test missing keys return None."""
        assert MemoryBlobStore().get("notes") is None

    def test_set_get_returns_copy(self) -> None:
        """Test stored values are isolated from caller mutation."""
        store = MemoryBlobStore()
        value = [{"id": "n1"}]
        store.set("notes", value)
        value.append({"id": "n2"})

        assert store.get("notes") == [{"id": "n1"}]

    def test_delete(self) -> None:
        """Test deleting a key."""
        store = MemoryBlobStore()
        store.set("a", 1)
        store.delete("a")
        store.delete("never")
        assert store.keys() == []

    def test_read_only_raises(self) -> None:
        """Test simulated write failures raise PersistenceError."""
        store = MemoryBlobStore()
        store.set_read_only()
        with pytest.raises(PersistenceError):
            store.set("a", 1)

    def test_unserializable_value(self) -> None:
        """Test non-JSON values are rejected."""
        with pytest.raises(PersistenceError):
            MemoryBlobStore().set("a", object())


class TestJSONFileBlobStore:
    """Tests for JSONFileBlobStore."""

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        """Test values written by one instance are read by another."""
        path = tmp_path / "store.json"
        JSONFileBlobStore(path).set("notes", [{"id": "n1"}])

        assert JSONFileBlobStore(path).get("notes") == [{"id": "n1"}]
        data = json.loads(path.read_text())
        assert data["version"] == 1
        assert data["records"]["notes"] == [{"id": "n1"}]

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """Test the parent directory is created on first write."""
        path = tmp_path / "nested" / "store.json"
        JSONFileBlobStore(path).set("a", 1)
        assert path.exists()
        assert not path.with_suffix(".json.tmp").exists()

    def test_delete(self, tmp_path: Path) -> None:
        """Test deleted keys are gone after reload."""
        path = tmp_path / "store.json"
        store = JSONFileBlobStore(path)
        store.set("a", 1)
        store.set("b", 2)
        store.delete("a")

        reloaded = JSONFileBlobStore(path)
        assert reloaded.get("a") is None
        assert reloaded.get("b") == 2

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        """Test a truncated file is reported instead of being overwritten."""
        path = tmp_path / "store.json"
        original = '{"version": 1, "records": {"notes": [{"id": "n1"}'
        path.write_text(original)

        with pytest.raises(PersistenceError):
            JSONFileBlobStore(path)

        assert path.read_text() == original

    @pytest.mark.parametrize("content", ["[]", '"text"', '{"records": []}'])
    def test_unexpected_layout_raises(self, tmp_path: Path, content: str) -> None:
        """Test valid JSON that is not a record map is rejected."""
        path = tmp_path / "store.json"
        path.write_text(content)

        with pytest.raises(PersistenceError):
            JSONFileBlobStore(path)

    def test_failed_write_keeps_previous_state(self, tmp_path: Path) -> None:
        """Test a failed write raises and leaves earlier data readable."""
        path = tmp_path / "store.json"
        store = JSONFileBlobStore(path)
        store.set("a", 1)

        with pytest.raises(PersistenceError):
            store.set("a", object())

        assert store.get("a") == 1
        assert JSONFileBlobStore(path).get("a") == 1


class TestCreateBlobStore:
    """Tests for create_blob_store factory."""

    def test_default_is_memory(self) -> None:
        """Test no config gives an in-memory store."""
        assert isinstance(create_blob_store(), MemoryBlobStore)

    def test_json_backend(self, tmp_path: Path) -> None:
        """Test the json backend uses the configured path."""
        store = create_blob_store(StorageConfig(backend="json", path=str(tmp_path / "s.json")))
        assert isinstance(store, JSONFileBlobStore)
        assert store.path == tmp_path / "s.json"

    def test_unknown_backend(self) -> None:
        """Test unknown backends are rejected."""
        with pytest.raises(ValueError):
            create_blob_store(StorageConfig(backend="sqlite"))
