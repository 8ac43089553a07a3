"""Tests for storage backends."""

from pathlib import Path

import pytest

from dashban.repositories import FileStorage, MemoryStorage, StorageError


class TestMemoryStorage:
    def test_set_get_remove(self):
        storage = MemoryStorage()
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"
        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_remove_missing_is_noop(self):
        MemoryStorage().remove_item("missing")


class TestFileStorage:
    """Tests for the one-file-per-key backend."""

    def test_round_trip(self, tmp_path: Path):
        storage = FileStorage(tmp_path / "state")
        storage.set_item("cardOrder_octo_board", '{"backlog":["1"]}')

        assert (tmp_path / "state" / "cardOrder_octo_board.json").exists()
        assert storage.get_item("cardOrder_octo_board") == '{"backlog":["1"]}'

    def test_missing_key_returns_none(self, tmp_path: Path):
        assert FileStorage(tmp_path).get_item("nope") is None

    def test_key_cannot_escape_root(self, tmp_path: Path):
        """Path separators in keys are replaced."""
        root = tmp_path / "state"
        storage = FileStorage(root)
        storage.set_item("cardOrder_../../evil", "x")

        written = list(root.iterdir())
        assert len(written) == 1
        assert written[0].parent == root
        assert storage.get_item("cardOrder_../../evil") == "x"

    def test_remove_missing_is_noop(self, tmp_path: Path):
        FileStorage(tmp_path).remove_item("nope")

    def test_write_failure_raises_storage_error(self, tmp_path: Path):
        """A root that is a file cannot hold values."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = FileStorage(blocker)

        with pytest.raises(StorageError):
            storage.set_item("k", "v")
