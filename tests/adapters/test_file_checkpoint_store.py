"""Tests for FileCheckpointStore."""

import os
from unittest.mock import patch

import pytest

from p4jira.adapters.checkpoint import FileCheckpointStore
from p4jira.core.ports.checkpoint_store import CheckpointError


class TestRead:
    """Tests for reading the checkpoint."""

    def test_missing_file(self, tmp_path):
        assert FileCheckpointStore(tmp_path / "ckpt").read() is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "ckpt"
        path.write_text("  \n")
        assert FileCheckpointStore(path).read() is None

    def test_value_with_whitespace(self, tmp_path):
        path = tmp_path / "ckpt"
        path.write_text("1234\n")
        assert FileCheckpointStore(path).read() == 1234

    @pytest.mark.parametrize("content", ["abc", "12.5", "-3"])
    def test_garbage_is_an_error(self, tmp_path, content):
        path = tmp_path / "ckpt"
        path.write_text(content)

        with pytest.raises(CheckpointError):
            FileCheckpointStore(path).read()


class TestWrite:
    """Tests for writing the checkpoint."""

    def test_round_trip_and_overwrite(self, tmp_path):
        store = FileCheckpointStore(tmp_path / "ckpt")

        store.write(10)
        store.write(11)

        assert store.read() == 11
        assert (tmp_path / "ckpt").read_text() == "11\n"

    def test_creates_parent_directories(self, tmp_path):
        store = FileCheckpointStore(tmp_path / "state" / "p4jira" / "ckpt")
        store.write(5)
        assert store.read() == 5

    def test_no_temp_files_left(self, tmp_path):
        FileCheckpointStore(tmp_path / "ckpt").write(5)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ckpt"]

    def test_failed_replace_keeps_old_value(self, tmp_path):
        store = FileCheckpointStore(tmp_path / "ckpt")
        store.write(7)

        with patch("p4jira.adapters.checkpoint.file_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(CheckpointError, match="disk full"):
                store.write(8)

        assert store.read() == 7
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ckpt"]

    def test_accepts_string_path(self, tmp_path):
        store = FileCheckpointStore(os.fspath(tmp_path / "ckpt"))
        store.write(3)
        assert store.read() == 3
