"""Unit tests for blocks.snapshot module."""

import json

import pytest

from src.blocks.snapshot import SnapshotError, SnapshotStore


class TestSnapshotStore:
    """Test cases for SnapshotStore."""

    def test_path_for(self, tmp_path):
        store = SnapshotStore(str(tmp_path))
        assert store.path_for("abc") == str(tmp_path / "abc.json")

    def test_load_missing_returns_none(self, tmp_path):
        assert SnapshotStore(str(tmp_path)).load("nope") is None

    def test_save_then_load(self, tmp_path):
        store = SnapshotStore(str(tmp_path / "nested"))
        store.save("abc", [{'id': '1', 'type': 'divider'}])

        assert store.exists("abc")
        assert store.load("abc") == [{'id': '1', 'type': 'divider'}]

    def test_load_accepts_list_envelope(self, tmp_path):
        """A saved API response envelope is read through its results."""
        (tmp_path / "abc.json").write_text(json.dumps({'results': [{'id': '1'}], 'has_more': False}))

        assert SnapshotStore(str(tmp_path)).load("abc") == [{'id': '1'}]

    def test_invalid_json_raises(self, tmp_path):
        (tmp_path / "abc.json").write_text("{not json")

        with pytest.raises(SnapshotError) as exc_info:
            SnapshotStore(str(tmp_path)).load("abc")

        assert exc_info.value.path.endswith("abc.json")

    def test_wrong_shape_raises(self, tmp_path):
        (tmp_path / "abc.json").write_text(json.dumps({'object': 'block'}))

        with pytest.raises(SnapshotError):
            SnapshotStore(str(tmp_path)).load("abc")
