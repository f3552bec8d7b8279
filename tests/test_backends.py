"""Tests for notekeeper.backends: memory, JSON file and Redis key-value stores."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from notekeeper.backends import JsonFileKeyValueStore, MemoryKeyValueStore, RedisKeyValueStore
from notekeeper.note_store import NOTES_KEY, NoteStore, default_notes


class TestMemoryKeyValueStore:
    def test_get_missing(self) -> None:
        assert MemoryKeyValueStore().get("nope") is None

    def test_set_counts_writes(self) -> None:
        kv = MemoryKeyValueStore()
        kv.set("a", "1")
        kv.set("a", "2")
        assert kv.get("a") == "2"
        assert kv.writes == 2

    def test_initial_data_is_copied(self) -> None:
        initial = {"a": "1"}
        kv = MemoryKeyValueStore(initial)
        kv.set("b", "2")
        assert "b" not in initial


class TestJsonFileKeyValueStore:
    def test_missing_file_reads_as_empty(self, tmp_path: Path) -> None:
        kv = JsonFileKeyValueStore(tmp_path / "store.json")
        assert kv.get("anything") is None

    def test_keys_share_one_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        kv = JsonFileKeyValueStore(path)
        kv.set("notes-data", "{}")
        kv.set("templates-data", "[]")

        assert json.loads(path.read_text(encoding="utf-8")) == {
            "notes-data": "{}",
            "templates-data": "[]",
        }
        assert JsonFileKeyValueStore(path).get("templates-data") == "[]"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        kv = JsonFileKeyValueStore(tmp_path / "store.json")
        kv.set("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_non_object_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            JsonFileKeyValueStore(path).get("k")

    def test_corrupt_file_makes_store_fall_back(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("not json at all", encoding="utf-8")
        store = NoteStore(JsonFileKeyValueStore(path))
        assert store.snapshot() == default_notes()

    def test_corrupt_file_is_replaced_on_write(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("not json at all", encoding="utf-8")

        store = NoteStore(JsonFileKeyValueStore(path))
        assert store.add_category("X") is True
        assert store.save_to_storage().ok is True

        reopened = NoteStore(JsonFileKeyValueStore(path))
        assert "X" in reopened.list_category_names()
        assert (tmp_path / "store.json.corrupt").read_text(encoding="utf-8") == "not json at all"

    def test_non_object_file_is_replaced_on_write(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        kv = JsonFileKeyValueStore(path)
        kv.set("k", "v")
        assert kv.get("k") == "v"

    def test_notes_survive_restart(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        first = NoteStore(JsonFileKeyValueStore(path))
        note = first.add("Linux", "Cmd", "ls -la")

        second = NoteStore(JsonFileKeyValueStore(path))
        assert second.get("Linux", note.id) == note
        assert second.snapshot() == first.snapshot()


class TestRedisKeyValueStore:
    def _make(self, prefix: str = "nk:") -> tuple[RedisKeyValueStore, MagicMock]:
        client = MagicMock()
        with patch("notekeeper.backends.redis.Redis.from_url", return_value=client) as from_url:
            kv = RedisKeyValueStore("redis://localhost:6379", prefix=prefix)
        from_url.assert_called_once_with("redis://localhost:6379", decode_responses=True)
        return kv, client

    def test_get_uses_prefix(self) -> None:
        kv, client = self._make()
        client.get.return_value = "{}"
        assert kv.get(NOTES_KEY) == "{}"
        client.get.assert_called_once_with(f"nk:{NOTES_KEY}")

    def test_set_uses_prefix(self) -> None:
        kv, client = self._make(prefix="")
        kv.set("templates-data", "[]")
        client.set.assert_called_once_with("templates-data", "[]")

    def test_connection_error_falls_back(self) -> None:
        kv, client = self._make()
        client.get.side_effect = ConnectionError("refused")
        store = NoteStore(kv)
        assert store.snapshot() == default_notes()

    def test_close(self) -> None:
        kv, client = self._make()
        kv.close()
        client.close.assert_called_once()
