"""
Unit tests for client.storage module.
Tests the on-device key/value store and its todo list helpers.
"""
import json

from app.client.storage import TODOS_KEY, LocalStorage


class TestLocalStorage:

    def test_missing_file_loads_empty(self, tmp_path):
        storage = LocalStorage(tmp_path / "storage.json")
        assert storage.get_item(TODOS_KEY) is None
        assert storage.load_todos() == []

    def test_todos_stored_under_fixed_key(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = LocalStorage(path)
        storage.save_todos([{"id": "1", "text": "buy milk"}])

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert list(raw) == [TODOS_KEY]
        assert json.loads(raw[TODOS_KEY]) == [{"id": "1", "text": "buy milk"}]
        assert storage.load_todos() == [{"id": "1", "text": "buy milk"}]

    def test_other_keys_survive_todo_writes(self, tmp_path):
        storage = LocalStorage(tmp_path / "storage.json")
        storage.set_item("theme", "dark")
        storage.save_todos([])
        assert storage.get_item("theme") == "dark"

    def test_non_array_value_loads_empty(self, tmp_path):
        storage = LocalStorage(tmp_path / "storage.json")
        storage.set_item(TODOS_KEY, json.dumps({"not": "a list"}))
        assert storage.load_todos() == []

    def test_malformed_value_loads_empty(self, tmp_path):
        storage = LocalStorage(tmp_path / "storage.json")
        storage.set_item(TODOS_KEY, "{broken")
        assert storage.load_todos() == []

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("not json", encoding="utf-8")
        assert LocalStorage(path).load_todos() == []

    def test_unicode_round_trip(self, tmp_path):
        storage = LocalStorage(tmp_path / "storage.json")
        storage.save_todos([{"id": "1", "text": "acheter du pain été"}])
        assert storage.load_todos()[0]["text"] == "acheter du pain été"
