"""
Tests for active index persistence.
"""

import json

from paywallet.wallet.storage import ACTIVE_INDEX_KEY, JsonFileIndexStore, MemoryIndexStore


class TestMemoryIndexStore:
    def test_roundtrip(self):
        store = MemoryIndexStore()
        assert store.get() is None
        store.set(3)
        assert store.get() == 3
        store.delete()
        assert store.get() is None


class TestJsonFileIndexStore:
    def test_missing_file(self, tmp_path):
        assert JsonFileIndexStore(tmp_path / "state.json").get() is None

    def test_set_creates_parent(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        store = JsonFileIndexStore(path)
        store.set(7)
        assert json.loads(path.read_text()) == {ACTIVE_INDEX_KEY: 7}
        assert JsonFileIndexStore(path).get() == 7

    def test_delete(self, tmp_path):
        store = JsonFileIndexStore(tmp_path / "state.json")
        store.set(2)
        store.delete()
        assert store.get() is None
        store.delete()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        assert JsonFileIndexStore(path).get() is None

    def test_binary_garbage(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        assert JsonFileIndexStore(path).get() is None

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({ACTIVE_INDEX_KEY: "3"}))
        assert JsonFileIndexStore(path).get() is None
        path.write_text(json.dumps([3]))
        assert JsonFileIndexStore(path).get() is None
