"""
Tests for progress document storage.
"""

from dispatch_sim.state.store import JsonFileStore, MemoryStore, ProgressStore


class TestJsonFileStore:
    """Tests for file-backed storage."""

    def test_missing_document(self, tmp_path):
        assert JsonFileStore(tmp_path).read("absent") is None

    def test_write_then_read(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.write("doc", '{"a": 1}')
        assert store.read("doc") == '{"a": 1}'
        assert (tmp_path / "doc.json").exists()

    def test_backup_on_overwrite(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.write("doc", "first")
        store.write("doc", "second")
        assert store.read("doc") == "second"
        assert (tmp_path / "doc.json.bak").read_text(encoding="utf-8") == "first"

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.write("doc", "x")
        assert store.delete("doc")
        assert store.read("doc") is None
        assert not store.delete("doc")

    def test_creates_directory(self, tmp_path):
        JsonFileStore(tmp_path / "nested" / "saves")
        assert (tmp_path / "nested" / "saves").is_dir()

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(JsonFileStore(tmp_path), ProgressStore)


class TestMemoryStore:
    """Tests for in-memory storage."""

    def test_round_trip_and_counter(self):
        store = MemoryStore()
        store.write("doc", "x")
        store.write("doc", "y")
        assert store.read("doc") == "y"
        assert store.writes == 2

    def test_seeded(self):
        assert MemoryStore({"doc": "seed"}).read("doc") == "seed"

    def test_delete_and_clear(self):
        store = MemoryStore({"a": "1", "b": "2"})
        assert store.delete("a")
        assert not store.delete("a")
        store.clear()
        assert store.read("b") is None

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStore(), ProgressStore)


class TestUndecodableFiles:
    """Tests for save files that are not valid UTF-8."""

    def test_read_returns_none(self, tmp_path):
        (tmp_path / "doc.json").write_bytes(b"\xff\xfe{bad")
        assert JsonFileStore(tmp_path).read("doc") is None

    def test_backup_copies_bytes(self, tmp_path):
        """Overwriting an undecodable file keeps it byte for byte as the backup."""
        (tmp_path / "doc.json").write_bytes(b"\xff\xfe{bad")
        store = JsonFileStore(tmp_path)
        store.write("doc", "{}")
        assert store.read("doc") == "{}"
        assert (tmp_path / "doc.json.bak").read_bytes() == b"\xff\xfe{bad"
