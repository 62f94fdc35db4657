import hashlib
import json
import tempfile
import unittest
from pathlib import Path

from infrastructure.storage.json_embedding_cache import JsonEmbeddingCache

LOGGER = "infrastructure.storage.json_embedding_cache"


class TestCacheKey(unittest.TestCase):
    def test_key_is_sha256_of_exact_text(self):
        cache = JsonEmbeddingCache()
        expected = hashlib.sha256("hello world".encode("utf-8")).hexdigest()
        self.assertEqual(cache.key("hello world"), expected)
        self.assertEqual(JsonEmbeddingCache("other.json").key("hello world"), expected)

    def test_one_character_changes_the_key(self):
        cache = JsonEmbeddingCache()
        self.assertNotEqual(cache.key("hello world"), cache.key("hello world!"))
        self.assertNotEqual(cache.key("Hello world"), cache.key("hello world"))


class TestCachePersistence(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.path = self.root / "cache" / "embeddings.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_is_an_empty_cache(self):
        cache = JsonEmbeddingCache(self.path)
        self.assertEqual(cache.load(), {})
        self.assertEqual(len(cache), 0)

    def test_corrupt_file_logs_warning_and_starts_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        cache = JsonEmbeddingCache(self.path)
        with self.assertLogs(LOGGER, level="WARNING"):
            self.assertEqual(cache.load(), {})

    def test_non_object_file_logs_warning(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2, 3]", encoding="utf-8")
        with self.assertLogs(LOGGER, level="WARNING"):
            self.assertEqual(JsonEmbeddingCache(self.path).load(), {})

    def test_invalid_entries_are_dropped(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"good": [0.5, 1], "bad": "nope"}), encoding="utf-8")
        cache = JsonEmbeddingCache(self.path)
        with self.assertLogs(LOGGER, level="WARNING"):
            entries = cache.load()
        self.assertEqual(entries, {"good": [0.5, 1.0]})

    def test_save_and_reload(self):
        cache = JsonEmbeddingCache(self.path)
        cache.load()
        key = cache.key("async await")
        cache.put(key, [0.6, 0.8])

        self.assertTrue(cache.save())

        reloaded = JsonEmbeddingCache(self.path)
        self.assertEqual(reloaded.load(), {key: [0.6, 0.8]})
        self.assertIn(key, reloaded)
        self.assertEqual(reloaded.get(key), [0.6, 0.8])
        self.assertEqual([p.name for p in self.path.parent.iterdir()], [self.path.name])

    def test_save_with_explicit_entries(self):
        cache = JsonEmbeddingCache(self.path)
        self.assertTrue(cache.save({"k": (1.0, 0.0)}))
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"k": [1.0, 0.0]})

    def test_save_failure_is_reported_not_raised(self):
        blocked = self.root / "occupied"
        blocked.mkdir()
        cache = JsonEmbeddingCache(blocked)
        cache.put("k", [1.0])
        with self.assertLogs(LOGGER, level="WARNING"):
            self.assertFalse(cache.save())
        self.assertEqual([p.name for p in self.root.iterdir()], ["occupied"])


if __name__ == "__main__":
    unittest.main()
