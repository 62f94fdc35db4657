import tempfile
import unittest
from pathlib import Path
from typing import Sequence

from application.services.embedding_generator import EmbeddingGenerator
from domain.interfaces import Embedder
from infrastructure.storage.json_embedding_cache import JsonEmbeddingCache


class SpyEmbedder(Embedder):
    """Records every invocation and returns a vector derived from text length."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    @property
    def model_id(self) -> str:
        return "spy"

    @property
    def dimension(self) -> int:
        return 2

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [[float(len(text)), 1.0] for text in texts]


class FailingEmbedder(SpyEmbedder):
    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        raise RuntimeError("model crashed")


class ShortEmbedder(SpyEmbedder):
    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [[1.0, 0.0]]


class TestEmbeddingGenerator(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.cache = JsonEmbeddingCache(Path(self._tmp.name) / "cache.json")
        self.cache.load()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_cache_hit_does_not_invoke_model(self):
        spy = SpyEmbedder()
        self.cache.put(self.cache.key("hello"), [0.6, 0.8])
        generator = EmbeddingGenerator(spy, self.cache)

        self.assertEqual(generator.embed_batch(["hello"]), [[0.6, 0.8]])
        self.assertEqual(spy.calls, [])
        self.assertEqual(generator.progress.cache_hits, 1)

    def test_uncached_texts_go_in_one_call_and_keep_order(self):
        spy = SpyEmbedder()
        self.cache.put(self.cache.key("cached"), [0.0, 1.0])
        generator = EmbeddingGenerator(spy, self.cache)

        results = generator.embed_batch(["a", "cached", "bbb"])

        self.assertEqual(spy.calls, [["a", "bbb"]])
        self.assertEqual(results, [[1.0, 1.0], [0.0, 1.0], [3.0, 1.0]])
        self.assertEqual(self.cache.get(self.cache.key("bbb")), [3.0, 1.0])

    def test_second_call_is_served_from_cache(self):
        spy = SpyEmbedder()
        generator = EmbeddingGenerator(spy, self.cache)
        first = generator.embed_batch(["same text"])
        second = generator.embed_batch(["same text"])

        self.assertEqual(first, second)
        self.assertEqual(len(spy.calls), 1)

    def test_duplicates_within_a_batch_are_embedded_once(self):
        spy = SpyEmbedder()
        generator = EmbeddingGenerator(spy, self.cache)
        results = generator.embed_batch(["dup", "other", "dup"])

        self.assertEqual(spy.calls, [["dup", "other"]])
        self.assertEqual(results[0], results[2])
        self.assertEqual(generator.progress.embedded, 3)

    def test_failure_yields_none_and_leaves_cache_untouched(self):
        failing = FailingEmbedder()
        self.cache.put(self.cache.key("known"), [1.0, 0.0])
        generator = EmbeddingGenerator(failing, self.cache)

        with self.assertLogs("application.services.embedding_generator", level="ERROR"):
            results = generator.embed_batch(["known", "new one", "another"])

        self.assertEqual(results, [[1.0, 0.0], None, None])
        self.assertEqual(len(self.cache), 1)
        self.assertEqual(generator.progress.failed, 2)

    def test_mismatched_result_count_is_a_failure(self):
        generator = EmbeddingGenerator(ShortEmbedder(), self.cache)
        with self.assertLogs("application.services.embedding_generator", level="ERROR"):
            results = generator.embed_batch(["one", "two"])
        self.assertEqual(results, [None, None])
        self.assertEqual(len(self.cache), 0)

    def test_without_model_only_cached_vectors_resolve(self):
        self.cache.put(self.cache.key("known"), [1.0, 0.0])
        generator = EmbeddingGenerator(None, self.cache)
        self.assertEqual(generator.embed_batch(["known", "unknown"]), [[1.0, 0.0], None])

    def test_texts_are_processed_in_fixed_size_batches(self):
        spy = SpyEmbedder()
        generator = EmbeddingGenerator(spy, self.cache, batch_size=5)
        texts = [f"text {i}" for i in range(12)]

        results = generator.embed_texts(texts)

        self.assertEqual([len(call) for call in spy.calls], [5, 5, 2])
        self.assertEqual(len(results), 12)
        self.assertTrue(all(vector is not None for vector in results))
        self.assertEqual(generator.progress.percentage, 100)

    def test_failed_batch_does_not_stop_the_next_one(self):
        class FlakyEmbedder(SpyEmbedder):
            def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
                self.calls.append(list(texts))
                if len(self.calls) == 1:
                    raise RuntimeError("transient")
                return [[1.0, 0.0] for _ in texts]

        generator = EmbeddingGenerator(FlakyEmbedder(), self.cache, batch_size=2)
        with self.assertLogs("application.services.embedding_generator", level="ERROR"):
            results = generator.embed_texts(["a", "b", "c"])
        self.assertEqual(results, [None, None, [1.0, 0.0]])

    def test_batch_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            EmbeddingGenerator(SpyEmbedder(), self.cache, batch_size=0)


if __name__ == "__main__":
    unittest.main()
