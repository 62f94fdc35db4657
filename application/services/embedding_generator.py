"""Batched embedding generation backed by a persistent cache."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from domain.interfaces import Embedder, EmbeddingCache

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5


@dataclass(slots=True)
class EmbeddingProgress:
    requested: int = 0
    cache_hits: int = 0
    embedded: int = 0
    failed: int = 0

    @property
    def resolved(self) -> int:
        return self.cache_hits + self.embedded

    @property
    def percentage(self) -> int:
        if not self.requested:
            return 0
        return round(self.resolved / self.requested * 100)


class EmbeddingGenerator:
    """Resolve embeddings through the cache, invoking the model once per batch.

    ``embedder`` may be ``None`` when no model could be loaded; cached vectors
    are still served and everything else resolves to ``None``.
    """

    def __init__(
        self,
        embedder: Embedder | None,
        cache: EmbeddingCache,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._embedder = embedder
        self._cache = cache
        self.batch_size = batch_size
        self.progress = EmbeddingProgress()

    @property
    def embedder(self) -> Embedder | None:
        return self._embedder

    @property
    def cache(self) -> EmbeddingCache:
        return self._cache

    def embed_texts(self, texts: Sequence[str]) -> list[list[float] | None]:
        """Embed ``texts`` in sequential batches of ``batch_size``."""

        results: list[list[float] | None] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            logger.debug(
                "Processing chunks %d-%d of %d",
                start + 1,
                min(start + self.batch_size, len(texts)),
                len(texts),
            )
            results.extend(self.embed_batch(batch))
        return results

    def embed_batch(self, texts: Sequence[str]) -> list[list[float] | None]:
        """Return one vector (or ``None``) per text, preserving input order."""

        results: list[list[float] | None] = [None] * len(texts)
        pending: dict[str, list[int]] = {}
        keys: dict[str, str] = {}
        for position, text in enumerate(texts):
            key = self._cache.key(text)
            cached = self._cache.get(key)
            if cached is not None:
                results[position] = list(cached)
                self.progress.cache_hits += 1
            else:
                pending.setdefault(text, []).append(position)
                keys[text] = key
        self.progress.requested += len(texts)

        if not pending:
            return results
        uncached_count = sum(len(positions) for positions in pending.values())
        if self._embedder is None:
            self.progress.failed += uncached_count
            return results

        uncached = list(pending)
        try:
            vectors = self._embedder.embed_texts(uncached)
            if len(vectors) != len(uncached):
                raise ValueError(
                    f"Embedder returned {len(vectors)} vectors for {len(uncached)} texts"
                )
        except Exception as exc:
            logger.error("Error generating embeddings for %d texts: %s", len(uncached), exc)
            self.progress.failed += uncached_count
            return results

        for text, vector in zip(uncached, vectors):
            stored = [float(value) for value in vector]
            self._cache.put(keys[text], stored)
            for position in pending[text]:
                results[position] = list(stored)
        self.progress.embedded += uncached_count
        return results


__all__ = ["EmbeddingGenerator", "EmbeddingProgress", "DEFAULT_BATCH_SIZE"]
