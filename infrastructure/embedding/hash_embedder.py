"""Deterministic embedder built from hashed word vectors."""
from __future__ import annotations

import hashlib
from typing import Sequence

import numpy as np

from domain.interfaces import Embedder
from infrastructure.embedding.pooling import l2_normalize, mean_pool


class HashEmbedder(Embedder):
    """Offline embedder useful for demos and tests.

    Every lowercased word is mapped to a vector derived from its SHA-256
    digest; the word vectors are mean pooled and L2-normalized, so equal
    texts always produce equal embeddings.
    """

    def __init__(self, dimension: int = 32) -> None:
        self._dimension = dimension
        self._model_id = f"hash-words-{dimension}"

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def dimension(self) -> int:
        return self._dimension

    def _word_vector(self, word: str) -> list[float]:
        digest = hashlib.sha256(word.encode("utf-8")).digest()
        return [digest[i % len(digest)] / 255.0 - 0.5 for i in range(self._dimension)]

    def _vectorize(self, text: str) -> list[float]:
        words = [word.lower() for word in text.split()] or [""]
        tokens = np.array([self._word_vector(word) for word in words], dtype=np.float32)
        return l2_normalize(mean_pool(tokens)).tolist()

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        return [self._vectorize(text) for text in texts]


__all__ = ["HashEmbedder"]
