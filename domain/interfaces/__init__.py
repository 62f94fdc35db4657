"""Abstract interfaces for the documentation search index."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Sequence

from domain.entities import Chunk


class TextExtractor(ABC):
    """Turns a raw article body into plain text suitable for chunking."""

    @abstractmethod
    def extract(self, source: bytes | str) -> str:
        """Return the textual representation of a source."""


class ChunkSplitter(ABC):
    """Splits normalized text into retrievable chunks."""

    @abstractmethod
    def split(self, text: str, *, title: str | None = None, slug: str = "") -> list[Chunk]:
        """Return chunks for the provided text."""


class Embedder(ABC):
    """Turns texts into pooled, L2-normalized vector embeddings."""

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Return the stable identifier for this embedding model."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension for this model."""

    @abstractmethod
    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed a batch of texts in a single model invocation."""


class EmbeddingCache(ABC):
    """Persistent mapping from a text hash to its embedding."""

    @abstractmethod
    def key(self, text: str) -> str:
        """Return the deterministic cache key of ``text``."""

    @abstractmethod
    def load(self) -> dict[str, list[float]]:
        """Read persisted entries into memory and return them."""

    @abstractmethod
    def save(self, entries: Mapping[str, Sequence[float]] | None = None) -> bool:
        """Persist the full map; return False when persisting failed."""

    @abstractmethod
    def get(self, key: str) -> list[float] | None:
        """Return the cached vector for ``key`` if present."""

    @abstractmethod
    def put(self, key: str, vector: Sequence[float]) -> None:
        """Store a vector under ``key``."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of cached vectors."""

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


__all__ = [
    "TextExtractor",
    "ChunkSplitter",
    "Embedder",
    "EmbeddingCache",
]
