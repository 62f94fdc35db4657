"""Dependency wiring for the documentation search index builder."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

from application.services.content_classifier import ContentClassifier
from application.services.embedding_generator import DEFAULT_BATCH_SIZE, EmbeddingGenerator
from domain.interfaces import ChunkSplitter, Embedder, EmbeddingCache, TextExtractor
from infrastructure.embedding.hash_embedder import HashEmbedder
from infrastructure.splitting.sentence_window_splitter import SentenceWindowSplitter
from infrastructure.storage.json_embedding_cache import JsonEmbeddingCache
from infrastructure.text_extraction.markdown_extractor import MarkdownExtractor

logger = logging.getLogger(__name__)

EmbedderName = Literal["minilm", "hash", "none"]

DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


@dataclass(slots=True)
class Container:
    """Simple container bundling concrete infrastructure implementations."""

    extractor: TextExtractor
    splitter: ChunkSplitter
    embedding_cache: EmbeddingCache
    embedding_generator: EmbeddingGenerator
    classifier: ContentClassifier


@dataclass(slots=True)
class ContainerConfig:
    """Paths, chunking parameters and embedder selection for one build."""

    docs_dir: str = "docs"
    output_path: str = "search-index.json"
    enhanced_output_path: str = "enhanced-search-index.json"
    cache_path: str = ".embedding-cache.json"
    embedder: EmbedderName = "minilm"
    model_name: str = DEFAULT_MODEL
    models_dir: str = "models"
    device: str = "cpu"
    chunk_size: int = 300
    chunk_overlap: int = 50
    batch_size: int = DEFAULT_BATCH_SIZE


def _resolve_model_reference(model_ref: str, cfg: ContainerConfig) -> str:
    """Prefer a model saved under ``models_dir`` over the hub id."""

    local_path = Path(cfg.models_dir).expanduser() / model_ref
    if local_path.is_dir():
        return str(local_path)
    return model_ref


def _build_minilm(cfg: ContainerConfig) -> Embedder:
    from infrastructure.embedding.sentence_transformers_embedder import (  # noqa: PLC0415
        SentenceTransformersConfig,
        SentenceTransformersEmbedder,
    )

    return SentenceTransformersEmbedder(
        SentenceTransformersConfig(model_name=cfg.model_name, device=cfg.device),
        model_path=_resolve_model_reference(cfg.model_name, cfg),
    )


_EMBEDDER_FACTORIES: dict[str, Callable[[ContainerConfig], Embedder]] = {
    "minilm": _build_minilm,
    "hash": lambda _cfg: HashEmbedder(),
}


def load_embedder(cfg: ContainerConfig) -> Embedder | None:
    """Load the configured embedding model, blocking until it is ready.

    Returns ``None`` when embeddings are disabled or the model cannot be
    loaded; the build then continues without vectors.
    """

    if cfg.embedder == "none":
        logger.info("Embeddings disabled")
        return None
    try:
        factory = _EMBEDDER_FACTORIES[cfg.embedder]
    except KeyError as exc:
        raise ValueError(f"Unknown embedder '{cfg.embedder}'") from exc
    try:
        return factory(cfg)
    except Exception as exc:
        logger.warning("Embedding model unavailable, proceeding without embeddings: %s", exc)
        return None


def build_default_container(
    config: ContainerConfig | None = None,
    *,
    embedder: Embedder | None = None,
) -> Container:
    """Instantiate the default infrastructure stack.

    ``embedder`` overrides the configured model, mainly for tests.
    """

    cfg = config or ContainerConfig()
    splitter = SentenceWindowSplitter(max_words=cfg.chunk_size, overlap_words=cfg.chunk_overlap)
    if embedder is None:
        embedder = load_embedder(cfg)
    embedding_cache = JsonEmbeddingCache(cfg.cache_path)
    embedding_generator = EmbeddingGenerator(embedder, embedding_cache, batch_size=cfg.batch_size)

    return Container(
        extractor=MarkdownExtractor(),
        splitter=splitter,
        embedding_cache=embedding_cache,
        embedding_generator=embedding_generator,
        classifier=ContentClassifier(),
    )


__all__ = ["Container", "ContainerConfig", "build_default_container", "load_embedder"]
