"""Эмбеддер на базе sentence-transformers с явным mean pooling."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from sentence_transformers import SentenceTransformer

from domain.interfaces import Embedder
from infrastructure.embedding.pooling import l2_normalize, mean_pool

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SentenceTransformersConfig:
    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"
    batch_size: int = 16
    passage_prefix: str | None = None


class SentenceTransformersEmbedder(Embedder):
    """Эмбеддер на базе библиотеки sentence-transformers.

    Модель возвращает эмбеддинги токенов, которые усредняются по
    значимым токенам и нормализуются по L2.
    """

    def __init__(self, config: SentenceTransformersConfig, model_path: str | None = None) -> None:
        self._config = config
        source = model_path or config.model_name
        logger.info("Загрузка модели sentence-transformers: %s", source)
        self._model = SentenceTransformer(source, device=config.device)
        self._dimension = int(self._model.get_sentence_embedding_dimension())
        logger.info("Модель %s загружена (размерность %d)", config.model_name, self._dimension)

    @property
    def model_id(self) -> str:
        return self._config.model_name

    @property
    def dimension(self) -> int:
        return self._dimension

    def _apply_prefix(self, text: str) -> str:
        if self._config.passage_prefix:
            return f"{self._config.passage_prefix}{text}"
        return text

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        prefixed = [self._apply_prefix(text) for text in texts]
        logger.debug("Кодирование %d фрагментов моделью %s", len(prefixed), self._config.model_name)
        token_embeddings = self._model.encode(
            prefixed,
            batch_size=self._config.batch_size,
            output_value="token_embeddings",
            show_progress_bar=False,
        )
        return [l2_normalize(mean_pool(_to_numpy(tokens))).tolist() for tokens in token_embeddings]


def _to_numpy(value: object) -> np.ndarray:
    if hasattr(value, "detach"):
        value = value.detach().cpu().numpy()
    return np.asarray(value, dtype=np.float32)


__all__ = ["SentenceTransformersEmbedder", "SentenceTransformersConfig"]
