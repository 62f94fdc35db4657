"""Персистентный кэш эмбеддингов в JSON-файле."""
from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Sequence

from domain.interfaces import EmbeddingCache

logger = logging.getLogger(__name__)


class JsonEmbeddingCache(EmbeddingCache):
    """Хранит соответствие ``sha256(текст) -> вектор`` в одном JSON-объекте.

    Файл читается один раз при старте сборки и целиком перезаписывается в
    конце. Запись идёт через временный файл и ``os.replace``, поэтому
    прерванная сборка не портит ранее сохранённый кэш.
    """

    def __init__(self, path: str | Path = ".embedding-cache.json") -> None:
        self._path = Path(path)
        self._entries: dict[str, list[float]] = {}

    @property
    def path(self) -> Path:
        return self._path

    def key(self, text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def load(self) -> dict[str, list[float]]:
        self._entries = {}
        if not self._path.exists():
            logger.info("Файл кэша %s не найден, начинаем с пустого кэша", self._path)
            return self._entries
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Не удалось прочитать кэш %s, начинаем заново: %s", self._path, exc)
            return self._entries
        if not isinstance(raw, dict):
            logger.warning("Кэш %s не является JSON-объектом, начинаем заново", self._path)
            return self._entries

        for key, vector in raw.items():
            if isinstance(vector, list) and all(isinstance(value, (int, float)) for value in vector):
                self._entries[key] = [float(value) for value in vector]
        skipped = len(raw) - len(self._entries)
        if skipped:
            logger.warning("Пропущено %d повреждённых записей кэша", skipped)
        logger.info("Загружено %d эмбеддингов из кэша %s", len(self._entries), self._path)
        return self._entries

    def save(self, entries: Mapping[str, Sequence[float]] | None = None) -> bool:
        if entries is not None:
            self._entries = {key: list(vector) for key, vector in entries.items()}
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._entries, handle)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Не удалось сохранить кэш %s: %s", self._path, exc)
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False
        logger.info("Сохранено %d эмбеддингов в кэш %s", len(self._entries), self._path)
        return True

    def get(self, key: str) -> list[float] | None:
        return self._entries.get(key)

    def put(self, key: str, vector: Sequence[float]) -> None:
        self._entries[key] = [float(value) for value in vector]

    def entries(self) -> dict[str, list[float]]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["JsonEmbeddingCache"]
