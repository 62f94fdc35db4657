"""Утилиты для настройки логирования сборки индекса."""
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Библиотеки загрузки модели, которые слишком многословны на уровне INFO.
NOISY_LOGGERS = ("sentence_transformers", "huggingface_hub", "urllib3", "filelock")


def setup_logging(level_name: str | None = None) -> None:
    """Настроить логирование сборки в консоль и (если задан файл) в файл.

    Уровень берётся из аргумента, затем из ``DOCINDEX_LOG_LEVEL``. Пустое
    значение ``DOCINDEX_LOG_FILE`` отключает запись в файл.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = (level_name or os.getenv("DOCINDEX_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    log_file = os.getenv("DOCINDEX_LOG_FILE", "docindex.log")

    formatter = logging.Formatter(LOG_FORMAT)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)
    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
