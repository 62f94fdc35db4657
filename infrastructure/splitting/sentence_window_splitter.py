"""Chunk splitter that packs whole sentences into overlapping word windows."""
from __future__ import annotations

import re

from domain.entities import Chunk
from domain.interfaces import ChunkSplitter

_SENTENCE_RE = re.compile(r"[^.!?]+")

BASE_IMPORTANCE = 0.5
TITLE_WEIGHT = 0.3
CODE_BONUS = 0.2
HEADING_BONUS = 0.1
LENGTH_BONUS = 0.1
LONG_CHUNK_WORDS = 100


def score_importance(text: str, title: str | None = None) -> float:
    """Score how central a chunk is to its document, in [0, 1]."""

    importance = BASE_IMPORTANCE
    if title:
        title_words = title.lower().split()
        lowered = text.lower()
        if title_words:
            matches = sum(1 for word in title_words if word in lowered)
            importance += matches / len(title_words) * TITLE_WEIGHT
    if "`" in text:
        importance += CODE_BONUS
    if "#" in text:
        importance += HEADING_BONUS
    if len(text.split()) > LONG_CHUNK_WORDS:
        importance += LENGTH_BONUS
    return max(0.0, min(importance, 1.0))


def split_sentences(text: str) -> list[tuple[int, str]]:
    """Return ``(offset, sentence)`` pairs, split on ``.``, ``!`` and ``?``."""

    sentences: list[tuple[int, str]] = []
    for match in _SENTENCE_RE.finditer(text):
        raw = match.group()
        sentence = raw.strip()
        if not sentence:
            continue
        offset = match.start() + (len(raw) - len(raw.lstrip()))
        sentences.append((offset, sentence))
    return sentences


class SentenceWindowSplitter(ChunkSplitter):
    """Split text into sentence-aligned windows of at most ``max_words`` words.

    A new window starts with the last ``overlap_words`` words of the previous
    one followed by the sentence that did not fit. A single sentence longer
    than ``max_words`` is kept whole.
    """

    def __init__(self, max_words: int = 300, overlap_words: int = 50) -> None:
        if max_words <= 0:
            raise ValueError("max_words must be positive")
        if overlap_words < 0:
            raise ValueError("overlap_words must not be negative")
        self.max_words = max_words
        self.overlap_words = overlap_words

    def split(self, text: str, *, title: str | None = None, slug: str = "") -> list[Chunk]:
        total_words = len(text.split())
        if total_words <= self.max_words:
            return [
                Chunk(
                    id=self._chunk_id(slug, 0),
                    text=text,
                    start_index=0,
                    word_count=total_words,
                    importance=1.0 if title else 0.8,
                )
            ]

        chunks: list[Chunk] = []
        buffer = ""
        buffer_words = 0
        start_index = 0
        for offset, sentence in split_sentences(text):
            sentence_words = len(sentence.split())
            if buffer_words + sentence_words > self.max_words and buffer:
                chunks.append(self._close(buffer, buffer_words, start_index, title, slug, len(chunks)))
                carried = min(self.overlap_words, buffer_words)
                tail = buffer.split()[-carried:] if carried else []
                buffer = " ".join([*tail, sentence])
                buffer_words = carried + sentence_words
                start_index = offset
            else:
                buffer = f"{buffer} {sentence}" if buffer else sentence
                buffer_words += sentence_words

        if buffer.strip():
            chunks.append(self._close(buffer, buffer_words, start_index, title, slug, len(chunks)))
        return chunks

    def _close(
        self,
        buffer: str,
        word_count: int,
        start_index: int,
        title: str | None,
        slug: str,
        ordinal: int,
    ) -> Chunk:
        return Chunk(
            id=self._chunk_id(slug, ordinal),
            text=buffer.strip(),
            start_index=start_index,
            word_count=word_count,
            importance=score_importance(buffer, title),
        )

    @staticmethod
    def _chunk_id(slug: str, ordinal: int) -> str:
        return f"{slug}-chunk-{ordinal}" if slug else f"chunk-{ordinal}"


__all__ = ["SentenceWindowSplitter", "score_importance", "split_sentences"]
