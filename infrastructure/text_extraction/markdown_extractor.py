"""Markdown extractor that strips markup and keeps the readable text."""
from __future__ import annotations

import re

from domain.interfaces import TextExtractor

# Applied in order; later rules see the output of earlier ones.
_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"\n\s*\n"), "\n"),
)


class MarkdownExtractor(TextExtractor):
    """Normalise a markdown body into plain text for chunking."""

    def extract(self, source: bytes | str) -> str:
        if isinstance(source, bytes):
            text = source.decode("utf-8", errors="ignore")
        else:
            text = source
        for pattern, replacement in _RULES:
            text = pattern.sub(replacement, text)
        return text.strip()


__all__ = ["MarkdownExtractor"]
