"""Front-matter parsing and validation for documentation articles."""
from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DELIMITER = "---"
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
DEFAULT_ORDER = 999


class FrontMatter(BaseModel):
    """Schema of the metadata block at the top of an article."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    category: str = "General"
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    order: int = DEFAULT_ORDER

    @field_validator("title", mode="before")
    @classmethod
    def _blank_title_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "General"
        return value

    @field_validator("tags", "keywords", mode="before")
    @classmethod
    def _split_terms(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip().lower() for part in value.split(",") if part.strip()]
        return value

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> Any:
        if isinstance(value, int):
            return value
        match = _LEADING_INT_RE.match(str(value or ""))
        return int(match.group(1)) if match else DEFAULT_ORDER


def split_front_matter(content: str) -> tuple[dict[str, str], str]:
    """Separate a leading ``---`` block of ``key: value`` lines from the body.

    Quotes are stripped from values. Content without a closed block is
    returned unchanged with empty metadata.
    """

    if not content.startswith(_DELIMITER):
        return {}, content
    end = content.find(_DELIMITER, len(_DELIMITER))
    if end == -1:
        return {}, content

    fields: dict[str, str] = {}
    for line in content[len(_DELIMITER) : end].strip().splitlines():
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        fields[key.strip()] = value.strip().replace('"', "").replace("'", "")
    return fields, content[end + len(_DELIMITER) :].strip()


def parse_front_matter(content: str) -> tuple[FrontMatter, str]:
    fields, body = split_front_matter(content)
    return FrontMatter.model_validate(fields), body


__all__ = ["FrontMatter", "split_front_matter", "parse_front_matter", "DEFAULT_ORDER"]
