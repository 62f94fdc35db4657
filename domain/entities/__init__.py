"""Domain entities for the documentation search index."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ContentType(str, Enum):
    """Coarse kind of content a chunk carries."""

    CODE_EXAMPLE = "code-example"
    TUTORIAL = "tutorial"
    REFERENCE = "reference"
    CONCEPT = "concept"
    GENERAL = "general"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True, slots=True)
class Document:
    """A documentation article read from the corpus.

    Attributes:
        slug: Path of the article relative to the corpus root, without extension.
        title: Title declared in the front-matter, if any.
        category: Navigation category (falls back to "General").
        content: Raw markdown body with the front-matter block removed.
        description: Short summary from the front-matter.
        tags: Declared tags, lowercased.
        keywords: Declared keywords, lowercased.
        order: Sort order inside the category.
        last_modified: Modification time of the source file.
        source_path: Location of the source file, used in logs.
    """

    slug: str
    content: str
    title: str | None = None
    category: str = "General"
    description: str = ""
    tags: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    order: int = 999
    last_modified: datetime | None = None
    source_path: str = ""

    @property
    def display_title(self) -> str:
        return self.title or self.slug


@dataclass(frozen=True, slots=True)
class Chunk:
    """A bounded, sentence-aligned span of a normalized document."""

    id: str
    text: str
    start_index: int
    word_count: int
    importance: float


@dataclass(frozen=True, slots=True)
class ContentProfile:
    """Rule-based classification of a piece of text."""

    keywords: tuple[str, ...] = ()
    semantic_keywords: tuple[str, ...] = ()
    content_type: ContentType = ContentType.GENERAL
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    has_code: bool = False
    language: str | None = None
    concepts: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class EnrichedChunk:
    """A chunk together with its classification and optional embedding."""

    chunk: Chunk
    profile: ContentProfile
    embedding: list[float] | None = None


@dataclass(slots=True)
class IndexingError:
    path: str
    reason: str


@dataclass(slots=True)
class IndexBuildReport:
    """Outcome of one pass over the corpus."""

    total: int = 0
    indexed: int = 0
    basic_records: list[dict] = field(default_factory=list)
    enhanced_records: list[dict] = field(default_factory=list)
    errors: list[IndexingError] = field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return sum(len(record["chunks"]) for record in self.basic_records)


__all__ = [
    "ContentType",
    "Difficulty",
    "Document",
    "Chunk",
    "ContentProfile",
    "EnrichedChunk",
    "IndexingError",
    "IndexBuildReport",
]
