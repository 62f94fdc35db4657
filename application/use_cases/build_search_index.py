"""Use case that turns a documentation tree into the two search indexes."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from application.services.content_classifier import ContentClassifier
from application.services.embedding_generator import EmbeddingGenerator
from domain.entities import Document, EnrichedChunk, IndexBuildReport, IndexingError
from domain.interfaces import ChunkSplitter, TextExtractor
from infrastructure.text_extraction.front_matter import parse_front_matter

logger = logging.getLogger(__name__)

DOCS_URL_PREFIX = "/docs/"
PREVIEW_LENGTH = 150
SKIPPED_DIRECTORIES = frozenset({"internal-docs"})


def collect_markdown_files(
    docs_dir: Path,
    *,
    skipped_dirs: Iterable[str] = SKIPPED_DIRECTORIES,
) -> list[tuple[str, Path]]:
    """Return ``(slug, path)`` for every markdown file under ``docs_dir``, sorted by slug."""

    skipped = set(skipped_dirs)
    collected: list[tuple[str, Path]] = []
    for path in docs_dir.rglob("*.md"):
        relative = path.relative_to(docs_dir)
        if any(part in skipped for part in relative.parts[:-1]):
            continue
        if path.is_file():
            collected.append((relative.with_suffix("").as_posix(), path))
    if skipped:
        logger.debug("Skipped directories: %s", ", ".join(sorted(skipped)))
    return sorted(collected)


def load_document(slug: str, path: Path) -> Document:
    """Read one article and validate its front-matter."""

    raw = path.read_text(encoding="utf-8")
    front_matter, body = parse_front_matter(raw)
    modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return Document(
        slug=slug,
        title=front_matter.title,
        content=body,
        category=front_matter.category,
        description=front_matter.description,
        tags=tuple(front_matter.tags),
        keywords=tuple(front_matter.keywords),
        order=front_matter.order,
        last_modified=modified,
        source_path=str(path),
    )


def build_search_index(
    documents: Iterable[Document],
    *,
    extractor: TextExtractor,
    splitter: ChunkSplitter,
    embedding_generator: EmbeddingGenerator,
    classifier: ContentClassifier,
    report: IndexBuildReport | None = None,
) -> IndexBuildReport:
    """Chunk, embed and classify every document into basic and enhanced records.

    A document that fails is logged and left out; the others are still indexed.
    """

    report = report or IndexBuildReport()
    for document in documents:
        report.total += 1
        try:
            basic, enhanced = _index_document(
                document,
                extractor=extractor,
                splitter=splitter,
                embedding_generator=embedding_generator,
                classifier=classifier,
            )
        except Exception as exc:
            logger.error("Error processing %s: %s", document.source_path or document.slug, exc)
            report.errors.append(IndexingError(path=document.source_path or document.slug, reason=str(exc)))
            continue
        report.basic_records.append(basic)
        report.enhanced_records.append(enhanced)
        report.indexed += 1
        logger.info(
            "Indexed: %s (%d chunks, %d keywords)",
            document.slug,
            len(basic["chunks"]),
            len(enhanced["keywords"]),
        )
    return report


def index_directory(
    docs_dir: Path,
    *,
    extractor: TextExtractor,
    splitter: ChunkSplitter,
    embedding_generator: EmbeddingGenerator,
    classifier: ContentClassifier,
    skipped_dirs: Iterable[str] = SKIPPED_DIRECTORIES,
) -> IndexBuildReport:
    """Index every markdown file under ``docs_dir``."""

    files = collect_markdown_files(docs_dir, skipped_dirs=skipped_dirs)
    logger.info("Found %d markdown files in %s", len(files), docs_dir)
    report = IndexBuildReport()
    documents: list[Document] = []
    for slug, path in files:
        try:
            documents.append(load_document(slug, path))
        except Exception as exc:
            logger.error("Error processing %s: %s", path, exc)
            report.total += 1
            report.errors.append(IndexingError(path=str(path), reason=str(exc)))

    return build_search_index(
        documents,
        extractor=extractor,
        splitter=splitter,
        embedding_generator=embedding_generator,
        classifier=classifier,
        report=report,
    )


def write_index(path: Path, records: list[dict]) -> None:
    """Write records as a top-level JSON array; errors propagate."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Search index written: %s (%d documents)", path, len(records))


def _index_document(
    document: Document,
    *,
    extractor: TextExtractor,
    splitter: ChunkSplitter,
    embedding_generator: EmbeddingGenerator,
    classifier: ContentClassifier,
) -> tuple[dict, dict]:
    clean_text = extractor.extract(document.content)
    keywords = classifier.document_keywords(clean_text, [*document.keywords, *document.tags])
    chunks = splitter.split(clean_text, title=document.title, slug=document.slug)

    embeddings = embedding_generator.embed_texts([chunk.text for chunk in chunks])
    enriched = [
        EnrichedChunk(chunk=chunk, profile=classifier.classify(chunk.text), embedding=embedding)
        for chunk, embedding in zip(chunks, embeddings)
    ]

    basic = {
        "type": "document",
        "slug": document.slug,
        "title": document.display_title,
        "category": document.category,
        "url": f"{DOCS_URL_PREFIX}{document.slug}",
        "chunks": [_basic_chunk_record(item) for item in enriched],
    }
    enhanced = {
        **basic,
        "keywords": keywords,
        "description": document.description,
        "order": document.order,
        "lastModified": _iso_timestamp(document.last_modified),
        "chunks": [_enhanced_chunk_record(item) for item in enriched],
    }
    return basic, enhanced


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


def _basic_chunk_record(item: EnrichedChunk) -> dict:
    return {
        "id": item.chunk.id,
        "text": item.chunk.text,
        "startIndex": item.chunk.start_index,
        "preview": _preview(item.chunk.text),
    }


def _enhanced_chunk_record(item: EnrichedChunk) -> dict:
    chunk, profile = item.chunk, item.profile
    return {
        "id": chunk.id,
        "text": chunk.text,
        "startIndex": chunk.start_index,
        "wordCount": chunk.word_count,
        "importance": chunk.importance,
        "preview": _preview(chunk.text),
        "keywords": list(profile.keywords),
        "embedding": item.embedding,
        "semanticKeywords": list(profile.semantic_keywords),
        "contentType": profile.content_type.value,
        "difficulty": profile.difficulty.value,
        "hasCode": profile.has_code,
        "language": profile.language,
        "concepts": list(profile.concepts),
    }


def _iso_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "build_search_index",
    "collect_markdown_files",
    "index_directory",
    "load_document",
    "write_index",
]
