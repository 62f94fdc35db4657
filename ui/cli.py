"""Command line entry point that builds the documentation search indexes."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from application.use_cases.build_search_index import index_directory, write_index
from domain.entities import IndexBuildReport
from infrastructure.config import Container, ContainerConfig, build_default_container
from ui.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = ContainerConfig()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--docs-dir", default=defaults.docs_dir, help="Root of the markdown corpus")
    parser.add_argument("--output", default=defaults.output_path, help="Basic index file")
    parser.add_argument(
        "--enhanced-output",
        default=defaults.enhanced_output_path,
        help="Enhanced index file (classification and embeddings)",
    )
    parser.add_argument("--cache-file", default=defaults.cache_path, help="Embedding cache file")
    parser.add_argument(
        "--embedder",
        choices=("minilm", "hash", "none"),
        default=defaults.embedder,
        help="Embedding backend; 'none' leaves embeddings empty",
    )
    parser.add_argument("--model", default=defaults.model_name, help="sentence-transformers model id")
    parser.add_argument("--models-dir", default=defaults.models_dir, help="Directory with prefetched models")
    parser.add_argument("--device", default=defaults.device)
    parser.add_argument("--chunk-size", type=int, default=defaults.chunk_size, help="Maximum words per chunk")
    parser.add_argument("--overlap", type=int, default=defaults.chunk_overlap, help="Words carried between chunks")
    parser.add_argument("--batch-size", type=int, default=defaults.batch_size, help="Chunks per model call")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ContainerConfig:
    return ContainerConfig(
        docs_dir=args.docs_dir,
        output_path=args.output,
        enhanced_output_path=args.enhanced_output,
        cache_path=args.cache_file,
        embedder=args.embedder,
        model_name=args.model,
        models_dir=args.models_dir,
        device=args.device,
        chunk_size=args.chunk_size,
        chunk_overlap=args.overlap,
        batch_size=args.batch_size,
    )


def run_build(config: ContainerConfig, container: Container | None = None) -> IndexBuildReport:
    """Load the cache, index the corpus, persist the cache and write both indexes."""

    container = container or build_default_container(config)
    container.embedding_cache.load()

    report = index_directory(
        Path(config.docs_dir),
        extractor=container.extractor,
        splitter=container.splitter,
        embedding_generator=container.embedding_generator,
        classifier=container.classifier,
    )

    if container.embedding_generator.embedder is not None:
        container.embedding_cache.save()
        progress = container.embedding_generator.progress
        logger.info(
            "Embeddings: %d requested, %d from cache, %d generated, %d failed (%d%% resolved)",
            progress.requested,
            progress.cache_hits,
            progress.embedded,
            progress.failed,
            progress.percentage,
        )

    write_index(Path(config.output_path), report.basic_records)
    write_index(Path(config.enhanced_output_path), report.enhanced_records)

    logger.info("Total documents: %d", report.indexed)
    logger.info("Total chunks: %d", report.chunk_count)
    if report.enhanced_records:
        average = sum(len(record["keywords"]) for record in report.enhanced_records) / len(report.enhanced_records)
        logger.info("Average keywords per document: %.1f", average)
    if report.errors:
        logger.warning("%d documents failed and were skipped", len(report.errors))
    return report


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    config = config_from_args(args)
    try:
        run_build(config)
    except OSError as exc:
        logger.error("Failed to generate search index: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
