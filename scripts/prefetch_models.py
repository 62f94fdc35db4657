"""Сохранить embedding-модели в models_dir, чтобы сборка индекса работала без сети."""
from __future__ import annotations

import argparse
from pathlib import Path

from sentence_transformers import SentenceTransformer

from infrastructure.config import ContainerConfig, _resolve_model_reference


def prefetch_embedding_model(model_name: str, cfg: ContainerConfig, *, force: bool = False) -> Path:
    resolved = _resolve_model_reference(model_name, cfg)
    if resolved != model_name and not force:
        return Path(resolved)
    target_dir = Path(cfg.models_dir).expanduser() / model_name
    target_dir.parent.mkdir(parents=True, exist_ok=True)
    SentenceTransformer(model_name).save(str(target_dir))
    return target_dir


def parse_args() -> argparse.Namespace:
    defaults = ContainerConfig()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--models-dir",
        default=defaults.models_dir,
        help=f"Куда сохранять модели (по умолчанию: {defaults.models_dir})",
    )
    parser.add_argument(
        "--model",
        action="append",
        dest="models",
        help=f"ID модели из Hugging Face, можно повторять (по умолчанию: {defaults.model_name})",
    )
    parser.add_argument("--force", action="store_true", help="Перекачать уже сохранённые модели")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    cfg = ContainerConfig(models_dir=args.models_dir)
    for model_name in args.models or (cfg.model_name,):
        saved_path = prefetch_embedding_model(model_name, cfg, force=args.force)
        print(f"{model_name} -> {saved_path}")


if __name__ == "__main__":
    main()
