"""Pooling and normalisation helpers shared by the embedders."""
from __future__ import annotations

from typing import Sequence

import numpy as np


def mean_pool(token_embeddings: np.ndarray, attention_mask: Sequence[int] | np.ndarray | None = None) -> np.ndarray:
    """Average a ``(tokens, dim)`` matrix into one ``dim`` vector.

    Tokens whose mask value is 0 (padding) are ignored.
    """

    matrix = np.asarray(token_embeddings, dtype=np.float32)
    if matrix.ndim != 2:
        raise ValueError(f"Expected a (tokens, dim) matrix, got shape {matrix.shape}")
    if attention_mask is None:
        mask = np.ones(matrix.shape[0], dtype=np.float32)
    else:
        mask = np.asarray(attention_mask, dtype=np.float32)
    summed = (matrix * mask[:, None]).sum(axis=0)
    count = max(float(mask.sum()), 1e-9)
    return summed / count


def l2_normalize(vector: Sequence[float] | np.ndarray) -> np.ndarray:
    array = np.asarray(vector, dtype=np.float32)
    norm = float(np.linalg.norm(array))
    if norm == 0.0:
        return array
    return array / norm


__all__ = ["mean_pool", "l2_normalize"]
