from typing import Sequence

import numpy as np


def cosine_sim(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors."""
    a_vec = np.asarray(a, dtype=float)
    b_vec = np.asarray(b, dtype=float)
    if a_vec.size == 0 or a_vec.shape != b_vec.shape:
        return 0.0

    # Normalize vectors
    a_norm = a_vec / (np.linalg.norm(a_vec) + 1e-8)
    b_norm = b_vec / (np.linalg.norm(b_vec) + 1e-8)

    return float(np.dot(a_norm, b_norm))


def mean_vector(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Element-wise mean of two vectors (missing trailing entries count as 0)."""
    size = max(len(a), len(b))
    a_vec = np.zeros(size)
    b_vec = np.zeros(size)
    a_vec[: len(a)] = a
    b_vec[: len(b)] = b
    return ((a_vec + b_vec) / 2).tolist()
