"""
Similarity metrics for resonance matching.

Cosine similarity:
σ(a, b) = a^T b / (||a|| ||b||)

A zero-norm vector on either side has similarity 0 with everything.
"""

import numpy as np

_EPS = 1e-10


def cosine_similarity_to_many(query: np.ndarray, vectors: np.ndarray) -> np.ndarray:
    """
    Compute similarity between one query and a stack of vectors.

    Args:
        query: Shape (d,) - query vector
        vectors: Shape (N, d) - candidate vectors (need not be normalized)

    Returns:
        np.ndarray: Shape (N,) - similarities, 0.0 where a norm is zero
    """
    query = np.asarray(query, dtype=np.float64)
    vectors = np.asarray(vectors, dtype=np.float64)

    if vectors.size == 0:
        return np.zeros(len(vectors))

    query_norm = np.linalg.norm(query)
    if query_norm < _EPS:
        return np.zeros(len(vectors))

    norms = np.linalg.norm(vectors, axis=1)
    dots = vectors @ query

    # Zero-norm rows get similarity 0 instead of NaN
    safe_norms = np.where(norms < _EPS, 1.0, norms)
    similarities = dots / (safe_norms * query_norm)
    similarities[norms < _EPS] = 0.0

    return similarities
