"""Cosine similarity between TF-IDF term vectors."""

from typing import Mapping
import math
import numpy as np
from scipy.sparse import csr_matrix

def cosine_similarity(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """
    Calculate cosine similarity between two sparse term vectors.

    Args:
        a: First vector as {term: weight}
        b: Second vector as {term: weight}

    Returns:
        float: Similarity, 0.0 when either vector has zero norm
    """
    # Sorted traversal keeps the float sums identical for (a, b) and (b, a)
    terms = sorted(set(a) | set(b))

    dot = sum(a.get(term, 0.0) * b.get(term, 0.0) for term in terms)
    norm_a = math.sqrt(sum(a.get(term, 0.0) ** 2 for term in terms))
    norm_b = math.sqrt(sum(b.get(term, 0.0) ** 2 for term in terms))

    denominator = norm_a * norm_b
    if denominator == 0.0:
        return 0.0

    return dot / denominator

def _row_norms(matrix: csr_matrix) -> np.ndarray:
    return np.sqrt(np.asarray(matrix.multiply(matrix).sum(axis=1)).ravel())

def pairwise_cosine(a: csr_matrix, b: csr_matrix) -> np.ndarray:
    """
    Calculate cosine similarity for every row pair of two sparse matrices.

    Both matrices must share the same term columns. Pairs involving a
    zero-norm row score 0.0.

    Args:
        a: Source vectors, one per row
        b: Candidate vectors, one per row

    Returns:
        np.ndarray: Dense (rows of a) x (rows of b) score matrix
    """
    if a.shape[1] != b.shape[1]:
        raise ValueError(
            f"Vector widths differ: {a.shape[1]} != {b.shape[1]}"
        )

    scores = (a @ b.T).toarray().astype(np.float64, copy=False)
    denominators = np.outer(_row_norms(a), _row_norms(b))

    # zero-norm rows hold only zero weights, so their dot products are already 0
    np.divide(scores, denominators, out=scores, where=denominators != 0.0)
    return scores
