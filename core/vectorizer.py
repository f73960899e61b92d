"""TF-IDF vectorization of description corpora."""

from typing import Dict, List, Sequence, Tuple
import logging
import numpy as np
from scipy import sparse
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import CountVectorizer
import xxhash

from core.preprocessor import tokenize

def _pretokenized(tokens: List[str]) -> List[str]:
    """Analyzer for documents that were tokenized up front."""
    return tokens

def corpus_fingerprint(corpus: Sequence[str]) -> str:
    """Order-sensitive hash of a corpus, used to tell runs apart in logs."""
    hasher = xxhash.xxh64()
    for text in corpus:
        hasher.update(str(text).encode('utf-8'))
        hasher.update(b'\x00')
    return hasher.hexdigest()

class TermVectors:
    """
    Immutable TF-IDF vectors for one corpus snapshot.

    Row ``i`` of :attr:`matrix` is the term vector of document ``i``; terms
    without an entry in a row have weight 0.
    """

    def __init__(
        self,
        matrix: csr_matrix,
        vocabulary: Tuple[str, ...],
        document_frequencies: np.ndarray,
        idf_values: np.ndarray,
        fingerprint: str
    ):
        self._matrix = matrix
        self.vocabulary = vocabulary
        self._term_index = {term: idx for idx, term in enumerate(vocabulary)}
        self._df = document_frequencies
        self._idf = idf_values
        self.fingerprint = fingerprint

    @property
    def matrix(self) -> csr_matrix:
        return self._matrix

    @property
    def n_documents(self) -> int:
        return self._matrix.shape[0]

    def __len__(self) -> int:
        return self.n_documents

    def __getitem__(self, index: int) -> Dict[str, float]:
        """Return document ``index`` as a term -> weight mapping."""
        if index < 0:
            index += self.n_documents
        if not 0 <= index < self.n_documents:
            raise IndexError(f"Document index {index} out of range")

        start, end = self._matrix.indptr[index], self._matrix.indptr[index + 1]
        return {
            self.vocabulary[col]: float(weight)
            for col, weight in zip(
                self._matrix.indices[start:end],
                self._matrix.data[start:end]
            )
        }

    def rows(self, start: int, stop: int) -> csr_matrix:
        """Sub-matrix of documents ``start`` (inclusive) to ``stop`` (exclusive)."""
        return self._matrix[start:stop]

    def document_frequency(self, term: str) -> int:
        """Number of documents containing ``term`` (0 if unseen)."""
        idx = self._term_index.get(term)
        return 0 if idx is None else int(self._df[idx])

    def idf(self, term: str) -> float:
        """Inverse document frequency of ``term`` (0.0 if unseen)."""
        idx = self._term_index.get(term)
        return 0.0 if idx is None else float(self._idf[idx])

    def significant_terms(self, limit: int = 20) -> List[Tuple[str, float, int]]:
        """Terms with the highest average weight as (term, weight, df)."""
        if not self.vocabulary or not self.n_documents:
            return []

        avg_weight = np.asarray(self._matrix.mean(axis=0)).ravel()
        # stable sort keeps vocabulary order between equal weights
        order = np.argsort(-avg_weight, kind='stable')[:limit]
        return [
            (self.vocabulary[idx], float(avg_weight[idx]), int(self._df[idx]))
            for idx in order
        ]

def vectorize(corpus: Sequence[str]) -> TermVectors:
    """
    Build TF-IDF vectors for every document of a corpus.

    Weights are ``tf * ln(N / (1 + df))``. Terms present in every document
    get a zero or negative idf, which is kept as is.

    Args:
        corpus: Ordered description texts

    Returns:
        TermVectors: One vector per document, in corpus order
    """
    corpus = list(corpus)
    token_lists = [tokenize(text) for text in corpus]
    n_docs = len(token_lists)
    fingerprint = corpus_fingerprint(corpus)

    if not any(token_lists):
        # CountVectorizer refuses an empty vocabulary
        return TermVectors(
            matrix=csr_matrix((n_docs, 0), dtype=np.float64),
            vocabulary=(),
            document_frequencies=np.zeros(0, dtype=np.int64),
            idf_values=np.zeros(0, dtype=np.float64),
            fingerprint=fingerprint
        )

    counter = CountVectorizer(analyzer=_pretokenized, lowercase=False)
    term_counts = counter.fit_transform(token_lists).tocsr()
    vocabulary = tuple(counter.get_feature_names_out())

    # Pass 2: corpus-wide statistics
    document_frequencies = np.bincount(
        term_counts.indices,
        minlength=term_counts.shape[1]
    )
    idf_values = np.log(n_docs / (1.0 + document_frequencies))

    weights = (term_counts @ sparse.diags(idf_values)).tocsr()
    weights.sort_indices()

    logging.getLogger(__name__).debug(
        f"Vectorized {n_docs} documents over {len(vocabulary)} terms "
        f"(fingerprint {fingerprint})"
    )

    return TermVectors(
        matrix=weights,
        vocabulary=vocabulary,
        document_frequencies=document_frequencies,
        idf_values=idf_values,
        fingerprint=fingerprint
    )
