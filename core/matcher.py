"""Nearest-description matching over TF-IDF vectors."""

from typing import List, Optional, Sequence, Tuple
import logging
import time
from concurrent.futures import ThreadPoolExecutor
import numpy as np

from core.vectorizer import TermVectors, vectorize
from core.similarity import pairwise_cosine
from config.models import (
    ExclusionPolicy,
    MatchConfig,
    MatchResult,
    Record
)

CHUNK_ROWS = 512

def chunk_bounds(n_rows: int, chunk_rows: int = CHUNK_ROWS) -> List[Tuple[int, int]]:
    """Split [0, n_rows) into consecutive (start, stop) blocks of at most chunk_rows."""
    if chunk_rows < 1:
        raise ValueError(f"chunk_rows must be positive, got {chunk_rows}")
    return [
        (start, min(start + chunk_rows, n_rows))
        for start in range(0, n_rows, chunk_rows)
    ]

def _exclusion_mask(
    source: Sequence[Record],
    candidates: Sequence[Record],
    offset: int,
    policy: ExclusionPolicy
) -> Optional[np.ndarray]:
    """
    Build a boolean mask of (source, candidate) pairs that may not match.

    Args:
        source: Source records of this chunk
        candidates: Full candidate pool
        offset: Position of the chunk's first record in the source sequence
        policy: Exclusion policy to apply

    Returns:
        Optional[np.ndarray]: Mask, or None when nothing is excluded
    """
    if policy == ExclusionPolicy.NONE:
        return None

    mask = np.zeros((len(source), len(candidates)), dtype=bool)

    if policy == ExclusionPolicy.EXCLUDE_SAME_INDEX:
        for row in range(len(source)):
            col = offset + row
            if col < len(candidates):
                mask[row, col] = True
    elif policy == ExclusionPolicy.EXCLUDE_SAME_ID:
        candidate_ids = np.array([c.id for c in candidates], dtype=object)
        for row, record in enumerate(source):
            mask[row] = candidate_ids == record.id
    else:
        raise ValueError(f"Unsupported exclusion policy: {policy}")

    return mask

def _best_in_chunk(
    source: Sequence[Record],
    candidates: Sequence[Record],
    source_vectors,
    candidate_vectors,
    offset: int,
    policy: ExclusionPolicy,
    min_similarity: float
) -> List[Optional[MatchResult]]:
    """Score one chunk of source rows against every candidate."""
    if not len(source):
        return []
    if not len(candidates):
        return [None] * len(source)

    scores = pairwise_cosine(source_vectors, candidate_vectors)

    mask = _exclusion_mask(source, candidates, offset, policy)
    if mask is not None:
        scores[mask] = -np.inf

    results: List[Optional[MatchResult]] = []
    for row, record in enumerate(source):
        # argmax returns the first maximum, so earlier candidates win ties
        col = int(np.argmax(scores[row]))
        best_score = scores[row, col]

        if best_score > min_similarity:
            match = candidates[col]
            results.append(MatchResult(
                source_id=record.id,
                source_description=record.description,
                match_id=match.id,
                match_description=match.description,
                similarity=round(float(best_score) * 100, 2)
            ))
        else:
            results.append(None)

    return results

def find_best_matches(
    source: Sequence[Record],
    candidates: Optional[Sequence[Record]],
    vectors: TermVectors,
    exclusion_policy: Optional[ExclusionPolicy] = None,
    min_similarity: float = 0.0,
    worker_threads: int = 1,
    chunk_rows: int = CHUNK_ROWS
) -> List[MatchResult]:
    """
    Find the most similar candidate for each source record.

    In cross-set mode ``vectors`` holds the source documents followed by the
    candidate documents. Passing ``candidates=None`` selects self-set mode:
    the source records are their own candidate pool and ``vectors`` holds
    each of them once.

    Args:
        source: Records to find matches for
        candidates: Records to match against, or None for self-set mode
        vectors: TF-IDF vectors co-indexed with the records
        exclusion_policy: Which candidates a source record may never match;
            None excludes by index in self-set mode and nothing in cross-set mode
        min_similarity: A candidate must score strictly above this
        worker_threads: Threads used to score chunks of source records
        chunk_rows: Source rows scored per chunk; bounds the dense score
            block at chunk_rows x candidates

    Returns:
        List[MatchResult]: Matches in source order; records without a
        qualifying candidate are left out
    """
    n_source = len(source)
    if exclusion_policy is None:
        exclusion_policy = (
            ExclusionPolicy.EXCLUDE_SAME_INDEX if candidates is None
            else ExclusionPolicy.NONE
        )
    exclusion_policy = ExclusionPolicy.coerce(exclusion_policy)

    if candidates is None:
        candidates = source
        candidate_start = 0
        expected = n_source
    else:
        candidate_start = n_source
        expected = n_source + len(candidates)

    if len(vectors) != expected:
        raise ValueError(
            f"Expected {expected} vectors for {n_source} source and "
            f"{len(candidates)} candidate records, got {len(vectors)}"
        )

    candidate_vectors = vectors.rows(candidate_start, candidate_start + len(candidates))

    chunks = chunk_bounds(n_source, chunk_rows)
    workers = max(1, min(worker_threads, len(chunks)))

    def score_chunk(chunk):
        start, stop = chunk
        return _best_in_chunk(
            source[start:stop],
            candidates,
            vectors.rows(start, stop),
            candidate_vectors,
            start,
            exclusion_policy,
            min_similarity
        )

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map yields in submission order, keeping source order intact
            chunk_results = list(executor.map(score_chunk, chunks))
    else:
        chunk_results = [score_chunk(chunk) for chunk in chunks]

    return [
        result
        for chunk in chunk_results
        for result in chunk
        if result is not None
    ]

class DescriptionMatcher:
    """
    Matches records by TF-IDF cosine similarity of their descriptions.
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        """
        Initialize the description matcher.

        Args:
            config: Matching configuration (defaults to MatchConfig())
        """
        self.config = config or MatchConfig()
        self._initialize_logging()

    def _initialize_logging(self) -> None:
        """Setup logging configuration."""
        self.logger = logging.getLogger(__name__)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    '%(asctime)s - %(levelname)s - %(message)s'
                )
            )
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def match_records(
        self,
        source: Sequence[Record],
        candidates: Optional[Sequence[Record]] = None
    ) -> List[MatchResult]:
        """
        Match records between two collections or within a single one.

        Args:
            source: Source records
            candidates: Optional candidate records; None compares the
                source collection against itself

        Returns:
            List[MatchResult]: Best match per source record, in source order
        """
        start_time = time.time()
        self_set = candidates is None
        policy = self.config.policy_for(self_set)

        corpus = [record.description for record in source]
        if not self_set:
            corpus.extend(record.description for record in candidates)

        vectors = vectorize(corpus)
        self.logger.info(
            f"Vectorized {len(corpus)} descriptions into {len(vectors.vocabulary)} "
            f"terms (corpus {vectors.fingerprint}, "
            f"{'self-set' if self_set else 'cross-set'}, policy={policy.value})"
        )
        self._log_significant_terms(vectors)

        results = find_best_matches(
            source,
            candidates,
            vectors,
            exclusion_policy=policy,
            min_similarity=self.config.min_similarity,
            worker_threads=self.config.worker_threads,
            chunk_rows=self.config.chunk_rows
        )

        unmatched = len(source) - len(results)
        if unmatched:
            self.logger.info(f"{unmatched} of {len(source)} records found no match")

        self.logger.info(
            f"Matching completed in {time.time() - start_time:.2f} seconds"
        )
        return results

    def _log_significant_terms(self, vectors: TermVectors) -> None:
        """Log most significant terms for analysis."""
        limit = self.config.log_significant_terms
        if limit <= 0:
            return

        self.logger.info("Most significant terms by TF-IDF weight:")
        for term, weight, df in vectors.significant_terms(limit):
            freq_pct = (df / len(vectors)) * 100
            self.logger.info(
                f"- {term:<20}: weight={weight:.3f}, freq={freq_pct:.1f}%"
            )
