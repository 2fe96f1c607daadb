"""In-memory embedding index over the chunks of one loaded document."""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from docqa.config import DEFAULT_CONTEXT_TOP_N, DEFAULT_MIN_SCORE, DEFAULT_TOP_N
from docqa.errors import InvalidArgumentError, ProviderFailure
from docqa.models.chunk import Chunk, SimilarityResult

logger = logging.getLogger(__name__)

Embedder = Callable[[str], List[float]]
Candidate = Tuple[str, Sequence[float]]


def compute_cosine_similarities(query_vector: Sequence[float], candidate_vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Cosine similarity of the query against each candidate; zero vectors score 0."""
    query = np.asarray(query_vector, dtype=float)
    candidates = np.asarray(candidate_vectors, dtype=float)
    if candidates.size == 0:
        return np.zeros(0)
    query_norm = np.linalg.norm(query)
    cand_norms = np.linalg.norm(candidates, axis=1)
    denom = cand_norms * query_norm
    dots = candidates @ query
    return np.divide(dots, denom, out=np.zeros_like(dots), where=denom > 0)


def _ranked(query_vector: Sequence[float], candidates: Iterable[Candidate]) -> List[SimilarityResult]:
    """Score candidates and order them by descending score, ties by candidate position."""
    candidates = list(candidates)
    if not candidates:
        return []
    scores = compute_cosine_similarities(query_vector, [vector for _, vector in candidates])
    order = sorted(range(len(candidates)), key=lambda i: (-scores[i], i))
    return [SimilarityResult(chunk_text=candidates[i][0], score=float(scores[i])) for i in order]


def _check_top_n(top_n: int) -> None:
    if top_n < 1:
        raise InvalidArgumentError("top_n must be at least 1.")


def find_closest(query_vector: Sequence[float], candidates: Iterable[Candidate], top_n: int) -> List[str]:
    """
    Return the texts of the top_n candidates most similar to the query.

    Args:
        query_vector: Embedding of the query.
        candidates: (text, vector) pairs in original chunk order.
        top_n: Maximum number of texts to return.

    Returns:
        Candidate texts ordered by descending cosine similarity.
    """
    _check_top_n(top_n)
    return [result.chunk_text for result in _ranked(query_vector, candidates)[:top_n]]


def find_closest_with_score(
    query_vector: Sequence[float],
    candidates: Iterable[Candidate],
    top_n: int,
    min_score: float,
) -> List[SimilarityResult]:
    """
    Like find_closest, but keeps scores and drops candidates scoring below min_score.

    Args:
        query_vector: Embedding of the query.
        candidates: (text, vector) pairs in original chunk order.
        top_n: Maximum number of results.
        min_score: Inclusive lower bound on cosine similarity.

    Returns:
        SimilarityResult list ordered by descending score.
    """
    _check_top_n(top_n)
    ranked = [result for result in _ranked(query_vector, candidates) if result.score >= min_score]
    return ranked[:top_n]


class RetrievalIndex:
    """Maps each chunk's text to its embedding for one document.

    The mapping is rebuilt wholesale by ``build``; there are no incremental
    updates. Duplicate chunk text collapses to one entry that keeps the
    ordinal of its first occurrence and the vector of its last.
    """

    def __init__(self, embedder: Embedder):
        self._embedder = embedder
        self._chunks: Dict[str, Chunk] = {}
        self._vectors: Dict[str, List[float]] = {}

    def build(self, chunks: Sequence[Union[str, Chunk]]) -> int:
        """
        Embed every non-blank chunk, in order, and replace the index contents.

        A failed embedding call aborts the whole build: the index is left
        empty and ProviderFailure is raised.

        Args:
            chunks: Chunk records or plain strings (ordinal = position).

        Returns:
            Number of entries in the rebuilt index.
        """
        self.clear()
        new_chunks: Dict[str, Chunk] = {}
        new_vectors: Dict[str, List[float]] = {}
        for position, item in enumerate(chunks):
            if isinstance(item, Chunk):
                text, ordinal = item.text, item.ordinal
            else:
                text, ordinal = (item or "").strip(), position
            if not text:
                continue
            try:
                vector = list(self._embedder(text))
            except Exception as e:
                logger.error("Embedding failed for chunk %d; aborting index build: %s", ordinal, e)
                raise ProviderFailure("Error embedding document chunk", str(e)) from e
            if text not in new_chunks:
                new_chunks[text] = Chunk(text=text, ordinal=ordinal)
            new_vectors[text] = vector
        self._chunks = new_chunks
        self._vectors = new_vectors
        logger.info("Built retrieval index with %d entries from %d chunks", len(new_vectors), len(chunks))
        return len(self._vectors)

    def clear(self) -> None:
        self._chunks = {}
        self._vectors = {}

    def __len__(self) -> int:
        return len(self._vectors)

    @property
    def is_empty(self) -> bool:
        return not self._vectors

    @property
    def chunks(self) -> List[Chunk]:
        """Indexed chunks in ordinal order."""
        return sorted(self._chunks.values(), key=lambda chunk: chunk.ordinal)

    def keys(self) -> List[str]:
        """Indexed chunk texts in ordinal order."""
        return [chunk.text for chunk in self.chunks]

    def vector(self, text: str) -> Optional[List[float]]:
        return self._vectors.get(text)

    def candidates(self) -> List[Candidate]:
        return [(text, self._vectors[text]) for text in self.keys()]

    def find_closest(self, query_vector: Sequence[float], top_n: int = DEFAULT_CONTEXT_TOP_N) -> List[str]:
        return find_closest(query_vector, self.candidates(), top_n)

    def find_closest_with_score(
        self,
        query_vector: Sequence[float],
        top_n: int = DEFAULT_TOP_N,
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> List[SimilarityResult]:
        return find_closest_with_score(query_vector, self.candidates(), top_n, min_score)

    def embed_query(self, query: str) -> List[float]:
        """Embed a query with the same provider used at build time."""
        return list(self._embedder(query))
