"""
Retrieval logic with score filtering and optional MMR.

Queries the vector index by plain similarity or max marginal relevance,
filters candidates by score with a looser fallback threshold, and reports
the average score of what survived.

Dependencies: kb_assistant.boundary.vdb, kb_assistant.configs
System role: RAG retrieval business logic
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from kb_assistant.boundary.vdb.vector_index import VectorIndex
from kb_assistant.configs.retrieval import RetrievalSettings
from kb_assistant.models.chunk import DocumentChunk, ScoredCandidate

logger = logging.getLogger(__name__)

RetrievalMode = Literal["similarity", "mmr"]


@dataclass(frozen=True)
class RetrievalResult:
    """Outcome of one retrieval pass."""

    candidates: list[ScoredCandidate]
    selected: list[ScoredCandidate]
    avg_score: float
    mode: RetrievalMode
    threshold_used: float | None = None
    fallback_used: bool = False
    unmatched_ids: list[str] = field(default_factory=list)

    @property
    def chunks(self) -> list[DocumentChunk]:
        return [candidate.chunk for candidate in self.selected]


def filter_by_score(
    candidates: list[ScoredCandidate],
    threshold: float,
    fallback: float,
) -> tuple[list[ScoredCandidate], float | None]:
    """
    Keep candidates scoring at least threshold, else at least fallback.

    Args:
        candidates: Scored candidates in ranked order
        threshold: Primary similarity threshold
        fallback: Looser threshold applied when nothing passes the primary one

    Returns:
        tuple: (selected candidates in original order, threshold that applied or None)
    """
    primary = [c for c in candidates if c.score >= threshold]
    if primary:
        return primary, threshold

    secondary = [c for c in candidates if c.score >= fallback]
    if secondary:
        return secondary, fallback

    return [], None


def average_score(candidates: list[ScoredCandidate]) -> float:
    if not candidates:
        return 0.0
    return sum(c.score for c in candidates) / len(candidates)


class Retriever:
    """Retrieval business logic."""

    def __init__(self, vector_index: VectorIndex) -> None:
        """Initialize retriever with vector index."""
        self.vector_index = vector_index

    def search(
        self,
        query: str,
        k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[ScoredCandidate]:
        """Top-k scored candidates, unfiltered by score."""
        return self.vector_index.similarity_search_with_score(query, k=k, filter=filter)

    def _mmr_candidates(
        self,
        query: str,
        k: int,
        filter: dict[str, Any] | None,
        settings: RetrievalSettings,
    ) -> tuple[list[ScoredCandidate], list[str]]:
        fetch_k = settings.mmr_fetch_k or 4 * k
        diverse = self.vector_index.max_marginal_relevance_search(
            query,
            k=k,
            fetch_k=fetch_k,
            lambda_mult=settings.mmr_lambda,
            filter=filter,
        )
        if not diverse:
            return [], []

        # MMR returns no scores; recover them from a wider scored search by text
        scored = self.vector_index.similarity_search_with_score(query, k=2 * k, filter=filter)
        score_by_text: dict[str, float] = {}
        for candidate in scored:
            score_by_text.setdefault(candidate.chunk.text, candidate.score)

        candidates: list[ScoredCandidate] = []
        unmatched: list[str] = []
        for chunk in diverse:
            score = score_by_text.get(chunk.text)
            if score is None:
                # Approximation: the chunk fell outside the scored pool
                score = settings.mmr_unmatched_score
                unmatched.append(chunk.chunk_id)
            candidates.append(ScoredCandidate(chunk=chunk, score=score))

        if unmatched:
            logger.debug(
                f"{__name__}:_mmr_candidates - {len(unmatched)} MMR results outside scored pool, "
                f"assigned {settings.mmr_unmatched_score}"
            )
        return candidates, unmatched

    def retrieve(
        self,
        query: str,
        k: int,
        filter: dict[str, Any] | None,
        settings: RetrievalSettings,
    ) -> RetrievalResult:
        """
        Retrieve and score-filter chunks for query.

        Args:
            query: User question
            k: Number of candidates to fetch
            filter: Metadata equality filter
            settings: Thresholds and MMR parameters

        Returns:
            RetrievalResult: Candidates, selection, and average score. An empty
            selection means nothing relevant is indexed.

        Raises:
            VectorStoreError: When the vector index fails
        """
        unmatched: list[str] = []
        if settings.use_mmr:
            mode: RetrievalMode = "mmr"
            candidates, unmatched = self._mmr_candidates(query, k, filter, settings)
        else:
            mode = "similarity"
            candidates = self.search(query, k, filter)

        selected, threshold_used = filter_by_score(
            candidates,
            settings.similarity_threshold,
            settings.fallback_threshold,
        )
        fallback_used = bool(selected) and threshold_used != settings.similarity_threshold
        avg = average_score(selected)

        logger.info(
            f"{__name__}:retrieve - mode={mode}, candidates={len(candidates)}, "
            f"selected={len(selected)}, avg_score={avg:.3f}, fallback={fallback_used}"
        )
        return RetrievalResult(
            candidates=candidates,
            selected=selected,
            avg_score=avg,
            mode=mode,
            threshold_used=threshold_used,
            fallback_used=fallback_used,
            unmatched_ids=unmatched,
        )
