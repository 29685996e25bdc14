"""
Brute-force cosine similarity search over a DocumentStore.

Every document in a store snapshot is scored against the query and the top N
are returned, highest score first. Documents with equal scores keep the
store's iteration order, which is itself unspecified, so the relative order of
ties is unspecified too. Callers must not depend on it.
"""

import heapq
from typing import List, NamedTuple, Sequence

from semantix_core.exceptions import (
    DegenerateVectorError,
    DimensionMismatchError,
    InvalidDocumentError,
)
from semantix_core.model.vector_document import VectorDocument
from semantix_core.monitoring.structured_logger import get_logger
from semantix_core.store.document_store import DocumentStore
from semantix_core.vector.vector_math import (
    as_vector,
    cosine_similarity,
    is_finite,
    normalize,
)

logger = get_logger(__name__, component="search_index")


class SearchResult(NamedTuple):
    """A ranked document and its cosine similarity to the query, in [-1, 1]."""

    document: VectorDocument
    score: float


class SearchIndex:
    """
    Ranks the documents of a store against a query vector.

    Incompatible documents (wrong dimension, zero vector) are handled according
    to ``skip_incompatible``:

    - False (default): the first incompatible document aborts the search and
      its DimensionMismatchError or DegenerateVectorError propagates.
    - True: incompatible documents are left out of the ranking and logged.

    A problem with the query itself always raises.
    """

    def __init__(self, store: DocumentStore, skip_incompatible: bool = False):
        self.store = store
        self.skip_incompatible = skip_incompatible

    def search(self, query_vector: Sequence[float], top_n: int) -> List[SearchResult]:
        """
        Return the top_n documents most similar to query_vector.

        Args:
            query_vector: Query embedding
            top_n: Maximum number of results; values <= 0 give an empty list
                without the query being checked any further

        Returns:
            Results sorted by descending score, at most min(top_n, store size)

        Raises:
            InvalidDocumentError: If the query is empty or not finite
            DegenerateVectorError: If the query is a zero vector, or a stored
                vector is and skip_incompatible is False
            DimensionMismatchError: If a stored vector has a different length
                and skip_incompatible is False
        """
        if query_vector is None:
            raise InvalidDocumentError("Query vector is required")
        if top_n <= 0:
            return []

        query = as_vector(query_vector)
        if query.shape[0] == 0:
            raise InvalidDocumentError("Query vector must not be empty")
        if not is_finite(query):
            raise InvalidDocumentError("Query vector must contain only finite values")
        # Normalizing up front reports a zero query even when the store is empty.
        normalize(query)

        scored: List[SearchResult] = []
        skipped = 0
        for doc in self.store.get_all():
            try:
                score = cosine_similarity(doc.vector, query)
            except (DimensionMismatchError, DegenerateVectorError) as e:
                if not self.skip_incompatible:
                    raise
                skipped += 1
                logger.warning(
                    "Skipping incompatible document",
                    doc_id=doc.doc_id,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                continue
            scored.append(SearchResult(doc, score))

        # nlargest is stable, so ties stay in snapshot order.
        results = heapq.nlargest(top_n, scored, key=lambda result: result.score)

        logger.debug(
            "Search completed",
            dimension=query.shape[0],
            top_n=top_n,
            scored=len(scored),
            skipped=skipped,
            returned=len(results),
        )
        return results
