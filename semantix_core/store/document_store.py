"""
Thread-safe keyed document store.

Documents are spread over a fixed number of shards by hashing their id. Each
shard is a plain dict guarded by its own lock, so writers touching different
keys rarely contend and no operation takes a store-wide lock.

Reads that cover the whole store (get_all, count, iteration) visit the shards
one after another. They are snapshot reads: a concurrent upsert or delete may
or may not be reflected, and the result is never atomic across the scan.
"""

from threading import Lock
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np

from semantix_core.exceptions import InvalidDocumentError
from semantix_core.model.vector_document import VectorDocument
from semantix_core.monitoring.structured_logger import get_logger
from semantix_core.vector.vector_math import as_vector

DEFAULT_SHARD_COUNT = 16

logger = get_logger(__name__, component="document_store")


def validate_document(doc: VectorDocument) -> None:
    """
    Check that a document can be stored.

    Raises:
        InvalidDocumentError: If the id is empty, the vector is missing, empty
            or non-finite, or metadata is not a string to string mapping
    """
    if not isinstance(doc, VectorDocument):
        raise InvalidDocumentError(f"Expected VectorDocument, got {type(doc).__name__}")

    if not isinstance(doc.doc_id, str) or not doc.doc_id:
        raise InvalidDocumentError("Document id must be a non-empty string")

    if not isinstance(doc.title, str):
        raise InvalidDocumentError(f"Document {doc.doc_id}: title must be a string")

    for key, value in doc.metadata.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidDocumentError(
                f"Document {doc.doc_id}: metadata must map strings to strings"
            )

    if doc.vector is None:
        raise InvalidDocumentError(f"Document {doc.doc_id}: vector is required")

    vector = as_vector(doc.vector)
    if vector.shape[0] == 0:
        raise InvalidDocumentError(f"Document {doc.doc_id}: vector must not be empty")

    if not np.all(np.isfinite(vector)):
        raise InvalidDocumentError(f"Document {doc.doc_id}: vector contains NaN or infinite values")


class _Shard:
    __slots__ = ("lock", "documents")

    def __init__(self):
        self.lock = Lock()
        self.documents: Dict[str, VectorDocument] = {}


class DocumentStore:
    """
    Mapping from document id to VectorDocument with upsert semantics.

    Safe for concurrent use from multiple threads without caller-side locking.
    Iteration order is unspecified and may change between calls.
    """

    def __init__(self, shard_count: int = DEFAULT_SHARD_COUNT):
        """
        Initialize an empty store.

        Args:
            shard_count: Number of independently locked partitions
        """
        if shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        self._shards = [_Shard() for _ in range(shard_count)]

    @property
    def shard_count(self) -> int:
        return len(self._shards)

    def _shard_for(self, doc_id: str) -> _Shard:
        return self._shards[hash(doc_id) % len(self._shards)]

    def upsert(self, doc: VectorDocument) -> bool:
        """
        Insert a document, or replace the stored one with the same id.

        Replacement is wholesale: nothing from the previous document is kept.

        Args:
            doc: Document to store

        Returns:
            True if the id was new, False if an existing document was replaced

        Raises:
            InvalidDocumentError: If the document fails validation
        """
        validate_document(doc)
        shard = self._shard_for(doc.doc_id)
        with shard.lock:
            inserted = doc.doc_id not in shard.documents
            shard.documents[doc.doc_id] = doc

        logger.debug(
            "Upserted document",
            doc_id=doc.doc_id,
            action="insert" if inserted else "replace",
            dimension=doc.dimension,
        )
        return inserted

    def upsert_many(self, docs: Iterable[VectorDocument]) -> int:
        """
        Upsert several documents after validating all of them.

        Nothing is stored if any document is invalid.

        Returns:
            Number of documents upserted
        """
        docs = list(docs)
        for doc in docs:
            validate_document(doc)
        for doc in docs:
            self.upsert(doc)
        return len(docs)

    def delete(self, doc_id: str) -> bool:
        """
        Remove a document by id.

        Returns:
            True if a document was removed, False if the id was not present
        """
        shard = self._shard_for(doc_id)
        with shard.lock:
            removed = shard.documents.pop(doc_id, None) is not None

        logger.debug("Deleted document", doc_id=doc_id, removed=removed)
        return removed

    def get(self, doc_id: str) -> Optional[VectorDocument]:
        shard = self._shard_for(doc_id)
        with shard.lock:
            return shard.documents.get(doc_id)

    def contains(self, doc_id: str) -> bool:
        shard = self._shard_for(doc_id)
        with shard.lock:
            return doc_id in shard.documents

    def get_all(self) -> List[VectorDocument]:
        """
        Snapshot of all current documents.

        Each shard is copied under its own lock; the list as a whole may mix
        states from before and after a concurrent mutation.
        """
        documents: List[VectorDocument] = []
        for shard in self._shards:
            with shard.lock:
                documents.extend(shard.documents.values())
        return documents

    def count(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.documents)
        return total

    def clear(self) -> None:
        """Remove every document."""
        for shard in self._shards:
            with shard.lock:
                shard.documents.clear()
        logger.debug("Cleared document store")

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, doc_id) -> bool:
        return isinstance(doc_id, str) and self.contains(doc_id)

    def __iter__(self) -> Iterator[VectorDocument]:
        return iter(self.get_all())

    def __repr__(self):
        return f"DocumentStore(documents={self.count()}, shards={self.shard_count})"
