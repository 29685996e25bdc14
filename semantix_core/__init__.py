"""
Semantix core: an in-memory vector similarity search engine.

Documents carry a dense embedding; the engine supports upsert, delete, top-N
cosine similarity search and JSON export/import.
"""

from semantix_core.exceptions import (
    SemantixError,
    InvalidDocumentError,
    DimensionMismatchError,
    DegenerateVectorError,
    PersistenceIOError,
    SerializationError,
    ConfigValidationError,
)
from semantix_core.model.vector_document import VectorDocument
from semantix_core.store.document_store import DocumentStore
from semantix_core.search.search_index import SearchIndex, SearchResult
from semantix_core.index.vector_index import VectorIndex

__version__ = "0.1.0"

__all__ = [
    "SemantixError",
    "InvalidDocumentError",
    "DimensionMismatchError",
    "DegenerateVectorError",
    "PersistenceIOError",
    "SerializationError",
    "ConfigValidationError",
    "VectorDocument",
    "DocumentStore",
    "SearchIndex",
    "SearchResult",
    "VectorIndex",
    "__version__",
]
