"""
Abstract interface for vector stores.

Defines the operations a caller (such as the CLI) relies on, independent of how
documents are held or ranked.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Union

from semantix_core.model.vector_document import VectorDocument
from semantix_core.search.search_index import SearchResult


class VectorStoreInterface(ABC):
    """
    Abstract base class for vector store implementations.
    """

    @abstractmethod
    def add(self, doc: VectorDocument) -> bool:
        """
        Insert or replace a document by id.

        Returns:
            True if the document was new, False if it replaced an existing one
        """
        pass

    @abstractmethod
    def delete(self, doc_id: str) -> bool:
        """
        Remove a document.

        Returns:
            True if a document was removed, False if it did not exist
        """
        pass

    @abstractmethod
    def get(self, doc_id: str) -> Optional[VectorDocument]:
        pass

    @abstractmethod
    def get_all(self) -> List[VectorDocument]:
        """Return a snapshot of all documents."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def search(self, query_vector: Sequence[float], top_n: int) -> List[SearchResult]:
        """
        Rank documents by cosine similarity to the query.

        Returns:
            At most top_n results, highest score first
        """
        pass

    @abstractmethod
    def export(self, path: Union[str, Path]) -> int:
        """
        Write all documents to a JSON file.

        Returns:
            Number of documents written
        """
        pass

    @abstractmethod
    def import_file(self, path: Union[str, Path]) -> int:
        """
        Upsert all documents from a JSON file.

        Returns:
            Number of documents imported
        """
        pass

    def upsert(self, doc: VectorDocument) -> bool:
        """Alias of add()."""
        return self.add(doc)

    def __len__(self) -> int:
        return self.count()

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(documents={self.count()})"
