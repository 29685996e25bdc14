"""
In-memory vector index.

VectorIndex is the single entry point most callers need: it owns a
DocumentStore, ranks it with a SearchIndex and persists it with the JSON codec.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from semantix_core.config.config_manager import ConfigManager, get_config
from semantix_core.index.vector_store_interface import VectorStoreInterface
from semantix_core.model.vector_document import VectorDocument
from semantix_core.persistence import json_codec
from semantix_core.search.search_index import SearchIndex, SearchResult
from semantix_core.store.document_store import DEFAULT_SHARD_COUNT, DocumentStore


class VectorIndex(VectorStoreInterface):
    """
    Thread-safe in-memory store with cosine similarity search and JSON
    export/import.

    Export and import do not lock the store. An export running alongside
    writers captures whatever the snapshot happens to see.
    """

    def __init__(
        self,
        shard_count: int = DEFAULT_SHARD_COUNT,
        skip_incompatible: bool = False,
        pretty_print: bool = True,
    ):
        """
        Initialize an empty index.

        Args:
            shard_count: Number of lock partitions in the document store
            skip_incompatible: Skip stored vectors that cannot be compared with
                the query instead of failing the search
            pretty_print: Indent exported JSON
        """
        self.store = DocumentStore(shard_count=shard_count)
        self.search_index = SearchIndex(self.store, skip_incompatible=skip_incompatible)
        self.pretty_print = pretty_print

    @classmethod
    def from_config(cls, config: Optional[ConfigManager] = None) -> "VectorIndex":
        """Build an index from the (global) configuration manager."""
        config = config or get_config()
        return cls(**config.get_index_config())

    def add(self, doc: VectorDocument) -> bool:
        return self.store.upsert(doc)

    def delete(self, doc_id: str) -> bool:
        return self.store.delete(doc_id)

    def get(self, doc_id: str) -> Optional[VectorDocument]:
        return self.store.get(doc_id)

    def get_all(self) -> List[VectorDocument]:
        return self.store.get_all()

    def count(self) -> int:
        return self.store.count()

    def clear(self) -> None:
        self.store.clear()

    def search(self, query_vector: Sequence[float], top_n: int) -> List[SearchResult]:
        return self.search_index.search(query_vector, top_n)

    def export(self, path: Union[str, Path]) -> int:
        return json_codec.export_documents(self.get_all(), path, pretty_print=self.pretty_print)

    def import_file(self, path: Union[str, Path]) -> int:
        return json_codec.import_documents(path, self.store)

    async def export_async(self, path: Union[str, Path]) -> int:
        return await json_codec.export_documents_async(
            self.get_all(), path, pretty_print=self.pretty_print
        )

    async def import_file_async(self, path: Union[str, Path]) -> int:
        return await json_codec.import_documents_async(path, self.store)
