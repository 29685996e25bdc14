from .vector_store_interface import VectorStoreInterface
from .vector_index import VectorIndex

__all__ = ["VectorStoreInterface", "VectorIndex"]
