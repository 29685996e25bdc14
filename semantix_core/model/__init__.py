from .vector_document import VectorDocument

__all__ = ["VectorDocument"]
