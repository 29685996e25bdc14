from .document_store import DocumentStore, DEFAULT_SHARD_COUNT, validate_document

__all__ = ["DocumentStore", "DEFAULT_SHARD_COUNT", "validate_document"]
