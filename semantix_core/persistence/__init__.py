from .json_codec import (
    DocumentRecord,
    record_from_document,
    document_from_record,
    export_documents,
    import_documents,
    load_documents,
    export_documents_async,
    import_documents_async,
)

__all__ = [
    "DocumentRecord",
    "record_from_document",
    "document_from_record",
    "export_documents",
    "import_documents",
    "load_documents",
    "export_documents_async",
    "import_documents_async",
]
