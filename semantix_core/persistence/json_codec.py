"""
JSON persistence for document collections.

The file format is a JSON array of objects::

    [
      {
        "Id": "doc-1",
        "Title": "First document",
        "Metadata": {"lang": "en"},
        "Vector": [0.1, 0.2, 0.3]
      }
    ]

There is no schema version field. Files written by this module and by earlier
versions of the engine are interchangeable.

On the wire a vector is a plain list of numbers (DocumentRecord); in memory it
is a dense array (VectorDocument). record_from_document and
document_from_record are the only places the two views meet.
"""

import asyncio
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from semantix_core.exceptions import InvalidDocumentError, PersistenceIOError, SerializationError
from semantix_core.model.vector_document import VectorDocument
from semantix_core.monitoring.structured_logger import OperationLogger, get_logger
from semantix_core.store.document_store import DocumentStore, validate_document

logger = get_logger(__name__, component="json_codec")

PathLike = Union[str, Path]

FIELD_ID = "Id"
FIELD_TITLE = "Title"
FIELD_METADATA = "Metadata"
FIELD_VECTOR = "Vector"

REQUIRED_FIELDS = (FIELD_ID, FIELD_TITLE, FIELD_METADATA, FIELD_VECTOR)


@dataclass
class DocumentRecord:
    """Serialized form of a document, field for field with the JSON object."""

    id: str
    title: str
    metadata: Dict[str, str] = field(default_factory=dict)
    vector: List[float] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            FIELD_ID: self.id,
            FIELD_TITLE: self.title,
            FIELD_METADATA: dict(self.metadata),
            FIELD_VECTOR: list(self.vector),
        }

    @classmethod
    def from_json(cls, data: Any, position: int = 0) -> "DocumentRecord":
        """
        Build a record from a decoded JSON object.

        Args:
            data: Decoded JSON value for one document
            position: Index in the source array, used in error messages

        Raises:
            SerializationError: If fields are missing or have the wrong type
        """
        if not isinstance(data, dict):
            raise SerializationError(f"Document #{position} is not a JSON object")

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise SerializationError(f"Document #{position} is missing required fields: {missing}")

        doc_id = data[FIELD_ID]
        title = data[FIELD_TITLE]
        metadata = data[FIELD_METADATA]
        vector = data[FIELD_VECTOR]

        if not isinstance(doc_id, str):
            raise SerializationError(f"Document #{position}: '{FIELD_ID}' must be a string")
        if not isinstance(title, str):
            raise SerializationError(f"Document #{position}: '{FIELD_TITLE}' must be a string")
        if not isinstance(metadata, dict) or not all(
            isinstance(value, str) for value in metadata.values()
        ):
            raise SerializationError(
                f"Document #{position}: '{FIELD_METADATA}' must be an object of strings"
            )
        # bool is an int subclass but never a valid vector component
        if not isinstance(vector, list) or not all(
            isinstance(value, (int, float)) and not isinstance(value, bool) for value in vector
        ):
            raise SerializationError(
                f"Document #{position}: '{FIELD_VECTOR}' must be an array of numbers"
            )

        return cls(id=doc_id, title=title, metadata=metadata, vector=vector)


def record_from_document(doc: VectorDocument) -> DocumentRecord:
    """Convert the in-memory view to the wire view."""
    return DocumentRecord(
        id=doc.doc_id,
        title=doc.title,
        metadata=dict(doc.metadata),
        vector=[float(value) for value in doc.vector],
    )


def document_from_record(record: DocumentRecord) -> VectorDocument:
    """Convert the wire view to the in-memory view."""
    return VectorDocument(
        doc_id=record.id,
        title=record.title,
        metadata=record.metadata,
        vector=record.vector,
    )


def _reject_constant(name: str):
    # json accepts NaN/Infinity literals by default; the format does not.
    raise ValueError(f"Non-finite number {name} is not allowed")


def export_documents(
    documents: Iterable[VectorDocument], path: PathLike, pretty_print: bool = True
) -> int:
    """
    Write documents to a JSON file, replacing any existing file.

    Missing parent directories are created first.

    Args:
        documents: Documents to write (typically a store snapshot)
        path: Destination file
        pretty_print: Indent the output for readability

    Returns:
        Number of documents written

    Raises:
        PersistenceIOError: If the directory or file cannot be written
        SerializationError: If a document cannot be encoded
    """
    path = Path(path)
    with OperationLogger(logger, "export") as op:
        op.context["path"] = str(path)
        records = [record_from_document(doc).to_json() for doc in documents]

        try:
            payload = json.dumps(
                records, indent=2 if pretty_print else None, ensure_ascii=False, allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode documents: {e}") from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as e:
            raise PersistenceIOError(f"Failed to write {path}: {e}", path=path) from e

        op.context["documents"] = len(records)
        return len(records)


def load_documents(path: PathLike) -> List[VectorDocument]:
    """
    Read and decode a JSON document file without storing anything.

    Raises:
        PersistenceIOError: If the file is missing or unreadable
        SerializationError: If the content is not a valid document array
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise PersistenceIOError(f"Failed to read {path}: {e}", path=path) from e

    try:
        data = json.loads(content, parse_constant=_reject_constant)
    except ValueError as e:
        raise SerializationError(f"Malformed JSON in {path}: {e}") from e

    if not isinstance(data, list):
        raise SerializationError(f"Expected a JSON array of documents in {path}")

    documents = []
    for position, item in enumerate(data):
        record = DocumentRecord.from_json(item, position)
        if any(not math.isfinite(value) for value in record.vector):
            raise SerializationError(f"Document #{position}: vector values must be finite")
        documents.append(document_from_record(record))
    return documents


def import_documents(path: PathLike, store: DocumentStore) -> int:
    """
    Upsert every document in a JSON file into a store.

    The whole file is decoded and validated before the first upsert, so a bad
    file leaves the store untouched. Importing the same file twice gives the
    same final state as importing it once.

    Args:
        path: Source file
        store: Destination store

    Returns:
        Number of documents imported

    Raises:
        PersistenceIOError: If the file is missing or unreadable
        SerializationError: If the content is malformed or a document is
            incomplete or invalid
    """
    with OperationLogger(logger, "import") as op:
        op.context["path"] = str(path)
        documents = load_documents(path)

        for position, doc in enumerate(documents):
            try:
                validate_document(doc)
            except InvalidDocumentError as e:
                raise SerializationError(f"Document #{position} is invalid: {e}") from e

        count = store.upsert_many(documents)
        op.context["documents"] = count
        return count


async def export_documents_async(
    documents: Iterable[VectorDocument], path: PathLike, pretty_print: bool = True
) -> int:
    """Run export_documents on a worker thread."""
    # Snapshot on the caller's side so the worker only does file I/O.
    documents = list(documents)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, export_documents, documents, path, pretty_print)


async def import_documents_async(path: PathLike, store: DocumentStore) -> int:
    """Run import_documents on a worker thread."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, import_documents, path, store)
