"""
Vector document module.

Defines the in-memory view of a stored document: an id, a title, free-form
string metadata and a dense embedding vector. The on-disk shape lives in
semantix_core.persistence.json_codec and is converted explicitly.
"""

from typing import Dict, Optional, Any

import numpy as np

from semantix_core.vector.vector_math import VECTOR_DTYPE, VectorLike


class VectorDocument:
    """
    A document carrying a dense embedding.

    The vector is copied into a read-only NumPy buffer on construction, so a
    document handed out by a store snapshot cannot be changed under a
    concurrent search. Construction does not validate content; the document
    store does that on upsert.
    """

    __slots__ = ("doc_id", "title", "metadata", "vector")

    def __init__(
        self,
        doc_id: str,
        title: str = "",
        metadata: Optional[Dict[str, str]] = None,
        vector: Optional[VectorLike] = None,
    ):
        """
        Initialize a VectorDocument.

        Args:
            doc_id: Unique key of the document within a store
            title: Human readable title
            metadata: String to string mapping (defaults to empty)
            vector: Ordered sequence of floats; None is kept as None so the
                store can reject it
        """
        self.doc_id = doc_id
        self.title = title
        self.metadata = dict(metadata) if metadata is not None else {}
        self.vector = self._freeze(vector)

    @staticmethod
    def _freeze(vector: Optional[VectorLike]) -> Optional[np.ndarray]:
        if vector is None:
            return None
        try:
            array = np.array(vector, dtype=VECTOR_DTYPE)
        except (TypeError, ValueError, OverflowError):
            # Left as given; InvalidDocumentError is raised at upsert time.
            return vector
        array.setflags(write=False)
        return array

    @property
    def dimension(self) -> int:
        """Number of vector components (0 when there is no vector)."""
        if self.vector is None:
            return 0
        return len(self.vector)

    def replace(self, **changes: Any) -> "VectorDocument":
        """
        Return a copy with the given fields replaced.

        Args:
            **changes: Any of doc_id, title, metadata, vector

        Returns:
            A new VectorDocument
        """
        fields = {
            "doc_id": self.doc_id,
            "title": self.title,
            "metadata": self.metadata,
            "vector": self.vector,
        }
        unknown = set(changes) - set(fields)
        if unknown:
            raise TypeError(f"Unknown document fields: {sorted(unknown)}")
        fields.update(changes)
        return VectorDocument(**fields)

    def __eq__(self, other):
        if not isinstance(other, VectorDocument):
            return NotImplemented

        if self.vector is None or other.vector is None:
            vectors_equal = self.vector is None and other.vector is None
        else:
            vectors_equal = np.array_equal(self.vector, other.vector)

        return (
            self.doc_id == other.doc_id
            and self.title == other.title
            and self.metadata == other.metadata
            and vectors_equal
        )

    __hash__ = None

    def __repr__(self):
        title = f"{self.title[:30]}{'...' if len(self.title) > 30 else ''}"
        return (
            f"VectorDocument(doc_id='{self.doc_id}', "
            f"title='{title}', "
            f"metadata_keys={len(self.metadata)}, "
            f"dimension={self.dimension})"
        )
