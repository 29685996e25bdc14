"""
Vector math primitives for similarity search.

All functions are pure: they never modify their inputs and always return new
values. Vectors are one-dimensional NumPy arrays of VECTOR_DTYPE; any ordered
sequence of numbers is accepted and converted on the way in.
"""

from typing import Sequence, Union

import numpy as np

from semantix_core.exceptions import (
    DegenerateVectorError,
    DimensionMismatchError,
    InvalidDocumentError,
)

VECTOR_DTYPE = np.float32

VectorLike = Union[np.ndarray, Sequence[float]]


def as_vector(values: VectorLike) -> np.ndarray:
    """
    Convert an ordered sequence of numbers into a dense vector buffer.

    Args:
        values: List, tuple or array of numbers

    Returns:
        One-dimensional array of VECTOR_DTYPE

    Raises:
        InvalidDocumentError: If the values are not a flat numeric sequence
    """
    if isinstance(values, np.ndarray) and values.dtype == VECTOR_DTYPE and values.ndim == 1:
        return values

    if isinstance(values, (str, bytes)):
        raise InvalidDocumentError("Vector must be a sequence of numbers, not a string")

    try:
        array = np.asarray(values, dtype=VECTOR_DTYPE)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidDocumentError(f"Vector must contain only numbers: {e}") from e

    if array.ndim != 1:
        raise InvalidDocumentError(f"Vector must be one-dimensional, got {array.ndim} dimensions")

    return array


def is_finite(v: VectorLike) -> bool:
    """Return True if no component is NaN or infinite."""
    return bool(np.all(np.isfinite(as_vector(v))))


def dot(a: VectorLike, b: VectorLike) -> float:
    """
    Sum of element-wise products.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    a = as_vector(a)
    b = as_vector(b)
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatchError(a.shape[0], b.shape[0])
    return float(np.dot(a.astype(np.float64), b.astype(np.float64)))


def norm(v: VectorLike) -> float:
    """Euclidean (L2) length of a vector."""
    # Squares of any finite float32 component fit in float64 without overflow or underflow.
    return float(np.linalg.norm(as_vector(v).astype(np.float64)))


def normalize(v: VectorLike) -> np.ndarray:
    """
    Scale a vector to unit length.

    Raises:
        DegenerateVectorError: If the vector has zero length
    """
    v = as_vector(v)
    length = norm(v)
    if length == 0:
        raise DegenerateVectorError()
    return (v.astype(np.float64) / length).astype(VECTOR_DTYPE)


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine of the angle between two vectors.

    The dimension check runs before normalization, so a length mismatch is
    reported even when one side is also a zero vector. Rounding can push the
    raw value slightly outside [-1, 1]; the result is clamped to that range.

    Raises:
        DimensionMismatchError: If the vectors differ in length
        DegenerateVectorError: If either vector has zero length
        InvalidDocumentError: If either vector holds NaN or infinite values
    """
    a = as_vector(a)
    b = as_vector(b)
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatchError(a.shape[0], b.shape[0])
    score = dot(normalize(a), normalize(b))
    if not np.isfinite(score):
        raise InvalidDocumentError("Cosine similarity is undefined for non-finite vectors")
    return min(1.0, max(-1.0, score))
