from .vector_math import (
    VECTOR_DTYPE,
    as_vector,
    cosine_similarity,
    dot,
    is_finite,
    norm,
    normalize,
)

__all__ = [
    "VECTOR_DTYPE",
    "as_vector",
    "cosine_similarity",
    "dot",
    "is_finite",
    "norm",
    "normalize",
]
