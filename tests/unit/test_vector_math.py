"""
Tests for the vector math primitives.
"""

import math

import numpy as np
import pytest

from semantix_core.exceptions import (
    DegenerateVectorError,
    DimensionMismatchError,
    InvalidDocumentError,
)
from semantix_core.vector.vector_math import (
    VECTOR_DTYPE,
    as_vector,
    cosine_similarity,
    dot,
    is_finite,
    norm,
    normalize,
)


class TestAsVector:
    """Test conversion into the dense buffer."""

    def test_list_is_converted(self):
        vector = as_vector([1, 2.5, -3])

        assert isinstance(vector, np.ndarray)
        assert vector.dtype == VECTOR_DTYPE
        assert vector.tolist() == [1.0, 2.5, -3.0]

    def test_string_is_rejected(self):
        with pytest.raises(InvalidDocumentError):
            as_vector("1,2,3")

    def test_nested_sequence_is_rejected(self):
        with pytest.raises(InvalidDocumentError):
            as_vector([[1.0, 2.0], [3.0, 4.0]])

    def test_non_numeric_is_rejected(self):
        with pytest.raises(InvalidDocumentError):
            as_vector(["a", "b"])

    def test_is_finite(self):
        assert is_finite([1.0, 2.0])
        assert not is_finite([1.0, float("nan")])
        assert not is_finite([float("inf"), 0.0])


class TestDotAndNorm:
    """Test dot product and Euclidean norm."""

    def test_dot(self):
        assert dot([1, 2, 3], [4, 5, 6]) == pytest.approx(32.0)

    def test_dot_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            dot([1, 2], [1, 2, 3])

        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3

    def test_norm(self):
        assert norm([3, 4]) == pytest.approx(5.0)
        assert norm([0, 0]) == 0.0


class TestNormalize:
    """Test normalization to unit length."""

    def test_normalize_gives_unit_length(self):
        unit = normalize([3.0, 4.0])

        assert unit.tolist() == pytest.approx([0.6, 0.8])
        assert norm(unit) == pytest.approx(1.0)

    def test_normalize_zero_vector_fails(self):
        with pytest.raises(DegenerateVectorError):
            normalize([0, 0])

    def test_normalize_does_not_modify_input(self):
        original = np.array([3.0, 4.0], dtype=VECTOR_DTYPE)
        normalize(original)

        assert original.tolist() == [3.0, 4.0]

    @pytest.mark.parametrize("magnitude", [1e30, 1e-30])
    def test_normalize_extreme_magnitudes(self, magnitude):
        unit = normalize([magnitude, magnitude])

        assert unit.dtype == VECTOR_DTYPE
        assert unit.tolist() == pytest.approx([1 / math.sqrt(2)] * 2, abs=1e-6)

    def test_norm_of_large_vector_is_finite(self):
        assert norm([1e30, 1e30]) == pytest.approx(math.sqrt(2) * 1e30, rel=1e-6)


class TestCosineSimilarity:
    """Test cosine similarity."""

    @pytest.mark.parametrize(
        "vector",
        [[1.0, 0.0], [0.3, -2.0, 5.5], [1e-3, 1e-3, 1e-3], [123.0, 456.0, -789.0, 1.0]],
    )
    def test_self_similarity_is_one(self, vector):
        assert cosine_similarity(vector, vector) == pytest.approx(1.0, abs=1e-6)

    @pytest.mark.parametrize("magnitude", [1e20, 1e30, 1e-20, 1e-30])
    def test_self_similarity_at_extreme_magnitudes(self, magnitude):
        vector = [magnitude, magnitude, -magnitude]

        assert cosine_similarity(vector, vector) == pytest.approx(1.0, abs=1e-6)

    def test_symmetry(self):
        a = [0.2, -1.3, 4.0, 0.5]
        b = [1.1, 0.4, -0.7, 2.2]

        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_orthogonal_and_opposite(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0, abs=1e-7)
        assert cosine_similarity([1, 0], [-2, 0]) == pytest.approx(-1.0)

    def test_independent_of_magnitude(self):
        assert cosine_similarity([1, 1], [10, 10]) == pytest.approx(1.0, abs=1e-6)

    def test_diagonal_example(self):
        assert cosine_similarity([1, 0], [0.7, 0.7]) == pytest.approx(1 / math.sqrt(2), abs=1e-6)

    def test_score_is_clamped(self):
        rng = np.random.default_rng(7)
        for _ in range(50):
            v = rng.normal(size=32)
            score = cosine_similarity(v, v * 3.0)
            assert -1.0 <= score <= 1.0

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1, 0], [1, 0, 0])

    def test_dimension_checked_before_degenerate(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([0, 0], [1, 0, 0])

    def test_degenerate_vector(self):
        with pytest.raises(DegenerateVectorError):
            cosine_similarity([0, 0], [1, 0])
        with pytest.raises(DegenerateVectorError):
            cosine_similarity([1, 0], [0, 0])

    @pytest.mark.parametrize("bad", [math.nan, math.inf])
    def test_non_finite_vector_is_rejected(self, bad):
        with pytest.raises(InvalidDocumentError):
            cosine_similarity([bad, 1.0], [1.0, 0.0])
