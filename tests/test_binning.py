"""Tests for NumberBinning, GeneralBinning and the binning factory.

Run:  python -m pytest tests/test_binning.py -v
"""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure histly is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from histly._binning import EPSILON, GeneralBinning, NumberBinning
from histly._binnings import (
    compute_default_bin_count, compute_range, create_general_binning,
    create_number_binning,
)
from histly._errors import InvalidArgumentError, UnbinnedElementError
from histly._types import INVALID_BIN


def _identity(x):
    return x


# ---------------------------------------------------------------------------
# NumberBinning
# ---------------------------------------------------------------------------

class TestNumberBinning:
    def test_values_in_range_land_in_a_bin(self):
        b = NumberBinning(_identity, 0.0, 10.0, 7)
        for v in np.linspace(0.0, 10.0, 101):
            assert 0 <= b.compute_bin(v) < 7

    def test_half_open_bins(self):
        b = NumberBinning(_identity, 0.0, 10.0, 5)
        assert b.compute_bin(0.0) == 0
        assert b.compute_bin(1.999) == 0
        assert b.compute_bin(2.0) == 1
        assert b.compute_bin(9.999) == 4

    def test_max_is_in_last_bin(self):
        b = NumberBinning(_identity, 0.0, 10.0, 5)
        assert b.compute_bin(10.0) == 4

    def test_overshoot_within_epsilon_folds_into_last_bin(self):
        b = NumberBinning(_identity, 0.0, 10.0, 5)
        assert b.compute_bin(10.0 + EPSILON / 2) == 4
        assert b.compute_bin(10.0 + EPSILON) == 4
        assert b.compute_bin(10.000001) == 4

    def test_overshoot_beyond_epsilon_is_invalid(self):
        b = NumberBinning(_identity, 0.0, 10.0, 5)
        assert b.compute_bin(10.0 + 2 * EPSILON) == INVALID_BIN
        assert b.compute_bin(10.00001) == INVALID_BIN

    def test_out_of_range_is_invalid(self):
        b = NumberBinning(_identity, 0.0, 10.0, 5)
        assert b.compute_bin(-0.001) == INVALID_BIN
        assert b.compute_bin(10.1) == INVALID_BIN
        assert b.compute_bin(float("nan")) == INVALID_BIN
        assert b.compute_bin(float("inf")) == INVALID_BIN

    def test_bin_boundaries(self):
        b = NumberBinning(_identity, 2.0, 12.0, 4)
        assert b.bin_min(0) == 2.0
        assert b.bin_max(3) == pytest.approx(12.0, abs=EPSILON)
        for i in range(3):
            assert b.bin_max(i) == pytest.approx(b.bin_min(i + 1))

    def test_bin_edges(self):
        b = NumberBinning(_identity, 0.0, 1.0, 4)
        np.testing.assert_allclose(b.bin_edges(), [0, 0.25, 0.5, 0.75, 1.0])

    def test_degenerate_range(self):
        b = NumberBinning(_identity, 5.0, 5.0, 3)
        assert b.compute_bin(5.0) == 0
        assert b.compute_bin(5.0000005) == 0
        assert b.compute_bin(5.000001) == 0
        assert b.compute_bin(5.0 + EPSILON) == 0
        assert b.compute_bin(5.0 + 2 * EPSILON) == INVALID_BIN
        assert b.compute_bin(6.0) == INVALID_BIN
        assert b.compute_bin(4.0) == INVALID_BIN

    def test_key_extractor_is_applied(self):
        b = NumberBinning(lambda d: d["age"], 0, 100, 10)
        assert b.compute_bin({"age": 42}) == 4

    def test_non_positive_bin_count_rejected(self):
        with pytest.raises(InvalidArgumentError):
            NumberBinning(_identity, 0.0, 1.0, 0)
        with pytest.raises(InvalidArgumentError):
            NumberBinning(_identity, 0.0, 1.0, -3)

    def test_inverted_range_rejected(self):
        with pytest.raises(InvalidArgumentError):
            NumberBinning(_identity, 2.0, 1.0, 3)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class TestCompute:
    def test_empty_gives_zeros(self):
        b = NumberBinning(_identity, 0.0, 1.0, 4)
        assert b.compute([], ignore_invalid=True).tolist() == [0, 0, 0, 0]
        assert b.compute(None).tolist() == [0, 0, 0, 0]

    def test_counts(self):
        b = NumberBinning(_identity, 0.0, 4.0, 4)
        counts = b.compute([0.5, 1.5, 1.7, 3.9, 4.0])
        assert counts.tolist() == [1, 2, 0, 2]

    def test_best_effort_skips_invalid(self):
        b = NumberBinning(_identity, 0.0, 4.0, 4)
        counts = b.compute([-1.0, 0.5, 99.0], ignore_invalid=True)
        assert counts.tolist() == [1, 0, 0, 0]

    def test_strict_raises_on_invalid(self):
        b = NumberBinning(_identity, 0.0, 4.0, 4)
        with pytest.raises(UnbinnedElementError) as info:
            b.compute([0.5, 99.0], ignore_invalid=False)
        assert info.value.element == 99.0

    def test_strict_accepts_valid(self):
        b = NumberBinning(_identity, 0.0, 4.0, 2)
        assert b.compute([0.0, 4.0], ignore_invalid=False).tolist() == [1, 1]


# ---------------------------------------------------------------------------
# GeneralBinning
# ---------------------------------------------------------------------------

class TestGeneralBinning:
    def test_first_seen_order(self):
        elements = ["A", "A", "B", "C", "B"]
        b = GeneralBinning(elements, _identity)
        assert b.keys == ("A", "B", "C")
        assert b.bin_count == 3
        assert [b.compute_bin(e) for e in elements] == [0, 0, 1, 2, 1]

    def test_unseen_key_is_invalid(self):
        b = GeneralBinning(["A", "B"], _identity)
        assert b.compute_bin("Z") == INVALID_BIN

    def test_unhashable_key_is_invalid(self):
        b = GeneralBinning([1, 2], _identity)
        assert b.compute_bin([1]) == INVALID_BIN

    def test_mapping_is_frozen(self):
        elements = ["x", "y"]
        b = GeneralBinning(elements, _identity)
        elements.append("z")
        assert b.bin_count == 2
        assert b.compute_bin("z") == INVALID_BIN

    def test_key_extractor(self):
        b = GeneralBinning([(1, "a"), (2, "b"), (3, "a")], lambda t: t[1])
        assert b.compute([(9, "a"), (8, "b"), (7, "a")]).tolist() == [2, 1]
        assert b.key(1) == "b"

    def test_empty_rejected(self):
        with pytest.raises(InvalidArgumentError):
            GeneralBinning([], _identity)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class TestFactory:
    def test_range_from_data(self):
        assert compute_range([3, 1, 7], _identity) == (1.0, 7.0)

    def test_explicit_range(self):
        assert compute_range([3, 1, 7], _identity, 0, 10) == (0.0, 10.0)

    def test_single_bound_gets_unit_window(self):
        assert compute_range([3, 1, 7], _identity, min=2) == (2.0, 3.0)
        assert compute_range([3, 1, 7], _identity, max=2) == (1.0, 2.0)

    def test_empty_defaults_to_unit_range(self):
        assert compute_range([], _identity) == (0.0, 1.0)

    def test_create_number_binning(self):
        b = create_number_binning([2.0, 4.0, 6.0], _identity, 2)
        assert (b.min, b.max, b.bin_count) == (2.0, 6.0, 2)
        assert b.compute([2.0, 4.0, 6.0]).tolist() == [1, 2]

    def test_create_number_binning_rejects_bad_count(self):
        with pytest.raises(InvalidArgumentError):
            create_number_binning([1.0], _identity, 0)

    def test_create_number_binning_constant_data(self):
        b = create_number_binning([5.0, 5.0], _identity, 3)
        assert b.compute([5.0, 5.0]).tolist() == [2, 0, 0]

    def test_create_general_binning(self):
        b = create_general_binning(["b", "a", "b"], str.upper)
        assert b.keys == ("B", "A")

    @pytest.mark.parametrize("n, expected", [
        (0, 1), (1, 1), (2, 2), (3, 3), (8, 4), (1000, 11),
    ])
    def test_sturges(self, n, expected):
        assert compute_default_bin_count(n) == expected

    def test_sturges_rejects_negative(self):
        with pytest.raises(InvalidArgumentError):
            compute_default_bin_count(-1)
