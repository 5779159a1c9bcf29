"""
tests/test_splits.py
====================
Split and SplitSystem containers, and the majority-colour split
constructors (DNA2Splits, Binary2Splits, RYSplits, MedianNetworkSplits).
"""

import logging
import os
import sys

import pytest

_ROOT = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, _ROOT)

from splitscore._characters import Characters, PROTEIN, STANDARD
from splitscore._config import SplitsConfig
from splitscore._exceptions import InvalidCharacterError, NotApplicableError
from splitscore._progress import ProgressListener
from splitscore._split_system import Split, SplitSystem
from splitscore._splits import (
    Binary2Splits,
    DNA2Splits,
    MedianNetworkSplits,
    RYSplits,
    filter_by_weight,
    ry_color,
)


def as_table(splits):
    """[(sorted side, weight), ...] in split order."""
    return [(sorted(s.side), splits.weight(i)) for i, s in enumerate(splits, start=1)]


# ======================================================================== #
# Containers                                                                #
# ======================================================================== #


class TestSplit:
    def test_complement(self):
        assert Split({1, 2}, 5).complement().side == frozenset({3, 4, 5})

    def test_equal_in_either_orientation(self):
        a = Split({1, 2}, 4)
        b = Split({3, 4}, 4)
        assert a.equals_as_split(b)
        assert a == b
        assert hash(a) == hash(b)
        assert a != Split({1, 3}, 4)

    def test_sizes(self):
        split = Split({2, 3, 4}, 5)
        assert split.cardinality == 3
        assert split.split_size == 2
        assert split.is_proper
        assert not split.is_trivial
        assert Split({4}, 5).is_trivial
        assert not Split(set(), 5).is_proper

    def test_normalized_contains_first_taxon(self):
        assert 1 in Split({2, 3}, 4).normalized()

    def test_compatibility(self):
        assert Split({1, 2}, 5).is_compatible(Split({1, 2, 3}, 5))
        assert Split({1, 2}, 5).is_compatible(Split({4, 5}, 5))
        assert not Split({1, 2}, 5).is_compatible(Split({2, 3}, 5))

    def test_side_outside_taxa(self):
        with pytest.raises(ValueError):
            Split({0, 1}, 3)
        with pytest.raises(ValueError):
            Split({4}, 3)


class TestSplitSystem:
    def test_indices_start_at_one(self):
        splits = SplitSystem(4, ["a", "b", "c", "d"])
        assert splits.add({1, 2}, 2.0) == 1
        assert splits.add({1}, label="x") == 2
        assert splits.n_splits == len(splits) == 2
        assert splits.get(1).side == frozenset({1, 2})
        assert splits.label(2) == "x"
        assert splits.taxon_labels == ["a", "b", "c", "d"]

    def test_find_either_orientation(self):
        splits = SplitSystem(4)
        splits.add({1, 2})
        assert splits.find(Split({3, 4}, 4)) == 1
        assert splits.find(Split({1, 3}, 4)) is None

    def test_weights(self):
        splits = SplitSystem(3)
        splits.add({1}, 1.5)
        splits.set_weight(1, 2.5)
        assert splits.weight(1) == 2.5
        assert list(splits.weights) == [2.5]

    def test_compatibility(self):
        splits = SplitSystem(4)
        splits.add({1, 2})
        splits.add({1})
        assert splits.is_compatible()
        splits.add({1, 3})
        assert not splits.is_compatible()

    def test_mismatched_taxa(self):
        with pytest.raises(ValueError):
            SplitSystem(4).add(Split({1}, 5))


# ======================================================================== #
# DNA2Splits                                                                #
# ======================================================================== #


class TestDNA2Splits:
    def test_two_state_column(self):
        """One column AABB gives one non-trivial split plus the four trivial ones."""
        splits = DNA2Splits().apply(Characters(["a", "a", "c", "c"]))
        assert as_table(splits) == [
            ([1, 2], 1.0), ([1], 1.0), ([2], 1.0), ([3], 1.0), ([4], 1.0),
        ]
        assert splits.split_to_chars[1] == [1]
        assert splits.split_to_chars[2] == []

    def test_majority_side_and_trivial_cover(self):
        splits = DNA2Splits().apply(Characters(["aa", "ac", "cc", "cc"]))
        assert as_table(splits) == [
            ([1, 2], 1.0), ([2, 3, 4], 1.0), ([2], 1.0), ([3], 1.0), ([4], 1.0),
        ]

    def test_without_trivial_completion(self):
        config = SplitsConfig(add_all_trivial=False)
        splits = DNA2Splits(config).apply(Characters(["a", "a", "c", "c"]))
        assert as_table(splits) == [([1, 2], 1.0)]

    def test_equal_columns_merge_weights(self):
        chars = Characters(["aag", "aag", "ccg", "ccg"], weights=[2.0, 3.0, 1.0])
        splits = DNA2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        assert as_table(splits) == [([1, 2], 5.0)]
        assert splits.split_to_chars[1] == [1, 2]

    def test_complementary_columns_merge(self):
        # ties go to a: {1, 2} on column 1, {3, 4} on column 2
        chars = Characters(["ac", "ac", "ca", "ca"])
        splits = DNA2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        assert splits.n_splits == 1
        assert splits.weight(1) == 2.0

    def test_uninformative_columns_skipped(self):
        chars = Characters(["aac", "agg", "ctc", "tac"])
        splits = DNA2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        # columns 1 and 2 show three states, column 3 splits {1,3,4}|{2}
        assert as_table(splits) == [([1, 3, 4], 1.0)]

    def test_gap_and_missing_columns_skipped(self):
        chars = Characters(["a-a", "aa?", "cca", "ccc"])
        splits = DNA2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        assert as_table(splits) == [([1, 2], 1.0)]

    def test_masked_columns_skipped(self):
        chars = Characters(["ac", "ac", "ca", "cc"], mask=[True, False])
        splits = DNA2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        assert splits.split_to_chars == {1: [2]}

    def test_invalid_symbol(self):
        with pytest.raises(InvalidCharacterError) as info:
            DNA2Splits().apply(Characters(["aa", "ax", "cc"]))
        assert (info.value.taxon, info.value.position, info.value.symbol) == (2, 2, "x")

    def test_deterministic(self):
        chars = Characters(["acgta", "acgtt", "ccgaa", "ctgat", "ctcaa"])
        first = as_table(DNA2Splits().apply(chars))
        assert as_table(DNA2Splits().apply(chars)) == first

    def test_ry_alphabet(self):
        chars = Characters(["a", "g", "c", "t"])
        plain = DNA2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        ry = DNA2Splits(SplitsConfig(add_all_trivial=False, use_ry_alphabet=True)).apply(chars)
        assert plain.n_splits == 0
        assert as_table(ry) == [([1, 2], 1.0)]

    def test_ry_alphabet_needs_nucleotides(self):
        chars = Characters(["ar", "ar"], datatype=PROTEIN)
        transform = DNA2Splits(SplitsConfig(use_ry_alphabet=True))
        assert not transform.is_applicable(chars)
        with pytest.raises(NotApplicableError):
            transform.apply(chars)

    def test_min_split_weight(self):
        chars = Characters(["aac", "aac", "cca", "cca", "ccc"])
        splits = DNA2Splits(SplitsConfig(min_split_weight=2.0)).apply(chars)
        assert as_table(splits) == [
            ([3, 4, 5], 2.0), ([1], 1.0), ([2], 1.0), ([3], 1.0), ([4], 1.0), ([5], 1.0),
        ]
        assert splits.split_to_chars[1] == [1, 2]

    def test_labels(self):
        chars = Characters(["aac", "aac", "cca", "cca", "ccc"])
        splits = DNA2Splits(SplitsConfig(label_splits=True)).apply(chars)
        assert splits.label(1) == "1,2"
        assert splits.label(2) == "3"
        assert splits.label(3) is None

    def test_taxon_labels_carried(self):
        chars = Characters({"x": "a", "y": "a", "z": "c"})
        assert DNA2Splits().apply(chars).taxon_labels == ["x", "y", "z"]

    def test_progress_per_column(self):
        seen = []
        listener = ProgressListener(lambda value, maximum: seen.append((value, maximum)))
        DNA2Splits().apply(Characters(["aa", "ac", "cc"]), progress=listener)
        assert seen[0] == (0, 2)
        assert seen[-1] == (2, 2)


class TestFilterByWeight:
    def test_trivial_splits_always_kept(self, caplog):
        splits = SplitSystem(5)
        splits.add({1, 2}, 0.5)
        splits.add({3}, 0.1)
        splits.add({1, 2, 3}, 3.0)
        splits.split_to_chars = {1: [1], 2: [2], 3: [3, 4]}
        with caplog.at_level(logging.INFO, logger="splitscore"):
            filtered = filter_by_weight(splits, 1.0)
        assert as_table(filtered) == [([3], 0.1), ([1, 2, 3], 3.0)]
        assert filtered.split_to_chars == {1: [2], 2: [3, 4]}
        assert "Removed 1 splits" in caplog.text


# ======================================================================== #
# Binary2Splits and RYSplits                                                #
# ======================================================================== #


class TestBinary2Splits:
    def test_one_taxa_form_the_side(self):
        chars = Characters(["10", "10", "01", "00"], datatype=STANDARD)
        splits = Binary2Splits().apply(chars)
        assert as_table(splits) == [
            ([1, 2], 1.0), ([3], 1.0), ([1], 1.0), ([2], 1.0), ([4], 1.0),
        ]

    def test_minority_ones(self):
        chars = Characters(["1", "0", "0", "0", "0"], datatype=STANDARD)
        splits = Binary2Splits(SplitsConfig(add_all_trivial=False)).apply(chars)
        assert as_table(splits) == [([1], 1.0)]

    def test_requires_binary(self):
        assert not Binary2Splits().is_applicable(Characters(["acgt"]))
        assert not Binary2Splits().is_applicable(
            Characters(["012"], datatype=STANDARD, symbols="012")
        )


class TestRYSplits:
    def test_purines_on_the_side(self):
        chars = Characters(["ac", "gc", "ct", "ta"])
        splits = RYSplits().apply(chars)
        assert as_table(splits) == [([1, 2], 1.0), ([4], 1.0)]

    def test_no_trivial_completion_and_merging(self):
        chars = Characters(["aac", "gag", "ccc", "tcc"], weights=[1.0, 2.0, 1.0])
        splits = RYSplits().apply(chars)
        # column 2 has purines {1, 2}: same split as column 1
        assert as_table(splits) == [([1, 2], 3.0), ([2], 1.0)]
        assert splits.split_to_chars[1] == [1, 2]

    def test_constant_columns_ignored(self):
        assert RYSplits().apply(Characters(["ag", "ga"])).n_splits == 0

    def test_ry_color(self):
        assert [ry_color(c) for c in "agrcTuy"] == [1, 1, 1, 2, 2, 2, 2]
        assert ry_color("-") == -1
        assert ry_color("n") == -1

    def test_requires_nucleotides(self):
        assert not RYSplits().is_applicable(Characters(["ar"], datatype=PROTEIN))


# ======================================================================== #
# MedianNetworkSplits                                                       #
# ======================================================================== #


class TestMedianNetworkSplits:
    def test_same_as_dna2splits(self):
        chars = Characters(["acgta", "acgtt", "ccgaa", "ctgat", "ctcaa"])
        assert as_table(MedianNetworkSplits().apply(chars)) == as_table(DNA2Splits().apply(chars))

    def test_ry_on_protein_falls_back(self, caplog):
        chars = Characters(["ar", "ar", "rr", "rr"], datatype=PROTEIN)
        transform = MedianNetworkSplits(SplitsConfig(use_ry_alphabet=True, add_all_trivial=False))
        assert transform.is_applicable(chars)
        with caplog.at_level(logging.WARNING, logger="splitscore"):
            splits = transform.apply(chars)
        assert "RY alphabet" in caplog.text
        assert as_table(splits) == [([1, 2], 1.0)]
        assert transform.config.use_ry_alphabet

    def test_fallback_does_not_stick(self):
        transform = MedianNetworkSplits(SplitsConfig(use_ry_alphabet=True, add_all_trivial=False))
        transform.apply(Characters(["ar", "ar", "rr", "rr"], datatype=PROTEIN))
        # purines vs pyrimidines in both columns; the full alphabet sees four states
        splits = transform.apply(Characters(["ag", "ga", "ct", "tc"]))
        assert as_table(splits) == [([1, 2], 2.0)]
