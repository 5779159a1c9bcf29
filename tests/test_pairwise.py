"""
tests/test_pairwise.py
======================
Joint state frequencies of a taxon pair (``PairwiseCompare``), ambiguity
handling, the ML distance and the Bulmer variance.

Layout of F
-----------
Rows belong to taxon 1, columns to taxon 2, states in alphabet order
(a=0, c=1, g=2, t=3 for DNA); index 4 is the gap row/column, index 5 the
missing one.
"""

import os
import sys

import numpy as np
import pytest

_ROOT = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, _ROOT)

from splitscore._characters import Characters
from splitscore._exceptions import InvalidCharacterError, SaturatedDistanceError
from splitscore._models import JCModel, K2PModel
from splitscore._pairwise import PairwiseCompare, bulmer_variance, encode_rows
from splitscore._distances import jc_distance


DNA = "acgt"


def diverged_pair(n_sites=100, n_diff=10):
    """Two sequences that differ by a->c at the first ``n_diff`` sites."""
    base = ("acgt" * n_sites)[:n_sites]
    other = list(base)
    for k in range(n_diff):
        other[k] = "c" if base[k] != "c" else "a"
    return Characters([base, "".join(other)])


# ======================================================================== #
# Counting                                                                  #
# ======================================================================== #


class TestCounts:
    def test_simple_counts(self):
        chars = Characters(["acgt", "acga"])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        assert pc.num_states == 4
        assert pc.num_active == 4
        assert pc.num_not_missing == 4
        F = pc.get_f()
        assert F[3, 0] == pytest.approx(0.25)
        assert np.trace(F) == pytest.approx(0.75)
        assert F.sum() == pytest.approx(1.0)

    def test_weighted_counts(self):
        chars = Characters(["ac", "ag"], weights=[2.0, 1.0])
        F = PairwiseCompare(chars, DNA, 1, 2).get_f()
        assert F[0, 0] == pytest.approx(2.0 / 3.0)
        assert F[1, 2] == pytest.approx(1.0 / 3.0)

    def test_masked_sites_ignored(self):
        chars = Characters(["acgt", "tcga"], mask=[True, False, False, True])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        assert pc.num_active == 2
        assert np.trace(pc.get_f()) == pytest.approx(1.0)

    def test_gap_rows_and_columns(self):
        chars = Characters(["a-?c", "aaa-"])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        counts = pc.counts
        assert counts[0, 0] == 1.0
        assert counts[4, 0] == 1.0
        assert counts[5, 0] == 1.0
        assert counts[1, 4] == 1.0
        assert pc.num_not_missing == 1
        assert pc.num_gaps == 3

    def test_extended_f_divides_by_active_sites(self):
        chars = Characters(["a-", "aa"])
        ext = PairwiseCompare(chars, DNA, 1, 2).get_extended_f()
        assert ext.shape == (6, 6)
        assert ext[0, 0] == pytest.approx(0.5)
        assert ext[4, 0] == pytest.approx(0.5)

    def test_case_is_folded(self):
        chars = Characters(["ACGT", "acgt"])
        assert np.trace(PairwiseCompare(chars, DNA, 1, 2).get_f()) == pytest.approx(1.0)

    def test_respect_case_rejects_upper_case(self):
        chars = Characters(["ACGT", "acgt"], respect_case=True)
        with pytest.raises(InvalidCharacterError):
            PairwiseCompare(chars, DNA, 1, 2)


class TestSymmetry:
    def test_transpose(self):
        chars = Characters(["aacgtt-a", "acgtta?c"])
        f12 = PairwiseCompare(chars, DNA, 1, 2).counts
        f21 = PairwiseCompare(chars, DNA, 2, 1).counts
        np.testing.assert_allclose(f12, f21.T)


class TestUndefined:
    """A taxon with nothing but gaps and missing data."""

    def test_all_gap_taxon(self):
        chars = Characters(["acgtacgt", "----????"])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        assert pc.num_not_missing == 0
        assert pc.get_f() is None

    def test_gap_column_contributes_nothing(self):
        chars = Characters(["acgt", "ac-t"])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        assert pc.num_not_missing == 3
        assert np.trace(pc.get_f()) == pytest.approx(1.0)

    def test_no_active_sites(self):
        chars = Characters(["ac", "ac"], mask=[True, True])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        assert pc.get_f() is None
        assert pc.get_extended_f() is None


class TestInvalidSymbols:
    def test_error_names_taxon_and_position(self):
        chars = Characters(["acgt", "acxt"])
        with pytest.raises(InvalidCharacterError) as info:
            PairwiseCompare(chars, DNA, 1, 2)
        assert info.value.taxon == 2
        assert info.value.position == 3
        assert info.value.symbol == "x"
        assert "Position 3 for taxon 2" in str(info.value)

    def test_masked_invalid_symbol_is_fine(self):
        chars = Characters(["acgt", "acxt"], mask=[False, False, True, False])
        assert PairwiseCompare(chars, DNA, 1, 2).num_not_missing == 3


# ======================================================================== #
# Ambiguity codes                                                           #
# ======================================================================== #


class TestAmbiguity:
    def test_ignore_counts_code_as_missing(self):
        chars = Characters(["ra", "aa"])
        pc = PairwiseCompare(chars, DNA, 1, 2, ambiguity="ignore")
        assert pc.counts[5, 0] == 1.0
        assert pc.get_f()[0, 0] == pytest.approx(1.0)

    def test_average_spreads_weight(self):
        chars = Characters(["ra", "aa"])
        pc = PairwiseCompare(chars, DNA, 1, 2, ambiguity="average")
        counts = pc.counts
        assert counts[0, 0] == pytest.approx(1.5)
        assert counts[2, 0] == pytest.approx(0.5)
        assert pc.num_not_missing == 1

    def test_match_identical_sets_on_diagonal(self):
        chars = Characters(["ra", "ra"])
        F = PairwiseCompare(chars, DNA, 1, 2, ambiguity="match").get_f()
        assert F[0, 0] == pytest.approx(0.75)
        assert F[2, 2] == pytest.approx(0.25)
        assert F[0, 2] == 0.0

    def test_average_identical_sets_off_diagonal(self):
        chars = Characters(["ra", "ra"])
        F = PairwiseCompare(chars, DNA, 1, 2, ambiguity="average").get_f()
        assert F[0, 0] == pytest.approx(1.25 / 2)
        assert F[0, 2] == pytest.approx(0.125)

    def test_match_different_sets_averages(self):
        chars = Characters(["r", "y"])
        counts = PairwiseCompare(chars, DNA, 1, 2, ambiguity="match").counts
        for i in (0, 2):
            for j in (1, 3):
                assert counts[i, j] == pytest.approx(0.25)

    def test_site_weight_applies(self):
        chars = Characters(["r", "a"], weights=[4.0])
        counts = PairwiseCompare(chars, DNA, 1, 2, ambiguity="average").counts
        assert counts[0, 0] == pytest.approx(2.0)
        assert counts[2, 0] == pytest.approx(2.0)

    def test_encode_marks_ambiguous_sites(self):
        chars = Characters(["ra", "aa"])
        codes = encode_rows(chars, DNA, "average")
        assert codes[0, 0] == 6
        assert encode_rows(chars, DNA, "ignore")[0, 0] == 5


# ======================================================================== #
# Backends                                                                  #
# ======================================================================== #


class TestBackends:
    def test_python_and_compiled_agree(self):
        rng = np.random.default_rng(7)
        seqs = ["".join(rng.choice(list("acgt-?"), size=60)) for _ in range(2)]
        weights = rng.uniform(0.5, 2.0, size=60)
        chars = Characters(seqs, weights=weights)
        a = PairwiseCompare(chars, DNA, 1, 2, backend="python")
        b = PairwiseCompare(chars, DNA, 1, 2, backend="cpu-parallel")
        np.testing.assert_allclose(a.counts, b.counts)
        assert a.num_not_missing == b.num_not_missing


# ======================================================================== #
# Bootstrap                                                                 #
# ======================================================================== #


class TestBootstrap:
    def test_resample_and_restore(self):
        chars = diverged_pair(40, 8)
        pc = PairwiseCompare(chars, DNA, 1, 2)
        original = pc.counts
        pc.bootstrap_f(np.random.default_rng(1))
        assert pc.counts[:4, :4].sum() == pytest.approx(40)
        pc.restore_after_bootstrap()
        np.testing.assert_array_equal(pc.counts, original)
        assert pc.num_not_missing == 40

    def test_resampled_cells_stay_in_support(self):
        chars = diverged_pair(40, 8)
        pc = PairwiseCompare(chars, DNA, 1, 2)
        support = pc.counts[:4, :4] > 0
        pc.bootstrap_f(np.random.default_rng(3))
        assert np.all(pc.counts[:4, :4][~support] == 0)


# ======================================================================== #
# ML distance and variance                                                  #
# ======================================================================== #


class TestMLDistance:
    def test_jc_ml_matches_exact(self):
        pc = PairwiseCompare(diverged_pair(100, 10), DNA, 1, 2)
        exact = jc_distance(pc.get_f())
        assert pc.ml_distance(JCModel()) == pytest.approx(exact, abs=1e-4)

    def test_brent_agrees_with_golden(self):
        pc = PairwiseCompare(diverged_pair(100, 20), DNA, 1, 2)
        model = K2PModel(2.0)
        golden = pc.ml_distance(model, "golden")
        brent = pc.ml_distance(model, "brent")
        assert brent == pytest.approx(golden, abs=1e-4)

    def test_identical_sequences_near_zero(self):
        chars = Characters(["acgtacgt", "acgtacgt"])
        d = PairwiseCompare(chars, DNA, 1, 2).ml_distance(JCModel())
        assert 0.0 <= d < 1e-4

    def test_invariant_sites_scale_by_rate(self):
        pc = PairwiseCompare(diverged_pair(100, 10), DNA, 1, 2)
        model = JCModel()
        model.pinv = 0.2
        d = pc.ml_distance(model)
        assert d > 0
        assert model.rate == pytest.approx(0.8)

    def test_total_divergence_saturates(self):
        chars = Characters(["acgt" * 25, "cgta" * 25])
        pc = PairwiseCompare(chars, DNA, 1, 2)
        with pytest.raises(SaturatedDistanceError):
            pc.ml_distance(JCModel())

    def test_no_comparable_sites(self):
        chars = Characters(["acgt", "----"])
        with pytest.raises(SaturatedDistanceError):
            PairwiseCompare(chars, DNA, 1, 2).ml_distance(JCModel())


class TestBulmerVariance:
    def test_zero_distance(self):
        assert bulmer_variance(0.0, 0.75, 100) == pytest.approx(0.0)

    def test_no_sites(self):
        assert bulmer_variance(0.3, 0.75, 0) == 0.0

    def test_positive_and_shrinks_with_length(self):
        short = bulmer_variance(0.2, 0.75, 50)
        long = bulmer_variance(0.2, 0.75, 500)
        assert short > long > 0.0
        assert short == pytest.approx(10 * long)

    def test_formula(self):
        d, b, n = 0.1, 0.75, 100
        e = np.exp(-d / b)
        expected = np.exp(2 * d / b) * b * (1 - e) * (1 - b + b * e) / n
        assert bulmer_variance(d, b, n) == pytest.approx(expected)
