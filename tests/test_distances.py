"""
tests/test_distances.py
=======================
Distance matrix transforms: exact and ML nucleotide corrections, protein
ML, Hamming, the binary-data coefficients, codominant, gap and base
frequency distances, plus the shared progress/cancellation behaviour.
"""

import logging
import math
import os
import sys

import numpy as np
import pytest

_ROOT = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, _ROOT)

from splitscore._characters import Characters, PROTEIN, STANDARD
from splitscore._config import (
    CodominantConfig,
    HammingConfig,
    NucleotideDistanceConfig,
    ProteinDistanceConfig,
)
from splitscore._context import use_backend
from splitscore._distances import (
    BaseFreqDistance,
    CodominantDistance,
    DiceDistance,
    Distances,
    GapDistance,
    HammingDistance,
    JaccardDistance,
    NucleotideDistance,
    ProteinMLDistance,
    UpholtDistance,
    exact_distance,
    genotype_difference,
    k2p_distance,
    minv,
)
from splitscore._exceptions import CanceledError, NotApplicableError, SaturatedDistanceError
from splitscore._models import nucleotide_model
from splitscore._progress import ProgressListener


# ======================================================================== #
# Fixtures                                                                  #
# ======================================================================== #


@pytest.fixture(scope="module")
def alignment():
    """Four related 40-site sequences with a handful of substitutions."""
    base = "acgtacgtaacgttgcaacgtacgtaaccgtgcaacgtat"
    seqs = [base]
    for changes in ((3, "a"), (10, "g")), ((3, "a"), (20, "c"), (21, "t")), ((30, "g"), (33, "a"), (5, "c"), (12, "a")):
        s = list(base)
        for pos, ch in changes:
            s[pos] = ch if s[pos] != ch else "t"
        seqs.append("".join(s))
    return Characters(seqs, labels=["A", "B", "C", "D"])


@pytest.fixture(scope="module")
def binary():
    return Characters(["1100", "1010", "0111"], datatype=STANDARD)


def p_distance(a, b):
    return sum(x != y for x, y in zip(a, b)) / len(a)


# ======================================================================== #
# Container                                                                 #
# ======================================================================== #


class TestDistancesContainer:
    def test_set_is_symmetric(self):
        d = Distances(3)
        d.set(1, 3, 0.25)
        assert d.get(3, 1) == 0.25
        assert d.is_symmetric()

    def test_variance(self):
        d = Distances(2)
        d.set_var(1, 2, 0.01)
        assert d.get_var(2, 1) == 0.01

    def test_max_value(self):
        d = Distances(3, labels=["x", "y", "z"])
        d.set(1, 2, 0.5)
        d.set(2, 3, 1.5)
        assert d.max_value() == 1.5
        assert d.labels == ["x", "y", "z"]


# ======================================================================== #
# Nucleotide distances                                                      #
# ======================================================================== #


class TestMinv:
    def test_log(self):
        assert minv(0.5) == pytest.approx(math.log(0.5))

    def test_invariant_sites(self):
        assert minv(0.6, pinv=0.2) == pytest.approx(math.log(0.4 / 0.8))

    def test_gamma(self):
        assert minv(0.5, gamma=2.0) == pytest.approx(2.0 * (1.0 - 0.5 ** -0.5))

    def test_saturated(self):
        with pytest.raises(SaturatedDistanceError):
            minv(0.0)
        with pytest.raises(SaturatedDistanceError):
            minv(0.1, pinv=0.2)


class TestNucleotideDistance:
    def test_identical_sequences(self):
        """Two identical sequences: distance 0, variance 0."""
        seq = ("acgt" * 25)
        distances = NucleotideDistance().apply(Characters([seq, seq]))
        assert distances.get(1, 2) == pytest.approx(0.0)
        assert distances.get_var(1, 2) == pytest.approx(0.0)

    def test_jc_value(self, alignment):
        distances = NucleotideDistance().apply(alignment)
        p = p_distance(alignment.get_row(1), alignment.get_row(2))
        expected = -0.75 * math.log(1.0 - 4.0 / 3.0 * p)
        assert distances.get(1, 2) == pytest.approx(expected)
        assert distances.get_var(1, 2) > 0.0

    def test_symmetric_with_zero_diagonal(self, alignment):
        for model in ("jc", "k2p", "k3st", "f81", "f84", "gtr"):
            distances = NucleotideDistance(NucleotideDistanceConfig(model=model)).apply(alignment)
            assert distances.is_symmetric()
            np.testing.assert_array_equal(np.diag(distances.matrix), 0.0)

    def test_k2p_matches_formula(self, alignment):
        config = NucleotideDistanceConfig(model="k2p")
        distances = NucleotideDistance(config).apply(alignment)
        a, b = alignment.get_row(1), alignment.get_row(4)
        transitions = {("a", "g"), ("g", "a"), ("c", "t"), ("t", "c")}
        P = sum((x, y) in transitions for x, y in zip(a, b)) / len(a)
        Q = sum(x != y and (x, y) not in transitions for x, y in zip(a, b)) / len(a)
        expected = -0.5 * math.log(1 - 2 * P - Q) - 0.25 * math.log(1 - 2 * Q)
        assert distances.get(1, 4) == pytest.approx(expected)

    def test_jc_equals_f81_with_equal_frequencies(self, alignment):
        jc = NucleotideDistance(NucleotideDistanceConfig(model="jc")).apply(alignment)
        f81 = NucleotideDistance(NucleotideDistanceConfig(model="f81")).apply(alignment)
        np.testing.assert_allclose(jc.matrix, f81.matrix)

    def test_ml_jc_matches_exact(self, alignment):
        exact = NucleotideDistance().apply(alignment)
        ml = NucleotideDistance(NucleotideDistanceConfig(use_ml=True)).apply(alignment)
        np.testing.assert_allclose(ml.matrix, exact.matrix, atol=1e-4)

    def test_hky85_forces_ml(self):
        config = NucleotideDistanceConfig(model="hky85", use_ml=False)
        assert config.use_ml

    def test_hky85_runs(self, alignment):
        config = NucleotideDistanceConfig(model="hky85", base_freqs=[0.3, 0.2, 0.2, 0.3])
        distances = NucleotideDistance(config).apply(alignment)
        assert distances.get(1, 2) > 0.0
        assert distances.is_symmetric()

    def test_saturated_pair_gets_default(self, caplog):
        chars = Characters(["acgt" * 10, "cgta" * 10, "acgt" * 10])
        with caplog.at_level(logging.WARNING, logger="splitscore"):
            distances = NucleotideDistance().apply(chars)
        assert distances.get(1, 2) == 100.0
        assert distances.get_var(1, 2) == 0.0
        assert distances.get(1, 3) == pytest.approx(0.0)
        assert "2 distances were saturated or undefined" in caplog.text

    def test_all_missing_pair_undefined(self):
        chars = Characters(["acgt", "----"])
        assert NucleotideDistance().apply(chars).get(1, 2) == 100.0

    def test_rna(self):
        chars = Characters(["acgu", "acga"], datatype="rna")
        assert NucleotideDistance().apply(chars).get(1, 2) > 0.0

    def test_not_applicable_to_protein(self):
        chars = Characters(["arnd", "arnd"], datatype=PROTEIN)
        transform = NucleotideDistance()
        assert not transform.is_applicable(chars)
        with pytest.raises(NotApplicableError):
            transform.apply(chars)

    def test_wrong_config_type(self):
        with pytest.raises(TypeError):
            NucleotideDistance(HammingConfig())

    def test_k2p_function(self):
        F = np.diag([0.25] * 4)
        assert k2p_distance(F) == pytest.approx(0.0)


class TestExactDistanceRecovery:
    """Closed-form distances on a model's own joint matrix return the branch length."""

    CONFIGS = {
        "jc": dict(model="jc"),
        "k2p": dict(model="k2p", tratio=3.0),
        "k2p-gamma": dict(model="k2p", gamma=0.5),
        "k3st": dict(model="k3st", tratio=2.5, ac_vs_at=0.5),
        "f81": dict(model="f81", base_freqs=[0.1, 0.2, 0.3, 0.4]),
        "f84": dict(model="f84", base_freqs=[0.3, 0.2, 0.2, 0.3]),
        "gtr": dict(
            model="gtr",
            base_freqs=[0.35, 0.15, 0.2, 0.3],
            rate_matrix=[
                [0.0, 1.0, 4.0, 0.5],
                [1.0, 0.0, 2.0, 3.0],
                [4.0, 2.0, 0.0, 1.0],
                [0.5, 3.0, 1.0, 0.0],
            ],
        ),
    }

    @pytest.mark.parametrize("name", sorted(CONFIGS))
    @pytest.mark.parametrize("t", [0.01, 0.1, 0.5, 1.0])
    def test_recovers_branch_length(self, name, t):
        config = NucleotideDistanceConfig(**self.CONFIGS[name])
        F = nucleotide_model(config).joint_matrix(t)
        assert exact_distance(F, config) == pytest.approx(t, abs=1e-6)


class TestProteinDistance:
    def test_identical_and_diverged(self):
        a = "arndcqeghilkmfpstwyv" * 3
        b = list(a)
        for k in (0, 7, 15, 22, 40):
            b[k] = "w" if b[k] != "w" else "a"
        chars = Characters([a, a, "".join(b)], datatype=PROTEIN)
        distances = ProteinMLDistance(ProteinDistanceConfig(model="JTT")).apply(chars)
        assert distances.get(1, 2) < 1e-3
        assert distances.get(1, 3) > 0.0
        assert distances.get_var(1, 3) > 0.0

    def test_not_applicable_to_dna(self):
        assert not ProteinMLDistance().is_applicable(Characters(["acgt"]))


# ======================================================================== #
# Hamming                                                                   #
# ======================================================================== #


class TestHamming:
    def test_identical_sequences(self):
        seq = "acgt" * 25
        distances = HammingDistance().apply(Characters([seq, seq]))
        assert distances.get(1, 2) == 0.0
        assert distances.get_var(1, 2) == 0.0

    def test_proportion(self, alignment):
        distances = HammingDistance().apply(alignment)
        for s in range(1, 5):
            for t in range(s + 1, 5):
                expected = p_distance(alignment.get_row(s), alignment.get_row(t))
                assert distances.get(s, t) == pytest.approx(expected)

    def test_counts(self, alignment):
        distances = HammingDistance(HammingConfig(normalize=False)).apply(alignment)
        assert distances.get(1, 2) == pytest.approx(2.0)

    def test_gaps_excluded(self):
        distances = HammingDistance().apply(Characters(["ac-t", "aggt"]))
        assert distances.get(1, 2) == pytest.approx(1.0 / 3.0)

    def test_undefined_pair(self, caplog):
        with caplog.at_level(logging.WARNING, logger="splitscore"):
            distances = HammingDistance().apply(Characters(["acgt", "????"]))
        assert distances.get(1, 2) == 1.0
        assert "1 distance was" in caplog.text

    def test_backends_agree(self, alignment):
        with use_backend("python"):
            slow = HammingDistance().apply(alignment)
        with use_backend("cpu-parallel"):
            fast = HammingDistance().apply(alignment)
        np.testing.assert_allclose(slow.matrix, fast.matrix)

    def test_average_ambiguity(self):
        chars = Characters(["ar", "ag"])
        distances = HammingDistance(HammingConfig(ambiguity="average")).apply(chars)
        # r stands for a or g: half a match at site 2, site 1 identical
        assert distances.get(1, 2) == pytest.approx(0.5 / 2.0)

    def test_match_ambiguity_uses_overlap(self):
        chars = Characters(["ar", "ag"])
        distances = HammingDistance(HammingConfig(ambiguity="match")).apply(chars)
        # r vs g shares one of three bases: cost 1/3, averaged over 2 sites
        assert distances.get(1, 2) == pytest.approx(1.0 / 6.0)

    def test_standard_data(self, binary):
        distances = HammingDistance().apply(binary)
        assert distances.get(1, 2) == pytest.approx(0.5)


# ======================================================================== #
# Binary coefficients                                                       #
# ======================================================================== #


class TestBinaryDistances:
    def test_all_differ_dice(self):
        """Taxon i all 0, taxon j all 1: no shared presences, maximal Dice distance."""
        chars = Characters(["0000", "1111"], datatype=STANDARD)
        assert DiceDistance().apply(chars).get(1, 2) == pytest.approx(1.0)

    def test_dice(self, binary):
        assert DiceDistance().apply(binary).get(1, 2) == pytest.approx(0.5)

    def test_jaccard(self, binary):
        assert JaccardDistance().apply(binary).get(1, 2) == pytest.approx(2.0 / 3.0)

    def test_upholt(self, binary):
        assert UpholtDistance().apply(binary).get(1, 2) == pytest.approx(-math.log(0.5) / 6.0)

    @pytest.mark.parametrize("transform", [DiceDistance, JaccardDistance])
    def test_undefined_replaced_by_twice_max(self, transform, caplog):
        chars = Characters(["0000", "0000", "1111"], datatype=STANDARD)
        with caplog.at_level(logging.WARNING, logger="splitscore"):
            distances = transform().apply(chars)
        assert distances.get(1, 3) == pytest.approx(1.0)
        assert distances.get(1, 2) == pytest.approx(2.0)
        assert "undefined distances" in caplog.text

    def test_upholt_undefined_without_shared_sites(self):
        chars = Characters(["1100", "0011", "1110"], datatype=STANDARD)
        distances = UpholtDistance().apply(chars)
        largest = max(distances.get(1, 3), distances.get(2, 3))
        assert distances.get(1, 2) == pytest.approx(2.0 * largest)

    def test_requires_binary_symbols(self):
        chars = Characters(["acgt", "acgt"])
        assert not DiceDistance().is_applicable(chars)


# ======================================================================== #
# Codominant, gap and base-frequency distances                             #
# ======================================================================== #


class TestGenotypeDifference:
    @pytest.mark.parametrize(
        "genotypes, expected",
        [
            (("a", "a", "a", "a"), 0),
            (("a", "a", "a", "b"), 1),
            (("a", "a", "b", "c"), 3),
            (("a", "a", "b", "b"), 4),
            (("a", "b", "a", "b"), 0),
            (("a", "b", "b", "a"), 0),
            (("a", "b", "a", "c"), 1),
            (("a", "b", "c", "d"), 2),
            (("a", "b", "c", "c"), 3),
            (("a", "b", "b", "b"), 1),
        ],
    )
    def test_table(self, genotypes, expected):
        assert genotype_difference(*genotypes) == expected


class TestCodominant:
    def test_distance(self):
        chars = Characters(["aaac", "acac", "cccc"], diploid=True)
        distances = CodominantDistance().apply(chars)
        # loci: aa|ac vs ac|ac -> 1 + 0; nchar/2 * 1/2 = 1
        assert distances.get(1, 2) == pytest.approx(1.0)
        # aa|ac vs cc|cc -> 4 + 1 = 5; 2 * 5/2 = 5
        assert distances.get(1, 3) == pytest.approx(math.sqrt(5.0))

    def test_without_square_root(self):
        chars = Characters(["aaac", "cccc"], diploid=True)
        distances = CodominantDistance(CodominantConfig(use_square_root=False)).apply(chars)
        assert distances.get(1, 2) == pytest.approx(5.0)

    def test_missing_locus_skipped(self):
        chars = Characters(["aa?c", "acac"], diploid=True)
        # only locus 1 valid: 2 * 1/1
        assert CodominantDistance().apply(chars).get(1, 2) == pytest.approx(math.sqrt(2.0))

    def test_masked_locus_ignored(self):
        chars = Characters(
            ["aaaa", "aabb"], diploid=True, datatype=STANDARD, symbols="ab",
            mask=[False, False, True, True],
        )
        assert CodominantDistance().apply(chars).get(1, 2) == pytest.approx(0.0)

    def test_masked_locus_not_in_scaling(self):
        seqs = ["aaacac", "acaccc"]
        unmasked = CodominantDistance().apply(Characters(seqs, diploid=True))
        # loci aa|ac, ac|ac, ac|cc -> 1 + 0 + 1; 3 * 2/3 = 2
        assert unmasked.get(1, 2) == pytest.approx(math.sqrt(2.0))
        masked = CodominantDistance().apply(
            Characters(seqs, diploid=True, mask=[False] * 4 + [True, False])
        )
        # third locus dropped: 2 * 1/2 = 1
        assert masked.get(1, 2) == pytest.approx(1.0)

    def test_requires_diploid(self):
        assert not CodominantDistance().is_applicable(Characters(["aaac", "acac"]))

    def test_refuses_weights(self):
        chars = Characters(["aaac", "acac"], diploid=True, weights=[1, 1, 2, 2])
        with pytest.raises(NotApplicableError, match="weights"):
            CodominantDistance().apply(chars)


class TestGapDistance:
    def test_fraction_of_disagreeing_gaps(self):
        distances = GapDistance().apply(Characters(["a-gt", "acg-"]))
        assert distances.get(1, 2) == pytest.approx(0.5)

    def test_no_agreement_is_one(self):
        distances = GapDistance().apply(Characters(["--", "ac"]))
        assert distances.get(1, 2) == 1.0


class TestBaseFreqDistance:
    def test_l1_difference(self):
        distances = BaseFreqDistance().apply(Characters(["aacc", "aaaa"]))
        assert distances.get(1, 2) == pytest.approx(1.0)

    def test_same_composition(self):
        distances = BaseFreqDistance().apply(Characters(["acgt", "tgca"]))
        assert distances.get(1, 2) == pytest.approx(0.0)


# ======================================================================== #
# Progress and cancellation                                                 #
# ======================================================================== #


class TestProgress:
    def test_reports_each_row(self, alignment):
        seen = []
        listener = ProgressListener(lambda value, maximum: seen.append((value, maximum)))
        HammingDistance().apply(alignment, progress=listener)
        assert seen == [(0, 100), (25, 100), (50, 100), (75, 100), (100, 100)]
        assert listener.task == "Hamming distance"

    def test_cancel_from_callback(self, alignment):
        def cancel_after_start(value, maximum):
            if value > 0:
                listener.cancel()

        listener = ProgressListener(cancel_after_start)
        with pytest.raises(CanceledError):
            NucleotideDistance().apply(alignment, progress=listener)
        assert listener.is_canceled

    def test_canceled_before_start(self, alignment):
        listener = ProgressListener()
        listener.cancel()
        with pytest.raises(CanceledError):
            JaccardDistance().apply(Characters(["01", "10"], datatype=STANDARD), progress=listener)
