"""
_distances.py
=============
Distance matrices computed from aligned characters.

Public API
----------
  Distances(n_taxa, labels=None)        symmetric matrix + variances, 1-based
  minv(x, pinv, gamma)                  inverse moment generating function

  NucleotideDistance(config)            JC, K2P, K3ST, F81, F84, HKY85, GTR
  ProteinMLDistance(config)             empirical protein models (ML)
  HammingDistance(config)               p-distance
  DiceDistance / JaccardDistance / UpholtDistance   binary 0/1 data
  CodominantDistance(config)            diploid genotypes
  GapDistance                           disagreement in gap status
  BaseFreqDistance                      L1 distance of base compositions

Undefined entries
-----------------
A pair of sequences may not yield a distance: no site is comparable, or the
divergence is beyond what the model can correct for.  Such pairs are
counted and reported in ONE warning per matrix.  Model-based distances leave
them at 100.0 with variance 0; Hamming distances at 1.0; the binary and
codominant distances replace them by twice the largest defined distance.

Each transform reports progress once per taxon row; cancellation raised by
the progress listener propagates and no partial matrix is returned.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from splitscore._backend import import_cpu_kernels, select_kernel
from splitscore._characters import DNA, RNA, STANDARD
from splitscore._config import (
    CodominantConfig,
    HammingConfig,
    NucleotideDistanceConfig,
    ProteinDistanceConfig,
)
from splitscore._context import effective_backend
from splitscore._exceptions import SaturatedDistanceError
from splitscore._logging import (
    log_distance_statistics,
    log_fallback_distances,
    log_undefined_distances,
)
from splitscore._models import nucleotide_model, protein_model
from splitscore._pairwise import PairwiseCompare, encode_rows
from splitscore._progress import ensure_progress
from splitscore._transform import DISTANCES, Transform


logger = logging.getLogger(__name__)

_, _hamming_kernel, _, _ = import_cpu_kernels()


DNA_STATES = "acgt"
RNA_STATES = "acgu"
PROTEIN_STATES = "arndcqeghilkmfpstwyv"

UNDEFINED_MODEL_DISTANCE = 100.0
UNDEFINED_HAMMING_DISTANCE = 1.0

# Saturation levels of the p-distance used by the Bulmer variance
NUCLEOTIDE_B = 0.75
PROTEIN_B = 0.93


# ============================================================================ #
# Distance matrix                                                              #
# ============================================================================ #


class Distances:
    """
    Symmetric distance matrix with a parallel variance matrix.

    Parameters
    ----------
    n_taxa : int
    labels : list[str], optional

    Examples
    --------
    >>> d = Distances(3)
    >>> d.set(1, 2, 0.5)
    >>> d.get(2, 1)
    0.5
    """

    def __init__(self, n_taxa: int, labels: Optional[Sequence[str]] = None) -> None:
        self.n_taxa = n_taxa
        self.labels = list(labels) if labels is not None else [f"t{t}" for t in range(1, n_taxa + 1)]
        self.matrix = np.zeros((n_taxa, n_taxa), dtype=np.float64)
        self.variance = np.zeros((n_taxa, n_taxa), dtype=np.float64)

    def get(self, i: int, j: int) -> float:
        return float(self.matrix[i - 1, j - 1])

    def set(self, i: int, j: int, value: float) -> None:
        """Set both d(i, j) and d(j, i)."""
        self.matrix[i - 1, j - 1] = value
        self.matrix[j - 1, i - 1] = value

    def get_var(self, i: int, j: int) -> float:
        return float(self.variance[i - 1, j - 1])

    def set_var(self, i: int, j: int, value: float) -> None:
        self.variance[i - 1, j - 1] = value
        self.variance[j - 1, i - 1] = value

    def max_value(self) -> float:
        return float(self.matrix.max()) if self.n_taxa > 0 else 0.0

    def is_symmetric(self, tol: float = 0.0) -> bool:
        return bool(np.all(np.abs(self.matrix - self.matrix.T) <= tol))

    def __repr__(self) -> str:
        return f"Distances(n_taxa={self.n_taxa}, max={self.max_value():.4g})"


# ============================================================================ #
# Exact corrections                                                            #
# ============================================================================ #


def minv(x: float, pinv: float = 0.0, gamma: float = 0.0) -> float:
    """
    Inverse of the moment generating function of the rate distribution.

    ln((x - p)/(1 - p)) for equal rates, or
    gamma * (1 - ((x - p)/(1 - p))^(-1/gamma)) for gamma-distributed rates,
    with p the proportion of invariable sites (treated as 0 outside [0, 1]).

    Raises
    ------
    SaturatedDistanceError
        If x <= 0 or x - p <= 0.
    """
    if x <= 0.0:
        raise SaturatedDistanceError()
    p = pinv if 0.0 <= pinv <= 1.0 else 0.0
    if x - p <= 0.0:
        raise SaturatedDistanceError()
    if gamma > 0.0:
        return gamma * (1.0 - ((x - p) / (1.0 - p)) ** (-1.0 / gamma))
    return float(np.log((x - p) / (1.0 - p)))


def _transitions(F: np.ndarray) -> float:
    return F[0, 2] + F[2, 0] + F[1, 3] + F[3, 1]


def _transversions(F: np.ndarray) -> float:
    return (
        F[0, 1] + F[0, 3] + F[1, 0] + F[1, 2]
        + F[2, 1] + F[2, 3] + F[3, 0] + F[3, 2]
    )


def jc_distance(F: np.ndarray, pinv: float = 0.0, gamma: float = 0.0) -> float:
    D = 1.0 - np.trace(F)
    B = 0.75
    return -B * minv(1.0 - D / B, pinv, gamma)


def f81_distance(F: np.ndarray, freqs, pinv: float = 0.0, gamma: float = 0.0) -> float:
    freqs = np.asarray(freqs)
    D = 1.0 - np.trace(F)
    B = 1.0 - float(np.sum(freqs**2))
    return -B * minv(1.0 - D / B, pinv, gamma)


def k2p_distance(F: np.ndarray, pinv: float = 0.0, gamma: float = 0.0) -> float:
    P = _transitions(F)
    Q = _transversions(F)
    return -0.5 * minv(1.0 - 2.0 * P - Q, pinv, gamma) - 0.25 * minv(1.0 - 2.0 * Q, pinv, gamma)


def f84_distance(F: np.ndarray, freqs, pinv: float = 0.0, gamma: float = 0.0) -> float:
    pi_a, pi_c, pi_g, pi_t = freqs
    pi_r = pi_a + pi_g
    pi_y = pi_c + pi_t
    A = pi_c * pi_t / pi_y + pi_a * pi_g / pi_r
    B = pi_c * pi_t + pi_a * pi_g
    C = pi_r * pi_y
    P = _transitions(F)
    Q = _transversions(F)
    dist = -2.0 * A * minv(1.0 - P / (2.0 * A) - (A - B) * Q / (2.0 * A * C), pinv, gamma)
    dist += 2.0 * (A - B - C) * minv(1.0 - Q / (2.0 * C), pinv, gamma)
    return dist


def k3st_distance(F: np.ndarray, pinv: float = 0.0, gamma: float = 0.0) -> float:
    a = np.trace(F)
    b = F[0, 1] + F[1, 0] + F[2, 3] + F[3, 2]
    c = _transitions(F)
    e = 1.0 - a - b - c
    return -0.25 * (
        minv(a + c - b - e, pinv, gamma)
        + minv(a + b - c - e, pinv, gamma)
        + minv(a + e - b - c, pinv, gamma)
    )


def gtr_distance(F: np.ndarray, freqs, pinv: float = 0.0, gamma: float = 0.0) -> float:
    """
    dist = -trace(Pi^1/2 Minv(Pi^-1/2 (F + F')/2 Pi^-1/2) Pi^1/2)

    Symmetrising F keeps the matrix whose inverse MGF is taken symmetric, so
    it has a real eigen-decomposition.
    """
    freqs = np.asarray(freqs, dtype=np.float64)
    sqrtpi = np.sqrt(freqs)
    X = (F + F.T) / (2.0 * np.outer(sqrtpi, sqrtpi))
    evals, V = np.linalg.eigh(X)
    D = np.array([minv(lam, pinv, gamma) for lam in evals])
    return float(-np.sum(freqs[:, None] * V**2 * D[None, :]))


def exact_distance(F: np.ndarray, config: NucleotideDistanceConfig) -> float:
    """Closed-form distance of ``config.model``; HKY85 has none."""
    pinv = config.pinvar
    gamma = config.gamma
    model = config.model
    if model == "jc":
        return jc_distance(F, pinv, gamma)
    if model == "k2p":
        return k2p_distance(F, pinv, gamma)
    if model == "k3st":
        return k3st_distance(F, pinv, gamma)
    if model == "f81":
        return f81_distance(F, config.base_freqs, pinv, gamma)
    if model == "f84":
        return f84_distance(F, config.base_freqs, pinv, gamma)
    if model == "gtr":
        return gtr_distance(F, config.base_freqs, pinv, gamma)
    raise ValueError(f"Model {model!r} has no exact distance")


# ============================================================================ #
# Shared loop                                                                  #
# ============================================================================ #


class DistanceTransform(Transform):
    """Base of the character-to-distance transforms."""

    output_kind = DISTANCES

    def _start(self, characters, progress, backend: str):
        self.check_applicable(characters)
        progress = ensure_progress(progress)
        progress.subtask(self.description)
        progress.set_maximum(100)
        progress.set_progress(0)
        backend = effective_backend(backend, self.name)
        return progress, backend

    @staticmethod
    def _row_done(progress, s: int, n_taxa: int) -> None:
        progress.set_progress(s * 100 // n_taxa)

    @staticmethod
    def _replace_undefined(distances: Distances, undefined: List[Tuple[int, int]]) -> None:
        """Set undefined entries to twice the largest defined distance."""
        if not undefined:
            return
        defined = distances.matrix.copy()
        for s, t in undefined:
            defined[s - 1, t - 1] = defined[t - 1, s - 1] = 0.0
        fallback = 2.0 * float(defined.max())
        for s, t in undefined:
            distances.set(s, t, fallback)
        log_fallback_distances(len(undefined), fallback)


# ============================================================================ #
# Model-based distances                                                        #
# ============================================================================ #


class NucleotideDistance(DistanceTransform):
    """
    Model-corrected nucleotide distances with Bulmer variances.

    Examples
    --------
    >>> config = NucleotideDistanceConfig(model='k2p', tratio=3.0)
    >>> distances = NucleotideDistance(config).apply(chars)
    >>> distances.get(1, 2)
    """

    description = "Nucleotide distance"
    config_class = NucleotideDistanceConfig

    def applicability(self, characters) -> Optional[str]:
        if characters.datatype not in (DNA, RNA):
            return f"datatype is {characters.datatype!r}, expected DNA or RNA"
        return None

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        config = self.config
        states = RNA_STATES if characters.datatype == RNA else DNA_STATES
        model = nucleotide_model(config) if config.use_ml else None

        codes = encode_rows(characters, states, config.ambiguity)
        n_taxa = characters.n_taxa
        distances = Distances(n_taxa, characters.labels)
        undefined = []

        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                pair = PairwiseCompare(
                    characters, states, s, t, config.ambiguity, backend, codes=codes
                )
                try:
                    if config.use_ml:
                        dist = pair.ml_distance(model, config.optimizer)
                    else:
                        F = pair.get_f()
                        if F is None:
                            raise SaturatedDistanceError("No comparable sites")
                        dist = exact_distance(F, config)
                except SaturatedDistanceError:
                    undefined.append((s, t))
                    distances.set(s, t, UNDEFINED_MODEL_DISTANCE)
                    continue
                distances.set(s, t, dist)
                distances.set_var(s, t, pair.bulmer_variance(dist, NUCLEOTIDE_B))
            self._row_done(progress, s, n_taxa)

        log_undefined_distances(undefined, n_taxa, UNDEFINED_MODEL_DISTANCE)
        log_distance_statistics(
            f"{self.name}[{config.model}{', ML' if config.use_ml else ''}]",
            n_taxa,
            len(characters.active_positions()),
            backend,
        )
        return distances


class ProteinMLDistance(DistanceTransform):
    """Maximum-likelihood protein distances under an empirical model."""

    description = "Protein ML distance"
    config_class = ProteinDistanceConfig

    def applicability(self, characters) -> Optional[str]:
        if not characters.is_protein:
            return f"datatype is {characters.datatype!r}, expected protein"
        return None

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        config = self.config
        model = protein_model(config.model)
        model.pinv = config.pinvar
        model.gamma = config.gamma

        codes = encode_rows(characters, PROTEIN_STATES, config.ambiguity)
        n_taxa = characters.n_taxa
        distances = Distances(n_taxa, characters.labels)
        undefined = []

        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                pair = PairwiseCompare(
                    characters, PROTEIN_STATES, s, t, config.ambiguity, backend, codes=codes
                )
                try:
                    dist = pair.ml_distance(model, config.optimizer)
                except SaturatedDistanceError:
                    undefined.append((s, t))
                    distances.set(s, t, UNDEFINED_MODEL_DISTANCE)
                    continue
                distances.set(s, t, dist)
                distances.set_var(s, t, pair.bulmer_variance(dist, PROTEIN_B))
            self._row_done(progress, s, n_taxa)

        log_undefined_distances(undefined, n_taxa, UNDEFINED_MODEL_DISTANCE)
        log_distance_statistics(
            f"{self.name}[{config.model}]", n_taxa, len(characters.active_positions()), backend
        )
        return distances


# ============================================================================ #
# Hamming                                                                      #
# ============================================================================ #

# Nucleotides and IUPAC codes with the bases they stand for
AMBIGUOUS_DNA_STATES = "acgtwrkysmbhdvn"
AMBIGUOUS_DNA_CODES = (
    "a", "c", "g", "t", "at", "ag", "gt", "ct", "cg", "ac", "cgt", "act", "agt", "acg", "acgt",
)


def _code_mismatch(s1: str, s2: str) -> float:
    """1 - (shared bases counted from both sides) / (total bases)."""
    matches = sum(1 for ch in s1 if ch in s2) + sum(1 for ch in s2 if ch in s1)
    return 1.0 - matches / (len(s1) + len(s2))


def ambiguity_mismatch_weights() -> np.ndarray:
    """15 x 15 cost of comparing two (possibly ambiguous) nucleotide symbols."""
    n = len(AMBIGUOUS_DNA_CODES)
    weights = np.zeros((n, n))
    for i in range(n):
        for j in range(n):
            weights[i, j] = _code_mismatch(AMBIGUOUS_DNA_CODES[i], AMBIGUOUS_DNA_CODES[j])
    return weights


class HammingDistance(DistanceTransform):
    """
    Proportion (or number) of differing sites.

    With ``ambiguity='match'`` on nucleotide data containing ambiguity
    codes, each pair of symbols contributes by how little their base sets
    overlap (r vs a counts 1/3, r vs r counts 0).
    """

    description = "Hamming distance"
    config_class = HammingConfig

    def applicability(self, characters) -> Optional[str]:
        if not characters.symbols:
            return "the character matrix has no symbol alphabet"
        return None

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        config = self.config

        if (
            config.ambiguity == "match"
            and characters.is_nucleotide
            and characters.has_ambiguous_states
        ):
            distances = self._ambiguous_hamming(characters, progress)
        elif config.ambiguity == "ignore" or not characters.has_ambiguous_states:
            distances = self._kernel_hamming(characters, progress, backend)
        else:
            distances = self._pairwise_hamming(characters, progress, backend)

        log_distance_statistics(
            self.name, characters.n_taxa, len(characters.active_positions()), backend
        )
        return distances

    def _finish_entry(self, distances, undefined, s, t, p, num_not_missing) -> None:
        if p is None:
            undefined.append((s, t))
            distances.set(s, t, UNDEFINED_HAMMING_DISTANCE)
            return
        if not self.config.normalize:
            p = float(round(p * num_not_missing))
        distances.set(s, t, p)

    def _kernel_hamming(self, characters, progress, backend) -> Distances:
        states = characters.symbols
        n = len(states)
        codes = encode_rows(characters, states)
        n_taxa = characters.n_taxa

        same = np.zeros((n_taxa, n_taxa))
        total = np.zeros((n_taxa, n_taxa))
        count = np.zeros((n_taxa, n_taxa), dtype=np.int64)
        kernel = select_kernel(_hamming_kernel, backend)
        kernel(codes, characters.weights, ~characters.mask, n, same, total, count)

        distances = Distances(n_taxa, characters.labels)
        undefined = []
        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                i, j = s - 1, t - 1
                if count[i, j] == 0 or total[i, j] <= 0:
                    p = None
                else:
                    p = 1.0 - same[i, j] / total[i, j]
                self._finish_entry(distances, undefined, s, t, p, count[i, j])
            self._row_done(progress, s, n_taxa)

        log_undefined_distances(undefined, n_taxa, UNDEFINED_HAMMING_DISTANCE)
        return distances

    def _pairwise_hamming(self, characters, progress, backend) -> Distances:
        states = characters.symbols
        ambiguity = self.config.ambiguity
        codes = encode_rows(characters, states, ambiguity)
        n_taxa = characters.n_taxa
        distances = Distances(n_taxa, characters.labels)
        undefined = []
        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                pair = PairwiseCompare(characters, states, s, t, ambiguity, backend, codes=codes)
                F = pair.get_f()
                p = None if F is None else 1.0 - float(np.trace(F))
                self._finish_entry(distances, undefined, s, t, p, pair.num_not_missing)
            self._row_done(progress, s, n_taxa)

        log_undefined_distances(undefined, n_taxa, UNDEFINED_HAMMING_DISTANCE)
        return distances

    def _ambiguous_hamming(self, characters, progress) -> Distances:
        n_states = len(AMBIGUOUS_DNA_STATES)
        weights = ambiguity_mismatch_weights()
        positions = characters.active_positions()
        n_taxa = characters.n_taxa

        coded = np.full((n_taxa, len(positions)), -1, dtype=np.int64)
        for t in range(1, n_taxa + 1):
            for col, p in enumerate(positions):
                ch = characters.get_original(t, p).lower().replace("u", "t")
                coded[t - 1, col] = AMBIGUOUS_DNA_STATES.find(ch)
        site_weights = np.array([characters.char_weight(p) for p in positions])

        distances = Distances(n_taxa, characters.labels)
        undefined = []
        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                a = coded[s - 1]
                b = coded[t - 1]
                ok = (a >= 0) & (b >= 0)
                F = np.zeros((n_states, n_states))
                np.add.at(F, (a[ok], b[ok]), site_weights[ok])
                fsum = F.sum()
                if fsum <= 0:
                    undefined.append((s, t))
                    distances.set(s, t, UNDEFINED_HAMMING_DISTANCE)
                    continue
                distances.set(s, t, float(np.sum(F / fsum * weights)))
            self._row_done(progress, s, n_taxa)

        log_undefined_distances(undefined, n_taxa, UNDEFINED_HAMMING_DISTANCE)
        return distances


# ============================================================================ #
# Binary (presence/absence) distances                                         #
# ============================================================================ #


class BinaryDistance(DistanceTransform):
    """
    Distances on 0/1 characters computed from the 2x2 joint frequencies

        a = F[1, 1]   b = F[1, 0]   c = F[0, 1]

    Subclasses implement ``formula(a, b, c)`` returning None when undefined.
    """

    states = "01"

    def applicability(self, characters) -> Optional[str]:
        if characters.datatype != STANDARD:
            return f"datatype is {characters.datatype!r}, expected standard"
        if set(characters.symbols) - set(self.states):
            return f"symbols {characters.symbols!r} are not binary '01'"
        return None

    def formula(self, a: float, b: float, c: float) -> Optional[float]:
        raise NotImplementedError

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        codes = encode_rows(characters, self.states)
        n_taxa = characters.n_taxa
        distances = Distances(n_taxa, characters.labels)
        undefined = []

        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                pair = PairwiseCompare(characters, self.states, s, t, backend=backend, codes=codes)
                F = pair.get_f()
                dist = None if F is None else self.formula(F[1, 1], F[1, 0], F[0, 1])
                if dist is None:
                    undefined.append((s, t))
                else:
                    distances.set(s, t, dist)
            self._row_done(progress, s, n_taxa)

        self._replace_undefined(distances, undefined)
        log_distance_statistics(
            self.name, n_taxa, len(characters.active_positions()), backend
        )
        return distances


class DiceDistance(BinaryDistance):
    """Dice (1945): 1 - 2a / (2a + b + c)."""

    description = "Dice distance"

    def formula(self, a, b, c):
        if 2 * a + b + c <= 0.0:
            return None
        return 1.0 - 2.0 * a / (2.0 * a + b + c)


class JaccardDistance(BinaryDistance):
    """Jaccard (1908): 1 - a / (a + b + c)."""

    description = "Jaccard distance"

    def formula(self, a, b, c):
        if a + b + c <= 0.0:
            return None
        return 1.0 - a / (a + b + c)


class UpholtDistance(BinaryDistance):
    """Upholt (1977) restriction-site distance: -ln(2 n_st / (n_s + n_t)) / 6."""

    description = "Upholt distance"

    def formula(self, a, b, c):
        if a == 0:
            return None
        n_s = b + a
        n_t = c + a
        s_hat = 2.0 * a / (n_s + n_t)
        return -float(np.log(s_hat)) / 6.0


# ============================================================================ #
# Other character distances                                                    #
# ============================================================================ #


def genotype_difference(ci1: str, ci2: str, cj1: str, cj2: str) -> int:
    """
    Allelic difference of two diploid genotypes (Smouse & Peakall 1999).

    AA-AA 0, AA-AB 1, AA-BC 3, AA-BB 4, AB-AB 0, AB-AC 1, AB-CD 2, AB-CC 3.
    """
    if ci1 == ci2:
        if cj1 == cj2:
            return 0 if ci1 == cj1 else 4
        return 1 if ci1 in (cj1, cj2) else 3
    if cj1 == cj2:
        return 1 if cj1 in (ci1, ci2) else 3
    if (ci1 == cj1 and ci2 == cj2) or (ci1 == cj2 and ci2 == cj1):
        return 0
    if ci1 in (cj1, cj2) or ci2 in (cj1, cj2):
        return 1
    return 2


class CodominantDistance(DistanceTransform):
    """
    Codominant genetic distance for diploid data.

    Consecutive character pairs form one locus.  A locus with either
    position masked is left out entirely; loci with a gap or missing allele
    in either taxon are skipped for that pair, and

        d = n_loci * sum(diff) / n_valid_loci

    optionally under a square root, where n_loci counts the unmasked loci.
    """

    description = "Codominant distance"
    config_class = CodominantConfig

    def applicability(self, characters) -> Optional[str]:
        if not characters.diploid:
            return "the characters are not diploid"
        if characters.has_char_weights:
            return "character weights are not supported"
        return None

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        n_taxa = characters.n_taxa
        n_chars = characters.n_chars
        mask = characters.mask
        loci = [k for k in range(n_chars // 2) if not (mask[2 * k] or mask[2 * k + 1])]
        n_loci = len(loci)
        skip = {characters.gap, characters.missing}

        distances = Distances(n_taxa, characters.labels)
        undefined = []
        for i in range(1, n_taxa + 1):
            seq_i = characters.get_row(i)
            for j in range(i + 1, n_taxa + 1):
                seq_j = characters.get_row(j)
                total = 0
                n_valid = 0
                for k in loci:
                    alleles = (seq_i[2 * k], seq_i[2 * k + 1], seq_j[2 * k], seq_j[2 * k + 1])
                    if any(a in skip for a in alleles):
                        continue
                    n_valid += 1
                    total += genotype_difference(*alleles)
                if n_valid == 0:
                    undefined.append((i, j))
                    continue
                dij = float(n_loci) * total / n_valid
                if self.config.use_square_root:
                    dij = float(np.sqrt(dij))
                distances.set(i, j, dij)
            self._row_done(progress, i, n_taxa)

        self._replace_undefined(distances, undefined)
        log_distance_statistics(self.name, n_taxa, n_chars, backend)
        return distances


class GapDistance(DistanceTransform):
    """
    Weighted fraction of unmasked positions where exactly one of the two
    sequences has a gap; 1.0 when nothing agrees.
    """

    description = "Gap distance"

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        n_taxa = characters.n_taxa
        active = ~characters.mask
        weights = characters.weights[active]
        is_gap = characters.matrix[:, active] == characters.gap
        length = float(weights.sum())

        distances = Distances(n_taxa, characters.labels)
        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                agree = is_gap[s - 1] == is_gap[t - 1]
                sim = float(weights[agree].sum())
                v = 1.0
                if sim != 0 and length != 0:
                    v = 1.0 - sim / length
                distances.set(s, t, v)
            self._row_done(progress, s, n_taxa)

        log_distance_statistics(self.name, n_taxa, int(active.sum()), backend)
        return distances


def base_frequencies(characters, states: Optional[str] = None) -> np.ndarray:
    """
    Weighted state frequencies of every taxon over unmasked positions.

    Returns
    -------
    np.ndarray, shape (n_taxa, len(states))
        Rows sum to 1, or are all zero for a taxon without any state.
    """
    states = characters.symbols if states is None else states
    fold = characters.folds_case
    alphabet = np.array(list(states.lower() if fold else states))
    active = ~characters.mask
    matrix = characters.matrix[:, active]
    if fold:
        matrix = np.char.lower(matrix)
    weights = characters.weights[active]

    freqs = np.zeros((characters.n_taxa, len(states)))
    for x, ch in enumerate(alphabet):
        freqs[:, x] = ((matrix == ch) * weights[None, :]).sum(axis=1)
    totals = freqs.sum(axis=1, keepdims=True)
    np.divide(freqs, totals, out=freqs, where=totals > 0)
    return freqs


class BaseFreqDistance(DistanceTransform):
    """Sum of absolute differences between the base compositions of two taxa."""

    description = "Base frequency distance"

    def applicability(self, characters) -> Optional[str]:
        if not characters.symbols:
            return "the character matrix has no symbol alphabet"
        return None

    def apply(self, characters, progress=None, backend: str = "best") -> Distances:
        progress, backend = self._start(characters, progress, backend)
        freqs = base_frequencies(characters)
        for t in range(1, characters.n_taxa + 1):
            logger.debug(
                "Base frequencies of %s: %s",
                characters.label(t),
                " ".join(f"{f:.4f}" for f in freqs[t - 1]),
            )

        n_taxa = characters.n_taxa
        distances = Distances(n_taxa, characters.labels)
        for s in range(1, n_taxa + 1):
            for t in range(s + 1, n_taxa + 1):
                distances.set(s, t, float(np.abs(freqs[s - 1] - freqs[t - 1]).sum()))
            self._row_done(progress, s, n_taxa)

        log_distance_statistics(
            self.name, n_taxa, len(characters.active_positions()), backend
        )
        return distances
