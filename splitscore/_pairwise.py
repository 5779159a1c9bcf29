"""
_pairwise.py
============
Joint state frequencies of two aligned sequences and the distances that can
be read off them.

    F[i, j] = summed weight of unmasked sites where taxon 1 shows state i
              and taxon 2 shows state j

F has two extra rows and columns: index n collects gaps, index n+1 missing
data.  ``get_f()`` normalises the n x n block to a joint distribution;
``ml_distance()`` fits a substitution model to it.

Ambiguity codes
---------------
'ignore'   an ambiguity code counts as missing data
'average'  the site weight is spread evenly over every pair of states the
           two symbols can stand for
'match'    as 'average', except that two identical ambiguity sets put the
           weight on the diagonal (r vs r counts half a/a, half g/g)

Ambiguous sites never count towards ``num_not_missing``.
"""

import logging
from typing import Dict, Optional

import numpy as np

from splitscore._backend import import_cpu_kernels, resolve_backend, select_kernel
from splitscore._context import get_backend_override
from splitscore._exceptions import InvalidCharacterError, SaturatedDistanceError
from splitscore._optimize import brent, golden_section


logger = logging.getLogger(__name__)

_frequency_kernel, _, _, _ = import_cpu_kernels()


# Search intervals of the ML branch length
ML_TMIN = 1e-8
ML_TSPLIT = 2.0
ML_TMAX = 10.0
BOUNDARY_TOL = 1e-4


# ============================================================================ #
# Encoding                                                                     #
# ============================================================================ #


def state_lookup(characters, states: str) -> Dict[str, int]:
    """Map every symbol of ``states`` (folded when the matrix folds case) to its index."""
    lookup = {}
    for idx, ch in enumerate(states):
        key = ch.lower() if characters.folds_case else ch
        lookup.setdefault(key, idx)
    return lookup


def encode_rows(characters, states: str, ambiguity: str = "ignore", taxa=None) -> np.ndarray:
    """
    Integer-code rows of a character matrix for the site kernels.

    Parameters
    ----------
    characters : Characters
    states : str
        Alphabet; symbol k is coded k.
    ambiguity : str
        When not 'ignore', cells holding an ambiguity code are coded n+2
        so that the caller can resolve them.
    taxa : iterable of int, optional
        1-based taxa to encode; default all.

    Returns
    -------
    np.ndarray, int32, shape (len(taxa), n_chars)
        Codes as described in ``_cpu_kernels``; masked sites are coded
        missing.

    Raises
    ------
    InvalidCharacterError
        For an unmasked symbol that is neither a state, the gap nor the
        missing symbol.
    """
    n = len(states)
    lookup = state_lookup(characters, states)
    fold = characters.folds_case
    gap = characters.gap
    missing = characters.missing
    resolve_ambiguity = ambiguity != "ignore" and characters.has_ambiguous_states
    mask = characters.mask

    if taxa is None:
        taxa = range(1, characters.n_taxa + 1)
    taxa = list(taxa)

    codes = np.full((len(taxa), characters.n_chars), n + 1, dtype=np.int32)
    for row, t in enumerate(taxa):
        symbols = characters.row_array(t)
        for k in range(characters.n_chars):
            if mask[k]:
                continue
            ch = str(symbols[k])
            if ch == gap:
                codes[row, k] = n
            elif ch == missing:
                if resolve_ambiguity and characters.has_ambiguous_string(t, k + 1):
                    codes[row, k] = n + 2
                else:
                    codes[row, k] = n + 1
            else:
                code = lookup.get(ch.lower() if fold else ch, -1)
                if code < 0:
                    raise InvalidCharacterError(t, k + 1, ch)
                codes[row, k] = code
    return codes


def bulmer_variance(d: float, b: float, num_not_missing: int) -> float:
    """
    Bulmer (1991) variance of a corrected distance.

        var(d) = e^(2d/b) b (1 - e^(-d/b)) (1 - b + b e^(-d/b)) / N

    Parameters
    ----------
    d : float
        Corrected distance.
    b : float
        Saturation level of the p-distance (0.75 for nucleotides, 0.93 for
        proteins).
    num_not_missing : int
        Number of compared sites N.  The variance is 0 when N is 0.
    """
    if num_not_missing <= 0:
        return 0.0
    e = np.exp(-d / b)
    return float(np.exp(2 * d / b) * b * (1 - e) * (1 - b + b * e) / num_not_missing)


# ============================================================================ #
# PairwiseCompare                                                              #
# ============================================================================ #


class PairwiseCompare:
    """
    Weighted joint state counts for one pair of taxa.

    Parameters
    ----------
    characters : Characters
        The alignment.
    states : str
        Alphabet over which F is built (usually ``characters.symbols``).
    taxon1, taxon2 : int
        1-based taxa.
    ambiguity : {'ignore', 'average', 'match'}
        Treatment of ambiguity codes.
    backend : str, default 'best'
        Backend running the counting kernel.
    codes : np.ndarray, optional
        Pre-computed ``encode_rows`` output for all taxa, so that matrix
        builders encode the alignment once.

    Raises
    ------
    InvalidCharacterError
        If either row holds a symbol outside the alphabet.

    Examples
    --------
    >>> chars = Characters(['acgt', 'acga'])
    >>> pc = PairwiseCompare(chars, 'acgt', 1, 2)
    >>> pc.num_not_missing
    4
    >>> pc.get_f()[3, 0]
    0.25
    """

    def __init__(
        self,
        characters,
        states: str,
        taxon1: int,
        taxon2: int,
        ambiguity: str = "ignore",
        backend: str = "best",
        codes: Optional[np.ndarray] = None,
    ) -> None:
        self.characters = characters
        self.states = states
        self.taxon1 = taxon1
        self.taxon2 = taxon2
        self.ambiguity = ambiguity

        n = len(states)
        self._n = n

        if codes is None:
            pair_codes = encode_rows(characters, states, ambiguity, taxa=(taxon1, taxon2))
            codes_i, codes_j = pair_codes[0], pair_codes[1]
        else:
            codes_i, codes_j = codes[taxon1 - 1], codes[taxon2 - 1]

        override = get_backend_override()
        kernel = select_kernel(
            _frequency_kernel, resolve_backend(override if override is not None else backend)
        )

        active = ~characters.mask
        counts = np.zeros((n + 2, n + 2), dtype=np.float64)
        self._num_not_missing = int(
            kernel(codes_i, codes_j, characters.weights, active, n, counts)
        )
        self._num_active = int(active.sum())

        ambiguous = active & ((codes_i == n + 2) | (codes_j == n + 2))
        if ambiguous.any():
            self._add_ambiguous_sites(np.flatnonzero(ambiguous), codes_i, codes_j, counts)

        self._counts = counts
        self._original_counts = counts.copy()
        self._original_not_missing = self._num_not_missing

    def _symbol_states(self, taxon: int, position: int, code: int) -> str:
        """States a cell stands for: its ambiguity set or its own (folded) symbol."""
        if code == self._n + 2:
            return self.characters.ambiguous_string(taxon, position)
        ch = self.characters.get(taxon, position)
        if self.characters.folds_case and ch not in (self.characters.gap, self.characters.missing):
            ch = ch.lower()
        return ch

    def _state_index(self, ch: str, taxon: int, position: int) -> int:
        if ch == self.characters.gap:
            return self._n
        if ch == self.characters.missing:
            return self._n + 1
        idx = self.states.find(ch)
        if idx < 0:
            raise InvalidCharacterError(taxon, position, ch)
        return idx

    def _add_ambiguous_sites(self, sites, codes_i, codes_j, counts) -> None:
        for k in sites:
            position = int(k) + 1
            weight = self.characters.weights[k]
            si = self._symbol_states(self.taxon1, position, codes_i[k])
            sj = self._symbol_states(self.taxon2, position, codes_j[k])

            if self.ambiguity == "match" and si.lower() == sj.lower():
                w = weight / len(si)
                for ch in si:
                    x = self._state_index(ch, self.taxon1, position)
                    counts[x, x] += w
            else:
                w = weight / (len(si) * len(sj))
                for ci in si:
                    x = self._state_index(ci, self.taxon1, position)
                    for cj in sj:
                        y = self._state_index(cj, self.taxon2, position)
                        counts[x, y] += w

    # ------------------------------------------------------------------ #
    # Counts                                                              #
    # ------------------------------------------------------------------ #

    @property
    def num_states(self) -> int:
        return self._n

    @property
    def num_active(self) -> int:
        """Unmasked sites."""
        return self._num_active

    @property
    def num_not_missing(self) -> int:
        """Unmasked sites where neither taxon has a gap, missing or ambiguous symbol."""
        return self._num_not_missing

    @property
    def num_gaps(self) -> int:
        return self._num_active - self._num_not_missing

    @property
    def counts(self) -> np.ndarray:
        """Copy of the (n+2) x (n+2) weighted counts."""
        return self._counts.copy()

    def get_f(self) -> Optional[np.ndarray]:
        """
        Joint state distribution over the alphabet.

        Returns
        -------
        np.ndarray (n, n) or None
            Counts of the state block divided by their sum, or None when no
            site is jointly defined (the distance is undefined, not zero).
        """
        if self._num_not_missing == 0:
            return None
        block = self._counts[: self._n, : self._n]
        total = block.sum()
        if total <= 0:
            return None
        return block / total

    def get_extended_f(self) -> Optional[np.ndarray]:
        """All (n+2) x (n+2) counts divided by the number of active sites."""
        if self._num_active == 0:
            return None
        return self._counts / self._num_active

    # ------------------------------------------------------------------ #
    # Bootstrap                                                           #
    # ------------------------------------------------------------------ #

    def bootstrap_f(self, rng: np.random.Generator) -> None:
        """
        Resample the state block of F.

        Draws ``num_active`` sites with replacement; a draw lands in cell
        (i, j) with probability F[i, j] / num_active and otherwise counts as
        a missing site.  ``restore_after_bootstrap`` undoes this.
        """
        n = self._n
        if self._num_active == 0:
            return
        block = self._original_counts[:n, :n].ravel() / self._num_active
        rest = max(0.0, 1.0 - block.sum())
        probs = np.append(block, rest)
        probs = probs / probs.sum()
        draws = rng.multinomial(self._num_active, probs)

        counts = self._original_counts.copy()
        counts[:n, :n] = draws[:-1].reshape(n, n)
        self._counts = counts
        self._num_not_missing = int(draws[:-1].sum())

    def restore_after_bootstrap(self) -> None:
        self._counts = self._original_counts.copy()
        self._num_not_missing = self._original_not_missing

    # ------------------------------------------------------------------ #
    # Maximum likelihood                                                  #
    # ------------------------------------------------------------------ #

    @staticmethod
    def log_likelihood(model, F: np.ndarray, t: float) -> float:
        """Negative log-likelihood -sum F_ij log X(i, j, t) over nonzero F_ij."""
        X = model.joint_matrix(t)
        nonzero = F != 0.0
        return float(-np.sum(F[nonzero] * np.log(np.maximum(X[nonzero], 1e-300))))

    def ml_distance(self, model, optimizer: str = "golden") -> float:
        """
        Maximum-likelihood distance under ``model``.

        The branch length is searched on [1e-8, 2] and, if the optimum sits
        on the upper bound, on [2, 10].

        Parameters
        ----------
        model : SubstitutionModel
        optimizer : {'golden', 'brent'}

        Returns
        -------
        float
            Optimal branch length times ``model.rate``.

        Raises
        ------
        SaturatedDistanceError
            If no site is comparable or the optimum is at 10.
        """
        full = self.get_f()
        if full is None:
            raise SaturatedDistanceError("Distance undefined: no comparable sites")

        ns = model.n_states
        F = full[:ns, :ns]
        total = F.sum()
        if total <= 0:
            raise SaturatedDistanceError("Distance undefined: no comparable sites")
        F = F / total

        minimise = brent if optimizer == "brent" else golden_section

        def f(t):
            return self.log_likelihood(model, F, t)

        t = minimise(f, ML_TMIN, ML_TSPLIT)
        if ML_TSPLIT - t < BOUNDARY_TOL:
            t = minimise(f, ML_TSPLIT, ML_TMAX)
            if ML_TMAX - t < BOUNDARY_TOL:
                raise SaturatedDistanceError(
                    f"ML distance of taxa {self.taxon1} and {self.taxon2} is saturated"
                )
        return t * model.rate

    def bulmer_variance(self, d: float, b: float) -> float:
        return bulmer_variance(d, b, self._num_not_missing)
