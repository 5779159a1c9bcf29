"""
_parsimony.py
=============
Parsimony splits (Bandelt and Dress 1992).

Taxa are added one at a time.  After taxon t the system holds splits of
taxa 1..t; each split A | B of the previous round proposes the two
extensions A+t | B and A | B+t, and taxon t on its own proposes t | 1..t-1.
A proposal is weighted by its parsimony index, the smallest quartet score
over the quartets it separates, capped by the weight of the split it grew
from.  Proposals of weight 0 are dropped, so the final system is pairwise
compatible.

The quartet scores run in the ``_pindex_njit`` kernel on an integer-coded
copy of the alignment; see ``_cpu_kernels`` for the scoring rule.
"""

import logging
from typing import Tuple

import numpy as np

from splitscore._backend import import_cpu_kernels, select_kernel
from splitscore._config import ParsimonySplitsConfig
from splitscore._context import effective_backend
from splitscore._logging import log_parsimony_summary
from splitscore._progress import ensure_progress
from splitscore._split_system import Split, SplitSystem
from splitscore._transform import SPLITS, Transform


logger = logging.getLogger(__name__)


def encode_symbols(characters, gaps_as_missing: bool) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integer-code the alignment for the quartet kernels.

    Returns
    -------
    symbols : int64[n_taxa, n_chars]
        Index of each cell's symbol among the distinct symbols present.
    skip : bool[n_symbols]
        True for symbols that exclude a site from a quartet (missing, and
        gap when ``gaps_as_missing``).
    """
    matrix = characters.matrix
    if characters.folds_case:
        matrix = np.char.lower(matrix)
    if matrix.size == 0:
        return np.zeros(matrix.shape, dtype=np.int64), np.zeros(0, dtype=np.bool_)

    uniques, inverse = np.unique(matrix, return_inverse=True)
    symbols = inverse.reshape(matrix.shape).astype(np.int64)

    skip = uniques == characters.missing
    if gaps_as_missing:
        skip |= uniques == characters.gap
    return symbols, np.ascontiguousarray(skip)


class ParsimonySplits(Transform):
    """
    Compatible split system from quartet parsimony.

    Examples
    --------
    >>> chars = Characters(['aaaa', 'aaac', 'ccca', 'cccc'])
    >>> splits = ParsimonySplits().apply(chars)
    >>> splits.is_compatible()
    True
    """

    output_kind = SPLITS
    description = "Parsimony splits"
    config_class = ParsimonySplitsConfig

    def apply(self, characters, progress=None, backend: str = "best") -> SplitSystem:
        self.check_applicable(characters)
        progress = ensure_progress(progress)
        progress.subtask(self.description)
        progress.set_maximum(100)
        progress.set_progress(0)

        backend = effective_backend(backend, self.name)
        _, _, _, pindex_kernel = import_cpu_kernels()
        pindex = select_kernel(pindex_kernel, backend)

        n_taxa = characters.n_taxa
        symbols, skip = encode_symbols(characters, self.config.gaps_as_missing)
        weights = np.ascontiguousarray(characters.weights, dtype=np.float64)
        active = np.ascontiguousarray(~characters.mask)

        def score(t: int, side: frozenset) -> float:
            in_split = np.zeros(n_taxa, dtype=np.bool_)
            for taxon in side:
                in_split[taxon - 1] = True
            return float(pindex(symbols, weights, active, skip, t - 1, in_split))

        progress.set_progress(100 // n_taxa)

        # (side, weight) pairs on taxa 1..t-1
        previous = []
        for t in range(2, n_taxa + 1):
            current = []

            singleton = frozenset([t])
            weight = score(t, singleton)
            if weight > 0:
                current.append((singleton, weight))

            earlier = frozenset(range(1, t))
            for side, parent_weight in previous:
                other = earlier - side
                for grown in (side | {t}, other | {t}):
                    weight = min(parent_weight, score(t, grown))
                    if weight > 0:
                        current.append((grown, weight))

            previous = current
            progress.set_progress(100 * t // n_taxa)

        splits = SplitSystem(n_taxa, characters.labels)
        for side, weight in previous:
            splits.add(Split(side, n_taxa), weight)
        splits.compatible = True

        log_parsimony_summary(n_taxa, splits.n_splits, len(characters.active_positions()))
        progress.set_progress(100)
        return splits
