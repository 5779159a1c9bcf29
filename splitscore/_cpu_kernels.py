"""
_cpu_kernels.py
===============
Numba kernels for the inner loops over alignment sites.

This module contains ONLY numba-accelerated code and does not import other
project modules. Every kernel works on an integer-coded alignment:

  codes[t, k] in 0..n-1   state index of taxon t at site k (0-based)
  codes[t, k] == n        gap
  codes[t, k] == n + 1    missing
  codes[t, k] == n + 2    ambiguity code, resolved outside the kernels

``active[k]`` is False for masked sites, ``weights[k]`` is the site weight.

Exported Functions
------------------
_pair_frequencies_njit : njit function
    Weighted (n+2)x(n+2) counts for one taxon pair.

_hamming_matrix_njit : njit function
    All-pairs weighted identity counts, parallel over taxon rows.

_quartet_pscore_njit : njit function
    Parsimony score of one quartet.

_pindex_njit : njit function
    Minimum parsimony score over the quartets straddling a split.

Notes
-----
- cache=True persists compiled binaries to disk for faster subsequent runs
- The uncompiled functions are available as ``kernel.py_func`` and are what
  the 'python' backend runs
"""

import numpy as np
from numba import njit, prange


# ======================================================================== #
# Pairwise frequency counts                                                 #
# ======================================================================== #


@njit(cache=True)
def _pair_frequencies_njit(codes_i, codes_j, weights, active, n_states, counts):
    """
    Accumulate weighted state-pair counts for one pair of rows.

    Parameters
    ----------
    codes_i, codes_j : int32[:]
        Coded rows of the two taxa.
    weights : float64[:]
        Site weights.
    active : bool[:]
        False for masked sites.
    n_states : int
        Alphabet size n.
    counts : float64[n+2, n+2]
        Output, accumulated in place.

    Returns
    -------
    int
        Number of active sites where both taxa carry a state.
    """
    not_missing = 0
    ambiguous = n_states + 2
    for k in range(codes_i.shape[0]):
        if not active[k]:
            continue
        a = codes_i[k]
        b = codes_j[k]
        if a == ambiguous or b == ambiguous:
            continue
        counts[a, b] += weights[k]
        if a < n_states and b < n_states:
            not_missing += 1
    return not_missing


# ======================================================================== #
# All-pairs Hamming                                                         #
# ======================================================================== #


@njit(cache=True, parallel=True)
def _hamming_matrix_njit(codes, weights, active, n_states, same_out, total_out, count_out):
    """
    Weighted identities for every pair of taxa.

    For each pair (i, j), i < j, over active sites where both taxa carry a
    state:

      same_out[i, j]   summed weight of identical sites
      total_out[i, j]  summed weight of all such sites
      count_out[i, j]  number of such sites

    Outputs are written symmetrically. The outer loop over i runs in
    parallel; rows never share output cells.
    """
    n_taxa = codes.shape[0]
    n_sites = codes.shape[1]
    for i in prange(n_taxa):
        for j in range(i + 1, n_taxa):
            same = 0.0
            total = 0.0
            count = 0
            for k in range(n_sites):
                if not active[k]:
                    continue
                a = codes[i, k]
                b = codes[j, k]
                if a < n_states and b < n_states:
                    total += weights[k]
                    count += 1
                    if a == b:
                        same += weights[k]
            same_out[i, j] = same
            same_out[j, i] = same
            total_out[i, j] = total
            total_out[j, i] = total
            count_out[i, j] = count
            count_out[j, i] = count


# ======================================================================== #
# Quartet parsimony                                                         #
# ======================================================================== #


@njit(cache=True)
def _quartet_pscore_njit(symbols, weights, active, skip, a1, a2, b1, b2):
    """
    Parsimony score of the quartet a1 a2 | b1 b2 (0-based rows).

    ``symbols`` holds one integer per distinct symbol; sites where any of the
    four taxa has a symbol flagged in ``skip`` are ignored.

    Returns
    -------
    float
        max(0, w(a1a2|b1b2) - max(w(a1b1|a2b2), w(a1b2|a2b1))) where w sums
        the weights of the sites supporting each pairing.
    """
    s_ab = 0.0
    s_ac = 0.0
    s_ad = 0.0
    for k in range(symbols.shape[1]):
        if not active[k]:
            continue
        x1 = symbols[a1, k]
        x2 = symbols[a2, k]
        y1 = symbols[b1, k]
        y2 = symbols[b2, k]
        if skip[x1] or skip[x2] or skip[y1] or skip[y2]:
            continue
        w = weights[k]
        if x1 == x2 and y1 == y2:
            s_ab += w
        if x1 == y1 and x2 == y2:
            s_ac += w
        if x1 == y2 and x2 == y1:
            s_ad += w
    other = max(s_ac, s_ad)
    if s_ab > other:
        return s_ab - other
    return 0.0


@njit(cache=True)
def _pindex_njit(symbols, weights, active, skip, t, in_split):
    """
    Minimum quartet score over quartets straddling a split of rows 0..t.

    a1 is row t (which must be on the ``in_split`` side), a2 ranges over
    the split side and b1 <= b2 over the other side; repeated taxa are
    allowed, so a singleton side still has quartets. Returns 0 as soon as
    one quartet scores 0, and inf when no quartet exists.
    """
    value = np.inf
    for a2 in range(t + 1):
        if not in_split[a2]:
            continue
        for b1 in range(t + 1):
            if in_split[b1]:
                continue
            for b2 in range(b1, t + 1):
                if in_split[b2]:
                    continue
                score = _quartet_pscore_njit(symbols, weights, active, skip, t, a2, b1, b2)
                if score == 0.0:
                    return 0.0
                if score < value:
                    value = score
    return value
