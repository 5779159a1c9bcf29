"""
_characters.py
==============
Read-only character matrix: taxa × positions of single-character states.

Public API
----------
  Characters(sequences, labels=None, datatype='dna', ...)
      Constructor.  ``sequences`` is a list of equal-length strings or a
      mapping label -> string.

  .get(taxon, position)            state symbol (ambiguity codes read as missing)
  .get_original(taxon, position)   symbol as given, ambiguity codes included
  .get_row(taxon)                  row as a string (position p at index p-1)
  .is_masked(position), .char_weight(position)
  .color(symbol), .n_colors
  .has_ambiguous_states, .ambiguous_string(taxon, position)

Indexing
--------
Taxa and positions are 1-based in every accessor, as in the rest of the
package.  The numpy arrays behind the accessors (``matrix``, ``weights``,
``mask``) are 0-based and may be used directly by vectorised code.

Ambiguity codes
---------------
For nucleotide data the IUPAC codes r, y, k, m, s, w, b, d, h, v and n are
stored as the missing symbol.  The code itself is remembered per cell so that
frequency counters can spread the site weight over the states it stands for.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np


logger = logging.getLogger(__name__)


DNA = "dna"
RNA = "rna"
PROTEIN = "protein"
STANDARD = "standard"
MICROSAT = "microsat"
UNKNOWN = "unknown"

DATATYPES = (DNA, RNA, PROTEIN, STANDARD, MICROSAT, UNKNOWN)

DEFAULT_SYMBOLS = {
    DNA: "acgt",
    RNA: "acgu",
    PROTEIN: "arndcqeghilkmfpstwyv",
    STANDARD: "01",
    MICROSAT: "",
    UNKNOWN: "",
}

# IUPAC nucleotide ambiguity codes (DNA spelling; RNA swaps t for u)
IUPAC_CODES = {
    "r": "ag",
    "y": "ct",
    "k": "gt",
    "m": "ac",
    "s": "cg",
    "w": "at",
    "b": "cgt",
    "d": "agt",
    "h": "act",
    "v": "acg",
    "n": "acgt",
}


def ambiguity_table(datatype: str) -> Dict[str, str]:
    """Return the ambiguity-code expansion table for a nucleotide datatype."""
    if datatype == DNA:
        return dict(IUPAC_CODES)
    if datatype == RNA:
        return {code: states.replace("t", "u") for code, states in IUPAC_CODES.items()}
    return {}


class Characters:
    """
    An immutable aligned character matrix with per-position weights and mask.

    Parameters
    ----------
    sequences : list[str] or Mapping[str, str]
        One string per taxon, all of the same length.
    labels : list[str], optional
        Taxon labels.  Defaults to the mapping keys, or 't1', 't2', ...
    datatype : str, default 'dna'
        One of 'dna', 'rna', 'protein', 'standard', 'microsat', 'unknown'.
    symbols : str, optional
        State alphabet.  Defaults to the datatype's alphabet.
    gap, missing : str, default '-' and '?'
    respect_case : bool, default False
        If False, comparisons fold upper case to lower case.
    tokens : bool, default False
        Whether the matrix was read from a token (non single-letter) format.
        Token data is never case folded.
    weights : sequence of float, optional
        Per-position weights (default 1.0 everywhere).
    mask : sequence of bool, optional
        Per-position mask; True marks an excluded position.
    char_labels : sequence of str, optional
        Per-position labels used when labelling splits and network edges.
    diploid : bool, default False
        Consecutive pairs of positions form one diploid locus.

    Raises
    ------
    ValueError
        If rows differ in length, the datatype is unknown, or the weight,
        mask or label vectors do not match the number of positions.

    Examples
    --------
    >>> chars = Characters(['acgt', 'acga'], labels=['A', 'B'])
    >>> chars.get(2, 4)
    'a'
    >>> chars.n_taxa, chars.n_chars
    (2, 4)
    """

    def __init__(
        self,
        sequences: Union[Sequence[str], Mapping[str, str]],
        labels: Optional[Sequence[str]] = None,
        datatype: str = DNA,
        symbols: Optional[str] = None,
        gap: str = "-",
        missing: str = "?",
        respect_case: bool = False,
        tokens: bool = False,
        weights: Optional[Sequence[float]] = None,
        mask: Optional[Sequence[bool]] = None,
        char_labels: Optional[Sequence[str]] = None,
        diploid: bool = False,
    ) -> None:
        if isinstance(sequences, Mapping):
            if labels is None:
                labels = list(sequences.keys())
            sequences = list(sequences.values())
        sequences = [str(s) for s in sequences]

        if datatype not in DATATYPES:
            raise ValueError(
                f"Unknown datatype {datatype!r}. Expected one of: {', '.join(DATATYPES)}"
            )
        if len(sequences) == 0:
            raise ValueError("Character matrix needs at least one taxon")

        n_chars = len(sequences[0])
        for t, seq in enumerate(sequences, start=1):
            if len(seq) != n_chars:
                raise ValueError(
                    f"Sequence of taxon {t} has length {len(seq)}, expected {n_chars}"
                )

        if labels is None:
            labels = [f"t{t}" for t in range(1, len(sequences) + 1)]
        if len(labels) != len(sequences):
            raise ValueError(
                f"Got {len(labels)} labels for {len(sequences)} sequences"
            )

        self.datatype = datatype
        self.symbols = DEFAULT_SYMBOLS[datatype] if symbols is None else symbols
        self.gap = gap
        self.missing = missing
        self.respect_case = respect_case
        self.tokens = tokens
        self.diploid = diploid
        self.labels: List[str] = [str(x) for x in labels]

        self.n_taxa = len(sequences)
        self.n_chars = n_chars

        # ── Original symbols and the state matrix (ambiguity -> missing) ──
        if n_chars > 0:
            original = np.array([list(s) for s in sequences], dtype="<U1")
        else:
            original = np.empty((self.n_taxa, 0), dtype="<U1")
        matrix = original.copy()

        self._ambiguous: Dict[Tuple[int, int], str] = {}
        self._ambiguity_table = ambiguity_table(datatype)
        if self._ambiguity_table:
            alphabet = set(self.symbols.lower())
            for code in self._ambiguity_table:
                if code in alphabet:
                    continue
                hits = np.argwhere(np.char.lower(original) == code)
                for ti, ci in hits:
                    self._ambiguous[(int(ti) + 1, int(ci) + 1)] = str(original[ti, ci])
                    matrix[ti, ci] = missing

        self._original = original
        self._matrix = matrix

        # ── Per-position data ────────────────────────────────────────────
        if weights is None:
            self._weights = np.ones(n_chars, dtype=np.float64)
            self._has_weights = False
        else:
            self._weights = np.asarray(weights, dtype=np.float64)
            self._has_weights = True
            if self._weights.shape != (n_chars,):
                raise ValueError(
                    f"Got {self._weights.size} character weights for {n_chars} positions"
                )

        if mask is None:
            self._mask = np.zeros(n_chars, dtype=np.bool_)
        else:
            self._mask = np.asarray(mask, dtype=np.bool_)
            if self._mask.shape != (n_chars,):
                raise ValueError(
                    f"Got {self._mask.size} mask entries for {n_chars} positions"
                )

        if char_labels is not None and len(char_labels) != n_chars:
            raise ValueError(
                f"Got {len(char_labels)} character labels for {n_chars} positions"
            )
        self._char_labels = list(char_labels) if char_labels is not None else None

        # ── Colours: one per distinct symbol, ignoring case ─────────────
        self._colors: Dict[str, int] = {}
        for ch in self.symbols.lower():
            if ch not in self._colors:
                self._colors[ch] = len(self._colors) + 1

        logger.debug(
            "Character matrix: %d taxa, %d positions, datatype=%s, %d ambiguous cells",
            self.n_taxa,
            self.n_chars,
            self.datatype,
            len(self._ambiguous),
        )

    # ------------------------------------------------------------------ #
    # Matrix access                                                       #
    # ------------------------------------------------------------------ #

    def get(self, taxon: int, position: int) -> str:
        """State symbol of ``taxon`` at ``position`` (both 1-based)."""
        return str(self._matrix[taxon - 1, position - 1])

    def get_original(self, taxon: int, position: int) -> str:
        """Symbol as given, with ambiguity codes preserved."""
        return str(self._original[taxon - 1, position - 1])

    def get_row(self, taxon: int) -> str:
        """Row of ``taxon`` as a string; position p is at index p-1."""
        return "".join(self._matrix[taxon - 1].tolist())

    def row_array(self, taxon: int) -> np.ndarray:
        """0-based ``<U1`` array view of one row."""
        return self._matrix[taxon - 1]

    @property
    def matrix(self) -> np.ndarray:
        """(n_taxa, n_chars) array of state symbols, read-only by convention."""
        return self._matrix

    def label(self, taxon: int) -> str:
        return self.labels[taxon - 1]

    def char_label(self, position: int) -> Optional[str]:
        if self._char_labels is None:
            return None
        return self._char_labels[position - 1]

    # ------------------------------------------------------------------ #
    # Mask and weights                                                    #
    # ------------------------------------------------------------------ #

    def is_masked(self, position: int) -> bool:
        return bool(self._mask[position - 1])

    def char_weight(self, position: int) -> float:
        return float(self._weights[position - 1])

    @property
    def has_char_weights(self) -> bool:
        return self._has_weights

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def mask(self) -> np.ndarray:
        return self._mask

    def active_positions(self) -> List[int]:
        """1-based positions that are not masked, in ascending order."""
        return [int(p) + 1 for p in np.flatnonzero(~self._mask)]

    # ------------------------------------------------------------------ #
    # Format queries                                                      #
    # ------------------------------------------------------------------ #

    @property
    def is_nucleotide(self) -> bool:
        return self.datatype in (DNA, RNA)

    @property
    def is_protein(self) -> bool:
        return self.datatype == PROTEIN

    @property
    def folds_case(self) -> bool:
        """Whether symbols are compared case-insensitively."""
        return not (self.respect_case or self.tokens or self.datatype == MICROSAT)

    def color(self, symbol: str) -> int:
        """
        Colour of a symbol: its 1-based rank among the distinct symbols of the
        alphabet, ignoring case, or -1 if the symbol is not a state.
        """
        return self._colors.get(symbol.lower(), -1)

    @property
    def n_colors(self) -> int:
        return len(self._colors)

    # ------------------------------------------------------------------ #
    # Ambiguity codes                                                     #
    # ------------------------------------------------------------------ #

    @property
    def has_ambiguous_states(self) -> bool:
        return len(self._ambiguous) > 0

    def has_ambiguous_string(self, taxon: int, position: int) -> bool:
        return (taxon, position) in self._ambiguous

    def ambiguous_string(self, taxon: int, position: int) -> Optional[str]:
        """States an ambiguity code stands for (e.g. 'ag' for r), else None."""
        code = self._ambiguous.get((taxon, position))
        if code is None:
            return None
        return self._ambiguity_table[code.lower()]

    def __repr__(self) -> str:
        return (
            f"Characters(n_taxa={self.n_taxa}, n_chars={self.n_chars}, "
            f"datatype={self.datatype!r})"
        )
