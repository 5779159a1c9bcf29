"""
_split_system.py
================
Splits (bipartitions of the taxon set) and ordered, weighted split systems.

A ``Split`` stores one side as a frozenset of 1-based taxa; the other side
is implicit.  A split and its complement describe the same bipartition:
``equals_as_split`` compares them accordingly, and so do ``==`` and
``hash``.

Splits in a ``SplitSystem`` are indexed from 1 in insertion order.  Indices
are stable: they are used for labels and for the mapping back to the
characters that support each split.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Union

import numpy as np


logger = logging.getLogger(__name__)


class Split:
    """
    Bipartition of taxa 1..n_taxa.

    Parameters
    ----------
    side : iterable of int
        1-based taxa on one side.
    n_taxa : int

    Examples
    --------
    >>> a = Split({1, 2}, 4)
    >>> a.equals_as_split(Split({3, 4}, 4))
    True
    >>> a.split_size
    2
    """

    __slots__ = ("side", "n_taxa")

    def __init__(self, side: Iterable[int], n_taxa: int) -> None:
        side = frozenset(int(t) for t in side)
        if side and (min(side) < 1 or max(side) > n_taxa):
            raise ValueError(f"Split side {sorted(side)} is outside taxa 1..{n_taxa}")
        self.side = side
        self.n_taxa = n_taxa

    def complement(self) -> "Split":
        return Split(set(range(1, self.n_taxa + 1)) - self.side, self.n_taxa)

    @property
    def cardinality(self) -> int:
        return len(self.side)

    @property
    def split_size(self) -> int:
        """Size of the smaller side."""
        return min(len(self.side), self.n_taxa - len(self.side))

    @property
    def is_proper(self) -> bool:
        return 0 < len(self.side) < self.n_taxa

    @property
    def is_trivial(self) -> bool:
        return self.split_size == 1

    def contains(self, taxon: int) -> bool:
        return taxon in self.side

    def normalized(self) -> frozenset:
        """The side that contains taxon 1."""
        return self.side if 1 in self.side else self.complement().side

    def equals_as_split(self, other: "Split") -> bool:
        if self.n_taxa != other.n_taxa:
            return False
        if self.side == other.side:
            return True
        return len(self.side) + len(other.side) == self.n_taxa and not (self.side & other.side)

    def is_compatible(self, other: "Split") -> bool:
        """True if one of the four intersections of the two bipartitions is empty."""
        a = self.side
        a_bar = frozenset(range(1, self.n_taxa + 1)) - a
        b = other.side
        b_bar = frozenset(range(1, self.n_taxa + 1)) - b
        return not (a & b) or not (a & b_bar) or not (a_bar & b) or not (a_bar & b_bar)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Split):
            return NotImplemented
        return self.equals_as_split(other)

    def __hash__(self) -> int:
        return hash((self.normalized(), self.n_taxa))

    def __repr__(self) -> str:
        return f"Split({sorted(self.side)}, n_taxa={self.n_taxa})"


class SplitSystem:
    """
    Ordered list of weighted splits on ``n_taxa`` taxa.

    Examples
    --------
    >>> splits = SplitSystem(4)
    >>> splits.add({1, 2}, weight=2.0)
    1
    >>> splits.find(Split({3, 4}, 4))
    1
    >>> splits.weight(1)
    2.0
    """

    def __init__(self, n_taxa: int, labels: Optional[List[str]] = None) -> None:
        self.n_taxa = n_taxa
        self.taxon_labels = list(labels) if labels is not None else None
        self._splits: List[Split] = []
        self._weights: List[float] = []
        self._confidences: List[float] = []
        self._labels: List[Optional[str]] = []
        self.compatible: Optional[bool] = None
        # split index -> supporting character positions, when known
        self.split_to_chars: Dict[int, List[int]] = {}

    def add(
        self,
        side: Union[Split, Iterable[int]],
        weight: float = 1.0,
        confidence: float = 1.0,
        label: Optional[str] = None,
    ) -> int:
        """Append a split; returns its 1-based index."""
        split = side if isinstance(side, Split) else Split(side, self.n_taxa)
        if split.n_taxa != self.n_taxa:
            raise ValueError(
                f"Split on {split.n_taxa} taxa added to a system on {self.n_taxa}"
            )
        self._splits.append(split)
        self._weights.append(float(weight))
        self._confidences.append(float(confidence))
        self._labels.append(label)
        self.compatible = None
        return len(self._splits)

    @property
    def n_splits(self) -> int:
        return len(self._splits)

    def __len__(self) -> int:
        return len(self._splits)

    def __iter__(self) -> Iterator[Split]:
        return iter(self._splits)

    def get(self, index: int) -> Split:
        return self._splits[index - 1]

    def weight(self, index: int) -> float:
        return self._weights[index - 1]

    def set_weight(self, index: int, weight: float) -> None:
        self._weights[index - 1] = float(weight)

    def confidence(self, index: int) -> float:
        return self._confidences[index - 1]

    def label(self, index: int) -> Optional[str]:
        return self._labels[index - 1]

    def set_label(self, index: int, label: Optional[str]) -> None:
        self._labels[index - 1] = label

    @property
    def weights(self) -> np.ndarray:
        return np.array(self._weights, dtype=np.float64)

    def find(self, split: Split) -> Optional[int]:
        """Index of the first split equal to ``split`` in either orientation, or None."""
        for index, existing in enumerate(self._splits, start=1):
            if existing.equals_as_split(split):
                return index
        return None

    def is_compatible(self) -> bool:
        """True if every pair of splits is compatible."""
        n = len(self._splits)
        for i in range(n):
            for j in range(i + 1, n):
                if not self._splits[i].is_compatible(self._splits[j]):
                    return False
        return True

    def __repr__(self) -> str:
        return f"SplitSystem(n_taxa={self.n_taxa}, n_splits={self.n_splits})"
