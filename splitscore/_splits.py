"""
_splits.py
==========
Split systems read directly off character columns.

Every unmasked column is one vote.  Taxa are coloured by their state; a
column without gaps or missing data that shows exactly two colours splits
the taxa into those carrying the majority colour and the rest.  Equal
bipartitions (in either orientation) are merged by adding the column weights,
in the order in which they were first seen, so split indices are stable.

  DNA2Splits            colours are the states of the alphabet, or R/Y
  Binary2Splits         0/1 data, the '1' taxa form the recorded side
  RYSplits              purines against everything else, every column
  MedianNetworkSplits   DNA2Splits that falls back from R/Y to the full alphabet

Scenario
--------
>>> chars = Characters(['aa', 'ac', 'cc', 'cc'])
>>> splits = DNA2Splits().apply(chars)
>>> [(sorted(s.side), splits.weight(i)) for i, s in enumerate(splits, 1)]
[([1, 2], 1.0), ([2, 3, 4], 1.0), ([2], 1.0), ([3], 1.0), ([4], 1.0)]
"""

import logging
from typing import Callable, List, Optional

from splitscore._characters import DNA, RNA, STANDARD
from splitscore._config import SplitsConfig
from splitscore._exceptions import InvalidCharacterError
from splitscore._logging import log_filtered_splits, log_split_statistics
from splitscore._progress import ensure_progress
from splitscore._split_system import Split, SplitSystem
from splitscore._transform import SPLITS, Transform


logger = logging.getLogger(__name__)


PURINES = "agr"
PYRIMIDINES = "ctuy"


def ry_color(symbol: str) -> int:
    """1 for a purine, 2 for a pyrimidine, -1 otherwise."""
    ch = symbol.lower()
    if ch in PURINES:
        return 1
    if ch in PYRIMIDINES:
        return 2
    return -1


def filter_by_weight(splits: SplitSystem, min_weight: float) -> SplitSystem:
    """
    Keep trivial splits and splits with weight >= ``min_weight``.

    Supporting positions and labels move with their split.
    """
    filtered = SplitSystem(splits.n_taxa, splits.taxon_labels)
    for index, split in enumerate(splits, start=1):
        if split.split_size == 1 or splits.weight(index) >= min_weight:
            new_index = filtered.add(
                split, splits.weight(index), splits.confidence(index), splits.label(index)
            )
            if index in splits.split_to_chars:
                filtered.split_to_chars[new_index] = splits.split_to_chars[index]
    log_filtered_splits(splits.n_splits - filtered.n_splits, min_weight)
    return filtered


class DNA2Splits(Transform):
    """
    Majority-colour splits of a character matrix.

    Raises
    ------
    InvalidCharacterError
        For a symbol that is neither a state, gap nor missing.
    """

    output_kind = SPLITS
    description = "Splits from characters"
    config_class = SplitsConfig

    def applicability(self, characters) -> Optional[str]:
        if self.config.use_ry_alphabet and characters.datatype not in (DNA, RNA):
            return f"the RY alphabet needs nucleotide data, got {characters.datatype!r}"
        if not characters.symbols and not self.config.use_ry_alphabet:
            return "the character matrix has no symbol alphabet"
        return None

    def _uses_ry(self, characters) -> bool:
        return self.config.use_ry_alphabet

    def _colorer(self, characters) -> Callable[[str], int]:
        if self._uses_ry(characters):
            return ry_color
        return characters.color

    def _n_colors(self, characters) -> int:
        return 2 if self._uses_ry(characters) else characters.n_colors

    def _split_side(self, column: List[int], majority: int) -> set:
        return {t for t, color in enumerate(column, start=1) if color == majority}

    def apply(self, characters, progress=None, backend: str = "best") -> SplitSystem:
        self.check_applicable(characters)
        progress = ensure_progress(progress)
        progress.subtask(self.description)
        progress.set_maximum(characters.n_chars)
        progress.set_progress(0)

        config = self.config
        n_taxa = characters.n_taxa
        color_of = self._colorer(characters)
        n_colors = self._n_colors(characters)
        gap = characters.gap
        missing = characters.missing

        splits = SplitSystem(n_taxa, characters.labels)
        have_trivial = set()
        n_sites_used = 0
        n_gap_sites = 0

        for c in range(1, characters.n_chars + 1):
            if characters.is_masked(c):
                continue

            counts = [0] * (n_colors + 1)
            colors_used = set()
            column = []
            is_gap = False
            for t in range(1, n_taxa + 1):
                ch = characters.get(t, c)
                color = color_of(ch)
                if ch == gap or ch == missing:
                    is_gap = True
                if color == -1 and not is_gap:
                    raise InvalidCharacterError(t, c, ch)
                if color != -1:
                    colors_used.add(color)
                    counts[color] += 1
                column.append(color)
            if is_gap:
                n_gap_sites += 1
                continue

            majority = 0
            for color in range(1, n_colors + 1):
                if counts[color] > counts[majority]:
                    majority = color
            if len(colors_used) != 2:
                continue

            side = self._split_side(column, majority)
            if len(side) == 0 or len(side) == n_taxa:
                continue
            current = Split(side, n_taxa)

            weight = characters.char_weight(c)
            n_sites_used += 1
            index = splits.find(current)
            if index is not None:
                splits.set_weight(index, splits.weight(index) + weight)
                splits.split_to_chars[index].append(c)
            else:
                index = splits.add(current, weight)
                splits.split_to_chars[index] = [c]
                if config.add_all_trivial:
                    if current.cardinality == 1:
                        have_trivial.update(current.side)
                    elif current.cardinality == n_taxa - 1:
                        have_trivial.update(current.complement().side)
            progress.set_progress(c)

        n_generated = splits.n_splits
        n_trivial_added = 0
        if config.add_all_trivial:
            for t in range(1, n_taxa + 1):
                if t not in have_trivial:
                    index = splits.add({t}, 1.0)
                    splits.split_to_chars[index] = []
                    n_trivial_added += 1

        log_split_statistics(self.name, n_generated, n_sites_used, n_gap_sites, n_trivial_added)

        if config.label_splits:
            for index in range(1, splits.n_splits + 1):
                positions = splits.split_to_chars[index]
                splits.set_label(index, ",".join(str(p) for p in positions) if positions else None)

        progress.set_progress(characters.n_chars)
        if config.min_split_weight <= 1:
            return splits
        return filter_by_weight(splits, config.min_split_weight)


class Binary2Splits(DNA2Splits):
    """
    Splits of 0/1 characters: each informative column puts the taxa in state
    '1' on the recorded side.
    """

    description = "Splits from binary characters"

    def applicability(self, characters) -> Optional[str]:
        if characters.datatype != STANDARD:
            return f"datatype is {characters.datatype!r}, expected standard"
        if set(characters.symbols) != {"0", "1"}:
            return f"symbols {characters.symbols!r} are not binary '01'"
        return None

    def _colorer(self, characters) -> Callable[[str], int]:
        return characters.color

    def _n_colors(self, characters) -> int:
        return characters.n_colors

    def _split_side(self, column: List[int], majority: int) -> set:
        one = self._one_color
        return {t for t, color in enumerate(column, start=1) if color == one}

    def apply(self, characters, progress=None, backend: str = "best") -> SplitSystem:
        self._one_color = characters.color("1")
        return super().apply(characters, progress, backend)


class RYSplits(Transform):
    """
    One split per unmasked column: taxa showing a purine (a, g) against all
    others.  No trivial completion.
    """

    output_kind = SPLITS
    description = "RY splits"

    def applicability(self, characters) -> Optional[str]:
        if characters.datatype not in (DNA, RNA):
            return f"datatype is {characters.datatype!r}, expected DNA or RNA"
        return None

    def apply(self, characters, progress=None, backend: str = "best") -> SplitSystem:
        self.check_applicable(characters)
        progress = ensure_progress(progress)
        progress.subtask(self.description)
        progress.set_maximum(characters.n_chars)
        progress.set_progress(0)

        n_taxa = characters.n_taxa
        splits = SplitSystem(n_taxa, characters.labels)
        for c in range(1, characters.n_chars + 1):
            if characters.is_masked(c):
                continue
            side = {t for t in range(1, n_taxa + 1) if characters.get(t, c).lower() in "ag"}
            if len(side) == 0 or len(side) == n_taxa:
                continue
            current = Split(side, n_taxa)
            weight = characters.char_weight(c)
            index = splits.find(current)
            if index is not None:
                splits.set_weight(index, splits.weight(index) + weight)
                splits.split_to_chars[index].append(c)
            else:
                index = splits.add(current, weight)
                splits.split_to_chars[index] = [c]
            progress.set_progress(c)

        logger.info("%s: %d splits", self.name, splits.n_splits)
        progress.set_progress(characters.n_chars)
        return splits


class MedianNetworkSplits(DNA2Splits):
    """
    Splits underlying a median network.

    Same column scan as ``DNA2Splits``; the RY alphabet is switched off with
    a warning for non-nucleotide data instead of refusing to run.
    """

    description = "Median network splits"

    def applicability(self, characters) -> Optional[str]:
        if not characters.symbols:
            return "the character matrix has no symbol alphabet"
        return None

    def _uses_ry(self, characters) -> bool:
        return self.config.use_ry_alphabet and characters.datatype in (DNA, RNA)

    def apply(self, characters, progress=None, backend: str = "best") -> SplitSystem:
        if self.config.use_ry_alphabet and not self._uses_ry(characters):
            logger.warning(
                "Can't use RY alphabet for datatype %s; using the full alphabet for this run",
                characters.datatype,
            )
        return super().apply(characters, progress, backend)
