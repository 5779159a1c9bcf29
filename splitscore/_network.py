"""
_network.py
===========
Quasi-median condensation and minimum spanning networks.

Condensation
------------
Before a network is built the alignment is reduced to what matters for
its shape:

  1. masked columns are dropped; gaps and missing symbols are replaced by
     the most frequent symbol of their column
  2. columns equal up to a renaming of states are merged into one
     condensed column whose weight is the number of columns it stands for
  3. taxa with equal condensed rows are merged

A ``Translator`` remembers, for every original column, which original
symbol each condensed symbol stands for, so that any condensed sequence
(a node of the network) can be expanded back to a full-length haplotype.

Positions
---------
Columns of the unmasked alignment are numbered 1..n_sites ("sites");
``CondensedCharacters.positions[site - 1]`` is the alignment position of a
site.  Condensed columns and condensed taxa are numbered from 0, like the
characters of the condensed strings.

Minimum spanning network (Excoffier and Smouse 1994)
----------------------------------------------------
Node pairs are joined in order of increasing weighted Hamming distance.
A pair that connects two components is a spanning-tree edge; every pair
at the current distance becomes a network edge.  Once the graph is
connected at distance d, pairs up to d + epsilon are still added.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from splitscore._config import NetworkConfig
from splitscore._logging import log_condensation_statistics, log_network_statistics
from splitscore._progress import ensure_progress
from splitscore._transform import NETWORK, Transform


logger = logging.getLogger(__name__)


# ============================================================================ #
# Condensation                                                                 #
# ============================================================================ #


class Translator:
    """
    Map (site, condensed column, condensed symbol) -> original symbol.

    Examples
    --------
    >>> tr = Translator()
    >>> tr.put(site=3, orig_char='g', condensed_pos=0, condensed_char='a')
    >>> tr.get(3, 0, 'a')
    'g'
    """

    def __init__(self) -> None:
        self._table: Dict[Tuple[int, int, str], str] = {}

    def put(self, site: int, orig_char: str, condensed_pos: int, condensed_char: str) -> None:
        self._table[(site, condensed_pos, condensed_char)] = orig_char

    def get(self, site: int, condensed_pos: int, condensed_char: str) -> Optional[str]:
        """Original symbol, or None for a combination never seen."""
        return self._table.get((site, condensed_pos, condensed_char))

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"Translator({len(self._table)} entries)"


def majority_state(column: List[str]) -> str:
    """
    Most frequent symbol of a column, gaps and missing included.

    Ties go to the symbol with the smallest code point.
    """
    counts: Dict[str, int] = {}
    for ch in column:
        counts[ch] = counts.get(ch, 0) + 1
    best = None
    for ch in sorted(counts):
        if best is None or counts[ch] > counts[best]:
            best = ch
    return best


def _column_pattern(column: List[str]) -> Tuple[int, ...]:
    """Column with its states renamed in order of first appearance."""
    names: Dict[str, int] = {}
    return tuple(names.setdefault(ch, len(names)) for ch in column)


class CondensedCharacters:
    """
    Lossless reduction of an alignment to distinct columns and rows.

    Attributes
    ----------
    sequences : list[str]
        Distinct condensed rows, in order of the first taxon carrying them.
    orig_to_condensed_pos : numpy.ndarray
        Condensed column (0-based) of each site; entry ``site - 1``.
    orig_to_condensed_taxa : numpy.ndarray
        Condensed row (0-based) of each taxon; entry ``taxon - 1``.
    weights : numpy.ndarray
        Number of sites merged into each condensed column.
    positions : list[int]
        Alignment position of each site.
    char_labels : list[str]
        Label of each site: the character label, or its alignment position.
    translator : Translator
    """

    def __init__(
        self,
        sequences: List[str],
        orig_to_condensed_pos: np.ndarray,
        orig_to_condensed_taxa: np.ndarray,
        weights: np.ndarray,
        positions: List[int],
        char_labels: List[str],
        translator: Translator,
    ) -> None:
        self.sequences = sequences
        self.orig_to_condensed_pos = orig_to_condensed_pos
        self.orig_to_condensed_taxa = orig_to_condensed_taxa
        self.weights = weights
        self.positions = positions
        self.char_labels = char_labels
        self.translator = translator

    @property
    def n_sites(self) -> int:
        return len(self.orig_to_condensed_pos)

    @property
    def n_condensed(self) -> int:
        return len(self.weights)

    def condensed_sequence(self, taxon: int) -> str:
        """Condensed row of a 1-based taxon."""
        return self.sequences[self.orig_to_condensed_taxa[taxon - 1]]

    def expand(self, condensed: str) -> str:
        """
        Full-length unmasked sequence of a condensed row.

        Raises
        ------
        KeyError
            If ``condensed`` uses a symbol unknown at some column.
        """
        out = []
        for site in range(1, self.n_sites + 1):
            pos = int(self.orig_to_condensed_pos[site - 1])
            ch = self.translator.get(site, pos, condensed[pos])
            if ch is None:
                raise KeyError(
                    f"No original symbol for {condensed[pos]!r} at condensed column {pos}"
                )
            out.append(ch)
        return "".join(out)

    def differences(self, a: str, b: str) -> List[int]:
        """1-based sites at which the expansions of two condensed rows differ."""
        seq_a = self.expand(a)
        seq_b = self.expand(b)
        return [i + 1 for i, (x, y) in enumerate(zip(seq_a, seq_b)) if x != y]

    def site_label(self, site: int) -> str:
        return self.char_labels[site - 1]

    def edge_label(self, a: str, b: str) -> str:
        """Comma-separated labels of the sites that differ between two rows."""
        return ",".join(self.site_label(site) for site in self.differences(a, b))

    def __repr__(self) -> str:
        return (
            f"CondensedCharacters(n_haplotypes={len(self.sequences)}, "
            f"n_sites={self.n_sites}, n_condensed={self.n_condensed})"
        )


def condense(characters) -> CondensedCharacters:
    """
    Condense the unmasked part of an alignment.

    Parameters
    ----------
    characters : Characters

    Returns
    -------
    CondensedCharacters
        ``expand(condensed_sequence(t))`` equals the unmasked row of taxon t
        with gaps and missing symbols filled in by their column majority.
    """
    n_taxa = characters.n_taxa
    positions = characters.active_positions()
    gap = characters.gap
    missing = characters.missing

    # ── Unmasked columns with gaps and missing data filled in ───────────
    columns = []
    char_labels = []
    for c in positions:
        column = [characters.get(t, c) for t in range(1, n_taxa + 1)]
        if gap in column or missing in column:
            fill = majority_state(column)
            column = [fill if ch == gap or ch == missing else ch for ch in column]
        columns.append(column)
        label = characters.char_label(c)
        char_labels.append(label if label is not None else str(c))

    # ── Merge columns equal up to a renaming of states ─────────────────
    n_sites = len(columns)
    orig_to_condensed_pos = np.zeros(n_sites, dtype=np.int64)
    representative: Dict[Tuple[int, ...], int] = {}
    kept: List[int] = []
    for i, column in enumerate(columns):
        pattern = _column_pattern(column)
        pos = representative.get(pattern)
        if pos is None:
            pos = len(kept)
            representative[pattern] = pos
            kept.append(i)
        orig_to_condensed_pos[i] = pos

    weights = np.bincount(orig_to_condensed_pos, minlength=len(kept)).astype(np.float64)

    translator = Translator()
    for i, column in enumerate(columns):
        pos = int(orig_to_condensed_pos[i])
        rep = columns[kept[pos]]
        for t in range(n_taxa):
            translator.put(i + 1, column[t], pos, rep[t])

    # ── Merge equal rows ────────────────────────────────────────────────
    rows = ["".join(columns[k][t] for k in kept) for t in range(n_taxa)]
    sequences: List[str] = []
    row_index: Dict[str, int] = {}
    orig_to_condensed_taxa = np.zeros(n_taxa, dtype=np.int64)
    for t, row in enumerate(rows):
        if row not in row_index:
            row_index[row] = len(sequences)
            sequences.append(row)
        orig_to_condensed_taxa[t] = row_index[row]

    log_condensation_statistics(n_taxa, len(sequences), n_sites, len(kept))

    return CondensedCharacters(
        sequences,
        orig_to_condensed_pos,
        orig_to_condensed_taxa,
        weights,
        [int(p) for p in positions],
        char_labels,
        translator,
    )


# ============================================================================ #
# Network                                                                      #
# ============================================================================ #


class Node:
    """
    Network node.

    ``sequence`` is the condensed row of an observed haplotype, or None for
    a node inserted when subdividing an edge.
    """

    __slots__ = ("index", "sequence", "taxa", "label")

    def __init__(self, index: int, sequence: Optional[str], taxa: List[int], label: Optional[str]) -> None:
        self.index = index
        self.sequence = sequence
        self.taxa = taxa
        self.label = label

    def __repr__(self) -> str:
        return f"Node({self.index}, taxa={self.taxa}, label={self.label!r})"


class Edge:
    """Undirected edge between two node indices."""

    __slots__ = ("source", "target", "weight", "label", "in_tree")

    def __init__(
        self,
        source: int,
        target: int,
        weight: float,
        label: Optional[str] = None,
        in_tree: bool = False,
    ) -> None:
        self.source = source
        self.target = target
        self.weight = weight
        self.label = label
        self.in_tree = in_tree

    def __repr__(self) -> str:
        return f"Edge({self.source}, {self.target}, weight={self.weight:g})"


class Network:
    """
    Haplotype network.

    Attributes
    ----------
    nodes : list[Node]
        Observed haplotypes first (sorted by condensed sequence), then any
        subdivision nodes.
    edges : list[Edge]
        All network edges.
    threshold : float
        Distance at which the haplotypes became connected.
    condensed : CondensedCharacters
    """

    def __init__(self, nodes: List[Node], edges: List[Edge], threshold: float, condensed) -> None:
        self.nodes = nodes
        self.edges = edges
        self.threshold = threshold
        self.condensed = condensed

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    @property
    def tree_edges(self) -> List[Edge]:
        """Edges that joined two components: a spanning tree of the haplotypes."""
        return [e for e in self.edges if e.in_tree]

    def node_of_taxon(self, taxon: int) -> Node:
        for node in self.nodes:
            if taxon in node.taxa:
                return node
        raise KeyError(f"Taxon {taxon} is not in the network")

    def is_connected(self) -> bool:
        if not self.nodes:
            return True
        neighbours: Dict[int, List[int]] = {node.index: [] for node in self.nodes}
        for e in self.edges:
            neighbours[e.source].append(e.target)
            neighbours[e.target].append(e.source)
        seen = {self.nodes[0].index}
        stack = [self.nodes[0].index]
        while stack:
            for v in neighbours[stack.pop()]:
                if v not in seen:
                    seen.add(v)
                    stack.append(v)
        return len(seen) == len(self.nodes)

    def __repr__(self) -> str:
        return f"Network(n_nodes={self.n_nodes}, n_edges={self.n_edges})"


def weighted_hamming(a: str, b: str, weights: np.ndarray) -> float:
    return float(sum(w for x, y, w in zip(a, b, weights) if x != y))


def spanning_network(
    sequences: List[str], weights: np.ndarray, epsilon: float = 0, progress=None
) -> Tuple[List[Edge], float]:
    """
    Minimum spanning network on a list of sequences.

    Parameters
    ----------
    sequences : list[str]
        Equal-length sequences; node i is ``sequences[i]``.
    weights : numpy.ndarray
        Per-column weights of the Hamming distance.
    epsilon : float
        Extra distance tolerated once the graph is connected.

    Returns
    -------
    edges : list[Edge]
        Network edges in order of increasing distance; ``in_tree`` marks the
        edges that joined two components.
    threshold : float
        Distance at which the graph became connected (0 for one node).
    """
    progress = ensure_progress(progress)
    n = len(sequences)

    by_distance: Dict[float, List[Tuple[int, int]]] = {}
    for i in range(n):
        for j in range(i + 1, n):
            d = weighted_hamming(sequences[i], sequences[j], weights)
            by_distance.setdefault(d, []).append((i, j))
        progress.check_canceled()

    component = list(range(n))
    n_components = n
    threshold = 0.0
    max_value = np.inf
    edges: List[Edge] = []

    for value in sorted(by_distance):
        if value > max_value:
            break
        for i, j in by_distance[value]:
            joins = component[i] != component[j]
            if joins:
                n_components -= 1
                old = component[i]
                new = component[j]
                for k in range(n):
                    if component[k] == old:
                        component[k] = new
            edges.append(Edge(i, j, value, in_tree=joins))
        if n_components == 1 and max_value == np.inf:
            threshold = value
            max_value = value + epsilon

    return edges, threshold


class MinSpanningNetwork(Transform):
    """
    Minimum spanning network of the condensed haplotypes.

    Examples
    --------
    >>> chars = Characters(['aac', 'aca', 'caa'])
    >>> network = MinSpanningNetwork().apply(chars)
    >>> len(network.tree_edges), network.n_edges
    (2, 3)
    """

    output_kind = NETWORK
    description = "Minimum spanning network"
    config_class = NetworkConfig

    def apply(self, characters, progress=None, backend: str = "best") -> Network:
        self.check_applicable(characters)
        progress = ensure_progress(progress)
        progress.subtask(self.description)
        progress.set_maximum(100)
        progress.set_progress(0)

        config = self.config
        condensed = condense(characters)
        progress.set_progress(20)

        haplotypes = sorted(set(condensed.sequences))
        taxa_of: Dict[str, List[int]] = {seq: [] for seq in haplotypes}
        for t in range(1, characters.n_taxa + 1):
            taxa_of[condensed.condensed_sequence(t)].append(t)

        nodes = []
        for index, seq in enumerate(haplotypes):
            taxa = taxa_of[seq]
            if config.show_haplotypes:
                label = condensed.expand(seq)
            else:
                label = ",".join(characters.label(t) for t in taxa)
            nodes.append(Node(index, seq, taxa, label))

        edges, threshold = spanning_network(
            haplotypes, condensed.weights, config.epsilon, progress
        )
        progress.set_progress(80)

        if config.label_edges:
            for e in edges:
                e.label = condensed.edge_label(haplotypes[e.source], haplotypes[e.target])

        network = Network(nodes, edges, threshold, condensed)
        n_tree_edges = len(network.tree_edges)
        if config.subdivide_edges:
            self._subdivide(network, config.label_edges)

        log_network_statistics(len(haplotypes), len(edges), n_tree_edges, threshold)
        progress.set_progress(100)
        return network

    @staticmethod
    def _subdivide(network: Network, label_edges: bool) -> None:
        """Replace every edge carrying k > 1 differences by a path of k unit edges."""
        condensed = network.condensed
        edges = []
        for e in network.edges:
            a = network.nodes[e.source].sequence
            b = network.nodes[e.target].sequence
            sites = condensed.differences(a, b)
            if len(sites) <= 1:
                edges.append(e)
                continue
            prev = e.source
            for k, site in enumerate(sites):
                if k == len(sites) - 1:
                    nxt = e.target
                else:
                    nxt = len(network.nodes)
                    network.nodes.append(Node(nxt, None, [], None))
                label = condensed.site_label(site) if label_edges else None
                edges.append(Edge(prev, nxt, 1.0, label, e.in_tree))
                prev = nxt
        network.edges = edges
