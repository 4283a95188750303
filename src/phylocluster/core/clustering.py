"""
Weighted-average-linkage agglomerative clustering.

ClusterBuilder repeatedly merges the closest pair of live clusters into a
new internal node until a single root remains:

1. Select the pair (A, B) with minimum distance (ties: smallest pair).
2. Orient: the lexicographically smaller label becomes the right child.
3. Merge: the new node's branch length to both children is half the merge
   distance; its label is ``smaller + separator + larger``.
4. Update: for every other live cluster C,
   ``d(AB, C) = (n_A * d(A, C) + n_B * d(B, C)) / (n_A + n_B)``
   where n is the leaf count; the stale entries for A and B are dropped.

The minimum search scans all live entries, so n leaves cost O(n^3) overall.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import replace

from phylocluster.core.distance import pairwise_distances
from phylocluster.core.distance_matrix import DistanceMatrix
from phylocluster.core.exceptions import (
    DuplicateSpeciesError,
    EmptyAlignmentError,
    LabelCollisionError,
    TreeAlreadyBuiltError,
)
from phylocluster.core.tree import PhyloTree, TreeNode
from phylocluster.models.config import TreeConfig
from phylocluster.models.sequence import Species

logger = logging.getLogger(__name__)


class ClusterBuilder:
    """
    Builds a PhyloTree from aligned sequences.

    The builder owns the working forest and distance matrix exclusively
    while it runs and can produce exactly one tree.

    Example:
        >>> species = [
        ...     Species.from_string("A", "ACGT"),
        ...     Species.from_string("B", "ACGA"),
        ...     Species.from_string("C", "TCGT"),
        ... ]
        >>> tree = ClusterBuilder(species).build()
        >>> tree.root.label
        'A+B+C'
    """

    def __init__(
        self,
        species: Sequence[Species],
        separator: str = "+",
        source: str = "<sequences>",
    ) -> None:
        """
        Args:
            species: Aligned sequences, one leaf each.
            separator: Joins child labels into merged cluster labels.
            source: Name of the input used in error messages.

        Raises:
            EmptyAlignmentError: If no sequences are given.
            DuplicateSpeciesError: If two sequences share a name.
        """
        if not species:
            raise EmptyAlignmentError(source)

        counts = Counter(s.name for s in species)
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        if duplicates:
            raise DuplicateSpeciesError(duplicates)

        self.species = list(species)
        self.separator = separator
        self.source = source

        self._nodes: list[TreeNode] = []
        self._parents: list[int | None] = []
        self._index_by_label: dict[str, int] = {}
        self._built = False

    @classmethod
    def from_config(
        cls, species: Sequence[Species], config: TreeConfig, source: str = "<sequences>"
    ) -> ClusterBuilder:
        return cls(species, separator=config.separator, source=source)

    def build(self) -> PhyloTree:
        """
        Run the clustering and return the finished tree.

        Raises:
            AlignmentMismatchError: If the sequences differ in length.
            LabelCollisionError: If a merged label equals an existing one.
            TreeAlreadyBuiltError: If called a second time.
        """
        if self._built:
            raise TreeAlreadyBuiltError
        self._built = True

        forest: list[int] = [self._add_leaf(s) for s in self.species]
        distances = pairwise_distances(self.species)

        merges = 0
        while len(forest) > 1:
            forest = self._merge_closest(forest, distances)
            merges += 1

        root = forest[0]

        nodes = [
            replace(node, parent=parent)
            for node, parent in zip(self._nodes, self._parents, strict=True)
        ]
        tree = PhyloTree(nodes, root)
        logger.info(
            "Built tree for %s: %d species, %d merges, weighted height %.5f",
            self.source,
            len(self.species),
            merges,
            tree.weighted_height(),
        )
        return tree

    def _add_leaf(self, species: Species) -> int:
        node = TreeNode(index=len(self._nodes), label=species.name, species=species)
        return self._register(node)

    def _register(self, node: TreeNode) -> int:
        if node.label in self._index_by_label:
            raise LabelCollisionError(node.label, self.separator)
        self._nodes.append(node)
        self._parents.append(None)
        self._index_by_label[node.label] = node.index
        return node.index

    def _merge_closest(self, forest: list[int], distances: DistanceMatrix) -> list[int]:
        pair, merge_distance = distances.min_entry()
        smaller = self._nodes[self._index_by_label[pair.first]]
        larger = self._nodes[self._index_by_label[pair.second]]

        merged = TreeNode(
            index=len(self._nodes),
            label=f"{smaller.label}{self.separator}{larger.label}",
            left=larger.index,
            right=smaller.index,
            distance_to_child=merge_distance / 2.0,
            leaf_count=smaller.leaf_count + larger.leaf_count,
        )
        self._register(merged)
        self._parents[smaller.index] = merged.index
        self._parents[larger.index] = merged.index
        logger.debug(
            "Merged %s and %s at distance %.5f -> %s",
            smaller.label,
            larger.label,
            merge_distance,
            merged.label,
        )

        remaining = [i for i in forest if i not in (smaller.index, larger.index)]
        for index in remaining:
            other = self._nodes[index].label
            d_smaller = distances.get(smaller.label, other)
            d_larger = distances.get(larger.label, other)
            updated = (
                smaller.leaf_count * d_smaller + larger.leaf_count * d_larger
            ) / merged.leaf_count
            distances.put(merged.label, other, updated)
            distances.remove(smaller.label, other)
            distances.remove(larger.label, other)

        distances.remove(smaller.label, larger.label)
        remaining.append(merged.index)
        return remaining


def build_tree(
    species: Sequence[Species],
    config: TreeConfig | None = None,
    source: str = "<sequences>",
) -> PhyloTree:
    """Cluster aligned sequences into a PhyloTree."""
    config = config or TreeConfig()
    return ClusterBuilder.from_config(species, config, source=source).build()
