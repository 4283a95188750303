"""
Immutable strictly binary phylogenetic tree and its queries.

Nodes live in an arena (a tuple) and refer to their children and parent by
index. A PhyloTree is only created by ClusterBuilder once construction has
finished; afterwards neither the node graph nor the label lookup changes,
so any number of readers may query it concurrently.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

import polars as pl

from phylocluster.models.config import DEFAULT_PRINTING_DEPTH
from phylocluster.models.sequence import Species

# Labels matching this can be written bare; others are single-quoted.
_UNQUOTED_LABEL = re.compile(r"[^\s()\[\]':;,]+")


def newick_label(label: str) -> str:
    """Quote a label for Newick output when it holds whitespace or delimiters."""
    if _UNQUOTED_LABEL.fullmatch(label):
        return label
    escaped = label.replace("'", "''")
    return f"'{escaped}'"


@dataclass(frozen=True, slots=True)
class TreeNode:
    """
    Node of a PhyloTree.

    Attributes:
        index: Position of the node in the tree's arena
        label: Sequence name for leaves, merged child labels otherwise
        species: The aligned sequence (leaves only)
        left: Arena index of the left child (internal nodes only)
        right: Arena index of the right child (internal nodes only)
        parent: Arena index of the parent (None for the root)
        distance_to_child: Branch length from this node to each child
        leaf_count: Number of leaves in the subtree rooted here
    """

    index: int
    label: str
    species: Species | None = None
    left: int | None = None
    right: int | None = None
    parent: int | None = None
    distance_to_child: float = 0.0
    leaf_count: int = 1

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def __str__(self) -> str:
        return self.label


class PhyloTree:
    """
    Strictly binary tree inferred by weighted-average-linkage clustering.

    Both children of an internal node hang at the same branch length,
    ``distance_to_child``. The right child always carries the
    lexicographically smaller label of the merged pair.
    """

    def __init__(self, nodes: Sequence[TreeNode], root: int) -> None:
        self._nodes: tuple[TreeNode, ...] = tuple(nodes)
        self._root = self._nodes[root]
        self._by_label: Mapping[str, TreeNode] = MappingProxyType(
            {node.label: node for node in self._nodes}
        )

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def root(self) -> TreeNode:
        return self._root

    @property
    def nodes(self) -> tuple[TreeNode, ...]:
        return self._nodes

    def find_node(self, label: str) -> TreeNode | None:
        """Look up a node by label; None if no such node exists."""
        return self._by_label.get(label)

    def left(self, node: TreeNode) -> TreeNode | None:
        return None if node.left is None else self._nodes[node.left]

    def right(self, node: TreeNode) -> TreeNode | None:
        return None if node.right is None else self._nodes[node.right]

    def parent(self, node: TreeNode) -> TreeNode | None:
        return None if node.parent is None else self._nodes[node.parent]

    def leaves(self) -> list[TreeNode]:
        """Leaf nodes in left-to-right order."""
        return [node for node in self._walk(self._root) if node.is_leaf]

    def internal_nodes(self) -> list[TreeNode]:
        return [node for node in self._nodes if not node.is_leaf]

    def count_species(self) -> int:
        return self._root.leaf_count

    def all_species(self) -> list[Species]:
        """Species stored at the leaves, left subtree before right."""
        return [node.species for node in self.leaves() if node.species is not None]

    def _walk(self, node: TreeNode) -> Iterator[TreeNode]:
        # Pre-order; leaf order is the same for in- and post-order.
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            if not current.is_leaf:
                stack.append(self._nodes[current.right])
                stack.append(self._nodes[current.left])

    def __contains__(self, label: object) -> bool:
        return label in self._by_label

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        return self._walk(self._root)

    def __repr__(self) -> str:
        return f"PhyloTree(species={self.count_species()}, root='{self._root.label}')"

    # ------------------------------------------------------------------
    # Heights and depths
    # ------------------------------------------------------------------

    def height(self) -> int:
        """Longest root-to-leaf path counted in edges."""
        return self.node_height(self._root)

    def weighted_height(self) -> float:
        """Longest root-to-leaf path counted in branch length."""
        return self.weighted_node_height(self._root)

    def node_height(self, node: TreeNode | None) -> int:
        if node is None:
            return -1
        if node.is_leaf:
            return 0
        return 1 + max(
            self.node_height(self.left(node)),
            self.node_height(self.right(node)),
        )

    def weighted_node_height(self, node: TreeNode | None) -> float:
        if node is None:
            return -math.inf
        if node.is_leaf:
            return 0.0
        return max(
            self.weighted_node_height(self.left(node)),
            self.weighted_node_height(self.right(node)),
        ) + node.distance_to_child

    def depth(self, node: TreeNode | None) -> int:
        """Number of edges from ``node`` up to the root, -1 for None."""
        if node is None:
            return -1
        count = 0
        parent = self.parent(node)
        while parent is not None:
            count += 1
            parent = self.parent(parent)
        return count

    def weighted_depth(self, node: TreeNode | None) -> float:
        """Sum of branch lengths from ``node`` up to the root, -1.0 for None."""
        if node is None:
            return -1.0
        total = 0.0
        parent = self.parent(node)
        while parent is not None:
            total += parent.distance_to_child
            parent = self.parent(parent)
        return total

    # ------------------------------------------------------------------
    # Ancestry and distances
    # ------------------------------------------------------------------

    def least_common_ancestor(self, label1: str, label2: str) -> TreeNode | None:
        """
        Deepest node that is an ancestor of both labelled nodes.

        A node counts as its own ancestor, so the LCA of a node and one of
        its ancestors is that ancestor.

        Returns:
            The LCA node, or None if either label is unknown.
        """
        node1 = self.find_node(label1)
        node2 = self.find_node(label2)
        if node1 is None or node2 is None:
            return None
        return self._find_lca(self._root, node1, node2)

    def _find_lca(
        self, subtree: TreeNode | None, node1: TreeNode, node2: TreeNode
    ) -> TreeNode | None:
        if subtree is None:
            return None
        if subtree.index in (node1.index, node2.index):
            return subtree

        left = self._find_lca(self.left(subtree), node1, node2)
        right = self._find_lca(self.right(subtree), node1, node2)
        if left is not None and right is not None:
            return subtree
        return left if left is not None else right

    def evolutionary_distance(self, label1: str, label2: str) -> float:
        """
        Sum of branch lengths on the path between two labelled nodes.

        Returns:
            0.0 if both labels name the same node, ``math.inf`` if either
            label is unknown.
        """
        node1 = self.find_node(label1)
        node2 = self.find_node(label2)
        if node1 is None or node2 is None:
            return math.inf
        if node1.index == node2.index:
            return 0.0

        ancestor = self._find_lca(self._root, node1, node2)
        return self._distance_up_to(node1, ancestor) + self._distance_up_to(node2, ancestor)

    def cophenetic_distance(self, label1: str, label2: str) -> float:
        """
        Merge distance at which two labelled nodes were first joined.

        Equals twice the LCA's branch length. Unlike the path sum of
        ``evolutionary_distance`` this is ultrametric: for any three leaves
        the two largest pairwise values are equal.
        """
        ancestor = self.least_common_ancestor(label1, label2)
        if ancestor is None:
            return math.inf
        if label1 == label2:
            return 0.0
        return 2.0 * ancestor.distance_to_child

    def _distance_up_to(self, node: TreeNode, ancestor: TreeNode) -> float:
        total = 0.0
        current = node
        while current.index != ancestor.index:
            current = self._nodes[current.parent]
            total += current.distance_to_child
        return total

    def distance_table(self) -> pl.DataFrame:
        """Evolutionary distance for every ordered pair of species."""
        names = [species.name for species in self.all_species()]
        label1: list[str] = []
        label2: list[str] = []
        distances: list[float] = []
        for a in names:
            for b in names:
                label1.append(a)
                label2.append(b)
                distances.append(self.evolutionary_distance(a, b))
        return pl.DataFrame(
            {"label1": label1, "label2": label2, "distance": distances},
            schema={"label1": pl.Utf8, "label2": pl.Utf8, "distance": pl.Float64},
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_newick(self, precision: int = 5) -> str:
        """
        Nested-parenthesis rendering with branch lengths.

        Internal nodes render as ``(right,left)`` and every node except the
        root is followed by ``:length``, the branch length stored on its
        parent. Leaf labels containing whitespace or Newick delimiters
        are single-quoted.

        Example:
            >>> tree.to_newick()  # doctest: +SKIP
            '((A:0.12500,B:0.12500):0.18750,C:0.18750);'
        """
        return self._newick(self._root, precision) + ";"

    def _newick(self, node: TreeNode, precision: int) -> str:
        if node.is_leaf:
            text = newick_label(node.label)
        else:
            text = (
                f"({self._newick(self.right(node), precision)},"
                f"{self._newick(self.left(node), precision)})"
            )
        parent = self.parent(node)
        if parent is not None:
            text += f":{parent.distance_to_child:.{precision}f}"
        return text

    def to_visual(self, printing_depth: int = DEFAULT_PRINTING_DEPTH) -> str:
        """
        Indented text rendering, one node per line.

        The right subtree is printed above its parent and the left subtree
        below it. Each line is indented with dots in proportion to the
        node's weighted depth; the deepest leaf gets ``printing_depth``
        dots.
        """
        max_depth = self.weighted_height()
        lines: list[str] = []
        self._visual(self._root, max_depth, printing_depth, lines)
        return "".join(lines)

    def _visual(
        self, node: TreeNode, max_depth: float, printing_depth: int, lines: list[str]
    ) -> None:
        right = self.right(node)
        if right is not None:
            self._visual(right, max_depth, printing_depth, lines)

        indent = 0
        if max_depth > 0:
            indent = math.ceil(printing_depth * self.weighted_depth(node) / max_depth)
        lines.append("." * indent + node.label + "\n")

        left = self.left(node)
        if left is not None:
            self._visual(left, max_depth, printing_depth, lines)

    def __str__(self) -> str:
        return self.to_visual()
