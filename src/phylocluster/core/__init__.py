"""
Core algorithms for distance-based tree inference.

This module contains the clustering engine, the distance computations it
consumes, and the immutable tree it produces.
"""

from phylocluster.core.clustering import ClusterBuilder, build_tree
from phylocluster.core.distance import pairwise_distances, sequence_distance
from phylocluster.core.distance_matrix import DistanceMatrix, PairKey
from phylocluster.core.parsers import AlignmentParser, load_alignment
from phylocluster.core.tree import PhyloTree, TreeNode

__all__ = [
    "AlignmentParser",
    "ClusterBuilder",
    "DistanceMatrix",
    "PairKey",
    "PhyloTree",
    "TreeNode",
    "build_tree",
    "load_alignment",
    "pairwise_distances",
    "sequence_distance",
]
