"""
Phylocluster: weighted-average-linkage trees from aligned sequences.

Infers a strictly binary relationship tree among aligned biological
sequences from their pairwise dissimilarity, and answers structural queries
on it: least common ancestors, evolutionary distances, heights and depths.
"""

__version__ = "0.1.0"
__author__ = "Phylocluster Team"

from phylocluster.core.clustering import ClusterBuilder, build_tree
from phylocluster.core.tree import PhyloTree, TreeNode
from phylocluster.models.config import TreeConfig
from phylocluster.models.sequence import Species

__all__ = [
    "ClusterBuilder",
    "PhyloTree",
    "Species",
    "TreeConfig",
    "TreeNode",
    "build_tree",
    "__version__",
]
