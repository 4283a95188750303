"""
CLI commands for phylocluster.

Provides the command-line interface for building trees from alignments
and querying them.
"""

__all__ = ["main", "tree", "utils"]
