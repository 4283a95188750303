"""
Pydantic data models for phylocluster.

Provides type-safe models for aligned sequences and configuration.
"""

from phylocluster.models.config import TreeConfig
from phylocluster.models.sequence import Species

__all__ = [
    "Species",
    "TreeConfig",
]
