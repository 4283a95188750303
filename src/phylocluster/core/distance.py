"""
Pairwise dissimilarity between aligned sequences.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from itertools import combinations

import numpy as np

from phylocluster.core.distance_matrix import DistanceMatrix
from phylocluster.core.exceptions import AlignmentMismatchError
from phylocluster.models.sequence import Species

logger = logging.getLogger(__name__)


def sequence_distance(a: Species, b: Species) -> float:
    """
    Fraction of alignment positions at which two sequences differ.

    Args:
        a: First aligned sequence.
        b: Second aligned sequence.

    Returns:
        Proportion of mismatching positions in [0, 1]. Two empty sequences
        have distance 0.

    Raises:
        AlignmentMismatchError: If the sequences have different lengths.
    """
    if len(a) != len(b):
        raise AlignmentMismatchError(a.name, len(a), b.name, len(b))
    if len(a) == 0:
        return 0.0

    left = np.asarray(a.symbols, dtype=object)
    right = np.asarray(b.symbols, dtype=object)
    mismatches = int(np.count_nonzero(left != right))
    return mismatches / len(a)


def pairwise_distances(species: Sequence[Species]) -> DistanceMatrix:
    """Fill a DistanceMatrix with the distance of every unordered pair."""
    matrix = DistanceMatrix()
    for a, b in combinations(species, 2):
        matrix.put(a.name, b.name, sequence_distance(a, b))
    logger.debug("Computed %d pairwise distances for %d sequences", len(matrix), len(species))
    return matrix
