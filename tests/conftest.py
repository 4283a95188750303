"""
Shared pytest fixtures for phylocluster tests.

Provides reusable alignments, built trees and FASTA files for unit and
integration testing.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from phylocluster.core.clustering import build_tree
from phylocluster.core.tree import PhyloTree
from phylocluster.models.sequence import Species
from tests.factories import AlignmentFactory, write_fasta


# =============================================================================
# Alignment Fixtures
# =============================================================================


@pytest.fixture
def three_species() -> list[Species]:
    """A=ACGT, B=ACGA, C=TCGT: d(A,B)=d(A,C)=0.25, d(B,C)=0.5."""
    return [
        Species.from_string("A", "ACGT"),
        Species.from_string("B", "ACGA"),
        Species.from_string("C", "TCGT"),
    ]


@pytest.fixture
def four_species() -> list[Species]:
    """Alignment whose second update needs leaf-count weighting."""
    return [
        Species.from_string("A", "AAAA"),
        Species.from_string("B", "AAAC"),
        Species.from_string("C", "AACC"),
        Species.from_string("D", "CCCC"),
    ]


@pytest.fixture
def random_alignment() -> list[Species]:
    """Twelve seeded random sequences of length 40."""
    return AlignmentFactory(seed=7).create_alignment(12)


# =============================================================================
# Tree Fixtures
# =============================================================================


@pytest.fixture
def three_species_tree(three_species: list[Species]) -> PhyloTree:
    return build_tree(three_species)


@pytest.fixture
def four_species_tree(four_species: list[Species]) -> PhyloTree:
    return build_tree(four_species)


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def three_species_fasta(tmp_path: Path) -> Path:
    """FASTA file with NCBI-style headers for the three-species alignment."""
    return write_fasta(
        tmp_path / "three.fasta",
        [
            ("gi|0001|ref|A", "ACGT"),
            ("gi|0002|ref|B", "ACGA"),
            ("gi|0003|ref|C", "TCGT"),
        ],
    )


@pytest.fixture
def unaligned_fasta(tmp_path: Path) -> Path:
    """FASTA file whose sequences differ in length."""
    return write_fasta(
        tmp_path / "unaligned.fasta",
        [("X", "ACGT"), ("Y", "ACG")],
    )
