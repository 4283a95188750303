"""Tests for pairwise sequence distance."""

from __future__ import annotations

from itertools import combinations

import pytest

from phylocluster.core.distance import pairwise_distances, sequence_distance
from phylocluster.core.exceptions import AlignmentMismatchError
from phylocluster.models.sequence import Species
from tests.factories import AlignmentFactory


class TestSequenceDistance:
    """Test the fraction-of-differences distance."""

    def test_reference_values(self, three_species: list[Species]) -> None:
        a, b, c = three_species
        assert sequence_distance(a, b) == pytest.approx(0.25)
        assert sequence_distance(a, c) == pytest.approx(0.25)
        assert sequence_distance(b, c) == pytest.approx(0.50)

    def test_identical_sequences(self) -> None:
        a = Species.from_string("a", "ACGT")
        b = Species.from_string("b", "ACGT")
        assert sequence_distance(a, b) == 0.0

    def test_completely_different(self) -> None:
        a = Species.from_string("a", "AAAA")
        b = Species.from_string("b", "CCCC")
        assert sequence_distance(a, b) == 1.0

    def test_gaps_count_as_symbols(self) -> None:
        a = Species.from_string("a", "AC-T")
        b = Species.from_string("b", "ACGT")
        assert sequence_distance(a, b) == pytest.approx(0.25)

    def test_empty_sequences(self) -> None:
        a = Species(name="a", symbols=())
        b = Species(name="b", symbols=())
        assert sequence_distance(a, b) == 0.0

    def test_unequal_length_raises(self) -> None:
        a = Species.from_string("a", "ACGT")
        b = Species.from_string("b", "ACG")
        with pytest.raises(AlignmentMismatchError) as exc_info:
            sequence_distance(a, b)
        assert exc_info.value.name_a == "a"
        assert exc_info.value.length_b == 3

    def test_range_symmetry_and_identity(self) -> None:
        species = AlignmentFactory(seed=3).create_alignment(8, length=30)
        for a, b in combinations(species, 2):
            d = sequence_distance(a, b)
            assert 0.0 <= d <= 1.0
            assert d == sequence_distance(b, a)
            assert (d == 0.0) == (a.symbols == b.symbols)
        for a in species:
            assert sequence_distance(a, a) == 0.0


class TestPairwiseDistances:
    """Test filling the distance matrix."""

    def test_every_unordered_pair_present(self, three_species: list[Species]) -> None:
        matrix = pairwise_distances(three_species)
        assert len(matrix) == 3
        assert matrix.get("C", "B") == pytest.approx(0.5)

    def test_mismatch_propagates(self) -> None:
        species = [Species.from_string("a", "AC"), Species.from_string("b", "ACG")]
        with pytest.raises(AlignmentMismatchError):
            pairwise_distances(species)

    def test_single_species_gives_empty_matrix(self) -> None:
        assert len(pairwise_distances([Species.from_string("a", "AC")])) == 0
