"""Tests for the weighted-average-linkage ClusterBuilder."""

from __future__ import annotations

import pytest

from phylocluster.core.clustering import ClusterBuilder, build_tree
from phylocluster.core.exceptions import (
    AlignmentMismatchError,
    DuplicateSpeciesError,
    EmptyAlignmentError,
    LabelCollisionError,
    TreeAlreadyBuiltError,
)
from phylocluster.models.config import TreeConfig
from phylocluster.models.sequence import Species
from tests.factories import AlignmentFactory


class TestThreeSpeciesScenario:
    """A=ACGT, B=ACGA, C=TCGT merge (A,B) first, then with C."""

    def test_first_merge(self, three_species_tree) -> None:
        ab = three_species_tree.find_node("A+B")
        assert ab is not None
        assert ab.distance_to_child == pytest.approx(0.125)
        assert ab.leaf_count == 2

    def test_orientation_smaller_label_is_right(self, three_species_tree) -> None:
        tree = three_species_tree
        ab = tree.find_node("A+B")
        assert tree.right(ab).label == "A"
        assert tree.left(ab).label == "B"
        assert tree.right(tree.root).label == "A+B"
        assert tree.left(tree.root).label == "C"

    def test_root(self, three_species_tree) -> None:
        root = three_species_tree.root
        assert root.label == "A+B+C"
        assert root.distance_to_child == pytest.approx(0.1875)
        assert root.leaf_count == 3
        assert root.is_root

    def test_parents_are_set(self, three_species_tree) -> None:
        tree = three_species_tree
        assert tree.parent(tree.find_node("A")).label == "A+B"
        assert tree.parent(tree.find_node("B")).label == "A+B"
        assert tree.parent(tree.find_node("C")).label == "A+B+C"
        assert tree.parent(tree.root) is None


class TestWeightedUpdate:
    """Distances to merged clusters are weighted by leaf count."""

    def test_second_update_is_leaf_weighted(self, four_species_tree) -> None:
        tree = four_species_tree
        abc = tree.find_node("A+B+C")
        assert abc.leaf_count == 3
        assert abc.distance_to_child == pytest.approx(0.1875)
        # d(A+B+C, D) = (2 * 0.875 + 1 * 0.5) / 3 = 0.75
        assert tree.root.label == "A+B+C+D"
        assert tree.root.distance_to_child == pytest.approx(0.375)

    def test_heights(self, four_species_tree) -> None:
        assert four_species_tree.height() == 3
        assert four_species_tree.weighted_height() == pytest.approx(0.6875)


class TestStructuralInvariants:
    """Invariants that hold for any input."""

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 12, 25])
    def test_node_counts(self, n: int) -> None:
        species = AlignmentFactory(seed=n).create_alignment(n)
        tree = build_tree(species)
        assert tree.root.leaf_count == n
        assert tree.count_species() == n
        assert len(tree.leaves()) == n
        assert len(tree.internal_nodes()) == n - 1
        assert len(tree) == 2 * n - 1

    def test_strictly_binary_with_consistent_parents(self, random_alignment) -> None:
        tree = build_tree(random_alignment)
        for node in tree.nodes:
            assert (node.left is None) == (node.right is None)
            assert node.distance_to_child >= 0.0
            if node.is_leaf:
                assert node.species is not None
                assert node.leaf_count == 1
            else:
                assert node.species is None
                left, right = tree.left(node), tree.right(node)
                assert left.parent == node.index
                assert right.parent == node.index
                assert right.label < left.label
                assert node.label == f"{right.label}+{left.label}"
                assert node.leaf_count == left.leaf_count + right.leaf_count
        roots = [node for node in tree.nodes if node.is_root]
        assert roots == [tree.root]

    def test_merge_distances_never_decrease_toward_root(self, random_alignment) -> None:
        tree = build_tree(random_alignment)
        for node in tree.internal_nodes():
            parent = tree.parent(node)
            if parent is not None:
                assert parent.distance_to_child >= node.distance_to_child - 1e-12

    def test_deterministic(self, random_alignment) -> None:
        first = build_tree(random_alignment).to_newick()
        second = build_tree(list(reversed(random_alignment))).to_newick()
        assert first == second


class TestEdgeCases:
    def test_single_species(self) -> None:
        tree = build_tree([Species.from_string("only", "ACGT")])
        assert tree.root.label == "only"
        assert tree.root.is_leaf
        assert tree.height() == 0
        assert tree.weighted_height() == 0.0

    def test_identical_sequences_merge_at_zero(self) -> None:
        species = [Species.from_string(name, "ACGT") for name in ("x", "y", "z")]
        tree = build_tree(species)
        assert tree.root.distance_to_child == 0.0
        assert tree.weighted_height() == 0.0
        assert tree.height() == 2

    def test_empty_input(self) -> None:
        with pytest.raises(EmptyAlignmentError):
            ClusterBuilder([], source="empty.fasta")

    def test_duplicate_names(self) -> None:
        species = [Species.from_string("a", "AC"), Species.from_string("a", "AG")]
        with pytest.raises(DuplicateSpeciesError):
            ClusterBuilder(species)

    def test_unaligned_input(self) -> None:
        species = [Species.from_string("a", "ACGT"), Species.from_string("b", "AC")]
        with pytest.raises(AlignmentMismatchError):
            build_tree(species)

    def test_label_collision(self) -> None:
        species = [
            Species.from_string("A", "AAAA"),
            Species.from_string("B", "AAAA"),
            Species.from_string("A+B", "CCCC"),
        ]
        with pytest.raises(LabelCollisionError):
            build_tree(species)

    def test_custom_separator_avoids_collision(self) -> None:
        species = [
            Species.from_string("A", "AAAA"),
            Species.from_string("B", "AAAA"),
            Species.from_string("A+B", "CCCC"),
        ]
        tree = build_tree(species, TreeConfig(separator="|"))
        assert "A|B" in tree
        assert tree.root.label == "A+B|A|B"

    def test_builder_is_single_use(self, three_species) -> None:
        builder = ClusterBuilder(three_species)
        builder.build()
        with pytest.raises(TreeAlreadyBuiltError):
            builder.build()
