"""Tests for MST edge cutting and component labeling."""
import numpy as np
import pytest

from mstquant.clustering import cluster_colors, cut_heaviest_edges, label_components
from mstquant.colors import extract_distinct_colors
from mstquant.mst import build_mst
from mstquant.types import (
    ImpossiblePartitionError,
    InvalidConfigurationError,
    SpanningTree,
)


def make_tree(parents, costs):
    return SpanningTree(
        parents=np.array(parents, dtype=np.int64),
        costs=np.array(costs, dtype=np.float64),
    )


class TestCutHeaviestEdges:
    """Test selection of the edges to remove."""

    def test_cuts_heaviest_first(self):
        tree = make_tree([0, 0, 1, 2], [0.0, 3.0, 9.0, 5.0])

        assert list(cut_heaviest_edges(tree, 3)) == [2, 3]

    def test_tie_breaks_on_lowest_id(self):
        tree = make_tree([0, 0, 0, 0], [0.0, 5.0, 5.0, 1.0])

        assert list(cut_heaviest_edges(tree, 2)) == [1]
        assert list(cut_heaviest_edges(tree, 3)) == [1, 2]

    def test_root_never_cut(self):
        tree = make_tree([0, 0], [0.0, 4.0])

        assert list(cut_heaviest_edges(tree, 2)) == [1]

    def test_no_cuts_for_single_cluster(self):
        tree = make_tree([0, 0, 1], [0.0, 1.0, 2.0])

        assert len(cut_heaviest_edges(tree, 1)) == 0

    def test_too_many_cuts(self):
        tree = make_tree([0, 0], [0.0, 4.0])

        with pytest.raises(ImpossiblePartitionError):
            cut_heaviest_edges(tree, 3)


class TestLabelComponents:
    """Test connected component labeling."""

    def test_labels_follow_lowest_id(self):
        # 0 - 1 - 2   3 - 4, with 3 detached from 2
        parents = np.array([0, 0, 1, 2, 3])
        assignment = label_components(parents, np.array([3]))

        assert list(assignment.labels) == [0, 0, 0, 1, 1]
        assert sorted(assignment.members[0]) == [0, 1, 2]
        assert sorted(assignment.members[1]) == [3, 4]

    def test_isolated_colors_become_singletons(self):
        parents = np.array([0, 0, 0])
        assignment = label_components(parents, np.array([1, 2]))

        assert assignment.n_clusters == 3
        assert assignment.members == [[0], [1], [2]]

    def test_deep_chain_does_not_recurse(self):
        n = 20000
        parents = np.concatenate([[0], np.arange(n - 1)])
        assignment = label_components(parents, np.array([], dtype=np.int64))

        assert assignment.n_clusters == 1
        assert len(assignment.members[0]) == n


class TestClusterColors:
    """Test the full cut + label step."""

    def test_scenario_isolates_white(self, two_by_two_image):
        colors = extract_distinct_colors(two_by_two_image).colors
        assignment = cluster_colors(build_mst(colors), 2)

        assert assignment.n_clusters == 2
        assert list(assignment.labels) == [0, 1, 0]
        assert sorted(assignment.members[0]) == [0, 2]
        assert assignment.members[1] == [1]

    @pytest.mark.parametrize("k", [1, 2, 5, 17, 60])
    def test_partition_property(self, random_image, k):
        colors = extract_distinct_colors(random_image).colors[:60]
        assignment = cluster_colors(build_mst(colors), k)

        assert assignment.n_clusters == k
        flattened = sorted(i for ids in assignment.members for i in ids)
        assert flattened == list(range(60))
        for cluster_id, ids in enumerate(assignment.members):
            assert np.all(assignment.labels[ids] == cluster_id)

    def test_k_equals_d_gives_singletons(self, few_color_image):
        colors = extract_distinct_colors(few_color_image).colors
        assignment = cluster_colors(build_mst(colors), len(colors))

        assert all(len(ids) == 1 for ids in assignment.members)

    def test_invalid_k(self, two_by_two_image):
        tree = build_mst(extract_distinct_colors(two_by_two_image).colors)

        with pytest.raises(InvalidConfigurationError):
            cluster_colors(tree, 0)

    @pytest.mark.parametrize("k", [2.0, True, "2"])
    def test_non_integer_k(self, two_by_two_image, k):
        tree = build_mst(extract_distinct_colors(two_by_two_image).colors)

        with pytest.raises(InvalidConfigurationError):
            cluster_colors(tree, k)

    def test_more_clusters_than_colors(self, two_by_two_image):
        tree = build_mst(extract_distinct_colors(two_by_two_image).colors)

        with pytest.raises(ImpossiblePartitionError) as exc_info:
            cluster_colors(tree, 4)

        assert exc_info.value.requested == 4
        assert exc_info.value.distinct == 3

    def test_assignments_are_independent(self, two_by_two_image):
        """Repeated runs return separate assignment objects."""
        tree = build_mst(extract_distinct_colors(two_by_two_image).colors)
        first = cluster_colors(tree, 2)
        second = cluster_colors(tree, 3)

        assert first.n_clusters == 2
        assert second.n_clusters == 3
        assert first.labels is not second.labels
