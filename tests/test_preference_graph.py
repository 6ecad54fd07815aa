"""
Tests for PreferenceGraph.

Focus on reachability, cycle detection and structural sharing.
"""

from card_sort.preference_graph import PreferenceGraph


class TestPreferenceGraph:
    """Test PreferenceGraph behavior through public interface."""

    def test_empty_graph_reaches_only_itself(self) -> None:
        graph = PreferenceGraph()

        assert graph.reaches(0, 0), "A node trivially reaches itself"
        assert not graph.reaches(0, 1)

    def test_transitive_reachability(self) -> None:
        # Arrange
        graph = PreferenceGraph().with_edge(0, 1).with_edge(1, 2)

        # Assert
        assert graph.reaches(0, 2), "0 -> 1 -> 2"
        assert not graph.reaches(2, 0), "Edges are directed"

    def test_would_create_cycle_on_closing_edge(self) -> None:
        """A beats B, B beats C; C beating A closes a cycle."""
        graph = PreferenceGraph().with_edge(0, 1).with_edge(1, 2)

        assert graph.would_create_cycle(2, 0), "C > A closes the cycle"
        assert not graph.would_create_cycle(0, 2), "A > C is consistent"

    def test_with_edge_leaves_original_untouched(self) -> None:
        # Arrange
        original = PreferenceGraph().with_edge(0, 1)

        # Act
        extended = original.with_edge(1, 2)

        # Assert
        assert (1, 2) in extended
        assert (1, 2) not in original, "Original graph must not change"
        assert original.edge_count() == 1
        assert extended.edge_count() == 2

    def test_duplicate_edge_is_idempotent(self) -> None:
        graph = PreferenceGraph().with_edge(0, 1)

        again = graph.with_edge(0, 1)

        assert again is graph, "Adding an existing edge returns the same graph"
        assert again.edge_count() == 1

    def test_untouched_adjacency_sets_are_shared(self) -> None:
        graph = PreferenceGraph().with_edge(0, 1).with_edge(0, 2)

        extended = graph.with_edge(3, 4)

        assert extended.successors(0) is graph.successors(0)

    def test_cycle_search_terminates_on_existing_cycle(self) -> None:
        """Reachability must not loop forever once the graph is cyclic."""
        graph = PreferenceGraph().with_edge(0, 1).with_edge(1, 2).with_edge(2, 0)

        assert not graph.reaches(0, 5)
        assert graph.reaches(2, 1)

    def test_equality_ignores_construction_order(self) -> None:
        first = PreferenceGraph().with_edge(0, 1).with_edge(2, 1)
        second = PreferenceGraph().with_edge(2, 1).with_edge(0, 1)

        assert first == second
