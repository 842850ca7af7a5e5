"""
Tests for the currency graph builder.
"""

import dataclasses
import math

import pytest

from engine_graph import GraphEdge, build_graph
from errors import ArbitrageInputError, InvalidInput
from exchanges.base import ExchangeRate


class TestBuildGraph:
    """Tests for build_graph"""

    def test_weight_is_negative_log_rate(self):
        """Test weight transform"""
        graph = build_graph(["USD", "EUR"], [("USD", "EUR", 1.10), ("EUR", "USD", 0.5)])

        assert graph.edges[0].weight == pytest.approx(-math.log(1.10))
        assert graph.edges[1].weight == pytest.approx(math.log(2))

    def test_cycle_weight_negative_iff_product_above_one(self, arbitrage_rates):
        """Loop weight is -ln(product of rates)"""
        graph = build_graph(["USD", "EUR", "GBP"], arbitrage_rates)
        loop = [graph.find_edge("USD", "EUR"), graph.find_edge("EUR", "GBP"), graph.find_edge("GBP", "USD")]

        total_weight = sum(e.weight for e in loop)
        product = math.prod(e.rate for e in loop)

        assert product > 1
        assert total_weight < 0
        assert total_weight == pytest.approx(-math.log(product))

    def test_preserves_node_and_edge_order(self):
        """Test that construction order is kept"""
        graph = build_graph(
            ["GBP", "USD", "EUR"],
            [("EUR", "USD", 1.08), ("USD", "GBP", 0.79), ("GBP", "EUR", 1.16)],
        )

        assert graph.nodes == ("GBP", "USD", "EUR")
        assert [(e.from_node, e.to_node) for e in graph.edges] == [
            ("EUR", "USD"), ("USD", "GBP"), ("GBP", "EUR"),
        ]

    def test_parallel_edges_are_kept(self):
        """Duplicate observations become parallel edges, not an average"""
        graph = build_graph(["USD", "EUR"], [("USD", "EUR", 0.91), ("USD", "EUR", 0.93)])

        parallel = graph.edges_between("USD", "EUR")
        assert len(parallel) == 2
        assert [e.rate for e in parallel] == [0.91, 0.93]
        assert graph.find_edge("USD", "EUR").rate == 0.91

    def test_reverse_direction_is_independent(self):
        """A rate in one direction says nothing about the other"""
        graph = build_graph(["USD", "EUR"], [("USD", "EUR", 0.92)])

        assert graph.find_edge("EUR", "USD") is None
        assert graph.edges_between("EUR", "USD") == []

    def test_accepts_exchange_rate_objects(self):
        """Test ExchangeRate inputs"""
        graph = build_graph(
            ["USD", "JPY"],
            [ExchangeRate(from_currency="USD", to_currency="JPY", rate=149.5)],
        )

        edge = graph.edges[0]
        assert isinstance(edge, GraphEdge)
        assert (edge.from_node, edge.to_node, edge.rate) == ("USD", "JPY", 149.5)

    def test_nodes_without_rates(self):
        """A graph may have nodes with no edges"""
        graph = build_graph(["USD", "EUR", "CHF"], [])

        assert graph.nodes == ("USD", "EUR", "CHF")
        assert graph.edges == ()
        assert "CHF" in graph

    def test_graph_is_immutable(self, arbitrage_graph):
        """Test that the built graph cannot be modified"""
        with pytest.raises(dataclasses.FrozenInstanceError):
            arbitrage_graph.nodes = ("USD",)
        with pytest.raises(dataclasses.FrozenInstanceError):
            arbitrage_graph.edges[0].rate = 2.0

    def test_to_dict(self, arbitrage_graph):
        """Test graph serialization"""
        data = arbitrage_graph.to_dict()

        assert data["nodes"] == ["USD", "EUR", "GBP"]
        assert len(data["edges"]) == 6
        assert data["edges"][0] == {
            "from": "USD",
            "to": "EUR",
            "rate": 1.10,
            "weight": pytest.approx(-math.log(1.10)),
        }


class TestBuildGraphValidation:
    """Tests for InvalidInput"""

    def test_empty_node_set(self):
        with pytest.raises(InvalidInput):
            build_graph([], [])

    def test_duplicate_nodes(self):
        with pytest.raises(InvalidInput):
            build_graph(["USD", "EUR", "USD"], [])

    @pytest.mark.parametrize("rate", [
        ("USD", "XAU", 0.0005),
        ("XAU", "USD", 2000.0),
    ])
    def test_unknown_currency(self, rate):
        with pytest.raises(InvalidInput, match="unknown currency"):
            build_graph(["USD", "EUR"], [rate])

    @pytest.mark.parametrize("value", [0, 0.0, -1.2, float("nan"), float("inf"), -float("inf")])
    def test_rate_outside_domain(self, value):
        with pytest.raises(InvalidInput):
            build_graph(["USD", "EUR"], [("USD", "EUR", value)])

    @pytest.mark.parametrize("value", ["1.1", None, True])
    def test_rate_not_a_number(self, value):
        with pytest.raises(InvalidInput):
            build_graph(["USD", "EUR"], [("USD", "EUR", value)])

    def test_malformed_rate_tuple(self):
        with pytest.raises(InvalidInput):
            build_graph(["USD", "EUR"], [("USD", "EUR")])

    def test_invalid_input_is_a_value_error(self):
        """Callers can catch the common base or ValueError"""
        with pytest.raises(ArbitrageInputError):
            build_graph([], [])
        with pytest.raises(ValueError):
            build_graph([], [])

    def test_bad_rate_rejected_even_after_good_ones(self):
        """No partial graph is returned"""
        with pytest.raises(InvalidInput):
            build_graph(
                ["USD", "EUR"],
                [("USD", "EUR", 0.92), ("EUR", "USD", 1.08), ("EUR", "USD", -1.0)],
            )
