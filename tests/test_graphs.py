import numpy as np
import pytest

from noshviz.graphs import (
    BUYER,
    SELLER,
    adjacency_matrix,
    connect_next_unlinked,
    erdos_renyi_graph,
    hub_ring_graph,
    island_graph,
    market_graph,
    nodes_of_kind,
    total_weight,
)


def test_hub_ring_graph_structure():
    G = hub_ring_graph(6, hub_links=3)
    assert sorted(G.nodes()) == list(range(7))
    assert G.number_of_edges() == 6 + 3
    assert set(G.neighbors(0)) == {1, 2, 3}
    assert G.has_edge(6, 1)
    assert all(w == 1.0 for _, _, w in G.edges(data="weight"))
    assert G.nodes[0]["kind"] == "hub"


def test_hub_ring_graph_rejects_bad_sizes():
    with pytest.raises(ValueError):
        hub_ring_graph(2)
    with pytest.raises(ValueError):
        hub_ring_graph(5, hub_links=6)


def test_island_graph_structure():
    G = island_graph(10)
    ring = nodes_of_kind(G, "ring")
    triangle = nodes_of_kind(G, "triangle")

    assert ring == list(range(1, 8))
    assert triangle == [8, 9, 10]
    assert G.degree(0) == 0
    assert G.number_of_edges() == 7 + 3
    assert G.has_edge(8, 10)

    with pytest.raises(ValueError):
        island_graph(5)


def test_connect_next_unlinked_walks_candidates_in_order():
    G = island_graph(7)
    ring = nodes_of_kind(G, "ring")

    linked = [connect_next_unlinked(G, hub=0, candidates=ring) for _ in range(len(ring) + 1)]

    assert linked == ring + [None]
    assert set(G.neighbors(0)) == set(ring)


def test_erdos_renyi_graph_extremes_and_reproducibility():
    empty = erdos_renyi_graph(8, 0.0, seed=1)
    full = erdos_renyi_graph(8, 1.0, seed=1)

    assert empty.number_of_nodes() == 8
    assert empty.number_of_edges() == 0
    assert full.number_of_edges() == 8 * 7 // 2
    assert all(0.0 <= w < 1.0 for _, _, w in full.edges(data="weight"))

    a = erdos_renyi_graph(30, 0.2, seed=5)
    b = erdos_renyi_graph(30, 0.2, seed=5)
    assert np.array_equal(adjacency_matrix(a), adjacency_matrix(b))

    with pytest.raises(ValueError):
        erdos_renyi_graph(5, 1.5)


def test_market_graph_only_links_opposite_types():
    G = market_graph(40, 1.0, seed=3)
    types = dict(G.nodes(data="type"))
    buyers = sum(1 for t in types.values() if t == BUYER)
    sellers = sum(1 for t in types.values() if t == SELLER)

    assert buyers + sellers == 40
    assert all(types[u] != types[v] for u, v in G.edges())
    assert G.number_of_edges() == buyers * sellers


def test_adjacency_matrix_is_symmetric_and_weighted():
    G = hub_ring_graph(4, hub_links=1)
    G[0][1]["weight"] = 2.5
    A = adjacency_matrix(G)

    assert A.shape == (5, 5)
    assert np.array_equal(A, A.T)
    assert A[0, 1] == 2.5
    assert A[0, 2] == 0.0
    assert total_weight(G) == pytest.approx(4 + 2.5)
