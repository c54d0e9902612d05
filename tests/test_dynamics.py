import numpy as np
import pytest

from noshviz.centrality import doping_table
from noshviz.dynamics import doping_frames, doping_sequence, island_growth, market_step, run_market
from noshviz.graphs import hub_ring_graph, market_graph, total_weight


def test_market_step_keeps_graph_bipartite():
    rng = np.random.default_rng(8)
    G = market_graph(15, 0.2, seed=rng)

    for _ in range(200):
        weight = market_step(G, rng)
        assert weight == pytest.approx(total_weight(G))

    types = dict(G.nodes(data="type"))
    assert all(types[u] != types[v] for u, v in G.edges())
    assert all(w > 0 for _, _, w in G.edges(data="weight"))
    assert G.number_of_nodes() >= 15


def test_market_step_always_adds_node_when_forced():
    rng = np.random.default_rng(0)
    G = market_graph(5, 0.0, seed=rng)
    market_step(G, rng, add_node_prob=1.0, reinforce_prob=0.0)

    assert G.number_of_nodes() == 6
    # the newcomer trades with someone of the other type, if there is one
    opposite = [n for n, t in G.nodes(data="type") if t != G.nodes[5]["type"]]
    assert G.degree(5) == (1 if opposite else 0)


def test_market_step_reinforces_edges():
    rng = np.random.default_rng(2)
    G = market_graph(10, 1.0, seed=rng)
    before = total_weight(G)
    market_step(G, rng, add_node_prob=0.0, add_edge_prob=0.0, reinforce_prob=1.0, increment=0.5)
    assert total_weight(G) == pytest.approx(before + 0.5 * G.number_of_edges())


def test_run_market_history_and_resets():
    hist = run_market(n_nodes=20, p=0.2, ticks=30, update_limit=10, seed=1)

    assert list(hist.columns) == ["tick", "nodes", "edges", "total_weight", "top_node", "top_centrality"]
    assert hist["tick"].tolist() == list(range(30))
    # fresh graph every 10 ticks, at most one arrival per tick
    for start in (0, 10, 20):
        assert hist.loc[start, "nodes"] in (20, 21)
        window = hist.loc[start:start + 9, "nodes"]
        assert window.is_monotonic_increasing
    assert (hist["total_weight"] >= 0).all()
    assert hist["top_centrality"].between(0, 1).all()


def test_run_market_is_reproducible():
    a = run_market(n_nodes=10, p=0.3, ticks=5, seed=3)
    b = run_market(n_nodes=10, p=0.3, ticks=5, seed=3)
    assert a["total_weight"].tolist() == b["total_weight"].tolist()
    assert a["edges"].tolist() == b["edges"].tolist()


def test_run_market_rejects_bad_arguments():
    with pytest.raises(ValueError):
        run_market(ticks=-1)
    with pytest.raises(ValueError):
        run_market(update_limit=0)


def test_island_growth_drains_triangle():
    hist = island_growth(n_nodes=10, max_iter=5000, tol=1e-10, rng=np.random.default_rng(3))

    assert len(hist) == 8
    assert hist["hub_links"].tolist() == list(range(8))
    assert hist.loc[0, "hub_centrality"] == 0.0
    assert hist.loc[0, "triangle_centrality"] > 1e-3
    assert hist["triangle_centrality"].iloc[-1] < 1e-3
    assert hist["hub_centrality"].iloc[-1] > 0.5
    assert hist["converged"].all()


def test_doping_sequence_frames():
    frames = doping_sequence(n_ring=7, tol=1e-10, rng=np.random.default_rng(6))

    assert len(frames) == 3 * 8
    assert frames["frame"].unique().tolist() == ["no_doping", "hub_doped", "propagation"]
    assert frames["sim_index"].unique().tolist() == [0, 1, 2]

    by_frame = {name: g.set_index("id")["value"] for name, g in frames.groupby("frame")}
    assert np.allclose(by_frame["propagation"], by_frame["hub_doped"] - by_frame["no_doping"])
    assert by_frame["propagation"][0] > 0


def test_doping_frames_reuse_an_existing_table():
    G = hub_ring_graph(7, hub_links=3)
    table = doping_table(G, doped=0, tol=1e-8, rng=np.random.default_rng(9))
    frames = doping_frames(table)

    hub_doped = frames[frames["frame"] == "hub_doped"]["value"].to_numpy()
    propagation = frames[frames["frame"] == "propagation"]["value"].to_numpy()
    assert np.array_equal(hub_doped, table["centrality_doped"].to_numpy())
    assert np.array_equal(propagation, table["delta"].to_numpy())
