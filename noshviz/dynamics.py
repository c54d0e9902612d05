import networkx as nx
import numpy as np
import pandas as pd

from noshviz.centrality import compute_centralities, doping_table
from noshviz.graphs import (
    BUYER,
    SELLER,
    adjacency_matrix,
    connect_next_unlinked,
    hub_ring_graph,
    island_graph,
    market_graph,
    nodes_of_kind,
    random_trader_type,
    total_weight,
)
from noshviz.power import power_iteration


def market_step(
    G: nx.Graph,
    rng: np.random.Generator,
    add_node_prob: float = 0.1,
    add_edge_prob: float = 0.3,
    reinforce_prob: float = 0.02,
    increment: float = 0.1,
) -> float:
    """
    One tick of the buyer/seller market:
      - with add_node_prob a new trader arrives and trades with a random
        trader of the opposite type,
      - otherwise, with add_edge_prob, a random buyer/seller pair starts trading,
      - every existing trade is reinforced by `increment` with reinforce_prob.
    Duplicate edges are never added. Returns the total edge weight after the tick.
    """
    source = target = None

    if rng.random() < add_node_prob:
        new = max(G.nodes(), default=-1) + 1
        t = random_trader_type(rng)
        G.add_node(new, type=t)
        opposite = sorted(n for n, nt in G.nodes(data="type") if nt != t)
        if opposite:
            source, target = new, opposite[rng.integers(len(opposite))]
    else:
        buyers = sorted(n for n, t in G.nodes(data="type") if t == BUYER)
        sellers = sorted(n for n, t in G.nodes(data="type") if t == SELLER)
        if buyers and sellers and rng.random() < add_edge_prob:
            source = buyers[rng.integers(len(buyers))]
            target = sellers[rng.integers(len(sellers))]

    if source is not None and not G.has_edge(source, target):
        G.add_edge(source, target, weight=rng.random())

    for _, _, data in G.edges(data=True):
        if rng.random() < reinforce_prob:
            data["weight"] += increment

    return total_weight(G)


def run_market(
    n_nodes: int = 50,
    p: float = 0.1,
    ticks: int = 100,
    update_limit: int = 500,
    seed=None,
    max_iter: int = 1000,
    tol: float = 1e-2,
    shift: float = 1.0,
) -> pd.DataFrame:
    """
    Evolves a market graph for `ticks` ticks, restarting from a fresh graph
    every `update_limit` ticks. Per tick: size, total weight and the most
    central trader. The market is bipartite, hence the default shift of 1.
    """
    if ticks < 0:
        raise ValueError(f"ticks must be >= 0, got {ticks}")
    if update_limit < 1:
        raise ValueError(f"update_limit must be >= 1, got {update_limit}")
    rng = np.random.default_rng(seed)

    G = market_graph(n_nodes, p, seed=rng)
    since_reset = 0
    rows = []

    for tick in range(ticks):
        if since_reset >= update_limit:
            G = market_graph(n_nodes, p, seed=rng)
            since_reset = 0

        weight = market_step(G, rng)
        since_reset += 1

        top_node, top_c = None, np.nan
        if G.number_of_nodes() > 0:
            df = compute_centralities(G, max_iter=max_iter, tol=tol, rng=rng, shift=shift)
            best = df.loc[df["centrality"].idxmax()]
            top_node, top_c = int(best["id"]), float(best["centrality"])

        rows.append({
            "tick": tick,
            "nodes": G.number_of_nodes(),
            "edges": G.number_of_edges(),
            "total_weight": weight,
            "top_node": top_node,
            "top_centrality": top_c,
        })

    return pd.DataFrame(rows, columns=["tick", "nodes", "edges", "total_weight", "top_node", "top_centrality"])


def island_growth(
    n_nodes: int = 50,
    max_iter: int = 1000,
    tol: float = 1e-2,
    rng=None,
) -> pd.DataFrame:
    """
    Starts from the two-island graph and links the hub to one more ring node
    per step until the whole ring is attached; the triangle stays isolated.
    Records how centrality drains from the triangle into the hub's island.
    """
    G = island_graph(n_nodes)
    ring = nodes_of_kind(G, "ring")
    triangle = nodes_of_kind(G, "triangle")
    nodes = sorted(G.nodes())
    ring_idx = [nodes.index(n) for n in ring]
    tri_idx = [nodes.index(n) for n in triangle]
    zeros = np.zeros(len(nodes), dtype=np.float64)

    rows = []
    step = 0
    while True:
        res = power_iteration(adjacency_matrix(G, nodes), zeros, max_iter, tol=tol, rng=rng)
        v = np.abs(res.eigenvector)
        rows.append({
            "step": step,
            "hub_links": G.degree(0),
            "hub_centrality": float(v[0]),
            "ring_mean": float(v[ring_idx].mean()),
            "triangle_centrality": float(v[tri_idx].max()),
            "converged": res.converged,
        })

        if connect_next_unlinked(G, hub=0, candidates=ring) is None:
            break
        step += 1

    return pd.DataFrame(rows)


def doping_sequence(
    n_ring: int = 50,
    hub_links: int = 3,
    strength: float = 1.0,
    max_iter: int = 1000,
    tol: float = 1e-2,
    rng=None,
) -> pd.DataFrame:
    """
    The three frames of the doping experiment on a hub-and-ring graph,
    in long format (frame, id, value):
      0 "no_doping"    plain centrality
      1 "hub_doped"    centrality with the hub forced
      2 "propagation"  doped minus plain
    """
    G = hub_ring_graph(n_ring, hub_links=hub_links)
    df = doping_table(G, doped=0, strength=strength, max_iter=max_iter, tol=tol, rng=rng)
    return doping_frames(df)


def doping_frames(df: pd.DataFrame) -> pd.DataFrame:
    """Reshape a doping_table into the three long-format frames."""
    frames = [
        ("no_doping", "centrality"),
        ("hub_doped", "centrality_doped"),
        ("propagation", "delta"),
    ]
    parts = []
    for i, (name, col) in enumerate(frames):
        part = df.loc[:, ["id", col]].rename(columns={col: "value"})
        part.insert(0, "frame", name)
        part.insert(0, "sim_index", i)
        parts.append(part)
    return pd.concat(parts, ignore_index=True)
