import networkx as nx
import numpy as np

BUYER = "buyer"
SELLER = "seller"


def _check_probability(p: float) -> None:
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")


def _add_ring(G: nx.Graph, nodes: list[int], kind: str) -> None:
    for u in nodes:
        G.add_node(u, kind=kind)
    for i, u in enumerate(nodes):
        G.add_edge(u, nodes[(i + 1) % len(nodes)], weight=1.0)


def connect_next_unlinked(G: nx.Graph, hub: int = 0, candidates=None):
    """
    Link the hub to the lowest-id candidate it is not linked to yet.
    Returns that node, or None when every candidate is already linked.
    """
    if candidates is None:
        candidates = [n for n in G.nodes() if n != hub]

    for n in sorted(candidates):
        if not G.has_edge(hub, n):
            G.add_edge(hub, n, weight=1.0)
            return n
    return None


def hub_ring_graph(n_ring: int, hub_links: int = 3) -> nx.Graph:
    """
    Hub node 0 plus a ring 1..n_ring (unit weights); the hub is linked to
    the first `hub_links` ring nodes.
    """
    if n_ring < 3:
        raise ValueError(f"a ring needs at least 3 nodes, got {n_ring}")
    if not 0 <= hub_links <= n_ring:
        raise ValueError(f"hub_links must be in [0, {n_ring}], got {hub_links}")

    G = nx.Graph()
    G.add_node(0, kind="hub")
    _add_ring(G, list(range(1, n_ring + 1)), "ring")

    for _ in range(hub_links):
        connect_next_unlinked(G, hub=0)
    return G


def island_graph(n_nodes: int) -> nx.Graph:
    """
    Two islands: hub 0 with a ring of n_nodes - 3 nodes (hub not linked yet),
    and a separate triangle made of the last 3 nodes.
    """
    n_ring = n_nodes - 3
    if n_ring < 3:
        raise ValueError(f"island graph needs at least 6 nodes, got {n_nodes}")

    G = nx.Graph()
    G.add_node(0, kind="hub")
    _add_ring(G, list(range(1, n_ring + 1)), "ring")
    _add_ring(G, list(range(n_ring + 1, n_nodes + 1)), "triangle")
    return G


def nodes_of_kind(G: nx.Graph, kind: str) -> list[int]:
    return sorted(n for n, k in G.nodes(data="kind") if k == kind)


def erdos_renyi_graph(n: int, p: float, seed=None) -> nx.Graph:
    """
    Nodes arrive one at a time and link to every earlier node with
    probability p; edge weights uniform in [0, 1).
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    _check_probability(p)
    rng = np.random.default_rng(seed)

    G = nx.Graph()
    for new in range(n):
        G.add_node(new)
        for node in range(new):
            if rng.random() < p:
                G.add_edge(new, node, weight=rng.random())
    return G


def random_trader_type(rng: np.random.Generator) -> str:
    return BUYER if rng.random() < 0.5 else SELLER


def market_graph(n: int, p: float, seed=None) -> nx.Graph:
    """
    Bipartite buyer/seller graph: each node gets a random type and links to
    every earlier node of the opposite type with probability p.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    _check_probability(p)
    rng = np.random.default_rng(seed)

    G = nx.Graph()
    for new in range(n):
        t = random_trader_type(rng)
        G.add_node(new, type=t)
        for node in range(new):
            if G.nodes[node]["type"] != t and rng.random() < p:
                G.add_edge(new, node, weight=rng.random())
    return G


def adjacency_matrix(G: nx.Graph, nodelist=None) -> np.ndarray:
    """Dense symmetric weighted adjacency, rows/cols in `nodelist` order (sorted ids by default)."""
    if nodelist is None:
        nodelist = sorted(G.nodes())
    return nx.to_numpy_array(G, nodelist=nodelist, weight="weight", dtype=float)


def total_weight(G: nx.Graph) -> float:
    return float(sum(w for _, _, w in G.edges(data="weight", default=0.0)))
