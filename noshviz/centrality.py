from __future__ import annotations

import networkx as nx
import numpy as np
import pandas as pd

from noshviz.graphs import adjacency_matrix
from noshviz.power import one_hot, power_iteration


def align_sign(v: np.ndarray) -> np.ndarray:
    """Flip a centrality vector so its entries sum to >= 0."""
    return -v if v.sum() < 0 else v


def _bias_vector(nodes: list, bias) -> np.ndarray:
    if bias is None:
        return np.zeros(len(nodes), dtype=np.float64)
    unknown = set(bias) - set(nodes)
    if unknown:
        raise ValueError(f"bias refers to unknown nodes: {sorted(unknown)}")
    return np.array([float(bias.get(n, 0.0)) for n in nodes], dtype=np.float64)


def compute_centralities(
    G: nx.Graph,
    bias: dict | None = None,
    max_iter: int = 1000,
    tol: float = 1e-2,
    rng=None,
    shift: float = 0.0,
) -> pd.DataFrame:
    """
    Signed eigenvector centrality for every node of G.
    bias: optional {node: forcing} doping map (missing nodes get 0).
    """
    nodes = sorted(G.nodes())
    A = adjacency_matrix(G, nodes)
    b = _bias_vector(nodes, bias)

    res = power_iteration(A, b, max_iter, tol=tol, rng=rng, shift=shift)

    df = pd.DataFrame({"id": nodes})
    df["degree"] = df["id"].map(dict(G.degree()))
    df["strength"] = df["id"].map(dict(G.degree(weight="weight")))
    df["centrality"] = align_sign(res.eigenvector)
    df.attrs["iterations"] = res.iterations
    df.attrs["converged"] = res.converged
    return df


def doping_table(
    G: nx.Graph,
    doped: int = 0,
    strength: float = 1.0,
    max_iter: int = 1000,
    tol: float = 1e-2,
    rng=None,
    shift: float = 0.0,
) -> pd.DataFrame:
    """
    Centrality before and after forcing `strength` at node `doped`.
    delta = centrality_doped - centrality.
    """
    nodes = sorted(G.nodes())
    if doped not in nodes:
        raise ValueError(f"doped node {doped} is not in the graph")

    A = adjacency_matrix(G, nodes)
    zeros = np.zeros(len(nodes), dtype=np.float64)
    b = one_hot(len(nodes), nodes.index(doped), strength)

    plain = power_iteration(A, zeros, max_iter, tol=tol, rng=rng, shift=shift)
    doped_res = power_iteration(A, b, max_iter, tol=tol, rng=rng, shift=shift)

    df = pd.DataFrame({"id": nodes})
    df["is_doped"] = df["id"] == doped
    df["degree"] = df["id"].map(dict(G.degree()))
    df["centrality"] = align_sign(plain.eigenvector)
    df["centrality_doped"] = align_sign(doped_res.eigenvector)
    df["delta"] = df["centrality_doped"] - df["centrality"]
    return df


def top_k(df: pd.DataFrame, col: str, k: int = 10) -> pd.DataFrame:
    return df.sort_values(col, ascending=False).head(k).copy()


def add_rank_columns(df: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
    """
    Adds rank columns for each score column in cols.
    Rank 1 = highest score.
    """
    out = df.copy()
    for c in cols:
        out[f"{c}_rank"] = out[c].rank(method="min", ascending=False).astype(int)
    return out


def classify_doping_response(df: pd.DataFrame, threshold: float = 0.01) -> pd.DataFrame:
    """
    Labels every node by how doping moved its centrality:
      delta >= threshold  => "Amplified"
      delta <= -threshold => "Damped"
      otherwise           => "Stable"
    """
    if threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")
    out = df.copy()

    def label(d):
        if d > 0 and d >= threshold:
            return "Amplified"
        if d < 0 and d <= -threshold:
            return "Damped"
        return "Stable"

    out["response"] = out["delta"].apply(label)
    return out
