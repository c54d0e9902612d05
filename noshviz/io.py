from __future__ import annotations

from pathlib import Path

import networkx as nx
import pandas as pd


def load_edges(edges_path: str | Path) -> pd.DataFrame:
    """
    Edge list CSV with columns source,target and an optional weight column
    (a missing column or blank cell means weight 1).
    """
    edges = pd.read_csv(edges_path)
    missing = {"source", "target"} - set(edges.columns)
    if missing:
        raise ValueError(f"{edges_path} is missing columns: {sorted(missing)}")
    if edges.empty:
        raise ValueError(f"No edges loaded from {edges_path}")
    if "weight" not in edges.columns:
        edges["weight"] = 1.0
    else:
        edges["weight"] = edges["weight"].fillna(1.0)
    if (edges["weight"] < 0).any():
        raise ValueError(f"{edges_path} contains negative edge weights")
    return edges


def build_graph(edges: pd.DataFrame) -> nx.Graph:
    # symmetric adjacency => undirected graph
    return nx.from_pandas_edgelist(edges, "source", "target", edge_attr="weight", create_using=nx.Graph())


def ensure_dirs(*paths: Path) -> None:
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


def save_table(df: pd.DataFrame, out_csv: Path) -> Path:
    ensure_dirs(out_csv.parent)
    df.to_csv(out_csv, index=False)
    return out_csv
