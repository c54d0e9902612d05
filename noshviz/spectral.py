import networkx as nx
import numpy as np
from scipy.sparse import issparse
from scipy.sparse.linalg import eigsh

# ARPACK needs k < N; below this size a dense solve is simpler and exact
DENSE_LIMIT = 100


def _to_operator(A):
    if isinstance(A, nx.Graph):
        return nx.to_scipy_sparse_array(A, nodelist=sorted(A.nodes()), dtype=float, format="csr")
    if issparse(A):
        return A.astype(float)
    return np.asarray(A, dtype=float)


def largest_eigenvalue(A) -> float:
    """Largest eigenvalue (spectral radius) of a symmetric adjacency matrix or graph."""
    M = _to_operator(A)
    if M.shape[0] == 0:
        raise ValueError("largest eigenvalue of an empty matrix is undefined")

    if M.shape[0] <= DENSE_LIMIT:
        dense = M.toarray() if issparse(M) else M
        return float(np.linalg.eigvalsh(dense)[-1])

    vals = eigsh(M, k=1, which="LA", return_eigenvectors=False)
    return float(vals[0])


def rayleigh_quotient(A, r) -> float:
    """Eigenvalue paired with an (approximate) eigenvector r."""
    M = np.asarray(A, dtype=float)
    v = np.asarray(r, dtype=float)
    denom = float(v @ v)
    if denom == 0:
        raise ValueError("Rayleigh quotient of a zero vector is undefined")
    return float(v @ (M @ v)) / denom


def reference_eigenvector(A) -> np.ndarray:
    """
    Dominant eigenvector from a dense symmetric solve, for cross-checking
    power iteration. Sign chosen so the entries sum to >= 0; unit norm.
    """
    M = np.asarray(A, dtype=float)
    _, vecs = np.linalg.eigh(M)
    v = vecs[:, -1]
    if v.sum() < 0:
        v = -v
    return v / np.linalg.norm(v)
