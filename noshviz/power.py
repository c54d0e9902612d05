from __future__ import annotations

from typing import Callable, NamedTuple, Optional, Sequence, Union

import numpy as np

RandomSource = Union[np.random.Generator, Callable[[int], Sequence[float]]]


class DimensionMismatchError(ValueError):
    """Matrix, bias or initial vector shapes do not line up."""


class DegenerateNormalizationError(ValueError):
    """A zero (or non-finite) vector reached normalization."""


class PowerIterationResult(NamedTuple):
    eigenvector: np.ndarray
    iterations: int
    converged: bool


def normalize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm == 0 or not np.isfinite(norm):
        raise DegenerateNormalizationError(f"cannot normalize a vector with norm {norm}")
    return v / norm


def one_hot(n: int, index: int, strength: float = 1.0) -> np.ndarray:
    """Doping vector: `strength` at `index`, zero elsewhere."""
    if not 0 <= index < n:
        raise DimensionMismatchError(f"doping index {index} out of range for {n} nodes")
    b = np.zeros(n, dtype=np.float64)
    b[index] = strength
    return b


def _as_matrix(A) -> np.ndarray:
    try:
        M = np.asarray(A, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise DimensionMismatchError(f"adjacency matrix is not a dense N x N array: {exc}") from exc

    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise DimensionMismatchError(f"adjacency matrix must be square, got shape {M.shape}")
    if M.shape[0] == 0:
        raise DimensionMismatchError("adjacency matrix is empty")
    if not np.all(np.isfinite(M)):
        raise ValueError("adjacency matrix contains non-finite entries")
    return M


def _as_vector(v, n: int, what: str) -> np.ndarray:
    try:
        x = np.asarray(v, dtype=np.float64)
    except ValueError as exc:
        raise DimensionMismatchError(f"{what} is not a flat sequence: {exc}") from exc

    if x.shape != (n,):
        raise DimensionMismatchError(f"{what} must have shape ({n},), got {x.shape}")
    if not np.all(np.isfinite(x)):
        raise ValueError(f"{what} contains non-finite entries")
    return x


def _initial_vector(rng: Optional[RandomSource], n: int) -> np.ndarray:
    if rng is None:
        rng = np.random.default_rng()

    if isinstance(rng, np.random.Generator):
        draw = rng.random(n)
    elif callable(rng):
        draw = rng(n)
    else:
        raise TypeError(f"rng must be a numpy Generator or a callable, got {type(rng).__name__}")

    return _as_vector(draw, n, "initial vector")


def power_iteration(
    A,
    b,
    max_iter: int,
    tol: float = 1e-2,
    rng: Optional[RandomSource] = None,
    shift: float = 0.0,
) -> PowerIterationResult:
    """
    Signed affine power iteration:
      y = A r + b ;  r <- sign(y . r) * y / ||y||
    Stops as soon as ||r_new - r|| < tol, otherwise after max_iter steps.

    rng: numpy Generator (uniform [0, 1) draws) or callable n -> length-n vector.
    shift: iterate on A + shift * I (a positive shift settles bipartite graphs,
    whose +lambda / -lambda pair makes the plain iteration oscillate).

    Raises DimensionMismatchError on bad shapes and DegenerateNormalizationError
    whenever a zero vector would have to be normalized. Running out of
    iterations is not an error: the last iterate is returned with converged=False.
    """
    M = _as_matrix(A)
    n = M.shape[0]
    bias = _as_vector(b, n, "bias vector")

    if max_iter < 0:
        raise ValueError(f"max_iter must be >= 0, got {max_iter}")
    if not tol >= 0:
        raise ValueError(f"tol must be >= 0, got {tol}")
    if not np.isfinite(shift):
        raise ValueError(f"shift must be finite, got {shift}")

    r = normalize(_initial_vector(rng, n))

    for i in range(max_iter):
        y = M @ r + bias
        if shift:
            y += shift * r

        # sign of the eigenvalue estimate; keeps a negative dominant eigenvalue
        # from flipping the iterate every step
        mu = float(y @ r)
        r_next = normalize(np.sign(mu) * y)

        if np.linalg.norm(r_next - r) < tol:
            return PowerIterationResult(r_next, i + 1, True)

        r = r_next

    return PowerIterationResult(r, max_iter, False)


def centrality_vector(
    A,
    b=None,
    max_iter: int = 1000,
    tol: float = 1e-2,
    rng: Optional[RandomSource] = None,
    shift: float = 0.0,
) -> np.ndarray:
    """Eigenvector centrality (zero bias unless `b` is given)."""
    M = _as_matrix(A)
    if b is None:
        b = np.zeros(M.shape[0], dtype=np.float64)
    return power_iteration(M, b, max_iter, tol=tol, rng=rng, shift=shift).eigenvector
