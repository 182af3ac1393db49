"""Input validation utilities."""

from __future__ import annotations

import numbers

import numpy as np
from numpy.typing import NDArray

from pymvnfast._exceptions import (
    BufferSizeError,
    DimensionMismatchError,
    InvalidParameterError,
)


def check_symmetric(A: NDArray, tol: float = 1e-10) -> bool:
    """Check if a matrix is symmetric within tolerance."""
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        return False
    return np.allclose(A, A.T, atol=tol)


def check_2d(A: NDArray, name: str = "A") -> None:
    """Raise DimensionMismatchError if A is not 2-dimensional."""
    if A.ndim != 2:
        raise DimensionMismatchError(
            f"{name} must be 2-dimensional, got shape {A.shape}"
        )


def check_square(A: NDArray, name: str = "A") -> None:
    """Raise DimensionMismatchError if A is not square."""
    check_2d(A, name)
    if A.shape[0] != A.shape[1]:
        raise DimensionMismatchError(f"{name} must be square, got shape {A.shape}")


def as_rows(X, name: str = "X") -> NDArray:
    """Return X as a float64 (n, d) array.

    A 1-D input of length d is one observation and becomes a (1, d) matrix.
    Anything with more than two dimensions is rejected.
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        return X.reshape(1, -1)
    check_2d(X, name)
    return X


def as_mean(mu, d: int, name: str = "mu") -> NDArray:
    """Return mu as a float64 vector of length d."""
    mu = np.asarray(mu, dtype=np.float64)
    if mu.ndim != 1 or mu.shape[0] != d:
        raise DimensionMismatchError(
            f"{name} must be a vector of length {d}, got shape {mu.shape}"
        )
    return mu


def check_ncores(ncores) -> int:
    """Validate a worker count and return it as a plain int."""
    if isinstance(ncores, bool) or not isinstance(ncores, numbers.Integral):
        raise InvalidParameterError(f"ncores must be an integer, got {ncores!r}")
    if ncores < 1:
        raise InvalidParameterError(f"ncores must be >= 1, got {ncores}")
    return int(ncores)


def check_df(df) -> float:
    """Validate Student's-t degrees of freedom (must be > 0)."""
    df = float(df)
    if not df > 0.0:
        raise InvalidParameterError(f"df must be positive, got {df}")
    return df


def check_n(n) -> int:
    """Validate a requested sample count."""
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 1:
        raise InvalidParameterError(f"n must be a positive integer, got {n!r}")
    return int(n)


def check_buffer(A, n: int, d: int) -> NDArray:
    """Check that a caller-owned output buffer can take an (n, d) sample.

    The buffer is written row block by row block from several threads, so
    it must be a writeable, C-contiguous float64 ndarray.
    """
    if not isinstance(A, np.ndarray):
        raise BufferSizeError(f"A must be a numpy.ndarray, got {type(A).__name__}")
    if A.shape != (n, d):
        raise BufferSizeError(f"A must have shape {(n, d)}, got {A.shape}")
    if A.dtype != np.float64:
        raise BufferSizeError(f"A must have dtype float64, got {A.dtype}")
    if not A.flags.c_contiguous or not A.flags.writeable:
        raise BufferSizeError("A must be a writeable C-contiguous array")
    return A
