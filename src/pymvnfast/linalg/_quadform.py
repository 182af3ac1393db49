"""Squared Mahalanobis distances by forward substitution.

For each row x_i the standardized residual z_i solves R^T z_i = x_i - mu.
R^T is lower triangular, so z_i is obtained column by column in O(d^2)
without ever forming R^{-1} or Sigma^{-1}. The loops run over the d
columns and are vectorized over the rows of a block; every row therefore
goes through the same fixed sequence of elementwise operations, and the
result does not depend on how rows are split across workers.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pymvnfast._exceptions import DimensionMismatchError
from pymvnfast.linalg._cholesky import CovarianceFactor, factorize
from pymvnfast.utils._parallel import run_blocks
from pymvnfast.utils._validation import as_mean, as_rows, check_ncores


def prepare_batch(
    X, mu, sigma, *, is_chol: bool = False
) -> tuple[NDArray, NDArray, CovarianceFactor]:
    """Coerce and cross-check the inputs shared by all batch kernels.

    Returns
    -------
    X : ndarray, shape (n, d)
    mu : ndarray, shape (d,)
    factor : CovarianceFactor
    """
    factor = factorize(sigma, is_chol=is_chol)
    d = factor.dim
    X = as_rows(X)
    if X.shape[1] != d:
        raise DimensionMismatchError(
            f"X has {X.shape[1]} columns but sigma is {d}x{d}"
        )
    mu = as_mean(mu, d)
    return X, mu, factor


def forward_solve(diff: NDArray, factor: CovarianceFactor) -> NDArray:
    """Solve R^T z_i = diff_i for every row of ``diff``.

    Parameters
    ----------
    diff : ndarray, shape (n, d)
        Centered rows x_i - mu.
    factor : CovarianceFactor

    Returns
    -------
    Z : ndarray, shape (n, d)
        Standardized residuals R^{-T} diff_i.
    """
    R = factor.R
    d = factor.dim
    diff = np.asarray(diff, dtype=np.float64)
    Zt = np.empty((d, diff.shape[0]), dtype=np.float64)

    for j in range(d):
        acc = diff[:, j].copy()
        for k in range(j):
            acc -= Zt[k] * R[k, j]
        Zt[j] = acc / R[j, j]

    return Zt.T


def squared_distances(X: NDArray, mu: NDArray, factor: CovarianceFactor) -> NDArray:
    """Squared Mahalanobis distances of the rows of X from mu (no threading)."""
    Z = forward_solve(X - mu, factor)
    m = np.zeros(Z.shape[0], dtype=np.float64)
    for j in range(factor.dim):
        m += Z[:, j] * Z[:, j]
    return m


def maha(
    X,
    mu,
    sigma,
    *,
    is_chol: bool = False,
    ncores: int = 1,
) -> NDArray:
    """Squared Mahalanobis distance of each row of X from mu.

    Computes (x_i - mu)^T Sigma^{-1} (x_i - mu) through the Cholesky factor.

    Parameters
    ----------
    X : ndarray, shape (n, d) or (d,)
        Rows to evaluate. A vector is treated as a single row.
    mu : ndarray, shape (d,)
        Mean vector.
    sigma : ndarray, shape (d, d), or CovarianceFactor
        Covariance matrix, or its upper Cholesky factor if ``is_chol``.
    is_chol : bool
        Whether ``sigma`` is already the upper Cholesky factor.
    ncores : int
        Number of worker threads. The output is bit-identical for any value.

    Returns
    -------
    m : ndarray, shape (n,)
        Non-negative squared distances.

    Examples
    --------
    >>> maha(np.zeros((2, 2)), np.zeros(2), np.eye(2))
    array([0., 0.])
    """
    check_ncores(ncores)
    X, mu, factor = prepare_batch(X, mu, sigma, is_chol=is_chol)
    out = np.empty(X.shape[0], dtype=np.float64)

    def work(w, start, stop):
        out[start:stop] = squared_distances(X[start:stop], mu, factor)

    run_blocks(work, X.shape[0], ncores)
    return out
