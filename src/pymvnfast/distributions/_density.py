"""Multivariate normal and Student's-t densities.

Both densities are evaluated on the log scale from the squared Mahalanobis
distance m_i and log|Sigma|:

    normal:  -0.5 * (d*log(2*pi) + log|Sigma| + m_i)
    t(nu):   lgamma((nu+d)/2) - lgamma(nu/2) - 0.5*d*log(nu*pi)
             - 0.5*log|Sigma| - (nu+d)/2 * log(1 + m_i/nu)

Raw densities are exp() of the log form; the normalizing constant itself
is never formed, so large d does not overflow or underflow it.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy.special import gammaln

from pymvnfast.linalg._cholesky import CovarianceFactor
from pymvnfast.linalg._quadform import prepare_batch, squared_distances
from pymvnfast.utils._parallel import run_blocks
from pymvnfast.utils._validation import check_df, check_ncores

LOG_TWO_PI = math.log(2.0 * math.pi)


def is_normal_df(df: float | None) -> bool:
    """True if ``df`` selects the normal branch (None, <= 0 or infinite)."""
    return df is None or df <= 0.0 or math.isinf(df)


def log_density(
    m: NDArray,
    factor: CovarianceFactor,
    df: float | None = None,
) -> NDArray:
    """Map squared Mahalanobis distances to log-densities.

    Parameters
    ----------
    m : ndarray, shape (n,)
        Squared distances from ``squared_distances``.
    factor : CovarianceFactor
        Factor the distances were computed with.
    df : float or None
        Degrees of freedom. None, a non-positive or an infinite value
        gives the normal density, a finite positive one the Student's-t.

    Returns
    -------
    logpdf : ndarray, shape (n,)
    """
    d = factor.dim
    log_det = factor.log_det

    if is_normal_df(df):
        return -0.5 * (d * LOG_TWO_PI + log_det + m)

    const = (
        gammaln(0.5 * (df + d))
        - gammaln(0.5 * df)
        - 0.5 * d * math.log(df * math.pi)
        - 0.5 * log_det
    )
    return const - 0.5 * (df + d) * np.log1p(m / df)


def _evaluate(X, mu, sigma, df, log, ncores, is_chol) -> NDArray:
    check_ncores(ncores)
    X, mu, factor = prepare_batch(X, mu, sigma, is_chol=is_chol)
    out = np.empty(X.shape[0], dtype=np.float64)

    def work(w, start, stop):
        m = squared_distances(X[start:stop], mu, factor)
        logpdf = log_density(m, factor, df)
        out[start:stop] = logpdf if log else np.exp(logpdf)

    run_blocks(work, X.shape[0], ncores)
    return out


def dmvn(
    X,
    mu,
    sigma,
    *,
    log: bool = False,
    ncores: int = 1,
    is_chol: bool = False,
) -> NDArray:
    """Multivariate normal density of each row of X.

    Parameters
    ----------
    X : ndarray, shape (n, d) or (d,)
        Points to evaluate. A vector is treated as a single row.
    mu : ndarray, shape (d,)
        Mean vector.
    sigma : ndarray, shape (d, d), or CovarianceFactor
        Covariance matrix, or its upper Cholesky factor if ``is_chol``.
        A supplied factor is trusted without checking.
    log : bool
        Return log-densities.
    ncores : int
        Number of worker threads.
    is_chol : bool
        Whether ``sigma`` is the upper Cholesky factor.

    Returns
    -------
    pdf : ndarray, shape (n,)
        Densities (or log-densities), aligned with the rows of X.

    Examples
    --------
    >>> dmvn(np.zeros(2), np.zeros(2), np.eye(2))
    array([0.15915494])
    """
    return _evaluate(X, mu, sigma, None, log, ncores, is_chol)


def dmvt(
    X,
    mu,
    sigma,
    df: float,
    *,
    log: bool = True,
    ncores: int = 1,
    is_chol: bool = False,
) -> NDArray:
    """Multivariate Student's-t density of each row of X.

    Parameters
    ----------
    X : ndarray, shape (n, d) or (d,)
        Points to evaluate.
    mu : ndarray, shape (d,)
        Location vector.
    sigma : ndarray, shape (d, d), or CovarianceFactor
        Scale matrix (not the covariance), or its upper Cholesky factor.
    df : float
        Degrees of freedom, must be positive.
    log : bool
        Return log-densities (default True).
    ncores : int
        Number of worker threads.
    is_chol : bool
        Whether ``sigma`` is the upper Cholesky factor.

    Returns
    -------
    pdf : ndarray, shape (n,)

    Raises
    ------
    InvalidParameterError
        If ``df <= 0``.
    """
    df = check_df(df)
    return _evaluate(X, mu, sigma, df, log, ncores, is_chol)
