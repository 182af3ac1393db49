"""Random generation from multivariate normal and Student's-t.

Each worker owns a contiguous row block and a private Philox stream keyed by
(seed, worker, first row of the block), draws standard normal rows z_i and
maps them to x_i = mu + R^T z_i with a BLAS triangular multiply. For the t
variant every row is further scaled by sqrt(nu / s_i), s_i ~ chi^2(nu).

Results are reproducible for a fixed (seed, ncores) pair. Changing
``ncores`` changes the block layout and hence the values drawn, but never
their distribution.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.linalg.blas import dtrmm

from pymvnfast.distributions._density import is_normal_df
from pymvnfast.linalg._cholesky import CovarianceFactor, factorize
from pymvnfast.utils._parallel import run_blocks
from pymvnfast.utils._seeds import RngStream, resolve_seed
from pymvnfast.utils._validation import (
    as_mean,
    check_buffer,
    check_df,
    check_n,
    check_ncores,
)


def fortran_factor(factor: CovarianceFactor) -> NDArray:
    """Writeable column-major copy of R, the layout BLAS wants."""
    return np.array(factor.R, order="F")


def affine_rows(Z: NDArray, mu: NDArray, R: NDArray) -> NDArray:
    """Return rows mu + R^T z_i, i.e. Z @ R + mu, using only triu(R)."""
    XR = dtrmm(1.0, R, Z, side=1, lower=0, trans_a=0)
    return XR + mu


def draw_standard(
    rng: np.random.Generator,
    nb: int,
    d: int,
    df: float | None,
) -> NDArray:
    """Draw ``nb`` standard normal (or standard t when df is finite) rows."""
    Z = rng.standard_normal((nb, d))
    if not is_normal_df(df):
        s = rng.chisquare(df, nb)
        Z *= np.sqrt(df / s)[:, None]
    return Z


def _simulate(n, mu, sigma, df, ncores, is_chol, A, seed):
    check_ncores(ncores)
    n = check_n(n)
    factor = factorize(sigma, is_chol=is_chol)
    d = factor.dim
    mu = as_mean(mu, d)
    out = np.empty((n, d), dtype=np.float64) if A is None else check_buffer(A, n, d)
    seed = resolve_seed(seed)
    R = fortran_factor(factor)

    def work(w, start, stop):
        rng = RngStream(seed, w, start).generator()
        Z = draw_standard(rng, stop - start, d, df)
        out[start:stop] = affine_rows(Z, mu, R)

    run_blocks(work, n, ncores)
    return None if A is not None else out


def rmvn(
    n: int,
    mu,
    sigma,
    *,
    ncores: int = 1,
    is_chol: bool = False,
    A: NDArray | None = None,
    seed: int | None = None,
) -> NDArray | None:
    """Simulate from a multivariate normal distribution.

    Parameters
    ----------
    n : int
        Number of random vectors.
    mu : ndarray, shape (d,)
        Mean vector.
    sigma : ndarray, shape (d, d), or CovarianceFactor
        Covariance matrix, or its upper Cholesky factor if ``is_chol``.
    ncores : int
        Number of worker threads.
    is_chol : bool
        Whether ``sigma`` is the upper Cholesky factor.
    A : ndarray, shape (n, d), optional
        Pre-allocated C-contiguous float64 buffer. If given, the sample is
        written into it and nothing is returned.
    seed : int or None
        Base seed. None draws fresh entropy.

    Returns
    -------
    X : ndarray, shape (n, d), or None
        The sample, or None when ``A`` was supplied.

    Raises
    ------
    BufferSizeError
        If ``A`` does not have shape (n, d), dtype float64 and C layout.
    """
    return _simulate(n, mu, sigma, None, ncores, is_chol, A, seed)


def rmvt(
    n: int,
    mu,
    sigma,
    df: float,
    *,
    ncores: int = 1,
    is_chol: bool = False,
    A: NDArray | None = None,
    seed: int | None = None,
) -> NDArray | None:
    """Simulate from a multivariate Student's-t distribution.

    Parameters
    ----------
    n : int
        Number of random vectors.
    mu : ndarray, shape (d,)
        Location vector.
    sigma : ndarray, shape (d, d), or CovarianceFactor
        Scale matrix, or its upper Cholesky factor if ``is_chol``. The
        covariance of the draws is ``df / (df - 2) * sigma`` for df > 2.
    df : float
        Degrees of freedom, must be positive.
    ncores, is_chol, A, seed
        As in ``rmvn``.

    Returns
    -------
    X : ndarray, shape (n, d), or None
    """
    df = check_df(df)
    return _simulate(n, mu, sigma, df, ncores, is_chol, A, seed)
