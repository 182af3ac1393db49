"""Finite mixtures of multivariate normal and Student's-t distributions.

The mixture log-density is accumulated on the log scale,

    log f(x) = logsumexp_k(log w_k + log f_k(x)) - log(sum_k w_k),

so components whose densities differ by many orders of magnitude are
combined without underflow. Weights need not sum to one.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.special import logsumexp

from pymvnfast._exceptions import DimensionMismatchError, InvalidParameterError
from pymvnfast.distributions._density import log_density
from pymvnfast.distributions._simulate import (
    affine_rows,
    draw_standard,
    fortran_factor,
)
from pymvnfast.linalg._cholesky import CovarianceFactor, factorize
from pymvnfast.linalg._quadform import squared_distances
from pymvnfast.utils._parallel import run_blocks
from pymvnfast.utils._seeds import RngStream, resolve_seed
from pymvnfast.utils._validation import (
    as_rows,
    check_2d,
    check_buffer,
    check_df,
    check_n,
    check_ncores,
)


@dataclass(frozen=True)
class Mixture:
    """Validated mixture components.

    Attributes
    ----------
    mu : ndarray, shape (K, d)
        Component means, one per row.
    factors : list of CovarianceFactor
        Component factors, all d x d.
    w : ndarray, shape (K,)
        Non-negative weights as supplied.
    """

    mu: NDArray
    factors: list[CovarianceFactor]
    w: NDArray

    @property
    def n_components(self) -> int:
        return self.mu.shape[0]

    @property
    def dim(self) -> int:
        return self.mu.shape[1]

    @property
    def log_weights(self) -> NDArray:
        """log(w_k / sum(w)); zero weights map to -inf."""
        with np.errstate(divide="ignore"):
            return np.log(self.w) - np.log(np.sum(self.w))

    @property
    def probs(self) -> NDArray:
        return self.w / np.sum(self.w)


def make_mixture(mu, sigma, w, *, is_chol: bool = False) -> Mixture:
    """Check and factorize the components of a mixture.

    Parameters
    ----------
    mu : ndarray, shape (K, d)
        Component means.
    sigma : sequence of K (d, d) matrices or CovarianceFactor
        Component covariances (or upper factors if ``is_chol``). A
        (K, d, d) array is accepted as well.
    w : ndarray, shape (K,)
        Mixture weights.
    is_chol : bool
        Whether the entries of ``sigma`` are upper Cholesky factors.

    Raises
    ------
    DimensionMismatchError
        If K or d disagree between ``mu``, ``sigma`` and ``w``.
    InvalidParameterError
        If a weight is negative or non-finite, or all weights are zero.
    """
    mu = np.asarray(mu, dtype=np.float64)
    check_2d(mu, "mu")
    K, d = mu.shape

    w = np.asarray(w, dtype=np.float64)
    if w.ndim != 1 or w.shape[0] != K:
        raise DimensionMismatchError(
            f"w must be a vector of length {K}, got shape {w.shape}"
        )
    if not np.all(np.isfinite(w)) or np.any(w < 0.0):
        raise InvalidParameterError("mixture weights must be finite and >= 0")
    if not np.sum(w) > 0.0:
        raise InvalidParameterError("mixture weights must not all be zero")

    if len(sigma) != K:
        raise DimensionMismatchError(
            f"sigma has {len(sigma)} components but mu has {K}"
        )
    factors = [factorize(s, is_chol=is_chol) for s in sigma]
    for k, f in enumerate(factors):
        if f.dim != d:
            raise DimensionMismatchError(
                f"sigma[{k}] is {f.dim}x{f.dim} but mu has {d} columns"
            )

    return Mixture(mu=mu, factors=factors, w=w)


def _evaluate_mixture(X, mix: Mixture, df, log, ncores) -> NDArray:
    check_ncores(ncores)
    X = as_rows(X)
    if X.shape[1] != mix.dim:
        raise DimensionMismatchError(
            f"X has {X.shape[1]} columns but the mixture has dimension {mix.dim}"
        )
    log_w = mix.log_weights
    out = np.empty(X.shape[0], dtype=np.float64)

    def work(w, start, stop):
        Xb = X[start:stop]
        L = np.empty((mix.n_components, stop - start), dtype=np.float64)
        for k, factor in enumerate(mix.factors):
            m = squared_distances(Xb, mix.mu[k], factor)
            L[k] = log_w[k] + log_density(m, factor, df)
        logpdf = logsumexp(L, axis=0)
        out[start:stop] = logpdf if log else np.exp(logpdf)

    run_blocks(work, X.shape[0], ncores)
    return out


def dmixn(
    X,
    mu,
    sigma,
    w,
    *,
    log: bool = False,
    ncores: int = 1,
    is_chol: bool = False,
) -> NDArray:
    """Density of a mixture of multivariate normals.

    Parameters
    ----------
    X : ndarray, shape (n, d) or (d,)
        Points to evaluate.
    mu : ndarray, shape (K, d)
        Component means.
    sigma : sequence of K (d, d) matrices
        Component covariances, or upper Cholesky factors if ``is_chol``.
    w : ndarray, shape (K,)
        Non-negative mixture weights; normalized by their sum.
    log : bool
        Return log-densities.
    ncores : int
        Number of worker threads.
    is_chol : bool
        Whether ``sigma`` holds Cholesky factors.

    Returns
    -------
    pdf : ndarray, shape (n,)
    """
    mix = make_mixture(mu, sigma, w, is_chol=is_chol)
    return _evaluate_mixture(X, mix, None, log, ncores)


def dmixt(
    X,
    mu,
    sigma,
    df: float,
    w,
    *,
    log: bool = False,
    ncores: int = 1,
    is_chol: bool = False,
) -> NDArray:
    """Density of a mixture of multivariate Student's-t distributions.

    All components share the degrees of freedom ``df`` (> 0). The other
    arguments are as in ``dmixn``; ``sigma`` holds scale matrices.
    """
    df = check_df(df)
    mix = make_mixture(mu, sigma, w, is_chol=is_chol)
    return _evaluate_mixture(X, mix, df, log, ncores)


def _simulate_mixture(n, mix: Mixture, df, ncores, ret_ind, A, seed):
    check_ncores(ncores)
    n = check_n(n)
    d = mix.dim
    out = np.empty((n, d), dtype=np.float64) if A is None else check_buffer(A, n, d)
    labels = np.empty(n, dtype=np.int64)
    seed = resolve_seed(seed)
    probs = mix.probs
    Rs = [fortran_factor(f) for f in mix.factors]

    def work(w, start, stop):
        rng = RngStream(seed, w, start).generator()
        nb = stop - start
        lab = rng.choice(mix.n_components, size=nb, p=probs)
        Z = draw_standard(rng, nb, d, df)
        block = np.empty((nb, d), dtype=np.float64)
        for k in np.unique(lab):
            rows = lab == k
            block[rows] = affine_rows(Z[rows], mix.mu[k], Rs[k])
        out[start:stop] = block
        labels[start:stop] = lab

    run_blocks(work, n, ncores)

    if A is not None:
        return labels if ret_ind else None
    if ret_ind:
        return out, labels
    return out


def rmixn(
    n: int,
    mu,
    sigma,
    w,
    *,
    ncores: int = 1,
    is_chol: bool = False,
    ret_ind: bool = False,
    A: NDArray | None = None,
    seed: int | None = None,
):
    """Simulate from a mixture of multivariate normals.

    Each row first draws its component with probabilities ``w / sum(w)``
    and then a normal vector from that component.

    Parameters
    ----------
    n : int
        Number of random vectors.
    mu, sigma, w, is_chol
        Mixture components, as in ``dmixn``.
    ncores : int
        Number of worker threads.
    ret_ind : bool
        Also return the 0-based component label of every row.
    A : ndarray, shape (n, d), optional
        Pre-allocated output buffer, written in place.
    seed : int or None
        Base seed.

    Returns
    -------
    X : ndarray, shape (n, d)
        Returned when ``A`` is None and ``ret_ind`` is False.
    (X, labels) : tuple
        Returned when ``A`` is None and ``ret_ind`` is True.
    labels or None
        When ``A`` is given: the labels if ``ret_ind``, else None.
    """
    mix = make_mixture(mu, sigma, w, is_chol=is_chol)
    return _simulate_mixture(n, mix, None, ncores, ret_ind, A, seed)


def rmixt(
    n: int,
    mu,
    sigma,
    df: float,
    w,
    *,
    ncores: int = 1,
    is_chol: bool = False,
    ret_ind: bool = False,
    A: NDArray | None = None,
    seed: int | None = None,
):
    """Simulate from a mixture of multivariate Student's-t distributions.

    All components share ``df`` (> 0); see ``rmixn`` for the other
    arguments and the return values.
    """
    df = check_df(df)
    mix = make_mixture(mu, sigma, w, is_chol=is_chol)
    return _simulate_mixture(n, mix, df, ncores, ret_ind, A, seed)
