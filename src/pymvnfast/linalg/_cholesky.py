"""Covariance factorization.

Every kernel works from the upper-triangular Cholesky factor R of the
covariance, Sigma = R^T R. The factor is computed once per call (or
supplied by the caller) and then shared read-only by all workers.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.linalg
from numpy.typing import NDArray

from pymvnfast._exceptions import NotPositiveDefiniteError
from pymvnfast.utils._validation import check_square


@dataclass(frozen=True)
class CovarianceFactor:
    """Upper-triangular Cholesky factor of a covariance matrix.

    Only the upper triangle (diagonal included) of ``R`` is ever read, so a
    factor with garbage below the diagonal behaves like ``np.triu(R)``.

    Attributes
    ----------
    R : ndarray, shape (d, d)
        Read-only factor with ``R.T @ R == Sigma``.
    """

    R: NDArray

    def __post_init__(self):
        R = np.array(self.R, dtype=np.float64)
        check_square(R, "sigma")
        R.setflags(write=False)
        object.__setattr__(self, "R", R)

    @classmethod
    def from_cholesky(cls, R: NDArray, *, check: bool = False) -> CovarianceFactor:
        """Wrap a caller-supplied upper-triangular factor.

        Parameters
        ----------
        R : ndarray, shape (d, d)
            Upper Cholesky factor, e.g. ``scipy.linalg.cholesky(Sigma)``.
        check : bool
            If False (default) the factor is trusted as is: a factor with a
            non-positive diagonal silently yields NaN or meaningless results
            downstream. If True, verify that R is upper triangular with a
            strictly positive diagonal.

        Raises
        ------
        NotPositiveDefiniteError
            Only when ``check=True`` and R is not a valid factor.
        """
        factor = cls(R)
        if check:
            R = factor.R
            if np.any(np.tril(R, -1) != 0.0):
                raise NotPositiveDefiniteError("factor is not upper triangular")
            if not np.all(np.diag(R) > 0.0):
                raise NotPositiveDefiniteError(
                    "factor has a non-positive diagonal entry"
                )
        return factor

    @property
    def dim(self) -> int:
        return self.R.shape[0]

    @property
    def log_det(self) -> float:
        """log |Sigma| = 2 * sum(log(diag(R)))."""
        return 2.0 * float(np.sum(np.log(np.diag(self.R))))

    def covariance(self) -> NDArray:
        """Reconstruct Sigma = R^T R from the upper triangle."""
        U = np.triu(self.R)
        return U.T @ U


def factorize(
    sigma,
    *,
    is_chol: bool = False,
    check: bool = False,
) -> CovarianceFactor:
    """Return the Cholesky factor of a covariance matrix.

    Parameters
    ----------
    sigma : ndarray, shape (d, d), or CovarianceFactor
        Covariance matrix, or its upper Cholesky factor when ``is_chol``
        is True. A ``CovarianceFactor`` is returned unchanged, which lets
        callers factorize once and reuse the factor across calls.
    is_chol : bool
        Whether ``sigma`` already is the upper Cholesky factor.
    check : bool
        Opt-in validation of a supplied factor (see
        ``CovarianceFactor.from_cholesky``). Ignored when ``is_chol`` is
        False.

    Returns
    -------
    factor : CovarianceFactor

    Raises
    ------
    NotPositiveDefiniteError
        If the factorization meets a non-positive pivot.
    DimensionMismatchError
        If ``sigma`` is not a square matrix.
    """
    if isinstance(sigma, CovarianceFactor):
        return sigma

    if is_chol:
        return CovarianceFactor.from_cholesky(sigma, check=check)

    sigma = np.asarray(sigma, dtype=np.float64)
    if sigma.ndim == 0:
        sigma = sigma.reshape(1, 1)
    check_square(sigma, "sigma")
    try:
        R = scipy.linalg.cholesky(sigma, lower=False)
    except np.linalg.LinAlgError as e:
        raise NotPositiveDefiniteError(
            "covariance matrix is not positive definite"
        ) from e
    return CovarianceFactor(R)
