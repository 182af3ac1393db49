"""Cholesky factorization and triangular quadratic forms."""

from pymvnfast.linalg._cholesky import CovarianceFactor, factorize
from pymvnfast.linalg._quadform import forward_solve, maha

__all__ = [
    "CovarianceFactor",
    "factorize",
    "forward_solve",
    "maha",
]
