"""Exception hierarchy for pymvnfast.

All errors derive from ``ValueError`` so that callers who only guard
against bad input keep working. Every check runs before any worker is
dispatched, so a raised error never leaves a partially written output.
"""

from __future__ import annotations

import numpy as np


class MVNError(ValueError):
    """Base class for all pymvnfast input errors."""


class NotPositiveDefiniteError(MVNError, np.linalg.LinAlgError):
    """Cholesky factorization hit a non-positive pivot."""


class DimensionMismatchError(MVNError):
    """X, mu and the covariance (or factor) disagree on dimension."""


class InvalidParameterError(MVNError):
    """A scalar or matrix parameter is outside its admissible range.

    Raised for non-positive degrees of freedom on the Student's-t variant,
    non-positive worker counts, bad mixture weights and malformed
    bandwidth matrices.
    """


class BufferSizeError(MVNError):
    """A caller-supplied output buffer has the wrong shape or layout."""
