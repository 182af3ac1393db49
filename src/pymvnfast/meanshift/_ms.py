"""Gaussian-kernel mean-shift.

Starting from ``init``, the query point y is repeatedly moved to the
kernel-weighted mean of the sample,

    w_i = N(x_i; y_t, H),    y_{t+1} = sum_i w_i x_i / sum_i w_i,

until a step is shorter than ``tol`` (CONVERGED) or ``max_iter`` updates
have been made (EXHAUSTED). The weights come from ``dmvn`` on the log scale
with the factor of H computed once; they are shifted by their maximum
before exponentiation, which leaves the weighted mean unchanged.
"""

from __future__ import annotations

import numbers
import time

import numpy as np
from numpy.typing import NDArray

from pymvnfast._exceptions import (
    DimensionMismatchError,
    InvalidParameterError,
    NotPositiveDefiniteError,
)
from pymvnfast.distributions._density import dmvn
from pymvnfast.linalg._cholesky import CovarianceFactor, factorize
from pymvnfast.meanshift._ms_control import MeanShiftControl
from pymvnfast.meanshift._ms_results import MeanShiftResult, MeanShiftState
from pymvnfast.utils._validation import (
    as_mean,
    as_rows,
    check_ncores,
    check_symmetric,
)


def bandwidth_factor(H, d: int) -> CovarianceFactor:
    """Validate a bandwidth matrix and return its Cholesky factor.

    Raises
    ------
    InvalidParameterError
        If H is not a symmetric positive-definite square matrix.
    DimensionMismatchError
        If H is square but not d x d.
    """
    H = np.asarray(H, dtype=np.float64)
    if H.ndim != 2 or H.shape[0] != H.shape[1]:
        raise InvalidParameterError(f"H must be a square matrix, got shape {H.shape}")
    if H.shape[0] != d:
        raise DimensionMismatchError(f"H is {H.shape[0]}x{H.shape[0]} but X has {d} columns")
    if not check_symmetric(H):
        raise InvalidParameterError("H must be symmetric")
    try:
        return factorize(H)
    except NotPositiveDefiniteError as e:
        raise InvalidParameterError("H must be positive definite") from e


def _check_control(control: MeanShiftControl) -> None:
    if not control.tol > 0.0:
        raise InvalidParameterError(f"tol must be positive, got {control.tol}")
    if isinstance(control.max_iter, bool) or not isinstance(
        control.max_iter, numbers.Integral
    ) or control.max_iter < 1:
        raise InvalidParameterError(
            f"max_iter must be a positive integer, got {control.max_iter!r}"
        )
    check_ncores(control.ncores)


def ms_step(X: NDArray, y: NDArray, factor: CovarianceFactor, ncores: int = 1) -> NDArray:
    """One mean-shift update of the query point ``y``."""
    logw = dmvn(X, y, factor, log=True, ncores=ncores)
    w = np.exp(logw - np.max(logw))
    return (w @ X) / np.sum(w)


def ms(
    X,
    init,
    H,
    *,
    control: MeanShiftControl | None = None,
) -> MeanShiftResult:
    """Find a mode of the Gaussian kernel density estimate of X.

    Parameters
    ----------
    X : ndarray, shape (n, d)
        Sample defining the kernel density estimate.
    init : ndarray, shape (d,)
        Starting point.
    H : ndarray, shape (d, d)
        Symmetric positive-definite bandwidth (kernel covariance) matrix.
    control : MeanShiftControl, optional
        Tolerance, iteration budget, trajectory recording, worker count and
        verbosity. Defaults to ``MeanShiftControl()``.

    Returns
    -------
    result : MeanShiftResult

    Raises
    ------
    InvalidParameterError
        For a malformed bandwidth, a non-positive tolerance, iteration
        budget or worker count, or an empty sample.
    DimensionMismatchError
        If X, init and H disagree on dimension.
    """
    if control is None:
        control = MeanShiftControl()
    _check_control(control)

    X = as_rows(X)
    if X.shape[0] == 0:
        raise InvalidParameterError("X must contain at least one row")
    d = X.shape[1]
    y = as_mean(init, d, "init").copy()
    factor = bandwidth_factor(H, d)

    trajectory = [y.copy()] if control.store else None
    state = MeanShiftState.RUNNING
    step = np.inf
    n_iter = 0
    start_time = time.time()

    while state is MeanShiftState.RUNNING:
        y_new = ms_step(X, y, factor, control.ncores)
        step = float(np.linalg.norm(y_new - y))
        y = y_new
        n_iter += 1
        if trajectory is not None:
            trajectory.append(y.copy())

        if control.verbose >= 2:
            print(f"  Iter {n_iter:4d}: step = {step:.3e}")

        if step < control.tol:
            state = MeanShiftState.CONVERGED
        elif n_iter >= control.max_iter:
            state = MeanShiftState.EXHAUSTED

    if control.verbose >= 1:
        elapsed = time.time() - start_time
        status = "converged" if state is MeanShiftState.CONVERGED else "did not converge"
        print(f"  Mean-shift {status} in {n_iter} iterations ({elapsed:.2f}s)")

    return MeanShiftResult(
        final=y,
        state=state,
        n_iter=n_iter,
        step=step,
        trajectory=np.vstack(trajectory) if trajectory is not None else None,
    )
