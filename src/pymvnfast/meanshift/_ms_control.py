"""Mean-shift control structure.

Configures the iteration of ``ms`` the way the model control structures
configure an estimation: one dataclass per call, no global defaults.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MeanShiftControl:
    """Control structure for the mean-shift iteration.

    Attributes
    ----------
    tol : float
        Convergence tolerance: stop when the Euclidean length of the last
        step falls below ``tol``.
    max_iter : int
        Iteration budget.
    store : bool
        If True, record every iterate in ``MeanShiftResult.trajectory``.
    ncores : int
        Number of worker threads used for the kernel weights.
    verbose : int
        Verbosity: 0=silent, 1=summary, 2=per-iteration.
    """

    tol: float = 1e-6
    max_iter: int = 100
    store: bool = False
    ncores: int = 1
    verbose: int = 0
