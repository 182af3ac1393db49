"""Mean-shift result structure."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray


class MeanShiftState(enum.Enum):
    """States of the mean-shift iteration for one query point."""

    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass
class MeanShiftResult:
    """Results from a mean-shift run.

    Attributes
    ----------
    final : NDArray
        Last iterate, shape (d,).
    state : MeanShiftState
        CONVERGED if the last step was shorter than ``tol``, EXHAUSTED if
        the iteration budget ran out first.
    n_iter : int
        Number of updates performed.
    step : float
        Euclidean length of the last update.
    trajectory : NDArray or None
        All iterates from the initial point to ``final``, shape
        (n_iter + 1, d). Only recorded when ``store=True``.
    """

    final: NDArray
    state: MeanShiftState
    n_iter: int
    step: float
    trajectory: NDArray | None = None

    @property
    def converged(self) -> bool:
        return self.state is MeanShiftState.CONVERGED

    def summary(self) -> str:
        """Return a short formatted description of the run."""
        coords = " ".join(f"{v:.6g}" for v in np.asarray(self.final))
        lines = [
            f"  state       = {self.state.value}",
            f"  iterations  = {self.n_iter:d}",
            f"  last step   = {self.step:.3e}",
            f"  final point = [{coords}]",
        ]
        return "\n".join(lines)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the trajectory to a pandas DataFrame.

        Returns
        -------
        df : pd.DataFrame
            One row per iterate, indexed by iteration number, columns
            ``x0 .. x{d-1}``.

        Raises
        ------
        ValueError
            If the trajectory was not recorded.
        """
        if self.trajectory is None:
            raise ValueError("trajectory was not stored; rerun with store=True")
        d = self.trajectory.shape[1]
        df = pd.DataFrame(self.trajectory, columns=[f"x{j}" for j in range(d)])
        df.index.name = "iteration"
        return df
