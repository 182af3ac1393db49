"""Gaussian-kernel mean-shift mode seeking."""

from pymvnfast.meanshift._ms import ms, ms_step
from pymvnfast.meanshift._ms_control import MeanShiftControl
from pymvnfast.meanshift._ms_results import MeanShiftResult, MeanShiftState

__all__ = [
    "ms",
    "ms_step",
    "MeanShiftControl",
    "MeanShiftResult",
    "MeanShiftState",
]
