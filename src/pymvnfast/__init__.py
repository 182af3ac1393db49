"""pymvnfast: fast multivariate normal and Student's-t computations.

Batch densities, random generation, Mahalanobis distances, finite
mixtures and mean-shift, all driven by one Cholesky factorization per call
and parallelized over row blocks.
"""

from pymvnfast._exceptions import (
    BufferSizeError,
    DimensionMismatchError,
    InvalidParameterError,
    MVNError,
    NotPositiveDefiniteError,
)
from pymvnfast.distributions import (
    dmixn,
    dmixt,
    dmvn,
    dmvt,
    rmixn,
    rmixt,
    rmvn,
    rmvt,
)
from pymvnfast.linalg import CovarianceFactor, factorize, maha
from pymvnfast.meanshift import (
    MeanShiftControl,
    MeanShiftResult,
    MeanShiftState,
    ms,
)
from pymvnfast.utils import RngStream

__version__ = "0.1.0"

__all__ = [
    "factorize",
    "CovarianceFactor",
    "maha",
    "dmvn",
    "dmvt",
    "dmixn",
    "dmixt",
    "rmvn",
    "rmvt",
    "rmixn",
    "rmixt",
    "ms",
    "MeanShiftControl",
    "MeanShiftResult",
    "MeanShiftState",
    "RngStream",
    "MVNError",
    "NotPositiveDefiniteError",
    "DimensionMismatchError",
    "InvalidParameterError",
    "BufferSizeError",
    "__version__",
]
