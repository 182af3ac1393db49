"""Densities, simulation and mixtures of multivariate normal / Student's-t."""

from pymvnfast.distributions._density import dmvn, dmvt, log_density
from pymvnfast.distributions._mixture import dmixn, dmixt, rmixn, rmixt
from pymvnfast.distributions._simulate import rmvn, rmvt

__all__ = [
    "dmvn",
    "dmvt",
    "log_density",
    "dmixn",
    "dmixt",
    "rmvn",
    "rmvt",
    "rmixn",
    "rmixt",
]
