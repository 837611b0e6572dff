"""
manifoldode: explicit fixed-step integrators for ODEs on manifolds
"""

from importlib.metadata import PackageNotFoundError, version

from manifoldode.integrators import *  # noqa
from manifoldode.manifolds import *  # noqa
from manifoldode.odesystems import ManifoldODEFunction  # noqa
from manifoldode.time_logger import TimeLogger, TimingEvent  # noqa

__all__ = [
    "get_algorithm_step",
    "ManifoldIntegrator",
    "ManifoldODEFunction",
    "ManifoldEulerStep",
    "CG2Step",
    "CG3Step",
    "ManifoldOps",
    "Euclidean",
    "Sphere",
    "SpecialOrthogonal",
    "Stiefel",
    "hat",
    "vee",
    "TimeLogger",
    "TimingEvent",
]

try:
    __version__ = version("manifoldode")
except PackageNotFoundError:
    # Package is not installed
    __version__ = "unknown"
