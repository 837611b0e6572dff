"""
Fixed-step explicit integration on manifolds.

The module contains:
- Step algorithms (manifold Euler, Crouch--Grossmann orders 2 and 3)
- Their coefficient tableaus and scratch caches
- The integration session holding state, cache and evaluation counters

Examples
--------
>>> import numpy as np
>>> from manifoldode.manifolds import Sphere
>>> from manifoldode.integrators import ManifoldIntegrator, get_algorithm_step
>>> sphere = Sphere(3)
>>> axis = np.array([0.0, 0.0, 1.0])
>>> step = get_algorithm_step(sphere, algorithm="cg3")
>>> session = ManifoldIntegrator(
...     step, lambda x, p, t: np.cross(axis, x), [1.0, 0.0, 0.0], 0.0, 0.1
... )
>>> session.initialize()
>>> session.step()
3
"""

from manifoldode.integrators.algorithms import *  # noqa: F401,F403
from manifoldode.integrators.algorithms import __all__ as _algorithm_all
from manifoldode.integrators.manifold_integrator import (
    IntegratorState,
    IntegratorStatistics,
    ManifoldIntegrator,
)

__all__ = list(_algorithm_all) + [
    "IntegratorState",
    "IntegratorStatistics",
    "ManifoldIntegrator",
]
