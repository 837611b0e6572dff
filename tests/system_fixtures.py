"""Vector fields and exact solutions shared across the test-suite.

Each factory returns plain Python callables using the
``f(point, parameters, time)`` convention so tests can wrap them in
:class:`~manifoldode.odesystems.ManifoldODEFunction` or count calls.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import NDArray

from manifoldode.manifolds import hat, skew_exp

Array = NDArray[np.floating]

# Principal moments and spatial angular momentum of the test rigid body.
RIGID_BODY_INERTIA = np.array([1.0, 2.0, 3.0])
RIGID_BODY_MOMENTUM = np.array([0.3, 1.0, -0.4])

#: Fixed rotation axis for the commuting test flows.
SPIN_AXIS = np.array([1.0, 2.0, 2.0]) / 3.0

ALGORITHM_NAMES = ("manifold_euler", "cg2", "cg3")
EVALUATIONS_PER_STEP = {"manifold_euler": 1, "cg2": 2, "cg3": 3}


def zero_field(point: Array, parameters, time) -> Array:
    """Field that vanishes everywhere."""
    return np.zeros_like(point)


def rigid_body_field(rotation: Array, parameters, time) -> Array:
    """Body angular velocity ``hat(I^-1 R^T m)`` of a free rigid body."""
    body_momentum = rotation.T @ RIGID_BODY_MOMENTUM
    return hat(body_momentum / RIGID_BODY_INERTIA)


def spin_rate(time) -> float:
    return 1.5 + np.cos(time)


def spin_angle(time) -> float:
    """Integral of :func:`spin_rate` from 0 to ``time``."""
    return 1.5 * time + np.sin(time)


def spin_field_so3(rotation: Array, parameters, time) -> Array:
    """Time-varying spin about :data:`SPIN_AXIS`; stages commute."""
    return spin_rate(time) * hat(SPIN_AXIS)


def spin_exact_so3(rotation0: Array, t0: float, t1: float) -> Array:
    """Exact flow of :func:`spin_field_so3` from ``t0`` to ``t1``."""
    angle = spin_angle(t1) - spin_angle(t0)
    return rotation0 @ skew_exp(angle * hat(SPIN_AXIS))


def spin_field_sphere(point: Array, parameters, time) -> Array:
    """Rotation of the sphere about :data:`SPIN_AXIS`."""
    return spin_rate(time) * np.cross(SPIN_AXIS, point)


def spin_exact_sphere(point0: Array, t0: float, t1: float) -> Array:
    angle = spin_angle(t1) - spin_angle(t0)
    return skew_exp(angle * hat(SPIN_AXIS)) @ point0


def euclidean_field(y: Array, parameters, time) -> Array:
    """Non-autonomous field with ``y = (1 / (1 + t^2), arctan t)``."""
    return np.array([-2.0 * time * y[0] ** 2, y[0]])


def euclidean_exact(time) -> Array:
    return np.array([1.0 / (1.0 + time**2), np.arctan(time)])


def linear_field(y: Array, parameters, time) -> Array:
    """Constant-coefficient linear field ``y' = A y`` with ``A`` in
    ``parameters``."""
    return parameters @ y


def counting(field: Callable) -> Callable:
    """Wrap ``field`` so that ``wrapper.calls`` counts evaluations."""

    def wrapper(point, parameters, time):
        wrapper.calls += 1
        return field(point, parameters, time)

    wrapper.calls = 0
    return wrapper


def random_rotation(seed: int = 0) -> Array:
    """Deterministic rotation matrix for starting points."""
    rng = np.random.default_rng(seed)
    return skew_exp(hat(rng.normal(size=3)))
