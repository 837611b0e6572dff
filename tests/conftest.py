"""Shared fixtures for the manifoldode test-suite."""

import numpy as np
import pytest

from manifoldode.integrators import ManifoldIntegrator, get_algorithm_step
from manifoldode.manifolds import Euclidean, SpecialOrthogonal, Sphere, Stiefel

from system_fixtures import ALGORITHM_NAMES, random_rotation

np.set_printoptions(linewidth=120, precision=12)


@pytest.fixture(params=ALGORITHM_NAMES)
def algorithm_name(request):
    """Parametrise a test over every registered algorithm."""
    return request.param


@pytest.fixture(scope="session")
def euclidean():
    return Euclidean()


@pytest.fixture(scope="session")
def sphere():
    return Sphere(3)


@pytest.fixture(scope="session")
def so3():
    return SpecialOrthogonal(3)


@pytest.fixture(scope="session")
def stiefel():
    return Stiefel(4, 2)


@pytest.fixture(scope="session")
def rotation0():
    return random_rotation(seed=3)


@pytest.fixture(scope="session")
def sphere_point0():
    point = np.array([0.6, -0.2, 0.5])
    return point / np.linalg.norm(point)


@pytest.fixture(scope="session")
def stiefel_point0():
    rng = np.random.default_rng(11)
    q, _ = np.linalg.qr(rng.normal(size=(4, 2)))
    return q


@pytest.fixture()
def make_session():
    """Return a factory building an initialised integration session."""

    def _make(
        manifold,
        algorithm,
        field,
        u0,
        t0=0.0,
        dt=0.1,
        parameters=None,
        initialize=True,
        **settings,
    ):
        step = get_algorithm_step(manifold, algorithm=algorithm, **settings)
        session = ManifoldIntegrator(
            step, field, u0, t0, dt, parameters=parameters
        )
        if initialize:
            session.initialize()
        return session

    return _make
