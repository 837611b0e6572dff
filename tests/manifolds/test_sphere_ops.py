import numpy as np
import pytest

from manifoldode.manifolds import Sphere


@pytest.fixture()
def tangent(sphere, sphere_point0):
    return sphere.project_tangent(sphere_point0, np.array([0.3, 0.4, -0.1]))


def test_dimensions():
    sphere = Sphere(4)
    assert sphere.dim == 3
    assert sphere.ambient_dim == 4
    assert sphere.default_retraction == "exponential"


@pytest.mark.parametrize("dimension", [1, 0])
def test_small_dimension_rejected(dimension):
    with pytest.raises(ValueError, match="dimension must be >= 2"):
        Sphere(dimension)


def test_non_integer_dimension_rejected():
    with pytest.raises(TypeError, match="dimension must be int"):
        Sphere(3.0)


def test_unknown_transport_rejected():
    with pytest.raises(ValueError):
        Sphere(3, transport="schild")


@pytest.mark.parametrize("method", ["exponential", "projection"])
def test_retraction_lands_on_sphere(sphere, sphere_point0, tangent, method):
    out = np.empty(3)
    result = sphere.retract(out, sphere_point0, tangent, method)
    assert result is out
    assert sphere.contains(out)
    assert not np.allclose(out, sphere_point0)


def test_exponential_moves_by_tangent_norm(sphere, sphere_point0, tangent):
    out = sphere.retract(np.empty(3), sphere_point0, tangent, "exponential")
    angle = np.arccos(np.clip(np.dot(out, sphere_point0), -1.0, 1.0))
    assert angle == pytest.approx(np.linalg.norm(tangent), rel=1e-12)


def test_retraction_may_alias_base(sphere, sphere_point0, tangent):
    expected = sphere.retract(np.empty(3), sphere_point0, tangent)
    point = sphere_point0.copy()
    sphere.retract(point, point, tangent)
    np.testing.assert_allclose(point, expected, rtol=0, atol=1e-15)


def test_zero_tangent_is_identity(sphere, sphere_point0):
    out = np.empty(3)
    sphere.retract(out, sphere_point0, np.zeros(3))
    np.testing.assert_array_equal(out, sphere_point0)


def test_unknown_retraction_rejected(sphere, sphere_point0, tangent):
    with pytest.raises(ValueError, match="does not support the 'qr'"):
        sphere.retract(np.empty(3), sphere_point0, tangent, "qr")


@pytest.mark.parametrize("transport", ["projection", "parallel"])
def test_transport_is_tangent_at_target(sphere_point0, tangent, transport):
    sphere = Sphere(3, transport=transport)
    target = sphere.retract(np.empty(3), sphere_point0, tangent)
    moved = sphere.vector_transport(sphere_point0, tangent, target)
    assert np.dot(moved, target) == pytest.approx(0.0, abs=1e-14)


def test_parallel_transport_is_isometric(sphere_point0, tangent):
    sphere = Sphere(3, transport="parallel")
    target = sphere.retract(np.empty(3), sphere_point0, 3.0 * tangent)
    moved = sphere.vector_transport(sphere_point0, tangent, target)
    assert np.linalg.norm(moved) == pytest.approx(
        np.linalg.norm(tangent), rel=1e-12
    )


def test_parallel_transport_to_antipode_raises():
    sphere = Sphere(3, transport="parallel")
    north = np.array([0.0, 0.0, 1.0])
    with pytest.raises(ValueError, match="antipodal"):
        sphere.vector_transport(north, np.array([1.0, 0.0, 0.0]), -north)


def test_projections(sphere):
    point = sphere.project(np.array([3.0, 0.0, 4.0]))
    np.testing.assert_allclose(point, [0.6, 0.0, 0.8])
    vector = sphere.project_tangent(point, np.array([1.0, 1.0, 1.0]))
    assert np.dot(vector, point) == pytest.approx(0.0, abs=1e-15)


def test_contains(sphere):
    assert sphere.contains(np.array([0.0, 1.0, 0.0]))
    assert not sphere.contains(np.array([0.0, 1.1, 0.0]))
    assert not sphere.contains(np.array([1.0, 0.0]))
