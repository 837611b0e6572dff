import numpy as np
import pytest

from manifoldode.manifolds import Euclidean


@pytest.mark.parametrize("method", ["exponential", "projection"])
def test_retraction_is_addition(euclidean, method):
    base = np.array([1.0, 2.0])
    out = np.empty(2)
    euclidean.retract(out, base, np.array([0.5, -1.0]), method)
    np.testing.assert_array_equal(out, [1.5, 1.0])


def test_default_retraction(euclidean):
    assert euclidean.default_retraction == "exponential"


def test_transport_returns_copy(euclidean):
    vector = np.array([1.0, -1.0])
    moved = euclidean.vector_transport(np.zeros(2), vector, np.ones(2))
    np.testing.assert_array_equal(moved, vector)
    assert moved is not vector


def test_projections_are_identity(euclidean):
    point = np.array([[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(euclidean.project(point), point)
    np.testing.assert_array_equal(
        euclidean.project_tangent(point, point), point
    )


def test_shape_is_checked():
    space = Euclidean(shape=[2, 2])
    assert space.shape == (2, 2)
    assert space.contains(np.zeros((2, 2)))
    assert not space.contains(np.zeros(4))
    assert not space.contains(np.array([[np.nan, 0.0], [0.0, 0.0]]))


def test_allocate_matches_prototype(euclidean):
    prototype = np.ones((3, 2), dtype=np.float32)
    buffer = euclidean.allocate(prototype)
    assert buffer.shape == (3, 2)
    assert buffer.dtype == np.float32
    assert not np.any(buffer)
    assert not np.any(euclidean.zero_vector(prototype))
