"""Flat vector space as a manifold."""

from typing import Optional, Tuple

import attrs
import numpy as np

from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps


@attrs.define(frozen=True)
class Euclidean(ManifoldOps):
    """Euclidean space R^n, or arrays of a fixed ``shape``.

    Both retractions reduce to addition and the transport is the identity,
    so manifold steps reproduce their classical Runge--Kutta counterparts.

    Parameters
    ----------
    shape
        Expected point shape. ``None`` accepts any shape.
    """

    shape: Optional[Tuple[int, ...]] = attrs.field(
        default=None,
        converter=attrs.converters.optional(tuple),
    )

    retraction_methods = ("exponential", "projection")

    def _retract(
        self, base_point: Array, tangent_vector: Array, method: str
    ) -> Array:
        return base_point + tangent_vector

    def vector_transport(
        self, from_point: Array, vector: Array, to_point: Array
    ) -> Array:
        return np.array(vector, copy=True)

    def project(self, point: Array) -> Array:
        return np.array(point, copy=True)

    def project_tangent(self, point: Array, vector: Array) -> Array:
        return np.array(vector, copy=True)

    def contains(self, point: Array, atol: float = 1e-10) -> bool:
        point = np.asarray(point)
        if self.shape is not None and point.shape != self.shape:
            return False
        return bool(np.all(np.isfinite(point)))
