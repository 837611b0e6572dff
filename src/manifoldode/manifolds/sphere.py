"""Unit sphere embedded in R^n."""

import attrs
from attrs import validators
import numpy as np

from manifoldode._utils import getype_validator
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps

SPHERE_TRANSPORTS = ("projection", "parallel")


@attrs.define(frozen=True)
class Sphere(ManifoldOps):
    """Unit sphere S^{n-1} = {x in R^n : ||x|| = 1}.

    Tangent vectors at ``x`` are ambient vectors orthogonal to ``x``.

    Parameters
    ----------
    dimension
        Dimension ``n`` of the ambient space.
    transport
        ``'projection'`` projects onto the target tangent space;
        ``'parallel'`` applies Levi-Civita transport along the connecting
        great circle.
    """

    dimension: int = attrs.field(validator=getype_validator(int, 2))
    transport: str = attrs.field(
        default="projection", validator=validators.in_(SPHERE_TRANSPORTS)
    )

    retraction_methods = ("exponential", "projection")

    @property
    def dim(self) -> int:
        """Intrinsic dimension ``n - 1``."""
        return self.dimension - 1

    @property
    def ambient_dim(self) -> int:
        return self.dimension

    def _retract(
        self, base_point: Array, tangent_vector: Array, method: str
    ) -> Array:
        if method == "projection":
            moved = base_point + tangent_vector
            return moved / np.linalg.norm(moved)
        # exponential map along the great circle
        angle = np.linalg.norm(tangent_vector)
        return (
            np.cos(angle) * base_point
            + np.sin(angle) * (tangent_vector / angle)
        )

    def vector_transport(
        self, from_point: Array, vector: Array, to_point: Array
    ) -> Array:
        if self.transport == "parallel":
            denominator = 1.0 + np.dot(from_point, to_point)
            if denominator <= 0.0:
                raise ValueError(
                    "Parallel transport between antipodal points is "
                    "undefined."
                )
            return vector - (np.dot(to_point, vector) / denominator) * (
                from_point + to_point
            )
        return self.project_tangent(to_point, vector)

    def project(self, point: Array) -> Array:
        return point / np.linalg.norm(point)

    def project_tangent(self, point: Array, vector: Array) -> Array:
        return vector - np.dot(point, vector) * point

    def contains(self, point: Array, atol: float = 1e-10) -> bool:
        point = np.asarray(point)
        if point.shape != (self.dimension,):
            return False
        return bool(abs(np.linalg.norm(point) - 1.0) <= atol)
