"""Stiefel manifold of orthonormal frames."""

import attrs
import numpy as np

from manifoldode._utils import gttype_validator
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps


def _sym(matrix: Array) -> Array:
    return 0.5 * (matrix + matrix.T)


@attrs.define(frozen=True)
class Stiefel(ManifoldOps):
    """St(n, p) = {X in R^{n x p} : X^T X = I}.

    Tangent vectors at ``X`` are ambient matrices ``V`` with ``X^T V``
    skew-symmetric. Transport projects onto the target tangent space.

    Parameters
    ----------
    n
        Number of rows.
    p
        Number of orthonormal columns, ``1 <= p <= n``.
    """

    n: int = attrs.field(validator=gttype_validator(int, 0))
    p: int = attrs.field(validator=gttype_validator(int, 0))

    retraction_methods = ("qr", "polar")

    def __attrs_post_init__(self):
        if self.p > self.n:
            raise ValueError(
                f"Stiefel manifold needs p <= n, got n={self.n}, p={self.p}."
            )

    @property
    def dim(self) -> int:
        return self.n * self.p - self.p * (self.p + 1) // 2

    def _retract(
        self, base_point: Array, tangent_vector: Array, method: str
    ) -> Array:
        moved = base_point + tangent_vector
        if method == "polar":
            # (X + V)(I + V^T V)^(-1/2)
            gram = np.eye(self.p, dtype=moved.dtype) + (
                tangent_vector.T @ tangent_vector
            )
            w, v = np.linalg.eigh(gram)
            return moved @ ((v / np.sqrt(w)) @ v.T)
        q, r = np.linalg.qr(moved)
        signs = np.sign(np.diag(r))
        signs[signs == 0] = 1.0
        return q * signs

    def vector_transport(
        self, from_point: Array, vector: Array, to_point: Array
    ) -> Array:
        return self.project_tangent(to_point, vector)

    def project(self, point: Array) -> Array:
        u, _, vt = np.linalg.svd(point, full_matrices=False)
        return u @ vt

    def project_tangent(self, point: Array, vector: Array) -> Array:
        return vector - point @ _sym(point.T @ vector)

    def contains(self, point: Array, atol: float = 1e-10) -> bool:
        point = np.asarray(point)
        if point.shape != (self.n, self.p):
            return False
        return bool(
            np.allclose(point.T @ point, np.eye(self.p), rtol=0.0, atol=atol)
        )
