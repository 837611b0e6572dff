"""Special orthogonal group SO(n) with Lie-algebra tangent vectors.

A tangent vector at a rotation ``R`` is stored as the skew-symmetric matrix
``Omega`` such that the velocity is ``R @ Omega``. Under this left-invariant
representation transport between base points is the identity, which turns
the Crouch--Grossmann steps into the rigid-frame methods of Crouch and
Grossmann.
"""

import attrs
import numpy as np
from numba import njit

from manifoldode._utils import getype_validator
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps


@njit(cache=False)
def so3_exp(omega, out):
    """Write ``expm(omega)`` for a 3x3 skew matrix into ``out``.

    Rodrigues' formula, with the second coefficient written as
    ``2 sin^2(theta/2) / theta^2`` to stay accurate for small angles.
    """
    wx = omega[2, 1]
    wy = omega[0, 2]
    wz = omega[1, 0]
    theta = np.sqrt(wx * wx + wy * wy + wz * wz)
    for i in range(3):
        for j in range(3):
            out[i, j] = 1.0 if i == j else 0.0
    if theta == 0.0:
        return out
    first = np.sin(theta) / theta
    half = np.sin(0.5 * theta)
    second = 2.0 * half * half / (theta * theta)
    for i in range(3):
        for j in range(3):
            square = 0.0
            for k in range(3):
                square += omega[i, k] * omega[k, j]
            out[i, j] += first * omega[i, j] + second * square
    return out


def skew_exp(omega: Array) -> Array:
    """Matrix exponential of a real skew-symmetric matrix.

    ``1j * omega`` is Hermitian, so its eigen-decomposition gives the
    exponential as ``V diag(exp(-1j w)) V^H``.
    """
    w, v = np.linalg.eigh(1j * omega)
    return ((v * np.exp(-1j * w)) @ v.conj().T).real


def hat(vector: Array) -> Array:
    """Return the 3x3 skew matrix with ``hat(a) @ b == cross(a, b)``."""
    x, y, z = vector
    return np.array(
        [[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]],
        dtype=np.result_type(vector, np.float64),
    )


def vee(matrix: Array) -> Array:
    """Inverse of :func:`hat`."""
    return np.array([matrix[2, 1], matrix[0, 2], matrix[1, 0]])


@attrs.define(frozen=True)
class SpecialOrthogonal(ManifoldOps):
    """Rotation group SO(n).

    Parameters
    ----------
    n
        Matrix size; points are ``n x n`` rotations.

    Notes
    -----
    Supported retractions are ``'exponential'`` (group exponential),
    ``'cayley'`` and ``'qr'``. For ``n == 3`` the exponential uses the
    compiled Rodrigues kernel :func:`so3_exp`.
    """

    n: int = attrs.field(validator=getype_validator(int, 2))

    retraction_methods = ("exponential", "cayley", "qr")

    @property
    def dim(self) -> int:
        return self.n * (self.n - 1) // 2

    def _retract(
        self, base_point: Array, tangent_vector: Array, method: str
    ) -> Array:
        if method == "exponential":
            if self.n == 3:
                step = np.empty(
                    (3, 3), dtype=np.result_type(tangent_vector, np.float32)
                )
                so3_exp(np.ascontiguousarray(tangent_vector), step)
            else:
                step = skew_exp(tangent_vector)
        elif method == "cayley":
            identity = np.eye(self.n, dtype=tangent_vector.dtype)
            half = 0.5 * tangent_vector
            step = np.linalg.solve(identity - half, identity + half)
        else:
            identity = np.eye(self.n, dtype=tangent_vector.dtype)
            q, r = np.linalg.qr(identity + tangent_vector)
            step = q * np.sign(np.diag(r))
        return base_point @ step

    def vector_transport(
        self, from_point: Array, vector: Array, to_point: Array
    ) -> Array:
        return np.array(vector, copy=True)

    def project(self, point: Array) -> Array:
        u, _, vt = np.linalg.svd(point)
        if np.linalg.det(u @ vt) < 0:
            u[:, -1] = -u[:, -1]
        return u @ vt

    def project_tangent(self, point: Array, vector: Array) -> Array:
        return 0.5 * (vector - vector.T)

    def contains(self, point: Array, atol: float = 1e-10) -> bool:
        point = np.asarray(point)
        if point.shape != (self.n, self.n):
            return False
        orthogonal = np.allclose(
            point.T @ point, np.eye(self.n), rtol=0.0, atol=atol
        )
        return bool(orthogonal and np.linalg.det(point) > 0.0)
