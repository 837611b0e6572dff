"""Manifold operation providers used by the integration steps."""

from manifoldode.manifolds.base_manifold_ops import ManifoldOps
from manifoldode.manifolds.euclidean import Euclidean
from manifoldode.manifolds.rotations import (
    SpecialOrthogonal,
    hat,
    skew_exp,
    so3_exp,
    vee,
)
from manifoldode.manifolds.sphere import Sphere
from manifoldode.manifolds.stiefel import Stiefel

__all__ = [
    "ManifoldOps",
    "Euclidean",
    "Sphere",
    "SpecialOrthogonal",
    "Stiefel",
    "hat",
    "vee",
    "skew_exp",
    "so3_exp",
]
