"""Second-order Crouch--Grossmann step."""

from typing import Any, Optional

import attrs

from manifoldode._utils import PrecisionDType, build_config
from manifoldode.integrators.algorithms.base_algorithm_step import (
    BaseAlgorithmStep,
    ManifoldStepConfig,
    ManifoldTableau,
    StepCache,
)
from manifoldode.integrators.algorithms.crouch_grossmann_tableaus import (
    CG2_TABLEAU,
)
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps
from manifoldode.odesystems.manifold_ode import ManifoldODEFunction


@attrs.define
class CG2Cache(StepCache):
    """Scratch buffers for :class:`CG2Step`.

    Attributes
    ----------
    X1
        Field at the step's starting point.
    X2u
        Intermediate point reached after half a step.
    X2
        Field at ``X2u``.
    """

    X1: Array
    X2u: Array
    X2: Array


class CG2Step(BaseAlgorithmStep):
    """Crouch--Grossmann method of order two.

    Tableau::

        0    | 0
        1/2  | 1/2  0
        ----------------
             | 0    1

    The midpoint field is transported back to the starting point before
    the final retraction, so on a vector space the step is the explicit
    midpoint rule.
    """

    kshortsize = 2

    def __init__(
        self,
        manifold: ManifoldOps,
        retraction_method: Optional[str] = None,
        precision: Optional[PrecisionDType] = None,
    ) -> None:
        config = build_config(
            ManifoldStepConfig,
            required={"manifold": manifold},
            retraction_method=retraction_method,
            precision=precision,
        )
        super().__init__(config)

    @property
    def tableau(self) -> ManifoldTableau:
        return CG2_TABLEAU

    def build_cache(self, u: Array, rate_prototype: Array) -> CG2Cache:
        allocate = self.manifold.allocate
        return CG2Cache(
            X1=allocate(rate_prototype),
            X2u=allocate(u),
            X2=allocate(rate_prototype),
        )

    def perform_step(
        self,
        cache: CG2Cache,
        u: Array,
        parameters: Any,
        t,
        dt,
        f: ManifoldODEFunction,
    ) -> int:
        dt = self.precision(dt)
        a21h = self._a[1][0] * dt
        c2h = self._c[1] * dt
        b2h = self._b[1] * dt

        f.evaluate_into(cache.X1, u, parameters, t)
        self.retract(cache.X2u, u, cache.X1 * a21h)
        f.evaluate_into(cache.X2, cache.X2u, parameters, t + c2h)
        k2t = f.transport(
            self.manifold,
            cache.X2u,
            cache.X2,
            u,
            parameters,
            from_time=t + c2h,
            to_time=t,
        )
        self.retract(u, u, b2h * k2t)
        return 2
