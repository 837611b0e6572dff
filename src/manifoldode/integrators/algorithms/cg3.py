"""Third-order Crouch--Grossmann step."""

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
    CG3_TABLEAU,
)
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps
from manifoldode.odesystems.manifold_ode import ManifoldODEFunction


@attrs.define
class CG3Cache(StepCache):
    """Scratch buffers for :class:`CG3Step`.

    Attributes
    ----------
    X1, X2, X3
        Stage fields, each in the tangent space at its own stage point.
    X2u, X3u
        Stage points for the second and third evaluations.
    """

    X1: Array
    X2: Array
    X3: Array
    X2u: Array
    X3u: Array


class CG3Step(BaseAlgorithmStep):
    """Crouch--Grossmann method of order three.

    Tableau 6.1 of Owren and Marthinsen (1999)::

        0     | 0
        3/4   | 3/4      0
        17/24 | 119/216  17/108  0
        ------------------------------
              | 13/51    -2/3    24/17

    Notes
    -----
    The update is a product of three retractions applied to ``u`` in
    tableau order. Each stage field is transported to the current value of
    ``u`` right before its retraction, so ``u`` holds partial results while
    the update is in progress; an exception raised by the transport or
    retraction leaves it partially updated.
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
        return CG3_TABLEAU

    def build_cache(self, u: Array, rate_prototype: Array) -> CG3Cache:
        allocate = self.manifold.allocate
        return CG3Cache(
            X1=allocate(rate_prototype),
            X2=allocate(rate_prototype),
            X3=allocate(rate_prototype),
            X2u=allocate(u),
            X3u=allocate(u),
        )

    def perform_step(
        self,
        cache: CG3Cache,
        u: Array,
        parameters: Any,
        t,
        dt,
        f: ManifoldODEFunction,
    ) -> int:
        M = self.manifold
        dt = self.precision(dt)
        a, b, c = self._a, self._b, self._c
        c2h = c[1] * dt
        c3h = c[2] * dt
        a21h = a[1][0] * dt
        a31h = a[2][0] * dt
        a32h = a[2][1] * dt
        b1h = b[0] * dt
        b2h = b[1] * dt
        b3h = b[2] * dt

        f.evaluate_into(cache.X1, u, parameters, t)
        self.retract(cache.X2u, u, cache.X1 * a21h)
        f.evaluate_into(cache.X2, cache.X2u, parameters, t + c2h)

        self.retract(cache.X3u, u, a31h * cache.X1)
        # stage-point transport runs forward from t; the final update
        # transports run back to t
        k2t3 = f.transport(
            M,
            cache.X2u,
            cache.X2,
            cache.X3u,
            parameters,
            from_time=t,
            to_time=t + c2h,
        )
        self.retract(cache.X3u, cache.X3u, a32h * k2t3)
        f.evaluate_into(cache.X3, cache.X3u, parameters, t + c3h)

        self.retract(u, u, b1h * cache.X1)
        k2tu = f.transport(
            M, cache.X2u, cache.X2, u, parameters, from_time=t + c2h, to_time=t
        )
        self.retract(u, u, b2h * k2tu)
        k3tu = f.transport(
            M, cache.X3u, cache.X3, u, parameters, from_time=t + c3h, to_time=t
        )
        self.retract(u, u, b3h * k3tu)
        return 3
