"""Manifold Euler step."""

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
    MANIFOLD_EULER_TABLEAU,
)
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps
from manifoldode.odesystems.manifold_ode import ManifoldODEFunction


@attrs.define
class ManifoldEulerCache(StepCache):
    """Cache for :class:`ManifoldEulerStep`.

    Attributes
    ----------
    k
        Field at the step's starting point, shaped like the rate prototype.
    """

    k: Array


class ManifoldEulerStep(BaseAlgorithmStep):
    """First-order step ``u <- retract(u, dt * f(u, p, t))``.

    On a vector space this is the forward Euler method.
    """

    kshortsize = 1

    def __init__(
        self,
        manifold: ManifoldOps,
        retraction_method: Optional[str] = None,
        precision: Optional[PrecisionDType] = None,
    ) -> None:
        """Initialise the manifold Euler step.

        Parameters
        ----------
        manifold
            Manifold operations provider.
        retraction_method
            Retraction name; ``None`` selects the manifold default.
        precision
            Working precision; ``None`` selects ``float64``.
        """
        config = build_config(
            ManifoldStepConfig,
            required={"manifold": manifold},
            retraction_method=retraction_method,
            precision=precision,
        )
        super().__init__(config)

    @property
    def tableau(self) -> ManifoldTableau:
        return MANIFOLD_EULER_TABLEAU

    def build_cache(
        self, u: Array, rate_prototype: Array
    ) -> ManifoldEulerCache:
        return ManifoldEulerCache(k=self.manifold.allocate(rate_prototype))

    def perform_step(
        self,
        cache: ManifoldEulerCache,
        u: Array,
        parameters: Any,
        t,
        dt,
        f: ManifoldODEFunction,
    ) -> int:
        dt = self.precision(dt)
        f.evaluate_into(cache.k, u, parameters, t)
        self.retract(u, u, dt * cache.k)
        return 1
