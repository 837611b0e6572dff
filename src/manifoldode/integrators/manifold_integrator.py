"""Integration session pairing a step algorithm with its state and cache."""

from enum import Enum
from typing import Any, Callable, List, Optional, Union

import attrs
import numpy as np

from manifoldode.integrators.algorithms.base_algorithm_step import (
    BaseAlgorithmStep,
    StepCache,
)
from manifoldode.manifolds.base_manifold_ops import Array
from manifoldode.odesystems.manifold_ode import ManifoldODEFunction
from manifoldode.time_logger import TimeLogger


class IntegratorState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    STEPPING = "stepping"


@attrs.define
class IntegratorStatistics:
    """Counters accumulated over one integration.

    Attributes
    ----------
    nf
        Field evaluations, including the initializer's priming call.
    nsteps
        Completed steps.
    """

    nf: int = 0
    nsteps: int = 0


class ManifoldIntegrator:
    """State, cache and counters for one fixed-step integration.

    The session is the minimum an external driver needs: it owns the
    current point ``u`` (mutated in place), the point ``uprev`` at the
    start of the latest step, the scratch cache and the evaluation
    counters. Step-size control, output and termination remain with the
    driver.

    Parameters
    ----------
    algorithm
        Step algorithm; shared and never mutated by the session.
    f
        Vector field, either a :class:`ManifoldODEFunction` or a plain
        out-of-place callable ``f(point, parameters, time)``.
    u0
        Starting point. Copied into the algorithm's precision.
    t0
        Starting time.
    dt
        Fixed step size; must be finite and non-zero.
    parameters
        Passed unchanged to every field and transport call.
    rate_prototype
        Shape prototype for tangent buffers; defaults to ``u0``.
    time_logger
        Optional :class:`TimeLogger`; a silent logger is used otherwise.

    Raises
    ------
    ValueError
        If ``dt`` is zero or not finite.
    """

    def __init__(
        self,
        algorithm: BaseAlgorithmStep,
        f: Union[ManifoldODEFunction, Callable],
        u0: Array,
        t0: float,
        dt: float,
        parameters: Any = None,
        rate_prototype: Optional[Array] = None,
        time_logger: Optional[TimeLogger] = None,
    ) -> None:
        precision = algorithm.precision
        if not np.isfinite(dt) or dt == 0:
            raise ValueError(f"dt must be finite and non-zero, got {dt}.")
        if not isinstance(f, ManifoldODEFunction):
            f = ManifoldODEFunction(f)

        self.algorithm = algorithm
        self.f = f
        self.parameters = parameters
        self.u = np.array(u0, dtype=precision, copy=True)
        self.uprev = self.u.copy()
        self.t = precision(t0)
        self.dt = precision(dt)

        if rate_prototype is None:
            rate_prototype = self.u
        self.rate_prototype = np.asarray(rate_prototype, dtype=precision)
        self.cache: StepCache = algorithm.build_cache(
            self.u, self.rate_prototype
        )

        self.stats = IntegratorStatistics()
        self.kshortsize = 0
        self.k: List[Array] = []
        self.fsalfirst: Optional[Array] = None
        self.fsallast: Optional[Array] = None
        self.state = IntegratorState.UNINITIALIZED

        if time_logger is None:
            time_logger = TimeLogger(verbosity=None)
        self.time_logger = time_logger
        self.time_logger._register_event(
            "integrator_initialize", "setup", "Prime first-same-as-last slot"
        )
        self.time_logger._register_event(
            "integrator_step", "runtime", "Advance one fixed step"
        )

    def initialize(self) -> None:
        """Prime the first-same-as-last slot before the first step."""
        self.time_logger.start_event(
            "integrator_initialize",
            algorithm=type(self.algorithm).__name__,
        )
        try:
            self.algorithm.initialize(self)
        finally:
            self.time_logger.stop_event("integrator_initialize")
        self.state = IntegratorState.INITIALIZED

    def step(self) -> int:
        """Advance ``u`` by one step of size ``dt``.

        Returns
        -------
        int
            Field evaluations consumed by the step.

        Raises
        ------
        RuntimeError
            If :meth:`initialize` has not been called.
        """
        if self.state is IntegratorState.UNINITIALIZED:
            raise RuntimeError(
                "ManifoldIntegrator.initialize() must be called before step()."
            )
        self.uprev[...] = self.u
        self.time_logger.start_event("integrator_step", t=float(self.t))
        try:
            nf = self.algorithm.perform_step(
                self.cache, self.u, self.parameters, self.t, self.dt, self.f
            )
        finally:
            self.time_logger.stop_event("integrator_step")
        self.stats.nf += nf
        self.stats.nsteps += 1
        self.t = self.t + self.dt
        self.state = IntegratorState.STEPPING
        return nf
