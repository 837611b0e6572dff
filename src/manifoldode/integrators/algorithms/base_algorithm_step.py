"""Base classes and shared configuration for manifold integration steps."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Tuple

import attrs
from attrs import validators
import numpy as np
import sympy

from manifoldode._utils import (
    PrecisionDType,
    precision_converter,
    precision_validator,
)
from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps
from manifoldode.odesystems.manifold_ode import ManifoldODEFunction

if TYPE_CHECKING:
    from manifoldode.integrators.manifold_integrator import (
        ManifoldIntegrator,
    )


def _rational_rows(rows) -> Tuple[Tuple[sympy.Rational, ...], ...]:
    return tuple(tuple(sympy.Rational(value) for value in row) for row in rows)


def _rational_vector(values) -> Tuple[sympy.Rational, ...]:
    return tuple(sympy.Rational(value) for value in values)


@attrs.define(frozen=True)
class ManifoldTableau:
    """Exact coefficient tableau of a manifold Runge--Kutta method.

    Entries are stored as :class:`sympy.Rational`; pass integers or
    strings such as ``"119/216"`` to keep them exact.

    Parameters
    ----------
    a
        Lower-triangular stage coupling coefficients.
    b
        Weights of the final update.
    c
        Stage time nodes.
    order
        Order of the method on a general manifold.
    """

    a: Tuple[Tuple[sympy.Rational, ...], ...] = attrs.field(
        converter=_rational_rows
    )
    b: Tuple[sympy.Rational, ...] = attrs.field(converter=_rational_vector)
    c: Tuple[sympy.Rational, ...] = attrs.field(converter=_rational_vector)
    order: int = attrs.field(validator=validators.instance_of(int))

    def __attrs_post_init__(self):
        stages = len(self.b)
        if len(self.c) != stages or len(self.a) != stages:
            raise ValueError("Tableau a, b and c must have matching lengths.")
        for index, row in enumerate(self.a):
            if len(row) != stages:
                raise ValueError("Tableau a must be square.")
            if any(value != 0 for value in row[index:]):
                raise ValueError(
                    "Explicit tableaus must be strictly lower triangular."
                )

    @property
    def stage_count(self) -> int:
        return len(self.b)

    @property
    def first_same_as_last(self) -> bool:
        """Return whether the last stage can be reused as the next first."""
        last_row = self.a[-1]
        return (
            self.stage_count > 1
            and self.c[-1] == 1
            and tuple(last_row) == tuple(self.b)
        )

    @property
    def row_sums_match_nodes(self) -> bool:
        """Return whether ``c_i == sum_j a_ij`` for every stage."""
        return all(sum(row) == node for row, node in zip(self.a, self.c))

    def typed_rows(self, precision: PrecisionDType) -> Tuple[Tuple, ...]:
        """Return ``a`` converted to ``precision`` scalars."""
        return tuple(
            tuple(precision(float(value)) for value in row) for row in self.a
        )

    def typed_vector(self, values, precision: PrecisionDType) -> Tuple:
        """Return ``values`` converted to ``precision`` scalars."""
        return tuple(precision(float(value)) for value in values)

    def classical_order(self, max_order: int = 4) -> int:
        """Return the flat-space order, checked exactly up to ``max_order``.

        On a vector space, with addition as retraction and the identity
        as transport, the method is the classical Runge--Kutta method with
        this tableau. Conditions are checked in rational arithmetic.
        """
        a = sympy.Matrix(self.a)
        b = sympy.Matrix([list(self.b)])
        c = sympy.Matrix(list(self.c))
        ones = sympy.ones(self.stage_count, 1)
        c2 = c.multiply_elementwise(c)
        conditions = {
            1: [(b * ones, sympy.Rational(1))],
            2: [(b * c, sympy.Rational(1, 2))],
            3: [
                (b * c2, sympy.Rational(1, 3)),
                (b * a * c, sympy.Rational(1, 6)),
            ],
            4: [
                (b * c2.multiply_elementwise(c), sympy.Rational(1, 4)),
                (b * c.multiply_elementwise(a * c), sympy.Rational(1, 8)),
                (b * a * c2, sympy.Rational(1, 12)),
                (b * a * a * c, sympy.Rational(1, 24)),
            ],
        }
        achieved = 0
        for order in range(1, min(max_order, 4) + 1):
            if not all(lhs[0] == rhs for lhs, rhs in conditions[order]):
                break
            achieved = order
        return achieved


@attrs.define(frozen=True)
class ManifoldStepConfig:
    """Immutable description of a manifold step algorithm.

    Parameters
    ----------
    manifold
        Operations provider for the manifold the solution lives on.
    retraction_method
        Retraction name accepted by ``manifold``. Defaults to the
        manifold's default retraction.
    precision
        Floating-point type used for coefficients and step sizes;
        ``float32`` or ``float64``.
    """

    manifold: ManifoldOps = attrs.field(
        validator=validators.instance_of(ManifoldOps)
    )
    retraction_method: str = attrs.field(
        validator=validators.instance_of(str)
    )
    precision: PrecisionDType = attrs.field(
        default=np.float64,
        converter=precision_converter,
        validator=precision_validator,
    )

    @retraction_method.default
    def _default_retraction(self) -> str:
        return self.manifold.default_retraction

    @retraction_method.validator
    def _check_retraction(self, attribute, value) -> None:
        self.manifold.check_retraction(value)

    @property
    def settings_dict(self) -> Dict[str, object]:
        """Return the configuration as a plain dictionary."""
        return {
            "manifold": self.manifold,
            "retraction_method": self.retraction_method,
            "precision": self.precision,
        }


@attrs.define
class StepCache:
    """Scratch buffers owned by one integration session.

    Subclasses declare one attrs field per buffer. Buffers are allocated
    once by :meth:`BaseAlgorithmStep.build_cache` and only written in
    place afterwards.
    """

    def buffers(self) -> Dict[str, Array]:
        """Return the buffers keyed by field name."""
        return {
            field.name: getattr(self, field.name)
            for field in attrs.fields(type(self))
        }


class BaseAlgorithmStep(ABC):
    """Shared behaviour of the explicit manifold step algorithms.

    An algorithm is a thin, immutable wrapper around its
    :class:`ManifoldStepConfig`. It builds caches, primes a session in
    :meth:`initialize` and advances a state in :meth:`perform_step`.
    """

    #: Number of slots in the session's ``k`` list.
    kshortsize = 1

    def __init__(self, config: ManifoldStepConfig) -> None:
        self._config = config
        tableau = self.tableau
        precision = config.precision
        self._a = tableau.typed_rows(precision)
        self._b = tableau.typed_vector(tableau.b, precision)
        self._c = tableau.typed_vector(tableau.c, precision)

    @property
    def config(self) -> ManifoldStepConfig:
        return self._config

    @property
    def manifold(self) -> ManifoldOps:
        return self._config.manifold

    @property
    def retraction_method(self) -> str:
        return self._config.retraction_method

    @property
    def precision(self) -> PrecisionDType:
        return self._config.precision

    @property
    def settings_dict(self) -> Dict[str, object]:
        return self._config.settings_dict

    @property
    @abstractmethod
    def tableau(self) -> ManifoldTableau:
        """Return the coefficient tableau of the method."""

    @property
    def order(self) -> int:
        """Return the order of accuracy of the method."""
        return self.tableau.order

    @property
    def stage_count(self) -> int:
        return self.tableau.stage_count

    @property
    def function_evaluations(self) -> int:
        """Return the number of field evaluations made by one step."""
        return self.stage_count

    @property
    def is_multistage(self) -> bool:
        return self.stage_count > 1

    @property
    def is_adaptive(self) -> bool:
        return False

    @property
    def is_implicit(self) -> bool:
        return False

    def retract(self, destination: Array, base_point: Array, tangent: Array):
        """Retract with the configured method."""
        return self.manifold.retract(
            destination, base_point, tangent, self.retraction_method
        )

    @abstractmethod
    def build_cache(self, u: Array, rate_prototype: Array) -> StepCache:
        """Allocate the scratch buffers for one integration.

        Parameters
        ----------
        u
            State prototype; intermediate points are shaped like it.
        rate_prototype
            Tangent prototype; stage vectors are shaped like it.
        """

    def initialize(self, integrator: "ManifoldIntegrator") -> None:
        """Prime the first-same-as-last slot of ``integrator``.

        Evaluates the field once at the starting state, into a buffer
        shaped like the session's rate prototype, and counts it.
        """
        fsalfirst = self.manifold.allocate(integrator.rate_prototype)
        integrator.f.evaluate_into(
            fsalfirst, integrator.uprev, integrator.parameters, integrator.t
        )
        integrator.stats.nf += 1
        integrator.fsalfirst = fsalfirst
        # zero fill keeps every k slot defined before the first step
        integrator.fsallast = np.zeros_like(fsalfirst)
        integrator.kshortsize = self.kshortsize
        integrator.k = [integrator.fsalfirst, integrator.fsallast][
            : self.kshortsize
        ]

    @abstractmethod
    def perform_step(
        self,
        cache: StepCache,
        u: Array,
        parameters: Any,
        t,
        dt,
        f: ManifoldODEFunction,
    ) -> int:
        """Advance ``u`` in place by one step of size ``dt``.

        Returns
        -------
        int
            Number of field evaluations consumed.
        """
