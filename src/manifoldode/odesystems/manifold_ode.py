"""Right-hand side wrapper for ODEs posed on a manifold."""

from typing import Any, Callable, Optional

import attrs
from attrs import validators
import numpy as np

from manifoldode.manifolds.base_manifold_ops import Array, ManifoldOps


@attrs.define(frozen=True)
class ManifoldODEFunction:
    """Vector field returning tangent vectors, plus optional transport.

    Parameters
    ----------
    f
        ``f(point, parameters, time) -> tangent`` when ``inplace`` is
        False, otherwise ``f(out, point, parameters, time)`` writing the
        tangent into ``out``.
    inplace
        Selects the calling convention of ``f``.
    vector_transport
        Optional problem-specific operator
        ``(manifold, from_point, vector, to_point, parameters, from_time,
        to_time) -> tangent``. When omitted the manifold's own
        :meth:`~manifoldode.manifolds.ManifoldOps.vector_transport` is used.
    """

    f: Callable = attrs.field(validator=validators.is_callable())
    inplace: bool = attrs.field(
        default=False, validator=validators.instance_of(bool)
    )
    vector_transport: Optional[Callable] = attrs.field(
        default=None,
        validator=validators.optional(validators.is_callable()),
    )

    def __call__(
        self,
        point: Array,
        parameters: Any,
        time,
        rate_prototype: Optional[Array] = None,
    ) -> Array:
        """Evaluate the field, returning a new tangent vector.

        In-place fields write into a buffer shaped like ``rate_prototype``,
        or like ``point`` when no prototype is given.
        """
        if self.inplace:
            if rate_prototype is None:
                rate_prototype = point
            out = np.zeros_like(rate_prototype)
            self.f(out, point, parameters, time)
            return out
        return np.asarray(self.f(point, parameters, time))

    def evaluate_into(
        self, out: Array, point: Array, parameters: Any, time
    ) -> Array:
        """Evaluate the field into the caller-supplied ``out``."""
        if self.inplace:
            self.f(out, point, parameters, time)
        else:
            out[...] = self.f(point, parameters, time)
        return out

    def transport(
        self,
        manifold: ManifoldOps,
        from_point: Array,
        vector: Array,
        to_point: Array,
        parameters: Any,
        from_time,
        to_time,
    ) -> Array:
        """Move ``vector`` from ``from_point`` to ``to_point``."""
        if self.vector_transport is None:
            return manifold.vector_transport(from_point, vector, to_point)
        return self.vector_transport(
            manifold,
            from_point,
            vector,
            to_point,
            parameters,
            from_time,
            to_time,
        )
