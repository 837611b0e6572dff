"""Abstract manifold capability used by the integration steps."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

Array = NDArray[np.floating]


class ManifoldOps(ABC):
    """Retraction, transport and allocation for one manifold type.

    Step algorithms hold a ``ManifoldOps`` instance and call only the
    methods declared here. Implementations are immutable so one instance
    can be shared by any number of integration sessions.

    Notes
    -----
    ``retract`` writes into ``destination``, which is allowed to alias
    ``base_point``; the result is computed in a temporary before being
    copied. Retracting a zero tangent vector must reproduce ``base_point``
    exactly.
    """

    #: Names accepted by :meth:`retract`.
    retraction_methods: Tuple[str, ...] = ()

    @property
    def default_retraction(self) -> str:
        """Return the retraction used when none is requested."""
        return self.retraction_methods[0]

    def check_retraction(self, method: str) -> str:
        """Return ``method`` if this manifold supports it.

        Raises
        ------
        ValueError
            If ``method`` is not in :attr:`retraction_methods`.
        """
        if method not in self.retraction_methods:
            raise ValueError(
                f"{type(self).__name__} does not support the '{method}' "
                f"retraction; choose from {self.retraction_methods}."
            )
        return method

    def retract(
        self,
        destination: Array,
        base_point: Array,
        tangent_vector: Array,
        method: Optional[str] = None,
    ) -> Array:
        """Map ``tangent_vector`` at ``base_point`` onto the manifold.

        Parameters
        ----------
        destination
            Array receiving the new point. May be ``base_point`` itself.
        base_point
            Point at which ``tangent_vector`` is attached.
        tangent_vector
            Update direction, already scaled by the step coefficient.
        method
            Retraction name; defaults to :attr:`default_retraction`.

        Returns
        -------
        ndarray
            ``destination``.
        """
        method = self.default_retraction if method is None else method
        self.check_retraction(method)
        if not np.any(tangent_vector):
            destination[...] = base_point
            return destination
        destination[...] = self._retract(base_point, tangent_vector, method)
        return destination

    @abstractmethod
    def _retract(
        self, base_point: Array, tangent_vector: Array, method: str
    ) -> Array:
        """Return a new array holding the retracted point."""

    @abstractmethod
    def vector_transport(
        self, from_point: Array, vector: Array, to_point: Array
    ) -> Array:
        """Move ``vector`` from the tangent space at ``from_point`` to
        the one at ``to_point``, returning a new array."""

    @abstractmethod
    def project(self, point: Array) -> Array:
        """Return the manifold point closest to an ambient ``point``."""

    @abstractmethod
    def project_tangent(self, point: Array, vector: Array) -> Array:
        """Project an ambient ``vector`` onto the tangent space at ``point``."""

    @abstractmethod
    def contains(self, point: Array, atol: float = 1e-10) -> bool:
        """Return ``True`` when ``point`` lies on the manifold."""

    def zero_vector(self, point: Array) -> Array:
        """Return the zero tangent vector at ``point``."""
        return np.zeros_like(point)

    def allocate(self, prototype: Array) -> Array:
        """Return a zero-filled buffer shaped and typed like ``prototype``."""
        return np.zeros_like(prototype)
