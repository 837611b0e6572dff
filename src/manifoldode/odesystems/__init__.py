"""ODE right-hand side definitions."""

from manifoldode.odesystems.manifold_ode import ManifoldODEFunction

__all__ = ["ManifoldODEFunction"]
