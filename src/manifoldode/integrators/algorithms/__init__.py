"""Explicit step algorithms for ODEs on manifolds."""

from typing import Any, Dict, Mapping, Optional, Type

from manifoldode._utils import split_applicable_settings
from manifoldode.manifolds.base_manifold_ops import ManifoldOps

from .base_algorithm_step import (
    BaseAlgorithmStep,
    ManifoldStepConfig,
    ManifoldTableau,
    StepCache,
)
from .crouch_grossmann_tableaus import (
    CG2_TABLEAU,
    CG3_TABLEAU,
    MANIFOLD_EULER_TABLEAU,
)
from .manifold_euler import ManifoldEulerCache, ManifoldEulerStep
from .cg2 import CG2Cache, CG2Step
from .cg3 import CG3Cache, CG3Step


__all__ = [
    "get_algorithm_step",
    "BaseAlgorithmStep",
    "ManifoldStepConfig",
    "ManifoldTableau",
    "StepCache",
    "ManifoldEulerStep",
    "ManifoldEulerCache",
    "CG2Step",
    "CG2Cache",
    "CG3Step",
    "CG3Cache",
    "MANIFOLD_EULER_TABLEAU",
    "CG2_TABLEAU",
    "CG3_TABLEAU",
    "_ALGORITHM_REGISTRY",
]

_ALGORITHM_REGISTRY: Dict[str, Type[BaseAlgorithmStep]] = {
    "manifold_euler": ManifoldEulerStep,
    "euler": ManifoldEulerStep,
    "cg2": CG2Step,
    "cg3": CG3Step,
}


def get_algorithm_step(
    manifold: ManifoldOps,
    settings: Optional[Mapping[str, Any]] = None,
    warn_on_unused: bool = True,
    **kwargs: Any,
) -> BaseAlgorithmStep:
    """Thin factory which filters arguments and instantiates an algorithm.

    Parameters
    ----------
    manifold
        Manifold operations provider passed to the algorithm.
    settings
        Dictionary of settings; must include ``'algorithm'`` and may
        include ``retraction_method`` and ``precision``.
    warn_on_unused
        If True, issue a warning for any values in ``settings`` that are not
        part of the requested algorithm's init signature.
    **kwargs
        Additional settings overriding those in ``settings``.

    Returns
    -------
    BaseAlgorithmStep
        The requested step instance.

    Raises
    ------
    ValueError
        Raised when the algorithm is missing or unknown, or when required
        settings are missing.
    """
    algorithm_settings: Dict[str, Any] = {}
    if settings is not None:
        algorithm_settings.update(settings)
    algorithm_settings.update(kwargs)

    algorithm_value = algorithm_settings.pop("algorithm", None)
    if algorithm_value is None:
        raise ValueError("Algorithm settings must include 'algorithm'.")
    algorithm_key = str(algorithm_value).lower()

    try:
        algorithm_type = _ALGORITHM_REGISTRY[algorithm_key]
    except KeyError as exc:
        raise ValueError(f"Unknown algorithm '{algorithm_value}'.") from exc

    algorithm_settings["manifold"] = manifold

    filtered, missing, unused = split_applicable_settings(
        algorithm_type,
        algorithm_settings,
        warn_on_unused=warn_on_unused,
    )
    if missing:
        missing_keys = ", ".join(sorted(missing))
        raise ValueError(
            f"{algorithm_type.__name__} requires settings for: {missing_keys}"
        )

    return algorithm_type(**filtered)
