"""Shared validators, converters and settings helpers."""

from inspect import Parameter, signature
from typing import Any, Dict, Mapping, Set, Tuple, Type, Union
from warnings import warn

import attrs
import numpy as np

PrecisionDType = Union[Type[np.float32], Type[np.float64]]

ALLOWED_PRECISIONS = {np.dtype(np.float32), np.dtype(np.float64)}


def precision_converter(value: Any) -> PrecisionDType:
    """Return the numpy scalar type matching ``value``.

    Accepts numpy scalar types, dtypes and dtype strings such as
    ``"float32"``.
    """
    return np.dtype(value).type


def precision_validator(instance, attribute, value) -> None:
    """Reject precisions other than ``float32`` and ``float64``."""
    if np.dtype(value) not in ALLOWED_PRECISIONS:
        raise ValueError(
            f"{attribute.name} must be float32 or float64, got {value!r}."
        )


def getype_validator(dtype: type, minimum):
    """Build a validator requiring an instance of ``dtype`` >= ``minimum``."""

    def _validate(instance, attribute, value):
        if not isinstance(value, dtype):
            raise TypeError(
                f"{attribute.name} must be {dtype.__name__}, "
                f"got {type(value).__name__}."
            )
        if value < minimum:
            raise ValueError(
                f"{attribute.name} must be >= {minimum}, got {value}."
            )

    return _validate


def gttype_validator(dtype: type, minimum):
    """Build a validator requiring an instance of ``dtype`` > ``minimum``."""

    def _validate(instance, attribute, value):
        if not isinstance(value, dtype):
            raise TypeError(
                f"{attribute.name} must be {dtype.__name__}, "
                f"got {type(value).__name__}."
            )
        if value <= minimum:
            raise ValueError(
                f"{attribute.name} must be > {minimum}, got {value}."
            )

    return _validate


def build_config(
    config_class: type,
    required: Mapping[str, Any],
    **optional: Any,
):
    """Instantiate an attrs configuration from required and optional values.

    Parameters
    ----------
    config_class
        attrs class to instantiate.
    required
        Values that are always forwarded, including ``None``.
    **optional
        Values forwarded only when not ``None`` so that class defaults apply.

    Returns
    -------
    object
        Instance of ``config_class``.

    Raises
    ------
    KeyError
        Raised when an optional key is not a field of ``config_class``.
    """
    field_names = {field.name for field in attrs.fields(config_class)}
    unknown = set(optional) - field_names
    if unknown:
        raise KeyError(
            f"{config_class.__name__} has no settings named "
            f"{sorted(unknown)}."
        )
    values: Dict[str, Any] = dict(required)
    values.update({k: v for k, v in optional.items() if v is not None})
    return config_class(**values)


def split_applicable_settings(
    target: type,
    settings: Mapping[str, Any],
    warn_on_unused: bool = True,
) -> Tuple[Dict[str, Any], Set[str], Set[str]]:
    """Split ``settings`` into those accepted by ``target.__init__``.

    Parameters
    ----------
    target
        Class whose constructor signature is inspected.
    settings
        Candidate keyword arguments.
    warn_on_unused
        Issue a ``UserWarning`` listing keys the constructor does not accept.

    Returns
    -------
    tuple
        ``(filtered, missing, unused)`` where ``filtered`` holds accepted
        settings, ``missing`` names required parameters with no value and
        ``unused`` names keys that were dropped.
    """
    params = signature(target.__init__).parameters
    accepted = {
        name: param
        for name, param in params.items()
        if name != "self"
        and param.kind not in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)
    }
    filtered = {k: v for k, v in settings.items() if k in accepted}
    unused = set(settings) - set(filtered)
    missing = {
        name
        for name, param in accepted.items()
        if param.default is Parameter.empty and name not in filtered
    }
    if warn_on_unused and unused:
        warn(
            f"Settings {sorted(unused)} are not used by "
            f"{target.__name__} and were ignored.",
            UserWarning,
            stacklevel=3,
        )
    return filtered, missing, unused
