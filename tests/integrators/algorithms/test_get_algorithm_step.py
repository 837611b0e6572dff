"""Tests for the algorithm factory."""

import warnings

import numpy as np
import pytest

from manifoldode.integrators import (
    CG2Step,
    CG3Step,
    ManifoldEulerStep,
    get_algorithm_step,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("manifold_euler", ManifoldEulerStep),
        ("euler", ManifoldEulerStep),
        ("cg2", CG2Step),
        ("CG3", CG3Step),
    ],
)
def test_algorithm_lookup(so3, name, expected):
    step = get_algorithm_step(so3, algorithm=name)
    assert type(step) is expected
    assert step.manifold is so3


def test_settings_mapping_and_overrides(sphere):
    settings = {"algorithm": "cg2", "retraction_method": "exponential"}
    step = get_algorithm_step(
        sphere, settings, retraction_method="projection", precision="float32"
    )
    assert isinstance(step, CG2Step)
    assert step.retraction_method == "projection"
    assert step.precision is np.float32
    assert settings == {"algorithm": "cg2", "retraction_method": "exponential"}


def test_missing_algorithm_raises(so3):
    with pytest.raises(ValueError, match="must include 'algorithm'"):
        get_algorithm_step(so3, {"precision": np.float64})


def test_unknown_algorithm_raises(so3):
    with pytest.raises(ValueError, match="Unknown algorithm 'rk4'"):
        get_algorithm_step(so3, algorithm="rk4")


def test_unused_settings_warn(so3):
    with pytest.warns(UserWarning, match="step_controller"):
        get_algorithm_step(so3, algorithm="cg3", step_controller="pid")


def test_unused_settings_silenced(so3):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        step = get_algorithm_step(
            so3, algorithm="cg3", warn_on_unused=False, atol=1e-6
        )
    assert isinstance(step, CG3Step)


def test_invalid_retraction_raises(stiefel):
    with pytest.raises(ValueError, match="does not support"):
        get_algorithm_step(
            stiefel, algorithm="cg2", retraction_method="exponential"
        )


def test_invalid_precision_raises(so3):
    with pytest.raises(ValueError, match="float32 or float64"):
        get_algorithm_step(so3, algorithm="cg2", precision=np.float16)
