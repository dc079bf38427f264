import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from seismic_sources import validation
from seismic_sources.errors import ConfigurationError


@pytest.mark.parametrize("name", ["Alpine Fault: Kaniere to Springs Junction", "Hope (1888)"])
def test_check_name_valid(name: str):
    """Names with ordinary punctuation are accepted."""
    assert validation.check_name(f"  {name} ") == name


@pytest.mark.parametrize("name", ["", "   ", "fault*", "fault\nname", 42])
def test_check_name_invalid(name):
    """Empty names, names with control or wildcard characters and non-strings are rejected."""
    with pytest.raises(ConfigurationError, match="Invalid name"):
        validation.check_name(name)


def test_check_trace_valid():
    """Valid traces are returned as float arrays."""
    trace = validation.check_trace([[0, 0], [0.1, 0.1]])
    assert trace.dtype == np.float64
    assert trace.shape == (2, 2)


@pytest.mark.parametrize(
    "trace",
    [
        [[0.0, 0.0]],
        [[0.0, 0.0, 0.0, 0.0], [1.0, 1.0, 1.0, 1.0]],
        [[0.0, 0.0], [np.nan, 0.1]],
        [[0.0, 0.0], [0.1, 0.1], [0.1, 0.0], [0.0, 0.1]],
    ],
)
def test_check_trace_invalid(trace: list[list[float]]):
    """Short, malformed, non-finite and self-intersecting traces are rejected."""
    with pytest.raises(ConfigurationError, match="Invalid trace"):
        validation.check_trace(trace)


@pytest.mark.parametrize(
    "check, value",
    [
        (validation.check_dip, 0.0),
        (validation.check_dip, 91.0),
        (validation.check_rake, 180.5),
        (validation.check_strike, 360.0),
        (validation.check_crustal_depth, -1.0),
        (validation.check_crustal_width, 61.0),
        (validation.check_interface_width, 0.0),
        (validation.check_slab_depth, 10.0),
        (validation.check_surface_spacing, 0.0),
        (validation.check_max_depth, 1.0),
        (validation.check_magnitude, 10.0),
        (validation.check_magnitude_cutoff, 10.5),
        (validation.check_dip, np.nan),
        (validation.check_dip, "steep"),
    ],
)
def test_range_checks_reject(check, value):
    """Values outside their domain range are rejected."""
    with pytest.raises(ConfigurationError):
        check(value)


@given(dip=st.floats(0.0, 90.0, exclude_min=True))
def test_check_dip_accepts_range(dip: float):
    """Every dip in (0, 90] is accepted."""
    assert validation.check_dip(dip) == dip


def test_check_weights():
    """Weights summing to one are returned as floats."""
    assert validation.check_weights({5.0: 1, 10.0: 0}) == {5.0: 1.0, 10.0: 0.0}


@pytest.mark.parametrize("weights", [{5.0: 0.5}, {5.0: 1.5, 10.0: -0.5}])
def test_check_weights_invalid(weights: dict[float, float]):
    """Weights must be non-negative and sum to one."""
    with pytest.raises(ConfigurationError, match="Invalid weights"):
        validation.check_weights(weights)


def test_check_weights_tolerance():
    """Weight sums within the tolerance are accepted."""
    validation.check_weights({1.0: 0.1, 2.0: 0.2, 3.0: 0.7 + 1e-9})


@pytest.mark.parametrize("rate", [-1e-3, np.inf, np.nan])
def test_check_rate_invalid(rate: float):
    """Rates must be non-negative and finite."""
    with pytest.raises(ConfigurationError, match="Invalid rate"):
        validation.check_rate(rate)


@pytest.mark.parametrize("weight, valid", [(0.0, False), (0.5, True), (1.0, True), (1.1, False)])
def test_check_branch_weight(weight: float, valid: bool):
    """Branch weights lie in (0, 1]."""
    if valid:
        assert validation.check_branch_weight(weight) == weight
    else:
        with pytest.raises(ConfigurationError):
            validation.check_branch_weight(weight)
