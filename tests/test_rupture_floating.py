import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from seismic_sources.rupture_floating import RuptureFloating, area_variability
from seismic_sources.rupture_scaling import RuptureScaling
from seismic_sources.surfaces import GriddedSurface

TRACE = np.array([[0.0, 0.0], [0.27, 0.0]])


@pytest.fixture(scope="module")
def surface() -> GriddedSurface:
    """A 30 km long, 15 km wide fault surface dipping 60 degrees."""
    return GriddedSurface.from_trace(TRACE, 0.0, 60.0, 15.0, 1.0)


def test_area_variability():
    """Area perturbations are symmetric in log space with normal weights."""
    scales, weights = area_variability()
    assert len(scales) == len(weights) == 5
    assert weights.sum() == pytest.approx(1.0)
    assert scales[2] == pytest.approx(1.0)
    assert scales[0] * scales[-1] == pytest.approx(1.0)
    assert weights == pytest.approx(weights[::-1])
    assert weights.argmax() == 2


def test_floating_off(surface: GriddedSurface):
    """Without floating a single rupture covers the whole surface."""
    ruptures = RuptureFloating.OFF.create_floating_ruptures(
        surface, RuptureScaling.NSHM_FAULT_WC94_LENGTH, 6.0, 1e-3, 90.0, False
    )
    assert len(ruptures) == 1
    assert ruptures[0].surface is surface
    assert ruptures[0].rate == 1e-3


def test_floating_nshm(surface: GriddedSurface):
    """NSHM floaters span the full width and step along strike."""
    ruptures = RuptureFloating.NSHM.create_floating_ruptures(
        surface, RuptureScaling.NSHM_FAULT_WC94_LENGTH, 6.0, 1e-3, 90.0, False
    )
    assert len(ruptures) > 1
    for rupture in ruptures:
        assert rupture.surface.num_rows == surface.num_rows
        assert rupture.magnitude == 6.0
        assert rupture.rake == 90.0
    assert sum(rupture.rate for rupture in ruptures) == pytest.approx(1e-3)


def test_floating_strike_only(surface: GriddedSurface):
    """Strike only floaters are pinned to the upper edge."""
    ruptures = RuptureFloating.STRIKE_ONLY.create_floating_ruptures(
        surface, RuptureScaling.PEER, 6.0, 1e-3, 0.0, False
    )
    assert all(rupture.surface.depth() == surface.depth() for rupture in ruptures)
    assert all(rupture.surface.num_rows < surface.num_rows for rupture in ruptures)


def test_floating_full_steps_down_dip(surface: GriddedSurface):
    """Full floaters are tiled down dip as well as along strike."""
    strike_only = RuptureFloating.STRIKE_ONLY.create_floating_ruptures(
        surface, RuptureScaling.PEER, 6.0, 1e-3, 0.0, False
    )
    full = RuptureFloating.FULL.create_floating_ruptures(
        surface, RuptureScaling.PEER, 6.0, 1e-3, 0.0, False
    )
    assert len(full) > len(strike_only)
    assert max(rupture.surface.depth() for rupture in full) > surface.depth()


@pytest.mark.parametrize("floating", [RuptureFloating.NSHM, RuptureFloating.FULL])
@settings(deadline=None, max_examples=20)
@given(magnitude=st.floats(5.5, 7.5), rate=st.floats(1e-6, 1e-1))
def test_floating_rates_sum_with_variability(
    surface: GriddedSurface, floating: RuptureFloating, magnitude: float, rate: float
):
    """With area variability the floater rates still sum to the magnitude rate."""
    ruptures = floating.create_floating_ruptures(
        surface, RuptureScaling.LEONARD_2014, magnitude, rate, 0.0, True
    )
    assert sum(rupture.rate for rupture in ruptures) == pytest.approx(rate)
