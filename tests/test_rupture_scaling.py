import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from seismic_sources import rupture_scaling
from seismic_sources.rupture_scaling import Dimensions, RuptureScaling


def test_wc94_length():
    """The Wells and Coppersmith length is one kilometre at magnitude 5.08."""
    assert rupture_scaling.wc94_magnitude_to_length(5.08) == pytest.approx(1.0)
    assert rupture_scaling.wc94_magnitude_to_length(6.24) == pytest.approx(10.0)


@pytest.mark.parametrize(
    "magnitude, expected_area",
    [(3.995, 1.0), (5.0, 10 ** (5.0 - 3.995)), (6.995, 1000.0)],
)
def test_leonard_area(magnitude: float, expected_area: float):
    """Test the Leonard magnitude to area relationship."""
    assert rupture_scaling.leonard_magnitude_to_area(magnitude) == pytest.approx(
        expected_area
    )


def test_contreras_small_magnitude_warns():
    """Contreras areas below magnitude 6 are extrapolated with a warning."""
    with pytest.warns(UserWarning, match="minimum magnitude is 6"):
        rupture_scaling.contreras_interface_magnitude_to_area(5.0)


def test_contreras_aspect_ratio():
    """Aspect ratios are one below magnitude 7.25 and grow above it."""
    assert rupture_scaling.contreras_interface_magnitude_to_aspect_ratio(7.0) == 1.0
    assert rupture_scaling.contreras_interface_magnitude_to_aspect_ratio(8.0) > 1.0


def test_area_constrained_dimensions():
    """Widths are capped and lengths grow to preserve the area."""
    assert tuple(rupture_scaling.area_constrained_dimensions(100.0, 1.0, 20.0)) == pytest.approx(
        (10.0, 10.0)
    )
    assert tuple(rupture_scaling.area_constrained_dimensions(100.0, 1.0, 5.0)) == pytest.approx(
        (20.0, 5.0)
    )


@pytest.mark.parametrize(
    "scaling", [RuptureScaling.NSHM_FAULT_WC94_LENGTH, RuptureScaling.NSHM_POINT_WC94_LENGTH]
)
def test_wc94_dimensions(scaling: RuptureScaling):
    """Length based models use a square rupture limited by the maximum width."""
    length = rupture_scaling.wc94_magnitude_to_length(7.0)
    assert tuple(scaling.dimensions(7.0, 100.0)) == pytest.approx((length, length))
    assert tuple(scaling.dimensions(7.0, 15.0)) == pytest.approx((length, 15.0))


def test_peer_dimensions():
    """PEER ruptures are square until limited by the maximum width."""
    assert tuple(RuptureScaling.PEER.dimensions(6.0, 20.0)) == pytest.approx((10.0, 10.0))
    assert tuple(RuptureScaling.PEER.dimensions(6.0, 5.0)) == pytest.approx((20.0, 5.0))


@pytest.mark.parametrize(
    "scaling, area_function",
    [
        (RuptureScaling.LEONARD_2014, rupture_scaling.leonard_magnitude_to_area),
        (
            RuptureScaling.CONTRERAS_INTERFACE_2017,
            rupture_scaling.contreras_interface_magnitude_to_area,
        ),
    ],
)
@given(magnitude=st.floats(6.0, 9.0), max_width=st.floats(5.0, 200.0))
def test_area_preserved(scaling: RuptureScaling, area_function, magnitude: float, max_width: float):
    """Area based models preserve the rupture area within the width limit."""
    dimensions = scaling.dimensions(magnitude, max_width)
    assert isinstance(dimensions, Dimensions)
    assert dimensions.width <= max_width * (1 + 1e-9)
    assert dimensions.length * dimensions.width == pytest.approx(area_function(magnitude))


def test_scaling_names():
    """Scaling models are named by their lower case member names."""
    assert RuptureScaling("peer") == RuptureScaling.PEER
    assert str(RuptureScaling.LEONARD_2014) == "leonard_2014"


@pytest.mark.parametrize(
    "scaling, magnitude",
    [
        (RuptureScaling.NSHM_FAULT_WC94_LENGTH, 7.0),
        (RuptureScaling.PEER, 7.0),
        (RuptureScaling.NSHM_POINT_WC94_LENGTH, 5.5),
    ],
)
def test_point_source_distance_uncorrected(scaling: RuptureScaling, magnitude: float):
    """Only large point ruptures in the point model have corrected distances."""
    assert scaling.point_source_distance(magnitude, 50.0) == 50.0


def test_point_source_distance_zero():
    """A site at the point has zero distance."""
    assert RuptureScaling.NSHM_POINT_WC94_LENGTH.point_source_distance(7.0, 0.0) == 0.0


@given(magnitude=st.floats(6.0, 8.0), r_jb=st.floats(0.1, 300.0))
def test_point_source_distance_bounds(magnitude: float, r_jb: float):
    """The corrected distance lies between the distance to the nearest end and r_jb."""
    length = rupture_scaling.wc94_magnitude_to_length(magnitude)
    corrected = RuptureScaling.NSHM_POINT_WC94_LENGTH.point_source_distance(magnitude, r_jb)
    assert max(r_jb - length / 2, 0.0) - 1e-9 <= corrected <= r_jb * (1 + 1e-9)


def test_point_source_distance_far_field():
    """Far from the source the correction vanishes."""
    corrected = RuptureScaling.NSHM_POINT_WC94_LENGTH.point_source_distance(6.5, 1000.0)
    assert corrected == pytest.approx(1000.0, rel=1e-2)
    assert corrected < 1000.0
