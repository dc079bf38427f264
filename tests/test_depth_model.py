import logging

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from seismic_sources.depth_model import DepthModel
from seismic_sources.errors import ConfigurationError

MAG_DEPTH_MAP = {
    6.5: {1.0: 0.4, 3.0: 0.5, 5.0: 0.1},
    10.0: {1.0: 0.1, 5.0: 0.9},
}
MASTER_MAGNITUDES = [5.0, 5.5, 6.0, 6.5, 7.0]


@pytest.fixture
def depth_model() -> DepthModel:
    """The depth model of a two cutoff map over five magnitudes."""
    return DepthModel.create(MAG_DEPTH_MAP, MASTER_MAGNITUDES, 20.0)


def test_depth_model_arrays(depth_model: DepthModel):
    """Magnitudes use the depths of the smallest cutoff above them."""
    np.testing.assert_array_equal(
        depth_model.magnitude_indices, [0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 4, 4]
    )
    np.testing.assert_array_equal(
        depth_model.depths, [1, 3, 5, 1, 3, 5, 1, 3, 5, 1, 5, 1, 5]
    )
    np.testing.assert_allclose(
        depth_model.weights,
        [0.4, 0.5, 0.1, 0.4, 0.5, 0.1, 0.4, 0.5, 0.1, 0.1, 0.9, 0.1, 0.9],
    )
    assert len(depth_model) == 13
    assert depth_model.max_depth == 20.0


def test_depth_model_is_read_only(depth_model: DepthModel):
    """The lookup arrays cannot be modified."""
    with pytest.raises(ValueError):
        depth_model.depths[0] = 10.0


@pytest.mark.parametrize("mfd_size, expected_size", [(1, 3), (3, 9), (4, 11), (5, 13)])
def test_mag_depth_size(depth_model: DepthModel, mfd_size: int, expected_size: int):
    """Distributions use the prefix of the arrays covering their magnitudes."""
    assert depth_model.mag_depth_size(mfd_size) == expected_size


@pytest.mark.parametrize("mfd_size", [0, 6])
def test_mag_depth_size_out_of_range(depth_model: DepthModel, mfd_size: int):
    """Distributions must fit the master magnitudes."""
    with pytest.raises(ConfigurationError, match="does not fit"):
        depth_model.mag_depth_size(mfd_size)


def test_depth_model_missing_cutoff():
    """Every magnitude needs a cutoff above it."""
    with pytest.raises(ConfigurationError, match="No magnitude cutoff above magnitude 7.0"):
        DepthModel.create({6.5: {5.0: 1.0}}, [6.0, 7.0], 20.0)


def test_depth_model_cutoff_is_exclusive():
    """A magnitude equal to a cutoff uses the next cutoff."""
    model = DepthModel.create({6.5: {5.0: 1.0}, 10.0: {1.0: 1.0}}, [6.5], 20.0)
    np.testing.assert_array_equal(model.depths, [1.0])


@given(
    magnitudes=st.lists(
        st.floats(5.0, 9.0).map(lambda m: round(m, 1)),
        min_size=1,
        max_size=10,
        unique=True,
    ).map(sorted)
)
def test_depth_weights_sum_to_one(magnitudes: list[float]):
    """The depth weights of every magnitude sum to one."""
    model = DepthModel.create(MAG_DEPTH_MAP, magnitudes, 20.0)
    weight_sums = np.bincount(model.magnitude_indices, weights=model.weights)
    np.testing.assert_allclose(weight_sums, np.ones(len(magnitudes)))


def test_depth_model_logs(caplog: pytest.LogCaptureFixture):
    """Creating a depth model logs its size at debug level."""
    caplog.set_level(logging.DEBUG, logger="seismic_sources")
    DepthModel.create(MAG_DEPTH_MAP, MASTER_MAGNITUDES, 20.0)
    assert any("created depth model" in record.getMessage() for record in caplog.records)
