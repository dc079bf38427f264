import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from seismic_sources.errors import ConfigurationError
from seismic_sources.mfd import MagnitudeFrequencyDistribution


def test_mfd_properties():
    """Distributions report their size, total rate and bins."""
    mfd = MagnitudeFrequencyDistribution([5.0, 5.5, 6.0], [1e-2, 1e-3, 1e-4])
    assert mfd.size == 3
    assert len(mfd) == 3
    assert mfd.total_rate == pytest.approx(1.11e-2)
    assert list(mfd) == [(5.0, 1e-2), (5.5, 1e-3), (6.0, 1e-4)]
    assert not mfd.floats


def test_mfd_is_immutable():
    """The arrays of a distribution are copies and cannot be written."""
    magnitudes = np.array([5.0, 6.0])
    mfd = MagnitudeFrequencyDistribution(magnitudes, [1e-2, 1e-3])
    magnitudes[0] = 4.0
    assert mfd.magnitudes[0] == 5.0
    with pytest.raises(ValueError):
        mfd.rates[0] = 1.0


@pytest.mark.parametrize(
    "magnitudes, rates",
    [
        ([], []),
        ([5.0, 6.0], [1e-2]),
        ([[5.0, 6.0]], [[1e-2, 1e-3]]),
        ([6.0, 5.0], [1e-2, 1e-3]),
        ([5.0, 5.0], [1e-2, 1e-3]),
        ([5.0, 6.0], [1e-2, -1e-3]),
        ([5.0, np.nan], [1e-2, 1e-3]),
        ([5.0, 6.0], [1e-2, np.inf]),
    ],
)
def test_mfd_invalid(magnitudes: list, rates: list):
    """Empty, mismatched, unordered, non-finite and negative distributions are rejected."""
    with pytest.raises(ConfigurationError):
        MagnitudeFrequencyDistribution(magnitudes, rates)


@given(factor=st.floats(0.0, 10.0))
def test_mfd_scaled(factor: float):
    """Scaling returns a new distribution and leaves the original unchanged."""
    mfd = MagnitudeFrequencyDistribution([5.0, 6.0], [1e-2, 1e-3], floats=True)
    scaled = mfd.scaled(factor)
    assert scaled is not mfd
    assert scaled.floats
    np.testing.assert_array_equal(scaled.magnitudes, mfd.magnitudes)
    np.testing.assert_allclose(scaled.rates, [1e-2 * factor, 1e-3 * factor])
    np.testing.assert_array_equal(mfd.rates, [1e-2, 1e-3])


def test_mfd_is_prefix_of():
    """Prefixes share the leading magnitudes of a longer list."""
    mfd = MagnitudeFrequencyDistribution([5.0, 5.5], [1e-2, 1e-3])
    assert mfd.is_prefix_of([5.0, 5.5, 6.0])
    assert mfd.is_prefix_of([5.0, 5.5])
    assert not mfd.is_prefix_of([5.0])
    assert not mfd.is_prefix_of([5.0, 6.0, 6.5])
