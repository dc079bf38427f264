import pytest

from seismic_sources.errors import ConfigurationError
from seismic_sources.focal_mechanism import FocalMechanism, RakeType, rake_type


@pytest.mark.parametrize(
    "rake, expected_rake_type",
    [
        (0, RakeType.STRIKE_SLIP),
        (180, RakeType.STRIKE_SLIP),
        (-180, RakeType.STRIKE_SLIP),
        (90, RakeType.REVERSE),
        (-90, RakeType.NORMAL),
        (45, RakeType.REVERSE_OBLIQUE),
        (135, RakeType.REVERSE_OBLIQUE),
        (-45, RakeType.NORMAL_OBLIQUE),
        (-135, RakeType.NORMAL_OBLIQUE),
        (300, RakeType.UNDEFINED),
    ],
)
def test_rake_type(rake: float, expected_rake_type: RakeType):
    """Test the rake type classification."""
    assert rake_type(rake) == expected_rake_type


def test_mechanism_geometry():
    """Each mechanism carries its generic dip and rake."""
    assert FocalMechanism.STRIKE_SLIP.dip == 90.0
    assert FocalMechanism.STRIKE_SLIP.rake == 0.0
    assert FocalMechanism.REVERSE.dip == 50.0
    assert FocalMechanism.REVERSE.rake == 90.0
    assert FocalMechanism.NORMAL.dip == 50.0
    assert FocalMechanism.NORMAL.rake == -90.0


@pytest.mark.parametrize(
    "rake, mechanism",
    [
        (0, FocalMechanism.STRIKE_SLIP),
        (-170, FocalMechanism.STRIKE_SLIP),
        (90, FocalMechanism.REVERSE),
        (40, FocalMechanism.REVERSE),
        (-90, FocalMechanism.NORMAL),
        (-140, FocalMechanism.NORMAL),
    ],
)
def test_from_rake(rake: float, mechanism: FocalMechanism):
    """Oblique rakes map to their dip-slip mechanism."""
    assert FocalMechanism.from_rake(rake) == mechanism


def test_from_rake_undefined():
    """Rakes outside every class cannot be converted."""
    with pytest.raises(ConfigurationError, match="Cannot classify"):
        FocalMechanism.from_rake(300)
