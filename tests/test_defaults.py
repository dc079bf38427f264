import pytest

from seismic_sources import defaults
from seismic_sources.defaults import Range


def test_load_defaults_is_cached():
    """Defaults are loaded once from the packaged YAML file."""
    assert defaults.load_defaults() is defaults.load_defaults()
    assert defaults.load_defaults()["min_rupture_rate"] == pytest.approx(1e-14)


@pytest.mark.parametrize(
    "name, value, expected",
    [
        ("dip", 0.0, False),
        ("dip", 90.0, True),
        ("strike", 0.0, True),
        ("strike", 360.0, False),
        ("crustal_width", 0.0, False),
        ("crustal_width", 60.0, True),
        ("slab_depth", 19.9, False),
        ("magnitude", 9.7, True),
        ("magnitude_cutoff", 10.0, True),
        ("magnitude_cutoff", -5.0, False),
    ],
)
def test_domain_range_bounds(name: str, value: float, expected: bool):
    """Domain ranges respect their open and closed ends."""
    assert defaults.domain_range(name).contains(value) == expected


def test_domain_range_unknown():
    """Unknown ranges raise a KeyError."""
    with pytest.raises(KeyError):
        defaults.domain_range("not_a_range")


def test_range_str():
    """Ranges print in interval notation."""
    assert str(Range(0.0, 90.0, False, True)) == "(0.0, 90.0]"
    assert str(Range(0.0, 360.0)) == "[0.0, 360.0]"
