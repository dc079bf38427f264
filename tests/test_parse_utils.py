import pytest

from seismic_sources.focal_mechanism import FocalMechanism
from seismic_sources.parse_utils import (
    ParseError,
    parse_float,
    parse_mechanism_weights,
    parse_value_weight_map,
)


def test_parse_float():
    """Floats are parsed with surrounding whitespace removed."""
    assert parse_float(" 1.5 ") == 1.5


@pytest.mark.parametrize(
    "label, message",
    [(None, 'Expecting float, got: "abc"'), ("depth", 'Expecting float (depth), got: "abc"')],
)
def test_parse_float_invalid(label: str | None, message: str):
    """Invalid floats raise a parse error naming the label."""
    with pytest.raises(ParseError) as error:
        parse_float("abc", label)
    assert str(error.value) == message


def test_parse_value_weight_map():
    """Magnitude-depth maps are parsed and sorted by cutoff."""
    parsed = parse_value_weight_map(
        "[10.0::[1.0:0.1, 5.0:0.9]; 6.5::[1.0:0.4, 3.0:0.5, 5.0:0.1]]"
    )
    assert list(parsed) == [6.5, 10.0]
    assert parsed[6.5] == {1.0: 0.4, 3.0: 0.5, 5.0: 0.1}
    assert list(parsed[10.0]) == [1.0, 5.0]


@pytest.mark.parametrize(
    "text",
    [
        "10.0::[5.0:1.0]",
        "[]",
        "[10.0:[5.0:1.0]]",
        "[10.0::[5.0]]",
        "[10.0::[5.0:heavy]]",
        "[10.0::[5.0:1.0]; 10.0::[1.0:1.0]]",
    ],
)
def test_parse_value_weight_map_invalid(text: str):
    """Malformed maps and repeated cutoffs are rejected."""
    with pytest.raises(ParseError):
        parse_value_weight_map(text)


def test_parse_mechanism_weights():
    """Mechanism names are case insensitive and missing mechanisms have zero weight."""
    weights = parse_mechanism_weights("[strike_slip:0.5, REVERSE:0.5]")
    assert weights == {
        FocalMechanism.STRIKE_SLIP: 0.5,
        FocalMechanism.REVERSE: 0.5,
        FocalMechanism.NORMAL: 0.0,
    }


@pytest.mark.parametrize(
    "text", ["[OBLIQUE:1.0]", "[STRIKE_SLIP]", "STRIKE_SLIP:1.0", "[NORMAL:one]"]
)
def test_parse_mechanism_weights_invalid(text: str):
    """Unknown mechanisms and malformed maps are rejected."""
    with pytest.raises(ParseError):
        parse_mechanism_weights(text)
