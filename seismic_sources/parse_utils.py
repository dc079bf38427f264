"""Parsing utilities for compact bracketed weight-map strings.

Two formats are understood. Magnitude-depth maps, e.g.

    [6.5::[5.0:0.8, 10.0:0.2]; 10.0::[1.0:1.0]]

map magnitude cutoffs to depth-weight maps, and mechanism maps, e.g.

    [STRIKE_SLIP:0.5, REVERSE:0.25, NORMAL:0.25]

map focal mechanisms to weights.
"""

from seismic_sources.focal_mechanism import FocalMechanism


class ParseError(Exception):
    """Error for parsing weight maps in seismic sources."""

    pass


def _strip_brackets(text: str, label: str) -> str:
    """Remove the enclosing square brackets from a map string.

    Parameters
    ----------
    text : str
        The text to strip.
    label : str
        A human friendly label for the map, used in error messages.

    Returns
    -------
    str
        The text between the brackets.

    Raises
    ------
    ParseError
        If the text is not enclosed in brackets.
    """
    text = text.strip()
    if not (text.startswith("[") and text.endswith("]")):
        raise ParseError(f'Expecting bracketed {label}, got: "{text}"')
    return text[1:-1].strip()


def parse_float(text: str, label: str | None = None) -> float:
    """Parse a float from a string.

    Parameters
    ----------
    text : str
        The string to parse.
    label : str | None
        A human friendly label for the floating point (for debugging
        purposes), or None for no label. Defaults to None.

    Raises
    ------
    ParseError
        If the string is not a float.

    Returns
    -------
    float
        The parsed float.
    """
    text = text.strip()
    try:
        return float(text)
    except ValueError:
        if label:
            raise ParseError(f'Expecting float ({label}), got: "{text}"')
        else:
            raise ParseError(f'Expecting float, got: "{text}"')


def _parse_pairs(text: str, label: str) -> list[tuple[str, str]]:
    """Split a bracketed ``key:value, key:value`` list into its pairs."""
    body = _strip_brackets(text, label)
    if not body:
        raise ParseError(f"Empty {label}")
    pairs = []
    for entry in body.split(","):
        key, separator, value = entry.partition(":")
        if not separator:
            raise ParseError(f'Expecting "key:value" in {label}, got: "{entry.strip()}"')
        pairs.append((key.strip(), value))
    return pairs


def parse_value_weight_map(text: str) -> dict[float, dict[float, float]]:
    """Parse a magnitude-depth map string.

    Parameters
    ----------
    text : str
        The map string, magnitude cutoffs separated by ``;`` and each
        cutoff separated from its depth map by ``::``.

    Returns
    -------
    dict[float, dict[float, float]]
        A mapping from magnitude cutoff to a mapping from depth to
        weight, sorted by cutoff. Depths keep their order in `text`.

    Raises
    ------
    ParseError
        If the string is malformed or repeats a cutoff.
    """
    body = _strip_brackets(text, "magnitude-depth map")
    if not body:
        raise ParseError("Empty magnitude-depth map")
    value_weight_map: dict[float, dict[float, float]] = {}
    for bucket in body.split(";"):
        cutoff_text, separator, depth_map_text = bucket.partition("::")
        if not separator:
            raise ParseError(f'Expecting "cutoff::[...]", got: "{bucket.strip()}"')
        cutoff = parse_float(cutoff_text, "magnitude cutoff")
        if cutoff in value_weight_map:
            raise ParseError(f"Repeated magnitude cutoff {cutoff}")
        value_weight_map[cutoff] = {
            parse_float(depth, "depth"): parse_float(weight, "depth weight")
            for depth, weight in _parse_pairs(depth_map_text, "depth map")
        }
    return dict(sorted(value_weight_map.items()))


def parse_mechanism_weights(text: str) -> dict[FocalMechanism, float]:
    """Parse a focal mechanism weight string.

    Parameters
    ----------
    text : str
        The mechanism map string. Mechanism names are case insensitive.

    Returns
    -------
    dict[FocalMechanism, float]
        The weight of each mechanism. Mechanisms absent from `text`
        have zero weight.

    Raises
    ------
    ParseError
        If the string is malformed or names an unknown mechanism.
    """
    weights = {mechanism: 0.0 for mechanism in FocalMechanism}
    for name, weight in _parse_pairs(text, "mechanism map"):
        try:
            mechanism = FocalMechanism[name.upper()]
        except KeyError:
            raise ParseError(f'Unknown focal mechanism "{name}"')
        weights[mechanism] = parse_float(weight, f"{mechanism.name} weight")
    return weights
