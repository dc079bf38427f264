"""Validation of builder inputs for seismic sources.

Every check function returns the validated (and possibly converted)
value, or raises a `ConfigurationError` describing the problem.
"""

import re
from collections.abc import Mapping

import numpy as np
import numpy.typing as npt
import shapely
from schema import And, Schema, SchemaError, Use

from seismic_sources import geodesy
from seismic_sources.defaults import domain_range
from seismic_sources.errors import ConfigurationError

# NOTE: The schema library reports the name of the failing predicate,
# so `is_finite(nan) should evaluate to True` is far more helpful
# than `<lambda>(nan) should evaluate to True`. The most trivial
# predicates therefore lack docstrings.

NAME_PATTERN = re.compile(r"^[\w .,:;'()/&+\-]+$")
WEIGHT_SUM_TOLERANCE = 1e-6


def is_finite(x: float) -> bool:
    return bool(np.isfinite(x))


def is_non_empty(value: str) -> bool:
    return len(value) > 0


def has_valid_name_characters(name: str) -> bool:
    return NAME_PATTERN.match(name) is not None


def has_at_least_two_points(trace: np.ndarray) -> bool:
    return trace.ndim == 2 and trace.shape[0] >= 2 and trace.shape[1] in (2, 3)


def has_finite_coordinates(trace: np.ndarray) -> bool:
    return bool(np.all(np.isfinite(trace)))


def is_not_self_intersecting(trace: np.ndarray) -> bool:
    """Check if a trace does not cross itself.

    Parameters
    ----------
    trace : np.ndarray
        The trace in (lat, lon[, depth]) format.

    Returns
    -------
    bool
        True if the trace, projected about its first point, forms a
        simple line.
    """
    project = geodesy.local_projection(trace[0])
    return bool(shapely.LineString(project(trace)).is_simple)


def are_non_negative_weights(weights: Mapping[object, float]) -> bool:
    return all(weight >= 0 for weight in weights.values())


def weights_sum_to_one(weights: Mapping[object, float]) -> bool:
    return abs(sum(weights.values()) - 1.0) <= WEIGHT_SUM_TOLERANCE


def _validate(schema: Schema, value: object, label: str) -> object:
    """Validate a value against a schema, raising a configuration error."""
    try:
        return schema.validate(value)
    except SchemaError as e:
        raise ConfigurationError(f"Invalid {label}: {e}") from e


def _check_in_range(value: float, range_name: str, label: str) -> float:
    """Validate a finite float lying in a named domain range."""
    valid_range = domain_range(range_name)
    value = _validate(Schema(And(Use(float), is_finite)), value, label)
    if not valid_range.contains(value):
        raise ConfigurationError(
            f"Invalid {label}: {value} is not in the range {valid_range}"
        )
    return value


def check_name(name: str) -> str:
    """Validate a source name.

    Parameters
    ----------
    name : str
        The name to check.

    Returns
    -------
    str
        The name with surrounding whitespace removed.

    Raises
    ------
    ConfigurationError
        If the name is empty or contains disallowed characters.
    """
    return _validate(
        Schema(And(str, Use(str.strip), is_non_empty, has_valid_name_characters)),
        name,
        "name",
    )


def check_trace(trace: npt.ArrayLike) -> np.ndarray:
    """Validate a fault trace.

    Parameters
    ----------
    trace : array-like
        The trace as a sequence of (lat, lon) or (lat, lon, depth) points.

    Returns
    -------
    np.ndarray
        The trace as a float array of shape (n, 2) or (n, 3).

    Raises
    ------
    ConfigurationError
        If the trace has fewer than two points, non-finite coordinates
        or crosses itself.
    """
    return _validate(
        Schema(
            And(
                Use(lambda trace: np.asarray(trace, dtype=np.float64)),
                has_at_least_two_points,
                has_finite_coordinates,
                is_not_self_intersecting,
            )
        ),
        trace,
        "trace",
    )


def check_dip(dip: float) -> float:
    return _check_in_range(dip, "dip", "dip")


def check_rake(rake: float) -> float:
    return _check_in_range(rake, "rake", "rake")


def check_strike(strike: float) -> float:
    return _check_in_range(strike, "strike", "strike")


def check_crustal_depth(depth: float) -> float:
    return _check_in_range(depth, "crustal_depth", "crustal depth")


def check_crustal_width(width: float) -> float:
    return _check_in_range(width, "crustal_width", "crustal width")


def check_interface_depth(depth: float) -> float:
    return _check_in_range(depth, "interface_depth", "interface depth")


def check_interface_width(width: float) -> float:
    return _check_in_range(width, "interface_width", "interface width")


def check_slab_depth(depth: float) -> float:
    return _check_in_range(depth, "slab_depth", "slab depth")


def check_surface_spacing(spacing: float) -> float:
    return _check_in_range(spacing, "surface_spacing", "surface spacing")


def check_max_depth(depth: float) -> float:
    return _check_in_range(depth, "max_depth", "maximum depth")


def check_magnitude(magnitude: float) -> float:
    return _check_in_range(magnitude, "magnitude", "magnitude")


def check_magnitude_cutoff(cutoff: float) -> float:
    return _check_in_range(cutoff, "magnitude_cutoff", "magnitude cutoff")


def check_weights(weights: Mapping[object, float]) -> dict[object, float]:
    """Validate a weight map.

    Parameters
    ----------
    weights : Mapping
        A mapping of values to weights.

    Returns
    -------
    dict
        The weights with float values.

    Raises
    ------
    ConfigurationError
        If any weight is negative or the weights do not sum to one.
    """
    return _validate(
        Schema(
            And(
                Use(lambda weights: {key: float(w) for key, w in weights.items()}),
                are_non_negative_weights,
                weights_sum_to_one,
            )
        ),
        weights,
        "weights",
    )


def is_non_negative(x: float) -> bool:
    return x >= 0


def is_valid_branch_weight(weight: float) -> bool:
    return 0 < weight <= 1


def check_rate(rate: float) -> float:
    """Validate an annual rate.

    Parameters
    ----------
    rate : float
        The rate to check.

    Returns
    -------
    float
        The rate.

    Raises
    ------
    ConfigurationError
        If the rate is negative or not finite.
    """
    return _validate(Schema(And(Use(float), is_finite, is_non_negative)), rate, "rate")


def check_branch_weight(weight: float) -> float:
    """Validate a logic tree branch weight.

    Parameters
    ----------
    weight : float
        The weight to check.

    Returns
    -------
    float
        The weight.

    Raises
    ------
    ConfigurationError
        If the weight is not in (0, 1].
    """
    return _validate(
        Schema(And(Use(float), is_finite, is_valid_branch_weight)), weight, "weight"
    )
