"""Functions to load the default domain constants for seismic sources."""

import functools
from importlib import resources
from typing import Any, NamedTuple

import yaml


class Range(NamedTuple):
    """A numeric range with independently open or closed ends.

    Attributes
    ----------
    lower : float
        The lower bound of the range.
    upper : float
        The upper bound of the range.
    lower_closed : bool
        True if `lower` is included in the range.
    upper_closed : bool
        True if `upper` is included in the range.
    """

    lower: float
    upper: float
    lower_closed: bool = True
    upper_closed: bool = True

    def contains(self, value: float) -> bool:
        """Check if a value lies in the range.

        Parameters
        ----------
        value : float
            The value to check.

        Returns
        -------
        bool
            True if `value` lies in the range.
        """
        above = value >= self.lower if self.lower_closed else value > self.lower
        below = value <= self.upper if self.upper_closed else value < self.upper
        return bool(above and below)

    def __str__(self) -> str:
        left = "[" if self.lower_closed else "("
        right = "]" if self.upper_closed else ")"
        return f"{left}{self.lower}, {self.upper}{right}"


@functools.cache
def load_defaults() -> dict[str, Any]:
    """Load the default parameters from the packaged YAML file.

    Returns
    -------
    dict
        A dictionary of the default parameters. The result is cached,
        callers must not mutate it.
    """
    defaults_path = resources.files("seismic_sources") / "defaults.yaml"
    with defaults_path.open(encoding="utf-8") as defaults_file_handle:
        return yaml.safe_load(defaults_file_handle)


def domain_range(name: str) -> Range:
    """Return a named domain range from the defaults.

    Parameters
    ----------
    name : str
        The name of the range, e.g. "dip" or "surface_spacing".

    Returns
    -------
    Range
        The range for that quantity.

    Raises
    ------
    KeyError
        If there is no range with the given name.
    """
    range_spec = load_defaults()["ranges"][name]
    lower_closed, upper_closed = range_spec["closed"]
    return Range(
        float(range_spec["lower"]),
        float(range_spec["upper"]),
        lower_closed,
        upper_closed,
    )
