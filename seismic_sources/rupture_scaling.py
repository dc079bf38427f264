"""Magnitude scaling relationships for rupture dimensions.

A `RuptureScaling` supplies two things to sources: the length and
down-dip width of a rupture of a given magnitude, and (for models that
represent finite ruptures with points) a correction from the epicentral
distance to an average Joyner-Boore distance.
"""

import functools
import warnings
from collections.abc import Callable
from enum import StrEnum, auto
from typing import NamedTuple

import numpy as np
import scipy as sp

from seismic_sources.defaults import load_defaults


class Dimensions(NamedTuple):
    """Rupture dimensions (in km)."""

    length: float
    """The along-strike length of the rupture."""
    width: float
    """The down-dip width of the rupture."""


def wc94_magnitude_to_length(magnitude: float) -> float:
    """Convert magnitude to length using the Wells and Coppersmith relationship [0]_.

    Parameters
    ----------
    magnitude : float
        Moment magnitude of the rupture.

    Returns
    -------
    float
        Subsurface rupture length for all slip types (km).

    References
    ----------
    .. [0] Wells, Donald L., and Kevin J. Coppersmith. "New empirical
           relationships among magnitude, rupture length, rupture width,
           rupture area, and surface displacement." Bulletin of the
           Seismological Society of America 84.4 (1994): 974-1002.
    """
    return 10 ** ((magnitude - 5.08) / 1.16)


def peer_magnitude_to_area(magnitude: float) -> float:
    """Convert magnitude to area using the PEER test relationship.

    The relationship is the one prescribed for the PEER PSHA
    verification tests, with an area uncertainty of 0.25 (log10 units).

    Parameters
    ----------
    magnitude : float
        Moment magnitude of the rupture.

    Returns
    -------
    float
        Area of the rupture (km^2).
    """
    return 10 ** (magnitude - 4.0)


def leonard_magnitude_to_area(magnitude: float) -> float:
    """Convert magnitude to area using the Leonard scaling relationship [0]_.

    The relationship is the one averaged over rake types.

    Parameters
    ----------
    magnitude : float
        Moment magnitude of the rupture.

    Returns
    -------
    float
        Area of the rupture (km^2).

    References
    ----------
    .. [0] Leonard, Mark. "Self‐consistent earthquake fault‐scaling
           relations: Update and extension to stable continental strike‐slip
           faults." Bulletin of the Seismological Society of America 104.6
           (2014): 2953-2965.
    """
    return 10 ** (magnitude - 3.995)


def contreras_interface_magnitude_to_area(magnitude: float) -> float:
    """Convert magnitude to area using the Contreras scaling relationship [0]_.

    Parameters
    ----------
    magnitude : float
        Moment magnitude of the rupture.

    Returns
    -------
    float
        Area of the rupture (km^2).

    Warns
    -----
    UserWarning
        If the magnitude is less than the minimum magnitude of 6.

    References
    ----------
    .. [0] Contreras, Victor, et al. "NGA-Sub source and path database." Earthquake Spectra 38.2 (2022): 799-840.
    """
    if magnitude < 6:
        warnings.warn(
            "Magnitude out of range for Contreras model, minimum magnitude is 6"
        )
    a_1 = -8.890
    a_2 = np.log(10)
    return float(np.exp(a_1 + a_2 * magnitude))


def contreras_interface_magnitude_to_aspect_ratio(magnitude: float) -> float:
    """Convert magnitude to aspect ratio (L/W) using the Contreras scaling relationship [0]_.

    Parameters
    ----------
    magnitude : float
        Moment magnitude of the rupture.

    Returns
    -------
    float
        Aspect ratio of the rupture.

    References
    ----------
    .. [0] Contreras, Victor, et al. "NGA-Sub source and path database." Earthquake Spectra 38.2 (2022): 799-840.
    """
    a_3 = 0.6248
    m_1 = 7.25
    if magnitude < m_1:
        return 1.0
    return float(np.exp(a_3 * (magnitude - m_1)))


def area_aspect_ratio_to_length_width(
    area: float, aspect_ratio: float
) -> tuple[float, float]:
    """Convert area and aspect ratio to length and width.

    Parameters
    ----------
    area : float
        Area of the rupture (km^2).
    aspect_ratio : float
        Aspect ratio of the rupture (length / width).

    Returns
    -------
    tuple[float, float]
        Length and width of the rupture.
    """
    width = np.sqrt(area / aspect_ratio)
    length = area / width
    return float(length), float(width)


def area_constrained_dimensions(
    area: float, aspect_ratio: float, max_width: float
) -> Dimensions:
    """Find rupture dimensions preserving area with a limited width.

    Parameters
    ----------
    area : float
        Area of the rupture (km^2).
    aspect_ratio : float
        Preferred aspect ratio of the rupture (length / width).
    max_width : float
        Maximum down-dip width of the rupture (km).

    Returns
    -------
    Dimensions
        The rupture dimensions. If the preferred width exceeds
        `max_width`, the width is `max_width` and the length grows to
        preserve the area.
    """
    length, width = area_aspect_ratio_to_length_width(area, aspect_ratio)
    if width > max_width:
        width = max_width
        length = area / width
    return Dimensions(length, width)


def _mean_line_distance(distance: float, length: float) -> float:
    """Average horizontal distance to a line centred `distance` km from a site.

    The average is taken over uniformly distributed line strikes.
    """
    half_length = length / 2

    def line_distance(theta: float) -> float:
        along_strike = distance * np.cos(theta)
        across_strike = distance * np.sin(theta)
        if along_strike <= half_length:
            return across_strike
        return float(np.hypot(along_strike - half_length, across_strike))

    # By symmetry, strikes in [0, pi / 2] cover every case.
    breakpoints = (
        [float(np.arccos(half_length / distance))] if distance > half_length else None
    )
    mean, _ = sp.integrate.quad(line_distance, 0, np.pi / 2, points=breakpoints)
    return float(mean * 2 / np.pi)


@functools.cache
def _point_correction_magnitude() -> float:
    return float(load_defaults()["point_distance_correction_min_magnitude"])


class RuptureScaling(StrEnum):
    """Enumeration of rupture scaling models."""

    NSHM_FAULT_WC94_LENGTH = auto()
    NSHM_POINT_WC94_LENGTH = auto()
    PEER = auto()
    LEONARD_2014 = auto()
    CONTRERAS_INTERFACE_2017 = auto()

    def dimensions(self, magnitude: float, max_width: float) -> Dimensions:
        """Compute the dimensions of a rupture.

        Parameters
        ----------
        magnitude : float
            Moment magnitude of the rupture.
        max_width : float
            Maximum down-dip width of the rupture (km).

        Returns
        -------
        Dimensions
            The length and width of the rupture.
        """
        return DIMENSION_FUNCTIONS[self](magnitude, max_width)

    def point_source_distance(self, magnitude: float, r_jb: float) -> float:
        """Correct a point-source distance for rupture finiteness.

        Parameters
        ----------
        magnitude : float
            Moment magnitude of the rupture.
        r_jb : float
            Horizontal distance from the site to the point (km).

        Returns
        -------
        float
            The corrected Joyner-Boore distance. Models that do not
            correct distances return `r_jb`.
        """
        if (
            self != RuptureScaling.NSHM_POINT_WC94_LENGTH
            or magnitude < _point_correction_magnitude()
            or r_jb == 0
        ):
            return r_jb
        return _mean_line_distance(r_jb, wc94_magnitude_to_length(magnitude))


def _wc94_length_dimensions(magnitude: float, max_width: float) -> Dimensions:
    length = wc94_magnitude_to_length(magnitude)
    return Dimensions(length, min(length, max_width))


DIMENSION_FUNCTIONS: dict[RuptureScaling, Callable[[float, float], Dimensions]] = {
    RuptureScaling.NSHM_FAULT_WC94_LENGTH: _wc94_length_dimensions,
    RuptureScaling.NSHM_POINT_WC94_LENGTH: _wc94_length_dimensions,
    RuptureScaling.PEER: lambda magnitude, max_width: area_constrained_dimensions(
        peer_magnitude_to_area(magnitude), 1.0, max_width
    ),
    RuptureScaling.LEONARD_2014: lambda magnitude, max_width: area_constrained_dimensions(
        leonard_magnitude_to_area(magnitude), 1.0, max_width
    ),
    RuptureScaling.CONTRERAS_INTERFACE_2017: lambda magnitude, max_width: area_constrained_dimensions(
        contreras_interface_magnitude_to_area(magnitude),
        contreras_interface_magnitude_to_aspect_ratio(magnitude),
        max_width,
    ),
}
