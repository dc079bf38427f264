"""Models for floating smaller ruptures over a fault surface."""

import functools
from enum import StrEnum, auto

import numpy as np
import scipy as sp

from seismic_sources.defaults import load_defaults
from seismic_sources.rupture import Rupture
from seismic_sources.rupture_scaling import Dimensions, RuptureScaling
from seismic_sources.surfaces import GriddedSurface, floating_surfaces


@functools.cache
def area_variability() -> tuple[np.ndarray, np.ndarray]:
    """Return the rupture area perturbations and their weights.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        The area scale factors, ``10 ** (epsilon * sigma)`` for
        epsilons evenly spaced between plus and minus the epsilon
        limit, and the normalised normal density weight of each.
    """
    variability = load_defaults()["rupture_variability"]
    limit = variability["epsilon_limit"]
    epsilons = np.linspace(-limit, limit, variability["epsilon_count"])
    weights = sp.stats.norm.pdf(epsilons)
    weights /= weights.sum()
    scales = 10 ** (epsilons * variability["area_sigma"])
    scales.setflags(write=False)
    weights.setflags(write=False)
    return scales, weights


def _scale_area(dimensions: Dimensions, scale: float, max_width: float) -> Dimensions:
    """Scale the area of a rupture, keeping its aspect ratio where the width allows."""
    area = dimensions.length * dimensions.width * scale
    width = min(dimensions.width * np.sqrt(scale), max_width)
    return Dimensions(area / width, width)


class RuptureFloating(StrEnum):
    """Enumeration of rupture floating models.

    OFF
        Every magnitude ruptures the whole surface.
    NSHM
        Ruptures span the full down-dip width and step along strike.
    STRIKE_ONLY
        Ruptures have the scaled length and width, pinned to the upper
        edge and stepping along strike.
    FULL
        Ruptures have the scaled length and width and are tiled along
        strike and down dip.
    """

    OFF = auto()
    NSHM = auto()
    STRIKE_ONLY = auto()
    FULL = auto()

    def _floaters(
        self, surface: GriddedSurface, dimensions: Dimensions
    ) -> list[GriddedSurface]:
        if self == RuptureFloating.NSHM:
            return floating_surfaces(surface, dimensions.length, surface.width())
        return floating_surfaces(
            surface,
            dimensions.length,
            dimensions.width,
            down_dip=self == RuptureFloating.FULL,
        )

    def create_floating_ruptures(
        self,
        surface: GriddedSurface,
        scaling: RuptureScaling,
        magnitude: float,
        rate: float,
        rake: float,
        variability: bool,
    ) -> list[Rupture]:
        """Create the floating ruptures of one magnitude.

        Parameters
        ----------
        surface : GriddedSurface
            The parent surface.
        scaling : RuptureScaling
            The model giving rupture dimensions for the magnitude.
        magnitude : float
            The magnitude of the ruptures.
        rate : float
            The total annual rate of the ruptures.
        rake : float
            The rake of the ruptures (degrees).
        variability : bool
            If True, float ruptures of several areas about the scaled
            area, weighting each area by the normal distribution.

        Returns
        -------
        list[Rupture]
            The floating ruptures, whose rates sum to `rate`.
        """
        if self == RuptureFloating.OFF:
            return [Rupture(magnitude, rate, rake, surface)]

        max_width = surface.width()
        dimensions = scaling.dimensions(magnitude, max_width)
        if variability:
            scales, weights = area_variability()
            sizes = [
                (_scale_area(dimensions, scale, max_width), weight)
                for scale, weight in zip(scales, weights)
            ]
        else:
            sizes = [(dimensions, 1.0)]

        ruptures = []
        for size, weight in sizes:
            floaters = self._floaters(surface, size)
            floater_rate = rate * weight / len(floaters)
            ruptures.extend(
                Rupture(magnitude, floater_rate, rake, floater) for floater in floaters
            )
        return ruptures
