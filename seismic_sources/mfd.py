"""Magnitude-frequency distributions."""

import dataclasses
from collections.abc import Iterator

import numpy as np
import numpy.typing as npt

from seismic_sources.errors import ConfigurationError


def _read_only(values: npt.ArrayLike) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


@dataclasses.dataclass(frozen=True, eq=False)
class MagnitudeFrequencyDistribution:
    """An immutable magnitude-frequency distribution.

    Attributes
    ----------
    magnitudes : np.ndarray
        The magnitude bins, strictly increasing.
    rates : np.ndarray
        The annual rate of each magnitude bin.
    floats : bool
        True if ruptures in this distribution float over a fault
        surface instead of rupturing the whole surface.
    """

    magnitudes: np.ndarray
    rates: np.ndarray
    floats: bool = False

    def __post_init__(self) -> None:
        """Validate and freeze the magnitude and rate arrays.

        Raises
        ------
        ConfigurationError
            If the arrays are empty, of different lengths, not finite,
            have decreasing magnitudes or negative rates.
        """
        magnitudes = _read_only(self.magnitudes)
        rates = _read_only(self.rates)
        if magnitudes.ndim != 1 or magnitudes.shape != rates.shape:
            raise ConfigurationError(
                "Magnitudes and rates must be one-dimensional arrays of equal length."
            )
        if magnitudes.size == 0:
            raise ConfigurationError("Magnitude-frequency distribution is empty.")
        if not (np.all(np.isfinite(magnitudes)) and np.all(np.isfinite(rates))):
            raise ConfigurationError("Magnitudes and rates must be finite.")
        if np.any(np.diff(magnitudes) <= 0):
            raise ConfigurationError("Magnitudes must be strictly increasing.")
        if np.any(rates < 0):
            raise ConfigurationError("Rates must be non-negative.")
        object.__setattr__(self, "magnitudes", magnitudes)
        object.__setattr__(self, "rates", rates)

    @property
    def size(self) -> int:  # numpydoc ignore=RT01
        """int: The number of magnitude bins."""
        return len(self.magnitudes)

    @property
    def total_rate(self) -> float:  # numpydoc ignore=RT01
        """float: The summed annual rate of all bins."""
        return float(self.rates.sum())

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for magnitude, rate in zip(self.magnitudes, self.rates):
            yield float(magnitude), float(rate)

    def scaled(self, factor: float) -> "MagnitudeFrequencyDistribution":
        """Return a copy of this distribution with every rate multiplied by `factor`.

        Parameters
        ----------
        factor : float
            The rate multiplier.

        Returns
        -------
        MagnitudeFrequencyDistribution
            The scaled distribution.
        """
        return dataclasses.replace(self, rates=self.rates * factor)

    def is_prefix_of(self, magnitudes: npt.ArrayLike) -> bool:
        """Check if the magnitudes of this distribution begin `magnitudes`.

        Parameters
        ----------
        magnitudes : array-like
            A longer list of magnitudes.

        Returns
        -------
        bool
            True if this distribution's magnitudes equal the first
            `size` entries of `magnitudes`.
        """
        magnitudes = np.asarray(magnitudes, dtype=np.float64)
        return len(magnitudes) >= self.size and np.allclose(
            magnitudes[: self.size], self.magnitudes
        )
