"""Magnitude-dependent depth distributions for point sources.

A depth model flattens a magnitude-depth map, e.g.

    [6.5::[1.0:0.4, 3.0:0.5, 5.0:0.1]; 10.0::[1.0:0.1, 5.0:0.9]]

into three parallel lookup arrays over a master list of magnitudes so
that point sources never traverse the map during enumeration.
Magnitude cutoffs are exclusive upper bounds, so a magnitude m uses the
depths of the smallest cutoff with m < cutoff. For the map above and
the magnitudes [5.0, 5.5, 6.0, 6.5, 7.0] the arrays are

    magnitude_indices = [0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 4, 4]
    depths            = [1, 3, 5, 1, 3, 5, 1, 3, 5, 1, 5, 1, 5]
    weights           = [.4, .5, .1, .4, .5, .1, .4, .5, .1, .1, .9, .1, .9]

One depth model is shared by every point source of a collection. Each
point source uses only the prefix of the arrays covering its own
magnitudes (see `DepthModel.mag_depth_size`).
"""

import dataclasses
import logging
from collections.abc import Mapping

import numpy as np
import numpy.typing as npt

from seismic_sources import log_utils
from seismic_sources.errors import ConfigurationError


def _read_only(values: npt.ArrayLike, dtype: type) -> np.ndarray:
    array = np.array(values, dtype=dtype)
    array.setflags(write=False)
    return array


@dataclasses.dataclass(frozen=True, eq=False)
class DepthModel:
    """Flattened magnitude-depth lookup arrays.

    Attributes
    ----------
    max_depth : float
        The maximum depth of ruptures (in km), used to limit the width
        of finite point sources.
    master_magnitudes : np.ndarray
        The ascending magnitudes the model covers.
    magnitude_indices : np.ndarray
        The index into `master_magnitudes` of each entry.
    depths : np.ndarray
        The depth to top of rupture of each entry (in km).
    weights : np.ndarray
        The weight of each entry's depth.
    """

    max_depth: float
    master_magnitudes: np.ndarray
    magnitude_indices: np.ndarray
    depths: np.ndarray
    weights: np.ndarray

    @classmethod
    def create(
        cls,
        mag_depth_map: Mapping[float, Mapping[float, float]],
        master_magnitudes: npt.ArrayLike,
        max_depth: float,
    ) -> "DepthModel":
        """Build a depth model from a magnitude-depth map.

        Parameters
        ----------
        mag_depth_map : Mapping[float, Mapping[float, float]]
            A mapping from magnitude cutoff to a mapping of depth to
            weight. Depths are used in their iteration order.
        master_magnitudes : array-like
            The ascending, unique magnitudes to cover.
        max_depth : float
            The maximum depth of ruptures (in km).

        Returns
        -------
        DepthModel
            The depth model.

        Raises
        ------
        ConfigurationError
            If a master magnitude has no magnitude cutoff above it.
        """
        master_magnitudes = np.asarray(master_magnitudes, dtype=np.float64)
        cutoffs = np.array(sorted(mag_depth_map), dtype=np.float64)
        buckets = [mag_depth_map[cutoff] for cutoff in sorted(mag_depth_map)]
        bucket_indices = np.searchsorted(cutoffs, master_magnitudes, side="right")

        magnitude_indices = []
        depths = []
        weights = []
        for i, (magnitude, bucket_index) in enumerate(
            zip(master_magnitudes, bucket_indices)
        ):
            if bucket_index == len(cutoffs):
                raise ConfigurationError(
                    f"No magnitude cutoff above magnitude {magnitude} in depth map."
                )
            for depth, weight in buckets[bucket_index].items():
                magnitude_indices.append(i)
                depths.append(depth)
                weights.append(weight)

        log_utils.log(
            "created depth model",
            None,
            logging.DEBUG,
            magnitudes=len(master_magnitudes),
            entries=len(depths),
            max_depth=max_depth,
        )
        return cls(
            max_depth=float(max_depth),
            master_magnitudes=_read_only(master_magnitudes, np.float64),
            magnitude_indices=_read_only(magnitude_indices, np.int64),
            depths=_read_only(depths, np.float64),
            weights=_read_only(weights, np.float64),
        )

    def __len__(self) -> int:
        return len(self.magnitude_indices)

    def mag_depth_size(self, mfd_size: int) -> int:
        """Count the entries needed to cover the first `mfd_size` magnitudes.

        Parameters
        ----------
        mfd_size : int
            The number of magnitudes in a point source's distribution.

        Returns
        -------
        int
            One past the last entry whose magnitude index is
            `mfd_size - 1`.

        Raises
        ------
        ConfigurationError
            If the distribution has more magnitudes than the model.
        """
        if not 0 < mfd_size <= len(self.master_magnitudes):
            raise ConfigurationError(
                f"Distribution of size {mfd_size} does not fit a depth model "
                f"with {len(self.master_magnitudes)} magnitudes."
            )
        return int(np.searchsorted(self.magnitude_indices, mfd_size - 1, side="right"))
