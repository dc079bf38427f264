"""Collections of point sources on a grid of locations.

Every location in a grid source set has its own magnitude-frequency
distribution and, optionally, its own focal mechanism weights. The
locations share one `DepthModel`, built once over the magnitudes of
the longest distribution, so that each point source only indexes into
the shared lookup arrays.
"""

import dataclasses
import logging
from collections.abc import Iterator, Mapping
from typing import Any, Self

import numpy as np
import numpy.typing as npt

from seismic_sources import log_utils, validation
from seismic_sources.depth_model import DepthModel
from seismic_sources.errors import ConfigurationError
from seismic_sources.focal_mechanism import FocalMechanism
from seismic_sources.mfd import MagnitudeFrequencyDistribution
from seismic_sources.point_sources import PointSource, PointSourceType, point_source
from seismic_sources.rupture_scaling import RuptureScaling
from seismic_sources.sources import SourceType


@dataclasses.dataclass(frozen=True, eq=False)
class GridSourceSet:
    """A collection of point sources sharing a depth model.

    Attributes
    ----------
    name : str
        The name of the set.
    id : int
        The identifier of the set.
    weight : float
        The logic tree weight of the set.
    source_type : SourceType
        The type of the sources in the set.
    locations : np.ndarray
        The (n, 2) array of (lat, lon) source locations.
    distributions : tuple[MagnitudeFrequencyDistribution, ...]
        The distribution of each location.
    mechanism_maps : tuple[Mapping[FocalMechanism, float], ...]
        The focal mechanism weights of each location.
    rupture_scaling : RuptureScaling
        The rupture scaling model of every source.
    depth_model : DepthModel
        The shared magnitude-depth lookup.
    point_type : PointSourceType
        The point source model used for every location.
    strike : float | None
        The strike of fixed strike sources (degrees).
    """

    name: str
    id: int
    weight: float
    source_type: SourceType
    locations: np.ndarray
    distributions: tuple[MagnitudeFrequencyDistribution, ...]
    mechanism_maps: tuple[Mapping[FocalMechanism, float], ...]
    rupture_scaling: RuptureScaling
    depth_model: DepthModel
    point_type: PointSourceType
    strike: float | None = None

    def source(self, index: int) -> PointSource:
        """Create the point source at a location.

        Parameters
        ----------
        index : int
            The index of the location.

        Returns
        -------
        PointSource
            The point source.
        """
        return point_source(
            self.point_type,
            self.locations[index],
            self.distributions[index],
            self.mechanism_maps[index],
            self.rupture_scaling,
            self.depth_model,
            self.source_type,
            self.strike,
        )

    def __len__(self) -> int:
        return len(self.locations)

    def __iter__(self) -> Iterator[PointSource]:
        for index in range(len(self)):
            yield self.source(index)


class GridSourceSetBuilder:
    """Single-use builder of grid source sets.

    Examples
    --------
    >>> grid = (
    ...     GridSourceSetBuilder()
    ...     .name("Background seismicity")
    ...     .id(0)
    ...     .weight(1.0)
    ...     .depth_map({10.0: {5.0: 1.0}})
    ...     .max_depth(14.0)
    ...     .mechanisms({FocalMechanism.STRIKE_SLIP: 1.0})
    ...     .rupture_scaling(RuptureScaling.NSHM_POINT_WC94_LENGTH)
    ...     .point_type(PointSourceType.FINITE)
    ...     .location([-43.5, 172.6], MagnitudeFrequencyDistribution([5.0, 5.5], [1e-2, 1e-3]))
    ...     .build()
    ... )
    """

    REQUIRED_FIELDS = (
        "name",
        "id",
        "weight",
        "depth_map",
        "max_depth",
        "mechanisms",
        "rupture_scaling",
        "point_type",
    )

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._locations: list[np.ndarray] = []
        self._distributions: list[MagnitudeFrequencyDistribution] = []
        self._mechanism_maps: list[Mapping[FocalMechanism, float] | None] = []
        self._built = False

    def _set(self, field: str, value: Any) -> Self:
        if field in self._fields:
            raise ConfigurationError(f"GridSourceSetBuilder {field} already set")
        self._fields[field] = value
        return self

    def name(self, name: str) -> Self:
        return self._set("name", validation.check_name(name))

    def id(self, id: int) -> Self:
        return self._set("id", int(id))

    def weight(self, weight: float) -> Self:
        return self._set("weight", validation.check_branch_weight(weight))

    def source_type(self, source_type: SourceType) -> Self:
        try:
            source_type = SourceType(source_type)
        except ValueError as e:
            raise ConfigurationError(f"Unknown source type: {source_type!r}") from e
        if source_type not in (SourceType.GRID, SourceType.AREA, SourceType.SLAB):
            raise ConfigurationError(f"Point sources cannot be of type {source_type}")
        return self._set("source_type", source_type)

    def depth_map(self, depth_map: Mapping[float, Mapping[float, float]]) -> Self:
        """Set the magnitude-depth map.

        Parameters
        ----------
        depth_map : Mapping[float, Mapping[float, float]]
            A mapping from magnitude cutoff to a mapping of depth to
            weight.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        ConfigurationError
            If the map is empty, a cutoff is out of range or the weights
            of a cutoff do not sum to one. Depths are checked against
            the source type on `build()`.
        """
        if not depth_map:
            raise ConfigurationError("Magnitude-depth map is empty")
        checked_map = {}
        for cutoff, depth_weights in sorted(depth_map.items()):
            checked_map[validation.check_magnitude_cutoff(cutoff)] = (
                validation.check_weights(depth_weights)
            )
        return self._set("depth_map", checked_map)

    def max_depth(self, max_depth: float) -> Self:
        return self._set("max_depth", validation.check_max_depth(max_depth))

    def mechanisms(self, mechanism_weights: Mapping[FocalMechanism, float]) -> Self:
        """Set the default focal mechanism weights.

        Parameters
        ----------
        mechanism_weights : Mapping[FocalMechanism, float]
            The weight of each mechanism, summing to one.

        Returns
        -------
        Self
            This builder.
        """
        return self._set("mechanisms", _check_mechanisms(mechanism_weights))

    def rupture_scaling(self, rupture_scaling: RuptureScaling) -> Self:
        try:
            rupture_scaling = RuptureScaling(rupture_scaling)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown rupture scaling: {rupture_scaling!r}"
            ) from e
        return self._set("rupture_scaling", rupture_scaling)

    def point_type(self, point_type: PointSourceType) -> Self:
        try:
            point_type = PointSourceType(point_type)
        except ValueError as e:
            raise ConfigurationError(f"Unknown point source type: {point_type!r}") from e
        return self._set("point_type", point_type)

    def strike(self, strike: float | None) -> Self:
        """Set the strike of the sources.

        Setting a strike makes every source a fixed strike source. A
        strike of None or NaN leaves the point type unchanged.

        Parameters
        ----------
        strike : float | None
            The strike (degrees).

        Returns
        -------
        Self
            This builder.
        """
        if strike is None or np.isnan(strike):
            return self._set("strike", None)
        return self._set("strike", validation.check_strike(strike))

    def location(
        self,
        point: npt.ArrayLike,
        mfd: MagnitudeFrequencyDistribution,
        mechanism_weights: Mapping[FocalMechanism, float] | None = None,
    ) -> Self:
        """Add a source location.

        Parameters
        ----------
        point : array-like
            The (lat, lon) location.
        mfd : MagnitudeFrequencyDistribution
            The distribution of the location.
        mechanism_weights : Mapping[FocalMechanism, float] | None
            Mechanism weights for this location, or None to use the
            default weights.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        ConfigurationError
            If the location is not a finite (lat, lon) pair or the
            mechanism weights are invalid.
        """
        point = np.asarray(point, dtype=np.float64)
        if point.shape != (2,) or not np.all(np.isfinite(point)):
            raise ConfigurationError(f"Invalid location: {point}")
        self._locations.append(point)
        self._distributions.append(mfd)
        self._mechanism_maps.append(
            None if mechanism_weights is None else _check_mechanisms(mechanism_weights)
        )
        return self

    def build(self) -> GridSourceSet:
        """Build the grid source set.

        Returns
        -------
        GridSourceSet
            The grid source set.

        Raises
        ------
        ConfigurationError
            If the builder was already used or is incomplete, if a
            depth is out of range for the source type or exceeds the
            maximum depth, or if the distributions do not share their
            magnitudes.
        """
        if self._built:
            raise ConfigurationError(
                "This GridSourceSetBuilder instance has already been used"
            )
        for field in self.REQUIRED_FIELDS:
            if field not in self._fields:
                raise ConfigurationError(f"GridSourceSetBuilder {field} not set")
        if not self._locations:
            raise ConfigurationError("GridSourceSetBuilder has no locations")

        fields = self._fields
        source_type = fields.get("source_type", SourceType.GRID)
        check_depth = (
            validation.check_slab_depth
            if source_type == SourceType.SLAB
            else validation.check_crustal_depth
        )
        depth_map = {
            cutoff: {check_depth(depth): weight for depth, weight in depths.items()}
            for cutoff, depths in fields["depth_map"].items()
        }
        deepest = max(max(depths) for depths in depth_map.values())
        if deepest > fields["max_depth"]:
            raise ConfigurationError(
                f"Depth {deepest} is deeper than the maximum depth {fields['max_depth']}"
            )

        master_magnitudes = max(self._distributions, key=len).magnitudes
        for distribution in self._distributions:
            if not distribution.is_prefix_of(master_magnitudes):
                raise ConfigurationError(
                    "Every distribution must share the magnitudes of the longest."
                )

        point_type = fields["point_type"]
        strike = fields.get("strike")
        if strike is not None:
            point_type = PointSourceType.FIXED_STRIKE
        elif point_type == PointSourceType.FIXED_STRIKE:
            raise ConfigurationError("Fixed strike point sources require a strike.")

        depth_model = DepthModel.create(
            depth_map, master_magnitudes, fields["max_depth"]
        )
        self._built = True
        grid = GridSourceSet(
            name=fields["name"],
            id=fields["id"],
            weight=fields["weight"],
            source_type=source_type,
            locations=np.array(self._locations),
            distributions=tuple(self._distributions),
            mechanism_maps=tuple(
                fields["mechanisms"] if mechanisms is None else mechanisms
                for mechanisms in self._mechanism_maps
            ),
            rupture_scaling=fields["rupture_scaling"],
            depth_model=depth_model,
            point_type=point_type,
            strike=strike,
        )
        log_utils.log(
            "built grid source set",
            None,
            logging.DEBUG,
            name=grid.name,
            locations=len(grid),
            point_type=str(point_type),
            depth_entries=len(depth_model),
        )
        return grid


def _check_mechanisms(
    mechanism_weights: Mapping[FocalMechanism, float],
) -> dict[FocalMechanism, float]:
    """Validate focal mechanism weights, filling in missing mechanisms with zero."""
    weights = validation.check_weights(mechanism_weights)
    for mechanism in weights:
        if not isinstance(mechanism, FocalMechanism):
            raise ConfigurationError(f"Unknown focal mechanism: {mechanism!r}")
    return {mechanism: weights.get(mechanism, 0.0) for mechanism in FocalMechanism}
