"""Point sources of earthquakes.

A point source enumerates one rupture for every combination of focal
mechanism, magnitude and depth to top of rupture it supports. Ruptures
are addressed by index, with the index space partitioned by mechanism
in the order strike-slip, reverse, normal. Within a mechanism block the
index modulo the number of magnitude-depth combinations selects the
magnitude and depth from the source's `DepthModel`. A mechanism with
zero weight has an empty block, its ruptures are omitted altogether.

Finite point sources represent each dipping rupture twice, once as if
sites were on its footwall and once as if they were on its hanging
wall, each with half the mechanism weight. The index layout is then

    SS-FW | RV-FW | RV-HW | NR-FW | NR-HW

`rupture(index)` is a pure function of the index, so every rupture
produced by iteration is an independent immutable value and sources can
be enumerated concurrently.

Classes
-------
PointSourceType:
    Enumeration of point source models.
PointSource:
    A point source with no finite extent.
FinitePointSource:
    A point source approximating finite ruptures of unknown strike.
FixedStrikePointSource:
    A point source of finite ruptures with a known strike.
"""

import dataclasses
import functools
from collections.abc import Iterator, Mapping
from enum import StrEnum, auto
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from seismic_sources import geodesy
from seismic_sources.depth_model import DepthModel
from seismic_sources.errors import ConfigurationError
from seismic_sources.focal_mechanism import FocalMechanism
from seismic_sources.mfd import MagnitudeFrequencyDistribution
from seismic_sources.rupture import Rupture
from seismic_sources.rupture_scaling import Dimensions, RuptureScaling
from seismic_sources.sources import SourceType
from seismic_sources.surfaces import FiniteSurface, FixedStrikeSurface, PointSurface


class PointSourceType(StrEnum):
    """Enumeration of point source models."""

    POINT = auto()
    FINITE = auto()
    FIXED_STRIKE = auto()


class IndexPartition(NamedTuple):
    """Boundaries of the mechanism blocks in the rupture index space."""

    strike_slip_end: int
    """One past the last strike-slip index."""
    reverse_end: int
    """One past the last reverse index."""
    size: int
    """The total number of ruptures."""
    footwall_reverse_end: int
    """One past the last footwall reverse index."""
    footwall_normal_end: int
    """One past the last footwall normal index."""


@dataclasses.dataclass(frozen=True, eq=False)
class PointSource:
    """A point source with no finite extent.

    Attributes
    ----------
    point : np.ndarray
        The (lat, lon) location of the source.
    mfd : MagnitudeFrequencyDistribution
        The magnitude-frequency distribution of the source.
    mechanism_weights : Mapping[FocalMechanism, float]
        The weight of each focal mechanism. Missing mechanisms have
        zero weight. Weights are assumed to sum to one.
    rupture_scaling : RuptureScaling
        The rupture scaling model, used to correct distances and to
        size finite ruptures.
    depth_model : DepthModel
        The magnitude-depth lookup shared by a collection of sources.
    source_type : SourceType
        The type of the collection this source belongs to.
    """

    # Footwall and hanging wall copies of each dip-slip rupture.
    DIP_SLIP_REPRESENTATIONS = 1

    point: np.ndarray
    mfd: MagnitudeFrequencyDistribution
    mechanism_weights: Mapping[FocalMechanism, float]
    rupture_scaling: RuptureScaling
    depth_model: DepthModel
    source_type: SourceType = SourceType.GRID

    def __post_init__(self) -> None:
        """Freeze the source location and check the distribution fits the depth model."""
        point = np.array(self.point, dtype=np.float64)[:2]
        point.setflags(write=False)
        object.__setattr__(self, "point", point)
        # Raises early if the distribution is larger than the depth model.
        _ = self.mag_depth_size

    @property
    def name(self) -> str:  # numpydoc ignore=RT01
        """str: The name of the source, its class and (lon, lat) location."""
        lat, lon = self.point
        return f"{type(self).__name__}: {lon:.3f}, {lat:.3f}"

    @property
    def id(self) -> int:  # numpydoc ignore=RT01
        """int: Always -1, point sources are addressed by their index in a collection."""
        return -1

    @property
    def type(self) -> SourceType:  # numpydoc ignore=RT01
        """SourceType: The type of the source."""
        return self.source_type

    @functools.cached_property
    def mag_depth_size(self) -> int:  # numpydoc ignore=RT01
        """int: The number of magnitude-depth combinations per mechanism block."""
        return self.depth_model.mag_depth_size(self.mfd.size)

    def _mechanism_count(self, mechanism: FocalMechanism) -> int:
        """Count the ruptures of one mechanism, zero if it has no weight."""
        weight = self.mechanism_weights.get(mechanism, 0.0)
        count = int(np.ceil(weight)) * self.mag_depth_size
        if mechanism != FocalMechanism.STRIKE_SLIP:
            count *= self.DIP_SLIP_REPRESENTATIONS
        return count

    @functools.cached_property
    def index_partition(self) -> IndexPartition:  # numpydoc ignore=RT01
        """IndexPartition: The mechanism block boundaries of the rupture indices."""
        strike_slip_count = self._mechanism_count(FocalMechanism.STRIKE_SLIP)
        reverse_count = self._mechanism_count(FocalMechanism.REVERSE)
        normal_count = self._mechanism_count(FocalMechanism.NORMAL)
        strike_slip_end = strike_slip_count
        reverse_end = strike_slip_end + reverse_count
        return IndexPartition(
            strike_slip_end=strike_slip_end,
            reverse_end=reverse_end,
            size=reverse_end + normal_count,
            footwall_reverse_end=strike_slip_end + reverse_count // 2,
            footwall_normal_end=reverse_end + normal_count // 2,
        )

    def size(self) -> int:
        """Return the number of ruptures of the source.

        Returns
        -------
        int
            The number of ruptures.
        """
        return self.index_partition.size

    def __len__(self) -> int:
        return self.size()

    def location(self, site: npt.ArrayLike) -> np.ndarray:
        """Return the location of the source.

        Parameters
        ----------
        site : array-like
            The site location, ignored as the source is a point.

        Returns
        -------
        np.ndarray
            The (lat, lon) location of the source.
        """
        return self.point

    def mfds(self) -> list[MagnitudeFrequencyDistribution]:
        return [self.mfd]

    def mechanism_for_index(self, index: int) -> FocalMechanism:
        """Find the focal mechanism of a rupture.

        Parameters
        ----------
        index : int
            The rupture index.

        Returns
        -------
        FocalMechanism
            The mechanism of the rupture at `index`.
        """
        partition = self.index_partition
        if index < partition.strike_slip_end:
            return FocalMechanism.STRIKE_SLIP
        elif index < partition.reverse_end:
            return FocalMechanism.REVERSE
        return FocalMechanism.NORMAL

    def _mechanism_weight(self, mechanism: FocalMechanism) -> float:
        return self.mechanism_weights.get(mechanism, 0.0)

    def _surface(
        self, index: int, magnitude: float, z_top: float, mechanism: FocalMechanism
    ) -> PointSurface:
        return PointSurface(
            self.point, self.rupture_scaling, magnitude, mechanism.dip, z_top
        )

    def rupture(self, index: int) -> Rupture:
        """Build the rupture at an index.

        Parameters
        ----------
        index : int
            The rupture index, in [0, size()).

        Returns
        -------
        Rupture
            The rupture. Its rate is the distribution rate of its
            magnitude, scaled by its depth weight and mechanism weight.

        Raises
        ------
        IndexError
            If the index is out of range.
        """
        if not 0 <= index < self.size():
            raise IndexError(
                f"Rupture index {index} out of range for {self.size()} ruptures."
            )
        mag_depth_index = index % self.mag_depth_size
        magnitude_index = self.depth_model.magnitude_indices[mag_depth_index]
        magnitude = float(self.mfd.magnitudes[magnitude_index])
        rate = float(self.mfd.rates[magnitude_index])
        z_top = float(self.depth_model.depths[mag_depth_index])
        z_top_weight = float(self.depth_model.weights[mag_depth_index])

        mechanism = self.mechanism_for_index(index)
        return Rupture(
            magnitude,
            rate * z_top_weight * self._mechanism_weight(mechanism),
            mechanism.rake,
            self._surface(index, magnitude, z_top, mechanism),
        )

    def __iter__(self) -> Iterator[Rupture]:
        for index in range(self.size()):
            yield self.rupture(index)


class _FiniteGeometry(NamedTuple):
    dimensions: Dimensions
    width_dd: float
    width_h: float
    z_bot: float


@dataclasses.dataclass(frozen=True, eq=False)
class FinitePointSource(PointSource):
    """A point source approximating finite ruptures of unknown strike.

    Rupture widths come from the rupture scaling model, limited so
    that ruptures do not extend below the maximum depth of the depth
    model. Reverse and normal ruptures are represented twice, as
    footwall and hanging wall ruptures, each with half the weight of
    the mechanism.
    """

    DIP_SLIP_REPRESENTATIONS = 2

    def is_on_footwall(self, index: int) -> bool:
        """Check if a rupture is the footwall representation.

        Parameters
        ----------
        index : int
            The rupture index.

        Returns
        -------
        bool
            True for strike-slip ruptures and the first half of the
            reverse and normal blocks.
        """
        partition = self.index_partition
        if index < partition.footwall_reverse_end:
            return True
        elif index < partition.reverse_end:
            return False
        return index < partition.footwall_normal_end

    def _mechanism_weight(self, mechanism: FocalMechanism) -> float:
        weight = self.mechanism_weights.get(mechanism, 0.0)
        if mechanism != FocalMechanism.STRIKE_SLIP:
            weight *= 0.5
        return weight

    def _geometry(
        self, magnitude: float, z_top: float, mechanism: FocalMechanism
    ) -> _FiniteGeometry:
        """Compute the size of a rupture with its top at `z_top`."""
        dip = np.radians(mechanism.dip)
        max_width = (self.depth_model.max_depth - z_top) / np.sin(dip)
        dimensions = self.rupture_scaling.dimensions(magnitude, max_width)
        width_dd = dimensions.width
        return _FiniteGeometry(
            dimensions,
            width_dd,
            float(width_dd * np.cos(dip)),
            float(z_top + width_dd * np.sin(dip)),
        )

    def _surface(
        self, index: int, magnitude: float, z_top: float, mechanism: FocalMechanism
    ) -> FiniteSurface:
        geometry = self._geometry(magnitude, z_top, mechanism)
        return FiniteSurface(
            location=self.point,
            rupture_scaling=self.rupture_scaling,
            magnitude=magnitude,
            dip_angle=mechanism.dip,
            z_top=z_top,
            z_bot=geometry.z_bot,
            width_h=geometry.width_h,
            width_dd=geometry.width_dd,
            footwall=self.is_on_footwall(index),
        )


@dataclasses.dataclass(frozen=True, eq=False)
class FixedStrikePointSource(FinitePointSource):
    """A point source of finite ruptures with a known strike.

    Ruptures are rectangles centred on the source with the scaled
    rupture length. The footwall and hanging wall representations of a
    dipping rupture are mirror images dipping in opposite directions.

    Attributes
    ----------
    strike : float
        The strike of the ruptures (degrees).
    """

    strike: float = dataclasses.field(kw_only=True)

    def _corners(
        self,
        z_top: float,
        geometry: _FiniteGeometry,
        mechanism: FocalMechanism,
        footwall: bool,
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Find the corners p1 -> p2 (top) and p4 <- p3 (bottom) of a rupture."""
        centre = np.array([self.point[0], self.point[1], z_top])
        half_length = geometry.dimensions.length / 2
        end_ahead = geodesy.location_along(centre, self.strike, half_length)
        end_behind = geodesy.location_along(centre, self.strike + 180, half_length)
        if footwall:
            p1, p2 = end_ahead, end_behind
        else:
            p1, p2 = end_behind, end_ahead

        if mechanism == FocalMechanism.STRIKE_SLIP:
            # Vertical, so the bottom edge lies directly below the top
            # edge on either representation.
            p3 = np.array([p2[0], p2[1], geometry.z_bot])
            p4 = np.array([p1[0], p1[1], geometry.z_bot])
            return p1, p2, p3, p4

        dip_direction = geodesy.dip_direction(p1, p2)
        depth_change = geometry.z_bot - z_top
        p3 = geodesy.location_along(p2, dip_direction, geometry.width_h, depth_change)
        p4 = geodesy.location_along(p1, dip_direction, geometry.width_h, depth_change)
        return p1, p2, p3, p4

    def _surface(
        self, index: int, magnitude: float, z_top: float, mechanism: FocalMechanism
    ) -> FixedStrikeSurface:
        geometry = self._geometry(magnitude, z_top, mechanism)
        footwall = self.is_on_footwall(index)
        p1, p2, p3, p4 = self._corners(z_top, geometry, mechanism, footwall)
        return FixedStrikeSurface(
            location=self.point,
            dip_angle=mechanism.dip,
            z_top=z_top,
            z_bot=geometry.z_bot,
            width_h=geometry.width_h,
            width_dd=geometry.width_dd,
            footwall=footwall,
            p1=p1,
            p2=p2,
            p3=p3,
            p4=p4,
        )


def point_source(
    point_type: PointSourceType,
    point: npt.ArrayLike,
    mfd: MagnitudeFrequencyDistribution,
    mechanism_weights: Mapping[FocalMechanism, float],
    rupture_scaling: RuptureScaling,
    depth_model: DepthModel,
    source_type: SourceType = SourceType.GRID,
    strike: float | None = None,
) -> PointSource:
    """Create a point source of the given model.

    Parameters
    ----------
    point_type : PointSourceType
        The point source model.
    point : array-like
        The (lat, lon) location of the source.
    mfd : MagnitudeFrequencyDistribution
        The magnitude-frequency distribution of the source.
    mechanism_weights : Mapping[FocalMechanism, float]
        The weight of each focal mechanism.
    rupture_scaling : RuptureScaling
        The rupture scaling model.
    depth_model : DepthModel
        The magnitude-depth lookup.
    source_type : SourceType
        The type of the collection the source belongs to.
    strike : float | None
        The strike of the source (degrees), required for fixed strike
        sources and ignored otherwise.

    Returns
    -------
    PointSource
        The point source.

    Raises
    ------
    ConfigurationError
        If a fixed strike source is requested without a strike.
    """
    if point_type == PointSourceType.POINT:
        return PointSource(
            point, mfd, mechanism_weights, rupture_scaling, depth_model, source_type
        )
    elif point_type == PointSourceType.FINITE:
        return FinitePointSource(
            point, mfd, mechanism_weights, rupture_scaling, depth_model, source_type
        )
    if strike is None:
        raise ConfigurationError("Fixed strike point sources require a strike.")
    return FixedStrikePointSource(
        point,
        mfd,
        mechanism_weights,
        rupture_scaling,
        depth_model,
        source_type,
        strike=strike,
    )
