"""Fault, subduction interface and cluster sources.

Fault and interface sources materialise every rupture once, at
construction, from a gridded surface and a list of
magnitude-frequency distributions. Distributions that float are tiled
over the surface by a `RuptureFloating` model, the rest rupture the
whole surface. The rupture tuple is immutable and may be shared
between threads.

Sources are assembled by single-use builders. Each setter validates
its value immediately and may be called once, and `build()` checks
that every required field was set.

Classes
-------
FaultSource:
    A crustal fault source.
InterfaceSource:
    A subduction interface source.
FaultSourceSet:
    A named, weighted group of fault sources.
ClusterSource:
    A group of faults that rupture together.
FaultSourceBuilder, InterfaceSourceBuilder, ClusterSourceBuilder:
    Single-use builders of the sources above.
"""

import dataclasses
import logging
from collections.abc import Iterable, Iterator
from typing import Any, Self

import numpy as np
import numpy.typing as npt

from seismic_sources import geodesy, log_utils, validation
from seismic_sources.defaults import load_defaults
from seismic_sources.errors import ConfigurationError, UnsupportedCapabilityError
from seismic_sources.mfd import MagnitudeFrequencyDistribution
from seismic_sources.rupture import Rupture
from seismic_sources.rupture_floating import RuptureFloating
from seismic_sources.rupture_scaling import RuptureScaling
from seismic_sources.sources import SourceType
from seismic_sources.surfaces import GriddedSurface


def _create_ruptures(
    name: str,
    surface: GriddedSurface,
    distributions: Iterable[MagnitudeFrequencyDistribution],
    rake: float,
    rupture_scaling: RuptureScaling,
    rupture_floating: RuptureFloating,
    rupture_variability: bool,
) -> tuple[Rupture, ...]:
    """Create the ruptures of every distribution bin with a significant rate.

    Parameters
    ----------
    name : str
        The name of the source, for logging.
    surface : GriddedSurface
        The surface of the source.
    distributions : Iterable[MagnitudeFrequencyDistribution]
        The distributions of the source.
    rake : float
        The rake of the ruptures (degrees).
    rupture_scaling : RuptureScaling
        The model sizing floating ruptures.
    rupture_floating : RuptureFloating
        The model tiling floating ruptures over the surface.
    rupture_variability : bool
        If True, float ruptures of several areas.

    Returns
    -------
    tuple[Rupture, ...]
        The ruptures, in distribution then magnitude order.
    """
    min_rate = load_defaults()["min_rupture_rate"]
    ruptures: list[Rupture] = []
    for distribution in distributions:
        for magnitude, rate in distribution:
            if rate < min_rate:
                log_utils.log(
                    "skipped low rate magnitude",
                    None,
                    logging.DEBUG,
                    source=name,
                    magnitude=magnitude,
                    rate=rate,
                )
                continue
            if distribution.floats:
                ruptures.extend(
                    rupture_floating.create_floating_ruptures(
                        surface,
                        rupture_scaling,
                        magnitude,
                        rate,
                        rake,
                        rupture_variability,
                    )
                )
            else:
                ruptures.append(Rupture(magnitude, rate, rake, surface))
    return tuple(ruptures)


def _check_model(model_type: type, model: Any) -> Any:
    """Convert a model name or member to a member of `model_type`."""
    try:
        return model_type(model)
    except ValueError as e:
        raise ConfigurationError(f"Unknown {model_type.__name__}: {model!r}") from e


@dataclasses.dataclass(frozen=True, eq=False)
class FaultSource:
    """A crustal fault source.

    Attributes
    ----------
    name : str
        The name of the source.
    id : int
        The identifier of the source.
    trace : np.ndarray
        The fault trace in (lat, lon[, depth]) format.
    dip : float
        The dip of the fault (degrees).
    width : float
        The down-dip width of the fault (km).
    depth : float
        The depth to the top of the fault (km).
    rake : float
        The rake of the fault (degrees).
    distributions : tuple[MagnitudeFrequencyDistribution, ...]
        The magnitude-frequency distributions of the fault.
    spacing : float
        The grid spacing of the surface (km).
    rupture_scaling : RuptureScaling
        The model sizing floating ruptures.
    rupture_floating : RuptureFloating
        The model tiling floating ruptures over the surface.
    rupture_variability : bool
        If True, float ruptures of several areas.
    surface : GriddedSurface
        The surface of the fault.
    ruptures : tuple[Rupture, ...]
        Every rupture of the source, created at construction.
    """

    name: str
    id: int
    trace: np.ndarray
    dip: float
    width: float
    depth: float
    rake: float
    distributions: tuple[MagnitudeFrequencyDistribution, ...]
    spacing: float
    rupture_scaling: RuptureScaling
    rupture_floating: RuptureFloating
    rupture_variability: bool
    surface: GriddedSurface
    ruptures: tuple[Rupture, ...] = dataclasses.field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create the ruptures of the source.

        Raises
        ------
        ConfigurationError
            If the source has no ruptures.
        """
        ruptures = _create_ruptures(
            self.name,
            self.surface,
            self.distributions,
            self.rake,
            self.rupture_scaling,
            self.rupture_floating,
            self.rupture_variability,
        )
        if not ruptures:
            raise ConfigurationError(f"{type(self).__name__} has no ruptures")
        object.__setattr__(self, "ruptures", ruptures)
        log_utils.log(
            "built source",
            None,
            logging.DEBUG,
            source=self.name,
            type=str(self.type),
            distributions=len(self.distributions),
            ruptures=len(ruptures),
        )

    @property
    def type(self) -> SourceType:  # numpydoc ignore=RT01
        """SourceType: The type of the source."""
        return SourceType.FAULT

    def size(self) -> int:
        return len(self.ruptures)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Rupture]:
        return iter(self.ruptures)

    def location(self, site: npt.ArrayLike) -> np.ndarray:
        """Return the point of the fault trace closest to a site.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        np.ndarray
            The closest trace point.
        """
        return geodesy.closest_point(site, self.trace)

    def mfds(self) -> list[MagnitudeFrequencyDistribution]:
        return list(self.distributions)


@dataclasses.dataclass(frozen=True, eq=False)
class InterfaceSource(FaultSource):
    """A subduction interface source.

    Attributes
    ----------
    lower_trace : np.ndarray | None
        The lower trace of the interface. Defaults to the lower edge
        of the surface. It is used to locate the source, never to
        build ruptures.
    """

    lower_trace: np.ndarray | None = None

    def __post_init__(self) -> None:
        if self.lower_trace is None:
            object.__setattr__(self, "lower_trace", self.surface.lower_edge())
        super().__post_init__()

    @property
    def type(self) -> SourceType:  # numpydoc ignore=RT01
        """SourceType: The type of the source."""
        return SourceType.INTERFACE

    def location(self, site: npt.ArrayLike) -> np.ndarray:
        """Return the point of either trace closest to a site.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        np.ndarray
            The closest point on the upper or lower trace.
        """
        trace_points = [self.trace[:, :2], self.lower_trace[:, :2]]
        return geodesy.closest_point(site, np.concatenate(trace_points))


class FaultSourceBuilder:
    """Single-use builder of fault sources.

    Examples
    --------
    >>> source = (
    ...     FaultSourceBuilder()
    ...     .name("Wellington")
    ...     .id(1)
    ...     .trace([[-41.0, 175.0], [-41.2, 175.1]])
    ...     .dip(60)
    ...     .width(15)
    ...     .depth(0)
    ...     .rake(90)
    ...     .mfd(MagnitudeFrequencyDistribution([7.0], [1e-3]))
    ...     .surface_spacing(1.0)
    ...     .rupture_scaling(RuptureScaling.NSHM_FAULT_WC94_LENGTH)
    ...     .rupture_floating(RuptureFloating.OFF)
    ...     .rupture_variability(False)
    ...     .build()
    ... )
    """

    REQUIRED_FIELDS = (
        "name",
        "id",
        "trace",
        "dip",
        "width",
        "depth",
        "rake",
        "spacing",
        "rupture_scaling",
        "rupture_floating",
        "rupture_variability",
    )

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._distributions: list[MagnitudeFrequencyDistribution] = []
        self._built = False

    def _set(self, field: str, value: Any) -> Self:
        if field in self._fields:
            raise ConfigurationError(f"{type(self).__name__} {field} already set")
        self._fields[field] = value
        return self

    def _check_depth(self, depth: float) -> float:
        return validation.check_crustal_depth(depth)

    def _check_width(self, width: float) -> float:
        return validation.check_crustal_width(width)

    def name(self, name: str) -> Self:
        return self._set("name", validation.check_name(name))

    def id(self, id: int) -> Self:
        return self._set("id", int(id))

    def trace(self, trace: npt.ArrayLike) -> Self:
        return self._set("trace", validation.check_trace(trace))

    def dip(self, dip: float) -> Self:
        return self._set("dip", validation.check_dip(dip))

    def width(self, width: float) -> Self:
        return self._set("width", self._check_width(width))

    def depth(self, depth: float) -> Self:
        return self._set("depth", self._check_depth(depth))

    def rake(self, rake: float) -> Self:
        return self._set("rake", validation.check_rake(rake))

    def mfd(self, mfd: MagnitudeFrequencyDistribution) -> Self:
        """Add a magnitude-frequency distribution.

        Parameters
        ----------
        mfd : MagnitudeFrequencyDistribution
            The distribution to add.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        ConfigurationError
            If `mfd` is not a distribution.
        """
        if not isinstance(mfd, MagnitudeFrequencyDistribution):
            raise ConfigurationError(f"Expected a distribution, got {mfd!r}")
        self._distributions.append(mfd)
        return self

    def mfds(self, mfds: Iterable[MagnitudeFrequencyDistribution]) -> Self:
        """Add several magnitude-frequency distributions.

        Parameters
        ----------
        mfds : Iterable[MagnitudeFrequencyDistribution]
            The distributions to add, at least one.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        ConfigurationError
            If `mfds` is empty or contains something other than a
            distribution.
        """
        mfds = list(mfds)
        if not mfds:
            raise ConfigurationError("Distribution list is empty")
        for mfd in mfds:
            self.mfd(mfd)
        return self

    def surface_spacing(self, spacing: float) -> Self:
        return self._set("spacing", validation.check_surface_spacing(spacing))

    def rupture_scaling(self, rupture_scaling: RuptureScaling) -> Self:
        return self._set(
            "rupture_scaling", _check_model(RuptureScaling, rupture_scaling)
        )

    def rupture_floating(self, rupture_floating: RuptureFloating) -> Self:
        return self._set(
            "rupture_floating", _check_model(RuptureFloating, rupture_floating)
        )

    def rupture_variability(self, rupture_variability: bool) -> Self:
        if not isinstance(rupture_variability, bool):
            raise ConfigurationError(
                f"Rupture variability must be a bool, got {rupture_variability!r}"
            )
        return self._set("rupture_variability", rupture_variability)

    def _validate_state(self, required_fields: Iterable[str]) -> None:
        """Check the builder is unused and complete, then mark it used.

        Parameters
        ----------
        required_fields : Iterable[str]
            The fields that must have been set.

        Raises
        ------
        ConfigurationError
            If the builder was already used, a required field is not
            set or there are no distributions.
        """
        builder_name = type(self).__name__
        if self._built:
            raise ConfigurationError(f"This {builder_name} instance has already been used")
        for field in required_fields:
            if field not in self._fields:
                raise ConfigurationError(f"{builder_name} {field} not set")
        if not self._distributions:
            raise ConfigurationError(f"{builder_name} has no distributions")
        self._built = True

    def _source_fields(self) -> dict[str, Any]:
        return self._fields | {"distributions": tuple(self._distributions)}

    def build(self) -> FaultSource:
        """Build the fault source.

        Returns
        -------
        FaultSource
            The fault source.

        Raises
        ------
        ConfigurationError
            If the builder was already used, is incomplete, or the
            source has no ruptures.
        """
        self._validate_state(self.REQUIRED_FIELDS)
        fields = self._source_fields()
        surface = GriddedSurface.from_trace(
            fields["trace"],
            fields["depth"],
            fields["dip"],
            fields["width"],
            fields["spacing"],
        )
        return FaultSource(surface=surface, **fields)


class InterfaceSourceBuilder(FaultSourceBuilder):
    """Single-use builder of subduction interface sources.

    An interface is described either by its upper trace, depth, dip and
    width, or by an upper and a lower trace. With a lower trace the
    depth, dip and width are not required and any values set are
    ignored.
    """

    DUAL_TRACE_FIELDS = (
        "name",
        "id",
        "trace",
        "rake",
        "spacing",
        "rupture_scaling",
        "rupture_floating",
        "rupture_variability",
    )

    def _check_depth(self, depth: float) -> float:
        return validation.check_interface_depth(depth)

    def _check_width(self, width: float) -> float:
        return validation.check_interface_width(width)

    def lower_trace(self, trace: npt.ArrayLike) -> Self:
        """Set the lower trace of the interface.

        Parameters
        ----------
        trace : array-like
            The lower trace in (lat, lon, depth) format.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        ConfigurationError
            If the upper trace is not yet set, or the trace is invalid or
            has no depths.
        """
        if "trace" not in self._fields:
            raise ConfigurationError("Upper trace must be set first")
        trace = validation.check_trace(trace)
        if trace.shape[1] != 3:
            raise ConfigurationError("Lower trace must be in (lat, lon, depth) format")
        return self._set("lower_trace", trace)

    def build(self) -> InterfaceSource:
        """Build the interface source.

        Returns
        -------
        InterfaceSource
            The interface source.

        Raises
        ------
        ConfigurationError
            If the builder was already used, is incomplete, or the
            source has no ruptures.
        """
        if "lower_trace" in self._fields:
            self._validate_state(self.DUAL_TRACE_FIELDS)
            fields = self._source_fields() | {
                "depth": np.nan,
                "dip": np.nan,
                "width": np.nan,
            }
            surface = GriddedSurface.from_traces(
                fields["trace"], fields["lower_trace"], fields["spacing"]
            )
        else:
            self._validate_state(self.REQUIRED_FIELDS)
            fields = self._source_fields()
            surface = GriddedSurface.from_trace(
                fields["trace"],
                fields["depth"],
                fields["dip"],
                fields["width"],
                fields["spacing"],
            )
        return InterfaceSource(surface=surface, **fields)


@dataclasses.dataclass(frozen=True, eq=False)
class FaultSourceSet:
    """A named, weighted group of fault sources.

    Attributes
    ----------
    name : str
        The name of the set.
    id : int
        The identifier of the set.
    weight : float
        The logic tree weight of the set.
    sources : tuple[FaultSource, ...]
        The fault sources, in order.
    """

    name: str
    id: int
    weight: float
    sources: tuple[FaultSource, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", validation.check_name(self.name))
        object.__setattr__(self, "weight", validation.check_branch_weight(self.weight))
        object.__setattr__(self, "sources", tuple(self.sources))

    def size(self) -> int:
        return len(self.sources)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[FaultSource]:
        return iter(self.sources)


@dataclasses.dataclass(frozen=True, eq=False)
class ClusterSource:
    """A group of faults that rupture together.

    The faults rupture as independent events with a shared rate. The
    hazard of a cluster comes from the joint probability of ground
    motions from its faults, so it has no flat stream of ruptures.

    Attributes
    ----------
    rate : float
        The annual rate of the cluster (one over its return period).
    faults : FaultSourceSet
        The faults in the cluster.
    """

    rate: float
    faults: FaultSourceSet

    @property
    def name(self) -> str:  # numpydoc ignore=RT01
        """str: The name of the fault set."""
        return self.faults.name

    @property
    def id(self) -> int:  # numpydoc ignore=RT01
        """int: The identifier of the fault set."""
        return self.faults.id

    @property
    def weight(self) -> float:  # numpydoc ignore=RT01
        """float: The logic tree weight of the fault set."""
        return self.faults.weight

    @property
    def type(self) -> SourceType:  # numpydoc ignore=RT01
        """SourceType: The type of the source."""
        return SourceType.CLUSTER

    def size(self) -> int:
        """Return the number of faults in the cluster.

        Returns
        -------
        int
            The number of faults.
        """
        return self.faults.size()

    def __len__(self) -> int:
        return self.size()

    def location(self, site: npt.ArrayLike) -> np.ndarray:
        """Return the closest point of any fault in the cluster to a site.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        np.ndarray
            The closest point.
        """
        fault_locations = [fault.location(site)[:2] for fault in self.faults]
        return geodesy.closest_point(site, fault_locations)

    def mfds(self) -> list[MagnitudeFrequencyDistribution]:
        """Return the distributions of every fault scaled by the cluster rate.

        Returns
        -------
        list[MagnitudeFrequencyDistribution]
            New scaled distributions, the faults are unchanged.
        """
        return [
            mfd.scaled(self.rate) for fault in self.faults for mfd in fault.mfds()
        ]

    def __iter__(self) -> Iterator[Rupture]:
        raise UnsupportedCapabilityError(
            "Cluster sources have no rupture stream, use their fault set."
        )


class ClusterSourceBuilder:
    """Single-use builder of cluster sources."""

    def __init__(self) -> None:
        self._rate: float | None = None
        self._faults: FaultSourceSet | None = None
        self._built = False

    def rate(self, rate: float) -> Self:
        if self._rate is not None:
            raise ConfigurationError("ClusterSourceBuilder rate already set")
        self._rate = validation.check_rate(rate)
        return self

    def faults(self, faults: FaultSourceSet) -> Self:
        """Set the faults of the cluster.

        Parameters
        ----------
        faults : FaultSourceSet
            The fault set, with at least one fault.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        ConfigurationError
            If the faults are already set or the set is empty.
        """
        if self._faults is not None:
            raise ConfigurationError("ClusterSourceBuilder faults already set")
        if faults.size() == 0:
            raise ConfigurationError("Fault source set is empty")
        self._faults = faults
        return self

    def build(self) -> ClusterSource:
        """Build the cluster source.

        Returns
        -------
        ClusterSource
            The cluster source.

        Raises
        ------
        ConfigurationError
            If the builder was already used or is incomplete.
        """
        if self._built:
            raise ConfigurationError(
                "This ClusterSourceBuilder instance has already been used"
            )
        if self._rate is None:
            raise ConfigurationError("ClusterSourceBuilder rate not set")
        if self._faults is None:
            raise ConfigurationError("ClusterSourceBuilder has no fault sources")
        self._built = True
        cluster = ClusterSource(self._rate, self._faults)
        log_utils.log(
            "built source",
            None,
            logging.DEBUG,
            source=cluster.name,
            type=str(cluster.type),
            faults=cluster.size(),
            rate=cluster.rate,
        )
        return cluster
