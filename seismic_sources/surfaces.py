"""Rupture surfaces and their distance metrics.

Every surface answers `distance_to(site)` with the three distance
metrics used by ground motion models:

r_jb
    The Joyner-Boore distance, the shortest horizontal distance from
    the site to the surface projection of the rupture.
r_rup
    The rupture distance, the shortest distance from the site to the
    rupture plane.
r_x
    The horizontal distance from the site to the line through the
    up-dip edge of the rupture, positive on the hanging wall.

Point sources produce `PointSurface`, `FiniteSurface` and
`FixedStrikeSurface` values. These are independent immutable records,
one per enumerated rupture, each with its own distance formula. Fault
and interface sources use `GriddedSurface`.

Classes
-------
Distance:
    The distance metrics from a site to a surface.
RuptureSurface:
    The protocol implemented by every surface.
PointSurface:
    A point rupture with no finite extent.
FiniteSurface:
    A point rupture approximating a finite plane of unknown strike.
FixedStrikeSurface:
    A rectangular rupture centred on a point with known strike.
GriddedSurface:
    A fault surface discretised as a grid of locations.
"""

import dataclasses
from typing import NamedTuple, Protocol, Self, runtime_checkable

import numpy as np
import numpy.typing as npt
import shapely

from seismic_sources import geodesy
from seismic_sources.defaults import load_defaults
from seismic_sources.errors import UnsupportedCapabilityError
from seismic_sources.rupture_scaling import RuptureScaling

# Tolerance (km) when deciding if a site lies beyond the end of a
# fixed strike rupture.
OFF_END_TOLERANCE = 1e-5


class Distance(NamedTuple):
    """Distance metrics from a site to a rupture surface (in km)."""

    r_jb: float
    """The Joyner-Boore distance."""
    r_rup: float
    """The rupture distance."""
    r_x: float
    """The signed distance from the up-dip edge, positive on the hanging wall."""


@runtime_checkable
class RuptureSurface(Protocol):
    """The geometric capabilities of a rupture surface.

    Surfaces raise `UnsupportedCapabilityError` for attributes they do
    not define.
    """

    def distance_to(self, site: np.ndarray) -> Distance: ...  # numpydoc ignore=GL08

    def width(self) -> float: ...  # numpydoc ignore=GL08

    def depth(self) -> float: ...  # numpydoc ignore=GL08

    def dip(self) -> float: ...  # numpydoc ignore=GL08

    def strike(self) -> float: ...  # numpydoc ignore=GL08

    def dip_direction(self) -> float: ...  # numpydoc ignore=GL08

    def length(self) -> float: ...  # numpydoc ignore=GL08

    def area(self) -> float: ...  # numpydoc ignore=GL08

    def centroid(self) -> np.ndarray: ...  # numpydoc ignore=GL08


def _unsupported(attribute: str, surface: str) -> UnsupportedCapabilityError:
    return UnsupportedCapabilityError(f"No '{attribute}' for {surface} surface")


def _point_surface_width() -> float:
    return float(load_defaults()["point_surface_width"])


@dataclasses.dataclass(frozen=True, eq=False)
class PointSurface:
    """A point rupture with no finite extent.

    Distances are measured to the point, optionally corrected for the
    finiteness of the rupture by the rupture scaling model.

    Attributes
    ----------
    location : np.ndarray
        The (lat, lon) location of the point.
    rupture_scaling : RuptureScaling
        The model used to correct horizontal distances.
    magnitude : float
        The magnitude of the rupture.
    dip_angle : float
        The dip of the rupture (degrees).
    z_top : float
        The depth to the top of the rupture (km).
    """

    location: np.ndarray
    rupture_scaling: RuptureScaling
    magnitude: float
    dip_angle: float
    z_top: float

    def distance_to(self, site: npt.ArrayLike) -> Distance:
        """Compute the distance metrics from a site to the point.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        Distance
            The distance metrics. There is no hanging wall, so r_x is
            equal to r_jb.
        """
        r_jb = geodesy.horizontal_distance_fast(self.location, site)
        r_jb = self.rupture_scaling.point_source_distance(self.magnitude, r_jb)
        return Distance(r_jb, float(np.hypot(r_jb, self.z_top)), r_jb)

    def width(self) -> float:
        """Return the generic width of point ruptures.

        Returns
        -------
        float
            A nominal width (km), generally ignored by models capable
            of using point sources.
        """
        return _point_surface_width()

    def depth(self) -> float:
        return self.z_top

    def dip(self) -> float:
        return self.dip_angle

    def strike(self) -> float:
        raise _unsupported("strike", "PointSource")

    def dip_direction(self) -> float:
        raise _unsupported("dip_direction", "PointSource")

    def length(self) -> float:
        raise _unsupported("length", "PointSource")

    def area(self) -> float:
        raise _unsupported("area", "PointSource")

    def centroid(self) -> np.ndarray:
        return self.location


@dataclasses.dataclass(frozen=True, eq=False)
class FiniteSurface:
    """A point rupture approximating a finite plane of unknown strike.

    Dipping ruptures are represented twice by their source, once as if
    every site were on the footwall and once as if every site were on
    the hanging wall. Strike-slip ruptures are always footwall
    representations.

    Attributes
    ----------
    location : np.ndarray
        The (lat, lon) location of the point.
    rupture_scaling : RuptureScaling
        The model used to correct horizontal distances.
    magnitude : float
        The magnitude of the rupture.
    dip_angle : float
        The dip of the rupture (degrees).
    z_top : float
        The depth to the top of the rupture (km).
    z_bot : float
        The depth to the bottom of the rupture (km).
    width_h : float
        The horizontal width of the rupture (km).
    width_dd : float
        The down-dip width of the rupture (km).
    footwall : bool
        True if this is the footwall representation of the rupture.
    """

    location: np.ndarray
    rupture_scaling: RuptureScaling
    magnitude: float
    dip_angle: float
    z_top: float
    z_bot: float
    width_h: float
    width_dd: float
    footwall: bool

    def distance_to(self, site: npt.ArrayLike) -> Distance:
        """Compute the distance metrics from a site to the rupture.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        Distance
            The distance metrics. On the hanging wall, r_rup is
            interpolated between its value above the down-dip edge and
            its value where the site is normal to the bottom of the
            rupture.
        """
        r_jb = geodesy.horizontal_distance_fast(self.location, site)
        r_jb = self.rupture_scaling.point_source_distance(self.magnitude, r_jb)
        if self.footwall:
            return Distance(r_jb, float(np.hypot(r_jb, self.z_top)), -r_jb)

        r_x = r_jb + self.width_h
        dip = np.radians(self.dip_angle)
        r_cut = self.z_bot * np.tan(dip)
        if r_jb > r_cut:
            return Distance(r_jb, float(np.hypot(r_jb, self.z_bot)), r_x)

        # r_rup directly above the down-dip edge, the lesser of the
        # distance to the top edge and the normal to the rupture.
        r_rup_0 = min(np.hypot(self.width_h, self.z_top), self.z_bot * np.cos(dip))
        r_rup_cut = self.z_bot / np.cos(dip)
        r_rup = (r_rup_cut - r_rup_0) * r_jb / r_cut + r_rup_0
        return Distance(r_jb, float(r_rup), r_x)

    def width(self) -> float:
        return self.width_dd

    def depth(self) -> float:
        return self.z_top

    def dip(self) -> float:
        return self.dip_angle

    def strike(self) -> float:
        raise _unsupported("strike", "FinitePointSource")

    def dip_direction(self) -> float:
        raise _unsupported("dip_direction", "FinitePointSource")

    def length(self) -> float:
        raise _unsupported("length", "FinitePointSource")

    def area(self) -> float:
        raise _unsupported("area", "FinitePointSource")

    def centroid(self) -> np.ndarray:
        return self.location


@dataclasses.dataclass(frozen=True, eq=False)
class FixedStrikeSurface:
    """A rectangular rupture centred on a point with known strike.

    The corners trace the top edge p1 -> p2 and the bottom edge
    p4 <- p3. Which of the two mirror-image representations of a
    dipping rupture has the site on its footwall is only known once a
    distance is computed.

    Attributes
    ----------
    location : np.ndarray
        The (lat, lon) location of the point.
    dip_angle : float
        The dip of the rupture (degrees).
    z_top : float
        The depth to the top of the rupture (km).
    z_bot : float
        The depth to the bottom of the rupture (km).
    width_h : float
        The horizontal width of the rupture (km).
    width_dd : float
        The down-dip width of the rupture (km).
    footwall : bool
        True if the corners were built as the footwall representation.
    p1, p2, p3, p4 : np.ndarray
        The corners of the rupture in (lat, lon, depth) format.
    """

    location: np.ndarray
    dip_angle: float
    z_top: float
    z_bot: float
    width_h: float
    width_dd: float
    footwall: bool
    p1: np.ndarray
    p2: np.ndarray
    p3: np.ndarray
    p4: np.ndarray

    def distance_to(self, site: npt.ArrayLike) -> Distance:
        """Compute the distance metrics from a site to the rupture.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        Distance
            The distance metrics. No point-source distance correction
            is applied.
        """
        r_x = geodesy.distance_to_line_fast(self.p1, self.p2, site)
        r_seg = geodesy.distance_to_segment_fast(self.p1, self.p2, site)

        if r_x <= 0.0 or self.dip_angle == 90.0:
            return Distance(r_seg, float(np.hypot(r_seg, self.z_top)), r_x)

        # Hanging wall, r_rup as though the site is between the ends.
        dip = np.radians(self.dip_angle)
        r_cut_top = np.tan(dip) * self.z_top
        r_cut_bot = np.tan(dip) * self.z_bot + self.width_h
        if r_x > r_cut_bot:
            r_rup = np.hypot(r_x - self.width_h, self.z_bot)
        elif r_x < r_cut_top:
            r_rup = np.hypot(r_x, self.z_top)
        else:
            r_rup = np.hypot(r_cut_top, self.z_top) + (r_x - r_cut_top) * np.sin(dip)

        if r_seg - r_x > OFF_END_TOLERANCE:
            r_jb = min(
                geodesy.distance_to_segment_fast(self.p1, self.p4, site),
                geodesy.distance_to_segment_fast(self.p2, self.p3, site),
            )
            r_y = np.sqrt(r_seg * r_seg - r_x * r_x)
            return Distance(r_jb, float(np.hypot(r_rup, r_y)), r_x)

        r_jb = r_x - self.width_h if r_x > self.width_h else 0.0
        return Distance(r_jb, float(r_rup), r_x)

    def width(self) -> float:
        return self.width_dd

    def depth(self) -> float:
        return self.z_top

    def dip(self) -> float:
        return self.dip_angle

    def strike(self) -> float:
        """Return the strike of the top edge, p1 -> p2.

        Returns
        -------
        float
            The strike (degrees).
        """
        return geodesy.azimuth(self.p1, self.p2)

    def dip_direction(self) -> float:
        return geodesy.dip_direction(self.p1, self.p2)

    def length(self) -> float:
        return geodesy.horizontal_distance_fast(self.p1, self.p2)

    def area(self) -> float:
        return self.length() * self.width_dd

    def centroid(self) -> np.ndarray:
        return self.location


def resample_trace(trace: np.ndarray, num_points: int) -> np.ndarray:
    """Resample a trace into evenly spaced points.

    Parameters
    ----------
    trace : np.ndarray
        The trace in (lat, lon) or (lat, lon, depth) format.
    num_points : int
        The number of points to resample to (at least 2).

    Returns
    -------
    np.ndarray
        The resampled trace of shape (num_points, 3). Missing depths
        are zero.
    """
    trace = np.asarray(trace, dtype=np.float64)
    if trace.shape[1] == 2:
        trace = np.column_stack([trace, np.zeros(len(trace))])
    segment_lengths = geodesy.horizontal_distance_fast(trace[:-1], trace[1:])
    cumulative_length = np.concatenate([[0.0], np.cumsum(segment_lengths)])
    samples = np.linspace(0, cumulative_length[-1], num_points)
    return np.column_stack(
        [np.interp(samples, cumulative_length, trace[:, i]) for i in range(3)]
    )


def trace_length(trace: np.ndarray) -> float:
    """Return the horizontal length of a trace (km)."""
    trace = np.asarray(trace, dtype=np.float64)
    return float(np.sum(geodesy.horizontal_distance_fast(trace[:-1], trace[1:])))


def _segment_count(length: float, spacing: float) -> int:
    return max(int(np.rint(length / spacing)), 1)


@dataclasses.dataclass(frozen=True, eq=False)
class GriddedSurface:
    """A fault surface discretised as a grid of locations.

    Row zero is the upper edge of the surface and columns are ordered
    along strike.

    Attributes
    ----------
    grid : np.ndarray
        The (rows, cols, 3) array of (lat, lon, depth) locations.
    strike_spacing : float
        The spacing between columns (km).
    dip_spacing : float
        The spacing between rows (km).
    average_dip : float
        The average dip of the surface (degrees).
    average_strike : float
        The average strike of the surface (degrees).
    """

    grid: np.ndarray
    strike_spacing: float
    dip_spacing: float
    average_dip: float
    average_strike: float

    @classmethod
    def from_trace(
        cls,
        trace: npt.ArrayLike,
        depth: float,
        dip: float,
        width: float,
        spacing: float,
    ) -> Self:
        """Build a surface by projecting a trace down dip.

        Parameters
        ----------
        trace : array-like
            The fault trace in (lat, lon[, depth]) format.
        depth : float
            The depth of the upper edge (km).
        dip : float
            The dip of the fault (degrees).
        width : float
            The down-dip width of the fault (km).
        spacing : float
            The target spacing of grid nodes (km).

        Returns
        -------
        GriddedSurface
            The gridded surface. Node spacing is adjusted so that the
            grid exactly spans the trace and the width.
        """
        trace = np.asarray(trace, dtype=np.float64)
        length = trace_length(trace)
        num_strike_segments = _segment_count(length, spacing)
        num_dip_segments = _segment_count(width, spacing)
        strike_spacing = length / num_strike_segments
        dip_spacing = width / num_dip_segments

        upper_edge = resample_trace(trace, num_strike_segments + 1)
        upper_edge[:, 2] = depth
        strike = geodesy.azimuth(trace[0], trace[-1])
        dip_direction = (strike + 90) % 360
        dip_radians = np.radians(dip)
        grid = np.stack(
            [
                geodesy.location_along(
                    upper_edge,
                    dip_direction,
                    row * dip_spacing * np.cos(dip_radians),
                    row * dip_spacing * np.sin(dip_radians),
                )
                for row in range(num_dip_segments + 1)
            ]
        )
        return cls(grid, strike_spacing, dip_spacing, float(dip), strike)

    @classmethod
    def from_traces(
        cls, upper_trace: npt.ArrayLike, lower_trace: npt.ArrayLike, spacing: float
    ) -> Self:
        """Build an approximate surface between an upper and a lower trace.

        Parameters
        ----------
        upper_trace : array-like
            The upper trace in (lat, lon[, depth]) format.
        lower_trace : array-like
            The lower trace in (lat, lon, depth) format, in the same
            along-strike order as the upper trace.
        spacing : float
            The target spacing of grid nodes (km).

        Returns
        -------
        GriddedSurface
            The surface linearly interpolated between the two traces.
        """
        upper_trace = np.asarray(upper_trace, dtype=np.float64)
        lower_trace = np.asarray(lower_trace, dtype=np.float64)
        upper_length = trace_length(upper_trace)
        num_strike_segments = _segment_count(
            max(upper_length, trace_length(lower_trace)), spacing
        )
        upper_edge = resample_trace(upper_trace, num_strike_segments + 1)
        lower_edge = resample_trace(lower_trace, num_strike_segments + 1)

        down_dip_distance = float(
            np.mean(geodesy.linear_distance_fast(upper_edge, lower_edge))
        )
        num_dip_segments = _segment_count(down_dip_distance, spacing)
        fractions = np.linspace(0, 1, num_dip_segments + 1)
        grid = upper_edge[np.newaxis] + fractions[:, np.newaxis, np.newaxis] * (
            lower_edge - upper_edge
        )

        horizontal = geodesy.horizontal_distance_fast(upper_edge, lower_edge)
        vertical = lower_edge[:, 2] - upper_edge[:, 2]
        average_dip = float(np.degrees(np.mean(np.arctan2(vertical, horizontal))))
        return cls(
            grid,
            upper_length / num_strike_segments,
            down_dip_distance / num_dip_segments,
            average_dip,
            geodesy.azimuth(upper_trace[0], upper_trace[-1]),
        )

    @property
    def num_rows(self) -> int:  # numpydoc ignore=RT01
        """int: The number of rows (down dip) in the grid."""
        return self.grid.shape[0]

    @property
    def num_cols(self) -> int:  # numpydoc ignore=RT01
        """int: The number of columns (along strike) in the grid."""
        return self.grid.shape[1]

    def location(self, row: int, col: int) -> np.ndarray:
        return self.grid[row, col]

    def upper_edge(self) -> np.ndarray:
        return self.grid[0]

    def lower_edge(self) -> np.ndarray:
        return self.grid[-1]

    def corners(self) -> np.ndarray:
        """Return the corners of the surface.

        Returns
        -------
        np.ndarray
            The corners in clockwise order from the start of the upper
            edge: upper start, upper end, lower end, lower start.
        """
        return np.array(
            [self.grid[0, 0], self.grid[0, -1], self.grid[-1, -1], self.grid[-1, 0]]
        )

    def subset(self, start_row: int, start_col: int, rows: int, cols: int) -> Self:
        """Extract a rectangular section of the surface.

        Parameters
        ----------
        start_row : int
            The first row of the section.
        start_col : int
            The first column of the section.
        rows : int
            The number of rows in the section.
        cols : int
            The number of columns in the section.

        Returns
        -------
        GriddedSurface
            The section, sharing the spacing and orientation of this
            surface.

        Raises
        ------
        ValueError
            If the section does not fit inside the surface.
        """
        if not (
            0 <= start_row
            and 0 <= start_col
            and rows >= 1
            and cols >= 1
            and start_row + rows <= self.num_rows
            and start_col + cols <= self.num_cols
        ):
            raise ValueError(
                f"Section ({start_row}, {start_col}, {rows}, {cols}) does not fit "
                f"a {self.num_rows} x {self.num_cols} surface."
            )
        return dataclasses.replace(
            self,
            grid=self.grid[start_row : start_row + rows, start_col : start_col + cols],
        )

    def width(self) -> float:
        return self.dip_spacing * (self.num_rows - 1)

    def length(self) -> float:
        return self.strike_spacing * (self.num_cols - 1)

    def area(self) -> float:
        return self.width() * self.length()

    def depth(self) -> float:
        return float(self.grid[0, :, 2].min())

    def dip(self) -> float:
        return self.average_dip

    def strike(self) -> float:
        return self.average_strike

    def dip_direction(self) -> float:
        return (self.average_strike + 90) % 360

    def centroid(self) -> np.ndarray:
        return self.grid.reshape(-1, 3).mean(axis=0)

    def _surface_projection(self, project) -> shapely.Geometry:
        """Return the outline of the surface projected onto the plane."""
        if self.num_cols == 1:
            return shapely.MultiPoint(project(self.grid[:, 0])).convex_hull
        if self.num_rows == 1:
            return shapely.LineString(project(self.grid[0]))
        perimeter = np.concatenate(
            [
                self.grid[0],
                self.grid[1:, -1],
                self.grid[-1, -2::-1],
                self.grid[-2:0:-1, 0],
            ]
        )
        polygon = shapely.Polygon(project(perimeter))
        if polygon.area == 0:
            return shapely.LineString(project(self.grid[0]))
        if not polygon.is_valid:
            return shapely.make_valid(polygon)
        return polygon

    def distance_to(self, site: npt.ArrayLike) -> Distance:
        """Compute the distance metrics from a site to the surface.

        Parameters
        ----------
        site : array-like
            The site location.

        Returns
        -------
        Distance
            The distance metrics. r_rup is the distance to the closest
            grid node, r_jb is zero for sites above the surface and r_x
            is measured from the line through the ends of the upper
            edge.
        """
        site = np.asarray(site, dtype=np.float64)
        r_rup = float(np.min(geodesy.linear_distance_fast(self.grid, site)))

        project = geodesy.local_projection(self.grid[0, 0])
        r_jb = float(
            self._surface_projection(project).distance(shapely.Point(project(site)))
        )

        start = self.grid[0, 0]
        end = self.grid[0, -1]
        if self.num_cols == 1:
            end = geodesy.location_along(start, self.average_strike, 1.0)
        r_x = geodesy.distance_to_line_fast(start, end, site)
        return Distance(r_jb, r_rup, r_x)


def floating_surfaces(
    parent: GriddedSurface, length: float, width: float, down_dip: bool = True
) -> list[GriddedSurface]:
    """Tile a surface with smaller floating surfaces.

    Parameters
    ----------
    parent : GriddedSurface
        The surface to tile.
    length : float
        The length of the floating surfaces (km).
    width : float
        The width of the floating surfaces (km).
    down_dip : bool
        If False, floating surfaces are pinned to the upper edge of
        the parent instead of stepping down dip.

    Returns
    -------
    list[GriddedSurface]
        The floating surfaces, ordered along strike then down dip. A
        floating surface that does not fit spans the parent in that
        direction.
    """
    col_size = int(np.rint(length / parent.strike_spacing + 1))
    along_count = parent.num_cols - col_size + 1
    if along_count <= 1:
        along_count = 1
        col_size = parent.num_cols

    row_size = int(np.rint(width / parent.dip_spacing + 1))
    down_count = parent.num_rows - row_size + 1
    if down_count <= 1:
        down_count = 1
        row_size = parent.num_rows
    if not down_dip:
        down_count = 1

    return [
        parent.subset(start_row, start_col, row_size, col_size)
        for start_col in range(along_count)
        for start_row in range(down_count)
    ]
