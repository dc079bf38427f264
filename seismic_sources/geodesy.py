"""Geodetic calculations on a spherical earth.

Locations are numpy arrays in (lat, lon) or (lat, lon, depth) format,
with angles in degrees and depths in kilometres (positive down). The
*fast* functions use a local flat-earth approximation that is accurate
to well under a percent at the distances relevant to hazard
calculations, and they are vectorised over leading array dimensions.

Functions
---------
horizontal_distance_fast:
    Equirectangular distance between locations.
linear_distance_fast:
    Straight-line (3D) distance between locations.
azimuth:
    Initial bearing from one location to another.
location_along:
    Destination of a vector from a location.
distance_to_line_fast:
    Signed perpendicular distance from the line through two locations.
distance_to_segment_fast:
    Distance to the segment between two locations.
"""

from collections.abc import Callable

import numpy as np
import numpy.typing as npt
import pyproj

EARTH_RADIUS_MEAN = 6371.0072
_KM_TO_M = 1000

_GEOD = pyproj.Geod(a=EARTH_RADIUS_MEAN * _KM_TO_M, f=0.0)


def _depth(location: np.ndarray) -> np.ndarray | float:
    """Return the depth component of locations, zero if absent."""
    if location.shape[-1] > 2:
        return location[..., 2]
    return np.zeros(location.shape[:-1]) if location.ndim > 1 else 0.0


def horizontal_distance_fast(a: npt.ArrayLike, b: npt.ArrayLike) -> np.ndarray | float:
    """Compute the horizontal distance between locations.

    Parameters
    ----------
    a : array-like
        The first location(s), shape (..., 2) or (..., 3).
    b : array-like
        The second location(s), broadcastable against `a`.

    Returns
    -------
    np.ndarray or float
        The horizontal distance (in km) between `a` and `b`.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    lat_a = np.radians(a[..., 0])
    lat_b = np.radians(b[..., 0])
    d_lat = lat_a - lat_b
    d_lon = np.radians(a[..., 1] - b[..., 1]) * np.cos((lat_a + lat_b) / 2)
    distance = EARTH_RADIUS_MEAN * np.sqrt(d_lat**2 + d_lon**2)
    if np.ndim(distance) == 0:
        return float(distance)
    return distance


def linear_distance_fast(a: npt.ArrayLike, b: npt.ArrayLike) -> np.ndarray | float:
    """Compute the straight-line distance between locations with depth.

    Parameters
    ----------
    a : array-like
        The first location(s) in (lat, lon, depth) format.
    b : array-like
        The second location(s), broadcastable against `a`.

    Returns
    -------
    np.ndarray or float
        The 3D distance (in km) between `a` and `b`.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return np.hypot(horizontal_distance_fast(a, b), _depth(a) - _depth(b))


def azimuth(a: npt.ArrayLike, b: npt.ArrayLike) -> float:
    """Compute the initial bearing from `a` to `b`.

    Parameters
    ----------
    a : array-like
        The start location.
    b : array-like
        The end location.

    Returns
    -------
    float
        The bearing (in degrees, [0, 360)) of `b` as seen from `a`.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    forward_azimuth, _, _ = _GEOD.inv(a[1], a[0], b[1], b[0])
    return float(forward_azimuth % 360)


def location_along(
    origin: npt.ArrayLike,
    bearing: npt.ArrayLike,
    horizontal: npt.ArrayLike,
    vertical: npt.ArrayLike = 0.0,
) -> np.ndarray:
    """Find the location at the end of a vector starting from `origin`.

    Parameters
    ----------
    origin : array-like
        The start location(s), shape (3,) or (n, 3). A missing depth is
        treated as zero.
    bearing : array-like
        The bearing of the vector (in degrees).
    horizontal : array-like
        The horizontal length of the vector (in km).
    vertical : array-like, optional
        The change in depth along the vector (in km, positive down).

    Returns
    -------
    np.ndarray
        The end location(s) in (lat, lon, depth) format.
    """
    origin = np.asarray(origin, dtype=np.float64)
    lats, lons, bearing, horizontal = np.broadcast_arrays(
        origin[..., 0], origin[..., 1], bearing, horizontal
    )
    lon, lat, _ = _GEOD.fwd(
        lons.astype(np.float64),
        lats.astype(np.float64),
        bearing.astype(np.float64),
        horizontal.astype(np.float64) * _KM_TO_M,
    )
    depth = _depth(origin) + np.asarray(vertical, dtype=np.float64)
    lat, lon, depth = np.broadcast_arrays(lat, lon, depth)
    return np.stack([lat, lon, depth], axis=-1)


def _local_frame(
    p1: np.ndarray, p2: np.ndarray, site: np.ndarray
) -> tuple[float, float, float, float]:
    """Flatten p2 and site into a frame with origin p1 (units of earth radii)."""
    lat1, lon1 = np.radians(p1[:2])
    lat2, lon2 = np.radians(p2[:2])
    lat3, lon3 = np.radians(site[:2])
    lon_scale = np.cos(0.5 * lat3 + 0.25 * lat1 + 0.25 * lat2)
    x2 = (lon2 - lon1) * lon_scale
    y2 = lat2 - lat1
    x3 = (lon3 - lon1) * lon_scale
    y3 = lat3 - lat1
    return x2, y2, x3, y3


def distance_to_line_fast(
    p1: npt.ArrayLike, p2: npt.ArrayLike, site: npt.ArrayLike
) -> float:
    """Compute the signed horizontal distance from `site` to the line p1 -> p2.

    Parameters
    ----------
    p1 : array-like
        The first location on the line.
    p2 : array-like
        The second location on the line.
    site : array-like
        The location to measure from.

    Returns
    -------
    float
        The perpendicular distance (in km) to the (infinitely extended)
        line. The distance is positive if the site lies to the right of
        the line when looking from p1 towards p2.
    """
    x2, y2, x3, y3 = _local_frame(
        np.asarray(p1, dtype=np.float64),
        np.asarray(p2, dtype=np.float64),
        np.asarray(site, dtype=np.float64),
    )
    return float((x3 * y2 - x2 * y3) / np.hypot(x2, y2) * EARTH_RADIUS_MEAN)


def distance_to_segment_fast(
    p1: npt.ArrayLike, p2: npt.ArrayLike, site: npt.ArrayLike
) -> float:
    """Compute the horizontal distance from `site` to the segment p1 -> p2.

    Parameters
    ----------
    p1 : array-like
        The start of the segment.
    p2 : array-like
        The end of the segment.
    site : array-like
        The location to measure from.

    Returns
    -------
    float
        The shortest horizontal distance (in km) to the segment. Within
        the extent of the segment this is exactly the absolute value of
        `distance_to_line_fast`.
    """
    x2, y2, x3, y3 = _local_frame(
        np.asarray(p1, dtype=np.float64),
        np.asarray(p2, dtype=np.float64),
        np.asarray(site, dtype=np.float64),
    )
    projection = x3 * x2 + y3 * y2
    if projection <= 0:
        return float(np.hypot(x3, y3) * EARTH_RADIUS_MEAN)
    if projection >= x2 * x2 + y2 * y2:
        return float(np.hypot(x3 - x2, y3 - y2) * EARTH_RADIUS_MEAN)
    return float(abs((x3 * y2 - x2 * y3) / np.hypot(x2, y2) * EARTH_RADIUS_MEAN))


def dip_direction(p1: npt.ArrayLike, p2: npt.ArrayLike) -> float:
    """Return the dip direction of a fault whose strike runs p1 -> p2.

    Parameters
    ----------
    p1 : array-like
        The first location on the trace.
    p2 : array-like
        The last location on the trace.

    Returns
    -------
    float
        The dip direction (in degrees), 90 degrees clockwise of strike.
    """
    return (azimuth(p1, p2) + 90) % 360


def closest_point(site: npt.ArrayLike, locations: npt.ArrayLike) -> np.ndarray:
    """Find the location horizontally closest to `site`.

    Parameters
    ----------
    site : array-like
        The site location.
    locations : array-like
        Candidate locations, shape (n, 2) or (n, 3).

    Returns
    -------
    np.ndarray
        The closest candidate location.
    """
    locations = np.atleast_2d(np.asarray(locations, dtype=np.float64))
    distances = horizontal_distance_fast(locations, site)
    return locations[int(np.argmin(distances))]


def local_projection(origin: npt.ArrayLike) -> Callable[[np.ndarray], np.ndarray]:
    """Create an equirectangular projection about `origin`.

    Parameters
    ----------
    origin : array-like
        The origin of the projection.

    Returns
    -------
    Callable
        A function taking locations of shape (..., 2+) and returning
        planar (x, y) coordinates (in km), with x east and y north.
    """
    origin = np.asarray(origin, dtype=np.float64)
    lon_scale = np.cos(np.radians(origin[0]))

    def project(locations: np.ndarray) -> np.ndarray:  # numpydoc ignore=GL08
        locations = np.asarray(locations, dtype=np.float64)
        x = np.radians(locations[..., 1] - origin[1]) * lon_scale * EARTH_RADIUS_MEAN
        y = np.radians(locations[..., 0] - origin[0]) * EARTH_RADIUS_MEAN
        return np.stack([x, y], axis=-1)

    return project
