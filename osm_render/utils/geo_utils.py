"""Great-circle distances and ring orientation for map features."""
import math
from typing import Iterable, List, Sequence

from osm_render.models.primitives import GeoCoord

# Mean earth radius (IUGG), meters
EARTH_RADIUS_M = 6371008.8

Ring = Sequence[Sequence[float]]


def haversine_distance(a: GeoCoord, b: GeoCoord) -> float:
    """Great-circle distance in meters between two coordinates.

    Examples:
        >>> round(haversine_distance(GeoCoord(0.0, 0.0), GeoCoord(1.0, 0.0)))
        111195
    """
    phi_a = math.radians(a.lat)
    phi_b = math.radians(b.lat)
    half_dphi = math.radians(b.lat - a.lat) / 2
    half_dlambda = math.radians(b.lon - a.lon) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi_a) * math.cos(phi_b) * math.sin(half_dlambda) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def path_length(coords: Iterable[GeoCoord]) -> float:
    """Summed segment lengths of a path, in meters."""
    total = 0.0
    previous = None
    for coord in coords:
        if previous is not None:
            total += haversine_distance(previous, coord)
        previous = coord
    return total


def signed_ring_area(ring: Ring) -> float:
    """Shoelace area of a ``[x, y]`` ring; positive when counter-clockwise."""
    if len(ring) < 3:
        return 0.0
    twice_area = sum(x1 * y2 - x2 * y1
                     for (x1, y1), (x2, y2) in zip(ring, list(ring[1:]) + [ring[0]]))
    return twice_area / 2.0


def oriented_ring(ring: Ring, clockwise: bool = False) -> List:
    """Return the ring wound in the requested direction.

    GeoJSON exterior rings run counter-clockwise, shapefile outer rings run
    clockwise.
    """
    ring = list(ring)
    if len(ring) < 3:
        return ring
    is_clockwise = signed_ring_area(ring) < 0
    return ring if is_clockwise == clockwise else ring[::-1]
