"""
World to raster transformation.

Uses an equirectangular approximation: longitude maps linearly to x,
latitude maps linearly to y (flipped, since raster rows grow downward).
"""

import logging
import math
from typing import Iterable, Tuple

from ..exceptions import EmptyMapError, DegenerateExtentError
from ..models.primitives import GeoCoord
from ..utils.geo_utils import haversine_distance

logger = logging.getLogger(__name__)

# Degrees of longitude per degree of latitude over the whole globe (360 / 180)
LON_LAT_RATIO = 360.0 / 180.0

Extent = Tuple[GeoCoord, GeoCoord]


def compute_extent(coords: Iterable[GeoCoord]) -> Extent:
    """Fold a coordinate stream into its (min, max) bounding corners.

    Raises:
        EmptyMapError: If the stream is empty
    """
    iterator = iter(coords)
    first = next(iterator, None)
    if first is None:
        raise EmptyMapError("No roads, rivers or parks found in archive")

    lo = hi = first
    for coord in iterator:
        lo = lo.min(coord)
        hi = hi.max(coord)
    return lo, hi


def compute_raster_height(width: int, min_coord: GeoCoord, max_coord: GeoCoord) -> int:
    """Derive the raster height that keeps the extent's aspect.

    Args:
        width: Raster width in pixels
        min_coord: South-west corner
        max_coord: North-east corner

    Returns:
        Height in pixels, at least 1

    Raises:
        DegenerateExtentError: If the extent has zero width or height
    """
    map_w = max_coord.lon - min_coord.lon
    map_h = max_coord.lat - min_coord.lat
    if map_w <= 0 or map_h <= 0:
        raise DegenerateExtentError(
            f"Extent {map_w:.9f} x {map_h:.9f} degrees is degenerate; "
            "features must span a non-zero area"
        )

    ratio = LON_LAT_RATIO * map_h / map_w
    return max(1, int(math.floor(width * ratio + 0.5)))


class MapTransform:
    """
    Transforms geographic coordinates to raster coordinates.
    """

    def __init__(self, width: int, height: int, min_coord: GeoCoord, max_coord: GeoCoord):
        """
        Initialize transform.

        Args:
            width: Largest x coordinate produced (raster width - 1)
            height: Largest y coordinate produced (raster height - 1)
            min_coord: South-west corner of the extent
            max_coord: North-east corner of the extent
        """
        self.width = width
        self.height = height
        self.min_x = min_coord.lon
        self.min_y = min_coord.lat
        self.map_w = max_coord.lon - min_coord.lon
        self.map_h = max_coord.lat - min_coord.lat
        if self.map_w <= 0 or self.map_h <= 0:
            raise DegenerateExtentError("Map transform needs an extent with non-zero area")

    def transform(self, coord: GeoCoord) -> Tuple[int, int]:
        """Convert a geographic coordinate to raster (x, y), truncating."""
        x = int((coord.lon - self.min_x) / self.map_w * self.width)
        y = int((1.0 - (coord.lat - self.min_y) / self.map_h) * self.height)
        return x, y

    def meters_per_cell(self) -> float:
        """Great-circle length of one raster cell diagonal at the extent origin."""
        cell_w = self.map_w / self.width if self.width else self.map_w
        cell_h = self.map_h / self.height if self.height else self.map_h
        origin = GeoCoord(lat=self.min_y, lon=self.min_x)
        corner = GeoCoord(lat=self.min_y + cell_h, lon=self.min_x + cell_w)
        return haversine_distance(origin, corner)

    def transform_meters(self, distance: float) -> int:
        """Convert a real-world distance in meters to a pixel count (truncated)."""
        return int(distance / self.meters_per_cell())

    def __repr__(self) -> str:
        return (f"MapTransform(width={self.width}, height={self.height}, "
                f"min=({self.min_y:.6f}, {self.min_x:.6f}), "
                f"span=({self.map_h:.6f}, {self.map_w:.6f}))")
