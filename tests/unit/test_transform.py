"""Tests for the world -> raster transform."""
import pytest

from osm_render.exceptions import EmptyMapError, DegenerateExtentError
from osm_render.models.primitives import GeoCoord
from osm_render.rendering.transform import (
    MapTransform, compute_extent, compute_raster_height,
)
from osm_render.utils.geo_utils import haversine_distance


SW = GeoCoord(lat=0.0, lon=0.0)
NE = GeoCoord(lat=1.0, lon=1.0)


class TestComputeExtent:
    """Tests for compute_extent."""

    def test_bounding_corners(self):
        """Test min and max corners are component-wise."""
        coords = [GeoCoord(1.0, 5.0), GeoCoord(-2.0, 7.0), GeoCoord(3.0, 6.0)]
        lo, hi = compute_extent(coords)
        assert lo == GeoCoord(lat=-2.0, lon=5.0)
        assert hi == GeoCoord(lat=3.0, lon=7.0)

    def test_accepts_generator(self):
        """Test a one-shot iterator is enough."""
        lo, hi = compute_extent(GeoCoord(float(i), float(i)) for i in range(3))
        assert (lo, hi) == (GeoCoord(0.0, 0.0), GeoCoord(2.0, 2.0))

    def test_empty(self):
        """Test empty input raises EmptyMapError."""
        with pytest.raises(EmptyMapError):
            compute_extent([])


class TestComputeRasterHeight:
    """Tests for compute_raster_height."""

    def test_square_extent(self):
        """Test a square degree extent doubles the height."""
        assert compute_raster_height(100, SW, NE) == 200

    def test_wide_extent(self):
        """Test a wide extent gives a short raster."""
        assert compute_raster_height(100, GeoCoord(0.0, 0.0), GeoCoord(0.5, 4.0)) == 25

    def test_rounds_half_up(self):
        """Test heights round to nearest."""
        # 2 * 0.25 / 1 * 5 = 2.5
        assert compute_raster_height(5, GeoCoord(0.0, 0.0), GeoCoord(0.25, 1.0)) == 3

    def test_minimum_one(self):
        """Test very flat extents still get one row."""
        assert compute_raster_height(10, GeoCoord(0.0, 0.0), GeoCoord(0.0001, 50.0)) == 1

    @pytest.mark.parametrize("hi", [GeoCoord(0.0, 1.0), GeoCoord(1.0, 0.0), GeoCoord(0.0, 0.0)])
    def test_degenerate(self, hi):
        """Test zero-width or zero-height extents are rejected."""
        with pytest.raises(DegenerateExtentError):
            compute_raster_height(100, SW, hi)


class TestMapTransform:
    """Tests for MapTransform."""

    def test_corners(self):
        """Test extent corners map to raster corners with y flipped."""
        t = MapTransform(99, 199, SW, NE)
        assert t.transform(SW) == (0, 199)
        assert t.transform(NE) == (99, 0)
        assert t.transform(GeoCoord(lat=1.0, lon=0.0)) == (0, 0)

    def test_truncates(self):
        """Test fractional positions truncate toward zero."""
        t = MapTransform(10, 10, SW, NE)
        assert t.transform(GeoCoord(lat=0.5, lon=0.55)) == (5, 5)

    def test_in_bounds(self):
        """Test points inside the extent stay inside the raster."""
        t = MapTransform(49, 99, SW, NE)
        for i in range(11):
            x, y = t.transform(GeoCoord(lat=i / 10, lon=(10 - i) / 10))
            assert 0 <= x <= 49
            assert 0 <= y <= 99

    def test_degenerate(self):
        """Test construction with a degenerate extent fails."""
        with pytest.raises(DegenerateExtentError):
            MapTransform(10, 10, SW, GeoCoord(0.0, 1.0))

    def test_meters_per_cell(self):
        """Test one cell is the great-circle diagonal of one cell at the origin."""
        t = MapTransform(100, 100, SW, NE)
        expected = haversine_distance(GeoCoord(0.0, 0.0), GeoCoord(0.01, 0.01))
        assert t.meters_per_cell() == pytest.approx(expected)
        assert 1500 < t.meters_per_cell() < 1600

    def test_transform_meters(self):
        """Test meters convert to whole pixels."""
        t = MapTransform(100, 100, SW, NE)
        cell = t.meters_per_cell()
        assert t.transform_meters(cell * 3.5) == 3
        assert t.transform_meters(cell / 2) == 0

    def test_transform_meters_scales_with_width(self):
        """Test wider rasters give more pixels per meter."""
        narrow = MapTransform(100, 100, SW, NE)
        wide = MapTransform(1000, 1000, SW, NE)
        assert wide.transform_meters(20000) > narrow.transform_meters(20000)


class TestMonotonic:
    """Projection preserves coordinate order."""

    def test_longitude_increases_x(self):
        """Test increasing longitude strictly increases x."""
        t = MapTransform(999, 999, SW, NE)
        xs = [t.transform(GeoCoord(lat=0.5, lon=i / 10))[0] for i in range(11)]
        assert all(a < b for a, b in zip(xs, xs[1:]))

    def test_latitude_decreases_y(self):
        """Test increasing latitude strictly decreases y."""
        t = MapTransform(999, 999, SW, NE)
        ys = [t.transform(GeoCoord(lat=i / 10, lon=0.5))[1] for i in range(11)]
        assert all(a > b for a, b in zip(ys, ys[1:]))
