"""
Render the road, park and river network of a flat archive to PNG or SVG.

Pipeline: classify ways -> extent over their coordinates -> raster size and
transform -> project each way's coordinates -> hand the point lists to the
PNG or SVG sink. Classification runs once for the extent and once more for
projection; nothing is cached between the two passes.
"""

import contextlib
import logging
import os
import time
from typing import Any, Callable, Dict, IO, Iterable, Iterator, List, Tuple

from ..exceptions import RenderError, UnsupportedFormatError
from ..extraction.node_stream import NodeStream
from ..filters.way_classifier import classify_ways
from ..models.primitives import GeoCoord, Image
from ..models.way_type import WayType, LAYER_ORDER
from .png_renderer import PNGRenderer
from .styles import get_layer_style, RIVER_WIDTH_SCALE
from .svg_renderer import SVGRenderer
from .transform import MapTransform, compute_extent, compute_raster_height

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 4000

OUTPUT_FORMATS = {
    '.png': 'png',
    '.svg': 'svg',
}

Point = Tuple[int, int]
ProjectedPath = Tuple[List[Point], WayType]


def detect_output_format(output_path) -> str:
    """Pick the output format from the file extension.

    Raises:
        UnsupportedFormatError: If the extension is missing or unknown
    """
    ext = os.path.splitext(os.fspath(output_path))[1]
    if not ext:
        raise UnsupportedFormatError("Unable to guess format from file name (no extension).")
    output_format = OUTPUT_FORMATS.get(ext.lower())
    if output_format is None:
        supported = ', '.join(sorted(OUTPUT_FORMATS))
        raise UnsupportedFormatError(f"File extension '{ext}' not supported (use {supported}).")
    return output_format


def iter_coordinates(archive, way_types: Iterable[WayType]) -> Iterator[GeoCoord]:
    """Chain the coordinate streams of classified ways."""
    for way_type in way_types:
        yield from NodeStream.from_way_type(archive, way_type)


def project_paths(archive, transform: MapTransform,
                  way_types: Iterable[WayType]) -> Iterator[ProjectedPath]:
    """Project each classified way into raster points."""
    for way_type in way_types:
        points = [transform.transform(coord)
                  for coord in NodeStream.from_way_type(archive, way_type)]
        yield points, way_type


def river_stroke_width(transform: MapTransform, way_type: WayType) -> int:
    """Pixel stroke width of a river, from its tagged width in meters."""
    return transform.transform_meters(way_type.width * RIVER_WIDTH_SCALE)


def _write_output(output_path, mode: str, write: Callable[[IO], None]):
    """Write through ``write``; a partially written file is removed on failure."""
    encoding = None if 'b' in mode else 'utf-8'
    f = open(output_path, mode, encoding=encoding)
    try:
        with f:
            write(f)
    except Exception:
        with contextlib.suppress(OSError):
            os.remove(output_path)
        raise


class MapRenderer:
    """
    Renders one archive at a fixed raster width.
    """

    def __init__(self, archive, width: int = DEFAULT_WIDTH, compress_level: int = 6):
        """
        Initialize renderer.

        Args:
            archive: Opened FlatArchive
            width: Raster width in pixels; height follows the extent's aspect
            compress_level: zlib level for PNG output
        """
        if width < 1:
            raise RenderError(f"Width must be at least 1 pixel, got {width}")
        self.archive = archive
        self.width = width
        self.compress_level = compress_level
        self.height = None
        self.extent = None
        self.transform = None

    def prepare(self) -> MapTransform:
        """Compute extent, raster height and the world -> raster transform."""
        min_coord, max_coord = compute_extent(
            iter_coordinates(self.archive, classify_ways(self.archive)))
        self.extent = (min_coord, max_coord)
        self.height = compute_raster_height(self.width, min_coord, max_coord)
        # -1 keeps coordinates exactly on the max edge inside the raster
        self.transform = MapTransform(self.width - 1, self.height - 1, min_coord, max_coord)

        logger.info("Extent lat %.6f..%.6f lon %.6f..%.6f -> %dx%d raster",
                    min_coord.lat, max_coord.lat, min_coord.lon, max_coord.lon,
                    self.width, self.height)
        return self.transform

    def paths(self) -> Iterator[ProjectedPath]:
        """Projected paths of all accepted ways, in archive order."""
        if self.transform is None:
            self.prepare()
        return project_paths(self.archive, self.transform, classify_ways(self.archive))

    def render(self, output_path) -> Dict[str, Any]:
        """
        Render to ``output_path``; the extension selects PNG or SVG.

        Returns:
            Metadata dict (format, size, feature counts)

        Raises:
            UnsupportedFormatError: Before any archive access or file creation
            EmptyMapError: If no way is accepted (no file is created)
            DegenerateExtentError: If the features span no area
        """
        start_time = time.time()
        output_format = detect_output_format(output_path)
        self.prepare()

        if output_format == 'png':
            counts = self._render_png(output_path)
        else:
            counts = self._render_svg(output_path)

        counts['total'] = sum(counts.values())
        min_coord, max_coord = self.extent
        logger.info("Rendered %d features to %s", counts['total'], output_path)

        return {
            'format': output_format,
            'output_file': os.fspath(output_path),
            'width': self.width,
            'height': self.height,
            'features': counts,
            'extent': {
                'min_lat': min_coord.lat,
                'min_lon': min_coord.lon,
                'max_lat': max_coord.lat,
                'max_lon': max_coord.lon,
            },
            'render_time_seconds': time.time() - start_time,
        }

    def _render_png(self, output_path) -> Dict[str, int]:
        """Rasterize every feature and encode the image."""
        layers: Dict[str, List[ProjectedPath]] = {kind: [] for kind in LAYER_ORDER}
        for points, way_type in self.paths():
            layers[way_type.kind].append((points, way_type))

        png = PNGRenderer(Image(self.width, self.height))

        # Back to front, same layering as the SVG groups
        for kind in LAYER_ORDER:
            style = get_layer_style(kind)
            for points, way_type in layers[kind]:
                if kind == 'park':
                    png.fill_polygon(points, style.fill, style.fill_opacity)
                    png.draw_polyline(points, style.stroke)
                elif kind == 'river':
                    stroke_width = max(1, river_stroke_width(self.transform, way_type))
                    png.draw_polyline(points, style.stroke, stroke_width, style.stroke_opacity)
                else:
                    png.draw_polyline(points, style.stroke)

        _write_output(output_path, 'wb', lambda f: png.write_png(f, self.compress_level))
        return {kind: len(layers[kind]) for kind in LAYER_ORDER}

    def _render_svg(self, output_path) -> Dict[str, int]:
        """Group features into layers and write the document."""
        svg = SVGRenderer(self.width, self.height)
        for points, way_type in self.paths():
            if way_type.kind == 'river':
                svg.add_polyline('river', points, river_stroke_width(self.transform, way_type))
            else:
                svg.add_polyline(way_type.kind, points)

        _write_output(output_path, 'w', svg.write_svg)
        return {kind: svg.feature_count(kind) for kind in LAYER_ORDER}


def render(archive, output_path, width: int = DEFAULT_WIDTH) -> Dict[str, Any]:
    """Render an archive's road/park/river network to a PNG or SVG file.

    Args:
        archive: Opened FlatArchive
        output_path: Output file; '.png' or '.svg'
        width: Raster width in pixels

    Returns:
        Metadata dict from :meth:`MapRenderer.render`
    """
    return MapRenderer(archive, width).render(output_path)
