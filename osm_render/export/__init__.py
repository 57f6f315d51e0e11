"""Export of the classified road/park/river network."""
import os

from osm_render.exceptions import UnsupportedFormatError
from osm_render.export.base import NetworkContext, NetworkFeature, BaseExporter
from osm_render.export.geojson_exporter import GeoJSONExporter
from osm_render.export.shapefile_exporter import ShapefileExporter, shapefile_available

EXPORT_FORMATS = {
    '.geojson': 'geojson',
    '.json': 'geojson',
    '.shp': 'shapefile',
}


def get_exporter(output_file: str) -> BaseExporter:
    """Pick an exporter from the output file extension.

    Raises:
        UnsupportedFormatError: If the extension is missing or unknown
        ImportError: If Shapefile output is requested without pyshp
    """
    ext = os.path.splitext(output_file)[1].lower()
    export_format = EXPORT_FORMATS.get(ext)
    if export_format is None:
        supported = ', '.join(sorted(EXPORT_FORMATS))
        raise UnsupportedFormatError(f"Cannot export to '{ext or output_file}' (use {supported}).")
    if export_format == 'shapefile':
        return ShapefileExporter()
    return GeoJSONExporter()


__all__ = [
    'NetworkContext', 'NetworkFeature', 'BaseExporter',
    'GeoJSONExporter', 'ShapefileExporter', 'shapefile_available',
    'EXPORT_FORMATS', 'get_exporter',
]
