"""Shapefile export of the classified network.

Requires pyshp: pip install osmrender[shapefile]

A shapefile holds a single geometry type, so ``network.shp`` becomes
``network_lines.shp`` (roads, rivers, open parks) and
``network_polygons.shp`` (closed parks), each with a WGS84 ``.prj``.
"""
import os
from typing import Any, Dict, List

from osm_render.export.base import NetworkContext, BaseExporter, NetworkFeature
from osm_render.utils.geo_utils import oriented_ring

# Optional import - graceful handling if pyshp not installed
try:
    import shapefile
    HAS_PYSHP = True
except ImportError:
    HAS_PYSHP = False
    shapefile = None


WGS84_PRJ = (
    'GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",'
    'SPHEROID["WGS_1984",6378137,298.257223563]],'
    'PRIMEM["Greenwich",0],UNIT["Degree",0.017453292519943295]]'
)

# dBase attribute columns: (name, type, size[, decimals])
FIELDS = (
    ('kind', 'C', 10),
    ('width', 'N', 10),
    ('nodes', 'N', 10),
    ('length_m', 'N', 16, 2),
)


def shapefile_available() -> bool:
    """Check if pyshp is installed."""
    return HAS_PYSHP


class ShapefileExporter(BaseExporter):
    """Export lines and park polygons to ESRI Shapefiles."""

    def __init__(self):
        if not HAS_PYSHP:
            raise ImportError(
                "pyshp is required for Shapefile export. "
                "Install with: pip install osmrender[shapefile]"
            )

    def get_format_name(self) -> str:
        return 'shapefile'

    def export(self, context: NetworkContext, output_file: str) -> Dict[str, Any]:
        context.load()
        base_path = os.path.splitext(output_file)[0]

        groups = {
            'lines': [f for f in context.features if not f.is_area],
            'polygons': [f for f in context.features if f.is_area],
        }
        created = []
        for suffix, features in groups.items():
            if not features:
                continue
            path = f"{base_path}_{suffix}"
            self._write_layer(path, features, polygons=(suffix == 'polygons'))
            created.append(f"{path}.shp")

        return {
            'metadata': context.build_metadata(
                format='shapefile',
                files_created=created,
                lines_exported=len(groups['lines']),
                polygons_exported=len(groups['polygons']),
            )
        }

    def _write_layer(self, path: str, features: List[NetworkFeature], polygons: bool) -> None:
        shape_type = shapefile.POLYGON if polygons else shapefile.POLYLINE
        with shapefile.Writer(path, shapeType=shape_type) as writer:
            for field in FIELDS:
                writer.field(*field)
            for feature in features:
                if polygons:
                    writer.poly([oriented_ring(feature.coordinates, clockwise=True)])
                else:
                    writer.line([feature.coordinates])
                writer.record(feature.kind, feature.way_type.width,
                              len(feature.points), round(feature.length_m, 2))

        with open(f"{path}.prj", 'w', encoding='utf-8') as prj:
            prj.write(WGS84_PRJ)
