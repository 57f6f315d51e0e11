"""GeoJSON export of the classified network."""
import json
from typing import Any, Dict

from osm_render.export.base import NetworkContext, NetworkFeature, BaseExporter
from osm_render.utils.geo_utils import oriented_ring


def feature_geometry(feature: NetworkFeature) -> Dict[str, Any]:
    """Polygon for closed parks (counter-clockwise ring), LineString otherwise."""
    if feature.is_area:
        return {'type': 'Polygon', 'coordinates': [oriented_ring(feature.coordinates)]}
    return {'type': 'LineString', 'coordinates': feature.coordinates}


class GeoJSONExporter(BaseExporter):
    """Export to an RFC 7946 FeatureCollection."""

    def __init__(self, compact: bool = False):
        self.compact = compact

    def get_format_name(self) -> str:
        return 'geojson'

    def export(self, context: NetworkContext, output_file: str) -> Dict[str, Any]:
        context.load()
        metadata = context.build_metadata(format='geojson', output_file=output_file)
        collection = {
            'type': 'FeatureCollection',
            'features': [
                {
                    'type': 'Feature',
                    'geometry': feature_geometry(feature),
                    'properties': feature.properties(),
                }
                for feature in context.features
            ],
            'metadata': metadata,
        }

        dump_options = {'separators': (',', ':')} if self.compact else {'indent': 2}
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(collection, f, **dump_options)

        return {'metadata': metadata}
