"""Geographic math and XML output helpers."""

from osm_render.utils.geo_utils import (
    haversine_distance, path_length, signed_ring_area, oriented_ring,
)
from osm_render.utils.xml_utils import xml_escape, format_attributes

__all__ = [
    'haversine_distance', 'path_length', 'signed_ring_area', 'oriented_ring',
    'xml_escape', 'format_attributes',
]
