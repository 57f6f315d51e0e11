"""Data models for geographic primitives, OSM elements and way classifications."""

from osm_render.models.primitives import GeoCoord, Color, Image, COORD_SCALE, WHITE
from osm_render.models.way_type import WayType, Park, Road, River, LAYER_ORDER
from osm_render.models.elements import OSMNode, OSMWay

__all__ = [
    'GeoCoord', 'Color', 'Image', 'COORD_SCALE', 'WHITE',
    'WayType', 'Park', 'Road', 'River', 'LAYER_ORDER',
    'OSMNode', 'OSMWay',
]
