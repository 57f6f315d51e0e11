"""Way classification filters."""

from osm_render.filters.way_classifier import (
    classify_way, classify_ways, parse_width, EXCLUDED_HIGHWAY_TYPES,
)

__all__ = ['classify_way', 'classify_ways', 'parse_width', 'EXCLUDED_HIGHWAY_TYPES']
