"""
osm_render - draw the road, park and river network of OpenStreetMap data.

Reads a memory-mapped flat archive of nodes, ways and tags, classifies
each way and renders the result as a PNG or SVG image.
"""

__version__ = "1.0.0"

# Errors
from osm_render.exceptions import (
    OSMRenderError, ArchiveError, RenderError,
    EmptyMapError, DegenerateExtentError, UnsupportedFormatError,
)

# Data models
from osm_render.models.primitives import GeoCoord, Color, Image
from osm_render.models.way_type import WayType, Park, Road, River

# Archive
from osm_render.archive.flat_archive import FlatArchive
from osm_render.archive.builder import ArchiveBuilder

# Classification and extraction
from osm_render.filters.way_classifier import classify_way, classify_ways
from osm_render.extraction.node_stream import NodeStream

# Rendering
from osm_render.rendering.transform import MapTransform
from osm_render.rendering.renderer import MapRenderer, render

__all__ = [
    # Version
    '__version__',
    # Errors
    'OSMRenderError', 'ArchiveError', 'RenderError',
    'EmptyMapError', 'DegenerateExtentError', 'UnsupportedFormatError',
    # Models
    'GeoCoord', 'Color', 'Image', 'WayType', 'Park', 'Road', 'River',
    # Archive
    'FlatArchive', 'ArchiveBuilder',
    # Pipeline
    'classify_way', 'classify_ways', 'NodeStream',
    'MapTransform', 'MapRenderer', 'render',
]
