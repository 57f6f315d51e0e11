"""OSM XML parsing for archive compilation."""

from osm_render.parsing.mmap_parser import OSMXMLParser

__all__ = ['OSMXMLParser']
