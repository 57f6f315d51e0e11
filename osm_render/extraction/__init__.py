"""Coordinate extraction from archive ways."""

from osm_render.extraction.node_stream import NodeStream

__all__ = ['NodeStream']
