"""Flat columnar OSM archive: memory-mapped reader and writer."""

from osm_render.archive.flat_archive import (
    FlatArchive, ArrayView, StringTable,
    Node, Way, NodeIndex, Tag, TagIndex,
    SIGNATURE, SIGNATURE_FILE,
)
from osm_render.archive.builder import ArchiveBuilder, to_fixed

__all__ = [
    'FlatArchive', 'ArrayView', 'StringTable',
    'Node', 'Way', 'NodeIndex', 'Tag', 'TagIndex',
    'SIGNATURE', 'SIGNATURE_FILE',
    'ArchiveBuilder', 'to_fixed',
]
