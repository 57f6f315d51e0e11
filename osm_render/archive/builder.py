"""Flat archive writer.

Compiles nodes and ways into the columnar layout read by
:class:`~osm_render.archive.flat_archive.FlatArchive`:

- node coordinates become fixed-point integers (nano-degrees),
- way node references are resolved to node record indices through
  ``nodes_index`` (references to unknown nodes are dropped),
- identical tags are stored once and shared through ``tags_index``,
- strings are de-duplicated into one null-terminated string table,
- a sentinel way terminates the last real way.
"""
import logging
import struct
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from osm_render.archive.flat_archive import (
    FlatArchive, RECORD_RESOURCES, STRINGTABLE, SIGNATURE, SIGNATURE_FILE, SIZE_HEADER,
)
from osm_render.models.primitives import COORD_SCALE

logger = logging.getLogger(__name__)

TagItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def to_fixed(degrees: float) -> int:
    """Convert degrees to fixed-point archive units."""
    return int(round(degrees / COORD_SCALE))


class ArchiveBuilder:
    """Accumulates nodes and ways and serializes them as a flat archive."""

    def __init__(self):
        self._nodes: List[Tuple[int, int]] = []
        self._node_ids: Dict[str, int] = {}
        self._ways: List[Tuple[int, int]] = []
        self._nodes_index: List[int] = []
        self._tags: List[Tuple[int, int]] = []
        self._tag_ids: Dict[Tuple[int, int], int] = {}
        self._tags_index: List[int] = []
        self._strings = bytearray()
        self._string_offsets: Dict[str, int] = {}

        # Statistics
        self.stats = {
            'nodes': 0,
            'ways': 0,
            'tags': 0,
            'dropped_refs': 0,
        }

    def add_string(self, value: str) -> int:
        """Intern a string and return its byte offset in the string table."""
        offset = self._string_offsets.get(value)
        if offset is None:
            encoded = value.encode('utf-8')
            if b'\0' in encoded:
                raise ValueError(f"String contains a null byte: {value!r}")
            offset = len(self._strings)
            self._strings.extend(encoded)
            self._strings.append(0)
            self._string_offsets[value] = offset
        return offset

    def add_tag(self, key: str, value: str) -> int:
        """Intern a key/value pair and return its tag record index."""
        pair = (self.add_string(key), self.add_string(value))
        idx = self._tag_ids.get(pair)
        if idx is None:
            idx = len(self._tags)
            self._tags.append(pair)
            self._tag_ids[pair] = idx
        return idx

    def add_node(self, node_id: Union[str, int], lat: float, lon: float) -> int:
        """Add a node and return its record index.

        Args:
            node_id: OSM node ID, used to resolve way references
            lat: Latitude in degrees
            lon: Longitude in degrees
        """
        idx = len(self._nodes)
        self._nodes.append((to_fixed(lat), to_fixed(lon)))
        self._node_ids[str(node_id)] = idx
        self.stats['nodes'] += 1
        return idx

    def add_way(self, node_refs: Iterable[Union[str, int]], tags: TagItems = ()) -> int:
        """Add a way and return its record index.

        Args:
            node_refs: Ordered node IDs; IDs not added before are dropped
            tags: Tag mapping or sequence of (key, value) pairs, storage order kept
        """
        idx = len(self._ways)
        self._ways.append((len(self._tags_index), len(self._nodes_index)))

        for ref in node_refs:
            node_idx = self._node_ids.get(str(ref))
            if node_idx is None:
                self.stats['dropped_refs'] += 1
                logger.debug("Way %d references unknown node %s", idx, ref)
                continue
            self._nodes_index.append(node_idx)

        items = tags.items() if isinstance(tags, Mapping) else tags
        for key, value in items:
            self._tags_index.append(self.add_tag(key, value))
            self.stats['tags'] += 1

        self.stats['ways'] += 1
        return idx

    @classmethod
    def from_osm_file(cls, osm_file: Union[str, Path]) -> 'ArchiveBuilder':
        """Create a builder populated from an OSM XML file."""
        from osm_render.parsing.mmap_parser import OSMXMLParser

        builder = cls()
        parser = OSMXMLParser()
        nodes, ways = parser.parse_file(str(osm_file))
        for node in nodes:
            builder.add_node(node.id, node.lat, node.lon)
        for way in ways:
            builder.add_way(way.node_refs, way.tags)

        if builder.stats['dropped_refs']:
            logger.warning("Dropped %d references to nodes missing from %s",
                           builder.stats['dropped_refs'], osm_file)
        return builder

    def _records(self) -> Dict[str, List[tuple]]:
        # Sentinel way closes the range of the last real way
        ways = self._ways + [(len(self._tags_index), len(self._nodes_index))]
        return {
            'nodes': self._nodes,
            'ways': ways,
            'nodes_index': [(v,) for v in self._nodes_index],
            'tags': self._tags,
            'tags_index': [(v,) for v in self._tags_index],
        }

    def serialize(self) -> Dict[str, bytes]:
        """Encode every resource, size header included."""
        resources = {}
        for name, records in self._records().items():
            _, fmt = RECORD_RESOURCES[name]
            packer = struct.Struct(fmt)
            payload = b''.join(packer.pack(*record) for record in records)
            resources[name] = SIZE_HEADER.pack(len(payload)) + payload
        resources[STRINGTABLE] = SIZE_HEADER.pack(len(self._strings)) + bytes(self._strings)
        return resources

    def build(self) -> FlatArchive:
        """Return an in-memory archive with the current contents."""
        return FlatArchive.from_buffers(self.serialize())

    def write(self, path: Union[str, Path]) -> Path:
        """Write the archive into directory ``path`` (created if needed).

        Returns:
            Archive directory path
        """
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        for name, data in self.serialize().items():
            (path / name).write_bytes(data)
        (path / SIGNATURE_FILE).write_text(SIGNATURE + '\n', encoding='utf-8')

        logger.info("Wrote archive %s: %d nodes, %d ways, %d unique tags, %d string bytes",
                    path, len(self._nodes), len(self._ways), len(self._tags), len(self._strings))
        return path
