"""OSM XML reader over a memory map, feeding the archive builder.

Only what the archive needs is extracted: every node's id and position
(untagged nodes carry the geometry of ways) and each way's ordered node
references and tags. Relations and metadata attributes are skipped.
"""
import html
import logging
import mmap
import re
import time
from typing import Dict, Iterator, List, Optional, Tuple, Any

from osm_render.models.elements import OSMNode, OSMWay

logger = logging.getLogger(__name__)

# Opening <node> tag: id, lat, lon and whether it is self-closing.
# [^<>]*? keeps each match inside a single tag.
NODE_PATTERN = re.compile(
    rb'<node\s+id="([^"]+)"[^<>]*?lat="([^"]+)"[^<>]*?lon="([^"]+)"[^<>]*?(/>|>)'
)
NODE_END = b'</node>'
# Self-closing ways match on their own, with no body (group 2 is None)
WAY_PATTERN = re.compile(
    rb'<way\s+id="([^"]+)"[^<>]*?(?:/>|>(.*?)</way>)', re.DOTALL
)
TAG_PATTERN = re.compile(rb'<tag\s+k="([^"]*)"\s+v="([^"]*)"[^>]*/?>')
ND_PATTERN = re.compile(rb'<nd\s+ref="([^"]+)"[^>]*/>')


def _text(raw: bytes) -> Optional[str]:
    """Decode attribute bytes and resolve XML entities; None if not UTF-8."""
    try:
        return html.unescape(raw.decode('utf-8'))
    except UnicodeDecodeError:
        return None


class OSMXMLParser:
    """Regex-driven OSM XML parser."""

    def __init__(self):
        self.stats = dict.fromkeys(
            ('bytes_processed', 'nodes_parsed', 'ways_parsed', 'tags_extracted'), 0)
        self.stats['parsing_time'] = 0.0

    def extract_tags(self, content: bytes) -> Dict[str, str]:
        """Tags of an element body, in document order; undecodable tags are skipped."""
        tags = {}
        for key_raw, value_raw in TAG_PATTERN.findall(content):
            key, value = _text(key_raw), _text(value_raw)
            if key is None or value is None:
                continue
            tags[key] = value
        self.stats['tags_extracted'] += len(tags)
        return tags

    def extract_node_refs(self, content: bytes) -> List[str]:
        """Node ids referenced by a way body, in order (duplicates kept)."""
        return [ref.decode('ascii', errors='replace') for ref in ND_PATTERN.findall(content)]

    def parse_nodes(self, data: mmap.mmap) -> Iterator[OSMNode]:
        """Yield every node with a readable position."""
        for match in NODE_PATTERN.finditer(data):
            node_id, lat_raw, lon_raw, ending = match.groups()
            try:
                lat = float(lat_raw.decode('ascii'))
                lon = float(lon_raw.decode('ascii'))
            except (ValueError, UnicodeDecodeError):
                logger.debug("Skipping node with unreadable position at byte %d", match.start())
                continue

            tags = {}
            if ending == b'>':
                body_end = data.find(NODE_END, match.end())
                if body_end >= 0:
                    tags = self.extract_tags(data[match.end():body_end])

            self.stats['nodes_parsed'] += 1
            yield OSMNode(id=node_id.decode('ascii', errors='replace'), lat=lat, lon=lon, tags=tags)

    def parse_ways(self, data: mmap.mmap) -> Iterator[OSMWay]:
        """Yield ways that reference at least one node."""
        for match in WAY_PATTERN.finditer(data):
            way_id, body = match.groups()
            if body is None:
                continue
            refs = self.extract_node_refs(body)
            if not refs:
                continue
            self.stats['ways_parsed'] += 1
            yield OSMWay(id=way_id.decode('ascii', errors='replace'),
                         node_refs=refs, tags=self.extract_tags(body))

    def parse_file(self, file_path: str) -> Tuple[List[OSMNode], List[OSMWay]]:
        """Read all nodes and ways of an OSM XML file.

        Args:
            file_path: Path to OSM XML file

        Returns:
            Tuple of (nodes, ways)
        """
        started = time.time()
        with open(file_path, 'rb') as f:
            # mmap refuses zero-length files
            if f.seek(0, 2) == 0:
                logger.warning("OSM file %s is empty", file_path)
                return [], []
            with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as data:
                self.stats['bytes_processed'] = len(data)
                nodes = list(self.parse_nodes(data))
                ways = list(self.parse_ways(data))

        self.stats['parsing_time'] = time.time() - started
        logger.info("Parsed %s: %d nodes, %d ways in %.2fs",
                    file_path, len(nodes), len(ways), self.stats['parsing_time'])
        return nodes, ways

    def get_stats(self) -> Dict[str, Any]:
        """Copy of the parsing statistics."""
        return dict(self.stats)
