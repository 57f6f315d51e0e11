"""Lazy coordinate streams over a way's node references."""
from typing import Iterator

from osm_render.models.primitives import GeoCoord
from osm_render.models.way_type import WayType


class NodeStream:
    """Re-iterable sequence of the coordinates a way references.

    Each iteration resolves node-index slots ``[start, end)`` through the
    archive's ``nodes_index`` to node records; nothing is cached, so a
    stream costs two integers until it is traversed.
    """

    def __init__(self, archive, start: int, end: int):
        self.nodes = archive.nodes
        self.nodes_index = archive.nodes_index
        self.start = start
        self.end = end

    @classmethod
    def from_way(cls, archive, way, next_way) -> 'NodeStream':
        """Stream for a way record delimited by its successor."""
        return cls(archive, way.ref_first_idx, next_way.ref_first_idx)

    @classmethod
    def from_way_type(cls, archive, way_type: WayType) -> 'NodeStream':
        """Stream for a classified way."""
        start, end = way_type.node_range
        return cls(archive, start, end)

    def __iter__(self) -> Iterator[GeoCoord]:
        nodes = self.nodes
        nodes_index = self.nodes_index
        for idx in range(self.start, self.end):
            yield GeoCoord.from_node(nodes.at(nodes_index.at(idx).value))

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def __repr__(self) -> str:
        return f"NodeStream({self.start}, {self.end})"
