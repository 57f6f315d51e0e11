"""Renderable feature classifications for archive ways."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class WayType:
    """Base classification of a way.

    Holds the half-open range [start_node_idx, end_node_idx) into the
    archive's node-index array that delimits the way's node references.
    """
    start_node_idx: int
    end_node_idx: int

    kind = 'way'

    @property
    def node_range(self) -> Tuple[int, int]:
        return self.start_node_idx, self.end_node_idx

    @property
    def node_count(self) -> int:
        return self.end_node_idx - self.start_node_idx

    @property
    def width(self) -> int:
        """Rendering weight; only rivers carry a tag-derived width."""
        return 1


@dataclass(frozen=True)
class Park(WayType):
    """Way tagged leisure=park."""
    kind = 'park'


@dataclass(frozen=True)
class Road(WayType):
    """Way tagged with an accepted highway value."""
    kind = 'road'


@dataclass(frozen=True)
class River(WayType):
    """Way tagged waterway, with an optional width/maxwidth in meters."""
    width: int = 1

    kind = 'river'


# Order in which feature kinds are layered on the canvas (back to front)
LAYER_ORDER = ('road', 'park', 'river')
