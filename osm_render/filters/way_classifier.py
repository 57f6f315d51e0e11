"""Tag-driven classification of archive ways into renderable feature types.

Scanning rules, applied to a way's tags in storage order:

- ``highway``: excluded values reject the way wherever they appear,
  anything else makes a road.
- ``waterway``: a river, with its width taken from the first ``width`` or
  ``maxwidth`` tag (non-numeric width rejects the way).
- ``leisure=park``: provisional park.

The first accepted ``highway`` or ``waterway`` tag decides the type; a park
is only used when neither is present.
"""
import logging
from typing import Iterator, Optional, FrozenSet

from osm_render.models.way_type import WayType, Park, Road, River

logger = logging.getLogger(__name__)

# Highway values that are not drawn as roads
EXCLUDED_HIGHWAY_TYPES: FrozenSet[str] = frozenset({
    'pedestrian', 'steps', 'footway', 'construction', 'bic',
    'cycleway', 'layby', 'bridleway', 'path',
})

WIDTH_KEYS: FrozenSet[str] = frozenset({'width', 'maxwidth'})

DEFAULT_RIVER_WIDTH = 1

# Widths are stored as unsigned 32-bit integers
MAX_WIDTH = 2 ** 32 - 1

# Minimum node references for a drawable path
MIN_WAY_NODES = 2


def parse_width(value: str) -> Optional[int]:
    """Parse an unsigned integer width tag value.

    Args:
        value: Raw tag value

    Returns:
        Width, or None if the value is not an unsigned 32-bit integer

    Examples:
        >>> parse_width("12")
        12
        >>> parse_width("3.5") is None
        True
    """
    digits = value[1:] if value.startswith('+') else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    width = int(digits)
    if width > MAX_WIDTH:
        return None
    return width


def _river_width(start_tag_idx: int, end_tag_idx: int, tags_index, tags, strings) -> Optional[int]:
    """Find the river width among a way's tags.

    Returns:
        Parsed width, DEFAULT_RIVER_WIDTH if no width tag exists,
        or None if the first width tag is not numeric
    """
    for tag_idx in range(start_tag_idx, end_tag_idx):
        tag = tags.at(tags_index.at(tag_idx).value)
        if strings.substring(tag.key_idx) in WIDTH_KEYS:
            return parse_width(strings.substring(tag.value_idx))
    return DEFAULT_RIVER_WIDTH


def classify_way(way, next_way, tags_index, tags, strings) -> Optional[WayType]:
    """Classify a single way.

    Args:
        way: Way record (tag_first_idx, ref_first_idx)
        next_way: Successor record delimiting ``way``'s ranges
        tags_index: Tag slot -> tag record redirection view
        tags: Tag record view
        strings: String table

    Returns:
        Road, River or Park, or None if the way is not rendered
    """
    start_node_idx = way.ref_first_idx
    end_node_idx = next_way.ref_first_idx
    if end_node_idx - start_node_idx < MIN_WAY_NODES:
        return None

    start_tag_idx = way.tag_first_idx
    end_tag_idx = next_way.tag_first_idx

    decided: Optional[WayType] = None
    provisional: Optional[WayType] = None
    for tag_idx in range(start_tag_idx, end_tag_idx):
        tag = tags.at(tags_index.at(tag_idx).value)
        key = strings.substring(tag.key_idx)

        if key == 'highway':
            if strings.substring(tag.value_idx) in EXCLUDED_HIGHWAY_TYPES:
                return None
            if decided is None:
                decided = Road(start_node_idx, end_node_idx)

        elif key == 'waterway':
            if decided is None:
                width = _river_width(start_tag_idx, end_tag_idx, tags_index, tags, strings)
                if width is None:
                    logger.debug("Rejecting waterway with non-numeric width (node range %d-%d)",
                                 start_node_idx, end_node_idx)
                    return None
                decided = River(start_node_idx, end_node_idx, width=width)

        elif key == 'leisure' and strings.substring(tag.value_idx) == 'park':
            provisional = Park(start_node_idx, end_node_idx)

    return decided or provisional


def classify_ways(archive) -> Iterator[WayType]:
    """Classify every way of an archive, skipping rejected ones.

    Side-effect free: calling it again re-runs the same classification.

    Args:
        archive: FlatArchive

    Yields:
        Accepted WayType classifications in way order
    """
    tags_index = archive.tags_index
    tags = archive.tags
    strings = archive.stringtable

    for way, next_way in archive.way_pairs():
        way_type = classify_way(way, next_way, tags_index, tags, strings)
        if way_type is not None:
            yield way_type
