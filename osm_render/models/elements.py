"""OSM element data models produced by the XML parser."""
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class OSMNode:
    """OSM Node with location and tags."""
    id: str
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class OSMWay:
    """OSM Way with node references and tags.

    Tags keep document order, which is also the order they are stored in
    the flat archive and scanned by the classifier.
    """
    id: str
    node_refs: List[str] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
