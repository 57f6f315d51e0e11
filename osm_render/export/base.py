"""Shared pieces of the network exporters.

``NetworkContext`` runs the classifier once over an archive and keeps the
resolved coordinates, so each exporter only deals with its file format.
"""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List

from osm_render.extraction.node_stream import NodeStream
from osm_render.filters.way_classifier import classify_ways
from osm_render.models.primitives import GeoCoord
from osm_render.models.way_type import WayType, LAYER_ORDER
from osm_render.utils.geo_utils import path_length


@dataclass
class NetworkFeature:
    """A classified way with its resolved geographic points."""
    way_type: WayType
    points: List[GeoCoord]

    @property
    def kind(self) -> str:
        return self.way_type.kind

    @property
    def coordinates(self) -> List[List[float]]:
        """Points as ``[lon, lat]`` pairs, the order GIS formats expect."""
        return [[p.lon, p.lat] for p in self.points]

    @property
    def is_area(self) -> bool:
        """A park whose outline closes on itself; everything else is a line."""
        return (self.kind == 'park' and len(self.points) >= 4
                and self.points[0] == self.points[-1])

    @property
    def length_m(self) -> float:
        return path_length(self.points)

    def properties(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'width': self.way_type.width,
            'node_count': len(self.points),
            'length_m': round(self.length_m, 2),
        }


class NetworkContext:
    """Road, park and river features of one archive, resolved for export."""

    def __init__(self, archive):
        self.archive = archive
        self.features: List[NetworkFeature] = []
        self.processing_time = 0.0
        self._loaded = False

    def load(self) -> 'NetworkContext':
        """Classify the archive's ways once; later calls are no-ops."""
        if not self._loaded:
            started = time.time()
            self.features = [
                NetworkFeature(way_type, list(NodeStream.from_way_type(self.archive, way_type)))
                for way_type in classify_ways(self.archive)
            ]
            self.processing_time = time.time() - started
            self._loaded = True
        return self

    def counts(self) -> Dict[str, int]:
        counts = dict.fromkeys(LAYER_ORDER, 0)
        for feature in self.features:
            counts[feature.kind] += 1
        counts['total'] = len(self.features)
        return counts

    def build_metadata(self, **extras) -> Dict[str, Any]:
        """Metadata block written alongside every export."""
        metadata = {
            'archive': str(self.archive.path) if self.archive.path else None,
            'processing_time_seconds': round(self.processing_time, 3),
            'features': self.counts(),
        }
        metadata.update(extras)
        return metadata


class BaseExporter(ABC):
    """Writes a loaded NetworkContext in one file format."""

    @abstractmethod
    def export(self, context: NetworkContext, output_file: str) -> Dict[str, Any]:
        """Write ``context`` to ``output_file`` and return ``{'metadata': ...}``."""

    @abstractmethod
    def get_format_name(self) -> str:
        """Short format name, e.g. 'geojson'."""
