"""
SVG renderer - string-built vector output.

Features are grouped into one <g> per layer (roads, parks, rivers, in that
order); each feature becomes a <polyline> of raster-space points.
"""

from typing import Dict, List, Optional, Sequence, TextIO, Tuple

from ..models.way_type import LAYER_ORDER
from ..utils.xml_utils import format_attributes
from .styles import get_layer_style

Point = Tuple[int, int]

SVG_NAMESPACE = 'http://www.w3.org/2000/svg'


def format_points(points: Sequence[Point]) -> str:
    """Format raster points as an SVG points list ("x,y x,y ...")."""
    return ' '.join(f"{x},{y}" for x, y in points)


class SVGRenderer:
    """
    Collects polylines per layer and writes an SVG document.
    """

    def __init__(self, width: int, height: int):
        """
        Initialize an empty document.

        Args:
            width: viewBox width
            height: viewBox height
        """
        self.width = width
        self.height = height
        self.layers: Dict[str, List[str]] = {kind: [] for kind in LAYER_ORDER}

    def add_polyline(self, kind: str, points: Sequence[Point],
                     stroke_width: Optional[int] = None):
        """
        Add a feature polyline to a layer.

        Args:
            kind: Layer name ('road', 'park' or 'river')
            points: Raster-space points
            stroke_width: Per-feature stroke width in pixels
        """
        if kind not in self.layers:
            raise ValueError(f"Unknown layer '{kind}'")

        attrs: Dict[str, object] = {'points': format_points(points)}
        style = get_layer_style(kind)
        if style.stroke_opacity is not None:
            attrs['stroke-opacity'] = style.stroke_opacity
        if stroke_width is not None:
            attrs['stroke-width'] = stroke_width
        self.layers[kind].append(f'<polyline {format_attributes(attrs)}/>')

    def feature_count(self, kind: str) -> int:
        return len(self.layers[kind])

    def write_svg(self, stream: TextIO):
        """Write the document to a text stream."""
        root = format_attributes({
            'xmlns': SVG_NAMESPACE,
            'viewBox': f"0 0 {self.width} {self.height}",
        })
        stream.write(f'<svg {root}>\n')
        for kind in LAYER_ORDER:
            group = format_attributes(get_layer_style(kind).group_attributes())
            stream.write(f'<g {group}>\n')
            for polyline in self.layers[kind]:
                stream.write(polyline)
                stream.write('\n')
            stream.write('</g>\n')
        stream.write('</svg>\n')
