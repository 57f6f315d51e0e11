"""
Layer styles for road, park and river rendering.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..models.primitives import Color


# Visual exaggeration applied to river widths (meters) before scaling to pixels
RIVER_WIDTH_SCALE = 20


@dataclass(frozen=True)
class LayerStyle:
    """Stroke/fill attributes shared by every feature of a layer."""
    stroke: Color
    fill: Optional[Color] = None
    fill_opacity: Optional[float] = None
    stroke_opacity: Optional[float] = None

    def group_attributes(self) -> Dict[str, object]:
        """SVG attributes set on the layer's <g> element."""
        attrs: Dict[str, object] = {
            'stroke': self.stroke.css,
            'fill': self.fill.css if self.fill else 'none',
        }
        if self.fill_opacity is not None:
            attrs['fill-opacity'] = self.fill_opacity
        return attrs


LAYER_STYLES: Dict[str, LayerStyle] = {
    'road': LayerStyle(stroke=Color.from_hex(0x001F3F)),
    'park': LayerStyle(stroke=Color.from_hex(0x3D9970),
                       fill=Color.from_hex(0x3D9970),
                       fill_opacity=0.7),
    'river': LayerStyle(stroke=Color.from_hex(0x0074D9),
                        stroke_opacity=0.8),
}


def get_layer_style(kind: str) -> LayerStyle:
    """Look up the style of a feature kind ('road', 'park', 'river')."""
    try:
        return LAYER_STYLES[kind]
    except KeyError:
        raise ValueError(f"No style for feature kind '{kind}'") from None
