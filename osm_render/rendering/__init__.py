"""
Map rendering: world -> raster transform, PNG and SVG sinks, orchestration.
"""

from .transform import MapTransform, compute_extent, compute_raster_height
from .styles import LayerStyle, LAYER_STYLES, RIVER_WIDTH_SCALE, get_layer_style
from .png_renderer import PNGRenderer
from .svg_renderer import SVGRenderer
from .renderer import MapRenderer, render, detect_output_format, DEFAULT_WIDTH, OUTPUT_FORMATS

__all__ = [
    # Transform
    'MapTransform',
    'compute_extent',
    'compute_raster_height',
    # Styles
    'LayerStyle',
    'LAYER_STYLES',
    'RIVER_WIDTH_SCALE',
    'get_layer_style',
    # Sinks
    'PNGRenderer',
    'SVGRenderer',
    # Orchestration
    'MapRenderer',
    'render',
    'detect_output_format',
    'DEFAULT_WIDTH',
    'OUTPUT_FORMATS',
]
