"""Tests for the SVG renderer and layer styles."""
import io
import xml.etree.ElementTree as ET

import pytest

from osm_render.rendering.styles import get_layer_style, LAYER_STYLES
from osm_render.rendering.svg_renderer import SVGRenderer, format_points, SVG_NAMESPACE

NS = {'svg': SVG_NAMESPACE}


def parse_document(svg):
    buf = io.StringIO()
    svg.write_svg(buf)
    return ET.fromstring(buf.getvalue())


class TestFormatPoints:
    """Tests for format_points."""

    def test_format(self):
        """Test points are space separated x,y pairs."""
        assert format_points([(1, 2), (30, 40)]) == '1,2 30,40'

    def test_empty(self):
        """Test no points give an empty string."""
        assert format_points([]) == ''


class TestLayerStyles:
    """Tests for layer styles."""

    def test_colors(self):
        """Test layer colors."""
        assert get_layer_style('road').stroke.css == '#001F3F'
        assert get_layer_style('park').fill.css == '#3D9970'
        assert get_layer_style('river').stroke.css == '#0074D9'

    def test_group_attributes(self):
        """Test group attributes per layer."""
        assert LAYER_STYLES['road'].group_attributes() == {'stroke': '#001F3F', 'fill': 'none'}
        assert LAYER_STYLES['park'].group_attributes() == {
            'stroke': '#3D9970', 'fill': '#3D9970', 'fill-opacity': 0.7,
        }
        assert LAYER_STYLES['river'].group_attributes() == {'stroke': '#0074D9', 'fill': 'none'}

    def test_unknown_kind(self):
        """Test unknown kinds have no style."""
        with pytest.raises(ValueError):
            get_layer_style('building')


class TestSVGRenderer:
    """Tests for SVGRenderer."""

    def test_empty_document(self):
        """Test a document always has three groups."""
        root = parse_document(SVGRenderer(10, 20))
        assert root.tag == f'{{{SVG_NAMESPACE}}}svg'
        assert root.get('viewBox') == '0 0 10 20'
        groups = root.findall('svg:g', NS)
        assert [g.get('stroke') for g in groups] == ['#001F3F', '#3D9970', '#0074D9']
        assert all(len(g) == 0 for g in groups)

    def test_polylines_grouped_by_layer(self):
        """Test features land in their layer's group in insertion order."""
        svg = SVGRenderer(100, 100)
        svg.add_polyline('river', [(0, 0), (5, 5)], stroke_width=3)
        svg.add_polyline('road', [(1, 1), (2, 2)])
        svg.add_polyline('road', [(3, 3), (4, 4)])

        root = parse_document(svg)
        road, park, river = root.findall('svg:g', NS)
        assert [p.get('points') for p in road] == ['1,1 2,2', '3,3 4,4']
        assert len(park) == 0
        (polyline,) = river
        assert polyline.get('stroke-width') == '3'
        assert polyline.get('stroke-opacity') == '0.8'
        assert svg.feature_count('road') == 2

    def test_park_group_fill(self):
        """Test the park group carries the fill opacity."""
        root = parse_document(SVGRenderer(1, 1))
        park = root.findall('svg:g', NS)[1]
        assert park.get('fill') == '#3D9970'
        assert park.get('fill-opacity') == '0.7'

    def test_unknown_layer(self):
        """Test adding to an unknown layer fails."""
        with pytest.raises(ValueError):
            SVGRenderer(1, 1).add_polyline('building', [(0, 0)])

    def test_write_svg_to_file(self, tmp_path):
        """Test streaming the document into a text file."""
        path = tmp_path / "out.svg"
        svg = SVGRenderer(5, 5)
        svg.add_polyline('park', [(0, 0), (4, 0), (4, 4), (0, 0)])
        with open(path, 'w', encoding='utf-8') as out:
            svg.write_svg(out)
        root = ET.parse(str(path)).getroot()
        assert len(root.findall('svg:g/svg:polyline', NS)) == 1
