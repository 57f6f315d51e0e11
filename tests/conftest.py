"""Pytest fixtures for osm_render tests."""
import pytest

from osm_render.archive.builder import ArchiveBuilder


SMALL_OSM = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
  <node id="1" lat="52.5000" lon="13.4000"/>
  <node id="2" lat="52.5100" lon="13.4100"/>
  <node id="3" lat="52.5200" lon="13.4200">
    <tag k="amenity" v="cafe"/>
  </node>
  <node id="4" lat="52.5000" lon="13.4200"/>
  <node id="5" lat="52.5050" lon="13.4050"/>
  <node id="6" lat="52.5150" lon="13.4150"/>
  <way id="100">
    <nd ref="1"/><nd ref="2"/><nd ref="3"/>
    <tag k="highway" v="primary"/>
    <tag k="name" v="Unter den Linden"/>
  </way>
  <way id="101">
    <nd ref="1"/><nd ref="4"/><nd ref="3"/><nd ref="1"/>
    <tag k="leisure" v="park"/>
    <tag k="name" v="Tiergarten"/>
  </way>
  <way id="102">
    <nd ref="5"/><nd ref="6"/>
    <tag k="waterway" v="river"/>
    <tag k="width" v="15"/>
  </way>
  <way id="103">
    <nd ref="2"/><nd ref="5"/>
    <tag k="highway" v="footway"/>
  </way>
</osm>'''


def build_archive(ways, nodes=None):
    """Build an in-memory archive.

    Args:
        ways: List of (node_ids, tags) where tags is a list of (key, value)
        nodes: Mapping of node id -> (lat, lon); defaults to a small grid
    """
    if nodes is None:
        nodes = {
            1: (0.0, 0.0),
            2: (1.0, 1.0),
            3: (1.0, 0.0),
            4: (0.0, 1.0),
        }
    builder = ArchiveBuilder()
    for node_id, (lat, lon) in nodes.items():
        builder.add_node(node_id, lat, lon)
    for refs, tags in ways:
        builder.add_way(refs, tags)
    return builder.build()


@pytest.fixture
def small_osm_file(tmp_path):
    """Create minimal OSM file with a road, a park, a river and a footway."""
    file = tmp_path / "small.osm"
    file.write_text(SMALL_OSM, encoding='utf-8')
    return file


@pytest.fixture
def empty_osm_file(tmp_path):
    """Create empty OSM file."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
</osm>'''
    file = tmp_path / "empty.osm"
    file.write_text(content)
    return file


@pytest.fixture
def small_archive_dir(tmp_path, small_osm_file):
    """Archive directory compiled from small_osm_file."""
    return ArchiveBuilder.from_osm_file(small_osm_file).write(tmp_path / "small.flat")


@pytest.fixture
def road_park_archive():
    """One road and one park over a 1x1 degree extent."""
    return build_archive([
        ([1, 2], [('highway', 'primary')]),
        ([1, 3, 2, 4, 1], [('leisure', 'park')]),
    ])


@pytest.fixture
def footway_archive_dir(tmp_path):
    """Archive whose only way is an excluded highway."""
    builder = ArchiveBuilder()
    builder.add_node(1, 0.0, 0.0)
    builder.add_node(2, 1.0, 1.0)
    builder.add_way([1, 2], [('highway', 'footway')])
    return builder.write(tmp_path / "footway.flat")


@pytest.fixture
def make_archive():
    """Factory fixture wrapping build_archive."""
    return build_archive
