"""Tests for the memory-mapped flat archive reader."""
import struct

import pytest

from osm_render.archive.builder import ArchiveBuilder
from osm_render.archive.flat_archive import (
    FlatArchive, StringTable, SIGNATURE_FILE, RESOURCE_NAMES, Node, Way,
)
from osm_render.exceptions import ArchiveError


def sized(payload: bytes) -> bytes:
    """Prefix a payload with its size header."""
    return struct.pack('<Q', len(payload)) + payload


@pytest.fixture
def archive_dir(tmp_path):
    """Small archive directory on disk."""
    builder = ArchiveBuilder()
    builder.add_node(10, 52.5, 13.4)
    builder.add_node(11, 52.6, 13.5)
    builder.add_way([10, 11], {'highway': 'primary', 'name': 'Main'})
    return builder.write(tmp_path / "test.flat")


class TestOpen:
    """Tests for FlatArchive.open."""

    def test_open_and_read(self, archive_dir):
        """Test resources are readable after opening."""
        with FlatArchive.open(archive_dir) as archive:
            assert len(archive.nodes) == 2
            assert archive.way_count == 1
            assert len(archive.ways) == 2
            assert archive.nodes.at(1) == Node(lat=52_600_000_000, lon=13_500_000_000)
            assert archive.ways[0] == Way(tag_first_idx=0, ref_first_idx=0)
            assert archive.ways[1] == Way(tag_first_idx=2, ref_first_idx=2)

    def test_counts(self, archive_dir):
        """Test per-resource record counts."""
        with FlatArchive.open(archive_dir) as archive:
            counts = archive.counts()
        assert counts['nodes'] == 2
        assert counts['ways'] == 1
        assert counts['tags'] == 2
        assert counts['tags_index'] == 2
        assert counts['nodes_index'] == 2

    def test_missing_directory(self, tmp_path):
        """Test opening a nonexistent path fails."""
        with pytest.raises(ArchiveError, match="not found"):
            FlatArchive.open(tmp_path / "nope")

    def test_bad_signature(self, archive_dir):
        """Test a foreign signature is rejected."""
        (archive_dir / SIGNATURE_FILE).write_text("something else")
        with pytest.raises(ArchiveError, match="signature"):
            FlatArchive.open(archive_dir)

    def test_missing_signature(self, archive_dir):
        """Test a directory without signature is rejected."""
        (archive_dir / SIGNATURE_FILE).unlink()
        with pytest.raises(ArchiveError):
            FlatArchive.open(archive_dir)

    @pytest.mark.parametrize("resource", RESOURCE_NAMES)
    def test_missing_resource(self, archive_dir, resource):
        """Test every resource is required."""
        (archive_dir / resource).unlink()
        with pytest.raises(ArchiveError, match=resource):
            FlatArchive.open(archive_dir)

    def test_truncated_resource(self, archive_dir):
        """Test a size header larger than the file is rejected."""
        data = (archive_dir / "nodes").read_bytes()
        (archive_dir / "nodes").write_bytes(data[:-4])
        with pytest.raises(ArchiveError, match="truncated"):
            FlatArchive.open(archive_dir)

    def test_partial_record(self, archive_dir):
        """Test a payload that is not a whole number of records is rejected."""
        (archive_dir / "ways").write_bytes(sized(b'\0' * 20))
        with pytest.raises(ArchiveError, match="multiple"):
            FlatArchive.open(archive_dir)


class TestArrayView:
    """Tests for fixed-size record views."""

    def test_index_error(self, make_archive):
        """Test out-of-range access raises IndexError."""
        archive = make_archive([([1, 2], [])])
        with pytest.raises(IndexError):
            archive.nodes.at(len(archive.nodes))
        with pytest.raises(IndexError):
            archive.nodes_index.at(-1)

    def test_iteration(self, make_archive):
        """Test iterating a view decodes every record."""
        archive = make_archive([([1, 2], [])])
        assert [entry.value for entry in archive.nodes_index] == [0, 1]

    def test_way_pairs(self, make_archive):
        """Test every real way is paired with its successor."""
        archive = make_archive([([1, 2], []), ([2, 3, 4], [])])
        pairs = list(archive.way_pairs())
        assert len(pairs) == 2
        assert pairs[0][1] == pairs[1][0]
        assert pairs[1][1].ref_first_idx == 5


class TestStringTable:
    """Tests for StringTable."""

    def test_substring(self):
        """Test strings are read up to their terminator."""
        table = StringTable(b'highway\0primary\0', 0, 16)
        assert table.substring(0) == 'highway'
        assert table.substring(8) == 'primary'
        assert table[3] == 'hway'

    def test_respects_start(self):
        """Test offsets are relative to the payload start."""
        buf = sized(b'ab\0cd\0')
        table = StringTable(buf, 8, 6)
        assert table.substring(3) == 'cd'

    def test_out_of_range(self):
        """Test offsets beyond the table fail."""
        with pytest.raises(ArchiveError, match="out of range"):
            StringTable(b'a\0', 0, 2).substring(2)

    def test_unterminated(self):
        """Test a string without terminator fails."""
        with pytest.raises(ArchiveError, match="Unterminated"):
            StringTable(b'abc', 0, 3).substring(0)

    def test_terminator_outside_payload(self):
        """Test a terminator beyond the payload end is not used."""
        with pytest.raises(ArchiveError):
            StringTable(b'abc\0', 0, 3).substring(1)

    def test_invalid_utf8(self):
        """Test invalid UTF-8 is reported as an archive error."""
        with pytest.raises(ArchiveError, match="UTF-8"):
            StringTable(b'\xff\xfe\0', 0, 3).substring(0)

    def test_unicode(self):
        """Test multi-byte strings decode."""
        data = 'Straße\0'.encode('utf-8')
        assert StringTable(data, 0, len(data)).substring(0) == 'Straße'


class TestFromBuffers:
    """Tests for in-memory archives."""

    def test_missing_resources(self):
        """Test all resources must be supplied."""
        with pytest.raises(ArchiveError, match="missing"):
            FlatArchive.from_buffers({'nodes': sized(b'')})

    def test_missing_size_header(self):
        """Test resources shorter than the size header fail."""
        buffers = {name: sized(b'') for name in RESOURCE_NAMES}
        buffers['tags'] = b'\0\0'
        with pytest.raises(ArchiveError, match="size header"):
            FlatArchive.from_buffers(buffers)

    def test_empty_resources(self):
        """Test an archive with no records is valid."""
        archive = FlatArchive.from_buffers({name: sized(b'') for name in RESOURCE_NAMES})
        assert archive.way_count == 0
        assert list(archive.way_pairs()) == []
