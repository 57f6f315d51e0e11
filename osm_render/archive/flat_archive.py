"""Memory-mapped reader for flat OSM archives.

An archive is a directory of columnar resources. Every resource file starts
with a little-endian u64 payload size followed by the payload. Fixed-size
records are decoded lazily with ``struct.unpack_from`` straight out of the
memory map, so opening an archive costs nothing beyond the mapping itself.

Way records use "next record as terminator" encoding: the node references
and tags of ``ways[i]`` run up to the first indices of ``ways[i + 1]``. The
writer appends a sentinel way so the last real way has a successor.
"""
import logging
import mmap
import struct
from collections import namedtuple
from pathlib import Path
from typing import Dict, Iterator, Tuple, Union, Any

from osm_render.exceptions import ArchiveError

logger = logging.getLogger(__name__)

SIGNATURE_FILE = 'osm.archive'
SIGNATURE = 'osm_render flat archive v1'

SIZE_HEADER = struct.Struct('<Q')

Node = namedtuple('Node', ['lat', 'lon'])
Way = namedtuple('Way', ['tag_first_idx', 'ref_first_idx'])
NodeIndex = namedtuple('NodeIndex', ['value'])
Tag = namedtuple('Tag', ['key_idx', 'value_idx'])
TagIndex = namedtuple('TagIndex', ['value'])

# Resource name -> (record type, struct layout)
RECORD_RESOURCES = {
    'nodes': (Node, '<qq'),
    'ways': (Way, '<QQ'),
    'nodes_index': (NodeIndex, '<Q'),
    'tags': (Tag, '<QQ'),
    'tags_index': (TagIndex, '<Q'),
}
STRINGTABLE = 'stringtable'
RESOURCE_NAMES = tuple(RECORD_RESOURCES) + (STRINGTABLE,)

Buffer = Union[bytes, bytearray, mmap.mmap]


class ArrayView:
    """Read-only random access view over fixed-size records in a buffer."""

    def __init__(self, name: str, buffer: Buffer, start: int, size: int,
                 record_type, fmt: str):
        self.name = name
        self._buffer = buffer
        self._start = start
        self._struct = struct.Struct(fmt)
        self._record_type = record_type
        if size % self._struct.size:
            raise ArchiveError(
                f"Resource '{name}' size {size} is not a multiple of "
                f"record size {self._struct.size}"
            )
        self._len = size // self._struct.size

    def __len__(self) -> int:
        return self._len

    def at(self, idx: int):
        """Decode the record at ``idx``."""
        if not 0 <= idx < self._len:
            raise IndexError(f"{self.name} index {idx} out of range (len {self._len})")
        values = self._struct.unpack_from(self._buffer, self._start + idx * self._struct.size)
        return self._record_type._make(values)

    __getitem__ = at

    def __iter__(self) -> Iterator:
        for idx in range(self._len):
            yield self.at(idx)

    def __repr__(self) -> str:
        return f"ArrayView({self.name!r}, len={self._len})"


class StringTable:
    """Concatenated null-terminated UTF-8 strings addressed by byte offset."""

    def __init__(self, buffer: Buffer, start: int, size: int):
        self._buffer = buffer
        self._start = start
        self._size = size

    def __len__(self) -> int:
        return self._size

    def substring(self, offset: int) -> str:
        """Return the string starting at ``offset`` up to its terminator.

        Raises:
            ArchiveError: Offset out of range, missing terminator or invalid UTF-8
        """
        if not 0 <= offset < self._size:
            raise ArchiveError(f"String offset {offset} out of range (size {self._size})")
        begin = self._start + offset
        end = self._buffer.find(b'\0', begin, self._start + self._size)
        if end < 0:
            raise ArchiveError(f"Unterminated string at offset {offset}")
        try:
            return bytes(self._buffer[begin:end]).decode('utf-8')
        except UnicodeDecodeError as e:
            raise ArchiveError(f"Invalid UTF-8 in string table at offset {offset}: {e}") from e

    __getitem__ = substring


def _payload_bounds(name: str, buffer: Buffer) -> Tuple[int, int]:
    """Validate the size header of a resource and return (start, size)."""
    if len(buffer) < SIZE_HEADER.size:
        raise ArchiveError(f"Resource '{name}' is truncated (missing size header)")
    (size,) = SIZE_HEADER.unpack_from(buffer, 0)
    if SIZE_HEADER.size + size > len(buffer):
        raise ArchiveError(
            f"Resource '{name}' is truncated: header says {size} bytes, "
            f"file holds {len(buffer) - SIZE_HEADER.size}"
        )
    return SIZE_HEADER.size, size


class FlatArchive:
    """Read-only flat OSM archive.

    Use :meth:`open` for an archive directory or :meth:`from_buffers` for
    in-memory resources. Works as a context manager; closing releases the
    memory maps.
    """

    def __init__(self, buffers: Dict[str, Buffer], path: Any = None):
        """
        Initialize from raw resource buffers (size header included).

        Args:
            buffers: Mapping of resource name to buffer
            path: Archive directory, for messages only

        Raises:
            ArchiveError: If a resource is missing or malformed
        """
        self.path = path
        self._buffers = buffers
        missing = [name for name in RESOURCE_NAMES if name not in buffers]
        if missing:
            raise ArchiveError(f"Archive is missing resources: {', '.join(missing)}")

        self._views: Dict[str, ArrayView] = {}
        for name, (record_type, fmt) in RECORD_RESOURCES.items():
            start, size = _payload_bounds(name, buffers[name])
            self._views[name] = ArrayView(name, buffers[name], start, size, record_type, fmt)

        start, size = _payload_bounds(STRINGTABLE, buffers[STRINGTABLE])
        self._strings = StringTable(buffers[STRINGTABLE], start, size)

    @classmethod
    def open(cls, path: Union[str, Path]) -> 'FlatArchive':
        """Memory-map an archive directory.

        Args:
            path: Archive directory

        Returns:
            Opened archive

        Raises:
            ArchiveError: If the directory is not a valid archive
        """
        path = Path(path)
        if not path.is_dir():
            raise ArchiveError(f"Archive directory not found: {path}")

        signature_path = path / SIGNATURE_FILE
        try:
            signature = signature_path.read_text(encoding='utf-8').strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ArchiveError(f"Cannot read archive signature {signature_path}: {e}") from e
        if signature != SIGNATURE:
            raise ArchiveError(f"Unsupported archive signature: {signature!r}")

        buffers: Dict[str, mmap.mmap] = {}
        try:
            for name in RESOURCE_NAMES:
                resource_path = path / name
                try:
                    with open(resource_path, 'rb') as f:
                        buffers[name] = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
                except (OSError, ValueError) as e:
                    raise ArchiveError(f"Cannot map resource {resource_path}: {e}") from e
            archive = cls(buffers, path=path)
        except ArchiveError:
            for mm in buffers.values():
                mm.close()
            raise

        logger.debug("Opened archive %s: %s", path, archive.counts())
        return archive

    @classmethod
    def from_buffers(cls, buffers: Dict[str, bytes]) -> 'FlatArchive':
        """Create an archive from in-memory resources (size header included)."""
        return cls(dict(buffers))

    def close(self) -> None:
        """Release memory maps; views must not be used afterwards."""
        for buffer in self._buffers.values():
            if isinstance(buffer, mmap.mmap):
                buffer.close()

    def __enter__(self) -> 'FlatArchive':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def nodes(self) -> ArrayView:
        return self._views['nodes']

    @property
    def ways(self) -> ArrayView:
        return self._views['ways']

    @property
    def nodes_index(self) -> ArrayView:
        return self._views['nodes_index']

    @property
    def tags(self) -> ArrayView:
        return self._views['tags']

    @property
    def tags_index(self) -> ArrayView:
        return self._views['tags_index']

    @property
    def stringtable(self) -> StringTable:
        return self._strings

    @property
    def way_count(self) -> int:
        """Number of real ways (the trailing sentinel is not a way)."""
        return max(len(self.ways) - 1, 0)

    def way_pairs(self) -> Iterator[Tuple[Way, Way]]:
        """Yield each way together with its successor record."""
        ways = self.ways
        for idx in range(len(ways) - 1):
            yield ways.at(idx), ways.at(idx + 1)

    def counts(self) -> Dict[str, int]:
        """Record counts per resource."""
        return {
            'nodes': len(self.nodes),
            'ways': self.way_count,
            'nodes_index': len(self.nodes_index),
            'tags': len(self.tags),
            'tags_index': len(self.tags_index),
            'stringtable_bytes': len(self.stringtable),
        }

    def __repr__(self) -> str:
        return f"FlatArchive(path={self.path!r}, ways={self.way_count}, nodes={len(self.nodes)})"
