"""Value types shared by the projection and rendering stages."""
from dataclasses import dataclass
from typing import NamedTuple

# Fixed-point archive coordinates are stored in nano-degrees
COORD_SCALE = 1e-9


@dataclass(frozen=True)
class GeoCoord:
    """Geographic point in degrees.

    Supports component-wise min/max so a bounding extent can be folded over
    a stream of coordinates.
    """
    lat: float
    lon: float

    @classmethod
    def from_fixed(cls, lat: int, lon: int) -> 'GeoCoord':
        """Create from fixed-point archive values."""
        return cls(lat=lat * COORD_SCALE, lon=lon * COORD_SCALE)

    @classmethod
    def from_node(cls, node) -> 'GeoCoord':
        """Create from an archive node record (anything with lat/lon ints)."""
        return cls.from_fixed(node.lat, node.lon)

    def min(self, other: 'GeoCoord') -> 'GeoCoord':
        return GeoCoord(lat=min(self.lat, other.lat), lon=min(self.lon, other.lon))

    def max(self, other: 'GeoCoord') -> 'GeoCoord':
        return GeoCoord(lat=max(self.lat, other.lat), lon=max(self.lon, other.lon))


class Color(NamedTuple):
    """RGBA pixel color, 0-255 per channel."""
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, hex_color: int, a: int = 255) -> 'Color':
        """Create from 0xRRGGBB."""
        return cls((hex_color >> 16) & 0xFF, (hex_color >> 8) & 0xFF, hex_color & 0xFF, a)

    @property
    def css(self) -> str:
        """CSS color string without alpha (e.g. '#001F3F')."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


WHITE = Color(255, 255, 255, 255)


class Image:
    """Raw RGBA8 pixel buffer, row-major, initialized to opaque white."""

    CHANNELS = 4

    def __init__(self, w: int, h: int):
        """
        Allocate a white image.

        Args:
            w: Width in pixels
            h: Height in pixels
        """
        if w <= 0 or h <= 0:
            raise ValueError(f"Image dimensions must be positive, got {w}x{h}")
        self.w = w
        self.h = h
        self.data = bytearray(b'\xff' * (w * h * self.CHANNELS))

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.w and 0 <= y < self.h):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.w}x{self.h} image")
        return (y * self.w + x) * self.CHANNELS

    def set(self, x: int, y: int, color: Color):
        """Overwrite a single pixel."""
        i = self._offset(x, y)
        self.data[i:i + 4] = bytes(color)

    def get(self, x: int, y: int) -> Color:
        """Read a single pixel."""
        i = self._offset(x, y)
        return Color(*self.data[i:i + 4])

    def row(self, y: int) -> memoryview:
        """Zero-copy view of one scanline."""
        stride = self.w * self.CHANNELS
        return memoryview(self.data)[y * stride:(y + 1) * stride]
