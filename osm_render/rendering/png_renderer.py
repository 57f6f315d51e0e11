"""
Pure Python PNG renderer.

Draws into an RGBA :class:`~osm_render.models.primitives.Image` and encodes
it with zlib as 8-bit RGBA, no interlace, filter type 0 on every scanline.
"""

import math
import struct
import zlib
from typing import BinaryIO, Dict, Iterator, List, Optional, Sequence, Tuple

from ..models.primitives import Color, Image

Point = Tuple[int, int]
Span = Tuple[int, int]

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

# IHDR color type for 8-bit RGBA
COLOR_TYPE_RGBA = 6


def png_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    """Length, type, payload and CRC-32 of one PNG chunk."""
    crc = zlib.crc32(payload, zlib.crc32(chunk_type)) & 0xffffffff
    return struct.pack('>I', len(payload)) + chunk_type + payload + struct.pack('>I', crc)


def bresenham(x0: int, y0: int, x1: int, y1: int) -> Iterator[Point]:
    """Integer points of the segment from (x0, y0) to (x1, y1), both ends included."""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    step_x = 1 if x0 < x1 else -1
    step_y = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += step_x
        if e2 <= dx:
            err += dx
            y0 += step_y


def _chord(lo: float, hi: float, a: float, b: float) -> Tuple[float, float]:
    return max(lo, min(a, b)), min(hi, max(a, b))


def capsule_chord(p: Point, q: Point, radius: float, y: int) -> Optional[Tuple[float, float]]:
    """
    X range where row ``y`` crosses the set of points within ``radius`` of segment pq.

    The set is convex, so the crossing is one interval: the union of the two
    end-cap discs and the band swept along the segment.
    """
    (x0, y0), (x1, y1) = p, q
    lo, hi = math.inf, -math.inf
    for cx, cy in (p, q):
        h = radius * radius - (y - cy) ** 2
        if h >= 0:
            s = math.sqrt(h)
            lo, hi = min(lo, cx - s), max(hi, cx + s)

    dx, dy = x1 - x0, y1 - y0
    if dx or dy:
        length_sq = dx * dx + dy * dy
        reach = radius * math.sqrt(length_sq)
        rel_y = y - y0
        band_lo, band_hi = -math.inf, math.inf
        # Projection onto the segment must fall between its ends
        if dx:
            band_lo, band_hi = _chord(band_lo, band_hi,
                                      x0 - dy * rel_y / dx,
                                      x0 + (length_sq - dy * rel_y) / dx)
        elif not 0 <= dy * rel_y <= length_sq:
            band_lo, band_hi = math.inf, -math.inf
        # Perpendicular distance within radius
        if dy:
            band_lo, band_hi = _chord(band_lo, band_hi,
                                      x0 + (dx * rel_y - reach) / dy,
                                      x0 + (dx * rel_y + reach) / dy)
        elif abs(dx * rel_y) > reach:
            band_lo, band_hi = math.inf, -math.inf
        if band_lo <= band_hi:
            lo, hi = min(lo, band_lo), max(hi, band_hi)

    return (lo, hi) if lo <= hi else None


def merge_spans(spans: List[Span]) -> List[Span]:
    """Sorted, non-overlapping cover of inclusive pixel spans."""
    merged: List[Span] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1] + 1:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


class PNGRenderer:
    """
    Rasterizes polylines and polygons into an RGBA image.

    Everything is clipped to the image, so Image.set() only ever sees
    in-bounds coordinates.
    """

    def __init__(self, image: Image):
        self.image = image
        self.width = image.w
        self.height = image.h
        # A brush reaching this far from any in-image centre covers everything
        self.max_radius = math.ceil(math.hypot(self.width, self.height))

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, color: Color):
        """Overwrite one pixel; off-image coordinates are ignored."""
        if self._inside(x, y):
            self.image.set(x, y, color)

    def blend_pixel(self, x: int, y: int, color: Color, alpha: float):
        """Composite ``color`` over the current pixel with the given opacity."""
        if self._inside(x, y):
            under = self.image.get(x, y)
            self.image.set(x, y, Color(round(under.r + (color.r - under.r) * alpha),
                                       round(under.g + (color.g - under.g) * alpha),
                                       round(under.b + (color.b - under.b) * alpha),
                                       under.a))

    def _fill_span(self, y: int, x_start: int, x_end: int, color: Color, alpha: float):
        """Paint pixels x_start..x_end of row ``y``, already clipped to the image."""
        if alpha >= 1.0:
            offset = (y * self.width + x_start) * Image.CHANNELS
            count = x_end - x_start + 1
            self.image.data[offset:offset + count * Image.CHANNELS] = bytes(color) * count
        else:
            for x in range(x_start, x_end + 1):
                self.blend_pixel(x, y, color, alpha)

    def _clip_span(self, rows: Dict[int, List[Span]], y: int, left: float, right: float):
        start = max(0, math.ceil(left))
        end = min(self.width - 1, math.floor(right))
        if start <= end:
            rows.setdefault(y, []).append((start, end))

    def stroke_spans(self, points: Sequence[Point], width: int = 1) -> Dict[int, List[Span]]:
        """
        Pixels covered by a stroke through ``points``, as merged spans per row.

        Width 1 follows the Bresenham points; wider strokes cover every pixel
        centre within width / 2 of the path (round caps and joins). The radius
        is capped at the image diagonal and rows are clipped to the image.
        """
        rows: Dict[int, List[Span]] = {}
        if not points:
            return rows
        segments = list(zip(points, points[1:])) or [(points[0], points[0])]

        if width <= 1:
            for (x0, y0), (x1, y1) in segments:
                for x, y in bresenham(x0, y0, x1, y1):
                    if self._inside(x, y):
                        rows.setdefault(y, []).append((x, x))
        else:
            radius = min(width / 2.0, self.max_radius)
            for p, q in segments:
                top = max(0, math.floor(min(p[1], q[1]) - radius))
                bottom = min(self.height - 1, math.ceil(max(p[1], q[1]) + radius))
                for y in range(top, bottom + 1):
                    chord = capsule_chord(p, q, radius, y)
                    if chord:
                        self._clip_span(rows, y, *chord)

        return {y: merge_spans(spans) for y, spans in rows.items()}

    def draw_polyline(self, points: Sequence[Point], color: Color,
                      width: int = 1, alpha: float = 1.0):
        """Stroke consecutive segments through ``points``, each pixel painted once."""
        for y, spans in self.stroke_spans(points, width).items():
            for x_start, x_end in spans:
                self._fill_span(y, x_start, x_end, color, alpha)

    def fill_polygon(self, points: Sequence[Point], color: Color, alpha: float = 1.0):
        """Even-odd scanline fill; the outline is implicitly closed."""
        if len(points) < 3:
            return

        # Non-horizontal edges as (y_top, y_bottom, x at y_top, dx/dy)
        edges: List[Tuple[int, int, float, float]] = []
        for (xa, ya), (xb, yb) in zip(points, list(points[1:]) + [points[0]]):
            if ya == yb:
                continue
            if ya > yb:
                xa, ya, xb, yb = xb, yb, xa, ya
            edges.append((ya, yb, float(xa), (xb - xa) / (yb - ya)))
        if not edges:
            return

        top = max(0, min(e[0] for e in edges))
        bottom = min(self.height - 1, max(e[1] for e in edges))
        for y in range(top, bottom + 1):
            crossings = sorted(x0 + (y - y0) * slope
                               for y0, y1, x0, slope in edges if y0 <= y < y1)
            spans = []
            for left, right in zip(crossings[::2], crossings[1::2]):
                start, end = max(0, int(left)), min(self.width - 1, int(right))
                if start <= end:
                    spans.append((start, end))
            for x_start, x_end in merge_spans(spans):
                self._fill_span(y, x_start, x_end, color, alpha)

    def write_png(self, stream: BinaryIO, compress_level: int = 6):
        """Encode the image into a binary stream, compressing row by row."""
        header = struct.pack('>IIBBBBB', self.width, self.height,
                             8, COLOR_TYPE_RGBA, 0, 0, 0)

        compressor = zlib.compressobj(compress_level)
        idat = bytearray()
        for y in range(self.height):
            idat += compressor.compress(b'\x00')
            idat += compressor.compress(self.image.row(y))
        idat += compressor.flush()

        stream.write(PNG_SIGNATURE)
        stream.write(png_chunk(b'IHDR', header))
        stream.write(png_chunk(b'IDAT', bytes(idat)))
        stream.write(png_chunk(b'IEND', b''))
