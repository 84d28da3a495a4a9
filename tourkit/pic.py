"""Render pixel data as PNG images and print them for a viewer."""

from __future__ import annotations

import base64
import struct
import zlib
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_COLOR_RGB = 2
_COLOR_RGBA = 6


class _Image(Protocol):
    def bounds(self) -> tuple[int, int, int, int]: ...

    def at(self, x: int, y: int) -> tuple[int, int, int, int]: ...


@dataclass(frozen=True)
class PixelGrid:
    """A rectangle of non-premultiplied RGBA pixels stored row by row."""

    width: int
    height: int
    pix: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative size: {self.width}x{self.height}")
        if len(self.pix) != self.width * self.height * 4:
            raise ValueError(
                f"pixel data holds {len(self.pix)} bytes, "
                f"want {self.width * self.height * 4}"
            )

    def bounds(self) -> tuple[int, int, int, int]:
        """Return (min_x, min_y, max_x, max_y)."""
        return (0, 0, self.width, self.height)

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the RGBA colour at (x, y); transparent black outside."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return (0, 0, 0, 0)
        i = (y * self.width + x) * 4
        r, g, b, a = self.pix[i : i + 4]
        return (r, g, b, a)


def _chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def encode_png(image: _Image) -> bytes:
    """Encode an image with bounds() and at(x, y) as PNG bytes."""
    x0, y0, x1, y1 = image.bounds()
    width, height = x1 - x0, y1 - y0
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid image size: {width}x{height}")

    rows = [[tuple(image.at(x, y)) for x in range(x0, x1)] for y in range(y0, y1)]
    opaque = all(c[3] == 255 for row in rows for c in row)
    channels = 3 if opaque else 4
    color_type = _COLOR_RGB if opaque else _COLOR_RGBA

    raw = b"".join(
        b"\x00" + bytes(v for c in row for v in c[:channels]) for row in rows
    )
    header = struct.pack(">IIBBBBB", width, height, 8, color_type, 0, 0, 0)
    return (
        _PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", zlib.compress(raw))
        + _chunk(b"IEND", b"")
    )


def show_image(image: _Image) -> None:
    """Print the image as a base64 PNG line prefixed with "IMAGE:"."""
    encoded = base64.b64encode(encode_png(image)).decode("ascii")
    print("IMAGE:" + encoded)


def _take(seq: Sequence, n: int, what: str) -> Sequence:
    items = seq[:n]
    if len(items) < n:
        raise IndexError(f"{what} has {len(items)} entries, want {n}")
    return items


def show(f: Callable[[int, int], Sequence[Sequence[int]]]) -> None:
    """Call f(256, 256) and show its values as a blue-tinted picture."""
    dx = dy = 256
    data = f(dx, dy)
    pix = bytearray()
    for row in _take(data, dy, "picture"):
        for v in _take(row, dx, "row"):
            pix += bytes((v, v, 255, 255))
    show_image(PixelGrid(dx, dy, bytes(pix)))