"""Worked answers to small programming exercises."""

from __future__ import annotations

import math
from collections import Counter
from typing import BinaryIO, Iterator


class NegativeSqrtError(ValueError):
    """Raised when asked for the square root of a negative number."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(f"Sqrt: negative number {value:g}")


def sqrt_checked(f: float) -> float:
    """Newton's square root to within 1e-10; negative input raises."""
    if f < 0:
        raise NegativeSqrtError(f)
    if f == 0:
        return 0.0
    delta = 1e-10
    z = float(f)
    while True:
        n = z - (z * z - f) / (2 * z)
        if math.fabs(n - z) < delta:
            return z
        z = n


def sqrt_loop(x: float) -> float:
    """Newton's square root, stopping once steps are below 1e-6."""
    delta = 1e-6
    z = float(x)
    n = 0.0
    while math.fabs(n - z) > delta:
        n, z = z, z - (z * z - x) / (2 * z)
    return z


def fibonacci() -> Iterator[int]:
    """Yield the Fibonacci numbers 0, 1, 1, 2, 3, ..."""
    f, g = 1, 0
    while True:
        f, g = g, f + g
        yield f


def word_count(s: str) -> dict[str, int]:
    """Count the whitespace-separated words of s."""
    return dict(Counter(s.split()))


class MyReader:
    """An endless stream of 'A' bytes."""

    def read(self, size: int = -1) -> bytes:
        if size < 0:
            raise ValueError("cannot read an endless stream to its end")
        return b"A" * size


def rot13(b: int) -> int:
    """Apply ROT13 to one byte, leaving non-letters unchanged."""
    if ord("a") <= b <= ord("z"):
        base = ord("a")
    elif ord("A") <= b <= ord("Z"):
        base = ord("A")
    else:
        return b
    return (b - base + 13) % 26 + base


_ROT13_TABLE = bytes(rot13(b) for b in range(256))


class Rot13Reader:
    """Wrap a binary stream and ROT13-decode what is read from it."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        return self._stream.read(size).translate(_ROT13_TABLE)


def pic_pattern(dx: int, dy: int) -> list[list[int]]:
    """Return dy rows of dx bytes, each the low byte of x*y."""
    return [[(x * y) & 0xFF for x in range(dx)] for y in range(dy)]


class IPAddr(tuple):
    """An IPv4 address of four octets."""

    def __new__(cls, *octets: int) -> "IPAddr":
        if len(octets) != 4:
            raise ValueError(f"want 4 octets, got {len(octets)}")
        for o in octets:
            if not 0 <= o <= 255:
                raise ValueError(f"octet out of range: {o}")
        return super().__new__(cls, octets)

    def __str__(self) -> str:
        return ".".join(str(o) for o in self)


class XorImage:
    """An image whose pixel at (x, y) has red and green x^y and full blue."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def bounds(self) -> tuple[int, int, int, int]:
        return (0, 0, self.width, self.height)

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        c = (x ^ y) & 0xFF
        return (c, c, 255, 255)