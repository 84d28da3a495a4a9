"""Check that a reader yields an endless stream of 'A' bytes."""

from __future__ import annotations

import sys
from typing import Optional, Protocol

_LIMIT = 1 << 20
_BUFFER_SIZE = 1024


class _Reader(Protocol):
    def read(self, size: int) -> Optional[bytes]: ...


def validate(reader: _Reader) -> bool:
    """Read up to 1 MiB from reader, report on the outcome, return success.

    read() returning None means no data yet and no error; returning b""
    means end of stream, which counts as a read error.
    """
    calls = 0
    offset = 0
    while calls < _LIMIT and offset < _LIMIT:
        calls += 1
        try:
            chunk = reader.read(_BUFFER_SIZE)
        except (OSError, EOFError, ValueError) as exc:
            print(f"read error: {exc}", file=sys.stderr)
            return False
        if chunk is None:
            continue
        for i, v in enumerate(chunk):
            if v != ord("A"):
                print(f"got byte {v:x} at offset {offset + i}, want 'A'", file=sys.stderr)
                return False
        offset += len(chunk)
        if not chunk:
            print("read error: EOF", file=sys.stderr)
            return False
    if offset == 0:
        print(f"read zero bytes after {calls} Read calls", file=sys.stderr)
        return False
    print("OK!")
    return True