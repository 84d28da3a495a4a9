"""Compare binary trees by walking them in order."""

from __future__ import annotations

from itertools import zip_longest
from typing import Iterator, Optional, Sequence

from tourkit import tree
from tourkit.tree import Tree

_MISSING = object()


def walk(t: Optional[Tree]) -> Iterator[int]:
    """Yield the values of t in ascending (in-order) order."""
    if t is None:
        return
    yield from walk(t.left)
    yield t.value
    yield from walk(t.right)


def same(t1: Optional[Tree], t2: Optional[Tree]) -> bool:
    """Report whether t1 and t2 hold the same sequence of values."""
    for v1, v2 in zip_longest(walk(t1), walk(t2), fillvalue=_MISSING):
        if v1 is _MISSING or v2 is _MISSING or v1 != v2:
            return False
    return True


def _report(label: str, passed: bool) -> None:
    print(f"{label}: {'PASSED' if passed else 'FAILED'}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Check that equal trees compare equal and different ones do not."""
    _report("tree.new(1) == tree.new(1)", same(tree.new(1), tree.new(1)))
    _report("tree.new(1) != tree.new(2)", not same(tree.new(1), tree.new(2)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())