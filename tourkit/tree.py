"""Binary trees holding integer values."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional


@dataclass
class Tree:
    """A binary tree node with an integer value."""

    value: int
    left: Optional["Tree"] = None
    right: Optional["Tree"] = None

    def __str__(self) -> str:
        parts = []
        if self.left is not None:
            parts.append(str(self.left))
        parts.append(str(self.value))
        if self.right is not None:
            parts.append(str(self.right))
        return "(" + " ".join(parts) + ")"


def insert(t: Optional[Tree], v: int) -> Tree:
    """Insert v into the search tree t and return the (possibly new) root."""
    if t is None:
        return Tree(v)
    if v < t.value:
        t.left = insert(t.left, v)
    else:
        t.right = insert(t.right, v)
    return t


def new(k: int, rng: Optional[random.Random] = None) -> Tree:
    """Return a randomly shaped tree holding the values k, 2k, ..., 10k."""
    source = rng if rng is not None else random
    t: Optional[Tree] = None
    for v in source.sample(range(10), 10):
        t = insert(t, (1 + v) * k)
    assert t is not None
    return t