"""A small test suite for word-counting functions."""

from __future__ import annotations

from typing import Callable, Mapping

TEST_CASES: tuple[tuple[str, dict[str, int]], ...] = (
    ("I am learning Go!", {"I": 1, "am": 1, "learning": 1, "Go!": 1}),
    (
        "The quick brown fox jumped over the lazy dog.",
        {
            "The": 1, "quick": 1, "brown": 1, "fox": 1, "jumped": 1,
            "over": 1, "the": 1, "lazy": 1, "dog.": 1,
        },
    ),
    (
        "I ate a donut. Then I ate another donut.",
        {"I": 2, "ate": 2, "a": 1, "donut.": 2, "Then": 1, "another": 1},
    ),
    (
        "A man a plan a canal panama.",
        {"A": 1, "man": 1, "a": 2, "plan": 1, "canal": 1, "panama.": 1},
    ),
)

_ESCAPES = {
    "\\": "\\\\", '"': '\\"', "\a": "\\a", "\b": "\\b", "\f": "\\f",
    "\n": "\\n", "\r": "\\r", "\t": "\\t", "\v": "\\v",
}


def _quote(s: str) -> str:
    out = []
    for ch in s:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) <= 0xFFFF:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(out) + '"'


def _format_map(m: Mapping[str, int]) -> str:
    body = ", ".join(f"{_quote(k)}:{m[k]}" for k in sorted(m))
    return "map[string]int{" + body + "}"


def _matches(want: Mapping[str, int], got: Mapping[str, int]) -> bool:
    if len(want) != len(got):
        return False
    return all(got.get(k, 0) == v for k, v in want.items())


def check(f: Callable[[str], Mapping[str, int]]) -> bool:
    """Run f over the test cases, print PASS/FAIL reports, return success."""
    for text, want in TEST_CASES:
        got = f(text)
        if not _matches(want, got):
            print(
                f"FAIL\n f({_quote(text)}) =\n  {_format_map(got)}\n"
                f" want:\n  {_format_map(want)}",
                end="",
            )
            return False
        print(f"PASS\n f({_quote(text)}) = \n  {_format_map(got)}")
    return True