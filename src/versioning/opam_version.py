"""Precedence ordering of raw opam version strings.

opam orders versions with the Debian algorithm: the string is consumed as
alternating non-digit and digit runs. Non-digit runs compare character by
character where ``~`` sorts before everything (even the end of the string),
letters sort before other symbols, and the end of a run sorts before any
symbol. Digit runs compare numerically. Consequently ``1.0.0~beta`` precedes
``1.0.0`` while ``1.0.0-beta`` follows it, which is not what SemVer says.
"""

from __future__ import annotations

from functools import cmp_to_key

_DIGITS = "0123456789"


def _is_digit(s: str, i: int) -> bool:
    return i < len(s) and s[i] in _DIGITS


def _order(s: str, i: int) -> int:
    if i >= len(s) or s[i] in _DIGITS:
        return 0
    c = s[i]
    if c == "~":
        return -1
    if c.isalpha():
        return ord(c)
    return ord(c) + 256


def _digit_run(s: str, i: int):
    start = i
    while _is_digit(s, i):
        i += 1
    return (int(s[start:i]) if i > start else 0), i


def compare(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` sorts before, equal to or after ``b``."""
    i = j = 0
    while i < len(a) or j < len(b):
        while (i < len(a) and not _is_digit(a, i)) or (j < len(b) and not _is_digit(b, j)):
            ac, bc = _order(a, i), _order(b, j)
            if ac != bc:
                return -1 if ac < bc else 1
            i += 1
            j += 1
        an, i = _digit_run(a, i)
        bn, j = _digit_run(b, j)
        if an != bn:
            return -1 if an < bn else 1
    return 0


sort_key = cmp_to_key(compare)
