"""Prefix wildcard matching for log record headers.

Pattern characters:

- ``?`` matches any single byte
- ``~`` matches one ASCII letter
- ``!`` matches one ASCII digit
- any other character must match the byte literally

There is no ``*``; a pattern is compared byte by byte against the start of
the data.
"""

from __future__ import annotations

_ANY = ord("?")
_ALPHA = ord("~")
_DIGIT = ord("!")


def is_alphabet_char(b: int) -> bool:
    """Return True if the byte value is an ASCII letter."""
    return ord("a") <= b <= ord("z") or ord("A") <= b <= ord("Z")


def is_number_char(b: int) -> bool:
    """Return True if the byte value is an ASCII digit."""
    return ord("0") <= b <= ord("9")


def wildcard_match(pattern: str, data: bytes | None) -> bool:
    """Return True if ``data`` starts with bytes satisfying ``pattern``."""
    data = data or b""
    pattern_bytes = pattern.encode("utf-8")

    if len(data) < len(pattern_bytes):
        return False

    for p, b in zip(pattern_bytes, data):
        if p == _ANY:
            continue
        if p == _ALPHA:
            if not is_alphabet_char(b):
                return False
        elif p == _DIGIT:
            if not is_number_char(b):
                return False
        elif b != p:
            return False

    return True