"""Log record format and splitting of raw data into records.

A record starts with a line whose beginning satisfies the format's prefix
wildcard; the lines after it that do not are its following lines. Without
a format, a line beginning with a space or tab is a following line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from logtailer.wildcard import wildcard_match

_LINE_END = re.compile(rb"[\r\n]")
_LINE_ENDS = re.compile(rb"[\r\n]*")


@dataclass
class Format:
    """The log format: a wildcard for the prefix of a record's first line."""

    prefix: str = ""

    def prefix_match(self, data: bytes) -> bool:
        """Return True if ``data`` starts a new record."""
        return wildcard_match(self.prefix, data)

    def __str__(self) -> str:
        return f"format{{prefix:{self.prefix}}}"


def index_line_end(data: bytes, start: int) -> int:
    """Return the index of the first line-end byte at or after ``start``, or len(data)."""
    found = _LINE_END.search(data, start)
    return found.start() if found else len(data)


def ignore_line_end(data: bytes, start: int) -> int:
    """Return the index of the first byte at or after ``start`` that is not a line end."""
    return _LINE_ENDS.match(data, start).end()


def _next_line(data: bytes, start: int) -> int:
    return ignore_line_end(data, index_line_end(data, start))


def _index_to_next_line_start(fmt: Format | None, data: bytes) -> bytes | None:
    i = 0
    while i < len(data):
        i = _next_line(data, i)
        if fmt is None or fmt.prefix_match(data[i:]):
            return data[i:]
    return None


def index_to_line_start(fmt: Format | None, data: bytes) -> bytes | None:
    """Return ``data`` from the first record start on, or None if there is none."""
    if fmt is None or fmt.prefix_match(data):
        return data
    return _index_to_next_line_start(fmt, data)


def is_following_line(fmt: Format | None, data: bytes) -> bool:
    """Return True if ``data`` begins a line that continues the previous record."""
    if fmt is not None:
        return not fmt.prefix_match(data)
    return data[:1] in (b" ", b"\t")


def split_first_log(fmt: Format | None, data: bytes) -> tuple[bytes, bytes]:
    """Split off the first record (its first line and following lines)."""
    length = len(data)
    index = _next_line(data, 0)
    while index < length and is_following_line(fmt, data[index:]):
        index = _next_line(data, index)
    return data[:index], data[index:]


def split_following_log(fmt: Format | None, data: bytes) -> tuple[bytes, bytes]:
    """Split off the leading following lines that belong to an earlier record."""
    length = len(data)
    index = 0
    while index < length and is_following_line(fmt, data[index:]):
        index = _next_line(data, index)
    return data[:index], data[index:]