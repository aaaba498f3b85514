"""Matchers that decide whether a log record is routed."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Matcher(ABC):
    """Something that accepts or rejects a chunk of log data."""

    @abstractmethod
    def match(self, data: bytes) -> bool:
        """Return True if ``data`` is accepted."""


class ContainsMatcher(Matcher):
    """Accept data that contains (or, if ``contains`` is False, lacks) a pattern.

    Empty data is never accepted, whichever mode is used.
    """

    def __init__(self, pattern: str, contains: bool) -> None:
        if not pattern:
            raise ValueError("pattern must not be empty")
        self.pattern = pattern
        self.contains = contains
        self._needle = pattern.encode("utf-8")

    def match(self, data: bytes | str) -> bool:
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data:
            return False
        return (self._needle in data) == self.contains

    def __repr__(self) -> str:
        return f"ContainsMatcher(pattern={self.pattern!r}, contains={self.contains})"