"""Parsing of single ``bytes=`` Range headers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import MalformedRangeError, RangeNotSatisfiableError

_RANGE_PATTERN = re.compile(r"^bytes=(\d+)-(\d*)$", re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class RangeRequest:
    start: int
    end: int  # inclusive
    end_explicit: bool

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    def content_range(self, length: int) -> str:
        return f"bytes {self.start}-{self.end}/{length}"


def parse_range_header(header: str, length: int) -> RangeRequest:
    """Parse ``bytes=<start>-[<end>]`` against a blob of ``length`` bytes.

    Syntax errors raise :class:`MalformedRangeError`. A start at or past the
    end of the blob, or an end before the start, raises
    :class:`RangeNotSatisfiableError`. An end past the blob is clamped to the
    last byte.
    """
    match = _RANGE_PATTERN.match(header.strip().replace(" ", ""))
    if match is None:
        raise MalformedRangeError(f"Unsupported Range header: {header!r}")

    start = int(match.group(1))
    end_text = match.group(2)
    end = int(end_text) if end_text else length - 1

    if start >= length or end < start:
        raise RangeNotSatisfiableError(length, header)
    return RangeRequest(start=start, end=min(end, length - 1), end_explicit=bool(end_text))


__all__ = ["RangeRequest", "parse_range_header"]
