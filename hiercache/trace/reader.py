from __future__ import annotations
from pathlib import Path
from typing import Iterator, Tuple


class TraceFormatError(ValueError):
    """Raised for a trace line that is not `R <addr>` or `W <addr>`."""


_KINDS = {"R": False, "W": True}


def parse_trace_line(line: str, lineno: int = 0) -> Tuple[int, bool] | None:
    """Parses one trace line. Returns None for blank lines and comments."""
    text = line.split("#", 1)[0].strip()
    if not text:
        return None

    parts = text.split()
    if len(parts) != 2 or parts[0].upper() not in _KINDS:
        raise TraceFormatError(f"line {lineno}: expected 'R <addr>' or 'W <addr>', got {line.strip()!r}")

    try:
        address = int(parts[1], 0)
    except ValueError:
        raise TraceFormatError(f"line {lineno}: invalid address {parts[1]!r}") from None
    if address < 0:
        raise TraceFormatError(f"line {lineno}: negative address {address}")
    return address, _KINDS[parts[0].upper()]


def read_trace(path: str | Path) -> Iterator[Tuple[int, bool]]:
    """Lazily yields (address, is_write) events from a text trace file."""
    with open(path, "r") as f:
        for lineno, line in enumerate(f, start=1):
            event = parse_trace_line(line, lineno)
            if event is not None:
                yield event
