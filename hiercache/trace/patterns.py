from __future__ import annotations
from itertools import chain as _chain
from typing import Callable, Dict, Iterable, Iterator, List, Tuple

Access = Tuple[int, bool]  # (address, is_write)
TraceFactory = Callable[[], Iterator[Access]]


def sequential(start: int, stop: int, is_write: bool = False) -> Iterator[Access]:
    """Touches every address in [start, stop) once, in order."""
    for address in range(start, stop):
        yield address, is_write


def repeated(start: int, stop: int, is_write: bool = False, times: int = 2) -> Iterator[Access]:
    """Sweeps [start, stop) `times` times over (temporal locality)."""
    for _ in range(times):
        yield from sequential(start, stop, is_write)


def interleaved_read_write(start: int, stop: int) -> Iterator[Access]:
    """Reads then writes each address, as a read-modify-write loop would."""
    for address in range(start, stop):
        yield address, False
        yield address, True


def chain(*traces: Iterable[Access]) -> Iterator[Access]:
    return _chain.from_iterable(traces)


def _spatial_read():
    return sequential(0, 1000)


def _spatial_write():
    return sequential(0, 2000, is_write=True)


def _temporal_read():
    return chain(repeated(0, 1000), repeated(1000, 2000))


def _temporal_write():
    return chain(repeated(0, 4000, is_write=True), repeated(1000, 2000, is_write=True))


def _mixed_read():
    return chain(sequential(0, 100), repeated(500, 3000))


def _mixed_write():
    return chain(repeated(0, 1000, is_write=True), sequential(2000, 6000, is_write=True))


def _mixed_read_write():
    return chain(
        interleaved_read_write(0, 1000),
        interleaved_read_write(0, 1000),
        interleaved_read_write(2000, 6000),
    )


# Reference workload. Phases run back to back against one hierarchy.
DEFAULT_WORKLOAD: List[Tuple[str, TraceFactory]] = [
    ("Spatial Access - Read", _spatial_read),
    ("Spatial Access - Write", _spatial_write),
    ("Temporal Access - Read", _temporal_read),
    ("Temporal Access - Write", _temporal_write),
    ("Mixed Access - Read", _mixed_read),
    ("Mixed Access - Write", _mixed_write),
    ("Mixed Access - Read & Write", _mixed_read_write),
]

WORKLOADS: Dict[str, List[Tuple[str, TraceFactory]]] = {
    "default": DEFAULT_WORKLOAD,
}


def get_workload(name: str) -> List[Tuple[str, TraceFactory]]:
    if name not in WORKLOADS:
        raise ValueError(f"Unknown workload: {name}. Available: {', '.join(sorted(WORKLOADS))}")
    return WORKLOADS[name]
