from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..config import is_power_of_two
from .line import CacheLine


@dataclass(frozen=True)
class CacheStats:
    """Read-only snapshot of one cache level's counters."""
    misses: int = 0
    searches: int = 0
    read_misses: int = 0
    write_misses: int = 0

    @property
    def hits(self) -> int:
        return self.searches - self.misses


@dataclass(frozen=True)
class AccessResult:
    """Outcome of a single lookup. `evicted` carries a copy of the displaced valid line, if any."""
    hit: bool
    evicted: Optional[CacheLine] = None


class Cache(ABC):
    """
    State and counters shared by the two cache kinds.

    Subclasses implement `access(address, is_write) -> bool`. Each level keeps
    its own logical clock, advanced once per search, used as the line timestamp.
    """
    def __init__(self, num_blocks: int, block_size: int):
        if not num_blocks > 0:
            raise ValueError("Number of blocks must be positive.")
        if not block_size > 0:
            raise ValueError("Block size must be positive.")
        if not is_power_of_two(block_size):
            raise ValueError("Block size must be a power of two for bitwise address decomposition.")

        self.num_blocks = num_blocks
        self.block_size = block_size
        self.offset_bits = block_size.bit_length() - 1

        self.current_time = 0
        self.misses = 0
        self.read_misses = 0
        self.write_misses = 0
        self.searches = 0

    @abstractmethod
    def access(self, address: int, is_write: bool) -> bool:
        """Looks up `address`, installing it on a miss. Returns True on a hit."""

    def block_tag(self, address: int) -> int:
        """The tag identifying the memory block that holds `address`."""
        return address >> self.offset_bits

    def _tick(self) -> int:
        self.current_time += 1
        self.searches += 1
        return self.current_time

    def _record_miss(self, is_write: bool):
        self.misses += 1
        if is_write:
            self.write_misses += 1
        else:
            self.read_misses += 1

    def get_block_size(self) -> int:
        return self.block_size

    def get_misses(self) -> int:
        return self.misses

    def get_searches(self) -> int:
        return self.searches

    def stats(self) -> CacheStats:
        return CacheStats(
            misses=self.misses,
            searches=self.searches,
            read_misses=self.read_misses,
            write_misses=self.write_misses,
        )
