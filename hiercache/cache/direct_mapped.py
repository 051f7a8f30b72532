from __future__ import annotations
from typing import List

from .base import Cache, AccessResult
from .line import CacheLine


class DirectMappedCache(Cache):
    """
    A direct-mapped cache used as L1.

    Each block maps to exactly one line, `(address >> offset_bits) % num_blocks`.
    A conflicting block simply replaces the resident one; the displaced line is
    handed back to the caller instead of being written anywhere.
    """
    def __init__(self, num_blocks: int, block_size: int):
        super().__init__(num_blocks, block_size)
        self.lines: List[CacheLine] = [CacheLine(block_size) for _ in range(num_blocks)]

    def _decompose_address(self, address: int) -> tuple[int, int]:
        """Decomposes an address into (tag, index)."""
        tag = address >> self.offset_bits
        return tag, tag % self.num_blocks

    def index_of(self, address: int) -> int:
        return self._decompose_address(address)[1]

    def probe(self, address: int) -> bool:
        """Checks residency without touching counters or timestamps."""
        tag, index = self._decompose_address(address)
        line = self.lines[index]
        return line.valid and line.tag == tag

    def lookup(self, address: int, is_write: bool) -> AccessResult:
        now = self._tick()
        tag, index = self._decompose_address(address)
        line = self.lines[index]

        if line.valid and line.tag == tag:
            line.last_access_time = now
            if is_write:
                line.dirty = True
            return AccessResult(hit=True)

        self._record_miss(is_write)
        evicted = line.copy() if line.valid else None
        line.fill(tag, now, dirty=is_write)
        return AccessResult(hit=False, evicted=evicted)

    def access(self, address: int, is_write: bool) -> bool:
        return self.lookup(address, is_write).hit
