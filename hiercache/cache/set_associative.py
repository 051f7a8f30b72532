from __future__ import annotations
from typing import Dict, List

from .base import Cache
from .line import CacheLine


class SetAssociativeCache(Cache):
    """
    An N-way set-associative cache with LRU replacement, used as L2.

    Every miss also prefetches the next sequential block into its own set.
    Each set keeps a tag -> slot dict alongside its lines, so a hit test is a
    dict lookup instead of a scan over the ways.

    Known limitation: replacing a line only adds the new tag to the dict. The
    evicted tag keeps pointing at the reused slot, so a later access to it is
    counted as a hit (and refreshes that slot), and `prefetch` skips it.
    Only `resident_tags` reflects what the lines actually hold.
    """
    def __init__(self, num_blocks: int, block_size: int, ways: int):
        super().__init__(num_blocks, block_size)
        if not ways > 0:
            raise ValueError("Associativity must be positive.")
        if num_blocks % ways != 0:
            raise ValueError("Number of blocks must be a multiple of associativity.")

        self.ways = ways
        self.num_sets = num_blocks // ways
        self.sets: List[List[CacheLine]] = [
            [CacheLine(block_size) for _ in range(ways)] for _ in range(self.num_sets)
        ]
        self.tag_to_slot: List[Dict[int, int]] = [{} for _ in range(self.num_sets)]
        self.prefetches = 0

    def _decompose_address(self, address: int) -> tuple[int, int]:
        """Decomposes an address into (tag, set_index)."""
        tag = address >> self.offset_bits
        return tag, tag % self.num_sets

    def set_index_of(self, address: int) -> int:
        return self._decompose_address(address)[1]

    def probe(self, address: int) -> bool:
        """Checks the tag dict without touching counters or timestamps."""
        tag, set_index = self._decompose_address(address)
        return tag in self.tag_to_slot[set_index]

    def resident_tags(self, set_index: int) -> List[int]:
        return [line.tag for line in self.sets[set_index] if line.valid]

    def find_victim(self, set_index: int) -> int:
        """Picks the slot to replace in a set.

        Single left-to-right scan: an invalid slot is always taken, otherwise
        a slot is taken only if strictly older than the best seen so far.
        """
        lru_slot = 0
        min_time = None
        for slot, line in enumerate(self.sets[set_index]):
            if not line.valid or min_time is None or line.last_access_time < min_time:
                lru_slot = slot
                min_time = line.last_access_time
        return lru_slot

    def _install(self, set_index: int, tag: int, dirty: bool):
        slot = self.find_victim(set_index)
        line = self.sets[set_index][slot]
        # Dirty victims are dropped; there is no backing store to write to.
        line.fill(tag, self.current_time, dirty)
        self.tag_to_slot[set_index][tag] = slot

    def access(self, address: int, is_write: bool) -> bool:
        now = self._tick()
        tag, set_index = self._decompose_address(address)

        slot = self.tag_to_slot[set_index].get(tag)
        if slot is not None:
            line = self.sets[set_index][slot]
            line.last_access_time = now
            if is_write:
                line.dirty = True
            return True

        self._record_miss(is_write)
        self.prefetch(address + self.block_size)
        self._install(set_index, tag, dirty=is_write)
        return False

    def prefetch(self, address: int):
        """Brings the block holding `address` in clean, unless it is already resident."""
        tag, set_index = self._decompose_address(address)
        if tag in self.tag_to_slot[set_index]:
            return
        self.prefetches += 1
        self._install(set_index, tag, dirty=False)
