from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from ..config import HierarchyConfig
from ..cache.base import CacheStats
from ..cache.line import CacheLine
from ..cache.direct_mapped import DirectMappedCache
from ..cache.set_associative import SetAssociativeCache
from ..cache.buffers import VictimBuffer, WriteBuffer, PrefetchBuffer
from ..cache.frequency import AccessFrequencyTracker
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HierarchyStats:
    """Snapshot of every counter in the hierarchy."""
    l1: CacheStats = field(default_factory=CacheStats)
    l2: CacheStats = field(default_factory=CacheStats)
    unified_hits: int = 0
    unified_misses: int = 0

    @property
    def accesses(self) -> int:
        return self.unified_hits + self.unified_misses

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TwoLevelCache:
    """
    Coordinates one access through L1, the victim, write and prefetch buffers, and L2.

    The levels are searched in that fixed order and the first hit wins. The
    access-frequency tracker and the auxiliary buffers are then updated
    whatever the outcome, and exactly one unified counter is incremented.
    This object owns all of that state; nothing is shared with the caller.

    Known simplifications: a victim-buffer hit does not move the block back
    into L1, and dirty lines leaving L1 or the write buffer are dropped, as
    there is no backing store. Addresses are not range-checked.
    """
    def __init__(
        self,
        l1_num_blocks: int = 128,
        l1_block_size: int = 16,
        l2_num_blocks: int = 1024,
        l2_block_size: int = 16,
        l2_ways: int = 8,
        victim_buffer_size: int = 4,
        write_buffer_size: int = 4,
        prefetch_buffer_size: int = 4,
        prefetch_threshold: int = 2,
        frequency_tracker: Optional[AccessFrequencyTracker] = None,
    ):
        if not prefetch_threshold > 0:
            raise ValueError("Prefetch threshold must be positive.")

        self.l1 = DirectMappedCache(l1_num_blocks, l1_block_size)
        self.l2 = SetAssociativeCache(l2_num_blocks, l2_block_size, l2_ways)
        self.victim_buffer = VictimBuffer(victim_buffer_size)
        self.write_buffer = WriteBuffer(write_buffer_size)
        self.prefetch_buffer = PrefetchBuffer(prefetch_buffer_size)
        self.frequency = frequency_tracker if frequency_tracker is not None else AccessFrequencyTracker()
        self.prefetch_threshold = prefetch_threshold

        self.unified_hits = 0
        self.unified_misses = 0

    @classmethod
    def from_config(cls, config: HierarchyConfig) -> TwoLevelCache:
        return cls(
            l1_num_blocks=config.l1_num_blocks,
            l1_block_size=config.l1_block_size,
            l2_num_blocks=config.l2_num_blocks,
            l2_block_size=config.l2_block_size,
            l2_ways=config.l2_ways,
            victim_buffer_size=config.victim_buffer_size,
            write_buffer_size=config.write_buffer_size,
            prefetch_buffer_size=config.prefetch_buffer_size,
            prefetch_threshold=config.prefetch_threshold,
        )

    def block_tag(self, address: int) -> int:
        # Buffers are keyed with L1's block granularity.
        return self.l1.block_tag(address)

    def _search(self, address: int, is_write: bool, tag: int) -> bool:
        result = self.l1.lookup(address, is_write)
        if result.evicted is not None:
            logger.debug(f"L1 evicted tag {result.evicted.tag:#x} (dirty={result.evicted.dirty}) to victim buffer")
            self.victim_buffer.insert(result.evicted)
        if result.hit:
            return True

        if self.victim_buffer.lookup(tag):
            return True
        if self.write_buffer.lookup(tag):
            return True
        if self.prefetch_buffer.lookup(tag):
            return True

        return self.l2.access(address, is_write)

    def access(self, address: int, is_write: bool) -> bool:
        """Applies one memory reference and returns whether the hierarchy hit."""
        tag = self.block_tag(address)
        hit = self._search(address, is_write, tag)

        # Admission is frequency-driven, not miss-driven.
        if self.frequency.record(tag) >= self.prefetch_threshold:
            self.prefetch_buffer.insert(CacheLine.for_tag(tag, self.l1.block_size))

        if not hit and is_write:
            flushed = self.write_buffer.insert(CacheLine.for_tag(tag, self.l1.block_size, dirty=True))
            if flushed is not None:
                logger.debug(f"Write buffer flushed tag {flushed.tag:#x}")

        if hit:
            self.unified_hits += 1
        else:
            self.unified_misses += 1
        return hit

    def stats(self) -> HierarchyStats:
        return HierarchyStats(
            l1=self.l1.stats(),
            l2=self.l2.stats(),
            unified_hits=self.unified_hits,
            unified_misses=self.unified_misses,
        )
