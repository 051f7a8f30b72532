from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass
class CacheLine:
    """Represents a single line (block slot) in a cache or buffer."""
    block_size: int = 16
    valid: bool = False
    dirty: bool = False
    tag: int = -1
    last_access_time: int = 0
    # Payload in words. Never read by the simulation, only sized like a real block.
    data: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.data:
            self.data = [0] * self.block_size

    @classmethod
    def for_tag(cls, tag: int, block_size: int, dirty: bool = False) -> CacheLine:
        """Builds a valid line holding `tag`, as pushed into the auxiliary buffers."""
        return cls(block_size=block_size, valid=True, dirty=dirty, tag=tag)

    def fill(self, tag: int, now: int, dirty: bool):
        """Installs a new block into this line, overwriting whatever was there."""
        self.valid = True
        self.tag = tag
        self.last_access_time = now
        self.dirty = dirty

    def invalidate(self):
        self.valid = False
        self.dirty = False
        self.tag = -1
        self.last_access_time = 0

    def copy(self) -> CacheLine:
        return CacheLine(
            block_size=self.block_size,
            valid=self.valid,
            dirty=self.dirty,
            tag=self.tag,
            last_access_time=self.last_access_time,
            data=list(self.data),
        )
