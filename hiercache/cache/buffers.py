from __future__ import annotations
from collections import deque
from typing import Iterator, List, Optional

from .line import CacheLine


class LineBuffer:
    """A small bounded FIFO of cache lines, searched linearly by tag.

    Pushing into a full buffer drops the oldest entry first. Entries are not
    deduplicated, so the same tag can sit in the buffer more than once.
    """
    def __init__(self, capacity: int, name: str):
        if not capacity > 0:
            raise ValueError(f"[{name}] Buffer capacity must be positive.")
        self.name = name
        self.capacity = capacity
        self.queue: deque[CacheLine] = deque()
        self.insertions = 0
        self.evictions = 0

    def lookup(self, tag: int) -> bool:
        """True if any valid entry holds `tag`. Does not modify the buffer."""
        return any(line.valid and line.tag == tag for line in self.queue)

    def insert(self, line: CacheLine) -> Optional[CacheLine]:
        """Pushes `line`, returning the entry dropped to make room, if any."""
        dropped = None
        if len(self.queue) >= self.capacity:
            dropped = self.queue.popleft()
            self.evictions += 1
        self.queue.append(line)
        self.insertions += 1
        return dropped

    def tags(self) -> List[int]:
        """Tags currently held, oldest first."""
        return [line.tag for line in self.queue]

    def clear(self):
        self.queue.clear()

    def __len__(self) -> int:
        return len(self.queue)

    def __iter__(self) -> Iterator[CacheLine]:
        return iter(self.queue)


class VictimBuffer(LineBuffer):
    """Holds lines recently evicted from L1."""
    def __init__(self, capacity: int = 4):
        super().__init__(capacity, "victim_buffer")


class WriteBuffer(LineBuffer):
    """Holds dirty lines created by write misses until they are flushed.

    A flush has no destination; the oldest line is just discarded.
    """
    def __init__(self, capacity: int = 4):
        super().__init__(capacity, "write_buffer")

    @property
    def flushes(self) -> int:
        return self.evictions


class PrefetchBuffer(LineBuffer):
    """Holds blocks admitted for being accessed repeatedly."""
    def __init__(self, capacity: int = 4):
        super().__init__(capacity, "prefetch_buffer")
