from __future__ import annotations
from collections import Counter


class AccessFrequencyTracker:
    """Counts accesses per block tag.

    Counts are never reset or evicted, so memory grows with the number of
    distinct blocks touched. Swap in another object with the same `record`
    and `count` methods to bound it.
    """
    def __init__(self):
        self.counts: Counter[int] = Counter()

    def record(self, tag: int) -> int:
        """Increments the count for `tag` and returns the new value."""
        self.counts[tag] += 1
        return self.counts[tag]

    def count(self, tag: int) -> int:
        return self.counts[tag]

    def __len__(self) -> int:
        return len(self.counts)
