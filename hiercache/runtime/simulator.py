from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..config import HierarchyConfig
from ..trace.patterns import Access, TraceFactory
from .hierarchy import TwoLevelCache, HierarchyStats
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PhaseResult:
    """Cumulative hierarchy counters taken right after a phase finished."""
    name: str
    accesses: int  # events in this phase alone
    stats: HierarchyStats


def run(trace: Iterable[Access], cache: TwoLevelCache) -> int:
    """Feeds a trace to the hierarchy in order. Returns the number of events consumed."""
    count = 0
    for address, is_write in trace:
        cache.access(address, is_write)
        count += 1
    return count


def run_workload(
    phases: Sequence[Tuple[str, TraceFactory]],
    config: HierarchyConfig,
    cache: TwoLevelCache | None = None,
) -> List[PhaseResult]:
    """
    Runs each phase back to back against a single hierarchy.

    State carries over between phases, so the recorded statistics are
    cumulative, not per phase.
    """
    if cache is None:
        cache = TwoLevelCache.from_config(config)

    results = []
    for name, factory in phases:
        logger.info(f"Simulating {name}")
        count = run(factory(), cache)
        stats = cache.stats()
        logger.info(f"Finished {name}: {count} accesses, {stats.unified_hits} unified hits so far")
        results.append(PhaseResult(name=name, accesses=count, stats=stats))
    return results
