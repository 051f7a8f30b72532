from __future__ import annotations
import json
from pathlib import Path
from typing import List, Dict, Any
from ..config import HierarchyConfig
from ..cache.base import CacheStats
from ..runtime.hierarchy import HierarchyStats
from ..runtime.simulator import PhaseResult
from . import viz


def hit_rate(misses: int, searches: int) -> float:
    """Hit rate in percent. A level that was never searched reports 0.0."""
    if searches <= 0:
        return 0.0
    return (1.0 - misses / searches) * 100


def unified_hit_rate(hits: int, misses: int) -> float:
    total = hits + misses
    if total <= 0:
        return 0.0
    return hits / total * 100


def cache_stats_json(stats: CacheStats) -> Dict[str, Any]:
    return {
        "misses": stats.misses,
        "searches": stats.searches,
        "read_misses": stats.read_misses,
        "write_misses": stats.write_misses,
        "hit_rate": hit_rate(stats.misses, stats.searches),
    }


def hierarchy_stats_json(stats: HierarchyStats) -> Dict[str, Any]:
    return {
        "l1": cache_stats_json(stats.l1),
        "l2": cache_stats_json(stats.l2),
        "unified": {
            "hits": stats.unified_hits,
            "misses": stats.unified_misses,
            "hit_rate": unified_hit_rate(stats.unified_hits, stats.unified_misses),
        },
    }


def format_cache_stats(label: str, misses: int, searches: int, read_misses: int, write_misses: int) -> str:
    lines = [
        f"{label} Cache Stats:",
        f"Cache Misses: {misses}",
        f"Cache Searches: {searches}",
    ]
    if searches > 0:
        lines.append(f"Cache Hit Rate: {hit_rate(misses, searches):.2f}%")
    else:
        lines.append("Cache Hit Rate: n/a (no searches)")
    lines.append(f"Read Misses: {read_misses}")
    lines.append(f"Write Misses: {write_misses}")
    return "\n".join(lines)


def format_hierarchy_stats(stats: HierarchyStats) -> str:
    blocks = [
        format_cache_stats("L1", stats.l1.misses, stats.l1.searches, stats.l1.read_misses, stats.l1.write_misses),
        format_cache_stats("L2", stats.l2.misses, stats.l2.searches, stats.l2.read_misses, stats.l2.write_misses),
        "\n".join([
            "Overall Unified Cache Stats:",
            f"Unified Hits: {stats.unified_hits}",
            f"Unified Misses: {stats.unified_misses}",
            f"Unified Hit Rate: {unified_hit_rate(stats.unified_hits, stats.unified_misses):.2f}%",
        ]),
    ]
    return "\n".join(blocks)


def hit_rate_rows(results: List[PhaseResult]) -> List[Dict[str, Any]]:
    """Flattens phase results into one row per (phase, level) for charting."""
    rows = []
    for result in results:
        summary = hierarchy_stats_json(result.stats)
        for level in ("l1", "l2", "unified"):
            rows.append({
                "phase": result.name,
                "level": level.upper() if level != "unified" else "Unified",
                "hit_rate": summary[level]["hit_rate"],
            })
    return rows


def generate_report_json(results: List[PhaseResult], config: HierarchyConfig) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from the phase results."""
    phases = []
    for result in results:
        entry = {"name": result.name, "accesses": result.accesses}
        entry.update(hierarchy_stats_json(result.stats))
        phases.append(entry)

    final = hierarchy_stats_json(results[-1].stats) if results else hierarchy_stats_json(HierarchyStats())
    return {
        "total_accesses": sum(r.accesses for r in results),
        "phases": phases,
        "final": final,
        "config": config.__dict__,
    }


def generate_report(results: List[PhaseResult], config: HierarchyConfig, ascii_chart: bool = False):
    """Generates all report artifacts."""
    report_data = generate_report_json(results, config)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    rows = hit_rate_rows(results)
    viz.export_hit_rate_chart(rows, str(output_dir / "report.html"))

    for result in results:
        print(f"Simulating {result.name}:")
        print(format_hierarchy_stats(result.stats))
        print()

    if ascii_chart:
        print(viz.export_hit_rate_ascii(rows))

    print(f"\nReports generated in {output_dir.absolute()}")
    print(f"Total Accesses: {report_data['total_accesses']}")
