import json
from pathlib import Path
import pytest
from hiercache.config import HierarchyConfig
from hiercache.cache.base import CacheStats
from hiercache.runtime.hierarchy import HierarchyStats
from hiercache.runtime.simulator import PhaseResult, run_workload
from hiercache.trace.patterns import sequential
from hiercache.utils.reporting import (
    hit_rate, unified_hit_rate, format_cache_stats, format_hierarchy_stats,
    generate_report_json, generate_report, hit_rate_rows,
)


@pytest.fixture
def sample_results():
    """Two phases with hand-picked cumulative counters."""
    first = HierarchyStats(
        l1=CacheStats(misses=10, searches=100, read_misses=10, write_misses=0),
        l2=CacheStats(misses=5, searches=10, read_misses=5, write_misses=0),
        unified_hits=95,
        unified_misses=5,
    )
    second = HierarchyStats(
        l1=CacheStats(misses=30, searches=200, read_misses=10, write_misses=20),
        l2=CacheStats(misses=20, searches=25, read_misses=5, write_misses=15),
        unified_hits=180,
        unified_misses=20,
    )
    return [
        PhaseResult(name="reads", accesses=100, stats=first),
        PhaseResult(name="writes", accesses=100, stats=second),
    ]


@pytest.fixture
def sample_config(tmp_path: Path):
    return HierarchyConfig(report_dir=str(tmp_path / "report"))


def test_hit_rate():
    assert hit_rate(25, 100) == pytest.approx(75.0)
    assert hit_rate(0, 10) == pytest.approx(100.0)
    assert hit_rate(10, 10) == pytest.approx(0.0)


def test_hit_rate_without_searches_is_zero():
    assert hit_rate(0, 0) == 0.0
    assert unified_hit_rate(0, 0) == 0.0


def test_unified_hit_rate():
    assert unified_hit_rate(95, 5) == pytest.approx(95.0)


def test_format_cache_stats():
    text = format_cache_stats("L1", misses=10, searches=40, read_misses=4, write_misses=6)
    assert text.splitlines() == [
        "L1 Cache Stats:",
        "Cache Misses: 10",
        "Cache Searches: 40",
        "Cache Hit Rate: 75.00%",
        "Read Misses: 4",
        "Write Misses: 6",
    ]


def test_format_cache_stats_no_searches():
    text = format_cache_stats("L2", 0, 0, 0, 0)
    assert "n/a" in text


def test_format_hierarchy_stats(sample_results):
    text = format_hierarchy_stats(sample_results[0].stats)
    assert "L1 Cache Stats:" in text
    assert "L2 Cache Stats:" in text
    assert "Unified Hits: 95" in text
    assert "Unified Hit Rate: 95.00%" in text


def test_generate_report_json(sample_results, sample_config):
    report = generate_report_json(sample_results, sample_config)

    assert report["total_accesses"] == 200
    assert [p["name"] for p in report["phases"]] == ["reads", "writes"]
    assert report["phases"][0]["l1"]["hit_rate"] == pytest.approx(90.0)
    assert report["phases"][1]["l2"]["write_misses"] == 15
    assert report["final"]["unified"]["hits"] == 180
    assert report["final"]["unified"]["hit_rate"] == pytest.approx(90.0)
    assert report["config"]["l2_ways"] == 8


def test_generate_report_json_empty(sample_config):
    report = generate_report_json([], sample_config)
    assert report["total_accesses"] == 0
    assert report["phases"] == []
    assert report["final"]["unified"]["hit_rate"] == 0.0


def test_hit_rate_rows(sample_results):
    rows = hit_rate_rows(sample_results)
    assert len(rows) == 6
    assert rows[0] == {"phase": "reads", "level": "L1", "hit_rate": pytest.approx(90.0)}
    assert [r["level"] for r in rows[:3]] == ["L1", "L2", "Unified"]


def test_generate_report_full(sample_results, sample_config, capsys):
    """Tests the main generate_report function that writes all artifacts."""
    generate_report(sample_results, sample_config, ascii_chart=True)

    output_dir = Path(sample_config.report_dir)
    report_file = output_dir / "report.json"
    assert report_file.exists()
    data = json.loads(report_file.read_text())
    assert data["total_accesses"] == 200

    html_file = output_dir / "report.html"
    assert html_file.exists()
    assert "Hit Rates" in html_file.read_text(encoding='utf-8')

    captured = capsys.readouterr()
    assert "Simulating reads:" in captured.out
    assert "Overall Unified Cache Stats:" in captured.out
    assert "ASCII" in captured.out


def test_report_from_real_run(sample_config):
    results = run_workload([("seq", lambda: sequential(0, 1000))], sample_config)
    report = generate_report_json(results, sample_config)
    assert report["final"]["unified"]["misses"] == 32
    assert report["final"]["l1"]["searches"] == 1000
