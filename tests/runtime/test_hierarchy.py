import pytest
from hiercache.config import HierarchyConfig
from hiercache.cache.line import CacheLine
from hiercache.runtime.hierarchy import TwoLevelCache, HierarchyStats


@pytest.fixture
def cache():
    """Hierarchy with the reference geometry (L1 128x16 direct-mapped, L2 1024x16 8-way)."""
    return TwoLevelCache()


def test_cold_access_is_a_miss(cache):
    assert cache.access(0, False) is False
    stats = cache.stats()
    assert stats.unified_misses == 1
    assert stats.l1.misses == 1
    assert stats.l2.misses == 1


def test_reaccess_after_distinct_block_hits(cache):
    """Address 16 is a different block; going back to address 0 hits in L1."""
    cache.access(0, False)
    cache.access(16, False)
    assert cache.l1.misses == 2  # 16 is a distinct tag under 16-word blocks

    assert cache.access(0, False) is True
    assert cache.l1.misses == 2


def test_l2_next_block_prefetch_turns_into_unified_hit(cache):
    cache.access(0, False)
    # L1 misses on block 1, but L2 prefetched it on the previous miss
    assert cache.access(16, False) is True
    assert cache.l2.searches == 2
    assert cache.l2.misses == 1


def test_sequential_reads(cache):
    """Reads of 0..999 touch 63 blocks; L2 misses only on even blocks thanks to prefetch."""
    results = [cache.access(address, False) for address in range(1000)]

    assert results[0] is False
    stats = cache.stats()
    assert stats.l1.searches == 1000
    assert stats.l1.misses == 63
    assert stats.l1.read_misses == 63
    assert stats.l2.searches == 63
    assert stats.l2.misses == 32
    assert stats.unified_misses == 32
    assert stats.unified_hits == 968
    assert stats.accesses == 1000


def test_write_miss_goes_to_write_buffer(cache):
    address = 0x500
    assert cache.access(address, True) is False

    lines = list(cache.write_buffer)
    assert len(lines) == 1
    assert lines[0].tag == address >> 4
    assert lines[0].valid
    assert lines[0].dirty

    assert cache.access(address, False) is True
    assert cache.stats().unified_hits == 1


def test_write_buffer_checked_before_l2(cache):
    """A block sitting only in the write buffer is a unified hit without an L2 search."""
    cache.write_buffer.insert(CacheLine.for_tag(0x70, 16, dirty=True))

    assert cache.access(0x700, False) is True
    assert cache.l1.misses == 1
    assert cache.l2.searches == 0


def test_read_miss_does_not_fill_write_buffer(cache):
    cache.access(0x900, False)
    assert len(cache.write_buffer) == 0


def test_write_hit_does_not_fill_write_buffer(cache):
    cache.access(0x900, False)
    cache.access(0x900, True)
    assert len(cache.write_buffer) == 0


def test_victim_buffer_hit(cache):
    """A block displaced from L1 is found again in the victim buffer."""
    assert cache.access(0, False) is False
    assert cache.access(2048, False) is False  # same L1 index, evicts block 0
    assert cache.victim_buffer.tags() == [0]
    l2_searches = cache.l2.searches

    assert cache.access(0, False) is True
    assert cache.l2.searches == l2_searches
    assert cache.victim_buffer.tags() == [0, 128]


def test_victim_buffer_keeps_dirty_evictions(cache):
    cache.access(0, True)
    cache.access(2048, False)
    victim = list(cache.victim_buffer)[0]
    assert victim.tag == 0
    assert victim.dirty


def test_frequency_gated_prefetch(cache):
    cache.access(100, False)
    assert not cache.prefetch_buffer.lookup(100 >> 4)

    cache.access(100, True)
    assert cache.prefetch_buffer.lookup(100 >> 4)
    assert cache.frequency.count(100 >> 4) == 2


def test_prefetch_admission_repeats_on_every_access(cache):
    for _ in range(3):
        cache.access(0, False)
    assert cache.prefetch_buffer.tags() == [0, 0]


def test_prefetch_buffer_hit_skips_l2(cache):
    cache.access(0, False)
    cache.access(0, False)       # block 0 admitted to the prefetch buffer
    cache.access(2048, False)    # evicts block 0 from L1 into the victim buffer
    for address in (4096, 6144, 8192, 10240):
        cache.access(address, False)  # push block 0 out of the victim buffer
    assert not cache.victim_buffer.lookup(0)
    assert cache.prefetch_buffer.lookup(0)
    l2_searches = cache.l2.searches

    assert cache.access(0, False) is True
    assert cache.l2.searches == l2_searches


def test_auxiliary_buffers_stay_bounded(cache):
    for i in range(3000):
        cache.access((i * 2048) % 50000 + (i % 3), i % 2 == 0)
        assert len(cache.victim_buffer) <= 4
        assert len(cache.write_buffer) <= 4
        assert len(cache.prefetch_buffer) <= 4


def test_unified_counter_conservation(cache):
    trace = [((i * 97) % 7000, i % 3 == 0) for i in range(5000)]
    for address, is_write in trace:
        cache.access(address, is_write)

    stats = cache.stats()
    assert stats.unified_hits + stats.unified_misses == len(trace)
    assert stats.l1.searches == len(trace)


def test_idempotent_hit(cache):
    cache.access(0x1230, False)
    assert cache.access(0x1230, False) is True
    assert cache.access(0x1230, False) is True


def test_from_config():
    config = HierarchyConfig(l1_num_blocks=64, l2_num_blocks=256, l2_ways=4, write_buffer_size=2)
    cache = TwoLevelCache.from_config(config)
    assert cache.l1.num_blocks == 64
    assert cache.l2.num_sets == 64
    assert cache.write_buffer.capacity == 2


@pytest.mark.parametrize("kwargs", [
    {"l1_num_blocks": 0},
    {"l2_num_blocks": 1020, "l2_ways": 8},
    {"l2_ways": 0},
    {"l1_block_size": 6},
    {"victim_buffer_size": 0},
    {"prefetch_threshold": 0},
])
def test_invalid_configuration_rejected(kwargs):
    with pytest.raises(ValueError):
        TwoLevelCache(**kwargs)


def test_frequency_tracker_is_pluggable():
    class NeverRepeats:
        def record(self, tag):
            return 1

        def count(self, tag):
            return 1

    cache = TwoLevelCache(frequency_tracker=NeverRepeats())
    for _ in range(5):
        cache.access(0, False)
    assert len(cache.prefetch_buffer) == 0


def test_stats_snapshot_is_detached(cache):
    before = cache.stats()
    cache.access(0, False)
    assert before == HierarchyStats()
    assert cache.stats().to_dict()["unified_misses"] == 1
