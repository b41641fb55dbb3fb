"""Tests for the TTL result cache."""

import pytest

from contracts import FileData
from orchestrator import ResultCache, make_cache_key


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


VARIABLES = {"project_description": "A water tracker", "features": "Reminders"}


class TestMakeCacheKey:

    def test_deterministic(self):
        assert make_cache_key("openai", "gpt-4o", "T {x}", VARIABLES) == \
            make_cache_key("openai", "gpt-4o", "T {x}", dict(VARIABLES))

    def test_variable_order_does_not_matter(self):
        reordered = dict(reversed(list(VARIABLES.items())))
        assert make_cache_key("openai", "gpt-4o", "T", VARIABLES) == make_cache_key("openai", "gpt-4o", "T", reordered)

    @pytest.mark.parametrize("changed", [
        ("anthropic", "gpt-4o", "T", VARIABLES),
        ("openai", "gpt-4o-mini", "T", VARIABLES),
        ("openai", "gpt-4o", "T2", VARIABLES),
        ("openai", "gpt-4o", "T", {**VARIABLES, "features": "Charts"}),
    ])
    def test_every_component_matters(self, changed):
        assert make_cache_key("openai", "gpt-4o", "T", VARIABLES) != make_cache_key(*changed)


class TestResultCache:

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return ResultCache(ttl_seconds=60, clock=clock)

    def test_miss_then_hit(self, cache):
        file = FileData(path="docs/prd.md", content="# PRD")
        assert cache.get("k") is None
        cache.put("k", file)
        assert cache.get("k") == file
        assert "k" in cache

    def test_entry_expires_after_ttl(self, cache, clock):
        cache.put("k", FileData(path="a", content="b"))
        clock.advance(59.9)
        assert cache.get("k") is not None
        clock.advance(0.1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_ttl_measured_from_insertion(self, cache, clock):
        cache.put("k", FileData(path="a", content="old"))
        clock.advance(50)
        cache.put("k", FileData(path="a", content="new"))
        clock.advance(50)
        assert cache.get("k").content == "new"

    def test_reads_do_not_extend_lifetime(self, cache, clock):
        cache.put("k", FileData(path="a", content="b"))
        clock.advance(30)
        cache.get("k")
        clock.advance(30)
        assert cache.get("k") is None

    def test_sweep_expired(self, cache, clock):
        cache.put("old", FileData(path="a", content="1"))
        clock.advance(45)
        cache.put("new", FileData(path="b", content="2"))
        clock.advance(20)
        assert cache.sweep_expired() == 1
        assert len(cache) == 1
        assert "new" in cache

    def test_put_drops_expired_entries_never_read_again(self, cache, clock):
        for i in range(5):
            cache.put(f"stale-{i}", FileData(path=f"{i}.md", content="x"))
        clock.advance(61)

        cache.put("fresh", FileData(path="fresh.md", content="y"))

        assert len(cache) == 1
        assert "fresh" in cache

    def test_key_for_uses_key_fn(self):
        cache = ResultCache(key_fn=lambda provider, model, template, variables: f"{provider}:{model}")
        assert cache.key_for("openai", "gpt-4o", "T", {}) == "openai:gpt-4o"

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValueError):
            ResultCache(ttl_seconds=0)
