import pytest

from models import DetectionResult, ThemeInfo
from theme_cache import NullCache, ResultCache, normalize_url


def _ok(name="astra"):
    return DetectionResult.ok(ThemeInfo(name=name, plugins=["akismet"], is_wordpress=True))


@pytest.mark.parametrize("raw,expected", [
    ("example.com", "https://example.com"),
    ("https://example.com/", "https://example.com"),
    ("https://example.com", "https://example.com"),
    ("  http://example.com/blog/  ", "http://example.com/blog"),
    ("https://example.com/?p=1#top", "https://example.com"),
    ("example.com/shop?ref=x", "https://example.com/shop"),
    ("HTTPS://Example.com", "HTTPS://Example.com"),
])
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_equivalent_urls_share_entry(clock):
    cache = ResultCache(clock=clock)
    cache.set("example.com", _ok())
    assert cache.get("https://example.com/") == _ok()
    assert cache.get("https://example.com") == _ok()
    assert cache.stats() == {"size": 1, "entries": ["https://example.com"]}


def test_round_trip_then_expiry(clock):
    cache = ResultCache(ttl=300, clock=clock)
    cache.set("https://a.com", _ok())
    clock.advance(299)
    assert cache.get("https://a.com") == _ok()
    clock.advance(1)
    assert cache.get("https://a.com") is None
    assert len(cache) == 0


def test_capacity_evicts_oldest(clock):
    cache = ResultCache(max_entries=3, clock=clock)
    for i in range(10):
        cache.set(f"site{i}.com", _ok(f"t{i}"))
        assert len(cache) <= 3
    assert cache.stats()["entries"] == ["https://site7.com", "https://site8.com", "https://site9.com"]


def test_overwrite_counts_as_newest(clock):
    cache = ResultCache(max_entries=2, clock=clock)
    cache.set("a.com", _ok("a"))
    cache.set("b.com", _ok("b"))
    cache.set("a.com", _ok("a2"))
    cache.set("c.com", _ok("c"))
    assert cache.get("b.com") is None
    assert cache.get("a.com").data.name == "a2"


def test_values_are_copies(clock):
    cache = ResultCache(clock=clock)
    original = _ok()
    cache.set("a.com", original)
    original.data.plugins.append("mutated")
    first = cache.get("a.com")
    first.data.plugins.append("also-mutated")
    assert cache.get("a.com").data.plugins == ["akismet"]


def test_replace_keeps_timestamp(clock):
    cache = ResultCache(ttl=100, clock=clock)
    cache.set("a.com", _ok("a"))
    clock.advance(60)
    assert cache.replace("a.com", _ok("enriched"))
    assert cache.get("a.com").data.name == "enriched"
    clock.advance(40)
    assert cache.get("a.com") is None


def test_replace_missing_entry(clock):
    cache = ResultCache(clock=clock)
    assert not cache.replace("a.com", _ok())
    assert len(cache) == 0


def test_failures_cacheable(clock):
    cache = ResultCache(clock=clock)
    cache.set("a.com", DetectionResult.fail("nope"))
    assert cache.get("a.com").error == "nope"


def test_clear(clock):
    cache = ResultCache(clock=clock)
    cache.set("a.com", _ok())
    cache.set("b.com", _ok())
    cache.clear()
    assert cache.stats() == {"size": 0, "entries": []}


def test_null_cache():
    cache = NullCache()
    cache.set("a.com", _ok())
    assert cache.get("a.com") is None
    assert cache.stats() == {"size": 0, "entries": []}
