from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from pricesignal.schemas.config import BandCenter, IndicatorConfig
from pricesignal.schemas.market import PriceSeries
from pricesignal.services.cache import IndicatorCache
from pricesignal.services.indicators import IndicatorEngine, create_indicator_engine
from pricesignal.services.indicators.calculations import (
    bollinger_bands,
    macd,
    rsi,
    sma,
    super_trend,
)
from tests.conftest import random_walk, series_from_closes


def test_cache_get_set_and_eviction():
    cache = IndicatorCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    assert "a" not in cache
    assert cache.get("b") == 2
    assert len(cache) == 2


def test_cache_get_or_compute_counts_hits_and_misses():
    cache = IndicatorCache()
    calls = []

    def compute():
        calls.append(1)
        return Decimal("42")

    assert cache.get_or_compute(("rsi", 14), compute) == Decimal("42")
    assert cache.get_or_compute(("rsi", 14), compute) == Decimal("42")
    assert len(calls) == 1
    assert cache.stats() == {"entries": 1, "hits": 1, "misses": 1}

    cache.clear()
    assert cache.stats() == {"entries": 0, "hits": 0, "misses": 0}


def test_engine_matches_plain_calculations():
    series = series_from_closes(random_walk(8))
    engine = IndicatorEngine(cache=IndicatorCache())
    assert engine.rsi(series) == rsi(series.points, 14)


def test_series_with_same_timestamps_but_other_prices_not_shared():
    rising = series_from_closes([100 + i for i in range(40)])
    falling = series_from_closes([140 - i for i in range(40)])
    assert [p.timestamp for p in rising.points] == [p.timestamp for p in falling.points]

    engine = IndicatorEngine(cache=IndicatorCache())
    assert engine.rsi(rising) == Decimal("100")
    assert engine.rsi(falling) == Decimal("0")

    engine.snapshot(rising)
    assert engine.snapshot(falling) == IndicatorEngine().snapshot(falling)
    assert engine.macd(series) == macd(series.points, 12, 26, 9)
    assert engine.sma(series, 50) == sma(series.points, 50)


def test_snapshot_identical_with_and_without_cache():
    series = series_from_closes(random_walk(9))
    cached = IndicatorEngine(cache=IndicatorCache()).snapshot(series)
    uncached = IndicatorEngine().snapshot(series)
    assert cached == uncached


def test_second_snapshot_served_from_cache():
    series = series_from_closes(random_walk(10))
    cache = IndicatorCache()
    engine = IndicatorEngine(cache=cache)

    first = engine.snapshot(series)
    misses = cache.misses
    second = engine.snapshot(series)

    assert first == second
    assert cache.misses == misses
    assert cache.hits > 0


def test_cache_key_includes_parameters_and_series_tail():
    series = series_from_closes(random_walk(12))
    cache = IndicatorCache()

    fast = IndicatorEngine(IndicatorConfig(rsi_period=7), cache=cache).rsi(series)
    slow = IndicatorEngine(IndicatorConfig(rsi_period=21), cache=cache).rsi(series)
    assert fast == rsi(series.points, 7)
    assert slow == rsi(series.points, 21)

    shorter = series.without_last()
    engine = IndicatorEngine(cache=cache)
    assert engine.rsi(shorter) == rsi(shorter.points, 14)
    assert engine.rsi(series) == rsi(series.points, 14)


def test_concurrent_snapshots_share_cache():
    series = series_from_closes(random_walk(13))
    cache = IndicatorCache()
    engine = IndicatorEngine(cache=cache)
    expected = IndicatorEngine().snapshot(series)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: engine.snapshot(series), range(16)))

    assert all(result == expected for result in results)


def test_snapshot_carries_previous_histogram_and_swing_levels():
    series = series_from_closes(random_walk(14))
    snapshot = IndicatorEngine().snapshot(series)
    assert snapshot.previous_histogram == macd(series.without_last().points).histogram
    assert snapshot.current_price == series.last.close
    assert snapshot.timestamp == series.last.timestamp
    assert snapshot.recent_low == min(p.low for p in series.points[-20:])
    assert snapshot.recent_high == max(p.high for p in series.points[-20:])


def test_empty_series_snapshot_is_sentinel():
    snapshot = IndicatorEngine().snapshot(PriceSeries(interval="1h"))
    assert snapshot.rsi == 0
    assert snapshot.timestamp is None
    assert snapshot.previous_histogram is None


def test_overlays_one_row_per_bar():
    series = series_from_closes(random_walk(15, 60))
    rows = IndicatorEngine().overlays(series)
    assert len(rows) == len(series)
    assert rows[0].sma20 == 0
    assert rows[19].sma20 == sma(series.points[:20], 20)
    assert rows[-1].sma20 == sma(series.points, 20)
    assert rows[-1].sma200 == 0
    assert all(r.bollinger_upper >= r.bollinger_lower for r in rows)
    assert rows[-1].vwap > 0


def test_create_indicator_engine_defaults_to_settings():
    from pricesignal.core.config import settings

    engine = create_indicator_engine()
    assert engine.config == settings.indicators
    assert engine.cache is None


def test_overlays_use_trailing_windows():
    series = series_from_closes(random_walk(16, 80))
    points = series.points
    rows = IndicatorEngine().overlays(series)

    for i in (19, 45, 79):
        bands = bollinger_bands(points[i - 19 : i + 1], 20, 2.0, BandCenter.SMA)
        assert rows[i].bollinger_upper == bands.upper
        assert rows[i].bollinger_lower == bands.lower
        assert rows[i].super_trend == super_trend(points[i - 10 : i + 1], 10, 3.0)

    assert rows[18].bollinger_upper == 0
    assert rows[9].super_trend == 0
    assert rows[10].super_trend > 0
