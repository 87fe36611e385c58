from datetime import datetime, timedelta, timezone
from decimal import Decimal

import numpy as np
import pytest

from pricesignal.schemas.market import IntervalType, PricePoint, PriceSeries

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _d(value) -> Decimal:
    return Decimal(str(round(float(value), 4)))


def bar(idx: int, o, h, l, c, v=1000, interval: IntervalType = IntervalType.ONE_HOUR) -> PricePoint:
    return PricePoint(
        timestamp=START + timedelta(hours=idx),
        open=_d(o),
        high=_d(h),
        low=_d(l),
        close=_d(c),
        volume=_d(v),
        interval=interval,
    )


def series_from_closes(closes, interval: IntervalType = IntervalType.ONE_HOUR) -> PriceSeries:
    """Bars opening at the previous close with a small wick on each side."""
    points = []
    previous = float(closes[0])
    for i, close in enumerate(closes):
        close = float(close)
        top = max(previous, close)
        bottom = min(previous, close)
        points.append(bar(i, previous, top * 1.002, bottom * 0.998, close, 1000 + i, interval))
        previous = close
    return PriceSeries.from_points(points, interval=interval)


def random_walk(seed: int, length: int = 260, start: float = 100.0) -> list[float]:
    rng = np.random.default_rng(seed)
    steps = rng.normal(0.0, 0.01, size=length)
    return list(start * np.exp(np.cumsum(steps)))


@pytest.fixture
def make_series():
    return series_from_closes


@pytest.fixture
def walk():
    return random_walk
