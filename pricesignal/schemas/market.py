"""
CONTRACT 1: Price Series

Input to the indicator engine: an ordered, single-interval sequence of OHLCV bars.

Bars are created by the ingestion layer and are immutable afterwards.
The series is never resorted here: out-of-order input is rejected.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


PRICE_SCALE = Decimal("0.00000001")


# =============================================================================
# ENUMS
# =============================================================================


class IntervalType(str, Enum):
    ONE_HOUR = "1h"
    FOUR_HOURS = "4h"
    ONE_DAY = "1d"

    @classmethod
    def from_alias(cls, value: str) -> "IntervalType":
        """Resolve an interval alias (case-insensitive), e.g. 'Hourly' -> ONE_HOUR."""
        key = value.strip().lower()
        for interval, aliases in INTERVAL_ALIASES.items():
            if key in aliases:
                return interval
        raise ValueError(f"Invalid interval: {value}")

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            try:
                return cls.from_alias(value)
            except ValueError:
                return None
        return None

    @property
    def aliases(self) -> frozenset[str]:
        return INTERVAL_ALIASES[self]


INTERVAL_ALIASES: dict[IntervalType, frozenset[str]] = {
    IntervalType.ONE_HOUR: frozenset({"1h", "1hour", "hourly"}),
    IntervalType.FOUR_HOURS: frozenset({"4h", "4hours"}),
    IntervalType.ONE_DAY: frozenset({"1d", "1day", "daily"}),
}


# =============================================================================
# PricePoint
# =============================================================================


class PricePoint(BaseModel):
    """
    Single OHLCV bar.

    Prices are stored with a fixed 8-fraction-digit scale (half-up),
    timestamps as UTC with second precision.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: Decimal = Field(..., ge=0)
    high: Decimal = Field(..., ge=0)
    low: Decimal = Field(..., ge=0)
    close: Decimal = Field(..., ge=0)
    volume: Decimal = Field(..., ge=0)
    interval: IntervalType

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0)

    @field_validator("open", "high", "low", "close")
    @classmethod
    def _scale_price(cls, value: Decimal) -> Decimal:
        return value.quantize(PRICE_SCALE, rounding=ROUND_HALF_UP)

    @field_validator("interval", mode="before")
    @classmethod
    def _resolve_interval(cls, value):
        if isinstance(value, str) and not isinstance(value, IntervalType):
            return IntervalType.from_alias(value)
        return value


# =============================================================================
# PriceSeries
# =============================================================================


class PriceSeries(BaseModel):
    """
    Ordered immutable view of bars for a single interval.

    Invariants:
        - strictly increasing timestamps (oldest -> newest, no duplicates)
        - every bar carries the series interval
    """

    model_config = ConfigDict(frozen=True)

    interval: IntervalType
    points: tuple[PricePoint, ...] = ()

    @field_validator("interval", mode="before")
    @classmethod
    def _resolve_interval(cls, value):
        if isinstance(value, str) and not isinstance(value, IntervalType):
            return IntervalType.from_alias(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "PriceSeries":
        previous: Optional[datetime] = None
        for point in self.points:
            if point.interval != self.interval:
                raise ValueError(
                    f"Mixed intervals: series is {self.interval.value}, "
                    f"bar at {point.timestamp.isoformat()} is {point.interval.value}"
                )
            if previous is not None and point.timestamp <= previous:
                raise ValueError(
                    f"Bars must be sorted oldest to newest without duplicates "
                    f"(got {point.timestamp.isoformat()} after {previous.isoformat()})"
                )
            previous = point.timestamp
        return self

    @classmethod
    def from_points(
        cls, points: Sequence[PricePoint], interval: Optional[IntervalType] = None
    ) -> "PriceSeries":
        """Build a series, taking the interval from the first bar when not given."""
        if interval is None:
            if not points:
                raise ValueError("Interval is required for an empty series")
            interval = points[0].interval
        return cls(interval=interval, points=tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def last(self) -> Optional[PricePoint]:
        return self.points[-1] if self.points else None

    def without_last(self) -> "PriceSeries":
        """Series minus its newest bar (used for previous-bar comparisons)."""
        return PriceSeries(interval=self.interval, points=self.points[:-1])
