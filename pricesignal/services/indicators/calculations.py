"""
Technical Indicator Calculations

Exact-decimal implementations of technical indicators.
All math is deterministic: every division rounds half-up to 8 fractional
digits, RSI and ADX are rounded to 2 decimals at the end.

Bars must be ordered oldest to newest. Insufficient data returns the
zero sentinel instead of raising.
"""

from decimal import Decimal, Context, ROUND_HALF_UP, localcontext
from functools import wraps
from typing import Optional, Sequence

from pricesignal.schemas.config import AtrMode, BandCenter
from pricesignal.schemas.indicators import BollingerBands, IchimokuCloud, MACDResult
from pricesignal.schemas.market import PricePoint


ZERO = Decimal("0")
HUNDRED = Decimal("100")
EIGHT_DP = Decimal("0.00000001")
TWO_DP = Decimal("0.01")

ICHIMOKU_TENKAN = 9
ICHIMOKU_KIJUN = 26
ICHIMOKU_SENKOU_B = 52
ICHIMOKU_CHIKOU_SHIFT = 26

# Wide enough that only the explicit quantize steps round
_CONTEXT = Context(prec=60, rounding=ROUND_HALF_UP)


def exact(func):
    """Run ``func`` under the engine's thread-local decimal context."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        with localcontext(_CONTEXT):
            return func(*args, **kwargs)

    return wrapper


def q8(value: Decimal) -> Decimal:
    return value.quantize(EIGHT_DP, rounding=ROUND_HALF_UP)


def q2(value: Decimal) -> Decimal:
    return value.quantize(TWO_DP, rounding=ROUND_HALF_UP)


def div(numerator, denominator) -> Decimal:
    """Half-up division to 8 fractional digits."""
    return q8(Decimal(numerator) / Decimal(denominator))


def as_decimal(value: float) -> Decimal:
    """Convert a float parameter without binary noise (2.0 -> Decimal('2.0'))."""
    return value if isinstance(value, Decimal) else Decimal(str(value))


# =============================================================================
# MOVING AVERAGES
# =============================================================================


@exact
def sma(bars: Sequence[PricePoint], period: int) -> Decimal:
    """Simple Moving Average of the last ``period`` closes."""
    if period <= 0 or len(bars) < period:
        return ZERO
    total = sum((b.close for b in bars[-period:]), ZERO)
    return div(total, period)


@exact
def ema_from_values(values: Sequence[Decimal], period: int) -> Decimal:
    """
    Exponential Moving Average over an arbitrary decimal sequence.

    Seeded with the mean of the first ``period`` values, then
    ``ema = value * m + ema * (1 - m)`` with ``m = 2 / (period + 1)``.
    """
    if period <= 0 or len(values) < period:
        return ZERO

    ema_value = div(sum(values[:period], ZERO), period)
    multiplier = div(2, period + 1)
    keep = 1 - multiplier

    for value in values[period:]:
        ema_value = value * multiplier + ema_value * keep

    return q8(ema_value)


def ema(bars: Sequence[PricePoint], period: int) -> Decimal:
    """Exponential Moving Average of closes."""
    return ema_from_values([b.close for b in bars], period)


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


@exact
def rsi(bars: Sequence[PricePoint], period: int = 14) -> Decimal:
    """
    Relative Strength Index.

    Averages are seeded over the first ``period`` deltas and then updated
    with ``avg = (avg * (period - 1) + new) / period`` for every later delta.
    Flat series -> 0, no losses -> 100.
    """
    if period <= 0 or len(bars) < period + 1:
        return ZERO

    gains = ZERO
    losses = ZERO
    for i in range(1, period + 1):
        change = bars[i].close - bars[i - 1].close
        if change > 0:
            gains += change
        else:
            losses += -change

    avg_gain = div(gains, period)
    avg_loss = div(losses, period)

    for i in range(period + 1, len(bars)):
        change = bars[i].close - bars[i - 1].close
        gain = change if change > 0 else ZERO
        loss = -change if change < 0 else ZERO
        avg_gain = div(avg_gain * (period - 1) + gain, period)
        avg_loss = div(avg_loss * (period - 1) + loss, period)

    if avg_gain == 0 and avg_loss == 0:
        return ZERO
    if avg_loss == 0:
        return q2(HUNDRED)

    rs = div(avg_gain, avg_loss)
    return q2(HUNDRED - div(HUNDRED, 1 + rs))


def _ema_step(
    previous: Optional[Decimal],
    values: Sequence[Decimal],
    index: int,
    period: int,
    multiplier: Decimal,
) -> Optional[Decimal]:
    """Advance an incremental EMA to ``index``; None until the seed bar."""
    if index < period - 1:
        return None
    if index == period - 1:
        return div(sum(values[:period], ZERO), period)
    return values[index] * multiplier + previous * (1 - multiplier)


@exact
def macd(
    bars: Sequence[PricePoint],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    MACD (Moving Average Convergence Divergence).

    Fast and slow EMAs run in one pass from the start of the series. The
    MACD line is kept from the first bar where both are active, and the
    signal line is the EMA of that line series.
    """
    if min(fast_period, slow_period, signal_period) <= 0 or len(bars) < slow_period:
        return MACDResult()

    closes = [b.close for b in bars]
    fast_multiplier = div(2, fast_period + 1)
    slow_multiplier = div(2, slow_period + 1)

    fast_ema: Optional[Decimal] = None
    slow_ema: Optional[Decimal] = None
    lines: list[Decimal] = []

    for i in range(len(closes)):
        fast_ema = _ema_step(fast_ema, closes, i, fast_period, fast_multiplier)
        slow_ema = _ema_step(slow_ema, closes, i, slow_period, slow_multiplier)
        if fast_ema is not None and slow_ema is not None:
            lines.append(q8(fast_ema) - q8(slow_ema))

    if not lines:
        return MACDResult()

    line = q8(lines[-1])
    signal_line = ema_from_values(lines, signal_period)

    return MACDResult(
        line=line,
        signal_line=signal_line,
        histogram=q8(line - signal_line),
    )


@exact
def stochastic_rsi(bars: Sequence[PricePoint], period: int = 14) -> Decimal:
    """
    Stochastic RSI in [0, 1].

    RSI is computed over the trailing ``period + 1`` bars ending at each of
    the last ``period`` bars, then normalized against its own min/max.
    """
    if period <= 0 or len(bars) < 2 * period:
        return ZERO

    values = [
        rsi(bars[end - period : end + 1], period)
        for end in range(len(bars) - period, len(bars))
    ]
    lowest = min(values)
    highest = max(values)
    if highest == lowest:
        return ZERO
    return div(values[-1] - lowest, highest - lowest)


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def true_ranges(bars: Sequence[PricePoint]) -> list[Decimal]:
    """True range for every bar that has a previous close."""
    result = []
    for i in range(1, len(bars)):
        prev_close = bars[i - 1].close
        result.append(
            max(
                bars[i].high - bars[i].low,
                abs(bars[i].high - prev_close),
                abs(bars[i].low - prev_close),
            )
        )
    return result


@exact
def atr(
    bars: Sequence[PricePoint], period: int = 14, mode: AtrMode = AtrMode.SMA
) -> Decimal:
    """
    Average True Range.

    ``sma``: mean of the first ``period`` true ranges.
    ``wilder-ema``: EMA over the full true-range sequence.
    """
    ranges = true_ranges(bars)
    if period <= 0 or len(ranges) < period:
        return ZERO
    if mode == AtrMode.WILDER_EMA:
        return ema_from_values(ranges, period)
    return div(sum(ranges[:period], ZERO), period)


@exact
def bollinger_bands(
    bars: Sequence[PricePoint],
    period: int = 20,
    k: float = 2.0,
    center: BandCenter = BandCenter.SMA,
) -> BollingerBands:
    """
    Bollinger Bands.

    Center is the SMA of the window or the EMA of the series; the population
    standard deviation of the window closes is taken around that center.
    """
    if period <= 0 or len(bars) < period:
        return BollingerBands()

    window = [b.close for b in bars[-period:]]
    middle = ema(bars, period) if center == BandCenter.EMA else sma(bars, period)

    variance = div(sum(((c - middle) ** 2 for c in window), ZERO), period)
    std_dev = q8(variance.sqrt())
    width = q8(as_decimal(k) * std_dev)

    return BollingerBands(upper=middle + width, middle=middle, lower=middle - width)


# =============================================================================
# TREND INDICATORS
# =============================================================================


def _directional_index(
    smoothed_dm: Decimal, smoothed_tr: Decimal
) -> Decimal:
    if smoothed_tr == 0:
        return ZERO
    return div(smoothed_dm * HUNDRED, smoothed_tr)


def _dx(smoothed_plus: Decimal, smoothed_minus: Decimal, smoothed_tr: Decimal) -> Decimal:
    plus_di = _directional_index(smoothed_plus, smoothed_tr)
    minus_di = _directional_index(smoothed_minus, smoothed_tr)
    total = plus_di + minus_di
    if total == 0:
        return ZERO
    return div(abs(plus_di - minus_di) * HUNDRED, total)


@exact
def adx(bars: Sequence[PricePoint], period: int = 14) -> Decimal:
    """
    Average Directional Index (Wilder).

    Running sums of TR/+DM/-DM are smoothed with
    ``smoothed = smoothed - smoothed / period + new``; ADX is the mean of
    the last ``period`` DX values.
    """
    if period <= 0 or len(bars) < 2 * period:
        return ZERO

    ranges = true_ranges(bars)
    plus_dm: list[Decimal] = []
    minus_dm: list[Decimal] = []

    for i in range(1, len(bars)):
        up_move = bars[i].high - bars[i - 1].high
        down_move = bars[i - 1].low - bars[i].low
        plus_dm.append(up_move if up_move > down_move and up_move > 0 else ZERO)
        minus_dm.append(down_move if down_move > up_move and down_move > 0 else ZERO)

    smoothed_tr = sum(ranges[:period], ZERO)
    smoothed_plus = sum(plus_dm[:period], ZERO)
    smoothed_minus = sum(minus_dm[:period], ZERO)
    dx_values = [_dx(smoothed_plus, smoothed_minus, smoothed_tr)]

    for i in range(period, len(ranges)):
        smoothed_tr = smoothed_tr - div(smoothed_tr, period) + ranges[i]
        smoothed_plus = smoothed_plus - div(smoothed_plus, period) + plus_dm[i]
        smoothed_minus = smoothed_minus - div(smoothed_minus, period) + minus_dm[i]
        dx_values.append(_dx(smoothed_plus, smoothed_minus, smoothed_tr))

    return q2(div(sum(dx_values[-period:], ZERO), period))


def _midpoint(bars: Sequence[PricePoint]) -> Decimal:
    highest = max(b.high for b in bars)
    lowest = min(b.low for b in bars)
    return div(highest + lowest, 2)


@exact
def ichimoku(bars: Sequence[PricePoint]) -> IchimokuCloud:
    """
    Ichimoku Cloud (9/26/52).

    Spans are not shifted forward; chikou is the close 26 bars before the
    last bar.
    """
    if len(bars) < ICHIMOKU_SENKOU_B:
        return IchimokuCloud()

    tenkan = _midpoint(bars[-ICHIMOKU_TENKAN:])
    kijun = _midpoint(bars[-ICHIMOKU_KIJUN:])
    senkou_b = _midpoint(bars[-ICHIMOKU_SENKOU_B:])
    chikou_index = max(0, len(bars) - 1 - ICHIMOKU_CHIKOU_SHIFT)

    return IchimokuCloud(
        tenkan=tenkan,
        kijun=kijun,
        senkou_a=div(tenkan + kijun, 2),
        senkou_b=senkou_b,
        chikou=bars[chikou_index].close,
    )


@exact
def super_trend_series(
    bars: Sequence[PricePoint], period: int = 10, multiplier: float = 3.0
) -> list[Decimal]:
    """
    SuperTrend line for every bar (zero until ``period`` true ranges exist).

    ATR uses Wilder smoothing seeded with the mean of the first ``period``
    true ranges. Final bands ratchet toward price and the line flips side
    when the close crosses the opposite band.
    """
    result = [ZERO] * len(bars)
    if period <= 0 or len(bars) < period + 1:
        return result

    factor = as_decimal(multiplier)
    ranges = true_ranges(bars)

    average_range: Optional[Decimal] = None
    final_upper: Optional[Decimal] = None
    final_lower: Optional[Decimal] = None
    uptrend = True

    for i in range(period, len(bars)):
        if average_range is None:
            average_range = div(sum(ranges[:period], ZERO), period)
        else:
            average_range = div(average_range * (period - 1) + ranges[i - 1], period)

        bar = bars[i]
        hl2 = div(bar.high + bar.low, 2)
        basic_upper = q8(hl2 + factor * average_range)
        basic_lower = q8(hl2 - factor * average_range)
        prev_close = bars[i - 1].close

        if final_upper is None:
            final_upper, final_lower = basic_upper, basic_lower
            uptrend = bar.close >= hl2
        else:
            if basic_upper < final_upper or prev_close > final_upper:
                final_upper = basic_upper
            if basic_lower > final_lower or prev_close < final_lower:
                final_lower = basic_lower

            if uptrend and bar.close < final_lower:
                uptrend = False
            elif not uptrend and bar.close > final_upper:
                uptrend = True

        result[i] = final_lower if uptrend else final_upper

    return result


def super_trend(
    bars: Sequence[PricePoint], period: int = 10, multiplier: float = 3.0
) -> Decimal:
    """SuperTrend line value on the last bar."""
    if not bars:
        return ZERO
    return super_trend_series(bars, period, multiplier)[-1]


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


@exact
def vwap_series(bars: Sequence[PricePoint]) -> list[Decimal]:
    """Cumulative Volume Weighted Average Price for every bar."""
    result = []
    cumulative_pv = ZERO
    cumulative_volume = ZERO

    for bar in bars:
        typical_price = div(bar.high + bar.low + bar.close, 3)
        cumulative_pv += typical_price * bar.volume
        cumulative_volume += bar.volume
        if cumulative_volume == 0:
            result.append(ZERO)
        else:
            result.append(div(cumulative_pv, cumulative_volume))

    return result


def vwap(bars: Sequence[PricePoint]) -> Decimal:
    """Volume Weighted Average Price over the whole series."""
    if not bars:
        return ZERO
    return vwap_series(bars)[-1]


# =============================================================================
# SWING LEVELS
# =============================================================================


def recent_low(bars: Sequence[PricePoint], lookback: int = 20) -> Optional[Decimal]:
    """Lowest low of the last ``lookback`` bars."""
    if not bars or lookback <= 0:
        return None
    return min(b.low for b in bars[-lookback:])


def recent_high(bars: Sequence[PricePoint], lookback: int = 20) -> Optional[Decimal]:
    """Highest high of the last ``lookback`` bars."""
    if not bars or lookback <= 0:
        return None
    return max(b.high for b in bars[-lookback:])
