"""Technical indicators for feature construction.

All functions are pure and deterministic:
- Inputs are chronologically ordered (oldest first) and never mutated
- "Undefined" is always returned as NaN, never raised
- Sums are plain left-to-right accumulation so results are reproducible
  bit-for-bit across runs (required for golden-file replay)
"""

import math
from dataclasses import dataclass
from typing import Sequence

NAN = float("nan")


def _sum(values: Sequence[float]) -> float:
    total = 0.0
    for v in values:
        total += v
    return total


# =============================================================================
# Moving averages
# =============================================================================

def sma(values: Sequence[float], period: int) -> float:
    """
    Calculate Simple Moving Average of the last ``period`` values.

    Args:
        values: Sequence of values (e.g. close prices)
        period: Window size

    Returns:
        SMA value, or NaN if there is not enough data
    """
    if period <= 0 or len(values) < period:
        return NAN
    return _sum(values[-period:]) / period


def ema(
    values: Sequence[float],
    period: int,
    prev_ema: float | None = None,
) -> float:
    """
    Calculate Exponential Moving Average.

    Smoothing factor is ``2 / (period + 1)``. Without a previous EMA the
    value is seeded from the SMA of the last ``period`` values. With a
    previous EMA only the latest value is used, so callers in continuation
    mode must feed one new value per call.

    Args:
        values: Sequence of values
        period: EMA period
        prev_ema: Previous EMA value (NaN is treated as missing)

    Returns:
        EMA value, or NaN if there is not enough data
    """
    if not values or period <= 0:
        return NAN

    if prev_ema is None or math.isnan(prev_ema):
        return sma(values, period)

    multiplier = 2.0 / (period + 1)
    return (values[-1] - prev_ema) * multiplier + prev_ema


def wma(values: Sequence[float], period: int) -> float:
    """
    Calculate Weighted Moving Average.

    Weight equals rank within the window, 1 for the oldest value up to
    ``period`` for the newest.
    """
    if period <= 0 or len(values) < period:
        return NAN

    weighted_sum = 0.0
    weight_sum = 0.0
    for i, value in enumerate(values[-period:]):
        weight = i + 1
        weighted_sum += value * weight
        weight_sum += weight
    return weighted_sum / weight_sum


# =============================================================================
# Dispersion
# =============================================================================

def variance(values: Sequence[float], period: int) -> float:
    """Sample variance (n-1 denominator) of the last ``period`` values."""
    if period <= 1 or len(values) < period:
        return NAN

    window = values[-period:]
    mean = sma(window, period)
    sq_diff = 0.0
    for v in window:
        sq_diff += (v - mean) ** 2
    return sq_diff / (period - 1)


def stddev(values: Sequence[float], period: int) -> float:
    """Sample standard deviation of the last ``period`` values."""
    v = variance(values, period)
    return NAN if math.isnan(v) else math.sqrt(v)


# =============================================================================
# Volatility
# =============================================================================

def true_range(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """
    Calculate True Range per bar.

    TR = high - low for the first bar, otherwise
    max(high - low, abs(high - prev_close), abs(low - prev_close)).
    Arrays of unequal length are truncated to the common length.

    Returns:
        List of True Range values
    """
    n = min(len(highs), len(lows), len(closes))
    if n == 0:
        return []

    result = [highs[0] - lows[0]]
    for i in range(1, n):
        hl = highs[i] - lows[i]
        hc = abs(highs[i] - closes[i - 1])
        lc = abs(lows[i] - closes[i - 1])
        result.append(max(hl, hc, lc))

    return result


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> float:
    """
    Calculate Average True Range as the SMA of True Range.

    Args:
        highs: Sequence of high prices
        lows: Sequence of low prices
        closes: Sequence of close prices
        period: ATR period

    Returns:
        ATR value, or NaN if there is not enough data
    """
    n = min(len(highs), len(lows), len(closes))
    if period <= 0 or n < period:
        return NAN
    return sma(true_range(highs, lows, closes), period)


# =============================================================================
# Momentum
# =============================================================================

def rsi(values: Sequence[float], period: int = 14) -> float:
    """
    Calculate Relative Strength Index over the last ``period`` price changes.

    A window without losses returns 100 if there were gains and 50 for a
    completely flat series.

    Returns:
        RSI value in [0, 100], or NaN if there is not enough data
    """
    if period <= 0 or len(values) < period + 1:
        return NAN

    start = len(values) - period
    gains = 0.0
    losses = 0.0
    for i in range(start, len(values)):
        change = values[i] - values[i - 1]
        if change > 0:
            gains += change
        else:
            losses += -change

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram (NaN when undefined)."""

    macd: float = NAN
    signal: float = NAN
    histogram: float = NAN


def macd(
    values: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    Calculate MACD (fast EMA - slow EMA), its signal line and histogram.

    The signal line is the EMA of the MACD history, rebuilt by re-running
    both EMAs over every prefix of ``values``. This is O(n^2) but keeps the
    result a pure function of the input window.

    Returns:
        MACDResult; all fields NaN until ``slow_period`` values exist, and
        signal/histogram NaN until the history covers ``signal_period``.
    """
    if len(values) < slow_period:
        return MACDResult()

    fast = ema(values, fast_period)
    slow = ema(values, slow_period)
    if math.isnan(fast) or math.isnan(slow):
        return MACDResult()

    line = fast - slow

    history: list[float] = []
    for i in range(slow_period - 1, len(values)):
        prefix = values[: i + 1]
        f = ema(prefix, fast_period)
        s = ema(prefix, slow_period)
        if not math.isnan(f) and not math.isnan(s):
            history.append(f - s)

    if len(history) < signal_period:
        return MACDResult(macd=line)

    signal = ema(history, signal_period)
    if math.isnan(signal):
        return MACDResult(macd=line)

    return MACDResult(macd=line, signal=signal, histogram=line - signal)


# =============================================================================
# Returns
# =============================================================================

def percent_change(current: float, previous: float) -> float:
    """Percentage change, NaN if ``previous`` is not positive."""
    if previous <= 0:
        return NAN
    return (current - previous) / previous * 100.0


def simple_return(current: float, previous: float) -> float:
    """Simple return (not percentage), NaN if ``previous`` is not positive."""
    if previous <= 0:
        return NAN
    return (current - previous) / previous


def log_return(current: float, previous: float) -> float:
    """Log return, NaN if either price is not positive."""
    if current <= 0 or previous <= 0:
        return NAN
    return math.log(current / previous)
