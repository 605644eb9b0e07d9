"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    NAN,
    MACDResult,
    sma,
    ema,
    wma,
    variance,
    stddev,
    true_range,
    atr,
    rsi,
    macd,
    percent_change,
    simple_return,
    log_return,
)

__all__ = [
    "NAN",
    "MACDResult",
    "sma",
    "ema",
    "wma",
    "variance",
    "stddev",
    "true_range",
    "atr",
    "rsi",
    "macd",
    "percent_change",
    "simple_return",
    "log_return",
]
