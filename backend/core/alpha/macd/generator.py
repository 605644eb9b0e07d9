"""MACD momentum alpha.

Signal logic:
- Crossover: MACD line crossing above its signal line is bullish (score
  +1), crossing below is bearish (score -1), confidence 0.8
- Otherwise the histogram drives the score (histogram * 1000, clamped);
  confidence is 0.7 while momentum strengthens, 0.3 while it weakens and
  0.5 when there is no previous histogram to compare against

Histograms smaller than ``min_histogram`` are ignored but still advance
the state, so a crossover is always measured against the last bar.
"""

from __future__ import annotations

import logging
import math

from core.alpha.macd.models import MACD_ALPHA_NAME, MACDConfig, MACDState
from core.alpha.registry import register_alpha
from core.models.features import (
    FEATURE_MACD,
    FEATURE_MACD_HISTOGRAM,
    FEATURE_MACD_SIGNAL,
    FeatureVector,
)
from core.models.signal import AlphaSignal, make_signal_id

logger = logging.getLogger(__name__)

HISTOGRAM_SCALE = 1000.0
CROSSOVER_CONF = 0.8
FIRST_OBSERVATION_CONF = 0.5
STRENGTHENING_CONF = 0.7
WEAKENING_CONF = 0.3


def _missing(value: float | None) -> bool:
    return value is None or math.isnan(value)


def detect_crossover(state: MACDState, macd: float, signal: float) -> str | None:
    """Return 'bullish', 'bearish' or None against the previous observation."""
    if state.prev_macd is None or state.prev_signal is None:
        return None

    if state.prev_macd < state.prev_signal and macd > signal:
        return "bullish"
    if state.prev_macd > state.prev_signal and macd < signal:
        return "bearish"
    return None


def histogram_signal(state: MACDState, histogram: float) -> tuple[float, float, str]:
    """Score, confidence and explanation from the histogram alone."""
    positive = histogram > 0

    conf = FIRST_OBSERVATION_CONF
    if state.prev_histogram is not None:
        change = histogram - state.prev_histogram
        strengthening = change > 0 if positive else change < 0
        conf = STRENGTHENING_CONF if strengthening else WEAKENING_CONF

    score = max(-1.0, min(1.0, histogram * HISTOGRAM_SCALE))
    momentum = "strengthening" if conf > FIRST_OBSERVATION_CONF else "weakening"
    sign = "positive" if positive else "negative"
    return score, conf, f"MACD histogram {sign} ({histogram:.6f}), momentum {momentum}"


def macd_step(
    state: MACDState,
    config: MACDConfig,
    features: FeatureVector,
) -> tuple[MACDState, AlphaSignal | None]:
    """Advance the MACD model by one observation.

    Args:
        state: Previous MACD values
        config: Model configuration
        features: Latest feature vector (reads ``macd``, ``macd_signal``,
            ``macd_histogram``)

    Returns:
        (next_state, signal). Missing or NaN inputs leave the state
        untouched; any valid input replaces it.
    """
    macd = features.get(FEATURE_MACD)
    signal_line = features.get(FEATURE_MACD_SIGNAL)
    histogram = features.get(FEATURE_MACD_HISTOGRAM)

    if _missing(macd) or _missing(signal_line) or _missing(histogram):
        return state, None

    next_state = MACDState(prev_macd=macd, prev_signal=signal_line, prev_histogram=histogram)

    if abs(histogram) < config.min_histogram:
        return next_state, None

    crossover = detect_crossover(state, macd, signal_line) if config.use_crossover else None

    if crossover == "bullish":
        score, conf, explain = 1.0, CROSSOVER_CONF, "MACD bullish crossover detected"
    elif crossover == "bearish":
        score, conf, explain = -1.0, CROSSOVER_CONF, "MACD bearish crossover detected"
    else:
        score, conf, explain = histogram_signal(state, histogram)

    if crossover is not None:
        logger.debug(f"MACD {crossover} crossover on {features.symbol} at t={features.t}")

    if score == 0 or conf == 0:
        return next_state, None

    signal = AlphaSignal(
        id=make_signal_id(MACD_ALPHA_NAME, features.t),
        t=features.t,
        symbol=features.symbol,
        exch=features.exch,
        tf=features.tf,
        score=score,
        conf=conf,
        horizon_sec=config.horizon_sec,
        explain=explain,
    )
    return next_state, signal


@register_alpha(MACD_ALPHA_NAME)
class MACDAlpha:
    """Stateful wrapper around ``macd_step`` for a single stream."""

    def __init__(self, config: MACDConfig | None = None):
        self.config = config or MACDConfig()
        self._state = MACDState()

    @property
    def name(self) -> str:
        return MACD_ALPHA_NAME

    @property
    def state(self) -> MACDState:
        return self._state

    def generate_signal(self, features: FeatureVector) -> AlphaSignal | None:
        self._state, signal = macd_step(self._state, self.config, features)
        return signal

    def reset(self) -> None:
        self._state = MACDState()

    def restore(self, state: MACDState) -> None:
        self._state = state
