"""AR(4) autoregressive alpha.

Predicts the next bar's return from the last four returns:

    r_t = b0 + b1*r(t-1) + b2*r(t-2) + b3*r(t-3) + b4*r(t-4)

The model is refit on a rolling window of returns and only speaks when
the in-sample R² clears ``min_r_squared``. The prediction is scaled by
100 into a score; the R² doubles as confidence.

This module is pure business logic with no I/O dependencies.
"""

from __future__ import annotations

import logging
import math

from core.alpha.ar4.models import (
    AR4_ALPHA_NAME,
    AR_ORDER,
    REFIT_EVERY,
    AR4Coefficients,
    AR4Config,
    AR4State,
)
from core.alpha.ar4.regression import fit_ar4, predict_ar4
from core.alpha.registry import register_alpha
from core.models.features import FEATURE_RETURN, FeatureVector
from core.models.signal import AlphaSignal, make_signal_id

logger = logging.getLogger(__name__)

SCORE_SCALE = 100.0


def ar4_step(
    state: AR4State,
    config: AR4Config,
    features: FeatureVector,
) -> tuple[AR4State, AlphaSignal | None]:
    """Advance the AR(4) model by one observation.

    Args:
        state: Current model state
        config: Model configuration
        features: Latest feature vector (reads ``return_1``)

    Returns:
        (next_state, signal). A missing or NaN return leaves the state
        untouched and yields no signal.
    """
    current = features.get(FEATURE_RETURN)
    if current is None or math.isnan(current):
        return state, None

    returns = (state.returns + (current,))[-config.fit_window:]

    coefficients = state.coefficients
    if len(returns) % REFIT_EVERY == 0 or coefficients is None:
        coefficients = fit_ar4(returns)
        logger.debug(
            f"AR(4) refit on {len(returns)} returns for {features.symbol}: "
            f"R²={coefficients.r_squared:.3f}"
        )

    next_state = AR4State(returns=returns, coefficients=coefficients)

    if len(returns) < AR_ORDER:
        return next_state, None
    if coefficients.r_squared < config.min_r_squared:
        return next_state, None

    recent = [returns[-1], returns[-2], returns[-3], returns[-4]]
    predicted = predict_ar4(coefficients, recent)
    score = max(-1.0, min(1.0, predicted * SCORE_SCALE))

    signal = AlphaSignal(
        id=make_signal_id(AR4_ALPHA_NAME, features.t),
        t=features.t,
        symbol=features.symbol,
        exch=features.exch,
        tf=features.tf,
        score=score,
        conf=coefficients.r_squared,
        horizon_sec=config.horizon_sec,
        explain=(
            f"AR(4) predicted return: {predicted:.6f}, "
            f"R²: {coefficients.r_squared:.3f}"
        ),
    )
    return next_state, signal


@register_alpha(AR4_ALPHA_NAME)
class AR4Alpha:
    """Stateful wrapper around ``ar4_step`` for a single stream."""

    def __init__(self, config: AR4Config | None = None):
        self.config = config or AR4Config()
        self._state = AR4State()

    @property
    def name(self) -> str:
        return AR4_ALPHA_NAME

    @property
    def state(self) -> AR4State:
        return self._state

    @property
    def coefficients(self) -> AR4Coefficients | None:
        return self._state.coefficients

    def generate_signal(self, features: FeatureVector) -> AlphaSignal | None:
        self._state, signal = ar4_step(self._state, self.config, features)
        return signal

    def reset(self) -> None:
        self._state = AR4State()

    def restore(self, state: AR4State) -> None:
        if len(state.returns) > self.config.fit_window:
            raise ValueError(
                f"state holds {len(state.returns)} returns, "
                f"fit_window is {self.config.fit_window}"
            )
        self._state = state
