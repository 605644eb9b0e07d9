"""Threshold-ATR decision policy.

Turns alpha signals into trade actions with score hysteresis and ATR
brackets:

- Flat: |score| >= enter_threshold opens a position in the score's
  direction
- In position, opposite signal with |score| >= enter_threshold: reverse
  (one open action is returned, tagged ``reversal`` in its metadata). If
  the new leg cannot be opened the position is closed instead
- In position, |score| < exit_threshold: close at the current price
- Anything else holds

Take-profit sits ``atr_tp_multiplier`` ATRs from the entry, stop-loss
``atr_sl_multiplier`` ATRs, mirrored for shorts.

This module is pure business logic with no I/O dependencies.
"""

from __future__ import annotations

import logging
import math

from core.models.action import Action, Bracket, Side
from core.models.features import FEATURE_ATR, FEATURE_CLOSE, FeatureVector
from core.models.signal import AlphaSignal
from core.policy.models import FLAT, PolicyConfig, PolicyState

logger = logging.getLogger(__name__)

EXIT_REASON = "exit_threshold"
REVERSAL_REJECTED_REASON = "reversal_open_rejected"


def compute_size(config: PolicyConfig, price: float, atr: float) -> float | None:
    """Position size in base units, capped at ``max_size``.

    Returns None when the size is undefined (non-positive price, or ATR
    sizing with a non-positive ATR).
    """
    if price <= 0:
        return None

    if config.use_atr_sizing:
        risk = atr * config.atr_sizing_multiplier
        if risk <= 0:
            return None
        size = config.fixed_notional / (price * risk)
    else:
        size = config.fixed_notional / price

    return min(size, config.max_size)


def compute_bracket(config: PolicyConfig, entry: float, atr: float, side: Side) -> Bracket:
    """TP/SL levels around ``entry``."""
    tp_distance = atr * config.atr_tp_multiplier
    sl_distance = atr * config.atr_sl_multiplier

    if side is Side.BUY:
        return Bracket(tp=entry + tp_distance, sl=entry - sl_distance)
    return Bracket(tp=entry - tp_distance, sl=entry + sl_distance)


def _open(
    config: PolicyConfig,
    signal: AlphaSignal,
    price: float,
    atr: float,
    side: Side,
) -> tuple[PolicyState, Action] | None:
    size = compute_size(config, price, atr)
    if size is None:
        logger.debug(f"Undefined size for {signal.symbol} (price={price}, atr={atr}), skipping")
        return None

    tp_distance = atr * config.atr_tp_multiplier
    sl_distance = atr * config.atr_sl_multiplier
    lowest = price - (sl_distance if side is Side.BUY else tp_distance)
    if lowest <= 0:
        logger.warning(
            f"Bracket for {side.value} {signal.symbol} at {price} with atr={atr} "
            f"would cross zero, skipping"
        )
        return None

    action = Action(
        t=signal.t,
        symbol=signal.symbol,
        exch=signal.exch,
        side=side,
        size=size,
        bracket=compute_bracket(config, price, atr, side),
        metadata={
            "signal_id": signal.id,
            "signal_score": signal.score,
            "signal_conf": signal.conf,
            "atr": atr,
        },
    )
    return PolicyState(side=side, size=size), action


def _close(
    state: PolicyState,
    signal: AlphaSignal,
    price: float,
    reason: str = EXIT_REASON,
) -> tuple[PolicyState, Action]:
    action = Action(
        t=signal.t,
        symbol=signal.symbol,
        exch=signal.exch,
        side=state.side.opposite,
        size=state.size,
        entry=price,
        metadata={
            "signal_id": signal.id,
            "signal_score": signal.score,
            "signal_conf": signal.conf,
            "reason": reason,
        },
    )
    return FLAT, action


def policy_step(
    state: PolicyState,
    config: PolicyConfig,
    signal: AlphaSignal,
    features: FeatureVector,
) -> tuple[PolicyState, Action | None]:
    """Advance the policy by one signal.

    Args:
        state: Current position
        config: Policy configuration
        signal: Alpha signal to act on
        features: Features of the same bar (reads ``atr_14`` and ``close``)

    Returns:
        (next_state, action). Missing or NaN ATR/close leaves the state
        unchanged and yields no action, as does an undefined size when flat.
    """
    atr = features.get(FEATURE_ATR)
    price = features.get(FEATURE_CLOSE)
    if atr is None or price is None or math.isnan(atr) or math.isnan(price):
        return state, None

    strength = abs(signal.score)
    direction = Side.from_score(signal.score)

    if state.is_flat:
        if strength < config.enter_threshold:
            return state, None
        opened = _open(config, signal, price, atr, direction)
        if opened is None:
            return state, None
        logger.info(
            f"Open {direction.value} {signal.symbol} size={opened[0].size:.6f} "
            f"at {price} (score={signal.score:.3f})"
        )
        return opened

    if direction is not state.side and strength >= config.enter_threshold:
        opened = _open(config, signal, price, atr, direction)
        if opened is None:
            # Still collapse to flat; only the new leg is skipped
            logger.info(
                f"Reversal open rejected for {signal.symbol}, closing {state.side.value} "
                f"{state.size:.6f} at {price}"
            )
            return _close(state, signal, price, REVERSAL_REJECTED_REASON)
        new_state, action = opened
        action = action.model_copy(
            update={
                "metadata": {
                    **action.metadata,
                    "reversal": True,
                    "reversed_size": state.size,
                }
            }
        )
        logger.info(
            f"Reverse {signal.symbol} {state.side.value} {state.size:.6f} -> "
            f"{direction.value} {new_state.size:.6f} at {price}"
        )
        return new_state, action

    if strength < config.exit_threshold:
        logger.info(
            f"Close {state.side.value} {signal.symbol} size={state.size:.6f} "
            f"at {price} (score={signal.score:.3f})"
        )
        return _close(state, signal, price)

    return state, None


class ThresholdAtrPolicy:
    """Stateful wrapper around ``policy_step`` for a single stream."""

    def __init__(self, config: PolicyConfig | None = None):
        self.config = config or PolicyConfig()
        self._state = FLAT

    @property
    def state(self) -> PolicyState:
        return self._state

    @property
    def is_flat(self) -> bool:
        return self._state.is_flat

    def generate_action(self, signal: AlphaSignal, features: FeatureVector) -> Action | None:
        self._state, action = policy_step(self._state, self.config, signal, features)
        return action

    def reset(self) -> None:
        self._state = FLAT

    def restore(self, state: PolicyState) -> None:
        self._state = state
