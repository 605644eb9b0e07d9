"""Data models shared by every pipeline stage."""

from core.models.bar import Bar, BarBuffer, TIMEFRAME_PATTERN
from core.models.features import FeatureVector, Regime
from core.models.signal import AlphaSignal, make_signal_id
from core.models.action import Action, Bracket, Side
from core.models.risk import RiskContext, RiskLimits, RiskVerdict

__all__ = [
    "Bar",
    "BarBuffer",
    "TIMEFRAME_PATTERN",
    "FeatureVector",
    "Regime",
    "AlphaSignal",
    "make_signal_id",
    "Action",
    "Bracket",
    "Side",
    "RiskContext",
    "RiskLimits",
    "RiskVerdict",
]
