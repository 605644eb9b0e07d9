"""MACD alpha package.

Importing this package registers MACDAlpha under the name 'macd'.
"""

from core.alpha.macd.generator import MACDAlpha, detect_crossover, histogram_signal, macd_step
from core.alpha.macd.models import MACD_ALPHA_NAME, MACDConfig, MACDState

__all__ = [
    "MACDAlpha",
    "macd_step",
    "detect_crossover",
    "histogram_signal",
    "MACD_ALPHA_NAME",
    "MACDConfig",
    "MACDState",
]
