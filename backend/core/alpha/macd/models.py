"""MACD alpha configuration and state."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

MACD_ALPHA_NAME = "macd"


class MACDConfig(BaseModel):
    """Configuration for the MACD alpha."""

    model_config = ConfigDict(extra="forbid")

    # Histogram magnitudes below this are treated as noise
    min_histogram: float = Field(default=0.0001, ge=0.0)
    horizon_sec: int = Field(default=300, gt=0)
    # False: histogram-only signals
    use_crossover: bool = True


@dataclass(frozen=True)
class MACDState:
    """MACD values seen on the previous valid observation."""

    prev_macd: float | None = None
    prev_signal: float | None = None
    prev_histogram: float | None = None
