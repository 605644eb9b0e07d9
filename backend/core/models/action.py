"""Trade action models emitted by the decision policy."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Side(str, Enum):
    """Trade side."""

    BUY = "buy"
    SELL = "sell"

    @property
    def opposite(self) -> "Side":
        return Side.SELL if self is Side.BUY else Side.BUY

    @classmethod
    def from_score(cls, score: float) -> "Side":
        """Side implied by the sign of a signal score (zero maps to sell)."""
        return cls.BUY if score > 0 else cls.SELL


class Bracket(BaseModel):
    """Take-profit / stop-loss levels attached to a position."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tp: float | None = Field(default=None, gt=0)
    sl: float | None = Field(default=None, gt=0)
    trail: float | None = Field(default=None, gt=0)


class Action(BaseModel):
    """Intended trade action (market order unless ``entry`` is set)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    t: int = Field(gt=0)
    symbol: str = Field(min_length=1)
    exch: str = Field(min_length=1)
    side: Side
    size: float = Field(gt=0)
    entry: float | None = Field(default=None, gt=0)
    bracket: Bracket | None = None
    metadata: dict[str, Any] | None = None

    @property
    def is_open(self) -> bool:
        """True for actions that open a position (they carry a bracket)."""
        return self.bracket is not None
