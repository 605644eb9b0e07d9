"""Alpha signal data model."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.bar import TIMEFRAME_PATTERN


def make_signal_id(model: str, t: int) -> str:
    """Generate a deterministic signal ID from the model name and timestamp.

    The same bar replayed through the same model always yields the same ID.
    """
    return f"{model}-{t}"


class AlphaSignal(BaseModel):
    """Directional prediction emitted by an alpha model.

    ``score`` runs from -1 (strong sell) to +1 (strong buy); values outside
    the interval are rejected rather than clamped.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    t: int = Field(gt=0)
    symbol: str = Field(min_length=1)
    exch: str = Field(min_length=1)
    tf: str = Field(pattern=TIMEFRAME_PATTERN)
    score: float = Field(ge=-1.0, le=1.0)
    conf: float = Field(ge=0.0, le=1.0)
    horizon_sec: int = Field(gt=0)
    explain: str | None = None

    @property
    def is_bullish(self) -> bool:
        return self.score > 0
