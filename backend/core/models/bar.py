"""OHLCV bar data models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

TIMEFRAME_PATTERN = r"^\d+[smhd]$"


class Bar(BaseModel):
    """OHLCV bar, standardized across exchanges.

    Timestamps are Unix milliseconds of the bar open.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    t: int = Field(gt=0)
    o: float = Field(gt=0)
    h: float = Field(gt=0)
    l: float = Field(gt=0)
    c: float = Field(gt=0)
    v: float = Field(ge=0)
    exch: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    tf: str = Field(pattern=TIMEFRAME_PATTERN)

    @model_validator(mode="after")
    def _check_range(self):
        if self.h < max(self.o, self.c):
            raise ValueError(
                f"high {self.h} is below max(open, close) = {max(self.o, self.c)}"
            )
        if self.l > min(self.o, self.c):
            raise ValueError(
                f"low {self.l} is above min(open, close) = {min(self.o, self.c)}"
            )
        return self

    @property
    def stream_key(self) -> str:
        """Key of the stream this bar belongs to: 'EXCH:SYMBOL:TF'."""
        return f"{self.exch}:{self.symbol}:{self.tf}"

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the bar."""
        return self.h - self.l


class BarBuffer(BaseModel):
    """Bounded window of recent bars for a single exchange/symbol/timeframe."""

    exch: str
    symbol: str
    tf: str
    bars: list[Bar] = Field(default_factory=list)
    max_size: int = Field(default=200, gt=0)

    def add(self, bar: Bar) -> None:
        """Append a bar, maintaining max size.

        Raises:
            ValueError: If the bar belongs to another stream or does not
                advance the timestamp.
        """
        if (bar.exch, bar.symbol, bar.tf) != (self.exch, self.symbol, self.tf):
            raise ValueError(
                f"bar stream {bar.stream_key} does not match buffer "
                f"{self.exch}:{self.symbol}:{self.tf}"
            )
        if self.bars and bar.t <= self.bars[-1].t:
            raise ValueError(
                f"bar timestamp t={bar.t} does not advance past t={self.bars[-1].t}"
            )

        self.bars.append(bar)
        if len(self.bars) > self.max_size:
            self.bars = self.bars[-self.max_size :]

    def clear(self) -> None:
        self.bars = []

    def get_closes(self) -> list[float]:
        """Get list of close prices."""
        return [b.c for b in self.bars]

    def get_highs(self) -> list[float]:
        """Get list of high prices."""
        return [b.h for b in self.bars]

    def get_lows(self) -> list[float]:
        """Get list of low prices."""
        return [b.l for b in self.bars]

    def __len__(self) -> int:
        return len(self.bars)
