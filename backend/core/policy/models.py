"""Decision policy configuration and position state."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.models.action import Side


class PolicyConfig(BaseModel):
    """Configuration for the threshold-ATR policy."""

    model_config = ConfigDict(extra="forbid")

    # Hysteresis: |score| >= enter opens, |score| < exit closes
    enter_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    exit_threshold: float = Field(default=0.3, ge=0.0, le=1.0)

    # Sizing (quote currency notional, base currency max size)
    fixed_notional: float = Field(default=1000.0, gt=0)
    use_atr_sizing: bool = False
    atr_sizing_multiplier: float = Field(default=1.0, gt=0)
    max_size: float = Field(default=10.0, gt=0)

    # Bracket distances in ATRs
    atr_tp_multiplier: float = Field(default=2.0, gt=0)
    atr_sl_multiplier: float = Field(default=1.0, gt=0)

    @model_validator(mode="after")
    def _validate_hysteresis(self):
        if self.enter_threshold < self.exit_threshold:
            raise ValueError(
                f"enter_threshold ({self.enter_threshold}) must be >= "
                f"exit_threshold ({self.exit_threshold})"
            )
        return self


@dataclass(frozen=True)
class PolicyState:
    """Current position: flat (side None, size 0) or long/short with size > 0."""

    side: Side | None = None
    size: float = 0.0

    def __post_init__(self):
        if self.side is None and self.size != 0:
            raise ValueError(f"flat state must have size 0, got {self.size}")
        if self.side is not None and self.size <= 0:
            raise ValueError(f"open {self.side.value} state must have size > 0, got {self.size}")

    @property
    def is_flat(self) -> bool:
        return self.side is None


FLAT = PolicyState()
