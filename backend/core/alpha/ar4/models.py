"""AR(4) alpha configuration and state."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

AR4_ALPHA_NAME = "ar4"

# Refit cadence (in observations)
REFIT_EVERY = 20

# Minimum returns for a meaningful fit
MIN_FIT_RETURNS = 10

# Lags used by the model
AR_ORDER = 4


class AR4Config(BaseModel):
    """Configuration for the AR(4) alpha."""

    model_config = ConfigDict(extra="forbid")

    # Lookback window for fitting, in returns
    fit_window: int = Field(default=100, gt=0)
    horizon_sec: int = Field(default=300, gt=0)
    # Fits with a lower R² never emit signals
    min_r_squared: float = Field(default=0.1, ge=0.0, le=1.0)


@dataclass(frozen=True)
class AR4Coefficients:
    """Fitted model r_t = beta0 + beta1*r(t-1) + ... + beta4*r(t-4)."""

    beta0: float = 0.0
    beta1: float = 0.0
    beta2: float = 0.0
    beta3: float = 0.0
    beta4: float = 0.0
    r_squared: float = 0.0

    @property
    def betas(self) -> tuple[float, float, float, float, float]:
        return (self.beta0, self.beta1, self.beta2, self.beta3, self.beta4)


@dataclass(frozen=True)
class AR4State:
    """Return history (chronological, at most ``fit_window``) and last fit."""

    returns: tuple[float, ...] = ()
    coefficients: AR4Coefficients | None = None
