"""Pipeline configuration model.

One PipelineConfig describes the whole per-stream decision chain: feature
parameters, which alpha model to run and its settings, the policy and the
risk limits. It is pure data; ``app.pipeline_config`` loads it from YAML.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from core.alpha.ar4.models import AR4Config
from core.alpha.macd.models import MACDConfig
from core.features.models import FeatureConfig
from core.models.risk import RiskLimits
from core.policy.models import PolicyConfig


class PipelineConfig(BaseModel):
    """Top-level configuration of a decision pipeline."""

    model_config = ConfigDict(extra="forbid")

    features: FeatureConfig = Field(default_factory=FeatureConfig)

    # Registered alpha name ('ar4' or 'macd' built in)
    alpha_model: str = "ar4"
    ar4: AR4Config = Field(default_factory=AR4Config)
    macd: MACDConfig = Field(default_factory=MACDConfig)

    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    risk: RiskLimits = Field(default_factory=RiskLimits)

    # Bars retained per stream
    buffer_size: int = Field(default=200, gt=0)

    def alpha_config(self) -> BaseModel | None:
        """Config section for the selected alpha, if it has one."""
        return {"ar4": self.ar4, "macd": self.macd}.get(self.alpha_model)
