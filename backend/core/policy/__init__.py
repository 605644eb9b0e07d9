"""Decision policies: alpha signals to trade actions."""

from core.policy.models import FLAT, PolicyConfig, PolicyState
from core.policy.threshold_atr import (
    ThresholdAtrPolicy,
    compute_bracket,
    compute_size,
    policy_step,
)

__all__ = [
    "FLAT",
    "PolicyConfig",
    "PolicyState",
    "ThresholdAtrPolicy",
    "compute_bracket",
    "compute_size",
    "policy_step",
]
