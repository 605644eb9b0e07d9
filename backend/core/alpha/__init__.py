"""Alpha model plugin system.

Public API:
- AlphaModel: Protocol that all alpha models must implement
- register_alpha: Decorator to register an alpha class
- create_alpha: Factory function to instantiate alphas by name
- list_alphas: Discover all registered alphas
- get_alpha_class: Get alpha class by name without instantiating

Importing this package auto-registers all built-in alphas.
"""

from core.alpha.protocol import AlphaModel
from core.alpha.registry import (
    register_alpha,
    create_alpha,
    list_alphas,
    get_alpha_class,
)

# Import built-in alphas to trigger auto-registration
import core.alpha.ar4  # noqa: F401
import core.alpha.macd  # noqa: F401

from core.alpha.ar4 import AR4Alpha, AR4Config
from core.alpha.macd import MACDAlpha, MACDConfig

__all__ = [
    "AlphaModel",
    "register_alpha",
    "create_alpha",
    "list_alphas",
    "get_alpha_class",
    "AR4Alpha",
    "AR4Config",
    "MACDAlpha",
    "MACDConfig",
]
