"""Name -> class lookup for alpha models.

Alpha modules register themselves on import; ``PipelineConfig.alpha_model``
(or ``QUANT_ALPHA_MODEL``) then picks one by name:

    @register_alpha("ar4")
    class AR4Alpha:
        ...

    alpha = create_alpha("ar4", config=AR4Config(fit_window=200))
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type] = {}


def register_alpha(name: str):
    """Class decorator making an alpha selectable as ``alpha_model: <name>``.

    Raises:
        ValueError: If two alphas claim the same name, which would make
            the configured model ambiguous.
    """

    def decorator(cls):
        if name in _REGISTRY:
            raise ValueError(
                f"Alpha '{name}' is already registered by {_REGISTRY[name].__name__}"
            )
        _REGISTRY[name] = cls
        logger.debug("Registered alpha: %s -> %s", name, cls.__name__)
        return cls

    return decorator


def get_alpha_class(name: str) -> type:
    """Resolve a configured alpha name to its class.

    Raises:
        KeyError: For a name no alpha module registered; the message lists
            the valid names so a config typo is easy to spot.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        available = ", ".join(sorted(_REGISTRY.keys())) or "(none)"
        raise KeyError(f"Unknown alpha '{name}'. Available: {available}")
    return cls


def create_alpha(name: str, **kwargs: Any):
    """Fresh alpha instance with empty state; ``kwargs`` go to its constructor."""
    return get_alpha_class(name)(**kwargs)


def list_alphas() -> list[str]:
    """Names accepted by ``alpha_model``, sorted."""
    return sorted(_REGISTRY.keys())
