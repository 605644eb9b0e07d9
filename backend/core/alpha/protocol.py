"""Alpha model protocol.

An alpha model consumes one FeatureVector per bar and may emit an
AlphaSignal. Models are stateful (they remember previous observations),
so an instance belongs to exactly one stream and one caller at a time.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.models.features import FeatureVector
from core.models.signal import AlphaSignal


@runtime_checkable
class AlphaModel(Protocol):
    """Protocol that all alpha models must implement."""

    @property
    def name(self) -> str:
        """Registry name, also used as the signal ID prefix."""
        ...

    @property
    def state(self) -> Any:
        """Immutable snapshot of the model's internal state."""
        ...

    def generate_signal(self, features: FeatureVector) -> AlphaSignal | None:
        """Consume the next feature vector and optionally emit a signal."""
        ...

    def reset(self) -> None:
        """Return to the initial (empty) state."""
        ...

    def restore(self, state: Any) -> None:
        """Replace the internal state with a previously taken snapshot."""
        ...
