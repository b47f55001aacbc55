"""Calculation engine connectors: the boundary to the opaque risk engines."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CalculationEngine(Protocol):
    """Interface every installed risk engine is wrapped to.

    The gateway never looks inside ``compute``: it hands over the engine's
    own input shape and normalizes whatever raw result comes back.
    """

    @property
    def name(self) -> str:
        """Engine name, matched exactly against the registry."""
        ...

    def version(self) -> str:
        """Version string reported by the engine build."""
        ...

    def compute(self, engine_input: Any) -> Any:
        """Score one engine-specific input and return the raw result."""
        ...
