"""Exceptions shared across the gateway core."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when the process is wired up inconsistently.

    These are programming or deployment faults, never caller errors, and
    abort the request that hit them.
    """


class EngineNotFoundError(ConfigurationError, LookupError):
    """Raised when no installed engine reports the requested name."""

    def __init__(self, engine_name: str) -> None:
        super().__init__(f"No engine was found with the name: {engine_name}")
        self.engine_name = engine_name
