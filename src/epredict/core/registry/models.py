"""Data models for the engine registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class VersionedEngine(Protocol):
    """The part of a calculation engine the registry needs to describe it."""

    @property
    def name(self) -> str:
        """Name reported by the engine itself, e.g. ``"QRisk3"``."""
        ...

    def version(self) -> str:
        ...


@dataclass(frozen=True)
class CatalogEntry:
    """Static facts about an engine, read from the engine catalog file."""

    name: str
    uri: str
    description: str = ""


@dataclass(frozen=True)
class EngineDescriptor:
    """An installed engine: its name, its version, and its canonical URI."""

    name: str
    version: str
    uri: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version, "uri": self.uri}
