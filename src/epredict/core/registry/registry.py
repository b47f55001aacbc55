"""Engine registry: an immutable index of the installed calculation engines."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from epredict.core.errors import ConfigurationError, EngineNotFoundError
from epredict.core.registry.models import CatalogEntry, EngineDescriptor, VersionedEngine

logger = logging.getLogger(__name__)


class EngineRegistry:
    """Read-only lookup of installed engines by the name they report.

    Built once at process start by ``build_registry`` and shared by every
    request; nothing can be added or removed afterwards, so concurrent
    readers need no locking.
    """

    def __init__(self, descriptors: Iterable[EngineDescriptor]) -> None:
        by_name: dict[str, EngineDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in by_name:
                raise ConfigurationError(f"Duplicate engine registered: {descriptor.name!r}")
            by_name[descriptor.name] = descriptor
        self._by_name: Mapping[str, EngineDescriptor] = MappingProxyType(by_name)

    def lookup(self, name: str) -> EngineDescriptor:
        """Exact-match lookup.

        Raises:
            EngineNotFoundError: If no installed engine has this name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise EngineNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def all(self) -> list[EngineDescriptor]:
        """Return all registered descriptors, in registration order."""
        return list(self._by_name.values())


def build_registry(
    engines: Iterable[VersionedEngine],
    catalog: Mapping[str, CatalogEntry],
) -> EngineRegistry:
    """Describe every installed engine and freeze the result.

    Name and version come from the engine itself; the URI comes from the
    catalog.

    Raises:
        ConfigurationError: If an engine has no catalog entry or two
            engines report the same name.
    """
    descriptors: list[EngineDescriptor] = []
    for engine in engines:
        entry = catalog.get(engine.name)
        if entry is None:
            raise ConfigurationError(f"Engine {engine.name!r} has no entry in the engine catalog")
        descriptor = EngineDescriptor(name=engine.name, version=engine.version(), uri=entry.uri)
        descriptors.append(descriptor)
        logger.info("Registered engine: %s (v%s)", descriptor.name, descriptor.version)

    return EngineRegistry(descriptors)
