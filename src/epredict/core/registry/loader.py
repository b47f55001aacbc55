"""Engine catalog loader — reads engine URIs from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from epredict.core.errors import ConfigurationError
from epredict.core.registry.models import CatalogEntry

logger = logging.getLogger(__name__)

# Catalog shipped with the package, used unless settings point elsewhere.
DEFAULT_CATALOG_PATH = (
    Path(__file__).resolve().parent.parent.parent / "domains" / "risk" / "engines" / "catalog.yaml"
)


def load_engine_catalog(path: str | Path | None = None) -> dict[str, CatalogEntry]:
    """Parse the engine catalog into entries keyed by engine name.

    Raises:
        ConfigurationError: If the file is missing, malformed, or lists an
            engine twice.
    """
    path = Path(path) if path else DEFAULT_CATALOG_PATH
    if not path.is_file():
        raise ConfigurationError(f"Engine catalog not found: {path}")

    with open(path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    catalog: dict[str, CatalogEntry] = {}
    for item in data.get("engines", []):
        try:
            entry = CatalogEntry(
                name=item["name"],
                uri=item["uri"],
                description=str(item.get("description", "")).strip(),
            )
        except (KeyError, TypeError) as exc:
            raise ConfigurationError(f"Malformed engine entry in {path}: {item!r}") from exc
        if entry.name in catalog:
            raise ConfigurationError(f"Duplicate engine in catalog: {entry.name!r}")
        catalog[entry.name] = entry

    logger.info("Loaded %d engine catalog entries from %s", len(catalog), path)
    return catalog
