"""MCP resources for engine discovery."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

if TYPE_CHECKING:
    from epredict.core.registry.registry import EngineRegistry


def register_engine_resources(mcp: FastMCP, registry: EngineRegistry) -> None:
    """Register engine catalog resources on the MCP server."""

    @mcp.resource("engines://catalog")
    def engine_catalog_resource() -> str:
        """Discover the installed risk engines and their URIs."""
        descriptors = registry.all()
        return json.dumps(
            {
                "engine_count": len(descriptors),
                "engines": [d.to_dict() for d in descriptors],
            },
            indent=2,
        )
