"""Endeavour Predict MCP server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery (fastmcp.json points here)
"""

from __future__ import annotations

import logging
from typing import Iterable

from fastmcp import FastMCP

from epredict.core.config.settings import get_settings
from epredict.core.registry.loader import load_engine_catalog
from epredict.core.registry.registry import build_registry
from epredict.domains.risk.connectors import CalculationEngine
from epredict.domains.risk.connectors.mock_engines import get_mock_engines
from epredict.domains.risk.domain_logic.prediction import PredictionService
from epredict.domains.risk.resources.engines import register_engine_resources
from epredict.domains.risk.tools.prediction_tools import register_prediction_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "Endeavour Predict"


def create_app(
    *,
    engines_override: Iterable[CalculationEngine] | None = None,
) -> FastMCP:
    """Create and configure the Endeavour Predict MCP server.

    This is the main application factory. It:
    1. Loads the engine catalog
    2. Picks the installed calculation engines (mock engines if none are given)
    3. Builds the engine registry and the prediction service
    4. Registers all tools and resources
    """
    settings = get_settings()

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Clinical risk prediction gateway. Accepts one patient record, "
            "runs it through the requested risk engines (QRisk3, QDiabetes, "
            "QFracture, X05) and returns every engine's scores, data quality "
            "notes and calculation status in a single envelope."
        ),
    )

    # --- Engines ---
    catalog = load_engine_catalog(settings.engine_catalog_path or None)

    if engines_override is not None:
        engines = list(engines_override)
    else:
        engines = get_mock_engines()
        logger.warning(
            "No calculation engines installed; serving placeholder scores from mock engines"
        )

    registry = build_registry(engines, catalog)
    service = PredictionService(registry, engines, settings)
    logger.info("Engine registry built with %d engines", len(registry))

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": settings.service_version,
            "engines_loaded": len(registry),
            "engines": registry.names(),
            "failed_engine_policy": settings.failed_engine_policy,
        }

    register_prediction_tools(server, service)
    logger.info("Prediction tools registered")

    # --- Register resources ---
    register_engine_resources(server, registry)

    return server


# Module-level instance for FastMCP discovery (fastmcp.json: "server": "...app.py:mcp").
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
