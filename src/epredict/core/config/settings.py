"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Endeavour Predict gateway configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; there is no auth layer in front of the tools.
    ep_host: str = "127.0.0.1"
    ep_port: int = 8001
    ep_log_level: str = "info"
    ep_allow_insecure_bind: bool = False

    # Reported in every prediction envelope
    service_version: str = "0.1.0"

    # Engines
    # Empty means the catalog packaged with epredict.
    engine_catalog_path: str = ""
    # What to return for an engine that raised while scoring:
    #   omit           - leave it out of the envelope
    #   no_calculation - include it with NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED
    failed_engine_policy: Literal["omit", "no_calculation"] = "no_calculation"
    default_prediction_years: int = 10


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
