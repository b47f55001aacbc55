"""Run the prediction gateway over Streamable HTTP: ``python -m epredict.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from epredict.core.config.settings import Settings, get_settings
from epredict.core.errors import ConfigurationError
from epredict.core.server.app import SERVER_NAME, create_app

logger = logging.getLogger(__name__)


def _log_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"EP_LOG_LEVEL {name!r} is not a logging level")
    return level


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def check_bind_address(settings: Settings) -> None:
    """Refuse a public bind unless explicitly allowed.

    The tools take patient records and have no auth layer of their own.
    """
    if settings.ep_allow_insecure_bind or _is_loopback_host(settings.ep_host):
        return
    raise RuntimeError(
        f"Refusing to serve patient data on non-loopback host {settings.ep_host!r} "
        "without an auth layer. Set EP_ALLOW_INSECURE_BIND=true to override (unsafe)."
    )


def run() -> None:
    settings = get_settings()
    logging.basicConfig(level=_log_level(settings.ep_log_level))
    check_bind_address(settings)

    mcp = create_app()
    logger.info(
        "%s %s listening on %s:%d (catalog: %s, failed engines: %s)",
        SERVER_NAME,
        settings.service_version,
        settings.ep_host,
        settings.ep_port,
        settings.engine_catalog_path or "packaged",
        settings.failed_engine_policy,
    )
    mcp.run(transport="streamable-http", host=settings.ep_host, port=settings.ep_port)


if __name__ == "__main__":
    run()
