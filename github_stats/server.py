"""Serve the API with uvicorn over plaintext HTTP or HTTPS."""

from __future__ import annotations

import logging
from typing import Any

import uvicorn

from github_stats.core.app_factory import create_app
from github_stats.core.config import ServerSettings, Settings, settings as default_settings
from github_stats.core.errors import ValidationAppError

logger = logging.getLogger(__name__)


def build_uvicorn_options(server_settings: ServerSettings) -> dict[str, Any]:
    """Translate server settings into ``uvicorn.Config`` keyword arguments.

    Raises:
        ValidationAppError: If HTTPS is requested without a certificate and key.
    """
    options: dict[str, Any] = {
        "host": server_settings.host,
        "port": server_settings.port,
        # configure_logging owns the root logger
        "log_config": None,
    }

    if server_settings.scheme == "https":
        if not server_settings.cert_file or not server_settings.key_file:
            raise ValidationAppError(
                code="tls_files_missing",
                message="HTTPS requires SERVER_CERT_FILE and SERVER_KEY_FILE",
            )
        options["ssl_certfile"] = server_settings.cert_file
        options["ssl_keyfile"] = server_settings.key_file

    return options


def run(app_settings: Settings | None = None) -> None:
    """Build the app and serve it until interrupted."""
    cfg = app_settings or default_settings
    options = build_uvicorn_options(cfg.server)
    app = create_app(cfg)

    logger.info(
        "server.starting",
        extra={
            "scheme": cfg.server.scheme,
            "host": cfg.server.host,
            "port": cfg.server.port,
            "path": cfg.server.path,
        },
    )
    uvicorn.Server(uvicorn.Config(app, **options)).run()


if __name__ == "__main__":
    run()
