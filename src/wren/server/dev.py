"""Server startup.

Starts a pounce ASGI server with the live wren App object. Pounce is
an optional dependency (``pip install wren[server]``); any ASGI server
can host the App instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")


def run_server(app: App, host: str, port: int) -> None:
    """Start a pounce server for *app* and block until it stops.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but wren has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Raises ``ConfigurationError`` if pounce is not installed.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        msg = (
            "App.run() requires the 'pounce' server. "
            "Install it with: pip install wren[server]"
        )
        raise ConfigurationError(msg) from None

    config = app.config
    server_config = ServerConfig(
        host=host,
        port=port,
        workers=config.workers,
        reload=config.debug,
        keep_alive_timeout=config.keep_alive_timeout,
        request_timeout=config.request_timeout,
    )
    logger.info("application started: listening on %s:%d", host, port)
    server = Server(server_config, app)
    server.run()
