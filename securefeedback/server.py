"""Console entrypoint: prepare the database, then start listening."""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from flask import Flask

from securefeedback import create_app
from securefeedback.core.startup import StartupError, initialize_database

logger = logging.getLogger(__name__)


def start_server(app: Flask, run: Optional[Callable[..., None]] = None) -> bool:
    """
    Initialize the database and run the app.

    Outside production a database failure aborts startup with StartupError;
    in production the listener starts anyway. Returns whether the database
    was ready.
    """
    run = run or app.run
    ready = initialize_database(app)
    port = app.config["PORT"]
    host = os.environ.get("HOST", "0.0.0.0")
    if ready:
        logger.info("SecureFeedback listening on port %s (%s)", port, app.config.get("ENV"))
    else:
        logger.warning("SecureFeedback listening on port %s without database connection", port)
    run(host=host, port=port)  # nosec B104
    return ready


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    app = create_app()
    try:
        start_server(app)
    except StartupError:
        logger.error("Server not started: database unavailable")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
