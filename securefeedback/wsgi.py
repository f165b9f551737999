"""WSGI entrypoint for SecureFeedback.

Importing this module runs database startup; CLI commands should target
the factory instead: flask --app "securefeedback:create_app()" init-db
"""

from __future__ import annotations

import logging
import os

from securefeedback import create_app
from securefeedback.core.startup import initialize_database

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

app = create_app()
initialize_database(app)

if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    app.run(host=host, port=app.config["PORT"])  # nosec B104
