"""SecureFeedback application factory and bootstrap."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from flask import Flask, request, send_from_directory

from securefeedback.config import config_by_name, current_env_name
from securefeedback.core.db.pool import PoolManager
from securefeedback.extensions import init_extensions, limiter


def create_app(
    config_name: Optional[str] = None,
    pool_manager: Optional[PoolManager] = None,
) -> Flask:
    """Create and configure the SecureFeedback Flask application."""
    env_name = (config_name or current_env_name()).lower()
    static_root = Path(__file__).parent / "static"

    app = Flask(
        __name__,
        static_folder=str(static_root),
        static_url_path="",
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    app.json.ensure_ascii = False

    init_extensions(app, pool_manager)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_response_headers(app)

    @app.get("/")
    @limiter.exempt
    def index():
        return send_from_directory(static_root, "index.html")

    @app.get("/health")
    @limiter.exempt
    def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}, 200

    from securefeedback.scripts.init_db import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from securefeedback.domains.registrants.controllers.registrant_api import (
        registrant_api_bp,
    )

    app.register_blueprint(registrant_api_bp, url_prefix="/api/users")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"success": False, "message": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"success": False, "message": str(exc)}, 500
        return {"success": False, "message": "Error interno del servidor"}, 500


def _register_response_headers(app: Flask) -> None:
    """Security headers, CORS and static caching on every response."""

    @app.after_request
    def _apply_headers(resp):
        for name, value in app.config.get("SECURITY_HEADERS", {}).items():
            resp.headers.setdefault(name, value)
        origin = app.config.get("CORS_ALLOW_ORIGIN")
        if origin:
            resp.headers.setdefault("Access-Control-Allow-Origin", origin)
            resp.headers.setdefault("Access-Control-Allow-Headers", "Content-Type")
        if request.endpoint == "static" and resp.status_code == 200:
            max_age = int(app.config.get("STATIC_CACHE_MAX_AGE") or 3600)
            resp.headers.setdefault("Cache-Control", f"public, max-age={max_age}")
        return resp
