"""
Wedding Site: Flask API

Serves wedding details, the photo gallery, the song-request playlist, site
metadata and the day's schedule as JSON for the guest site and the static
snapshot builder.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Flask, Response, request
from werkzeug.exceptions import HTTPException

from blueprints import register_blueprints
from logging_config import init_logging
from storage import Storage, init_storage

logger = logging.getLogger(__name__)


def create_app(test_config: dict[str, Any] | None = None, storage: Storage | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    from config import get_config
    if test_config is not None:
        app.config.from_object(get_config("testing"))
        app.config.update(test_config)
    else:
        cfg = get_config()
        app.config.from_object(cfg)
        if hasattr(cfg, "validate"):
            cfg.validate()

    app.secret_key = app.config.get("SECRET_KEY", os.environ.get("SECRET_KEY", "dev-key-change-in-production"))

    # Saving and serving uploads must agree on one absolute directory.
    app.config["UPLOAD_FOLDER"] = os.path.join(app.root_path, app.config["UPLOAD_FOLDER"])

    # Structured logging
    init_logging(app)

    init_storage(app, storage)

    register_blueprints(app)

    # JSON errors for the API: {"message": ...}
    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        if not request.path.startswith("/api/"):
            return e
        return {"message": e.description or e.name}, e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return {"message": "Internal server error"}, 500

    # Security headers
    @app.after_request
    def set_security_headers(response: Response) -> Response:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if not app.debug and not app.testing:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=5000)
