"""Flask application factory."""

import logging

from flask import Flask, jsonify

from vid2blog.config import Settings, get_settings
from vid2blog.web.routes import api_bp
from vid2blog.web.stream import StreamRunner

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or get_settings()

    app = Flask(__name__)
    app.config["settings"] = settings
    app.config["stream_runner"] = StreamRunner(max_workers=settings.max_concurrent_runs)
    app.json.sort_keys = False

    app.register_blueprint(api_bp)

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def internal_error(_e):
        return jsonify({"error": "Internal server error. Please try again."}), 500

    logger.info(
        "vid2blog app created (pipeline base URL %s, %d concurrent runs)",
        settings.base_url, settings.max_concurrent_runs,
    )
    return app
