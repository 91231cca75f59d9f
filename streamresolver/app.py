# streamresolver/app.py
import os
import logging
from typing import Optional

from flask import Flask, jsonify, request

from streamresolver.core.config import Config, config
from streamresolver.providers import ProviderRegistry, ScrapeOrchestrator, build_default_registry
from streamresolver.routes import api_bp


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure root logging from LOG_LEVEL (falls back to INFO on bad values)"""
    log_level_name = level_name or getattr(Config, "LOG_LEVEL", None) or os.environ.get("LOG_LEVEL", "INFO")
    log_level = getattr(logging, str(log_level_name).upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(config_name: Optional[str] = None, registry: Optional[ProviderRegistry] = None):
    """Application factory pattern."""
    app = Flask(__name__, instance_relative_config=False)

    # Load configuration
    config_name = config_name or os.environ.get("FLASK_CONFIG", "default")
    app.config.from_object(config.get(config_name, config["default"]))

    configure_logging(app.config.get("LOG_LEVEL"))

    # Provider catalog is built once here and never mutated afterwards
    app.registry = registry if registry is not None else build_default_registry()
    app.orchestrator = ScrapeOrchestrator(app.registry)
    app.logger.info(
        "Registered providers: %s", ", ".join(f"{p.id}({p.rank})" for p in app.registry)
    )

    # Initialize extensions
    from streamresolver.core.extensions import limiter
    limiter.init_app(app)

    # Register blueprints
    app.register_blueprint(api_bp, url_prefix='/api')

    # Error handlers
    @app.errorhandler(404)
    def page_not_found(e):
        """Handle 404 errors."""
        app.logger.warning(f"404 error: {request.url}")
        return jsonify(success=False, message="Not found"), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        """Handle 500 errors."""
        app.logger.error(f"500 error: {str(e)}")
        return jsonify(success=False, message="Internal server error"), 500

    @app.errorhandler(429)
    def ratelimit_handler(e):
        """Handle 429 errors (Rate Limit Exceeded)."""
        app.logger.warning(f"Rate limit exceeded: {request.url} - {request.remote_addr}")
        return jsonify(success=False, message="Too many requests. Please try again later."), 429

    return app


if __name__ == '__main__':
    create_app().run(debug=True)
