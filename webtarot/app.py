"""Flask application factory."""
import logging
from typing import Any, Dict, Optional

from flask import Flask, g, jsonify, make_response
from marshmallow import ValidationError

from webtarot import __version__
from webtarot.i18n import FALLBACK_LOCALE, translate

logger = logging.getLogger(__name__)


def _locale() -> str:
    return g.get("locale", FALLBACK_LOCALE)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    from webtarot.config import get_config
    env = "testing" if config and config.get("TESTING") else None
    app.config.from_object(get_config(env)())
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize extensions
    from webtarot.extensions import db, limiter, socketio
    db.init_app(app)
    limiter.init_app(app)
    socketio.init_app(app, async_mode="threading", cors_allowed_origins="*")

    # Register models with SQLAlchemy metadata
    import webtarot.models.user  # noqa: F401
    import webtarot.models.reading  # noqa: F401

    # Initialize DI container
    from webtarot.container import Container
    container = Container()
    container.config.from_dict(dict(app.config))
    container.db_session.override(db.session)
    app.container = container

    @app.before_request
    def inject_db_session():
        """Inject db session into container for each request."""
        container.db_session.override(db.session)

    from webtarot.middleware.locale import init_locale
    init_locale(app)

    # Register blueprints
    from webtarot.routes.readings import readings_bp
    from webtarot.routes.interpretations import interpretations_bp
    from webtarot.routes.stats import stats_bp
    from webtarot.routes.users import users_bp
    app.register_blueprint(readings_bp)
    app.register_blueprint(interpretations_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(users_bp)

    # Register WebSocket handlers
    from webtarot.sockets.notifications import register_socket_handlers
    register_socket_handlers(socketio)

    # CLI
    from webtarot.cli.draw import draw_command
    app.cli.add_command(draw_command)

    # Health check endpoint
    @app.route("/api/v1/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "ok",
            "service": "webtarot-api",
            "version": __version__,
        }), 200

    # Error handlers
    from webtarot.errors import AppError

    @app.errorhandler(AppError)
    def app_error(error):
        """Render application errors in the request locale."""
        if error.status_code >= 500:
            logger.error(f"Request failed: {error.detail}")
        message = translate(error.message_key, _locale(), detail=error.detail or "")
        return jsonify({"error": message}), error.status_code

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Handle marshmallow errors that escaped a route."""
        message = translate("error.validate", _locale(), detail=str(error.messages))
        return jsonify({"error": message}), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"error": translate("error.not_found", _locale())}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return jsonify({"error": translate("error.method_not_allowed", _locale())}), 405

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        original = getattr(error, "original_exception", None)
        if original is not None:
            logger.error(f"Unhandled exception: {original!r}", exc_info=original)
        return jsonify({"error": translate("error.internal", _locale())}), 500

    @app.errorhandler(429)
    def ratelimit_handler(error):
        """Handle rate limit exceeded errors with JSON response."""
        response = make_response(jsonify({
            "error": translate("error.rate_limited", _locale()),
            "message": str(error.description)
        }), 429)
        response.headers["Retry-After"] = "60"
        return response

    return app
