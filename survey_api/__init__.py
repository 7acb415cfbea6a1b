"""Survey API Flask application factory."""
import logging
from dataclasses import dataclass

from flask import Flask, jsonify, request
from flask_cors import CORS
from sqlalchemy.engine import make_url
from werkzeug.exceptions import HTTPException

from survey_api.auth import AdminCredentials, protect_prefix
from survey_api.limits import limiter
from survey_api.models import db
from survey_api.notifications import NotificationSettings
from survey_api.routes.admin import ADMIN_PREFIX, admin_bp
from survey_api.routes.surveys import surveys_bp

# helmet-style defaults for a JSON API
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


@dataclass(frozen=True)
class Settings:
    """Read-only values handed to the auth guard and the notifier."""

    admin: AdminCredentials
    notifications: NotificationSettings
    environment: str


def _configure_logging(app: Flask) -> None:
    """Single stream handler on the app logger; module loggers propagate to it."""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(name)-28s %(levelname)-8s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    app.logger.addHandler(handler)
    app.logger.setLevel(level)


def _load_settings(app: Flask) -> Settings:
    return Settings(
        admin=AdminCredentials(
            username=app.config.get("ADMIN_USER") or "",
            password=app.config.get("ADMIN_PASS") or "",
        ),
        notifications=NotificationSettings(
            service_id=app.config.get("EMAILJS_SERVICE_ID") or "",
            template_id=app.config.get("EMAILJS_TEMPLATE_ID") or "",
            user_id=app.config.get("EMAILJS_USER_ID") or "",
            api_url=app.config.get("EMAILJS_API_URL") or NotificationSettings.api_url,
            timeout=app.config.get("EMAILJS_TIMEOUT", 8),
        ),
        environment=app.config.get("APP_ENV") or "development",
    )


def create_app(config_object="survey_api.config.Config") -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    _configure_logging(app)

    settings = _load_settings(app)
    app.extensions["survey_api"] = settings

    if app.config.get("ENABLE_CORS"):
        origins = app.config.get("CORS_ORIGINS") or []
        if origins:
            CORS(app, origins=origins)
        else:
            CORS(app)

    db.init_app(app)
    with app.app_context():
        db.create_all()
    limiter.init_app(app)

    app.register_blueprint(surveys_bp, url_prefix="/api/surveys")
    protect_prefix(app, ADMIN_PREFIX)
    app.register_blueprint(admin_bp, url_prefix=ADMIN_PREFIX)

    @app.route("/health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "emailjs_enabled": settings.notifications.enabled,
                "environment": settings.environment,
            }
        )

    @app.after_request
    def security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.after_request
    def access_log(response):
        app.logger.info(
            '%s "%s %s" %s %s "%s"',
            request.remote_addr,
            request.method,
            request.full_path.rstrip("?"),
            response.status_code,
            response.content_length or "-",
            request.user_agent.string or "-",
        )
        return response

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(HTTPException)
    def http_error(e):
        response = e.get_response()
        response.data = jsonify({"error": e.description}).get_data()
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def unhandled_error(e):
        app.logger.exception("Unhandled error: %s", e)
        return jsonify({"error": "Server error"}), 500

    url = make_url(app.config["SQLALCHEMY_DATABASE_URI"])
    app.logger.info(
        "DB config: %s",
        {"driver": url.drivername, "host": url.host, "user": url.username, "database": url.database,
         "env": settings.environment},
    )
    app.logger.info("EmailJS configured: %s", settings.notifications.enabled)
    return app
