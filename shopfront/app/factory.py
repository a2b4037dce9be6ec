from __future__ import annotations

import logging
from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from shopfront.app.config import Config
from shopfront.app.extensions import db, migrate, mail
from shopfront.app.common.auth import current_admin, current_user
from shopfront.app.common.errors import ApiError, DatabaseUnavailable
from shopfront.app.common.formatting import format_cents
from shopfront.app.common.headers import apply_response_headers
from shopfront.app.common.request_context import init_request_id, current_request_id
from shopfront.app.fallback import register_fallbacks
from shopfront.app.notifications import bp as notifications_bp
from shopfront.app.routes import register_routers
from shopfront.app.cli import cli_bp

log = logging.getLogger(__name__)

DB_POLICIES = ("fail-fast", "degraded")


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if not app.config.get("SECRET_KEY"):
        raise RuntimeError("SECRET_KEY (or SECRET_KEY_FILE) must be configured")

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    @app.before_request
    def _before_request():
        init_request_id()

    @app.after_request
    def _after_request(response):
        return apply_response_headers(response)

    @app.context_processor
    def inject_identities():
        return {"nav_user": current_user(), "nav_admin": current_admin()}

    app.add_template_filter(format_cents, "money")

    @app.get("/health")
    def health():
        return {"status": "ok", "database": app.extensions.get("db_available", False)}, 200

    app.register_blueprint(notifications_bp)
    register_routers(app)

    # CLI (flask seed, flask create-admin)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(current_request_id())), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        payload = {
            "error": {
                "code": "http_error",
                "message": err.description,
                "details": {"name": err.name},
                "request_id": current_request_id(),
            }
        }
        return jsonify(payload), err.code or 500

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        db.session.rollback()
        api_err = ApiError(500, "internal_error", "An unexpected error occurred")
        return jsonify(api_err.to_dict(current_request_id())), 500

    register_fallbacks(app)
    check_database(app)

    return app


def check_database(app: Flask) -> None:
    """Probe the database once and apply ``DB_STARTUP_POLICY``."""
    policy = app.config.get("DB_STARTUP_POLICY", "fail-fast")
    if policy not in DB_POLICIES:
        raise RuntimeError(f"DB_STARTUP_POLICY must be one of {DB_POLICIES}, got {policy!r}")

    with app.app_context():
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            log.error("Database connection failed: %s", exc)
            app.extensions["db_available"] = False
            if policy == "fail-fast":
                raise DatabaseUnavailable(str(exc)) from exc
            log.warning("Starting in degraded mode without a working database")
        else:
            app.extensions["db_available"] = True
            log.info("Database connected")
        finally:
            db.session.remove()
