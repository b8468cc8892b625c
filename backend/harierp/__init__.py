# backend/harierp/__init__.py
import logging

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException

from .config import Config
from .extensions import db, migrate
from .validation import ConflictError, NotFoundError, ValidationError


def _register_error_handlers(app: Flask) -> None:
    """
    Map service-layer exceptions to JSON responses.

    Every handler rolls the session back so a failed request never leaks
    pending changes into the next one.
    """
    from .services.auth_service import PasswordValidationError

    def _error(message: str, status_code: int):
        db.session.rollback()
        return jsonify({"error": message}), status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return _error(str(e), 400)

    @app.errorhandler(PasswordValidationError)
    def handle_password_error(e):
        return _error(str(e), 400)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return _error(str(e), 404)

    @app.errorhandler(ConflictError)
    def handle_conflict(e):
        return _error(str(e), 409)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return _error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error("Internal server error", 500)


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    if not (test_config and "MAX_CONTENT_LENGTH" in test_config):
        app.config["MAX_CONTENT_LENGTH"] = app.config["MAX_IMAGE_BYTES"] + app.config["UPLOAD_OVERHEAD_BYTES"]

    if not app.debug and not app.testing:
        app.logger.setLevel(logging.INFO)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.admin import admin_bp
    from .routes.products import products_bp
    from .routes.stock_logs import stock_logs_bp
    from .routes.raw_materials import raw_materials_bp
    from .routes.production import production_bp
    from .routes.intake import intake_bp
    from .routes.laboratory import laboratory_bp
    from .routes.sales import sales_bp
    from .routes.invoices import invoices_bp
    from .routes.ledger import ledger_bp
    from .routes.finance import finance_bp
    from .routes.purchases import purchases_bp
    from .routes.activity import activity_bp
    from .routes.uploads import uploads_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(stock_logs_bp)
    app.register_blueprint(raw_materials_bp)
    app.register_blueprint(production_bp)
    app.register_blueprint(intake_bp)
    app.register_blueprint(laboratory_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(ledger_bp)
    app.register_blueprint(finance_bp)
    app.register_blueprint(purchases_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(uploads_bp)

    _register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
