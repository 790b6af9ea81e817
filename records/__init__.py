import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .errors import RecordsError
from .extensions import db, migrate, login_manager, jwt_manager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("records").setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(RecordsError)
    def handle_records_error(e):
        if e.status_code >= 500:
            db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description, "code": e.name.upper().replace(" ", "_")}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        logger.error(f"Unhandled error: {e}", exc_info=True)
        return jsonify({"error": "Server error", "code": "INTERNAL_ERROR"}), 500


def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt_manager.init_app(app)
    login_manager.init_app(app)

    from . import models
    from .services.auth import load_student_from_request

    login_manager.request_loader(load_student_from_request)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "No token provided", "code": "UNAUTHORIZED"}), 401

    from .blueprints.auth import bp as auth_bp
    from .blueprints.student import bp as student_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(student_bp, url_prefix="/student")
    register_error_handlers(app)

    return app
