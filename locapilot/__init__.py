"""
Pacchetto principale dell'applicazione Flask (data layer locale Locapilot).
"""

from flask import Flask, jsonify
from config import DevConfig
from .errors import NotFoundError, StorageError, ValidationError
from .extensions import db, init_extensions


def create_app(config_class=DevConfig) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    init_extensions(app)

    if app.config.get("AUTO_MIGRATE", True):
        _apply_migrations(app)

    _register_blueprints(app)
    _register_error_handlers(app)

    app.logger.info("Applicazione Flask inizializzata.")

    @app.route("/health")
    def healthcheck():
        return jsonify({"status": "ok"}), 200

    return app


def _apply_migrations(app: Flask) -> None:
    """Porta lo store all'ultima versione; in caso di errore l'app resta all'ultima buona."""
    from .schema import MigrationManager

    with app.app_context():
        try:
            MigrationManager(db.engine).apply_migrations()
        except StorageError as exc:
            app.logger.error(
                "Migrazione dello schema non completata, store all'ultima versione valida: %s",
                exc,
                extra={"component": "schema", "step": exc.step},
            )


def _register_blueprints(app: Flask) -> None:
    from .api import (
        api_entities_bp,
        api_leases_bp,
        api_documents_bp,
        api_rents_bp,
        api_schema_bp,
        api_settings_bp,
        api_tenants_bp,
        api_transfer_bp,
    )

    # Le rotte con segmenti statici hanno precedenza sul CRUD generico /api/<kind>/
    app.register_blueprint(api_rents_bp, url_prefix="/api/rents")
    app.register_blueprint(api_leases_bp, url_prefix="/api/leases")
    app.register_blueprint(api_tenants_bp, url_prefix="/api/tenants")
    app.register_blueprint(api_documents_bp, url_prefix="/api/documents")
    app.register_blueprint(api_settings_bp, url_prefix="/api/settings")
    app.register_blueprint(api_transfer_bp, url_prefix="/api/transfer")
    app.register_blueprint(api_schema_bp, url_prefix="/api/schema")
    app.register_blueprint(api_entities_bp, url_prefix="/api")


def _register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"success": False, "message": message, "payload": None}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return _error(str(exc), 400)

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc):
        return _error(str(exc), 404)

    @app.errorhandler(StorageError)
    def handle_storage_error(exc):
        app.logger.error("Errore dello store: %s", exc, extra={"table": exc.table, "step": exc.step})
        return _error(str(exc), 500)
