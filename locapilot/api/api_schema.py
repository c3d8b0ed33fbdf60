"""
API JSON di diagnostica dello schema.

GET  /api/schema/history   versioni applicate e pendenti
GET  /api/schema/export    chiavi e indici delle tabelle
POST /api/schema/migrate   applica le versioni pendenti
"""

from __future__ import annotations

from flask import Blueprint

from locapilot.api.responses import ok
from locapilot.extensions import db
from locapilot.schema import MigrationManager

api_schema_bp = Blueprint("api_schema", __name__)


@api_schema_bp.route("/history", methods=["GET"])
def api_schema_history():
    return ok(MigrationManager(db.engine).history())


@api_schema_bp.route("/export", methods=["GET"])
def api_schema_export():
    return ok(MigrationManager(db.engine).export_schema())


@api_schema_bp.route("/migrate", methods=["POST"])
def api_schema_migrate():
    applied = MigrationManager(db.engine).apply_migrations()
    return ok({"applied": applied}, message=f"{len(applied)} migrazioni applicate.")
