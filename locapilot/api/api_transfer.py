"""
API JSON per export, import e svuotamento dei dati.

GET  /api/transfer/export   file JSON scaricabile
POST /api/transfer/import   upload multipart (campo "file") o body JSON
POST /api/transfer/clear    svuota le tabelle di business
"""

from __future__ import annotations

from flask import Blueprint, Response, request

from locapilot.api.responses import ok
from locapilot.models.base import utcnow
from locapilot.services import transfer_service

api_transfer_bp = Blueprint("api_transfer", __name__)


@api_transfer_bp.route("/export", methods=["GET"])
def api_export():
    file_name = f"locapilot-export-{utcnow():%Y%m%d-%H%M%S}.json"
    return Response(
        transfer_service.export_json(),
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename={file_name}"},
    )


@api_transfer_bp.route("/import", methods=["POST"])
def api_import():
    upload = request.files.get("file")
    data = upload.read() if upload is not None else request.get_data()
    counts = transfer_service.import_snapshot(data)
    return ok(counts, message="Import completato.")


@api_transfer_bp.route("/clear", methods=["POST"])
def api_clear():
    deleted = transfer_service.clear_all()
    return ok(deleted, message="Dati cancellati.")
