"""
API JSON per i documenti (Document).

Endpoint principali:

GET /api/documents/<document_id>/download
    Contenuto binario del documento come allegato.

GET /api/documents/<document_id>/related
    Entità collegata al documento (payload null se assente o cancellata).

GET /api/documents/search?type=lease
GET /api/documents/search?relatedType=property&relatedId=3
"""

from __future__ import annotations

from io import BytesIO

from flask import Blueprint, request, send_file
from werkzeug.utils import secure_filename

from locapilot.api.responses import ok, serialize, serialize_many
from locapilot.services import document_service

api_documents_bp = Blueprint("api_documents", __name__)


@api_documents_bp.route("/<int:document_id>/download", methods=["GET"])
def api_download_document(document_id: int):
    name, mime_type, content = document_service.get_document_content(document_id)
    safe_name = secure_filename(name) or f"documento-{document_id}"
    return send_file(
        BytesIO(content),
        mimetype=mime_type,
        as_attachment=True,
        download_name=safe_name,
    )


@api_documents_bp.route("/<int:document_id>/related", methods=["GET"])
def api_document_related(document_id: int):
    return ok(serialize(document_service.resolve_related_entity(document_id)))


@api_documents_bp.route("/search", methods=["GET"])
def api_search_documents():
    related_id = request.args.get("relatedId", type=int)
    documents = document_service.list_documents(
        doc_type=request.args.get("type"),
        related_type=request.args.get("relatedType"),
        related_id=related_id,
    )
    return ok(serialize_many(documents))
