"""
API JSON per i locatari (Tenant).

Endpoint principali:

POST   /api/tenants/<tenant_id>/status
    Body: {"status": "validated|refused|former|...", "reason": "...",
    "actorId": 1, "documentIds": [3, 4]}

GET    /api/tenants/<tenant_id>/audits
GET    /api/tenants/<tenant_id>/documents
POST   /api/tenants/<tenant_id>/documents
    Upload multipart (campo "file") oppure JSON {"name", "data": data URL, "notes"}.
DELETE /api/tenants/<tenant_id>/documents/<tenant_document_id>
"""

from __future__ import annotations

from flask import Blueprint, request
from werkzeug.utils import secure_filename

from locapilot.api.responses import json_body, ok, serialize, serialize_many
from locapilot.errors import ValidationError
from locapilot.services import tenant_service
from locapilot.services.document_codec import decode_data_url

api_tenants_bp = Blueprint("api_tenants", __name__)


@api_tenants_bp.route("/<int:tenant_id>/status", methods=["POST"])
def api_change_tenant_status(tenant_id: int):
    data = json_body()
    target = data.get("status")
    if not target:
        raise ValidationError("status mancante.")
    tenant = tenant_service.change_tenant_status(
        tenant_id,
        target,
        actor_id=data.get("actorId"),
        reason=data.get("reason"),
        document_ids=data.get("documentIds"),
    )
    return ok(serialize(tenant), message="Stato aggiornato.")


@api_tenants_bp.route("/<int:tenant_id>/audits", methods=["GET"])
def api_tenant_audits(tenant_id: int):
    audits = tenant_service.list_tenant_audits(tenant_id, request.args.get("action"))
    return ok(serialize_many(audits))


@api_tenants_bp.route("/<int:tenant_id>/documents", methods=["GET"])
def api_tenant_documents(tenant_id: int):
    return ok(serialize_many(tenant_service.list_tenant_documents(tenant_id)))


@api_tenants_bp.route("/<int:tenant_id>/documents", methods=["POST"])
def api_add_tenant_document(tenant_id: int):
    upload = request.files.get("file")
    if upload is not None:
        name = secure_filename(upload.filename or "") or "documento"
        content = upload.read()
        mime_type = upload.mimetype
        notes = request.form.get("notes")
    else:
        data = json_body()
        decoded = decode_data_url(data.get("data"))
        if decoded is None:
            raise ValidationError("Contenuto non valido: atteso un data URL base64.")
        mime_type, content = decoded
        name = data.get("name") or "documento"
        notes = data.get("notes")

    tenant_document = tenant_service.add_tenant_document(
        tenant_id, name, content, mime_type=mime_type, notes=notes
    )
    return ok(serialize(tenant_document), message="Allegato salvato.", status=201)


@api_tenants_bp.route("/<int:tenant_id>/documents/<int:tenant_document_id>", methods=["DELETE"])
def api_remove_tenant_document(tenant_id: int, tenant_document_id: int):
    tenant_service.remove_tenant_document(tenant_document_id, tenant_id=tenant_id)
    return ok(message="Allegato cancellato.")
