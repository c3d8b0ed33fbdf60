"""
API JSON generiche per collezione.

Endpoint:

GET    /api/<kind>/               elenco
POST   /api/<kind>/               creazione
GET    /api/<kind>/<id>           dettaglio
PUT    /api/<kind>/<id>           aggiornamento parziale (anche PATCH)
DELETE /api/<kind>/<id>           cancellazione

<kind> è una tra properties, tenants, leases, rents, documents, inventories,
communications.
"""

from __future__ import annotations

from flask import Blueprint

from locapilot.api.responses import json_body, ok, parse_entity_id, serialize, serialize_many
from locapilot.services import entity_service

api_entities_bp = Blueprint("api_entities", __name__)


@api_entities_bp.route("/<kind>/", methods=["GET"])
def api_list_entities(kind: str):
    return ok(serialize_many(entity_service.list_entities(kind)))


@api_entities_bp.route("/<kind>/", methods=["POST"])
def api_create_entity(kind: str):
    entity = entity_service.create_entity(kind, json_body())
    return ok(serialize(entity), message="Creato.", status=201)


@api_entities_bp.route("/<kind>/<entity_id>", methods=["GET"])
def api_get_entity(kind: str, entity_id: str):
    return ok(serialize(entity_service.get_entity(kind, parse_entity_id(entity_id))))


@api_entities_bp.route("/<kind>/<entity_id>", methods=["PUT", "PATCH"])
def api_update_entity(kind: str, entity_id: str):
    entity = entity_service.update_entity(kind, parse_entity_id(entity_id), json_body())
    return ok(serialize(entity), message="Aggiornato.")


@api_entities_bp.route("/<kind>/<entity_id>", methods=["DELETE"])
def api_delete_entity(kind: str, entity_id: str):
    entity_service.delete_entity(kind, parse_entity_id(entity_id))
    return ok(message="Cancellato.")
