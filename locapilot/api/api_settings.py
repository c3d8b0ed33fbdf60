"""
API JSON per le impostazioni salvate nello store.

GET /api/settings/        tutte le impostazioni {key: value}
GET /api/settings/<key>   valore (null se assente)
PUT /api/settings/<key>   Body: {"value": ...}
"""

from __future__ import annotations

from flask import Blueprint

from locapilot.api.responses import json_body, ok
from locapilot.errors import ValidationError
from locapilot.services import settings_service

api_settings_bp = Blueprint("api_settings", __name__)


@api_settings_bp.route("/", methods=["GET"])
def api_list_settings():
    return ok(settings_service.list_settings())


@api_settings_bp.route("/<key>", methods=["GET"])
def api_get_setting(key: str):
    return ok({"key": key, "value": settings_service.get_setting(key)})


@api_settings_bp.route("/<key>", methods=["PUT"])
def api_set_setting(key: str):
    data = json_body()
    if "value" not in data:
        raise ValidationError("value mancante.")
    settings_service.set_setting(key, data["value"])
    return ok({"key": key, "value": data["value"]}, message="Impostazione salvata.")
