"""
API JSON per i contratti (Lease).

Endpoint principali:

POST /api/leases/<lease_id>/terminate
    Body: {"endDate": "YYYY-MM-DD"} (opzionale, default oggi)

GET  /api/leases/<lease_id>/charges-adjustments
POST /api/leases/<lease_id>/charges-adjustments
    Upsert della riga annuale. Body: {"year": 2025, "annualCharges": 600,
    "customCharges": {"Eau": 120}}

GET  /api/leases/<lease_id>/charges-adjustments/<year>/summary
    Totali dell'anno calcolati dalle scadenze pagate (per precompilare).
"""

from __future__ import annotations

from flask import Blueprint

from locapilot.api.responses import json_body, ok, serialize, serialize_many
from locapilot.models.base import to_json_value
from locapilot.services import charges_service, lease_service

api_leases_bp = Blueprint("api_leases", __name__)


@api_leases_bp.route("/<int:lease_id>/terminate", methods=["POST"])
def api_terminate_lease(lease_id: int):
    data = json_body()
    lease = lease_service.terminate_lease(lease_id, data.get("endDate"))
    return ok(serialize(lease), message="Contratto chiuso.")


@api_leases_bp.route("/<int:lease_id>/charges-adjustments", methods=["GET"])
def api_list_charges_adjustments(lease_id: int):
    return ok(serialize_many(charges_service.list_charges_adjustments(lease_id)))


@api_leases_bp.route("/<int:lease_id>/charges-adjustments", methods=["POST"])
def api_upsert_charges_adjustment(lease_id: int):
    row = {**json_body(), "leaseId": lease_id}
    row.pop("lease_id", None)
    adjustment = charges_service.upsert_charges_adjustment(row)
    return ok(serialize(adjustment), message="Regolarizzazione salvata.")


@api_leases_bp.route("/<int:lease_id>/charges-adjustments/<int:year>/summary", methods=["GET"])
def api_charges_year_summary(lease_id: int, year: int):
    summary = charges_service.prefill_charges_adjustment(lease_id, year)
    return ok({key: to_json_value(value) for key, value in summary.items()})
