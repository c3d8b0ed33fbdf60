"""
API JSON per le scadenze di affitto (Rent).

Endpoint principali:

GET  /api/rents/entries?date=YYYY-MM-DD
    Scadenze salvate e virtuali (campo isVirtual).

GET  /api/rents/overdue?now=YYYY-MM-DD
    Scadenze scadute alla data indicata (nessuna scrittura).

POST /api/rents/refresh-overdue
    Riscrive lo stato 'late' sulle scadenze scadute.

GET  /api/rents/virtual?date=YYYY-MM-DD
GET  /api/rents/calendar?date=YYYY-MM-DD

POST /api/rents/<rent_id>/pay
    Body: {"paidDate": "YYYY-MM-DD", "paidAmount": 1250, "paymentMethod": "transfer"}

POST /api/rents/materialize
    Body: descrittore virtuale (come restituito da /virtual).
"""

from __future__ import annotations

from flask import Blueprint, request

from locapilot.api.responses import json_body, ok, serialize, serialize_many
from locapilot.services import rent_service

api_rents_bp = Blueprint("api_rents", __name__)


@api_rents_bp.route("/entries", methods=["GET"])
def api_rent_entries():
    entries = rent_service.list_rent_entries(request.args.get("date"))
    payload = [
        entry.to_dict() if entry.is_virtual else {**serialize(entry.rent), "isVirtual": False}
        for entry in entries
    ]
    return ok(payload)


@api_rents_bp.route("/overdue", methods=["GET"])
def api_overdue_rents():
    return ok(serialize_many(rent_service.list_overdue_rents(request.args.get("now"))))


@api_rents_bp.route("/refresh-overdue", methods=["POST"])
def api_refresh_overdue():
    data = json_body()
    updated = rent_service.refresh_overdue_rents(data.get("now"))
    return ok({"updatedIds": updated}, message=f"{len(updated)} scadenze segnate in ritardo.")


@api_rents_bp.route("/virtual", methods=["GET"])
def api_virtual_rents():
    virtual = rent_service.list_virtual_rents(request.args.get("date"))
    return ok([rent.to_dict() for rent in virtual])


@api_rents_bp.route("/calendar", methods=["GET"])
def api_rent_calendar():
    entries = rent_service.get_calendar(request.args.get("date"))
    return ok([entry.to_dict() for entry in entries])


@api_rents_bp.route("/<int:rent_id>/pay", methods=["POST"])
def api_mark_rent_paid(rent_id: int):
    data = json_body()
    rent = rent_service.mark_rent_paid(
        rent_id,
        paid_date=data.get("paidDate"),
        paid_amount=data.get("paidAmount"),
        payment_method=data.get("paymentMethod"),
    )
    return ok(serialize(rent), message="Pagamento registrato.")


@api_rents_bp.route("/materialize", methods=["POST"])
def api_materialize_rent():
    rent = rent_service.materialize_virtual_rent(json_body())
    return ok(serialize(rent), message="Scadenza creata.", status=201)
