"""
Servizi per la regolarizzazione annuale delle spese (ChargesAdjustment).
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from locapilot.errors import NotFoundError, ValidationError
from locapilot.models import ChargesAdjustment
from locapilot.services.logging import log_structured_event
from locapilot.services.rent_lifecycle import coerce_date
from locapilot.services.unit_of_work import UnitOfWork


def _pop_key(values: Dict[str, Any], camel: str, snake: str) -> Any:
    camel_value = values.pop(camel, None)
    snake_value = values.pop(snake, None)
    return camel_value if camel_value is not None else snake_value


def _as_int(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{label} non valido: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{label} non valido: {value!r}") from exc


def upsert_charges_adjustment(row: Mapping[str, Any]) -> ChargesAdjustment:
    """
    Crea o aggiorna la riga (leaseId, year) contenuta in ``row``.

    I campi scalari presenti sostituiscono quelli salvati, ``customCharges``
    viene fuso per etichetta. Il contratto non viene verificato.
    """
    if not isinstance(row, Mapping):
        raise ValidationError("Regolarizzazione spese non valida: atteso un dizionario")
    fields = dict(row)
    lease_id = _as_int(_pop_key(fields, "leaseId", "lease_id"), "Contratto")
    year = _as_int(fields.pop("year", None), "Anno")

    with UnitOfWork() as uow:
        adjustment = uow.charges_adjustments.upsert(lease_id, year, fields)
        uow.commit()

        log_structured_event(
            "charges_adjustment_saved",
            message="Regolarizzazione spese salvata",
            lease_id=lease_id,
            year=year,
            custom_labels=sorted((adjustment.custom_charges or {}).keys()),
        )
        return adjustment


def list_charges_adjustments(lease_id: int) -> List[ChargesAdjustment]:
    with UnitOfWork() as uow:
        return uow.charges_adjustments.list_by_lease(lease_id)


def get_charges_adjustment(lease_id: int, year: int) -> ChargesAdjustment:
    with UnitOfWork() as uow:
        adjustment = uow.charges_adjustments.get_for_year(lease_id, year)
        if adjustment is None:
            raise NotFoundError("ChargesAdjustment", f"{lease_id}/{year}")
        return adjustment


def compute_year_summary(lease: Any, rents: Iterable[Any], year: int) -> Dict[str, Any]:
    """
    Totali dell'anno calcolati dalle scadenze pagate del contratto.

    Serve a precompilare un upsert: nulla viene salvato.
    """
    count = 0
    total = Decimal("0")
    provisions = Decimal("0")
    for rent in rents:
        if rent.lease_id != lease.id or rent.status != "paid":
            continue
        due = coerce_date(rent.due_date)
        if due is None or due.year != year:
            continue
        amount = Decimal(str(rent.amount or 0))
        charges = Decimal(str(rent.charges or 0))
        paid = rent.paid_amount if rent.paid_amount is not None else amount + charges
        count += 1
        total += Decimal(str(paid))
        provisions += charges

    return {
        "lease_id": lease.id,
        "year": year,
        "monthly_rent": Decimal(str(lease.rent or 0)),
        "charges_provision_paid": provisions,
        "rents_paid_count": count,
        "rents_paid_total": total,
    }


def prefill_charges_adjustment(lease_id: int, year: int) -> Dict[str, Any]:
    """Riepilogo annuale letto dallo store per un contratto esistente."""
    with UnitOfWork() as uow:
        lease = uow.leases.get_or_raise(lease_id)
        return compute_year_summary(lease, uow.rents.list_by_lease(lease_id), year)
