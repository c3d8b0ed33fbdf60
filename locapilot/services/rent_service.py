"""
Servizi per le scadenze di affitto (Rent).

Operazioni che scrivono sullo store, costruite sopra le funzioni pure di
``rent_lifecycle``. Le scadenze virtuali non hanno id di storage: update e
delete le rifiutano finché non vengono materializzate.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from locapilot.errors import ValidationError
from locapilot.models import Rent
from locapilot.models.base import parse_date
from locapilot.services import rent_lifecycle
from locapilot.services.logging import log_structured_event
from locapilot.services.rent_lifecycle import CalendarEntry, PersistedRent, RentEntry, VirtualRent
from locapilot.services.unit_of_work import UnitOfWork

VIRTUAL_PREFIX = "virtual-"


def _persisted_id(rent_id: Any) -> int:
    if isinstance(rent_id, str):
        if rent_id.startswith(VIRTUAL_PREFIX):
            raise ValidationError(
                f"La scadenza {rent_id} è virtuale: va materializzata prima di modificarla"
            )
        if rent_id.isdigit():
            return int(rent_id)
    if isinstance(rent_id, bool) or not isinstance(rent_id, int):
        raise ValidationError(f"Id scadenza non valido: {rent_id!r}")
    return rent_id


# ---------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------
def list_rents(lease_id: Optional[int] = None) -> List[Rent]:
    with UnitOfWork() as uow:
        if lease_id is not None:
            return uow.rents.list_by_lease(lease_id)
        return uow.rents.list_all_ordered()


def get_rent(rent_id: Any) -> Rent:
    with UnitOfWork() as uow:
        return uow.rents.get_or_raise(_persisted_id(rent_id))


def create_rent(data: Mapping[str, Any]) -> Rent:
    with UnitOfWork() as uow:
        rent = uow.rents.create(data)
        uow.commit()
        return rent


def update_rent(rent_id: Any, partial: Mapping[str, Any]) -> Rent:
    """
    Aggiorna una scadenza salvata.

    Il passaggio a 'paid' avviene solo tramite ``mark_rent_paid``; una
    scadenza pagata non torna a un altro stato e i suoi dati di pagamento
    non sono più modificabili.
    """
    if not isinstance(partial, Mapping):
        raise ValidationError("I dati della scadenza devono essere un oggetto")
    values = Rent.values_from_dict(partial, strict=True)
    new_status = values.get("status")

    with UnitOfWork() as uow:
        rent = uow.rents.get_or_raise(_persisted_id(rent_id))
        if rent.status == "paid":
            if new_status is not None and new_status != "paid":
                raise ValidationError(f"La scadenza {rent.id} è già pagata: stato non modificabile")
            if "paid_date" in values or "paid_amount" in values:
                raise ValidationError(f"La scadenza {rent.id} è già pagata: pagamento non modificabile")
        elif new_status == "paid":
            raise ValidationError(
                f"La scadenza {rent.id} si segna pagata solo con l'operazione di pagamento"
            )
        rent = uow.rents.update(rent.id, partial)
        uow.commit()
        return rent


def delete_rent(rent_id: Any) -> None:
    with UnitOfWork() as uow:
        uow.rents.delete(_persisted_id(rent_id))
        uow.commit()


# ---------------------------------------------------------------------
# Ciclo di vita
# ---------------------------------------------------------------------
def mark_rent_paid(
    rent_id: Any,
    paid_date: Any = None,
    paid_amount: Any = None,
    payment_method: Optional[str] = None,
) -> Rent:
    """Segna la scadenza come pagata (default: importo = canone + spese, data = oggi)."""
    with UnitOfWork() as uow:
        rent = uow.rents.get_or_raise(_persisted_id(rent_id))
        if rent.status == "paid":
            raise ValidationError(f"La scadenza {rent.id} risulta già pagata")
        updates = rent_lifecycle.build_paid_rent_updates(rent, paid_date, paid_amount)
        if payment_method is not None:
            updates["payment_method"] = payment_method
        rent = uow.rents.update(rent.id, updates)
        uow.commit()

        log_structured_event(
            "rent_paid",
            message="Scadenza segnata come pagata",
            rent_id=rent.id,
            lease_id=rent.lease_id,
            paid_amount=str(rent.paid_amount),
        )
        return rent


def list_overdue_rents(now: Any = None) -> List[Rent]:
    """Scadenze scadute alla data indicata, senza scrivere nulla."""
    with UnitOfWork() as uow:
        rents = uow.rents.list_all_ordered()
        overdue = set(rent_lifecycle.compute_overdue_ids(rents, now))
        return [rent for rent in rents if rent.id in overdue]


def refresh_overdue_rents(now: Any = None) -> List[int]:
    """
    Riscrive lo stato 'late' sulle scadenze risultate scadute.

    Ritorna gli id effettivamente aggiornati.
    """
    with UnitOfWork() as uow:
        rents = uow.rents.list_all_ordered()
        by_id = {rent.id: rent for rent in rents}
        updated = []
        for rent_id in rent_lifecycle.compute_overdue_ids(rents, now):
            if by_id[rent_id].status != "late":
                uow.rents.update(rent_id, {"status": "late"})
                updated.append(rent_id)
        uow.commit()

    if updated:
        log_structured_event(
            "rents_marked_late",
            message="Scadenze segnate come in ritardo",
            rent_ids=updated,
        )
    return updated


def list_rent_entries(reference_date: Any = None) -> List[RentEntry]:
    """Scadenze salvate e virtuali come varianti distinte."""
    with UnitOfWork() as uow:
        rents = uow.rents.list_all_ordered()
        return rent_lifecycle.list_rent_entries(rents, uow.leases.list_active(), reference_date)


def list_virtual_rents(reference_date: Any = None) -> List[VirtualRent]:
    with UnitOfWork() as uow:
        return rent_lifecycle.generate_virtual_rents(
            uow.leases.list_active(),
            uow.rents.list_all_ordered(),
            reference_date,
        )


def get_calendar(reference_date: Any = None) -> List[CalendarEntry]:
    with UnitOfWork() as uow:
        return rent_lifecycle.build_calendar_projection(
            uow.rents.list_all_ordered(),
            uow.leases.list_all(),
            uow.properties.list_all(),
            reference_date,
        )


def _virtual_fields(descriptor: Union[VirtualRent, PersistedRent, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(descriptor, VirtualRent):
        return {
            "lease_id": descriptor.lease_id,
            "due_date": descriptor.due_date,
            "amount": descriptor.amount,
            "charges": descriptor.charges,
        }

    if isinstance(descriptor, Mapping):
        rent_id = descriptor.get("id")
        is_virtual = descriptor.get("isVirtual", descriptor.get("is_virtual"))
        if is_virtual is True or (isinstance(rent_id, str) and rent_id.startswith(VIRTUAL_PREFIX)):
            due_date = descriptor.get("dueDate", descriptor.get("due_date"))
            try:
                due_date = parse_date(due_date)
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"Data di scadenza non valida: {due_date!r}") from exc
            return {
                "lease_id": descriptor.get("leaseId", descriptor.get("lease_id")),
                "due_date": due_date,
                "amount": descriptor.get("amount", 0),
                "charges": descriptor.get("charges", 0),
            }

    raise ValidationError("Solo una scadenza virtuale può essere materializzata")


def materialize_virtual_rent(descriptor: Union[VirtualRent, Mapping[str, Any]]) -> Rent:
    """
    Trasforma una scadenza virtuale in una scadenza salvata.

    Da questo momento il mese del contratto non genera più scadenze virtuali.
    """
    fields = _virtual_fields(descriptor)
    due: date = fields["due_date"]

    with UnitOfWork() as uow:
        if uow.rents.find_in_month(fields["lease_id"], due.year, due.month) is not None:
            raise ValidationError(
                f"Esiste già una scadenza per il contratto {fields['lease_id']} "
                f"nel mese {due.year}-{due.month:02d}"
            )
        rent = uow.rents.create({**fields, "status": "pending"})
        uow.commit()

        log_structured_event(
            "rent_materialized",
            message="Scadenza virtuale materializzata",
            rent_id=rent.id,
            lease_id=rent.lease_id,
            due_date=due.isoformat(),
        )
        return rent
