"""
Servizi per i contratti di locazione (Lease).

Un contratto attivo rende occupato il suo immobile; alla chiusura l'immobile
torna libero se nessun altro contratto attivo lo riferisce. Contratto e
immobile vengono scritti nella stessa transazione.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from locapilot.errors import ValidationError
from locapilot.models import Lease
from locapilot.models.base import parse_date, utcnow
from locapilot.services.logging import log_structured_event
from locapilot.services.unit_of_work import UnitOfWork


def _sync_property_status(uow: UnitOfWork, property_id: int) -> None:
    """Occupato se esiste almeno un contratto attivo sull'immobile, altrimenti libero."""
    prop = uow.properties.get_by_id(property_id)
    if prop is None or prop.status == "maintenance":
        return
    occupied = any(lease.status == "active" for lease in uow.leases.list_by_property(property_id))
    target = "occupied" if occupied else "vacant"
    if prop.status != target:
        uow.properties.update(property_id, {"status": target})


def list_leases(status: Optional[str] = None) -> List[Lease]:
    with UnitOfWork() as uow:
        if status:
            return uow.leases.list_by_status(status)
        return uow.leases.list_all()


def get_lease(lease_id: int) -> Lease:
    with UnitOfWork() as uow:
        return uow.leases.get_or_raise(lease_id)


def create_lease(data: Mapping[str, Any]) -> Lease:
    with UnitOfWork() as uow:
        lease = uow.leases.create(data)
        _sync_property_status(uow, lease.property_id)
        uow.commit()
        log_structured_event(
            "lease_created",
            message="Contratto creato",
            lease_id=lease.id,
            property_id=lease.property_id,
            status=lease.status,
        )
        return lease


def update_lease(lease_id: int, partial: Mapping[str, Any]) -> Lease:
    with UnitOfWork() as uow:
        previous_property = uow.leases.get_or_raise(lease_id).property_id
        lease = uow.leases.update(lease_id, partial)
        _sync_property_status(uow, lease.property_id)
        if previous_property != lease.property_id:
            _sync_property_status(uow, previous_property)
        uow.commit()
        return lease


def activate_lease(lease_id: int) -> Lease:
    return update_lease(lease_id, {"status": "active"})


def terminate_lease(lease_id: int, end_date: Any = None) -> Lease:
    """Chiude il contratto alla data indicata (default oggi) e libera l'immobile."""
    try:
        end = parse_date(end_date) if end_date is not None else utcnow().date()
    except ValueError as exc:
        raise ValidationError(f"Data di fine non valida: {end_date!r}") from exc

    with UnitOfWork() as uow:
        lease = uow.leases.get_or_raise(lease_id)
        if lease.start_date and end < lease.start_date:
            raise ValidationError("La data di fine precede l'inizio del contratto")
        lease = uow.leases.update(lease_id, {"status": "ended", "end_date": end})
        _sync_property_status(uow, lease.property_id)
        uow.commit()

        log_structured_event(
            "lease_terminated",
            message="Contratto chiuso",
            lease_id=lease.id,
            property_id=lease.property_id,
            end_date=end.isoformat(),
        )
        return lease


def delete_lease(lease_id: int) -> None:
    with UnitOfWork() as uow:
        property_id = uow.leases.get_or_raise(lease_id).property_id
        uow.leases.delete(lease_id)
        _sync_property_status(uow, property_id)
        uow.commit()
