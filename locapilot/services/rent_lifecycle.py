"""
Stato derivato delle scadenze di affitto.

Funzioni pure su snapshot letti dai repository più una data di riferimento:
nessuna scrittura sullo store. I canoni "virtuali" sono proiezioni in memoria
della prossima scadenza di un contratto attivo, rigenerate a ogni chiamata.

Le date non interpretabili vengono escluse dal calcolo, mai sollevate.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

UNKNOWN_PROPERTY_TITLE = "Immobile sconosciuto"

# Stato salvato -> stato mostrato nel calendario
_DISPLAY_STATUS = {"late": "overdue", "partial": "pending"}


@dataclass(frozen=True)
class VirtualRent:
    """Scadenza non persistita, sintetizzata da un contratto attivo."""

    id: str
    lease_id: int
    due_date: date
    amount: Decimal
    charges: Decimal
    status: str = "pending"
    is_virtual: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "leaseId": self.lease_id,
            "dueDate": self.due_date.isoformat(),
            "amount": float(self.amount),
            "charges": float(self.charges),
            "status": self.status,
            "isVirtual": True,
        }


@dataclass(frozen=True)
class PersistedRent:
    """Scadenza salvata nello store (l'unica variante modificabile)."""

    rent: Any
    is_virtual = False

    @property
    def id(self) -> int:
        return self.rent.id

    @property
    def lease_id(self) -> int:
        return self.rent.lease_id

    @property
    def due_date(self) -> Optional[date]:
        return coerce_date(self.rent.due_date)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.rent.to_dict(), "isVirtual": False}


RentEntry = Union[PersistedRent, VirtualRent]


@dataclass(frozen=True)
class CalendarEntry:
    id: str
    rent_id: Optional[int]
    lease_id: int
    date: date
    title: str
    status: str
    amount: Decimal
    rent_amount: Decimal
    charges: Decimal
    is_virtual: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rentId": self.rent_id,
            "leaseId": self.lease_id,
            "date": self.date.isoformat(),
            "title": self.title,
            "status": self.status,
            "amount": float(self.amount),
            "rentAmount": float(self.rent_amount),
            "charges": float(self.charges),
            "isVirtual": self.is_virtual,
        }


# ---------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------
def coerce_date(value: Any) -> Optional[date]:
    """Data di calendario da date/datetime/stringa ISO; None se non interpretabile."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def _clamped_date(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, monthrange(year, month)[1]))


def display_status(stored_status: str) -> str:
    """Stato da mostrare: 'late' -> 'overdue', 'partial' -> 'pending'."""
    return _DISPLAY_STATUS.get(stored_status, stored_status)


# ---------------------------------------------------------------------
# Calcoli
# ---------------------------------------------------------------------
def compute_overdue_ids(rents: Iterable[Any], now: Any = None) -> List[int]:
    """
    Id delle scadenze non pagate con data strettamente precedente al giorno di ``now``.

    L'orario è ignorato. Il chiamante riscrive 'late' tramite update: questa
    funzione non modifica nulla.
    """
    today = coerce_date(now) if now is not None else date.today()
    if today is None:
        return []

    overdue = []
    for rent in rents:
        if rent.status == "paid":
            continue
        due = coerce_date(rent.due_date)
        if due is None or not isinstance(rent.id, int):
            continue
        if due < today:
            overdue.append(rent.id)
    return overdue


def next_due_date(payment_day: Any, reference_date: date) -> date:
    """
    Prossima scadenza in data ``reference_date`` o successiva.

    Se il giorno di pagamento del mese corrente è già passato si passa al mese
    successivo; nei mesi più corti il giorno viene limitato all'ultimo del mese.
    """
    day = payment_day if isinstance(payment_day, int) and 1 <= payment_day <= 31 else 1
    candidate = _clamped_date(reference_date.year, reference_date.month, day)
    if candidate < reference_date:
        year = reference_date.year + (reference_date.month == 12)
        month = reference_date.month % 12 + 1
        candidate = _clamped_date(year, month, day)
    return candidate


def virtual_rent_id(lease_id: int, due_date: date) -> str:
    return f"virtual-{lease_id}-{due_date.year}-{due_date.month:02d}"


def generate_virtual_rents(
    leases: Iterable[Any],
    existing_rents: Sequence[Any],
    reference_date: Any = None,
) -> List[VirtualRent]:
    """
    Una scadenza virtuale per ogni contratto attivo senza canone salvato nel mese
    della prossima scadenza. L'esistenza è decisa solo scorrendo ``existing_rents``.
    """
    reference = coerce_date(reference_date) if reference_date is not None else date.today()
    if reference is None:
        return []

    occupied = set()
    for rent in existing_rents:
        due = coerce_date(rent.due_date)
        if due is not None:
            occupied.add((rent.lease_id, due.year, due.month))

    virtual = []
    for lease in leases:
        if lease.status != "active" or lease.id is None:
            continue
        due = next_due_date(lease.payment_day, reference)
        if (lease.id, due.year, due.month) in occupied:
            continue
        virtual.append(
            VirtualRent(
                id=virtual_rent_id(lease.id, due),
                lease_id=lease.id,
                due_date=due,
                amount=_money(lease.rent),
                charges=_money(lease.charges),
            )
        )
    return virtual


def list_rent_entries(
    rents: Sequence[Any],
    leases: Iterable[Any],
    reference_date: Any = None,
) -> List[RentEntry]:
    """Scadenze salvate seguite da quelle virtuali, come varianti distinte."""
    entries: List[RentEntry] = [PersistedRent(rent) for rent in rents]
    entries.extend(generate_virtual_rents(leases, rents, reference_date))
    return entries


def build_calendar_projection(
    rents: Sequence[Any],
    leases: Sequence[Any],
    properties: Iterable[Any],
    reference_date: Any = None,
) -> List[CalendarEntry]:
    """Voci di calendario (salvate + virtuali) ordinate per data."""
    property_names = {p.id: p.name for p in properties}
    lease_properties = {lease.id: lease.property_id for lease in leases}

    def title_for(lease_id: int) -> str:
        return property_names.get(lease_properties.get(lease_id)) or UNKNOWN_PROPERTY_TITLE

    entries: List[CalendarEntry] = []
    for rent in rents:
        due = coerce_date(rent.due_date)
        if due is None:
            continue
        amount = _money(rent.amount)
        charges = _money(rent.charges)
        entries.append(
            CalendarEntry(
                id=f"{rent.id}-{rent.lease_id}-{due.isoformat()}",
                rent_id=rent.id,
                lease_id=rent.lease_id,
                date=due,
                title=title_for(rent.lease_id),
                status=display_status(rent.status),
                amount=amount + charges,
                rent_amount=amount,
                charges=charges,
                is_virtual=False,
            )
        )

    for virtual in generate_virtual_rents(leases, rents, reference_date):
        entries.append(
            CalendarEntry(
                id=virtual.id,
                rent_id=None,
                lease_id=virtual.lease_id,
                date=virtual.due_date,
                title=title_for(virtual.lease_id),
                status="pending",
                amount=virtual.amount + virtual.charges,
                rent_amount=virtual.amount,
                charges=virtual.charges,
                is_virtual=True,
            )
        )

    entries.sort(key=lambda entry: (entry.date, entry.lease_id, entry.is_virtual))
    return entries


def build_paid_rent_updates(
    rent: Any,
    paid_date: Any = None,
    paid_amount: Any = None,
) -> Dict[str, Any]:
    """Campi da scrivere per segnare una scadenza come pagata."""
    if paid_amount is None:
        paid_amount = _money(rent.amount) + _money(rent.charges)
    return {
        "status": "paid",
        "paid_date": coerce_date(paid_date) or date.today(),
        "paid_amount": paid_amount,
    }
