"""
Repository specifico per Rent.
Il contratto riferito deve esistere al momento della scrittura.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from locapilot.errors import ValidationError
from locapilot.models import Lease, Rent
from locapilot.models.rent import PAYMENT_METHODS, RENT_STATUSES
from locapilot.repositories.base import SqlAlchemyRepository


class RentRepository(SqlAlchemyRepository[Rent]):
    choices = {"status": RENT_STATUSES}

    def __init__(self, session):
        super().__init__(session, Rent)

    def list_by_lease(self, lease_id: int) -> List[Rent]:
        """Restituisce le scadenze di un contratto, in ordine di data."""
        return (
            self.session.query(Rent)
            .filter_by(lease_id=lease_id)
            .order_by(Rent.due_date.asc())
            .all()
        )

    def list_all_ordered(self) -> List[Rent]:
        return self.session.query(Rent).order_by(Rent.due_date.asc(), Rent.id.asc()).all()

    def list_between(self, date_from: date, date_to: date) -> List[Rent]:
        return (
            self.session.query(Rent)
            .filter(Rent.due_date >= date_from, Rent.due_date <= date_to)
            .order_by(Rent.due_date.asc())
            .all()
        )

    def find_in_month(self, lease_id: int, year: int, month: int) -> Optional[Rent]:
        """Scadenza già presente per il contratto nel mese indicato (se esiste)."""
        first = date(year, month, 1)
        last = date(year + (month == 12), month % 12 + 1, 1)
        return (
            self.session.query(Rent)
            .filter(Rent.lease_id == lease_id, Rent.due_date >= first, Rent.due_date < last)
            .first()
        )

    def validate(self, values: Dict[str, Any], existing: Optional[Rent]) -> None:
        super().validate(values, existing)

        if values.get("payment_method") is not None and values["payment_method"] not in PAYMENT_METHODS:
            raise ValidationError(f"Metodo di pagamento non ammesso: {values['payment_method']!r}")

        if existing is None and values.get("due_date") is None:
            raise ValidationError("Data di scadenza obbligatoria")

        if "lease_id" in values or existing is None:
            lease_id = values.get("lease_id")
            if lease_id is None or self.session.get(Lease, lease_id) is None:
                raise ValidationError(f"Contratto {lease_id} inesistente")
