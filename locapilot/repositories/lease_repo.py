"""
Repository specifico per Lease.

Prima di scrivere verifica i vincoli applicativi del contratto: immobile
esistente, locatari esistenti, giorno di pagamento 1-31, almeno un locatario
per un contratto attivo.
"""
from typing import Any, Dict, List, Optional

from locapilot.errors import ValidationError
from locapilot.models import Lease, Property
from locapilot.models.lease import LEASE_STATUSES
from locapilot.repositories.base import SqlAlchemyRepository
from locapilot.repositories.tenant_repo import TenantRepository


class LeaseRepository(SqlAlchemyRepository[Lease]):
    choices = {"status": LEASE_STATUSES}

    def __init__(self, session):
        super().__init__(session, Lease)

    def list_by_property(self, property_id: int) -> List[Lease]:
        return (
            self.session.query(Lease)
            .filter_by(property_id=property_id)
            .order_by(Lease.start_date.asc())
            .all()
        )

    def list_by_status(self, status: str) -> List[Lease]:
        return self.session.query(Lease).filter_by(status=status).order_by(Lease.id.asc()).all()

    def list_active(self) -> List[Lease]:
        return self.list_by_status("active")

    def validate(self, values: Dict[str, Any], existing: Optional[Lease]) -> None:
        super().validate(values, existing)

        payment_day = self._merged(values, existing, "payment_day")
        if payment_day is not None:
            if isinstance(payment_day, bool) or not isinstance(payment_day, int) or not 1 <= payment_day <= 31:
                raise ValidationError(f"Giorno di pagamento non valido: {payment_day!r} (atteso 1-31)")

        if existing is None and values.get("start_date") is None:
            raise ValidationError("Data di inizio contratto obbligatoria")

        if "property_id" in values or existing is None:
            property_id = values.get("property_id")
            if property_id is None or self.session.get(Property, property_id) is None:
                raise ValidationError(f"Immobile {property_id} inesistente")

        tenant_ids = self._merged(values, existing, "tenant_ids") or []
        if not isinstance(tenant_ids, list):
            raise ValidationError("tenant_ids deve essere una lista di id")
        if "tenant_ids" in values:
            missing = TenantRepository(self.session).missing_ids(tenant_ids)
            if missing:
                raise ValidationError(f"Locatari inesistenti: {missing}")

        status = self._merged(values, existing, "status") or "pending"
        if status == "active" and not tenant_ids:
            raise ValidationError("Un contratto attivo richiede almeno un locatario")
