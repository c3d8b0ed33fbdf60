"""
Repository specifico per Tenant.
"""
from typing import Iterable, List, Optional

from locapilot.models import Tenant
from locapilot.models.tenant import TENANT_STATUSES
from locapilot.repositories.base import SqlAlchemyRepository


class TenantRepository(SqlAlchemyRepository[Tenant]):
    choices = {"status": TENANT_STATUSES}

    def __init__(self, session):
        super().__init__(session, Tenant)

    def get_by_email(self, email: str) -> Optional[Tenant]:
        """Cerca locatario per email esatta."""
        if not email:
            return None
        return self.session.query(Tenant).filter_by(email=email).first()

    def list_by_status(self, status: str) -> List[Tenant]:
        return (
            self.session.query(Tenant)
            .filter_by(status=status)
            .order_by(Tenant.last_name.asc(), Tenant.first_name.asc())
            .all()
        )

    def missing_ids(self, tenant_ids: Iterable[int]) -> List[int]:
        """Restituisce gli id richiesti che non esistono nella tabella."""
        wanted = list(dict.fromkeys(tenant_ids))
        if not wanted:
            return []
        found = {
            row_id
            for (row_id,) in self.session.query(Tenant.id).filter(Tenant.id.in_(wanted)).all()
        }
        return [tenant_id for tenant_id in wanted if tenant_id not in found]
