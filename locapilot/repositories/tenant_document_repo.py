"""
Repository specifico per TenantDocument.
"""
from typing import List

from locapilot.models import TenantDocument
from locapilot.repositories.base import SqlAlchemyRepository


class TenantDocumentRepository(SqlAlchemyRepository[TenantDocument]):
    def __init__(self, session):
        super().__init__(session, TenantDocument)

    def list_by_tenant(self, tenant_id: int) -> List[TenantDocument]:
        """Allegati di un locatario, dal più vecchio al più recente."""
        return (
            self.session.query(TenantDocument)
            .filter_by(tenant_id=tenant_id)
            .order_by(TenantDocument.uploaded_at.asc(), TenantDocument.id.asc())
            .all()
        )
