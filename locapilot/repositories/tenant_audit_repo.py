"""
Repository specifico per TenantAudit.

Il registro è append-only: update e delete non sono ammessi.
"""
from typing import Any, List, Mapping, Optional

from locapilot.errors import ValidationError
from locapilot.models import TenantAudit
from locapilot.models.base import utcnow
from locapilot.models.tenant_audit import AUDIT_ACTIONS
from locapilot.repositories.base import SqlAlchemyRepository


class TenantAuditRepository(SqlAlchemyRepository[TenantAudit]):
    choices = {"action": AUDIT_ACTIONS}

    def __init__(self, session):
        super().__init__(session, TenantAudit)

    def append(
        self,
        tenant_id: int,
        action: str,
        actor_id: Optional[int] = None,
        reason: Optional[str] = None,
        document_ids: Optional[List[int]] = None,
    ) -> TenantAudit:
        return self.create(
            {
                "tenant_id": tenant_id,
                "action": action,
                "actor_id": actor_id,
                "reason": reason,
                "document_ids": list(document_ids or []),
                "timestamp": utcnow(),
            }
        )

    def list_by_tenant(self, tenant_id: int, action: Optional[str] = None) -> List[TenantAudit]:
        query = self.session.query(TenantAudit).filter_by(tenant_id=tenant_id)
        if action is not None:
            query = query.filter_by(action=action)
        return query.order_by(TenantAudit.timestamp.asc(), TenantAudit.id.asc()).all()

    def update(self, id: int, partial: Mapping[str, Any]) -> TenantAudit:
        raise ValidationError("Le righe di audit non sono modificabili")

    def delete(self, id: int) -> None:
        raise ValidationError("Le righe di audit non sono cancellabili")
