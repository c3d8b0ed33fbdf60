"""
Modello TenantAudit (tabella: tenant_audits).

Registro append-only delle transizioni di stato di un locatario.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

AUDIT_ACTIONS = ("validated", "refused", "created", "updated")


class TenantAudit(SerializerMixin, db.Model):
    __tablename__ = "tenant_audits"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    tenant_id = db.Column(db.Integer, nullable=False)
    action = db.Column(db.String(16), nullable=False)
    actor_id = db.Column(db.Integer, nullable=True)
    reason = db.Column(db.Text, nullable=True)

    # Id Document usati come evidenza
    document_ids = db.Column(db.JSON, nullable=False, default=list)

    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<TenantAudit id={self.id} tenant_id={self.tenant_id} action={self.action!r}>"
