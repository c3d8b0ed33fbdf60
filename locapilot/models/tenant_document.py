"""
Modello TenantDocument (tabella: tenant_documents).

Allegato di un locatario. Ogni riga ha un gemello nella tabella documents
(``document_id``), creato e cancellato nella stessa transazione.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow


class TenantDocument(SerializerMixin, db.Model):
    __tablename__ = "tenant_documents"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    tenant_id = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(128), nullable=False, default="application/octet-stream")
    size = db.Column(db.Integer, nullable=False, default=0)
    data = db.Column(db.LargeBinary, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    uploaded_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    document_id = db.Column(db.Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<TenantDocument id={self.id} tenant_id={self.tenant_id} name={self.name!r}>"
