"""
Modello Tenant (tabella: tenants).

Locatario o candidato. Le transizioni di stato passano dal servizio
tenant_service, che scrive anche la riga di audit corrispondente.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

TENANT_STATUSES = ("candidate", "active", "candidature-refused", "former")


class Tenant(SerializerMixin, db.Model):
    __tablename__ = "tenants"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    civility = db.Column(db.String(8), nullable=True)  # 'mr' / 'mme'
    first_name = db.Column(db.String(128), nullable=False)
    last_name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(255), nullable=False, default="")
    phone = db.Column(db.String(64), nullable=False, default="")
    birth_date = db.Column(db.Date, nullable=True)
    current_address = db.Column(db.String(255), nullable=True)
    occupation = db.Column(db.String(128), nullable=True)
    employer = db.Column(db.String(128), nullable=True)
    income = db.Column(db.Numeric(15, 2), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(32), nullable=False, default="candidate")

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Tenant id={self.id} name={self.full_name!r} status={self.status!r}>"
