"""
Modello Lease (tabella: leases).

Contratto di locazione: collega un immobile (riferimento posseduto) a uno o
più locatari (lista ordinata di id, senza ownership). ``payment_day`` è il
giorno del mese (1-31) in cui cade la scadenza del canone.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

LEASE_STATUSES = ("pending", "active", "ended")


class Lease(SerializerMixin, db.Model):
    __tablename__ = "leases"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    property_id = db.Column(db.Integer, nullable=False)
    tenant_ids = db.Column(db.JSON, nullable=False, default=list)

    # Date contratto
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)

    # Dati economici
    rent = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    charges = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    deposit = db.Column(db.Numeric(15, 2), nullable=False, default=0)

    # Giorno di pagamento (1-31)
    payment_day = db.Column(db.Integer, nullable=False, default=1)

    status = db.Column(db.String(32), nullable=False, default="pending")

    # PDF del contratto (riferimento debole a documents)
    document_id = db.Column(db.Integer, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return (
            f"<Lease id={self.id} property_id={self.property_id} "
            f"status={self.status!r}>"
        )
