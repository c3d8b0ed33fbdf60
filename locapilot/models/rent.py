"""
Modello Rent (tabella: rents).

Scadenza mensile di un contratto. Lo stato salvato è autorevole solo finché
persistito: 'late' è una cache riscritta da rent_service a partire dal calcolo
in rent_lifecycle, non una transizione definitiva.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

# es. "pending", "paid", "late", "partial"
RENT_STATUSES = ("pending", "paid", "late", "partial")
PAYMENT_METHODS = ("cash", "check", "transfer", "card")


class Rent(SerializerMixin, db.Model):
    __tablename__ = "rents"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    lease_id = db.Column(db.Integer, nullable=False)

    # Dati scadenza
    due_date = db.Column(db.Date, nullable=False)
    amount = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    charges = db.Column(db.Numeric(15, 2), nullable=False, default=0)

    # Dati pagamento effettivo
    paid_date = db.Column(db.Date, nullable=True)
    paid_amount = db.Column(db.Numeric(15, 2), nullable=True)
    payment_method = db.Column(db.String(16), nullable=True)

    status = db.Column(db.String(16), nullable=False, default="pending")

    # Quietanza generata (riferimento debole a documents)
    receipt_id = db.Column(db.Integer, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return (
            f"<Rent id={self.id} lease_id={self.lease_id} "
            f"due_date={self.due_date} status={self.status!r}>"
        )
