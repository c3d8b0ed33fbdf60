"""
Modello ChargesAdjustment (tabella: charges_adjustments).

Riepilogo annuale per la regolarizzazione delle spese di un contratto.
Al massimo una riga per (lease_id, year), garantito dall'upsert del
repository. ``custom_charges`` mappa etichette libere -> importo.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow


class ChargesAdjustment(SerializerMixin, db.Model):
    __tablename__ = "charges_adjustments"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    lease_id = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    monthly_rent = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    annual_charges = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    charges_provision_paid = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    rents_paid_count = db.Column(db.Integer, nullable=False, default=0)
    rents_paid_total = db.Column(db.Numeric(15, 2), nullable=False, default=0)

    custom_charges = db.Column(db.JSON, nullable=False, default=dict)

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return (
            f"<ChargesAdjustment id={self.id} lease_id={self.lease_id} "
            f"year={self.year}>"
        )
