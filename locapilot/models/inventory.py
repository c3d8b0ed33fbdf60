"""
Modello Inventory (tabella: inventories).

Stato dei luoghi in entrata ('checkin') o in uscita ('checkout') di un
contratto. Le foto sono id di Document (riferimenti deboli).
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

INVENTORY_TYPES = ("checkin", "checkout")


class Inventory(SerializerMixin, db.Model):
    __tablename__ = "inventories"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    lease_id = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(16), nullable=False, default="checkin")
    date = db.Column(db.Date, nullable=False)

    observations = db.Column(db.Text, nullable=True)
    photos = db.Column(db.JSON, nullable=True, default=list)
    rooms_data = db.Column(db.JSON, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    def __repr__(self) -> str:
        return f"<Inventory id={self.id} lease_id={self.lease_id} type={self.type!r}>"
