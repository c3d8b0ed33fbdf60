"""
Modello Property (tabella: properties).

Rappresenta un bene in gestione (appartamento, casa, box...). Lo stato passa
da 'vacant' a 'occupied' quando un contratto che lo riferisce diventa attivo.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

PROPERTY_TYPES = ("apartment", "house", "studio", "commercial", "parking", "other")
PROPERTY_STATUSES = ("vacant", "occupied", "maintenance")


class Property(SerializerMixin, db.Model):
    __tablename__ = "properties"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(255), nullable=False, default="")
    postal_code = db.Column(db.String(16), nullable=True)
    town = db.Column(db.String(128), nullable=True)
    type = db.Column(db.String(32), nullable=False, default="apartment")

    surface = db.Column(db.Float, nullable=False, default=0)  # m²
    rooms = db.Column(db.Integer, nullable=False, default=0)
    bedrooms = db.Column(db.Integer, nullable=True)
    bathrooms = db.Column(db.Integer, nullable=True)

    # Dati economici di riferimento
    rent = db.Column(db.Numeric(15, 2), nullable=False, default=0)
    charges = db.Column(db.Numeric(15, 2), nullable=True)
    deposit = db.Column(db.Numeric(15, 2), nullable=True)

    # Testo annuncio (rich text)
    annonce = db.Column(db.Text, nullable=True)
    description = db.Column(db.Text, nullable=True)
    features = db.Column(db.JSON, nullable=True)

    # Lista ordinata di id Document (riferimento debole)
    photos = db.Column(db.JSON, nullable=True, default=list)

    status = db.Column(db.String(32), nullable=False, default="vacant")

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Property id={self.id} name={self.name!r} status={self.status!r}>"
