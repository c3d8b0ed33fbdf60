"""
Modello Document (tabella: documents).

Allegato binario (PDF, foto, documento d'identità...). L'associazione
``related_entity_type`` / ``related_entity_id`` è un riferimento debole:
nessuna cascata alla cancellazione dell'entità collegata, e nessuna
validazione in scrittura.
"""

from enum import Enum

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

DOCUMENT_TYPES = (
    "lease",
    "receipt",
    "inventory",
    "id",
    "payslip",
    "invoice",
    "insurance",
    "photo",
    "other",
)


class RelatedEntityKind(str, Enum):
    """Tipi di entità a cui un documento può essere collegato."""

    PROPERTY = "property"
    TENANT = "tenant"
    LEASE = "lease"
    RENT = "rent"
    APPLICANT = "applicant"
    INVENTORY = "inventory"


class Document(SerializerMixin, db.Model):
    __tablename__ = "documents"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(32), nullable=False, default="other")

    # Associazione polimorfica (riferimento debole)
    related_entity_type = db.Column(db.String(32), nullable=True)
    related_entity_id = db.Column(db.Integer, nullable=True)

    mime_type = db.Column(db.String(128), nullable=False, default="application/octet-stream")
    size = db.Column(db.Integer, nullable=False, default=0)

    # Contenuto del file, blob opaco
    data = db.Column(db.LargeBinary, nullable=True)

    description = db.Column(db.Text, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def related_kind(self):
        """Tipo di entità collegata come ``RelatedEntityKind`` (None se assente o sconosciuto)."""
        if not self.related_entity_type:
            return None
        try:
            return RelatedEntityKind(self.related_entity_type)
        except ValueError:
            return None

    def __repr__(self) -> str:
        return f"<Document id={self.id} name={self.name!r} type={self.type!r}>"
