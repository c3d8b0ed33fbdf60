"""
Modello Communication (tabella: communications).

Storico degli scambi (email, telefonate, lettere...) legati a un'entità.
"""

from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow

COMMUNICATION_TYPES = ("email", "phone", "sms", "meeting", "letter")
COMMUNICATION_DIRECTIONS = ("inbound", "outbound")


class Communication(SerializerMixin, db.Model):
    __tablename__ = "communications"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    related_entity_type = db.Column(db.String(32), nullable=False)
    related_entity_id = db.Column(db.Integer, nullable=False)

    type = db.Column(db.String(16), nullable=False, default="email")
    direction = db.Column(db.String(16), nullable=False, default="outbound")
    subject = db.Column(db.String(255), nullable=True)
    content = db.Column(db.Text, nullable=False, default="")
    date = db.Column(db.DateTime, nullable=False, default=utcnow)

    # Id Document allegati
    attachments = db.Column(db.JSON, nullable=True, default=list)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Communication id={self.id} type={self.type!r}>"
