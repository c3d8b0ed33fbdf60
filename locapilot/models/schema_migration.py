"""
Modello SchemaMigration (tabella: schema_migrations).

Una riga per ogni versione di schema applicata con successo.
"""

from locapilot.extensions import db
from locapilot.models.base import utcnow


class SchemaMigration(db.Model):
    __tablename__ = "schema_migrations"

    version = db.Column(db.Integer, primary_key=True, autoincrement=False)
    description = db.Column(db.String(255), nullable=False)
    applied_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<SchemaMigration version={self.version}>"
