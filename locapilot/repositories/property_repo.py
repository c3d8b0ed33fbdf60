"""
Repository specifico per Property.
Eredita le funzioni base (add, get, list) da SqlAlchemyRepository.
"""
from typing import List

from locapilot.models import Property
from locapilot.models.property import PROPERTY_STATUSES, PROPERTY_TYPES
from locapilot.repositories.base import SqlAlchemyRepository


class PropertyRepository(SqlAlchemyRepository[Property]):
    choices = {"status": PROPERTY_STATUSES, "type": PROPERTY_TYPES}

    def __init__(self, session):
        super().__init__(session, Property)

    def list_by_status(self, status: str) -> List[Property]:
        return (
            self.session.query(Property)
            .filter_by(status=status)
            .order_by(Property.name.asc())
            .all()
        )

    def list_all_ordered(self) -> List[Property]:
        """Ritorna tutti gli immobili ordinati per nome."""
        return self.session.query(Property).order_by(Property.name.asc()).all()
