"""
Repository specifico per Communication.
"""
from typing import List

from locapilot.models import Communication
from locapilot.models.communication import COMMUNICATION_DIRECTIONS, COMMUNICATION_TYPES
from locapilot.repositories.base import SqlAlchemyRepository


class CommunicationRepository(SqlAlchemyRepository[Communication]):
    choices = {"type": COMMUNICATION_TYPES, "direction": COMMUNICATION_DIRECTIONS}

    def __init__(self, session):
        super().__init__(session, Communication)

    def list_for_entity(self, entity_type: str, entity_id: int) -> List[Communication]:
        return (
            self.session.query(Communication)
            .filter_by(related_entity_type=entity_type, related_entity_id=entity_id)
            .order_by(Communication.date.desc())
            .all()
        )
