"""
Repository specifico per Inventory (stati dei luoghi).
"""
from typing import Any, Dict, List, Optional

from locapilot.errors import ValidationError
from locapilot.models import Inventory, Lease
from locapilot.models.inventory import INVENTORY_TYPES
from locapilot.repositories.base import SqlAlchemyRepository


class InventoryRepository(SqlAlchemyRepository[Inventory]):
    choices = {"type": INVENTORY_TYPES}

    def __init__(self, session):
        super().__init__(session, Inventory)

    def list_by_lease(self, lease_id: int) -> List[Inventory]:
        return (
            self.session.query(Inventory)
            .filter_by(lease_id=lease_id)
            .order_by(Inventory.date.asc())
            .all()
        )

    def validate(self, values: Dict[str, Any], existing: Optional[Inventory]) -> None:
        super().validate(values, existing)
        if existing is None and values.get("date") is None:
            raise ValidationError("Data dello stato dei luoghi obbligatoria")
        if "lease_id" in values or existing is None:
            lease_id = values.get("lease_id")
            if lease_id is None or self.session.get(Lease, lease_id) is None:
                raise ValidationError(f"Contratto {lease_id} inesistente")
