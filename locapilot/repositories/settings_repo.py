"""
Repository specifico per le impostazioni (tabella settings, univoca su key).
"""
from typing import Any, Dict, Optional

from locapilot.errors import ValidationError
from locapilot.models import AppSetting
from locapilot.models.base import utcnow
from locapilot.repositories.base import SqlAlchemyRepository


class SettingsRepository(SqlAlchemyRepository[AppSetting]):
    def __init__(self, session):
        super().__init__(session, AppSetting)

    def get_by_key(self, key: str) -> Optional[AppSetting]:
        if not key:
            return None
        return self.session.query(AppSetting).filter_by(key=key).first()

    def get_value(self, key: str, default: Any = None) -> Any:
        setting = self.get_by_key(key)
        return setting.value if setting is not None else default

    def save_value(self, key: str, value: Any) -> AppSetting:
        """Upsert per chiave."""
        setting = self.get_by_key(key)
        if setting is None:
            return self.create({"key": key, "value": value})
        setting.value = value
        setting.updated_at = utcnow()
        self.session.flush()
        return setting

    def validate(self, values: Dict[str, Any], existing: Optional[AppSetting]) -> None:
        super().validate(values, existing)
        if "key" not in values:
            if existing is None:
                raise ValidationError("Chiave impostazione obbligatoria")
            return
        key = values["key"]
        if not key or not isinstance(key, str):
            raise ValidationError("Chiave impostazione non valida")
        other = self.get_by_key(key)
        if other is not None and (existing is None or other.id != existing.id):
            raise ValidationError(f"Impostazione {key!r} già presente")
