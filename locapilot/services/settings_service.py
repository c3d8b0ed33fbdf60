"""
Servizi per la gestione delle impostazioni applicative.

Le impostazioni sono salvate nella tabella ``settings`` (univoca su key) e
quindi viaggiano con il database, non con la configurazione dell'app.
"""
from typing import Any, Dict

from locapilot.services.unit_of_work import UnitOfWork


def get_setting(key: str, default: Any = None) -> Any:
    with UnitOfWork() as uow:
        return uow.settings.get_value(key, default)


def set_setting(key: str, value: Any) -> None:
    with UnitOfWork() as uow:
        uow.settings.save_value(key, value)
        uow.commit()


def list_settings() -> Dict[str, Any]:
    with UnitOfWork() as uow:
        return {setting.key: setting.value for setting in uow.settings.list_all()}
