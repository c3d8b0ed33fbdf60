"""
CRUD generico per collezione (properties, tenants, leases, ...).

Le collezioni con regole proprie (contratti, locatari, scadenze, documenti)
passano dai rispettivi servizi; le altre vanno direttamente al repository.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping

from locapilot.services import document_service, lease_service, rent_service, tenant_service
from locapilot.services.unit_of_work import ENTITY_REPOSITORIES, UnitOfWork

_CREATE: Dict[str, Callable[..., Any]] = {
    "leases": lease_service.create_lease,
    "tenants": tenant_service.create_tenant,
    "rents": rent_service.create_rent,
    "documents": document_service.create_document,
}

_UPDATE: Dict[str, Callable[..., Any]] = {
    "leases": lease_service.update_lease,
    "tenants": tenant_service.update_tenant,
    "rents": rent_service.update_rent,
    "documents": document_service.update_document,
}

_DELETE: Dict[str, Callable[..., Any]] = {
    "leases": lease_service.delete_lease,
    "rents": rent_service.delete_rent,
    "documents": document_service.delete_document,
}


def entity_kinds() -> List[str]:
    return list(ENTITY_REPOSITORIES)


def list_entities(kind: str) -> List[Any]:
    with UnitOfWork() as uow:
        return uow.repository(kind).list_all()


def get_entity(kind: str, entity_id: Any) -> Any:
    with UnitOfWork() as uow:
        repo = uow.repository(kind)
        if kind == "rents":
            return rent_service.get_rent(entity_id)
        return repo.get_or_raise(entity_id)


def create_entity(kind: str, data: Mapping[str, Any]) -> Any:
    with UnitOfWork() as uow:
        repo = uow.repository(kind)
        if kind in _CREATE:
            return _CREATE[kind](data)
        entity = repo.create(data)
        uow.commit()
        return entity


def update_entity(kind: str, entity_id: Any, partial: Mapping[str, Any]) -> Any:
    with UnitOfWork() as uow:
        repo = uow.repository(kind)
        if kind in _UPDATE:
            return _UPDATE[kind](entity_id, partial)
        entity = repo.update(entity_id, partial)
        uow.commit()
        return entity


def delete_entity(kind: str, entity_id: Any) -> None:
    with UnitOfWork() as uow:
        repo = uow.repository(kind)
        if kind in _DELETE:
            _DELETE[kind](entity_id)
            return
        repo.delete(entity_id)
        uow.commit()
