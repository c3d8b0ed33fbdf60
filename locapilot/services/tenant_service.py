"""
Servizi per i locatari (Tenant): stato della candidatura, registro di audit
e allegati.

Ogni cambio di stato scrive la riga di audit nella stessa transazione
dell'aggiornamento del locatario.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from locapilot.errors import NotFoundError, ValidationError
from locapilot.models import Tenant, TenantAudit, TenantDocument
from locapilot.models.base import utcnow
from locapilot.models.document import RelatedEntityKind
from locapilot.models.tenant import TENANT_STATUSES
from locapilot.services.document_codec import DEFAULT_MIME_TYPE
from locapilot.services.logging import log_structured_event
from locapilot.services.unit_of_work import UnitOfWork

# Azione richiesta -> (stato del locatario, azione di audit)
_DECISIONS = {
    "validated": ("active", "validated"),
    "refused": ("candidature-refused", "refused"),
}


def resolve_tenant_status_transition(target: str) -> Tuple[str, str]:
    """
    Traduce lo stato richiesto in (nuovo stato, azione di audit).

    'validated' e 'refused' sono decisioni sulla candidatura; ogni altro stato
    ammesso viene applicato così com'è e registrato come 'updated'.
    """
    if target in _DECISIONS:
        return _DECISIONS[target]
    if target in TENANT_STATUSES:
        return target, "updated"
    raise ValidationError(f"Stato locatario non ammesso: {target!r}")


def list_tenants(status: Optional[str] = None) -> List[Tenant]:
    with UnitOfWork() as uow:
        if status:
            return uow.tenants.list_by_status(status)
        return uow.tenants.list_all()


def create_tenant(data: Mapping[str, Any], actor_id: Optional[int] = None) -> Tenant:
    with UnitOfWork() as uow:
        tenant = uow.tenants.create(data)
        uow.tenant_audits.append(tenant.id, "created", actor_id=actor_id)
        uow.commit()
        log_structured_event("tenant_created", message="Locatario creato", tenant_id=tenant.id)
        return tenant


def update_tenant(
    tenant_id: int, partial: Mapping[str, Any], actor_id: Optional[int] = None
) -> Tenant:
    """
    Aggiorna i dati anagrafici; un eventuale ``status`` passa dalla stessa
    transizione di ``change_tenant_status`` e produce la riga di audit.
    """
    if not isinstance(partial, Mapping):
        raise ValidationError("I dati del locatario devono essere un oggetto")
    fields = dict(partial)
    target = fields.pop("status", None)
    transition = resolve_tenant_status_transition(target) if target is not None else None

    with UnitOfWork() as uow:
        if fields:
            tenant = uow.tenants.update(tenant_id, fields)
        else:
            tenant = uow.tenants.get_or_raise(tenant_id)
        if transition is not None:
            status, action = transition
            tenant = uow.tenants.update(tenant.id, {"status": status})
            uow.tenant_audits.append(tenant.id, action, actor_id=actor_id)
        uow.commit()
        return tenant


def change_tenant_status(
    tenant_id: int,
    target: str,
    actor_id: Optional[int] = None,
    reason: Optional[str] = None,
    document_ids: Optional[Sequence[int]] = None,
) -> Tenant:
    """Aggiorna lo stato del locatario e aggiunge la riga di audit."""
    status, action = resolve_tenant_status_transition(target)

    with UnitOfWork() as uow:
        tenant = uow.tenants.update(tenant_id, {"status": status})
        uow.tenant_audits.append(
            tenant.id,
            action,
            actor_id=actor_id,
            reason=reason,
            document_ids=list(document_ids or []),
        )
        uow.commit()

        log_structured_event(
            "tenant_status_changed",
            message="Stato locatario aggiornato",
            tenant_id=tenant.id,
            status=status,
            audit_action=action,
        )
        return tenant


def list_tenant_audits(tenant_id: int, action: Optional[str] = None) -> List[TenantAudit]:
    with UnitOfWork() as uow:
        return uow.tenant_audits.list_by_tenant(tenant_id, action)


def fetch_last_refusal_reason(tenant_id: int) -> Optional[str]:
    """Motivazione dell'ultimo rifiuto registrato (None se mai rifiutato)."""
    refusals = list_tenant_audits(tenant_id, action="refused")
    return refusals[-1].reason if refusals else None


# ---------------------------------------------------------------------
# Allegati
# ---------------------------------------------------------------------
def list_tenant_documents(tenant_id: int) -> List[TenantDocument]:
    with UnitOfWork() as uow:
        return uow.tenant_documents.list_by_tenant(tenant_id)


def add_tenant_document(
    tenant_id: int,
    name: str,
    data: bytes,
    mime_type: Optional[str] = None,
    notes: Optional[str] = None,
    doc_type: str = "id",
) -> TenantDocument:
    """
    Salva un allegato del locatario.

    Scrive la riga in ``documents`` (collegata al locatario) e quella in
    ``tenant_documents`` nella stessa transazione.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise ValidationError("Il contenuto dell'allegato deve essere binario")
    mime_type = mime_type or DEFAULT_MIME_TYPE

    with UnitOfWork() as uow:
        uow.tenants.get_or_raise(tenant_id)
        document = uow.documents.create(
            {
                "name": name,
                "type": doc_type,
                "related_entity_type": RelatedEntityKind.TENANT.value,
                "related_entity_id": tenant_id,
                "mime_type": mime_type,
                "data": bytes(data),
                "description": notes,
            }
        )
        tenant_document = uow.tenant_documents.create(
            {
                "tenant_id": tenant_id,
                "name": name,
                "mime_type": mime_type,
                "size": len(data),
                "data": bytes(data),
                "notes": notes,
                "uploaded_at": utcnow(),
                "document_id": document.id,
            }
        )
        uow.commit()

        log_structured_event(
            "tenant_document_added",
            message="Allegato locatario salvato",
            tenant_id=tenant_id,
            tenant_document_id=tenant_document.id,
            document_id=document.id,
        )
        return tenant_document


def remove_tenant_document(tenant_document_id: int, tenant_id: Optional[int] = None) -> None:
    """Cancella l'allegato e la sua riga gemella in ``documents``."""
    with UnitOfWork() as uow:
        tenant_document = uow.tenant_documents.get_or_raise(tenant_document_id)
        if tenant_id is not None and tenant_document.tenant_id != tenant_id:
            raise NotFoundError("TenantDocument", tenant_document_id)
        document_id = tenant_document.document_id
        uow.tenant_documents.delete(tenant_document_id)
        if document_id is not None and uow.documents.get_by_id(document_id) is not None:
            uow.documents.delete(document_id)
        uow.commit()

        log_structured_event(
            "tenant_document_removed",
            message="Allegato locatario cancellato",
            tenant_document_id=tenant_document_id,
            document_id=document_id,
        )
