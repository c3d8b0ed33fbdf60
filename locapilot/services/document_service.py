"""
Servizi per i documenti (Document).

Il contenuto può arrivare come bytes o come data URL (stesso formato del file
di export); in quel caso mimeType e size vengono presi dal contenuto.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from locapilot.errors import ValidationError
from locapilot.models import Document
from locapilot.services.document_codec import decode_data_url
from locapilot.services.unit_of_work import UnitOfWork


def _with_binary_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    values = dict(data)
    payload = values.get("data")
    if isinstance(payload, str):
        decoded = decode_data_url(payload)
        if decoded is None:
            raise ValidationError("Contenuto del documento non valido: atteso un data URL base64")
        mime_type, content = decoded
        values.pop("mime_type", None)
        values["data"] = content
        values["mimeType"] = mime_type
        values["size"] = len(content)
    return values


def list_documents(
    doc_type: Optional[str] = None,
    related_type: Optional[str] = None,
    related_id: Optional[int] = None,
) -> List[Document]:
    with UnitOfWork() as uow:
        if related_type is not None and related_id is not None:
            try:
                return uow.documents.list_for_entity(related_type, related_id)
            except ValueError as exc:
                raise ValidationError(f"Tipo di entità collegata non ammesso: {related_type!r}") from exc
        if doc_type:
            return uow.documents.list_by_type(doc_type)
        return uow.documents.list_all()


def get_document(document_id: int) -> Document:
    with UnitOfWork() as uow:
        return uow.documents.get_or_raise(document_id)


def create_document(data: Mapping[str, Any]) -> Document:
    if not isinstance(data, Mapping):
        raise ValidationError("Dati documento non validi")
    with UnitOfWork() as uow:
        document = uow.documents.create(_with_binary_payload(data))
        uow.commit()
        return document


def update_document(document_id: int, partial: Mapping[str, Any]) -> Document:
    if not isinstance(partial, Mapping):
        raise ValidationError("Dati documento non validi")
    with UnitOfWork() as uow:
        document = uow.documents.update(document_id, _with_binary_payload(partial))
        uow.commit()
        return document


def delete_document(document_id: int) -> None:
    """Cancella il documento; le entità che lo riferiscono non vengono toccate."""
    with UnitOfWork() as uow:
        uow.documents.delete(document_id)
        uow.commit()


def get_document_content(document_id: int) -> Tuple[str, str, bytes]:
    """(nome, mime type, contenuto) per il download."""
    document = get_document(document_id)
    if document.data is None:
        raise ValidationError(f"Il documento {document_id} non ha contenuto")
    return document.name, document.mime_type, bytes(document.data)


def resolve_related_entity(document_id: int) -> Optional[Any]:
    """Entità collegata al documento, oppure None se assente o non più esistente."""
    with UnitOfWork() as uow:
        document = uow.documents.get_or_raise(document_id)
        return uow.documents.resolve_related(document)
