"""
Repository specifico per Document.

L'associazione polimorfica è un riferimento debole: non viene validata in
scrittura e la cancellazione dell'entità collegata non tocca i documenti.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from locapilot.errors import ValidationError
from locapilot.models import Document, Inventory, Lease, Property, Rent, RelatedEntityKind, Tenant
from locapilot.models.document import DOCUMENT_TYPES
from locapilot.repositories.base import SqlAlchemyRepository

# Tabella di lookup per tipo di entità collegata ('applicant' = candidato locatario)
RELATED_MODELS = {
    RelatedEntityKind.PROPERTY: Property,
    RelatedEntityKind.TENANT: Tenant,
    RelatedEntityKind.APPLICANT: Tenant,
    RelatedEntityKind.LEASE: Lease,
    RelatedEntityKind.RENT: Rent,
    RelatedEntityKind.INVENTORY: Inventory,
}


class DocumentRepository(SqlAlchemyRepository[Document]):
    choices = {"type": DOCUMENT_TYPES}

    def __init__(self, session):
        super().__init__(session, Document)

    def list_by_type(self, doc_type: str) -> List[Document]:
        return (
            self.session.query(Document)
            .filter_by(type=doc_type)
            .order_by(Document.created_at.desc())
            .all()
        )

    def list_for_entity(
        self, kind: Union[RelatedEntityKind, str], entity_id: int
    ) -> List[Document]:
        """Documenti collegati a un'entità (es. tutte le foto di un immobile)."""
        kind_value = RelatedEntityKind(kind).value
        return (
            self.session.query(Document)
            .filter_by(related_entity_type=kind_value, related_entity_id=entity_id)
            .order_by(Document.id.asc())
            .all()
        )

    def resolve_related(self, document: Document) -> Optional[Any]:
        """
        Risolve l'entità collegata al documento.

        Ritorna None se il documento non è collegato o se l'entità non esiste
        più (riferimento debole, nessuna eccezione).
        """
        kind = document.related_kind
        if kind is None or document.related_entity_id is None:
            return None
        return self.session.get(RELATED_MODELS[kind], document.related_entity_id)

    def validate(self, values: Dict[str, Any], existing: Optional[Document]) -> None:
        super().validate(values, existing)

        related_type = values.get("related_entity_type")
        if related_type is not None:
            try:
                values["related_entity_type"] = RelatedEntityKind(related_type).value
            except ValueError as exc:
                raise ValidationError(f"Tipo di entità collegata non ammesso: {related_type!r}") from exc

        data = values.get("data")
        if data is not None:
            if not isinstance(data, (bytes, bytearray)):
                raise ValidationError("Il contenuto del documento deve essere binario")
            values["data"] = bytes(data)
            values.setdefault("size", len(data))

        if existing is None and not values.get("name"):
            raise ValidationError("Nome documento obbligatorio")
