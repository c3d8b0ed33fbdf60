"""
Servizio di trasferimento dati: export, svuotamento e import completo.

L'import è un ripristino completo, mai un merge: in un'unica transazione
svuota le sei tabelle di business e reinserisce le righe del file nell'ordine
properties, tenants, leases, rents, documents, inventories. Qualsiasi errore
annulla tutto e viene sollevato come StorageError con la tabella coinvolta.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Union

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from locapilot.errors import ImportFormatError, LocapilotError, StorageError, ValidationError
from locapilot.models.base import utcnow
from locapilot.repositories import BUSINESS_TABLES
from locapilot.services.document_codec import deserialize_documents, serialize_documents
from locapilot.services.logging import log_structured_event
from locapilot.services.unit_of_work import UnitOfWork

DEFAULT_EXPORT_VERSION = "1.0"
REQUIRED_ARRAYS = ("properties", "tenants")
OPTIONAL_ARRAYS = ("leases", "rents", "documents", "inventories")


def _export_version() -> str:
    return str(current_app.config.get("EXPORT_FORMAT_VERSION") or DEFAULT_EXPORT_VERSION)


def export_snapshot() -> Dict[str, Any]:
    """
    Fotografia delle sei tabelle di business.

    Le tabelle sono lette in sequenza senza transazione condivisa: una scrittura
    concorrente può finire in una tabella e non in un'altra.
    """
    with UnitOfWork() as uow:
        raw = uow.transfer.fetch_raw_export_data()

        snapshot: Dict[str, Any] = {
            "version": _export_version(),
            "exportedAt": utcnow().isoformat() + "Z",
        }
        for name, _model in BUSINESS_TABLES:
            if name == "documents":
                snapshot[name] = serialize_documents(raw[name])
            else:
                snapshot[name] = [row.to_dict() for row in raw[name]]

    log_structured_event(
        "data_export",
        message="Export dati completato",
        counts={name: len(snapshot[name]) for name, _model in BUSINESS_TABLES},
    )
    return snapshot


def export_json(indent: int = 2) -> str:
    """Export come testo JSON (contenuto del file scaricato dall'utente)."""
    return json.dumps(export_snapshot(), ensure_ascii=False, indent=indent)


def clear_all() -> Dict[str, int]:
    """Svuota le sei tabelle di business in un'unica transazione."""
    with UnitOfWork() as uow:
        try:
            deleted = uow.transfer.clear_business_data()
            uow.commit()
        except SQLAlchemyError as exc:
            uow.rollback()
            log_structured_event(
                "data_clear_failed",
                message="Svuotamento dati fallito",
                level="error",
                error=str(exc),
            )
            raise StorageError(f"Svuotamento dati fallito: {exc}") from exc

    log_structured_event("data_clear", message="Dati cancellati", deleted=deleted)
    return deleted


def validate_export_shape(data: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, List[Any]]:
    """
    Controlla la forma del file di export e ritorna le sei liste di righe.

    ImportFormatError se il testo non è JSON, non è un oggetto o manca
    ``version``; ValidationError se mancano gli array obbligatori o se un
    array (o una sua riga) ha il tipo sbagliato. Gli array opzionali assenti
    valgono come liste vuote.
    """
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise ImportFormatError(f"File di import non valido: JSON malformato ({exc})") from exc

    if not isinstance(data, Mapping):
        raise ImportFormatError("File di import non valido: atteso un oggetto JSON")
    if not data.get("version"):
        raise ImportFormatError("File di import non valido: campo 'version' mancante")

    arrays: Dict[str, List[Any]] = {}
    for name in REQUIRED_ARRAYS:
        if not isinstance(data.get(name), list):
            raise ValidationError(f"File di import non valido: array '{name}' obbligatorio")
        arrays[name] = data[name]

    for name in OPTIONAL_ARRAYS:
        value = data.get(name)
        if value is None:
            arrays[name] = []
        elif not isinstance(value, list):
            raise ValidationError(f"File di import non valido: '{name}' deve essere un array")
        else:
            arrays[name] = value

    for name, rows in arrays.items():
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise ValidationError(f"Riga {index} di '{name}' non è un oggetto")

    return arrays


def import_snapshot(data: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, int]:
    """
    Sostituisce tutti i dati di business con quelli del file.

    Ritorna il numero di righe inserite per tabella. In caso di errore lo store
    resta esattamente com'era prima della chiamata.
    """
    arrays = validate_export_shape(data)
    inserted: Dict[str, int] = {}

    with UnitOfWork() as uow:
        current_table = "clear"
        try:
            uow.transfer.clear_business_data()
            for name, model in BUSINESS_TABLES:
                current_table = name
                rows = arrays[name]
                if name == "documents":
                    rows = deserialize_documents(rows)
                inserted[name] = uow.transfer.bulk_insert(model, rows)
            current_table = "commit"
            uow.commit()
        except (SQLAlchemyError, LocapilotError, ValueError, TypeError) as exc:
            uow.rollback()
            log_structured_event(
                "data_import_failed",
                message="Import dati fallito, nessuna modifica applicata",
                level="error",
                table=current_table,
                error=str(exc),
            )
            raise StorageError(f"Import fallito: {exc}", table=current_table) from exc

    log_structured_event("data_import", message="Import dati completato", counts=inserted)
    return inserted
