"""
Eccezioni applicative del data layer.

Repository e servizi le propagano al chiamante senza retry: eventuali
ritentativi sono responsabilità di chi chiama (UI, CLI, API).
"""

from __future__ import annotations

from typing import Optional


class LocapilotError(Exception):
    """Base di tutte le eccezioni del data layer."""


class ValidationError(LocapilotError):
    """Input malformato (campi sconosciuti, riferimenti mancanti, forma errata)."""


class ImportFormatError(ValidationError):
    """Il file di export non rispetta il formato (JSON non valido, version assente)."""


class NotFoundError(LocapilotError):
    """Update/delete su un id inesistente."""

    def __init__(self, entity: str, entity_id) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} con id {entity_id} non trovato")


class StorageError(LocapilotError):
    """Fallimento di transazione o di migrazione.

    ``table`` indica la tabella su cui è fallita una scrittura massiva,
    ``step`` la versione di schema la cui applicazione è fallita.
    """

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        step: Optional[int] = None,
    ) -> None:
        self.table = table
        self.step = step
        details = []
        if table is not None:
            details.append(f"tabella={table}")
        if step is not None:
            details.append(f"versione={step}")
        suffix = f" ({', '.join(details)})" if details else ""
        super().__init__(f"{message}{suffix}")
