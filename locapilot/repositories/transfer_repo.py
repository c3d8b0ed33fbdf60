"""
Repository per il trasferimento dati (export / svuotamento / import).

Lavora sulle sei tabelle di business. Non apre transazioni: l'atomicità di
svuotamento e import è garantita dalla UnitOfWork del chiamante.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type

from locapilot.models import Document, Inventory, Lease, Property, Rent, Tenant

# Ordine di inserimento dell'import (e di lettura dell'export)
BUSINESS_TABLES: Tuple[Tuple[str, Type], ...] = (
    ("properties", Property),
    ("tenants", Tenant),
    ("leases", Lease),
    ("rents", Rent),
    ("documents", Document),
    ("inventories", Inventory),
)


class DataTransferRepository:
    def __init__(self, session):
        self.session = session

    def fetch_raw_export_data(self) -> Dict[str, List[Any]]:
        """Legge tutte le righe delle tabelle di business, ordinate per id."""
        return {
            name: self.session.query(model).order_by(model.id.asc()).all()
            for name, model in BUSINESS_TABLES
        }

    def count_rows(self) -> Dict[str, int]:
        return {name: self.session.query(model).count() for name, model in BUSINESS_TABLES}

    def clear_business_data(self) -> Dict[str, int]:
        """Svuota le sei tabelle; ritorna le righe cancellate per tabella."""
        deleted: Dict[str, int] = {}
        for name, model in reversed(BUSINESS_TABLES):
            deleted[name] = self.session.query(model).delete(synchronize_session=False)
        # Le istanze già caricate non corrispondono più a righe reali
        self.session.expunge_all()
        return deleted

    def bulk_insert(self, model: Type, rows: Iterable[Mapping[str, Any]]) -> int:
        """Inserisce le righe (mantenendo gli id del file) e fa flush."""
        entities = [model(**model.values_from_dict(row)) for row in rows]
        self.session.add_all(entities)
        self.session.flush()
        return len(entities)
