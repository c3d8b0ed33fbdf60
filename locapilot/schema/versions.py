"""
Elenco ordinato delle versioni di schema.

Ogni versione dichiara l'insieme completo delle tabelle con chiave primaria e
indici, più un eventuale passo di migrazione dati eseguito nella stessa
transazione. I numeri di versione devono essere univoci e crescenti.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from locapilot.models import Inventory, Property


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    stores: Mapping[str, str]
    upgrade: Optional[Callable[[Connection], None]] = None

    def describe(self) -> dict:
        return {"version": self.version, "description": self.description}


def validate_migration_order(migrations: List[Migration]) -> None:
    """Solleva ValueError se le versioni non sono univoche e strettamente crescenti."""
    previous = 0
    for migration in migrations:
        if migration.version <= previous:
            raise ValueError(
                f"Versione di schema {migration.version} non crescente "
                f"(precedente: {previous})"
            )
        previous = migration.version


# ---------------------------------------------------------------------
# Passi di migrazione dati
# ---------------------------------------------------------------------
def _init_property_photos(conn: Connection) -> None:
    table = Property.__table__
    # NULL SQL e 'null' JSON arrivano entrambi come None
    rows = conn.execute(select(table.c.id, table.c.photos)).all()
    for row_id, photos in rows:
        if photos is None:
            conn.execute(table.update().where(table.c.id == row_id).values(photos=[]))


def _normalize_inventory_photos(conn: Connection) -> None:
    table = Inventory.__table__
    rows = conn.execute(select(table.c.id, table.c.photos)).all()
    for row_id, photos in rows:
        if isinstance(photos, list) and all(isinstance(p, int) for p in photos):
            continue
        # Le vecchie foto erano URL/stringhe: teniamo solo gli id di Document
        cleaned = [p for p in photos if isinstance(p, int)] if isinstance(photos, list) else []
        conn.execute(table.update().where(table.c.id == row_id).values(photos=cleaned))


# ---------------------------------------------------------------------
# Dichiarazioni
# ---------------------------------------------------------------------
_V1_STORES = {
    "properties": "++id, name, status, created_at",
    "tenants": "++id, email, status, last_name, created_at",
    "leases": "++id, property_id, status, start_date, end_date",
    "rents": "++id, lease_id, due_date, status, paid_date",
    "documents": "++id, type, related_entity_type, related_entity_id, created_at",
    "inventories": "++id, lease_id, type, date",
    "communications": "++id, related_entity_type, related_entity_id, date, type",
    "settings": "++id, &key",
    "charges_adjustments": "++id, lease_id, year",
}

_V3_STORES = {
    **_V1_STORES,
    "properties": "++id, name, address, type, surface, status, created_at",
    "tenants": "++id, first_name, last_name, email, phone, status, created_at",
    "leases": "++id, property_id, start_date, end_date, status, created_at",
    "rents": "++id, lease_id, due_date, paid_date, status",
}

_V5_STORES = {
    **_V3_STORES,
    "tenant_documents": "++id, tenant_id, uploaded_at, name",
    "tenant_audits": "++id, tenant_id, action, timestamp",
}

_V6_STORES = {
    **_V5_STORES,
    "charges_adjustments": "++id, lease_id, year, [lease_id+year]",
}


MIGRATIONS: List[Migration] = [
    Migration(
        version=1,
        description=(
            "Schema iniziale - tabelle properties, tenants, leases, rents, "
            "documents, inventories, communications, settings"
        ),
        stores=_V1_STORES,
    ),
    Migration(
        version=2,
        description="Supporto foto per gli immobili (campo photos inizializzato a lista vuota)",
        stores=_V1_STORES,
        upgrade=_init_property_photos,
    ),
    Migration(
        version=3,
        description="Indici estesi; foto degli stati dei luoghi come lista di id documento",
        stores=_V3_STORES,
        upgrade=_normalize_inventory_photos,
    ),
    Migration(
        version=4,
        description="Testo annuncio (annonce) sugli immobili, nessuna modifica strutturale",
        stores=_V3_STORES,
    ),
    Migration(
        version=5,
        description="Tabelle tenant_documents e tenant_audits per gli allegati dei locatari",
        stores=_V5_STORES,
    ),
    Migration(
        version=6,
        description="Indice composto [lease_id+year] sulle regolarizzazioni spese",
        stores=_V6_STORES,
    ),
]
