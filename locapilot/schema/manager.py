"""
Gestore delle versioni di schema dello store locale.

Applica in ordine crescente le versioni pendenti, ciascuna nella propria
transazione (SQLite con BEGIN esplicito, quindi anche i DDL vengono annullati
in caso di errore). Una versione fallita interrompe la sequenza: lo store
resta all'ultima versione applicata con successo e l'errore viene registrato
e sollevato come StorageError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import func, inspect, insert, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.schema import MetaData, Table

from locapilot.errors import StorageError
from locapilot.extensions import configure_transactional_sqlite, db
from locapilot.models import SchemaMigration
from locapilot.models.base import utcnow
from locapilot.schema.store_spec import IndexSpec, TableSpec, parse_stores
from locapilot.schema.versions import MIGRATIONS, Migration, validate_migration_order
from locapilot.services.logging import log_structured_event

logger = logging.getLogger(__name__)

_VERSION_TABLE = SchemaMigration.__table__


class MigrationManager:
    def __init__(
        self,
        engine: Engine,
        migrations: Optional[Sequence[Migration]] = None,
        metadata: Optional[MetaData] = None,
    ):
        self.engine = engine
        self.migrations: List[Migration] = list(MIGRATIONS if migrations is None else migrations)
        self.metadata = metadata if metadata is not None else db.metadata
        validate_migration_order(self.migrations)
        configure_transactional_sqlite(engine)

    # ------------------------------------------------------------------
    # Stato
    # ------------------------------------------------------------------
    def current_version(self) -> int:
        """Versione più alta applicata (0 su store vuoto)."""
        with self.engine.connect() as conn:
            if not inspect(conn).has_table(_VERSION_TABLE.name):
                return 0
            return conn.execute(select(func.max(_VERSION_TABLE.c.version))).scalar() or 0

    def latest_version(self) -> int:
        return self.migrations[-1].version if self.migrations else 0

    def pending_migrations(self) -> List[Migration]:
        current = self.current_version()
        return [m for m in self.migrations if m.version > current]

    def has_pending_migrations(self) -> bool:
        return bool(self.pending_migrations())

    def history(self) -> Dict[str, Any]:
        """Versioni applicate (con data) e pendenti, per diagnostica."""
        current = self.current_version()
        applied: List[Dict[str, Any]] = []
        if current:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(
                        _VERSION_TABLE.c.version,
                        _VERSION_TABLE.c.description,
                        _VERSION_TABLE.c.applied_at,
                    ).order_by(_VERSION_TABLE.c.version)
                ).all()
            applied = [
                {
                    "version": version,
                    "description": description,
                    "appliedAt": applied_at.isoformat() if applied_at else None,
                }
                for version, description, applied_at in rows
            ]

        return {
            "current": current,
            "available": len(self.migrations),
            "latest": self.latest_version(),
            "applied": applied,
            "pending": [m.describe() for m in self.migrations if m.version > current],
        }

    # ------------------------------------------------------------------
    # Applicazione
    # ------------------------------------------------------------------
    def apply_migrations(self) -> List[int]:
        """
        Applica tutte le versioni maggiori di quella corrente.

        Ritorna l'elenco delle versioni applicate (vuoto se non c'è nulla da fare).
        """
        with self.engine.begin() as conn:
            _VERSION_TABLE.create(conn, checkfirst=True)

        pending = self.pending_migrations()
        if not pending:
            logger.info(
                "Schema aggiornato, nessuna migrazione necessaria",
                extra={"component": "schema", "version": self.current_version()},
            )
            return []

        applied: List[int] = []
        for migration in pending:
            try:
                with self.engine.begin() as conn:
                    self._apply_stores(conn, migration)
                    if migration.upgrade is not None:
                        migration.upgrade(conn)
                    conn.execute(
                        insert(_VERSION_TABLE).values(
                            version=migration.version,
                            description=migration.description,
                            applied_at=utcnow(),
                        )
                    )
            except Exception as exc:
                log_structured_event(
                    "schema_migration_failed",
                    message="Migrazione di schema fallita",
                    level="error",
                    version=migration.version,
                    description=migration.description,
                    error=str(exc),
                )
                raise StorageError(
                    f"Migrazione {migration.version} fallita: {exc}",
                    step=migration.version,
                ) from exc

            applied.append(migration.version)
            log_structured_event(
                "schema_migration_applied",
                message="Migrazione di schema applicata",
                version=migration.version,
                description=migration.description,
            )

        return applied

    def reset_database(self) -> List[int]:
        """Elimina tutte le tabelle e riapplica le migrazioni. Solo per sviluppo."""
        logger.warning("Reset del database: tutti i dati verranno persi")
        with self.engine.begin() as conn:
            self.metadata.drop_all(conn)
        return self.apply_migrations()

    # ------------------------------------------------------------------
    # Export struttura
    # ------------------------------------------------------------------
    def export_schema(self) -> Dict[str, Any]:
        """Chiave primaria e indici di ogni tabella, letti dallo store reale."""
        tables: Dict[str, Dict[str, Any]] = {}
        with self.engine.connect() as conn:
            inspector = inspect(conn)
            for table_name in sorted(inspector.get_table_names()):
                if table_name == _VERSION_TABLE.name:
                    continue
                pk_columns = inspector.get_pk_constraint(table_name).get("constrained_columns") or []
                primary_key = "+".join(pk_columns)
                model_table = self.metadata.tables.get(table_name)
                if (
                    model_table is not None
                    and len(pk_columns) == 1
                    and model_table.c[pk_columns[0]].autoincrement is True
                ):
                    primary_key = f"++{primary_key}"
                indexes = [
                    IndexSpec(columns=tuple(ix["column_names"]), unique=bool(ix["unique"])).notation
                    for ix in sorted(inspector.get_indexes(table_name), key=lambda ix: ix["name"])
                ]
                tables[table_name] = {"primaryKey": primary_key, "indexes": indexes}

        return {"version": self.current_version(), "tables": tables}

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _apply_stores(self, conn: Connection, migration: Migration) -> None:
        op = Operations(MigrationContext.configure(conn))
        for spec in parse_stores(migration.stores).values():
            table = self.metadata.tables.get(spec.name)
            if table is None:
                raise ValueError(f"Tabella {spec.name} non definita nei modelli")

            pk_columns = [column.name for column in table.primary_key.columns]
            if pk_columns != [spec.primary_key]:
                raise ValueError(
                    f"Chiave primaria dichiarata {spec.primary_key!r} diversa dal modello "
                    f"{pk_columns!r} per {spec.name}"
                )

            if not inspect(conn).has_table(spec.name):
                table.create(conn)
                logger.debug("Tabella creata", extra={"table": spec.name})
            else:
                self._add_missing_columns(conn, op, table)

            self._sync_indexes(conn, op, table, spec)

    def _add_missing_columns(self, conn: Connection, op: Operations, table: Table) -> None:
        existing = {column["name"] for column in inspect(conn).get_columns(table.name)}
        for column in table.columns:
            if column.name in existing:
                continue
            # SQLite non aggiunge colonne NOT NULL senza default: restano nullable
            op.add_column(table.name, sa.Column(column.name, column.type, nullable=True))
            logger.debug(
                "Colonna aggiunta",
                extra={"table": table.name, "column": column.name},
            )

    def _sync_indexes(self, conn: Connection, op: Operations, table: Table, spec: TableSpec) -> None:
        existing = {ix["name"] for ix in inspect(conn).get_indexes(table.name)}
        desired = spec.index_map()

        for name in sorted(existing):
            if spec.owns_index(name) and name not in desired:
                op.drop_index(name, table_name=table.name)

        for name, index in desired.items():
            if name in existing:
                continue
            missing = [col for col in index.columns if col not in table.c]
            if missing:
                raise ValueError(f"Colonne indice inesistenti in {table.name}: {missing}")
            op.create_index(name, table.name, list(index.columns), unique=index.unique)
