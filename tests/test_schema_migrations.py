from datetime import date

import pytest
from sqlalchemy import inspect, select, text

from locapilot.errors import StorageError
from locapilot.extensions import db
from locapilot.models import Inventory, Property
from locapilot.schema import MIGRATIONS, Migration, MigrationManager


def _index_names(engine, table_name):
    with engine.connect() as conn:
        return {ix["name"] for ix in inspect(conn).get_indexes(table_name)}


def test_fresh_store_applies_all_versions_in_order(engine):
    manager = MigrationManager(engine)
    assert manager.current_version() == 0

    applied = manager.apply_migrations()

    assert applied == [m.version for m in MIGRATIONS]
    assert manager.current_version() == MIGRATIONS[-1].version
    assert not manager.has_pending_migrations()


def test_second_apply_is_a_noop(engine):
    manager = MigrationManager(engine)
    manager.apply_migrations()

    assert manager.apply_migrations() == []
    assert manager.current_version() == MIGRATIONS[-1].version


def test_rejects_versions_not_strictly_increasing(engine):
    first, second = MIGRATIONS[0], MIGRATIONS[1]
    with pytest.raises(ValueError):
        MigrationManager(engine, migrations=[second, first])
    with pytest.raises(ValueError):
        MigrationManager(engine, migrations=[first, first])


def test_failing_version_keeps_last_good_version(engine):
    def broken_upgrade(conn):
        raise RuntimeError("passo dati fallito")

    migrations = list(MIGRATIONS[:2]) + [
        Migration(
            version=3,
            description="Versione con passo dati rotto",
            stores=MIGRATIONS[2].stores,
            upgrade=broken_upgrade,
        )
    ]
    manager = MigrationManager(engine, migrations=migrations)

    with pytest.raises(StorageError) as excinfo:
        manager.apply_migrations()

    assert excinfo.value.step == 3
    assert manager.current_version() == 2
    # Gli indici della versione fallita non devono sopravvivere al rollback
    assert "ix_properties_address" not in _index_names(engine, "properties")

    # La sequenza completa riparte dalla versione 3
    assert MigrationManager(engine).apply_migrations() == [3, 4, 5, 6]
    assert "ix_properties_address" in _index_names(engine, "properties")


def test_version_without_structural_change_still_advances(engine):
    manager = MigrationManager(engine, migrations=MIGRATIONS[:4])
    assert manager.apply_migrations() == [1, 2, 3, 4]
    assert manager.current_version() == 4


def test_property_photos_initialized_by_data_step(engine):
    MigrationManager(engine, migrations=MIGRATIONS[:1]).apply_migrations()
    table = Property.__table__
    with engine.begin() as conn:
        conn.execute(table.insert().values(name="Vecchio immobile", photos=None))

    MigrationManager(engine).apply_migrations()

    with engine.connect() as conn:
        photos = conn.execute(select(table.c.photos)).scalar_one()
    assert photos == []


def test_inventory_photos_keep_only_document_ids(engine):
    MigrationManager(engine, migrations=MIGRATIONS[:2]).apply_migrations()
    table = Inventory.__table__
    with engine.begin() as conn:
        conn.execute(
            table.insert().values(
                lease_id=1,
                date=date(2024, 1, 15),
                photos=["https://example.com/foto.jpg", 7, 9],
            )
        )

    MigrationManager(engine).apply_migrations()

    with engine.connect() as conn:
        photos = conn.execute(select(table.c.photos)).scalar_one()
    assert photos == [7, 9]


def test_existing_table_gains_missing_columns_and_indexes(engine):
    manager = MigrationManager(
        engine,
        migrations=[Migration(1, "settings con chiave unica", {"settings": "++id, &key"})],
    )
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE settings (id INTEGER PRIMARY KEY, key VARCHAR(128))"))
        conn.execute(text("INSERT INTO settings (id, key) VALUES (1, 'theme')"))

    assert manager.apply_migrations() == [1]

    with engine.connect() as conn:
        columns = {column["name"] for column in inspect(conn).get_columns("settings")}
        unique = {ix["name"]: ix["unique"] for ix in inspect(conn).get_indexes("settings")}
        kept = conn.execute(text("SELECT key FROM settings WHERE id = 1")).scalar_one()
    assert {"value", "updated_at"} <= columns
    assert unique["ux_settings_key"]
    assert kept == "theme"


def test_indexes_no_longer_declared_are_dropped(engine):
    migrations = [
        Migration(1, "rents con indice su status", {"rents": "++id, lease_id, status"}),
        Migration(2, "rents senza indice su status", {"rents": "++id, lease_id"}),
    ]
    MigrationManager(engine, migrations=migrations[:1]).apply_migrations()
    assert "ix_rents_status" in _index_names(engine, "rents")

    MigrationManager(engine, migrations=migrations).apply_migrations()
    names = _index_names(engine, "rents")
    assert "ix_rents_status" not in names
    assert "ix_rents_lease_id" in names


def test_export_schema_reflects_store(engine):
    manager = MigrationManager(engine)
    manager.apply_migrations()

    exported = manager.export_schema()

    assert exported["version"] == 6
    assert "schema_migrations" not in exported["tables"]
    charges = exported["tables"]["charges_adjustments"]
    assert charges["primaryKey"] == "++id"
    assert "[lease_id+year]" in charges["indexes"]
    assert "&key" in exported["tables"]["settings"]["indexes"]
    assert "tenant_audits" in exported["tables"]


def test_history_lists_applied_and_pending(engine):
    manager = MigrationManager(engine, migrations=MIGRATIONS[:3])
    manager.apply_migrations()

    history = MigrationManager(engine).history()

    assert history["current"] == 3
    assert history["latest"] == 6
    assert [item["version"] for item in history["applied"]] == [1, 2, 3]
    assert all(item["appliedAt"] for item in history["applied"])
    assert [item["version"] for item in history["pending"]] == [4, 5, 6]


def test_application_startup_migrates_store(app):
    assert MigrationManager(db.engine).current_version() == MIGRATIONS[-1].version
