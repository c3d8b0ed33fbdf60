import json
from datetime import date

import pytest

from locapilot.errors import ImportFormatError, StorageError, ValidationError
from locapilot.extensions import db
from locapilot.models import Document, Lease, Property, Rent, Tenant
from locapilot.services import transfer_service
from locapilot.services.unit_of_work import UnitOfWork


@pytest.fixture
def populated(app, sample_data):
    with UnitOfWork() as uow:
        uow.rents.create({"leaseId": sample_data["lease_id"], "dueDate": "2026-01-05", "amount": 1200, "charges": 50})
        uow.documents.create(
            {
                "name": "quittance.pdf",
                "type": "receipt",
                "relatedEntityType": "lease",
                "relatedEntityId": sample_data["lease_id"],
                "mimeType": "application/pdf",
                "data": b"%PDF-1.7 quittance",
            }
        )
        uow.inventories.create({"leaseId": sample_data["lease_id"], "date": "2025-09-01", "photos": []})
        uow.commit()
    return sample_data


def _counts():
    return {
        "properties": Property.query.count(),
        "tenants": Tenant.query.count(),
        "leases": Lease.query.count(),
        "rents": Rent.query.count(),
        "documents": Document.query.count(),
    }


def test_export_contains_all_business_tables(populated):
    snapshot = transfer_service.export_snapshot()

    assert snapshot["version"] == "1.0"
    assert snapshot["exportedAt"].endswith("Z")
    for name in ("properties", "tenants", "leases", "rents", "documents", "inventories"):
        assert len(snapshot[name]) == 1
    document = snapshot["documents"][0]
    assert document["data"].startswith("data:application/pdf;base64,")
    assert snapshot["rents"][0]["dueDate"] == "2026-01-05"


def test_export_then_import_restores_equivalent_store(populated):
    exported = transfer_service.export_json()
    before = json.loads(exported)

    transfer_service.clear_all()
    assert _counts() == {name: 0 for name in _counts()}

    inserted = transfer_service.import_snapshot(exported)
    after = transfer_service.export_snapshot()

    assert inserted["rents"] == 1
    for name in ("properties", "tenants", "leases", "rents", "documents", "inventories"):
        assert after[name] == before[name]
    with UnitOfWork() as uow:
        document = uow.documents.list_all()[0]
        assert document.data == b"%PDF-1.7 quittance"
        assert document.size == len(b"%PDF-1.7 quittance")


def test_import_replaces_existing_data(populated):
    payload = {
        "version": "1.0",
        "properties": [{"id": 50, "name": "Maison Sud", "address": "Chemin 1"}],
        "tenants": [],
    }

    transfer_service.import_snapshot(payload)

    with UnitOfWork() as uow:
        assert [p.id for p in uow.properties.list_all()] == [50]
        assert uow.leases.count() == 0
        assert uow.rents.count() == 0


def test_failure_on_fourth_table_leaves_store_untouched(populated):
    snapshot = transfer_service.export_snapshot()
    before = _counts()
    rent = snapshot["rents"][0]
    # Due righe con la stessa chiave primaria: l'inserimento dei rents fallisce
    snapshot["rents"] = [rent, dict(rent)]
    snapshot["properties"].append({**snapshot["properties"][0], "id": 77, "name": "Nuovo"})

    with pytest.raises(StorageError) as excinfo:
        transfer_service.import_snapshot(snapshot)

    assert excinfo.value.table == "rents"
    db.session.remove()
    assert _counts() == before
    assert db.session.get(Property, 77) is None


def test_unreadable_document_payload_becomes_null(populated):
    snapshot = transfer_service.export_snapshot()
    snapshot["documents"][0]["data"] = "non-un-data-url"

    transfer_service.import_snapshot(snapshot)

    with UnitOfWork() as uow:
        assert uow.documents.list_all()[0].data is None


@pytest.mark.parametrize("payload", ["{non json", "[1, 2]", json.dumps({"properties": [], "tenants": []})])
def test_malformed_files_raise_format_error(app, payload):
    with pytest.raises(ImportFormatError):
        transfer_service.import_snapshot(payload)


def test_missing_required_arrays_are_rejected(app):
    with pytest.raises(ValidationError):
        transfer_service.import_snapshot({"version": "1.0", "properties": []})
    with pytest.raises(ValidationError):
        transfer_service.import_snapshot({"version": "1.0", "properties": [], "tenants": [], "rents": {}})


def test_missing_optional_arrays_are_empty(app):
    inserted = transfer_service.import_snapshot({"version": "1.0", "properties": [], "tenants": []})

    assert inserted == {
        "properties": 0,
        "tenants": 0,
        "leases": 0,
        "rents": 0,
        "documents": 0,
        "inventories": 0,
    }


def test_import_accepts_snake_case_rows(app):
    payload = {
        "version": "1.0",
        "properties": [{"id": 1, "name": "Loft", "address": "Rue 2"}],
        "tenants": [{"id": 1, "first_name": "Ana", "last_name": "Silva"}],
        "leases": [
            {
                "id": 1,
                "property_id": 1,
                "tenant_ids": [1],
                "start_date": "2025-01-01",
                "payment_day": 3,
                "status": "active",
            }
        ],
    }

    transfer_service.import_snapshot(payload)

    with UnitOfWork() as uow:
        lease = uow.leases.get_or_raise(1)
        assert lease.start_date == date(2025, 1, 1)
        assert lease.tenant_ids == [1]
