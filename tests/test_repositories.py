from datetime import date

import pytest

from locapilot.errors import NotFoundError, ValidationError
from locapilot.models import Document, RelatedEntityKind
from locapilot.services.unit_of_work import UnitOfWork


def test_create_stamps_timestamps_and_update_only_updated_at(app):
    with UnitOfWork() as uow:
        prop = uow.properties.create({"name": "Studio Nord", "address": "Via Po 3", "type": "studio"})
        uow.commit()
        created_at = prop.created_at
        assert prop.updated_at == created_at

        updated = uow.properties.update(prop.id, {"rooms": 2})
        uow.commit()

        assert updated.created_at == created_at
        assert updated.updated_at >= created_at
        assert updated.rooms == 2


def test_update_and_delete_of_missing_id_raise_not_found(app):
    with UnitOfWork() as uow:
        with pytest.raises(NotFoundError):
            uow.properties.update(999, {"name": "x"})
        with pytest.raises(NotFoundError):
            uow.tenants.delete(999)


def test_unknown_fields_are_rejected(app):
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.properties.create({"name": "X", "colore": "blu"})


def test_camel_case_input_is_accepted(app):
    with UnitOfWork() as uow:
        tenant = uow.tenants.create(
            {"firstName": "Luc", "lastName": "Martin", "email": "luc@example.com", "birthDate": "1990-04-02"}
        )
        uow.commit()

        assert tenant.birth_date == date(1990, 4, 2)
        assert uow.tenants.get_by_email("luc@example.com").id == tenant.id
        assert tenant.to_dict()["firstName"] == "Luc"


def test_settings_key_is_unique(app):
    with UnitOfWork() as uow:
        uow.settings.create({"key": "currency", "value": "EUR"})
        uow.commit()

        with pytest.raises(ValidationError):
            uow.settings.create({"key": "currency", "value": "CHF"})

        uow.settings.save_value("currency", "CHF")
        uow.commit()
        assert uow.settings.get_value("currency") == "CHF"
        assert uow.settings.get_value("missing", "default") == "default"


def test_lease_requires_existing_property_and_tenants(app, sample_data):
    base = {"startDate": "2026-01-01", "paymentDay": 1, "status": "pending"}
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.leases.create({**base, "propertyId": 999, "tenantIds": [sample_data["tenant_id"]]})
        with pytest.raises(ValidationError):
            uow.leases.create({**base, "propertyId": sample_data["property_id"], "tenantIds": [999]})


@pytest.mark.parametrize("payment_day", [0, 32, "5"])
def test_lease_payment_day_range(app, sample_data, payment_day):
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.leases.update(sample_data["lease_id"], {"paymentDay": payment_day})


def test_active_lease_needs_a_tenant(app, sample_data):
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.leases.update(sample_data["lease_id"], {"tenantIds": []})


def test_rent_requires_existing_lease(app):
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.rents.create({"leaseId": 42, "dueDate": "2026-01-05", "amount": 100})


def test_rent_queries_by_lease_and_month(app, sample_data):
    lease_id = sample_data["lease_id"]
    with UnitOfWork() as uow:
        uow.rents.create({"leaseId": lease_id, "dueDate": "2026-02-05", "amount": 1200})
        uow.rents.create({"leaseId": lease_id, "dueDate": "2026-01-05", "amount": 1200})
        uow.commit()

        assert [r.due_date for r in uow.rents.list_by_lease(lease_id)] == [
            date(2026, 1, 5),
            date(2026, 2, 5),
        ]
        assert uow.rents.find_in_month(lease_id, 2026, 2).due_date == date(2026, 2, 5)
        assert uow.rents.find_in_month(lease_id, 2026, 3) is None


def test_document_association_is_a_weak_reference(app, sample_data):
    with UnitOfWork() as uow:
        document = uow.documents.create(
            {
                "name": "bail.pdf",
                "type": "lease",
                "relatedEntityType": "lease",
                "relatedEntityId": sample_data["lease_id"],
                "mimeType": "application/pdf",
                "data": b"%PDF-1.4",
            }
        )
        orphan = uow.documents.create(
            {"name": "foto.jpg", "type": "photo", "relatedEntityType": "property", "relatedEntityId": 404}
        )
        uow.commit()

        assert document.size == len(b"%PDF-1.4")
        assert document.related_kind is RelatedEntityKind.LEASE
        assert uow.documents.resolve_related(document).id == sample_data["lease_id"]
        assert uow.documents.resolve_related(orphan) is None
        assert [d.id for d in uow.documents.list_for_entity("property", 404)] == [orphan.id]

        with pytest.raises(ValidationError):
            uow.documents.create({"name": "x", "relatedEntityType": "garage", "relatedEntityId": 1})


def test_tenant_audits_are_append_only(app, sample_data):
    with UnitOfWork() as uow:
        audit = uow.tenant_audits.append(sample_data["tenant_id"], "validated", reason="ok")
        uow.commit()

        with pytest.raises(ValidationError):
            uow.tenant_audits.update(audit.id, {"reason": "modificato"})
        with pytest.raises(ValidationError):
            uow.tenant_audits.delete(audit.id)


def test_unit_of_work_rolls_back_on_exception(app):
    with pytest.raises(RuntimeError):
        with UnitOfWork() as uow:
            uow.properties.create({"name": "Da annullare"})
            raise RuntimeError("interrotto")

    with UnitOfWork() as uow:
        assert uow.properties.count() == 0
        assert uow.session.query(Document).count() == 0


def test_unknown_collection_is_rejected(app):
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.repository("garages")
