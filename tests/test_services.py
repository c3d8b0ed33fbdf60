from datetime import date

import pytest

from locapilot.errors import NotFoundError, ValidationError
from locapilot.models import Property
from locapilot.extensions import db
from locapilot.services import (
    document_service,
    entity_service,
    lease_service,
    settings_service,
    tenant_service,
)
from locapilot.services.unit_of_work import UnitOfWork


# ---------------------------------------------------------------------
# Contratti
# ---------------------------------------------------------------------
def test_active_lease_marks_property_occupied(app, sample_data):
    prop = entity_service.create_entity("properties", {"name": "Box 12", "type": "parking"})
    assert prop.status == "vacant"

    lease_service.create_lease(
        {
            "propertyId": prop.id,
            "tenantIds": [sample_data["tenant_id"]],
            "startDate": "2026-01-01",
            "paymentDay": 1,
            "status": "active",
        }
    )

    assert db.session.get(Property, prop.id).status == "occupied"


def test_terminate_lease_frees_property(app, sample_data):
    lease = lease_service.terminate_lease(sample_data["lease_id"], "2026-06-30")

    assert lease.status == "ended"
    assert lease.end_date == date(2026, 6, 30)
    assert db.session.get(Property, sample_data["property_id"]).status == "vacant"


def test_terminate_before_start_is_rejected(app, sample_data):
    with pytest.raises(ValidationError):
        lease_service.terminate_lease(sample_data["lease_id"], "2020-01-01")


# ---------------------------------------------------------------------
# Locatari
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "target, expected",
    [
        ("validated", ("active", "validated")),
        ("refused", ("candidature-refused", "refused")),
        ("former", ("former", "updated")),
    ],
)
def test_tenant_status_transition(target, expected):
    assert tenant_service.resolve_tenant_status_transition(target) == expected


def test_unknown_tenant_status_is_rejected():
    with pytest.raises(ValidationError):
        tenant_service.resolve_tenant_status_transition("archiviato")


def test_tenant_creation_and_refusal_are_audited(app):
    tenant = tenant_service.create_tenant({"firstName": "Paul", "lastName": "Girard"}, actor_id=7)

    tenant_service.change_tenant_status(tenant.id, "refused", actor_id=7, reason="Reddito insufficiente")

    audits = tenant_service.list_tenant_audits(tenant.id)
    assert [a.action for a in audits] == ["created", "refused"]
    assert audits[0].actor_id == 7
    assert tenant_service.fetch_last_refusal_reason(tenant.id) == "Reddito insufficiente"
    with UnitOfWork() as uow:
        assert uow.tenants.get_or_raise(tenant.id).status == "candidature-refused"


def test_generic_tenant_update_audits_status_change(app, sample_data):
    tenant_id = sample_data["tenant_id"]

    tenant = entity_service.update_entity("tenants", tenant_id, {"status": "former", "phone": "0600000000"})

    assert tenant.status == "former"
    assert tenant.phone == "0600000000"
    assert [a.action for a in tenant_service.list_tenant_audits(tenant_id)] == ["updated"]

    entity_service.update_entity("tenants", tenant_id, {"phone": "0611111111"})
    assert len(tenant_service.list_tenant_audits(tenant_id)) == 1

    with pytest.raises(ValidationError):
        entity_service.update_entity("tenants", tenant_id, {"status": "archiviato"})


def test_status_change_of_missing_tenant_writes_no_audit(app):
    with pytest.raises(NotFoundError):
        tenant_service.change_tenant_status(999, "validated")
    assert tenant_service.list_tenant_audits(999) == []


def test_tenant_document_has_mirror_in_documents(app, sample_data):
    tenant_id = sample_data["tenant_id"]

    tenant_document = tenant_service.add_tenant_document(
        tenant_id, "carta-identita.pdf", b"%PDF id", mime_type="application/pdf"
    )

    mirror = document_service.get_document(tenant_document.document_id)
    assert mirror.related_entity_type == "tenant"
    assert mirror.related_entity_id == tenant_id
    assert mirror.size == len(b"%PDF id")
    assert document_service.resolve_related_entity(mirror.id).id == tenant_id

    tenant_service.remove_tenant_document(tenant_document.id, tenant_id=tenant_id)

    assert tenant_service.list_tenant_documents(tenant_id) == []
    with pytest.raises(NotFoundError):
        document_service.get_document(mirror.id)


def test_tenant_document_for_missing_tenant_writes_nothing(app):
    with pytest.raises(NotFoundError):
        tenant_service.add_tenant_document(404, "x.pdf", b"x")
    assert document_service.list_documents() == []


# ---------------------------------------------------------------------
# Documenti e impostazioni
# ---------------------------------------------------------------------
def test_document_created_from_data_url(app):
    document = document_service.create_document(
        {"name": "foto.png", "type": "photo", "data": "data:image/png;base64,iVBORw0KGgo="}
    )

    name, mime_type, content = document_service.get_document_content(document.id)
    assert name == "foto.png"
    assert mime_type == "image/png"
    assert content == b"\x89PNG\r\n\x1a\n"
    assert document.size == 8


def test_document_with_invalid_data_url_is_rejected(app):
    with pytest.raises(ValidationError):
        document_service.create_document({"name": "rotto", "data": "data:image/png;base64,%%%"})


def test_settings_round_trip(app):
    assert settings_service.get_setting("theme", "light") == "light"

    settings_service.set_setting("theme", "dark")
    settings_service.set_setting("reminders", {"daysBefore": 3})

    assert settings_service.get_setting("theme") == "dark"
    assert settings_service.list_settings() == {"theme": "dark", "reminders": {"daysBefore": 3}}
