from datetime import date
from decimal import Decimal

import pytest

from locapilot.errors import ValidationError
from locapilot.services import rent_service


def _create_rent(lease_id, due_date, **extra):
    return rent_service.create_rent({"leaseId": lease_id, "dueDate": due_date, "amount": 1200, "charges": 50, **extra})


def test_mark_paid_defaults_to_rent_plus_charges(app, sample_data):
    rent = _create_rent(sample_data["lease_id"], "2026-01-05")

    paid = rent_service.mark_rent_paid(rent.id, paid_date="2026-01-06", payment_method="transfer")

    assert paid.status == "paid"
    assert paid.paid_date == date(2026, 1, 6)
    assert paid.paid_amount == Decimal("1250.00")
    assert paid.payment_method == "transfer"


def test_paid_rent_cannot_go_back(app, sample_data):
    rent = _create_rent(sample_data["lease_id"], "2026-01-05")
    rent_service.mark_rent_paid(rent.id)

    with pytest.raises(ValidationError):
        rent_service.update_rent(rent.id, {"status": "pending"})

    # Altri campi restano modificabili
    updated = rent_service.update_rent(rent.id, {"paymentMethod": "cash"})
    assert updated.status == "paid"


def test_refresh_overdue_writes_late_status(app, sample_data):
    old = _create_rent(sample_data["lease_id"], "2025-12-05")
    paid = _create_rent(sample_data["lease_id"], "2025-11-05", status="paid")
    future = _create_rent(sample_data["lease_id"], "2026-02-05")

    updated = rent_service.refresh_overdue_rents(date(2026, 1, 10))

    assert updated == [old.id]
    assert rent_service.get_rent(old.id).status == "late"
    assert rent_service.get_rent(paid.id).status == "paid"
    assert rent_service.get_rent(future.id).status == "pending"
    # Seconda chiamata: nulla da riscrivere
    assert rent_service.refresh_overdue_rents(date(2026, 1, 10)) == []


def test_virtual_rents_from_store(app, sample_data):
    virtual = rent_service.list_virtual_rents(date(2026, 1, 4))

    assert len(virtual) == 1
    assert virtual[0].id == f"virtual-{sample_data['lease_id']}-2026-01"
    assert virtual[0].due_date == date(2026, 1, 5)


def test_materialize_occupies_the_month(app, sample_data):
    descriptor = rent_service.list_virtual_rents(date(2026, 1, 4))[0]

    rent = rent_service.materialize_virtual_rent(descriptor)

    assert rent.status == "pending"
    assert rent.due_date == date(2026, 1, 5)
    assert rent.amount == Decimal("1200.00")
    assert rent_service.list_virtual_rents(date(2026, 1, 4)) == []
    with pytest.raises(ValidationError):
        rent_service.materialize_virtual_rent(descriptor)


def test_materialize_accepts_serialized_descriptor(app, sample_data):
    descriptor = rent_service.list_virtual_rents(date(2026, 1, 4))[0].to_dict()

    rent = rent_service.materialize_virtual_rent(descriptor)

    assert rent.lease_id == sample_data["lease_id"]


def test_materialize_refuses_persisted_rent(app, sample_data):
    rent = _create_rent(sample_data["lease_id"], "2026-03-05")

    with pytest.raises(ValidationError):
        rent_service.materialize_virtual_rent(rent.to_dict())


def test_virtual_ids_cannot_be_updated_or_deleted(app, sample_data):
    with pytest.raises(ValidationError):
        rent_service.update_rent("virtual-1-2026-01", {"amount": 10})
    with pytest.raises(ValidationError):
        rent_service.delete_rent("virtual-1-2026-01")


def test_calendar_marks_late_rents_overdue(app, sample_data):
    rent = _create_rent(sample_data["lease_id"], "2025-12-05", status="late")

    entries = rent_service.get_calendar(date(2026, 1, 4))

    assert entries[0].rent_id == rent.id
    assert entries[0].status == "overdue"
    assert entries[0].title == "Appartamento Centro"
    assert entries[1].is_virtual is True


def test_plain_update_cannot_mark_paid(app, sample_data):
    rent = _create_rent(sample_data["lease_id"], "2026-01-05")

    with pytest.raises(ValidationError):
        rent_service.update_rent(rent.id, {"status": "paid"})

    stored = rent_service.get_rent(rent.id)
    assert stored.status == "pending"
    assert stored.paid_date is None
    assert stored.paid_amount is None


def test_payment_stamps_are_frozen_once_paid(app, sample_data):
    rent = _create_rent(sample_data["lease_id"], "2026-01-05")
    rent_service.mark_rent_paid(rent.id, paid_date="2026-01-06", paid_amount=1250)

    with pytest.raises(ValidationError):
        rent_service.update_rent(rent.id, {"paidDate": None, "paidAmount": None})
    with pytest.raises(ValidationError):
        rent_service.mark_rent_paid(rent.id, paid_date="2026-03-01", paid_amount=1)

    stored = rent_service.get_rent(rent.id)
    assert stored.paid_date == date(2026, 1, 6)
    assert stored.paid_amount == Decimal("1250.00")
