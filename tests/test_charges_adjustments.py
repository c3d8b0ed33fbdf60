from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from locapilot.errors import NotFoundError, ValidationError
from locapilot.services import charges_service
from locapilot.services.unit_of_work import UnitOfWork


def test_first_upsert_creates_row_with_zero_defaults(app):
    row = charges_service.upsert_charges_adjustment(
        {"leaseId": 1, "year": 2025, "annualCharges": 600, "customCharges": {"Eau": 120}}
    )

    assert row.annual_charges == Decimal("600.00")
    assert row.monthly_rent == Decimal("0")
    assert row.rents_paid_count == 0
    assert row.custom_charges == {"Eau": 120}


def test_custom_charges_merge_without_loss(app):
    charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2025, "customCharges": {"Eau": 120}})

    row = charges_service.upsert_charges_adjustment(
        {"leaseId": 1, "year": 2025, "customCharges": {"Electricite": 80}}
    )

    assert row.custom_charges == {"Eau": 120, "Electricite": 80}

    row = charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2025, "customCharges": {"Eau": 150}})
    assert row.custom_charges == {"Eau": 150, "Electricite": 80}


def test_scalars_are_replaced_and_unique_per_year(app):
    charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2025, "annualCharges": 600})
    charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2025, "annualCharges": 720})
    charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2024, "annualCharges": 500})

    rows = charges_service.list_charges_adjustments(1)

    assert [r.year for r in rows] == [2024, 2025]
    assert rows[1].annual_charges == Decimal("720.00")
    assert charges_service.get_charges_adjustment(1, 2025).id == rows[1].id


def test_explicit_null_totals_fall_back_to_zero(app):
    charges_service.upsert_charges_adjustment(
        {"leaseId": 1, "year": 2025, "annualCharges": 600, "rentsPaidCount": 3}
    )

    row = charges_service.upsert_charges_adjustment(
        {"leaseId": 1, "year": 2025, "annualCharges": None, "rentsPaidCount": None}
    )

    assert row.annual_charges == Decimal("0")
    assert row.rents_paid_count == 0

    fresh = charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2026, "monthlyRent": None})
    assert fresh.monthly_rent == Decimal("0")


def test_rows_cannot_be_deleted(app):
    row = charges_service.upsert_charges_adjustment({"leaseId": 1, "year": 2025})
    with UnitOfWork() as uow:
        with pytest.raises(ValidationError):
            uow.charges_adjustments.delete(row.id)


def test_missing_year_is_rejected(app):
    with pytest.raises(ValidationError):
        charges_service.upsert_charges_adjustment({"leaseId": 1})
    with pytest.raises(NotFoundError):
        charges_service.get_charges_adjustment(1, 1999)


def test_year_summary_counts_paid_rents_only():
    lease = SimpleNamespace(id=1, rent=Decimal("1200"))
    rents = [
        SimpleNamespace(lease_id=1, status="paid", due_date=date(2025, 1, 5), amount=1200, charges=50, paid_amount=None),
        SimpleNamespace(lease_id=1, status="paid", due_date=date(2025, 2, 5), amount=1200, charges=50, paid_amount=Decimal("1000")),
        SimpleNamespace(lease_id=1, status="pending", due_date=date(2025, 3, 5), amount=1200, charges=50, paid_amount=None),
        SimpleNamespace(lease_id=1, status="paid", due_date=date(2024, 12, 5), amount=1200, charges=50, paid_amount=None),
        SimpleNamespace(lease_id=2, status="paid", due_date=date(2025, 1, 5), amount=900, charges=30, paid_amount=None),
    ]

    summary = charges_service.compute_year_summary(lease, rents, 2025)

    assert summary["rents_paid_count"] == 2
    assert summary["rents_paid_total"] == Decimal("2250")
    assert summary["charges_provision_paid"] == Decimal("100")
    assert summary["monthly_rent"] == Decimal("1200")
