from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from locapilot import create_app
from locapilot.extensions import db
from locapilot.models import Lease, Property, Tenant
from config import TestConfig


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def engine():
    """Store SQLite in memoria separato, per i test del gestore di schema."""
    engine = create_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def sample_data(app):
    """Un immobile, un locatario e un contratto attivo (giorno di pagamento 5)."""
    prop = Property(name="Appartamento Centro", address="Via Roma 1", status="occupied")
    tenant = Tenant(first_name="Marie", last_name="Dupont", email="marie@example.com")
    db.session.add_all([prop, tenant])
    db.session.flush()

    lease = Lease(
        property_id=prop.id,
        tenant_ids=[tenant.id],
        start_date=date(2025, 9, 1),
        rent=Decimal("1200.00"),
        charges=Decimal("50.00"),
        payment_day=5,
        status="active",
    )
    db.session.add(lease)
    db.session.commit()
    return {"property_id": prop.id, "tenant_id": tenant.id, "lease_id": lease.id}
