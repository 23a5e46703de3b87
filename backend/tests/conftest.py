# tests/conftest.py
"""
Pytest fixtures for the bookkeeping API.

The application is pointed at an in-memory SQLite database before it is
imported; every test gets a fresh schema with the reference data seeded.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = ""
os.environ["SEED_REFERENCE_DATA"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from crud.reference_data import seed_reference_data
from database import Base, SessionLocal, engine
from main import app
from models.categories import Category
from models.document_types import DocumentType
from models.payment_types import PaymentType
from models.regions import Region
from models.status import Status
from models.tax_rates import TaxRate

API = "/api/v1"
USER_A = "user-a"
USER_B = "user-b"


def make_token(user_id, secret="test-secret", expires_in=timedelta(hours=1)):
    payload = {"id": user_id, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth(user_id=USER_A):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


# =============================================================================
# Database & client
# =============================================================================

@pytest.fixture(autouse=True)
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    seed_reference_data(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers_a():
    return auth(USER_A)


@pytest.fixture
def headers_b():
    return auth(USER_B)


# =============================================================================
# Reference data
# =============================================================================

@pytest.fixture
def refs(db_session):
    """Ids of the seeded catalog rows used by most tests."""
    def category(name):
        return db_session.query(Category).filter(Category.name == name).one().id

    region = db_session.query(Region).filter(Region.code == "RM").one()
    return {
        "income_category": category("Ventas"),
        "expense_category": category("Insumos"),
        "document_type": db_session.query(DocumentType).filter(DocumentType.code == "33").one().id,
        "pending_status": db_session.query(Status).filter(Status.name == "Pendiente").one().id,
        "paid_status": db_session.query(Status).filter(Status.name == "Pagado").one().id,
        "payment_type": db_session.query(PaymentType).filter(PaymentType.name == "Transferencia").one().id,
        "tax_rate": db_session.query(TaxRate).filter(TaxRate.name == "IVA").one().id,
        "region": region.id,
        "commune": region.communes[0].id,
    }


@pytest.fixture
def make_vendor(client, refs):
    """Factory creating a vendor through the API for the given user."""
    def _make(user_id=USER_A, tax_id="11.111.111-1", name="Proveedor Uno", **overrides):
        payload = {
            "name": name,
            "tax_id": tax_id,
            "email": "contacto@proveedor.cl",
            "region_id": refs["region"],
            "commune_id": refs["commune"],
        }
        payload.update(overrides)
        resp = client.post(f"{API}/vendors/", json=payload, headers=auth(user_id))
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]
    return _make


@pytest.fixture
def vendor_a(make_vendor):
    return make_vendor()


@pytest.fixture
def transaction_payload(refs, vendor_a):
    """Factory for a valid expense payload owned by user A; keyword overrides win."""
    def _payload(**overrides):
        payload = {
            "document_number": "1001",
            "document_type_id": refs["document_type"],
            "transaction_date": "2025-03-15",
            "description": "Compra de insumos",
            "amount_net": "100.00",
            "tax_amount": "19.00",
            "tax_rate_id": refs["tax_rate"],
            "amount_total": "119.00",
            "category_id": refs["expense_category"],
            "vendor_id": vendor_a["id"],
            "status_id": refs["pending_status"],
            "type": "expense",
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def create_transaction(client, headers_a, transaction_payload):
    """Factory posting a transaction for user A; returns the response data."""
    def _create(**overrides):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(**overrides), headers=headers_a)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]
    return _create


@pytest.fixture
def token_factory():
    return make_token
