import os

# Point settings at the test database before the app modules build the engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from fastapi.testclient import TestClient

from ledger_staging.core.database import Base, engine, SessionLocal, get_db
from ledger_staging.core.exceptions import UpstreamError
from ledger_staging.main import app
from ledger_staging.schemas.staged_transaction import StagedTransactionCreate
from ledger_staging.services.connector import get_connector
from ledger_staging.services.staging_service import StagingService

import ledger_staging.models  # noqa: F401


class FakeConnector:
    """Records exports; set ``error`` to make the next export fail"""

    def __init__(self):
        self.calls = []
        self.error = None
        self.ack = {"message": "Connector received the data successfully"}
        self.on_export = None

    def export(self, company, rows):
        self.calls.append({"company": company, "rows": list(rows)})
        if self.on_export:
            self.on_export()
        if self.error is not None:
            raise self.error
        return self.ack


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_connector():
    return FakeConnector()


@pytest.fixture
def failing_connector(fake_connector):
    fake_connector.error = UpstreamError(
        "Failed to send data to accounting connector",
        detail={"error": "Tally is not running"},
    )
    return fake_connector


@pytest.fixture(scope="function")
def client(db, fake_connector):
    """Create a test client with database and connector overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_connector] = lambda: fake_connector
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def tenant():
    return {"user_email": "accounts@northwind.example", "company": "northwind_traders"}


@pytest.fixture
def other_tenant():
    return {"user_email": "ops@contoso.example", "company": "contoso_ltd"}


def make_row(**overrides):
    data = {
        "transaction_date": "15/03/2024",
        "transaction_type": "payment",
        "description": "NEFT to Global Supplies",
        "amount": "-2500.00",
        "assigned_ledger": "Global Supplies",
    }
    data.update(overrides)
    return StagedTransactionCreate(**data)


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def staged_batch(db, tenant):
    """Batch with one assigned row and one unassigned row"""
    result = StagingService.ingest(
        db,
        tenant["user_email"],
        tenant["company"],
        "HDFC Current A/c 0042",
        "march_statement.xlsx",
        [
            make_row(),
            make_row(
                transaction_date="18/03/2024",
                transaction_type="receipt",
                description="UPI from Acme Retail",
                amount="1200.00",
                assigned_ledger="",
            ),
        ],
    )
    return result.batch_id
