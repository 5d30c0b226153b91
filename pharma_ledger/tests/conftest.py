import os

# settings are read once (lru_cache); pin the test environment before any import
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_ADDRESS"] = "0xad00000000000000000000000000000000000001"
os.environ["ADMIN_PASSWORD"] = "admin-pass"
os.environ["MAX_PAGE_SIZE"] = "5"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# FORCE model registration
import pharma_ledger.models  # noqa

from pharma_ledger.core.clock import FrozenClock, get_clock
from pharma_ledger.core.config import get_settings
from pharma_ledger.core.security import create_access_token
from pharma_ledger.db.base import Base
from pharma_ledger.db.session import SessionLocal, engine, get_db
from pharma_ledger.main import create_app
from pharma_ledger.models.enums import ParticipantRole
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.services.ledger import PharmaLedger, bootstrap_ledger

MANUFACTURER = "0xa000000000000000000000000000000000000001"
DISTRIBUTOR = "0xb000000000000000000000000000000000000002"
INSPECTOR = "0xc000000000000000000000000000000000000003"
PHARMACY = "0xd000000000000000000000000000000000000004"


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def tables(settings, clock):
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        bootstrap_ledger(session, settings, clock)
    finally:
        session.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def ledger(settings, clock):
    return PharmaLedger(settings, clock)


@pytest.fixture
def admin(settings):
    return Caller(address=settings.admin_address)


def enroll(db, ledger, admin, address, role, *, activate=True, name="Acme", location="Pune"):
    ledger.participants.register(
        db, caller=admin, address=address, name=name, location=location, role=role
    )
    if activate:
        ledger.participants.activate(db, caller=admin, address=address)
    return Caller(address=address)


@pytest.fixture
def actors(db, ledger, admin):
    """Active manufacturer, distributor, inspector and pharmacy."""
    return {
        "manufacturer": enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER),
        "distributor": enroll(db, ledger, admin, DISTRIBUTOR, ParticipantRole.DISTRIBUTOR),
        "inspector": enroll(db, ledger, admin, INSPECTOR, ParticipantRole.QUALITY_INSPECTOR),
        "pharmacy": enroll(db, ledger, admin, PHARMACY, ParticipantRole.PHARMACY),
    }


@pytest.fixture
def client(tables, clock):
    app = create_app()

    def override_get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    # not used as a context manager: the tables fixture already bootstrapped
    return TestClient(app)


def auth_headers(address: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(address)}"}
