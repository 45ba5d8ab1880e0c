"""
Test configuration for pytest
"""

import pytest
import os
from datetime import datetime, timedelta, timezone
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine
from typing import Dict, Generator, Optional, Tuple
import uuid

# Test environment variables
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["PLATFORM_DOMAIN"] = "docforge.com"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
os.environ["SESSION_BACKEND"] = "memory"

from fastapi.testclient import TestClient

from dochost.access.sessions import InMemorySessionStore
from dochost.core.database import get_session
from dochost.core.security import hash_password
from dochost.main import create_app
from dochost.models import Credential, Page, Tenant  # noqa: F401
from dochost.schemas.tenant import TenantRecord

INTERNAL_HEADERS = {"X-Internal-Key": "test-internal-key"}


# Create test engine using in-memory SQLite for unit tests
test_engine = create_engine(
    "sqlite:///:memory:",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


class FrozenClock:
    """Clock that only moves when told to"""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeDirectory:
    """In-memory tenant directory"""

    def __init__(self):
        self.tenants: Dict[uuid.UUID, TenantRecord] = {}
        self.password_hashes: Dict[uuid.UUID, str] = {}
        self.calls = 0

    def add(
        self,
        name: str,
        subdomain: Optional[str] = None,
        custom_domain: Optional[str] = None,
        password: Optional[str] = None,
    ) -> TenantRecord:
        record = TenantRecord(
            id=uuid.uuid4(),
            name=name,
            api_key=uuid.uuid4().hex,
            subdomain=subdomain,
            custom_domain=custom_domain,
            password_protected=password is not None,
        )
        self.tenants[record.id] = record
        if password is not None:
            self.password_hashes[record.id] = hash_password(password)
        return record

    def _match(self, **criteria) -> Optional[TenantRecord]:
        self.calls += 1
        for record in self.tenants.values():
            if all(getattr(record, k) == v for k, v in criteria.items()):
                return record
        return None

    async def find_by_custom_domain(self, host: str) -> Optional[TenantRecord]:
        return self._match(custom_domain=host)

    async def find_by_subdomain(self, label: str) -> Optional[TenantRecord]:
        return self._match(subdomain=label)

    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[TenantRecord]:
        return self.tenants.get(tenant_id)

    async def find_login_subject(self, label: str) -> Tuple[Optional[TenantRecord], Optional[str]]:
        record = self._match(subdomain=label)
        if record is None:
            return None, None
        return record, self.password_hashes.get(record.id)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def session_store(clock: FrozenClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def api_app(db: Session, session_store: InMemorySessionStore, clock: FrozenClock):
    app = create_app(session_store=session_store, clock=clock)
    app.dependency_overrides[get_session] = lambda: db
    return app


@pytest.fixture
def api_client(api_app) -> TestClient:
    return TestClient(api_app)


@pytest.fixture
def register_tenant(api_client: TestClient):
    """Register a tenant through the API; returns (tenant json, api key headers)"""

    def _register(name: str = "Acme", domain: str = "acme.io"):
        response = api_client.post("/api/tenant", json={"name": name, "domain": domain})
        assert response.status_code == 201, response.text
        body = response.json()
        return body["tenant"], {"X-API-Key": body["api_key"]}

    return _register
