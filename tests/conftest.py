import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Load environment variables from .env file
load_dotenv()

# Tests never touch the configured database or Redis
os.environ["ENVIRONMENT"] = "test"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from quickhealth.config import settings  # noqa: E402
from quickhealth.core.roles import ADMIN, PATIENT  # noqa: E402
from quickhealth.core.sessions import InMemorySessionStore, get_session_store  # noqa: E402
from quickhealth.database import enable_sqlite_foreign_keys, get_db  # noqa: E402
from quickhealth.main import app  # noqa: E402
from quickhealth.models import metadata  # noqa: E402
from quickhealth.services.user_service import UserService  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh in-memory database and a session on it."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    """Process-local session store shared by all clients of one test."""
    return InMemorySessionStore(ttl=settings.session_max_age_seconds)


@pytest_asyncio.fixture
async def test_app(db_session: AsyncSession, session_store: InMemorySessionStore):
    """Application with the database and session store overridden."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store

    yield app

    app.dependency_overrides.clear()


def make_client() -> AsyncClient:
    """HTTP client with its own cookie jar; unhandled errors come back as 500s."""
    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    )


async def create_test_user(
    db_session: AsyncSession,
    email: str,
    full_name: str = "Test User",
    roles: str = PATIENT,
    password: str = TEST_PASSWORD,
) -> dict:
    """Insert a user directly through the service layer."""
    return await UserService(db_session).create_user(
        email=email,
        password=password,
        full_name=full_name,
        phone="+1234567890",
        roles=roles,
    )


async def login(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> dict:
    """Log a client in; the session cookie is kept in its cookie jar."""
    response = await client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["user"]


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create an anonymous test HTTP client."""
    async with make_client() as client:
        yield client


@pytest_asyncio.fixture
async def patient(db_session: AsyncSession) -> dict:
    """Create a patient in the database."""
    return await create_test_user(db_session, "patient@test.com", full_name="Pat Patient")


@pytest_asyncio.fixture
async def other_patient(db_session: AsyncSession) -> dict:
    """Create a second, unrelated patient."""
    return await create_test_user(db_session, "other@test.com", full_name="Olive Other")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> dict:
    """Create an administrator."""
    return await create_test_user(
        db_session,
        "admin@quickhealth.com",
        full_name="Ada Admin",
        roles=ADMIN,
    )


@pytest_asyncio.fixture
async def patient_client(test_app, patient: dict) -> AsyncGenerator[AsyncClient, None]:
    """Client logged in as ``patient``."""
    async with make_client() as client:
        await login(client, patient["email"])
        yield client


@pytest_asyncio.fixture
async def other_patient_client(test_app, other_patient: dict) -> AsyncGenerator[AsyncClient, None]:
    """Client logged in as ``other_patient``."""
    async with make_client() as client:
        await login(client, other_patient["email"])
        yield client


@pytest_asyncio.fixture
async def admin_client(test_app, admin_user: dict) -> AsyncGenerator[AsyncClient, None]:
    """Client logged in as ``admin_user``."""
    async with make_client() as client:
        await login(client, admin_user["email"])
        yield client


@pytest.fixture
def sample_appointment_data(patient: dict) -> dict:
    """Sample appointment data for testing."""
    return {
        "userId": patient["id"],
        "doctor": "Dr. John Doe",
        "specialty": "Cardiology",
        "startTime": "2025-03-10T09:00:00Z",
        "endTime": "2025-03-10T09:30:00Z",
        "reason": "Regular checkup",
    }


@pytest.fixture
def sample_prescription_data(patient: dict) -> dict:
    """Sample prescription data for testing."""
    return {
        "userId": patient["id"],
        "medication": "Amoxicillin",
        "dosage": "500mg",
        "instructions": "Three times daily",
        "issuedAt": "2025-03-01T08:00:00Z",
    }


@pytest_asyncio.fixture
async def login_as(test_app):
    """Factory logging in a fresh client for any email; clients close at teardown."""
    clients: list[AsyncClient] = []

    async def _login(email: str, password: str = TEST_PASSWORD) -> AsyncClient:
        client = make_client()
        clients.append(client)
        await login(client, email, password)
        return client

    yield _login

    for client in clients:
        await client.aclose()
