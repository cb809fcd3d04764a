import os

# Settings are read at import time; pin a hermetic environment first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["RATE_LIMIT_BACKEND"] = "memory"
os.environ["FF_N8N_NOOP"] = "false"
for key in (
    "OPENAI_API_KEY", "RESEND_API_KEY", "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER", "TWILIO_SANDBOX_NUMBER", "VIP_SMS_WHITELIST", "N8N_BASE_URL", "N8N_API_KEY",
):
    os.environ[key] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skrbl.main import app
from skrbl.db.session import Base, get_db
from skrbl.core.rate_limiting import ip_rate_limiter, limiter
from skrbl.core.security import create_access_token
from skrbl.api.deps import get_n8n
from skrbl.services.n8n_client import N8nClient, TriggerResult
from skrbl import models  # noqa: F401
from tests.factories import UserRoleFactory

# Test database: one shared in-memory connection
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign keys unenforced unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def override_get_db(db_session):
    """Override the get_db dependency to use test database."""
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    ip_rate_limiter.reset()
    limiter.reset()
    yield
    ip_rate_limiter.reset()
    limiter.reset()


@pytest.fixture
def mock_n8n(mocker):
    """n8n client whose trigger succeeds unless a test says otherwise."""
    client = mocker.Mock(spec=N8nClient)
    client.trigger_sequence = mocker.AsyncMock(
        side_effect=lambda sequence_id, payload: TriggerResult(success=True, workflow_id=f"wf-{sequence_id}")
    )
    app.dependency_overrides[get_n8n] = lambda: client
    yield client
    app.dependency_overrides.pop(get_n8n, None)


@pytest_asyncio.fixture
async def async_client(override_get_db):
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_text_service(mocker):
    """Text generation service that answers every prompt with a fixed rewrite."""
    service = mocker.Mock()
    service.enrich = mocker.AsyncMock(return_value="Enriched copy from the model")
    return service


@pytest.fixture
def admin_user(db_session):
    role = UserRoleFactory(user_id="admin-1", role="admin")
    db_session.add(role)
    db_session.commit()
    return role


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(admin_user.user_id, email="ops@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token("user-1", email="someone@example.com")
    return {"Authorization": f"Bearer {token}"}
