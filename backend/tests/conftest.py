import os

# Must be set before any ``rolodex`` import: settings are read at import time.
os.environ.setdefault("TESTING", "1")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from rolodex.core.test_implementations import FixedRandomSource  # noqa: E402
from rolodex.core.test_implementations import InMemoryAddressBookBackend  # noqa: E402
from rolodex.core.test_implementations import InMemoryUserDirectory  # noqa: E402
from rolodex.crud import crud  # noqa: E402
from rolodex.database import Base  # noqa: E402
from rolodex.database import get_db  # noqa: E402
from rolodex.database import make_engine  # noqa: E402
from rolodex.database import make_sessionmaker  # noqa: E402
from rolodex.models import models  # noqa: E402,F401 – register tables
from rolodex.services.contact_service import ContactService  # noqa: E402

# Import app after all engine setup is in place
from rolodex.main import app  # noqa: E402

# Create a test database - using in-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

test_engine = make_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # Use StaticPool for in-memory database
)

TestingSessionLocal = make_sessionmaker(test_engine)


@pytest.fixture
def db_session():
    """
    Creates a fresh database for each test, then tears it down after the test is done.
    """
    Base.metadata.create_all(bind=test_engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session):
    """
    Create a FastAPI TestClient with the test database dependency.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app, backend="asyncio")
    yield client

    app.dependency_overrides = {}


@pytest.fixture
def sample_users(db_session):
    """
    Create three directory users (alice, bob, carol) in id order
    """
    return [
        crud.create_user(db_session, user_id="alice", email="alice@example.com", display_name="Alice"),
        crud.create_user(db_session, user_id="bob", email="bob@example.com", display_name="Bob"),
        crud.create_user(db_session, user_id="carol", email="carol@example.com", display_name="Carol"),
    ]


# ---------------------------------------------------------------------------
# In-memory collaborators for service-level tests
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_backend():
    return InMemoryAddressBookBackend()


@pytest.fixture
def memory_directory():
    return InMemoryUserDirectory(["alice", "bob", "carol"])


@pytest.fixture
def contact_service(memory_backend, memory_directory):
    return ContactService(memory_backend, memory_directory)


@pytest.fixture
def fixed_contact_service(memory_backend, memory_directory):
    """Contact service whose uid generator always sees ``0xff`` bytes."""
    return ContactService(memory_backend, memory_directory, random_source=FixedRandomSource())
