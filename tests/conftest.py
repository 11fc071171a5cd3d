"""Test fixtures."""

import os

# Set test environment before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("REDIS_URL", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from appointly.auth import issue_token
from appointly.database import Base, get_db
from appointly.main import app
from appointly.models import User
from appointly.security_utils import hash_password_bcrypt

from .helpers import TEST_PASSWORD


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once."""
    return hash_password_bcrypt(TEST_PASSWORD)


@pytest.fixture
def make_user(db_session, password_hash):
    """Factory that stores a staff user and returns (user, bearer headers)."""

    def _make_user(role="owner", email=None, name=None):
        user = User(
            name=name or f"{role.title()} User",
            email=email or f"{role}@company.com",
            role=role,
            password_hash=password_hash,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user, {"Authorization": f"Bearer {issue_token(user)}"}

    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user("owner")


@pytest.fixture
def employee(make_user):
    return make_user("employee")


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client wired to the test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
