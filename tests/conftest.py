"""Pytest fixtures for API testing."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import get_db
from app.core.security import get_password_hash, create_access_token
from app.models.base import Base
from app.models.user import User
from app.models.project import Project, ProjectMember

# In-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Test client with database override.

    Note: db_session already created tables, so we don't need to create them again.
    """
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _make_user(db_session, email, full_name, password, role="User", hourly_rate=None):
    user = User(
        email=email,
        full_name=full_name,
        password_hash=get_password_hash(password),
        role=role,
        hourly_rate=hourly_rate,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    """Create a test user."""
    return _make_user(db_session, "test@example.com", "Test User", "testpass123", hourly_rate=100.0)


@pytest.fixture
def admin_user(db_session):
    """Create an admin user."""
    return _make_user(db_session, "admin@example.com", "Admin User", "admin123", role="Admin")


@pytest.fixture
def second_user(db_session):
    """A regular user with no access to sample_project."""
    return _make_user(db_session, "second@example.com", "Second User", "secondpass123")


@pytest.fixture
def auth_headers(test_user):
    """Get authorization headers for test user."""
    token = create_access_token(data={"sub": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    """Get authorization headers for admin user."""
    token = create_access_token(data={"sub": admin_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def second_headers(second_user):
    token = create_access_token(data={"sub": second_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_project(db_session, test_user):
    """A project owned by test_user."""
    project = Project(
        name="Data Platform Migration",
        description="Move reporting to the new warehouse",
        status="active",
        priority="high",
        owner_id=test_user.user_id,
    )
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def project_member(db_session, sample_project, second_user):
    """Make second_user a member of sample_project."""
    member = ProjectMember(project_id=sample_project.project_id, user_id=second_user.user_id)
    db_session.add(member)
    db_session.commit()
    return second_user


@pytest.fixture
def member_headers(project_member):
    """Authorization headers for second_user once it belongs to sample_project."""
    token = create_access_token(data={"sub": project_member.email})
    return {"Authorization": f"Bearer {token}"}
