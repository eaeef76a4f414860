import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.core.rate_limiter import rate_limiter
from jobboard.database import Base, _import_models, get_db
from jobboard.dependencies import get_current_admin, get_current_employer, get_current_user
from jobboard.main import app
from jobboard.repos import category_repo, job_repo


@dataclass
class StubUser:
    id: str = "user-1"
    email: str = "user@example.com"
    first_name: str = "Uma"
    last_name: str = "User"
    role: str = "user"
    company_name: str | None = None
    is_active: bool = True
    password_hash: str = "hashed-password"


@pytest.fixture
def stub_user() -> StubUser:
    return StubUser()


@pytest.fixture
def employer_user() -> StubUser:
    return StubUser(id="employer-1", email="hr@acme.example", role="employer", company_name="ACME")


@pytest.fixture
def admin_user() -> StubUser:
    return StubUser(id="admin-1", email="admin@example.com", role="admin")


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


def _override_db():
    yield object()


@pytest.fixture
def client(stub_user: StubUser):
    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_current_user] = lambda: stub_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    app.dependency_overrides[get_db] = _override_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def employer_client(employer_user: StubUser):
    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_current_user] = lambda: employer_user
    app.dependency_overrides[get_current_employer] = lambda: employer_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(admin_user: StubUser):
    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[get_current_employer] = lambda: admin_user
    app.dependency_overrides[get_current_admin] = lambda: admin_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    """Session on a private in-memory SQLite database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _import_models()
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_category(db):
    def _make(name="Software Development", description="Engineering roles"):
        return category_repo.create(db, name, description)

    return _make


@pytest.fixture
def make_job(db):
    def _make(category, title="Backend Engineer", employer_id=None, **overrides):
        fields = {
            "title": title,
            "description": "Build and run APIs.",
            "company": "ACME",
            "location": "Remote",
            "country": "US",
            "type": "full-time",
            "category_id": category.id,
        }
        fields.update(overrides)
        return job_repo.create_one(db, employer_id=employer_id, **fields)

    return _make
