"""
Shared fixtures: in-memory database, seeded users and projects, API client.
"""
import pytest
from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crewcost.models import Base, get_db
from crewcost.domain.money import Money
from crewcost.domain.services import ProjectService
from crewcost.infrastructure.repositories import UserRepository


# =============================================================================
# Database
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database per test."""
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
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# =============================================================================
# Seed data
# =============================================================================

def make_user(session, email, name="Test User"):
    repo = UserRepository(session)
    user = repo.create(email=email, password_hash=None, name=name)
    repo.commit()
    return user


@pytest.fixture
def alice(db):
    return make_user(db, "alice@example.com", "Alice")


@pytest.fixture
def bob(db):
    return make_user(db, "bob@example.com", "Bob")


@pytest.fixture
def carol(db):
    return make_user(db, "carol@example.com", "Carol")


@pytest.fixture
def outsider(db):
    return make_user(db, "mallory@example.com", "Mallory")


@pytest.fixture
def project(db, alice, bob, carol):
    """USD project owned by alice with bob and carol as members."""
    service = ProjectService(db)
    project = service.create_project(alice.id, "Film Shoot", "USD", budget=Money(100000, "USD"))
    service.invite_member(alice.id, project.id, "bob@example.com")
    service.invite_member(alice.id, project.id, "carol@example.com")
    return project


@pytest.fixture
def today():
    return date(2026, 3, 14)


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def app(session_factory, tmp_path):
    from crewcost.main import app
    from crewcost.api.v1.receipts import get_receipt_store
    from crewcost.infrastructure.receipt_storage import LocalReceiptStore

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_receipt_store] = lambda: LocalReceiptStore(directory=tmp_path)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Client without lifespan so nothing touches the configured database."""
    return TestClient(app)


def register_and_login(client, name, email, password="secret123"):
    response = client.post("/api/v1/auth/register", json={
        "name": name, "email": email, "password": password
    })
    assert response.status_code == 201, response.text
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()
