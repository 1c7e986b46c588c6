"""
Pytest configuration and fixtures for all tests.
"""

import os

# Must be set before edutoolkit.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from typing import Generator
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from edutoolkit.auth.keycloak_admin import IdentityUser, get_identity_provider
from edutoolkit.database import get_db
from edutoolkit.model import Base
from edutoolkit.permissions.auth import get_current_principal
from edutoolkit.permissions.principal import Principal
from edutoolkit.server import app
from edutoolkit.services.email_service import get_email_service


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """Create a test database session using SQLite in-memory."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    
    Base.metadata.create_all(bind=engine)
    
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(user_id="admin-uid", email="admin@school.edu", role_global="ADMIN")


@pytest.fixture
def teacher_principal() -> Principal:
    return Principal(user_id="teacher-uid", email="teacher@school.edu", role_global="DOCENTE")


@pytest.fixture
def identity_provider() -> MagicMock:
    """Identity provider double with one existing account."""
    identity = MagicMock()
    identity.create_user = AsyncMock(return_value="new-uid")
    identity.delete_user = AsyncMock(return_value=None)
    identity.get_or_create_user = AsyncMock(return_value="promoted-uid")
    identity.get_user_by_email = AsyncMock(return_value=IdentityUser(id="existing-uid", email="teacher@school.edu"))
    identity.generate_password_reset_link = AsyncMock(return_value="https://id.example/reset?x=1")
    return identity


@pytest.fixture
def mailer() -> MagicMock:
    mailer = MagicMock()
    mailer.send_password_reset = AsyncMock(return_value=None)
    return mailer


@pytest.fixture
def client_factory(test_db, identity_provider, mailer):
    """
    Build a TestClient acting as the given principal.
    
    Pass None for an anonymous client.
    """
    def make(principal=None) -> TestClient:
        app.dependency_overrides.clear()
        app.dependency_overrides[get_db] = lambda: test_db
        app.dependency_overrides[get_identity_provider] = lambda: identity_provider
        app.dependency_overrides[get_email_service] = lambda: mailer
        if principal is not None:
            app.dependency_overrides[get_current_principal] = lambda: principal
        return TestClient(app)
    
    yield make
    
    app.dependency_overrides.clear()
