"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test
- JWT token minting for each role
- HTTPX AsyncClient bound to the app with get_db overridden
"""
import os
import tempfile
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time, so configure the environment first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"
os.environ.setdefault("LOCAL_STORAGE_PATH", os.path.join(tempfile.gettempdir(), "library-cms-test-assets"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_cms.core.deps import get_db
from library_cms.core.security import create_session_token
from library_cms.db.base import Base
from library_cms.db.enums import Role
from library_cms.db.models import Library
from library_cms.main import app
from library_cms.services import maintenance_service, platform_settings_service


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session on a brand-new in-memory database.
    
    StaticPool keeps a single connection so the schema survives for the
    whole test, including requests served through the ASGI client.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    
    yield session
    
    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def _reset_process_state():
    maintenance_service.reset_state()
    platform_settings_service.reset_state()
    yield
    maintenance_service.reset_state()
    platform_settings_service.reset_state()


def make_library(db: Session, name: str = "Central Library", approved: bool = True) -> Library:
    library = Library(
        id=uuid.uuid4(),
        name=name,
        description=f"{name} description",
        location="Main Street 1",
        city="Springfield",
        country="US",
        library_type="public",
        is_approved=approved,
    )
    db.add(library)
    db.flush()
    return library


@pytest.fixture(scope="function")
def library_factory(db: Session):
    """Create extra libraries: ``library_factory(name=..., approved=...)``."""
    def factory(name: str = "Branch Library", approved: bool = True) -> Library:
        return make_library(db, name=name, approved=approved)
    return factory


@pytest.fixture(scope="function")
def library(db: Session) -> Library:
    return make_library(db)


@pytest.fixture(scope="function")
def other_library(db: Session) -> Library:
    return make_library(db, name="Harbor Branch")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestActor:
    """Minted session for one role."""
    __test__ = False

    user_id: uuid.UUID
    role: Role
    library_id: uuid.UUID | None
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def make_actor(role: Role, library_id: uuid.UUID | None = None) -> TestActor:
    user_id = uuid.uuid4()
    return TestActor(
        user_id=user_id,
        role=role,
        library_id=library_id,
        token=create_session_token(user_id=user_id, role=role.value, library_id=library_id),
    )


@pytest.fixture(scope="function")
def actor_factory():
    """Mint a session for any role: ``actor_factory(Role.USER, library_id)``."""
    return make_actor


@pytest.fixture(scope="function")
def library_admin(library: Library) -> TestActor:
    return make_actor(Role.LIBRARY_ADMIN, library.id)


@pytest.fixture(scope="function")
def super_admin() -> TestActor:
    return make_actor(Role.SUPER_ADMIN)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create AsyncClient for testing; pass actor headers per request.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
    
    app.dependency_overrides.clear()
