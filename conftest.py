import os

# Keep test runs off the filesystem and quiet.
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio

from carebook.config import Settings
from carebook.db.snapshot import MemorySnapshotStore
from carebook.services.doctor_service import DoctorCatalog
from carebook.services.domain_store import DomainStore, SAMPLE_REVIEWS
from carebook.services.session_service import SessionManager


@pytest.fixture
def test_settings():
    """Settings with no simulated latency and no session file."""
    return Settings(AUTH_LATENCY_SECONDS=0, SESSION_FILE="", LOG_FILE="")


@pytest.fixture
def snapshot():
    return MemorySnapshotStore()


@pytest.fixture
def catalog():
    return DoctorCatalog()


@pytest.fixture
def session(snapshot, test_settings):
    return SessionManager(snapshot=snapshot, settings=test_settings)


@pytest.fixture
def store(catalog, session):
    """Store seeded with the two demo reviews."""
    return DomainStore(catalog, session=session, reviews=SAMPLE_REVIEWS)


@pytest.fixture
def empty_store(catalog, session):
    return DomainStore(catalog, session=session)


@pytest_asyncio.fixture
async def admin_session(session):
    assert await session.admin_login("admin", "admin")
    return session
