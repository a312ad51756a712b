import json
import time

import pytest

from carebook.config import Settings
from carebook.db.snapshot import JsonFileSnapshotStore, MemorySnapshotStore
from carebook.exceptions import ValidationError
from carebook.services.session_service import ADMIN_KEY, USER_KEY, SessionManager


@pytest.mark.asyncio
async def test_login_derives_name_from_email(session, snapshot):
    user = await session.login("jane.doe@example.com", "pw")

    assert user.name == "jane.doe"
    assert user.email == "jane.doe@example.com"
    assert session.current_user == user
    assert session.is_authenticated
    assert json.loads(snapshot.get(USER_KEY))["email"] == "jane.doe@example.com"


@pytest.mark.asyncio
async def test_login_id_is_stable_per_email(session):
    first = await session.login("Jane@Example.com", "pw")
    session.logout()
    second = await session.login("jane@example.com", "other")
    assert first.id == second.id


@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [("", "pw"), ("   ", "pw"), ("a@b.c", "")])
async def test_login_requires_email_and_password(session, email, password):
    with pytest.raises(ValidationError):
        await session.login(email, password)
    assert session.current_user is None


@pytest.mark.asyncio
async def test_register(session):
    user = await session.register("Sam Smith", "sam@example.com", "pw", phone=" 555-0100 ")

    assert user.name == "Sam Smith"
    assert user.phone == "555-0100"
    assert session.current_user.id == user.id

    other = await session.register("Sam Smith", "sam@example.com", "pw")
    assert other.id != user.id
    assert other.phone is None


@pytest.mark.asyncio
async def test_admin_login(session, snapshot):
    assert await session.admin_login("admin", "wrong") is False
    assert session.is_admin is False
    assert snapshot.get(ADMIN_KEY) is None

    assert await session.admin_login("admin", "admin") is True
    assert session.is_admin is True
    assert snapshot.get(ADMIN_KEY) == "true"


@pytest.mark.asyncio
async def test_logout_clears_user_and_admin(session, snapshot):
    await session.login("pat@example.com", "pw")
    await session.admin_login("admin", "admin")

    session.logout()

    assert session.current_user is None
    assert session.is_admin is False
    assert snapshot.get(USER_KEY) is None
    assert snapshot.get(ADMIN_KEY) is None


@pytest.mark.asyncio
async def test_restore_from_snapshot(session, snapshot, test_settings):
    user = await session.login("pat@example.com", "pw")
    await session.admin_login("admin", "admin")

    restored = SessionManager(snapshot=snapshot, settings=test_settings)
    restored.restore()

    assert restored.current_user == user
    assert restored.is_admin is True


def test_restore_discards_corrupt_user(test_settings):
    snapshot = MemorySnapshotStore({USER_KEY: "{not json"})
    session = SessionManager(snapshot=snapshot, settings=test_settings)
    session.restore()

    assert session.current_user is None
    assert snapshot.get(USER_KEY) is None


@pytest.mark.asyncio
async def test_file_snapshot_survives_restart(tmp_path, test_settings):
    path = str(tmp_path / "state" / "session.json")
    session = SessionManager(snapshot=JsonFileSnapshotStore(path), settings=test_settings)
    user = await session.login("pat@example.com", "pw")

    restored = SessionManager(snapshot=JsonFileSnapshotStore(path), settings=test_settings)
    restored.restore()
    assert restored.current_user == user

    restored.logout()
    assert JsonFileSnapshotStore(path).get(USER_KEY) is None


def test_file_snapshot_ignores_garbage(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("[1, 2, 3]")
    assert JsonFileSnapshotStore(str(path)).get(USER_KEY) is None


@pytest.mark.asyncio
async def test_simulated_latency_delays_auth(snapshot):
    settings = Settings(AUTH_LATENCY_SECONDS=0.01, SESSION_FILE="", LOG_FILE="")
    session = SessionManager(snapshot=snapshot, settings=settings)

    started = time.monotonic()
    await session.login("pat@example.com", "pw")
    assert await session.admin_login("admin", "admin") is True
    elapsed = time.monotonic() - started

    assert elapsed >= 0.015
    assert session.is_authenticated and session.is_admin
