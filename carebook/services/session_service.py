import asyncio
import hmac
import uuid
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from carebook.config import Settings, settings as default_settings
from carebook.db.snapshot import MemorySnapshotStore, SnapshotStore
from carebook.exceptions import ValidationError
from carebook.models.user import User
from carebook.utils.logger import app_logger as logger

USER_KEY = "user"
ADMIN_KEY = "admin"


class SessionManager:
    """
    Owns the current patient identity and the admin capability flag.

    Credentials are NOT verified against any identity source: login and
    register accept any non-empty input, and admin login compares against a
    single configured pair. This is a placeholder, not a security control.
    """

    def __init__(
        self,
        snapshot: Optional[SnapshotStore] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or default_settings
        self.snapshot = snapshot if snapshot is not None else MemorySnapshotStore()
        self._user: Optional[User] = None
        self._admin = False

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_admin(self) -> bool:
        return self._admin

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def restore(self) -> None:
        """Load user and admin flag from the snapshot, if present."""
        raw_user = self.snapshot.get(USER_KEY)
        if raw_user:
            try:
                self._user = User.model_validate_json(raw_user)
                logger.info(f"Restored session for {self._user.email}")
            except PydanticValidationError as e:
                logger.warning(f"Discarding corrupt session user: {e.error_count()} error(s)")
                self.snapshot.delete(USER_KEY)
                self._user = None

        self._admin = self.snapshot.get(ADMIN_KEY) == "true"
        if self._admin:
            logger.info("Restored admin session")

    async def login(self, email: str, password: str) -> User:
        """
        Start a patient session.

        The display name is the local part of the email and the patient id
        is derived from the email, so the same address always maps to the
        same patient.
        """
        email = self._require(email, "email")
        self._require(password, "password", strip=False)
        await self._simulate_latency()

        user = User(
            id=str(uuid.uuid5(uuid.NAMESPACE_URL, f"carebook:{email.lower()}")),
            name=email.split("@")[0],
            email=email,
        )
        self._set_user(user)
        logger.info(f"Patient logged in: {email}")
        return user

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None
    ) -> User:
        """Create a new patient identity and start its session."""
        name = self._require(name, "name")
        email = self._require(email, "email")
        self._require(password, "password", strip=False)
        await self._simulate_latency()

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            phone=(phone or "").strip() or None,
        )
        self._set_user(user)
        logger.info(f"Patient registered: {email}")
        return user

    async def admin_login(self, username: str, password: str) -> bool:
        """Grant the admin capability when the configured pair matches."""
        await self._simulate_latency()

        username_ok = hmac.compare_digest(
            (username or "").encode(), self.settings.ADMIN_USERNAME.encode()
        )
        password_ok = hmac.compare_digest(
            (password or "").encode(), self.settings.ADMIN_PASSWORD.encode()
        )
        if not (username_ok and password_ok):
            logger.warning(f"Rejected admin login for '{username}'")
            return False

        self._admin = True
        self.snapshot.set(ADMIN_KEY, "true")
        logger.info("Admin logged in")
        return True

    def logout(self) -> None:
        """Clear user and admin flag, in memory and in the snapshot."""
        if self._user is not None:
            logger.info(f"Logging out {self._user.email}")
        self._user = None
        self._admin = False
        self.snapshot.delete(USER_KEY)
        self.snapshot.delete(ADMIN_KEY)

    def _set_user(self, user: User) -> None:
        self._user = user
        self.snapshot.set(USER_KEY, user.model_dump_json())

    async def _simulate_latency(self) -> None:
        if self.settings.AUTH_LATENCY_SECONDS > 0:
            await asyncio.sleep(self.settings.AUTH_LATENCY_SECONDS)

    @staticmethod
    def _require(value: Optional[str], field: str, strip: bool = True) -> str:
        cleaned = (value or "").strip() if strip else (value or "")
        if not cleaned.strip():
            raise ValidationError(f"{field} is required", field=field)
        return cleaned
