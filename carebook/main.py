from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from carebook.config import Settings, settings as default_settings
from carebook.db.snapshot import SnapshotStore, create_snapshot_store
from carebook.services.doctor_service import DoctorCatalog
from carebook.services.domain_store import DomainStore, SAMPLE_REVIEWS
from carebook.services.session_service import SessionManager
from carebook.utils.logger import app_logger as logger


@dataclass
class CareBookApp:
    """Everything the presentation layer needs, wired together."""
    settings: Settings
    catalog: DoctorCatalog
    session: SessionManager
    store: DomainStore


def create_app(
    settings: Optional[Settings] = None,
    snapshot: Optional[SnapshotStore] = None
) -> CareBookApp:
    """Build catalog, session and store, and restore any saved session."""
    settings = settings or default_settings
    settings.validate_admin_config()

    if snapshot is None:
        snapshot = create_snapshot_store(settings.SESSION_FILE)

    catalog = DoctorCatalog()
    session = SessionManager(snapshot=snapshot, settings=settings)
    session.restore()
    store = DomainStore(
        catalog,
        session=session,
        reviews=SAMPLE_REVIEWS if settings.SEED_REVIEWS else None,
        settings=settings
    )
    return CareBookApp(settings=settings, catalog=catalog, session=session, store=store)


@asynccontextmanager
async def lifespan(
    settings: Optional[Settings] = None,
    snapshot: Optional[SnapshotStore] = None
) -> AsyncIterator[CareBookApp]:
    """Lifespan of the core: startup on enter, shutdown on exit."""
    settings = settings or default_settings

    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    app = create_app(settings, snapshot)
    logger.info(
        f"Ready: {len(app.catalog)} doctors, "
        f"{app.store.stats().total_reviews} reviews, "
        f"user={'yes' if app.session.is_authenticated else 'no'}, "
        f"admin={'yes' if app.session.is_admin else 'no'}"
    )

    try:
        yield app
    finally:
        # Shutdown; the session snapshot is written on every auth change.
        logger.info(f"Shutting down {settings.APP_NAME}")
