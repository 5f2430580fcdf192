from datetime import datetime, timedelta
from functools import lru_cache
import logging
from typing import Callable
from zoneinfo import ZoneInfo

from mockprep.core.config import settings
from mockprep.application.ports.refresh_signal import RefreshSignalPort
from mockprep.application.ports.scheduling_api import SchedulingApiPort
from mockprep.application.ports.session_store import SessionStorePort
from mockprep.application.use_cases.booking_lifecycle import BookingLifecycle
from mockprep.domain.entities.session import SessionContext
from mockprep.infrastructure.scheduling.http_scheduling_api import HttpSchedulingApi
from mockprep.infrastructure.scheduling.mock_scheduling_api import MockSchedulingApi
from mockprep.infrastructure.signals.credits_refresh import CreditsRefreshBus
from mockprep.infrastructure.store.memory_store import MemorySessionStore


_session_store: MemorySessionStore | None = None


def get_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.TIMEZONE)
    except Exception:
        logging.getLogger(__name__).warning("Unknown TIMEZONE, falling back to UTC", extra={"reason": settings.TIMEZONE})
        return ZoneInfo("UTC")


def get_clock() -> Callable[[], datetime]:
    tz = get_timezone()
    return lambda: datetime.now(tz)


@lru_cache
def get_credits_bus() -> CreditsRefreshBus:
    return CreditsRefreshBus()


def get_refresh_signal() -> RefreshSignalPort:
    return get_credits_bus()


@lru_cache
def get_scheduling_api() -> SchedulingApiPort:
    logger = logging.getLogger(__name__)
    if not settings.SCHEDULING_API_BASE_URL:
        if settings.ENV.lower() in {"dev", "local", "test"}:
            logger.info("Using MockSchedulingApi (base URL missing, ENV=%s)", settings.ENV)
            return MockSchedulingApi(timezone=get_timezone(), duration_minutes=settings.SLOT_DURATION_MINUTES)
        raise ValueError("SCHEDULING_API_BASE_URL is required outside dev/local.")

    logger.info("Using HttpSchedulingApi base_url=%s", settings.SCHEDULING_API_BASE_URL)
    return HttpSchedulingApi()


def get_session_store() -> SessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStore()
    return _session_store


def build_lifecycle(session: SessionContext) -> BookingLifecycle:
    return BookingLifecycle(
        session=session,
        api=get_scheduling_api(),
        signals=get_refresh_signal(),
        clock=get_clock(),
        price=settings.SLOT_PRICE,
        window_days=settings.BOOKING_WINDOW_DAYS,
        refund_cutoff=timedelta(hours=settings.REFUND_CUTOFF_HOURS),
        refund_share=settings.REFUND_PERCENT,
    )


def get_lifecycle(session: SessionContext) -> BookingLifecycle:
    return get_session_store().get_or_create(session, build_lifecycle)
