"""Bookable calendar dates."""

from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
import pytz

from carebook.config import settings


def clinic_today(timezone: Optional[str] = None) -> date:
    """Today's date in ``timezone``, the configured clinic timezone by default."""
    return datetime.now(pytz.timezone(timezone or settings.CLINIC_TIMEZONE)).date()


def generate_available_dates(today: date, horizon_days: int) -> List[str]:
    """
    Weekday dates strictly after ``today``, up to ``horizon_days`` days ahead.

    Args:
        today: Reference date, never included in the result
        horizon_days: Number of calendar days to scan

    Returns:
        ISO formatted dates (YYYY-MM-DD), Monday to Friday only, ascending
    """
    if horizon_days < 0:
        raise ValueError("horizon_days must not be negative")

    dates = []
    for day_offset in range(1, horizon_days + 1):
        check_date = today + timedelta(days=day_offset)

        # Skip weekends
        if check_date.weekday() >= 5:
            continue

        dates.append(check_date.isoformat())

    return dates


def upcoming_dates(
    clock: Callable[[], date] = clinic_today,
    horizon_days: Optional[int] = None
) -> List[str]:
    """Bookable dates relative to the injected clock."""
    if horizon_days is None:
        horizon_days = settings.BOOKING_HORIZON_DAYS
    return generate_available_dates(clock(), horizon_days)
