"""
Delivery schedule resolution

Turns an area's weekly delivery days into concrete upcoming dates.
The scan starts tomorrow and covers a bounded lookahead window (14 days by
default), keeping the first `per_weekday` occurrences of each weekday
(one by default).
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from ..core.config import settings
from ..models.delivery import DeliveryDateOption, DeliverySchedule

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_WEEKDAY_LOOKUP = {name: index for index, name in enumerate(WEEKDAY_NAMES)}
_WEEKDAY_LOOKUP.update({name[:3]: index for index, name in enumerate(WEEKDAY_NAMES)})


def parse_weekday(name: str) -> Optional[int]:
    """Weekday index (Monday=0) for a full or three-letter name"""
    if not isinstance(name, str):
        return None
    return _WEEKDAY_LOOKUP.get(name.strip().lower())


def format_delivery_date(day: date) -> str:
    """Display label such as Thu, Oct 22, 2026"""
    return f"{day.strftime('%a, %b')} {day.day}, {day.year}"


def resolve_delivery_dates(
    schedule: Iterable[str],
    today: Optional[date] = None,
    lookahead_days: Optional[int] = None,
    per_weekday: Optional[int] = None,
) -> DeliverySchedule:
    """
    Concrete delivery dates for a weekly schedule.

    Args:
        schedule: Weekday names, e.g. ["monday", "thursday"]
        today: Reference day; the scan starts the day after
        lookahead_days: Window length in days
        per_weekday: Occurrences kept per weekday

    Returns:
        Dates sorted chronologically and grouped by weekday. Empty when the
        schedule names no valid weekday.
    """
    today = today or date.today()
    lookahead_days = settings.schedule_lookahead_days if lookahead_days is None else lookahead_days
    per_weekday = settings.schedule_dates_per_weekday if per_weekday is None else per_weekday

    wanted: dict[int, str] = {}
    for name in schedule or []:
        index = parse_weekday(name)
        if index is None:
            logger.debug(f"Ignoring unknown weekday in delivery schedule: {name!r}")
            continue
        wanted.setdefault(index, WEEKDAY_NAMES[index])

    if not wanted or per_weekday < 1:
        return DeliverySchedule()

    found: dict[str, list[date]] = {}
    options: list[DeliveryDateOption] = []
    for offset in range(1, lookahead_days + 1):
        day = today + timedelta(days=offset)
        weekday = wanted.get(day.weekday())
        if weekday is None:
            continue
        dates = found.setdefault(weekday, [])
        if len(dates) >= per_weekday:
            continue
        dates.append(day)
        options.append(
            DeliveryDateOption(
                delivery_date=day,
                weekday=weekday,
                label=format_delivery_date(day),
            )
        )

    options.sort(key=lambda option: option.delivery_date)
    by_weekday = dict(sorted(found.items(), key=lambda entry: entry[1][0]))
    return DeliverySchedule(dates=options, by_weekday=by_weekday)
