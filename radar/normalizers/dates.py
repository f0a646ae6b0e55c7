"""
Date parsing and normalization utilities.

Turns the free-form date text written by the generator ("24 oct, 22h-02h",
"réunion à 14h", "15 nov") into a naive start/end instant pair in the
configured civil calendar. The parser is an ordered list of heuristic rules,
each with a default, and never raises:

1. month: first month abbreviation in the text, else the current month
2. day: first standalone 1-39 token once time tokens are masked, else tomorrow
3. year: next year when the month is earlier than the current one
4. times: first time token is the start (09:00 if none), second is the end
5. end: same day as start, pushed one day when it falls before the start;
   start + 2 hours when no end was written
"""

import re
from datetime import datetime, timedelta
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from radar.config import settings

# One entry per calendar month, diacritic and plain spellings.
# Matched as word prefixes, so everyday words starting with one also count:
# "maintenant", "mairie" and "mais" read as May, "décision" as December,
# and the number word "sept" as September.
MONTH_ABBREVIATIONS: tuple[tuple[str, ...], ...] = (
    ("janv",),
    ("févr", "fevr"),
    ("mars",),
    ("avr",),
    ("mai",),
    ("juin",),
    ("juil",),
    ("août", "aout"),
    ("sept",),
    ("oct",),
    ("nov",),
    ("déc", "dec"),
)

DEFAULT_START_HOUR = 9
DEFAULT_DURATION = timedelta(hours=2)

_MONTH_INDEX = {
    spelling: index
    for index, spellings in enumerate(MONTH_ABBREVIATIONS, start=1)
    for spelling in spellings
}
_MONTH_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(_MONTH_INDEX, key=len, reverse=True)) + ")"
)

# "9h", "18h30", "14:00", "22h-02h"
_TIME_PATTERN = re.compile(r"(?<!\d)(\d{1,2})[h:](\d{2})?")
_TIME_PLACEHOLDER = " _ "

# Standalone 1-39, optionally written "1er"
_DAY_PATTERN = re.compile(r"\b(0?[1-9]|[12][0-9]|3[0-9])(?:er)?\b")


class DateRange(NamedTuple):
    """Start and end instants, both naive local time."""

    start: datetime
    end: datetime


def civil_zone(tz_name: str | None = None) -> ZoneInfo | None:
    """ZoneInfo of the civil calendar; None (system local time) if unknown."""
    tz_name = tz_name or settings.radar.timezone
    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        logger.warning(f"Unknown timezone {tz_name!r}, using system local time")
        return None


def local_now(tz_name: str | None = None) -> datetime:
    """Current wall-clock time in the civil calendar, without tzinfo."""
    return datetime.now(civil_zone(tz_name)).replace(tzinfo=None)


def resolve_now(now: datetime | None) -> datetime:
    """Naive reference instant in the civil calendar (current time if None)."""
    if now is None:
        return local_now()
    if now.tzinfo is not None:
        return now.astimezone(civil_zone()).replace(tzinfo=None)
    return now


def find_month(text: str) -> int | None:
    """Month index (1-12) of the first month abbreviation in lower-cased text."""
    match = _MONTH_PATTERN.search(text)
    return _MONTH_INDEX[match.group(1)] if match else None


def find_day(text: str) -> int | None:
    """First day-of-month token, ignoring digits that belong to a time."""
    masked = _TIME_PATTERN.sub(_TIME_PLACEHOLDER, text)
    match = _DAY_PATTERN.search(masked)
    return int(match.group(1)) if match else None


def find_times(text: str) -> list[tuple[int, int]]:
    """All (hour, minute) pairs in lower-cased text, in order of appearance."""
    return [(int(hour), int(minute or 0)) for hour, minute in _TIME_PATTERN.findall(text)]


def _calendar_day(year: int, month: int, day: int) -> datetime:
    """Midnight of the given day; overflowing days roll into the next month."""
    return datetime(year, month, 1) + timedelta(days=day - 1)


def extract_date_range(text: str | None, now: datetime | None = None) -> DateRange:
    """
    Extract a best-effort start/end pair from free-form date text.

    Args:
        text: Loose date/time description, may be empty or None
        now: Reference instant (defaults to the current local time)

    Returns:
        DateRange of naive datetimes; end is never before start
    """
    now = resolve_now(now)
    lowered = str(text or "").lower()

    month = find_month(lowered) or now.month
    day = find_day(lowered)
    if day is None:
        day = now.day + 1  # tomorrow
    year = now.year + 1 if month < now.month else now.year

    base = _calendar_day(year, month, day)

    times = find_times(lowered)
    start_hour, start_minute = times[0] if times else (DEFAULT_START_HOUR, 0)
    start = base + timedelta(hours=start_hour, minutes=start_minute)

    if len(times) > 1:
        end_hour, end_minute = times[1]
        end = base + timedelta(hours=end_hour, minutes=end_minute)
        if end < start:
            end += timedelta(days=1)  # overnight span
    else:
        end = start + DEFAULT_DURATION

    return DateRange(start=start, end=end)


def parse_start(text: str | None, now: datetime | None = None) -> datetime:
    """Start instant of ``text``; the sort key of the consolidated view."""
    return extract_date_range(text, now).start


def yesterday_midnight(now: datetime | None = None) -> datetime:
    """00:00 of the day before ``now``."""
    now = resolve_now(now)
    return (now - timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
