"""
Calendar deep links for records.

Builds a Google Calendar "template" URL for one record. The start/end stamps
are local, unzoned times; the ``ctz`` parameter pins them to the configured
civil timezone so the calendar does not reinterpret them in the viewer's own.
"""

from datetime import datetime
from urllib.parse import quote, urlencode

from radar.config import settings
from radar.models import Record
from radar.normalizers.dates import extract_date_range

STAMP_FORMAT = "%Y%m%dT%H%M%S"


def format_stamp(moment: datetime) -> str:
    """Compact local stamp, e.g. 20261024T220000."""
    return moment.strftime(STAMP_FORMAT)


def build_details(record: Record) -> str:
    """Event body: description (or impact), then source URL and price."""
    parts = [record.description or record.impact_analysis]
    if record.url:
        parts.append(f"Source : {record.url}")
    if record.price:
        parts.append(f"Prix : {record.price}")
    return "\n\n".join(p for p in parts if p)


def build_calendar_link(
    record: Record,
    now: datetime | None = None,
    timezone: str | None = None,
) -> str:
    """Deep link that opens a pre-filled calendar event. Does not touch the record."""
    date_range = extract_date_range(record.date, now)
    params = {
        "action": "TEMPLATE",
        "text": record.headline,
        "dates": f"{format_stamp(date_range.start)}/{format_stamp(date_range.end)}",
        "details": build_details(record),
        "location": record.location or record.source,
        "ctz": timezone or settings.radar.timezone,
    }
    return f"{settings.radar.calendar_base_url}?{urlencode(params, quote_via=quote)}"
