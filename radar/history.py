"""
Operations on the scan history.

The history is a plain list of Sessions, newest first. Every function here
takes the history as an explicit value and returns a new one; persistence is
the caller's job (see radar.store).
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from loguru import logger

from radar.models import Record, Session, UserFlag
from radar.normalizers.dates import civil_zone, local_now

FRENCH_DAYS = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")
FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)


def format_session_label(moment: datetime) -> str:
    """Long French label, e.g. 'dimanche 18 octobre 2026 à 14:05'."""
    return (
        f"{FRENCH_DAYS[moment.weekday()]} {moment.day} "
        f"{FRENCH_MONTHS[moment.month - 1]} {moment.year} à {moment:%H:%M}"
    )


def _epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=civil_zone())
    return int(moment.timestamp() * 1000)


def new_session(records: Iterable[Record], now: datetime | None = None) -> Session:
    """Create a session stamped with ``now`` (current local time by default)."""
    now = now or local_now()
    local = now.astimezone(civil_zone()).replace(tzinfo=None) if now.tzinfo else now
    return Session(id=_epoch_millis(now), date_str=format_session_label(local), items=list(records))


def sorted_by_id(history: Iterable[Session], newest_first: bool = False) -> list[Session]:
    return sorted(history, key=lambda s: s.id, reverse=newest_first)


def latest_session(history: Sequence[Session]) -> Session | None:
    """Newest session, or None for an empty history."""
    return max(history, key=lambda s: s.id, default=None)


def find_session(history: Iterable[Session], session_id: int) -> Session | None:
    return next((s for s in history if s.id == session_id), None)


def append_session(history: Sequence[Session], session: Session) -> list[Session]:
    """Prepend a new session, keeping ids strictly increasing."""
    newest = latest_session(history)
    if newest is not None and session.id <= newest.id:
        session = session.model_copy(update={"id": newest.id + 1})
    return [session, *history]


def set_flag_at(
    history: Sequence[Session],
    session_id: int | None,
    index: int,
    value: bool,
    flag: UserFlag = UserFlag.READ,
) -> list[Session]:
    """
    Set one flag on the record at ``index`` of one session.

    ``session_id=None`` targets the newest session (the current scan).
    An unknown session or an out-of-range index leaves the history as is.
    """
    if session_id is None:
        newest = latest_session(history)
        if newest is None:
            return list(history)
        session_id = newest.id

    updated = []
    for session in history:
        if session.id == session_id and 0 <= index < len(session.items):
            items = list(session.items)
            items[index] = items[index].with_flag(flag, value)
            session = session.model_copy(update={"items": items})
        updated.append(session)
    return updated


def delete_session(history: Iterable[Session], session_id: int) -> list[Session]:
    """Drop one session wholesale."""
    history = list(history)
    remaining = [s for s in history if s.id != session_id]
    if len(remaining) == len(history):
        logger.warning(f"Session {session_id} not found, nothing deleted")
    return remaining
