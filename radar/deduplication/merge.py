"""Cross-session deduplication and merge of scan history."""

from collections.abc import Iterable, Mapping
from datetime import datetime

from loguru import logger

from radar.deduplication.signature import record_signature
from radar.models import Category, Criticality, Record, Session, UserFlag
from radar.normalizers.dates import parse_start, resolve_now, yesterday_midnight


def session_view(session: Session) -> list[Record]:
    """Records of one session, as stored. Sessions are unique by construction."""
    return list(session.items)


def merge_sessions(
    history: Iterable[Session],
    fields: Iterable[str] | None = None,
) -> dict[str, Record]:
    """Fold all sessions into one record per signature.

    Sessions are visited oldest to newest (ascending id). When a signature
    is seen again, the incoming record's content replaces the accumulated
    one, so the freshest scan's text wins, while every user flag is OR-ed:
    once set anywhere it stays set.

    Returns:
        Mapping of signature to merged record, in first-seen order
    """
    fields = tuple(fields) if fields is not None else None
    merged: dict[str, Record] = {}

    for session in sorted(history, key=lambda s: s.id):
        for item in session.items:
            signature = record_signature(item, fields)
            existing = merged.get(signature)
            merged[signature] = item if existing is None else existing.with_content_of(item)

    return merged


def consolidate(
    history: Iterable[Session],
    now: datetime | None = None,
    hide_past: bool = False,
    only_high_priority: bool = False,
    category: Category | str | None = None,
    fields: Iterable[str] | None = None,
) -> list[Record]:
    """
    Build the consolidated view across all sessions.

    Args:
        history: All stored sessions, any order
        now: Reference instant for date parsing and the past filter
        hide_past: Drop records starting before yesterday 00:00
        only_high_priority: Keep HIGH criticality only
        category: Keep a single category
        fields: Signature fields override

    Returns:
        Merged records sorted by parsed start instant (stable on ties)
    """
    history = list(history)
    now = resolve_now(now)
    merged = merge_sessions(history, fields)

    keyed = sorted(
        ((parse_start(record.date, now), record) for record in merged.values()),
        key=lambda pair: pair[0],
    )

    if hide_past:
        cutoff = yesterday_midnight(now)
        keyed = [(start, record) for start, record in keyed if start >= cutoff]

    records = [record for _, record in keyed]

    if only_high_priority:
        records = [r for r in records if r.criticality == Criticality.HIGH]

    if category:
        wanted = Category(str(getattr(category, "value", category)).strip().upper())
        records = [r for r in records if r.category == wanted]

    logger.debug(
        f"Consolidated {sum(len(s.items) for s in history)} records "
        f"from {len(history)} sessions into {len(records)}"
    )
    return records


def set_flag_global(
    history: Iterable[Session],
    record: Record | Mapping,
    value: bool,
    flag: UserFlag = UserFlag.READ,
    fields: Iterable[str] | None = None,
) -> tuple[list[Session], list[int]]:
    """
    Set one flag on every stored copy of a record.

    Every session holding a record with the same signature gets that
    record's flag overwritten; content is left alone. Applying the same
    update twice gives the same history.

    Returns:
        (new history, ids of the sessions that were touched)
    """
    fields = tuple(fields) if fields is not None else None
    signature = record_signature(record, fields)
    updated: list[Session] = []
    touched: list[int] = []

    for session in history:
        matches = [record_signature(item, fields) == signature for item in session.items]
        if not any(matches):
            updated.append(session)
            continue

        items = [
            item.with_flag(flag, value) if is_match else item
            for item, is_match in zip(session.items, matches)
        ]
        updated.append(session.model_copy(update={"items": items}))
        touched.append(session.id)

    logger.info(f"Set {UserFlag(flag).value}={bool(value)} on {len(touched)} sessions")
    return updated, touched
