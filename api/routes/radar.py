"""
Strategic Radar API Routes.

Triggers scans, serves the archived sessions and the consolidated
intelligence base, flips read/added flags, builds calendar links and
exports CSV.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from radar.calendar_link import build_calendar_link
from radar.config import settings
from radar.deduplication import consolidate, session_view, set_flag_global
from radar.errors import GenerationError, InvalidResultError, ScanInProgressError
from radar.export import export_filename, records_to_csv
from radar.history import delete_session, find_session, set_flag_at, sorted_by_id
from radar.models import Category, Record, Session, UserFlag
from radar.scanner import AnthropicGenerator, Generator, is_scan_running, run_scan
from radar.store import SessionStore, build_kv_store

logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# Dependencies
# =============================================================================


@lru_cache()
def get_store() -> SessionStore:
    return SessionStore(build_kv_store())


@lru_cache()
def get_generator() -> Generator:
    return AnthropicGenerator()


# =============================================================================
# Request / Response Models
# =============================================================================


class SessionSummary(BaseModel):
    id: int
    dateStr: str
    item_count: int
    read_count: int


class FlagUpdate(BaseModel):
    flag: UserFlag = UserFlag.READ
    value: bool = True


class GlobalFlagRequest(FlagUpdate):
    record: Record


class GlobalFlagResponse(BaseModel):
    touched: list[int]


class CalendarLinkRequest(BaseModel):
    record: Record
    mark_added: bool = False


class CalendarLinkResponse(BaseModel):
    url: str
    touched: list[int] = []


class ScanStatus(BaseModel):
    running: bool


# =============================================================================
# Helpers
# =============================================================================


def _get_session_or_404(store: SessionStore, session_id: int) -> Session:
    session = find_session(store.load(), session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# =============================================================================
# Scan
# =============================================================================


@router.post("/scan", response_model=Session)
def scan(
    store: SessionStore = Depends(get_store),
    generator: Generator = Depends(get_generator),
):
    """Run one scan and archive its records as a new session."""
    try:
        return run_scan(store, generator)
    except ScanInProgressError as e:
        raise HTTPException(status_code=409, detail="A scan is already running") from e
    except GenerationError as e:
        logger.error(f"Scan generation failed: {e}")
        raise HTTPException(status_code=502, detail="Generation service unavailable") from e
    except InvalidResultError as e:
        logger.warning(f"Scan returned no usable records: {e}")
        raise HTTPException(status_code=422, detail="No usable items in generator response") from e


@router.get("/scan/status", response_model=ScanStatus)
def scan_status():
    return ScanStatus(running=is_scan_running())


# =============================================================================
# Sessions
# =============================================================================


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(store: SessionStore = Depends(get_store)):
    """Archived sessions, newest first."""
    return [
        SessionSummary(
            id=s.id,
            dateStr=s.date_str,
            item_count=len(s.items),
            read_count=sum(1 for item in s.items if item.read),
        )
        for s in sorted_by_id(store.load(), newest_first=True)
    ]


@router.get("/sessions/{session_id}", response_model=Session)
def get_session(session_id: int, store: SessionStore = Depends(get_store)):
    return _get_session_or_404(store, session_id)


@router.delete("/sessions/{session_id}", status_code=204)
def remove_session(session_id: int, store: SessionStore = Depends(get_store)):
    _get_session_or_404(store, session_id)
    store.update(lambda history: delete_session(history, session_id))
    logger.info(f"Deleted session {session_id}")
    return Response(status_code=204)


@router.delete("/sessions", status_code=204)
def clear_sessions(store: SessionStore = Depends(get_store)):
    store.clear()
    logger.info("Cleared history")
    return Response(status_code=204)


@router.patch("/sessions/{session_id}/items/{index}", response_model=Session)
def update_item_flag(
    session_id: int,
    index: int,
    update: FlagUpdate,
    store: SessionStore = Depends(get_store),
):
    """Set one flag on one item of one session."""
    session = _get_session_or_404(store, session_id)
    if not 0 <= index < len(session.items):
        raise HTTPException(status_code=404, detail="Item not found")

    history = store.update(
        lambda current: set_flag_at(current, session_id, index, update.value, update.flag)
    )
    return find_session(history, session_id)


# =============================================================================
# Consolidated base
# =============================================================================


@router.get("/master", response_model=list[Record])
def get_master(
    hide_past: bool = Query(False),
    high_only: bool = Query(False),
    category: Category | None = Query(None),
    store: SessionStore = Depends(get_store),
):
    """All sessions merged by signature, sorted by start date."""
    return consolidate(
        store.load(),
        hide_past=hide_past,
        only_high_priority=high_only,
        category=category,
    )


@router.post("/master/flag", response_model=GlobalFlagResponse)
def update_master_flag(request: GlobalFlagRequest, store: SessionStore = Depends(get_store)):
    """Set one flag on every stored copy of a record."""
    touched: list[int] = []

    def change(history):
        updated, ids = set_flag_global(history, request.record, request.value, request.flag)
        touched.extend(ids)
        return updated

    store.update(change)
    return GlobalFlagResponse(touched=touched)


# =============================================================================
# Calendar link
# =============================================================================


@router.post("/calendar-link", response_model=CalendarLinkResponse)
def calendar_link(request: CalendarLinkRequest, store: SessionStore = Depends(get_store)):
    """Build the calendar deep link; optionally flag the record as added everywhere."""
    url = build_calendar_link(request.record)
    touched: list[int] = []

    if request.mark_added:
        def change(history):
            updated, ids = set_flag_global(history, request.record, True, UserFlag.ADDED)
            touched.extend(ids)
            return updated

        store.update(change)

    return CalendarLinkResponse(url=url, touched=touched)


# =============================================================================
# Export
# =============================================================================


@router.get("/export")
def export_csv(
    session_id: int | None = Query(None),
    hide_past: bool = Query(False),
    store: SessionStore = Depends(get_store),
):
    """CSV download of one session, or of the consolidated base."""
    if session_id is not None:
        records = session_view(_get_session_or_404(store, session_id))
        prefix = settings.radar.export_prefix
    else:
        records = consolidate(store.load(), hide_past=hide_past)
        prefix = settings.radar.master_export_prefix

    if not records:
        return Response(status_code=204)

    return Response(
        content=records_to_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(prefix)}"'},
    )
