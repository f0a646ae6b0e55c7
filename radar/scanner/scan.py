"""One scan: prompt the generator, validate its records, commit a session."""

import threading
from datetime import datetime
from pathlib import Path

from loguru import logger

from radar.config import GeneratorSettings, settings
from radar.errors import ScanInProgressError
from radar.history import append_session, new_session
from radar.models import Session
from radar.normalizers.dates import resolve_now
from radar.scanner.extraction import extract_json_array, parse_records
from radar.scanner.generator import Generator
from radar.store import SessionStore

PROMPT_PATH = Path(__file__).parent / "prompts" / "scan.txt"

# Scans are strictly sequential
_scan_lock = threading.Lock()


def _load_prompt() -> str:
    return PROMPT_PATH.read_text(encoding="utf-8")


def build_prompt(now: datetime | None = None, generator_settings: GeneratorSettings | None = None) -> str:
    generator_settings = generator_settings or settings.generator
    return _load_prompt().format(
        current_date=resolve_now(now).strftime("%d/%m/%Y"),
        min_items=generator_settings.min_items,
        max_items=generator_settings.max_items,
    )


def is_scan_running() -> bool:
    return _scan_lock.locked()


def run_scan(store: SessionStore, generator: Generator, now: datetime | None = None) -> Session:
    """
    Run one scan and append its records to the history as a new session.

    Nothing is written unless the generator answered with at least one
    usable record; prior history is untouched on failure.

    Raises:
        ScanInProgressError: another scan is running
        GenerationError: the generator call failed
        InvalidResultError: the reply held no usable JSON array of records
    """
    if not _scan_lock.acquire(blocking=False):
        raise ScanInProgressError("A scan is already running")

    try:
        logger.info("Scanning: France (études), Monde (géopo), Tech (apps & disruptions)")
        text = generator.generate(build_prompt(now))

        records = parse_records(extract_json_array(text))
        session = new_session(records, now)
        history = store.update(lambda current: append_session(current, session))

        logger.info(f"Scan complete: {len(records)} items in session {history[0].id}")
        return history[0]
    finally:
        _scan_lock.release()
