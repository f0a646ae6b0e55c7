"""
Deduplication pipeline components.

These modules recognise the same item across independent scans and merge
its sightings into one consolidated record.
"""

from radar.deduplication.merge import consolidate, merge_sessions, session_view, set_flag_global
from radar.deduplication.signature import record_signature

__all__ = [
    "record_signature",
    "session_view",
    "merge_sessions",
    "consolidate",
    "set_flag_global",
]
