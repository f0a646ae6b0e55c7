"""Utility modules for the radar."""

from radar.utils.logging import setup_logging
from radar.utils.text import clean_text, normalize_for_signature, sanitize_filename

__all__ = [
    # Logging
    "setup_logging",
    # Text utilities
    "normalize_for_signature",
    "clean_text",
    "sanitize_filename",
]
