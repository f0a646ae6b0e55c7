"""Text processing utility functions for the radar."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_for_signature(text: str | None) -> str:
    """Normalize text into its signature form.

    Lower-cases, then drops every character outside ``[a-z0-9]``
    (whitespace, punctuation and accented letters included).

    Args:
        text: Raw text, may be None

    Returns:
        Normalized text, or empty string if input is empty/None
    """
    if not text:
        return ""
    return _NON_ALNUM.sub("", str(text).lower())


def clean_text(value) -> str:
    """Coerce a loosely-typed value to a stripped string ("" for None)."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(clean_text(v) for v in value if v is not None)
    return re.sub(r"\s+", " ", str(value)).strip()


def sanitize_filename(name: str, max_length: int = 100) -> str:
    """Convert a string to a safe filename.

    Args:
        name: Original name
        max_length: Maximum filename length

    Returns:
        Safe filename string
    """
    if not name:
        return "unnamed"

    # Remove/replace unsafe characters
    safe = re.sub(r'[<>:"/\\|?*]', '_', name)
    safe = re.sub(r'\s+', '_', safe)
    safe = re.sub(r'_+', '_', safe)
    safe = safe.strip('_')

    if len(safe) > max_length:
        safe = safe[:max_length]

    return safe or "unnamed"
