"""Signature keys used to recognise the same record across scans."""

from collections.abc import Iterable, Mapping

from radar.config import settings
from radar.models import Record
from radar.utils.text import normalize_for_signature


def _field_value(record: Record | Mapping, field: str) -> str:
    if isinstance(record, Mapping):
        value = record.get(field)
        if value is None and field == "headline":
            value = record.get("title")
        return value or ""
    return getattr(record, field, "") or ""


def record_signature(record: Record | Mapping, fields: Iterable[str] | None = None) -> str:
    """
    Build the identity key of a record.

    Each defining field, in order, is lower-cased and stripped of everything
    outside [a-z0-9]; the results are concatenated. Two records that differ
    only by case, punctuation or spacing in those fields share a signature.
    Distinct items whose text normalizes identically collide: there is no
    stronger identifier to fall back on.

    Args:
        record: Record model or raw dict
        fields: Defining fields (defaults to RADAR_SIGNATURE_FIELDS)

    Returns:
        Signature string (possibly empty)
    """
    fields = tuple(fields) if fields is not None else settings.radar.signature_fields_list
    return "".join(normalize_for_signature(str(_field_value(record, f))) for f in fields)
