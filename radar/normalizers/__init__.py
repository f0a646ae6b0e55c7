"""
Data normalization utilities.

These modules turn the loose text written by the generator into values the
rest of the radar can sort and filter on.
"""

from .dates import (
    DateRange,
    extract_date_range,
    local_now,
    parse_start,
    resolve_now,
    yesterday_midnight,
)

__all__ = [
    'DateRange',
    'extract_date_range',
    'local_now',
    'parse_start',
    'resolve_now',
    'yesterday_midnight',
]
