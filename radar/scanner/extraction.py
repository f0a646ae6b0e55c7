"""Turning generator text into validated records."""

import json
import re

from loguru import logger
from pydantic import ValidationError

from radar.errors import InvalidResultError
from radar.models import Record

# ```json ... ``` or ``` ... ```, any language tag
_FENCED_BLOCK = re.compile(r"```[\w-]*[ \t]*\n?(.*?)```", re.DOTALL)


def _try_parse(candidate: str):
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None


def extract_json_array(text: str | None) -> list:
    """
    Locate and parse the JSON array embedded in generator output.

    Strategies, in order:
    1. the first fenced code block, with or without a language tag
    2. the substring from the first '[' to the last ']'

    Raises:
        InvalidResultError: neither strategy yields a non-empty JSON array
    """
    text = text or ""
    parsed = None

    match = _FENCED_BLOCK.search(text)
    if match:
        parsed = _try_parse(match.group(1).strip())

    if not isinstance(parsed, list):
        start, end = text.find("["), text.rfind("]")
        if start != -1 and end > start:
            parsed = _try_parse(text[start:end + 1])

    if not isinstance(parsed, list):
        raise InvalidResultError("Invalid response format: no JSON array found")
    if not parsed:
        raise InvalidResultError("No relevant item found in response")
    return parsed


def parse_records(items: list) -> list[Record]:
    """Validate raw items into Records, skipping unusable entries.

    Raises:
        InvalidResultError: no entry is a usable record
    """
    records = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping item {i}: not an object")
            continue
        try:
            record = Record.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Skipping item {i}: {e.error_count()} validation errors")
            continue
        if not record.headline:
            logger.warning(f"Skipping item {i}: no headline")
            continue
        records.append(record)

    if not records:
        raise InvalidResultError("No relevant item found in response")
    return records
