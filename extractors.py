"""Parse dispatch overrides embedded in titles, descriptions and notes."""

import json
import logging
import re
from typing import Any

log = logging.getLogger(__name__)

EVENT_TYPE_RE = re.compile(r"\{event_type:\s*([A-Za-z0-9_-]+)\s*\}")
JSON_BLOCK_RE = re.compile(r"```json\s*(.*?)```", re.DOTALL)


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def extract_event_type(title: str | None, description: str | None, default: str) -> str:
    """Return the ``{event_type: ...}`` tag value; title wins over description."""
    for text in (title, description):
        if not text:
            continue
        match = EVENT_TYPE_RE.search(text)
        if match:
            return match.group(1)
    return default


def extract_custom_payload(text: str | None) -> dict[str, Any]:
    """Parse the first ```json fenced block in ``text`` into a dict.

    Missing or empty blocks give ``{}``. Invalid JSON or a non-object value
    logs a warning and also gives ``{}``.
    """
    if not text:
        return {}

    match = JSON_BLOCK_RE.search(text)
    if not match:
        return {}

    content = match.group(1).strip()
    if not content:
        return {}

    try:
        parsed = json.loads(content, parse_constant=_reject_constant)
    except ValueError as e:
        log.warning("Failed to parse JSON payload: %s", e)
        return {}

    if not isinstance(parsed, dict):
        log.warning("JSON payload is not an object (got %s), using empty payload", type(parsed).__name__)
        return {}
    return parsed
