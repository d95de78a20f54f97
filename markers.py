"""Completion marker written into event descriptions and task notes.

The marker is the only record that an item was dispatched: any text holding
``config.MARKER_PREFIX`` counts as processed, whatever follows it.
"""

import config


def build_marker(run_url: str) -> str:
    return f"{config.MARKER_PREFIX}\n[{config.RUN_LINK_LABEL}]: {run_url}"


def has_marker(text: str | None) -> bool:
    if not text:
        return False
    return config.MARKER_PREFIX in text


def append_marker(text: str | None, run_url: str) -> str:
    """Return ``text`` with the marker appended after a blank line.

    Blank or missing text is replaced by the marker alone. Callers must not
    pass text that already carries a marker.
    """
    marker = build_marker(run_url)
    if not text or not text.strip():
        return marker
    return f"{text}\n\n{marker}"
