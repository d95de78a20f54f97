import logging
from datetime import date, datetime, timedelta, timezone

import config

log = logging.getLogger(__name__)


def parse_instant(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp or bare date into an aware UTC datetime.

    Bare dates and naive timestamps are read as UTC. Returns None when the
    value is missing or unparseable.
    """
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        if len(raw) == 10:
            d = date.fromisoformat(raw)
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        log.debug("Unparseable timestamp %r", raw)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    """Format as a UTC instant with a trailing ``Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def query_window(time_range: int, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return (time_min, time_max): ``time_range`` minutes back, fixed buffer ahead."""
    now = now or datetime.now(timezone.utc)
    return (
        now - timedelta(minutes=time_range),
        now + timedelta(minutes=config.BUFFER_MINUTES),
    )
