"""Calendar events and tasks as processed by the dispatcher.

Both shapes expose ``id``, ``title``, ``body``, ``scheduled_at``,
``container_id`` and ``is_incomplete``, tagged by ``source_type``.
``raw`` is the provider resource exactly as returned.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Literal, TypedDict

from utils import parse_instant

SourceType = Literal["event", "task"]


@dataclass(frozen=True)
class CalendarEvent:
    raw: dict[str, Any]
    calendar_id: str
    is_incomplete: bool

    source_type: ClassVar[SourceType] = "event"

    @property
    def id(self) -> str | None:
        return self.raw.get("id")

    @property
    def title(self) -> str | None:
        return self.raw.get("summary")

    @property
    def body(self) -> str | None:
        return self.raw.get("description")

    @property
    def container_id(self) -> str:
        return self.calendar_id

    @property
    def scheduled_at(self) -> datetime | None:
        start = self.raw.get("start") or {}
        return parse_instant(start.get("dateTime") or start.get("date"))


@dataclass(frozen=True)
class GoogleTask:
    raw: dict[str, Any]
    task_list_id: str
    is_incomplete: bool

    source_type: ClassVar[SourceType] = "task"

    @property
    def id(self) -> str | None:
        return self.raw.get("id")

    @property
    def title(self) -> str | None:
        return self.raw.get("title")

    @property
    def body(self) -> str | None:
        return self.raw.get("notes")

    @property
    def container_id(self) -> str:
        return self.task_list_id

    @property
    def scheduled_at(self) -> datetime | None:
        return parse_instant(self.raw.get("due"))


Item = CalendarEvent | GoogleTask


class DispatchPayload(TypedDict):
    event: dict[str, Any]
    custom: dict[str, Any]
    source_type: SourceType


def build_payload(item: Item, custom: dict[str, Any] | None) -> DispatchPayload:
    return {
        "event": item.raw,
        "custom": custom if isinstance(custom, dict) else {},
        "source_type": item.source_type,
    }


def is_past_scheduled_time(item: Item, now: datetime | None = None) -> bool:
    """True iff the item has a scheduled instant strictly before ``now``.

    Undated items are never past due.
    """
    scheduled = item.scheduled_at
    if scheduled is None:
        return False
    now = now or datetime.now(timezone.utc)
    return scheduled < now
