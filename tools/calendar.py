"""Google Calendar source: fetch events in the dispatch window and mark them.

An event counts as processed when its description carries the completion
marker.
"""

import asyncio
import logging
from datetime import datetime

from items import CalendarEvent
from markers import append_marker, has_marker
from utils import query_window, to_rfc3339

log = logging.getLogger(__name__)


async def get_events(
    service, calendar_ids: list[str], time_range: int, now: datetime | None = None
) -> list[CalendarEvent]:
    """Fetch events from each calendar, one query per calendar.

    A failing calendar is logged and contributes no events.
    """
    time_min, time_max = query_window(time_range, now)
    log.debug("Fetching events from %s to %s", to_rfc3339(time_min), to_rfc3339(time_max))

    events: list[CalendarEvent] = []
    for calendar_id in calendar_ids:
        log.debug("Fetching events from calendar: %s", calendar_id)

        def _run(calendar_id=calendar_id) -> list[dict]:
            result = (
                service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=to_rfc3339(time_min),
                    timeMax=to_rfc3339(time_max),
                    singleEvents=True,
                    orderBy="startTime",
                )
                .execute()
            )
            return result.get("items") or []

        try:
            items = await asyncio.to_thread(_run)
        except Exception as e:
            log.warning("Failed to fetch events from calendar %s: %s", calendar_id, e)
            continue

        log.debug("Found %d events in calendar %s", len(items), calendar_id)
        for raw in items:
            events.append(
                CalendarEvent(
                    raw=raw,
                    calendar_id=calendar_id,
                    is_incomplete=not has_marker(raw.get("description")),
                )
            )
    return events


async def update_event_description(service, event: CalendarEvent, run_url: str) -> None:
    """Append the completion marker to the event's description."""
    description = append_marker(event.body, run_url)

    def _run():
        return (
            service.events()
            .patch(
                calendarId=event.calendar_id,
                eventId=event.id,
                body={"description": description},
            )
            .execute()
        )

    await asyncio.to_thread(_run)
    log.debug("Updated description for event %s", event.id)
