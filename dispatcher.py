"""Dispatch due calendar events and tasks exactly once per marker.

Each fetched item is handled on its own:

    fetched -> skipped (already processed)
            -> skipped (not due yet)
            -> eligible -> dispatched | errored

There is no local state. An item is only recognised as processed on a later
run because its description/notes (events) or status (tasks) say so, so an
item whose dispatch or write-back failed is simply retried next run.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import config
from extractors import extract_custom_payload, extract_event_type
from items import Item, build_payload, is_past_scheduled_time
from tools.calendar import get_events, update_event_description
from tools.github_dispatch import send_dispatch
from tools.google_tasks import get_tasks, update_task_notes

log = logging.getLogger(__name__)

MarkProcessed = Callable[[Item, str], Awaitable[None]]


class Outcome(str, Enum):
    DISPATCHED = "dispatched"
    SKIPPED_PROCESSED = "skipped_processed"
    SKIPPED_NOT_DUE = "skipped_not_due"
    ERRORED = "errored"


@dataclass
class DispatchResult:
    dispatched: int = 0
    skipped: int = 0
    errors: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.DISPATCHED:
            self.dispatched += 1
        elif outcome is Outcome.ERRORED:
            self.errors += 1
        else:
            self.skipped += 1

    def as_outputs(self) -> dict[str, str]:
        return {
            config.OUTPUT_DISPATCHED: str(self.dispatched),
            config.OUTPUT_SKIPPED: str(self.skipped),
            config.OUTPUT_ERRORS: str(self.errors),
        }


async def process_item(
    item: Item,
    inputs: config.ActionInputs,
    run_url: str,
    mark_processed: MarkProcessed,
    now: datetime | None = None,
) -> Outcome:
    """Run one item through the eligibility checks, dispatch and write-back.

    Dispatch and write-back failures are logged and reported as ERRORED;
    they never propagate.
    """
    kind = item.source_type
    if not item.is_incomplete:
        log.debug("Skipping %s %s: already processed", kind, item.id)
        return Outcome.SKIPPED_PROCESSED

    if not is_past_scheduled_time(item, now):
        log.debug("Skipping %s %s: scheduled time not yet passed", kind, item.id)
        return Outcome.SKIPPED_NOT_DUE

    try:
        event_type = extract_event_type(item.title, item.body, inputs.event_type)
        payload = build_payload(item, extract_custom_payload(item.body))

        log.info("Dispatching %s: %s (type: %s)", kind, item.title, event_type)
        await send_dispatch(inputs.github_token, inputs.repository, event_type, payload)
        await mark_processed(item, run_url)
    except Exception as e:
        log.warning("Failed to process %s %s: %s", kind, item.id, e)
        return Outcome.ERRORED
    return Outcome.DISPATCHED


async def process_items(
    items: Sequence[Item],
    inputs: config.ActionInputs,
    run_url: str,
    mark_processed: MarkProcessed,
    result: DispatchResult,
    now: datetime | None = None,
) -> DispatchResult:
    for item in items:
        outcome = await process_item(item, inputs, run_url, mark_processed, now)
        result.record(outcome)
    return result


async def run_dispatch(
    inputs: config.ActionInputs,
    calendar_service,
    tasks_service,
    run_url: str,
    now: datetime | None = None,
) -> DispatchResult:
    """Process configured calendars, then task lists, sequentially."""
    result = DispatchResult()

    if inputs.calendar_ids:
        log.info("Processing calendar events...")
        events = await get_events(calendar_service, inputs.calendar_ids, inputs.time_range, now)
        log.info("Found %d events", len(events))

        async def mark_event(item, url):
            await update_event_description(calendar_service, item, url)

        await process_items(events, inputs, run_url, mark_event, result, now)

    if inputs.task_list_ids:
        log.info("Processing tasks...")
        tasks = await get_tasks(tasks_service, inputs.task_list_ids, inputs.time_range, now)
        log.info("Found %d tasks", len(tasks))

        async def mark_task(item, url):
            await update_task_notes(tasks_service, item, url)

        await process_items(tasks, inputs, run_url, mark_task, result, now)

    return result
