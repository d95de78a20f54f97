"""Google Tasks source: fetch tasks due in the dispatch window and mark them.

Unlike events, a task's processed state comes from its provider status:
anything not ``completed`` is incomplete. The marker is still written to the
notes after dispatch.
"""

import asyncio
import logging
from datetime import datetime

from items import GoogleTask
from markers import append_marker
from utils import query_window, to_rfc3339

log = logging.getLogger(__name__)

MAX_RESULTS = 100


async def get_tasks(
    service, task_list_ids: list[str], time_range: int, now: datetime | None = None
) -> list[GoogleTask]:
    time_min, time_max = query_window(time_range, now)
    log.debug("Fetching tasks from %s to %s", to_rfc3339(time_min), to_rfc3339(time_max))

    tasks: list[GoogleTask] = []
    for task_list_id in task_list_ids:
        log.debug("Fetching tasks from task list: %s", task_list_id)

        def _run(task_list_id=task_list_id) -> list[dict]:
            result = (
                service.tasks()
                .list(
                    tasklist=task_list_id,
                    dueMin=to_rfc3339(time_min),
                    dueMax=to_rfc3339(time_max),
                    showCompleted=True,
                    showHidden=True,
                    maxResults=MAX_RESULTS,
                )
                .execute()
            )
            return result.get("items") or []

        try:
            items = await asyncio.to_thread(_run)
        except Exception as e:
            log.warning("Failed to fetch tasks from task list %s: %s", task_list_id, e)
            continue

        log.debug("Found %d tasks in task list %s", len(items), task_list_id)
        for raw in items:
            tasks.append(
                GoogleTask(
                    raw=raw,
                    task_list_id=task_list_id,
                    is_incomplete=raw.get("status") != "completed",
                )
            )
    return tasks


async def update_task_notes(service, task: GoogleTask, run_url: str) -> None:
    """Append the completion marker to the task's notes."""
    notes = append_marker(task.body, run_url)

    def _run():
        return (
            service.tasks()
            .patch(tasklist=task.task_list_id, task=task.id, body={"notes": notes})
            .execute()
        )

    await asyncio.to_thread(_run)
    log.debug("Updated notes for task %s", task.id)
