import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from items import GoogleTask, is_past_scheduled_time
from markers import build_marker
from tools.google_tasks import get_tasks, update_task_notes

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
RUN_URL = "https://github.com/octo/repo/actions/runs/7"


class TestGetTasks(unittest.IsolatedAsyncioTestCase):
    async def test_queries_due_window_including_completed(self):
        service = MagicMock()
        service.tasks.return_value.list.return_value.execute.return_value = {"items": []}

        await get_tasks(service, ["list-a"], 30, now=NOW)

        service.tasks.return_value.list.assert_called_once_with(
            tasklist="list-a",
            dueMin="2026-03-01T11:30:00Z",
            dueMax="2026-03-01T12:10:00Z",
            showCompleted=True,
            showHidden=True,
            maxResults=100,
        )

    async def test_incomplete_follows_status_not_marker(self):
        items = [
            {"id": "t1", "status": "needsAction", "notes": build_marker(RUN_URL)},
            {"id": "t2", "status": "completed"},
            {"id": "t3"},
        ]
        service = MagicMock()
        service.tasks.return_value.list.return_value.execute.return_value = {"items": items}

        tasks = await get_tasks(service, ["list-a"], 30, now=NOW)

        self.assertEqual([t.is_incomplete for t in tasks], [True, False, True])
        self.assertTrue(all(t.task_list_id == "list-a" for t in tasks))

    async def test_failed_list_does_not_abort_others(self):
        service = MagicMock()
        ok = MagicMock()
        ok.execute.return_value = {"items": [{"id": "t1", "status": "needsAction"}]}
        broken = MagicMock()
        broken.execute.side_effect = RuntimeError("quota exceeded")
        service.tasks.return_value.list.side_effect = [broken, ok]

        with self.assertLogs("tools.google_tasks", level="WARNING") as logs:
            tasks = await get_tasks(service, ["bad-list", "list-a"], 30, now=NOW)

        self.assertEqual([t.id for t in tasks], ["t1"])
        self.assertIn("bad-list", logs.output[0])
        self.assertIn("quota exceeded", logs.output[0])


class TestUpdateTaskNotes(unittest.IsolatedAsyncioTestCase):
    async def test_patches_notes(self):
        service = MagicMock()
        task = GoogleTask(raw={"id": "t1", "notes": "ship it"}, task_list_id="list-a",
                          is_incomplete=True)

        await update_task_notes(service, task, RUN_URL)

        service.tasks.return_value.patch.assert_called_once_with(
            tasklist="list-a",
            task="t1",
            body={"notes": "ship it\n\n" + build_marker(RUN_URL)},
        )

    async def test_patch_failure_propagates(self):
        service = MagicMock()
        service.tasks.return_value.patch.return_value.execute.side_effect = RuntimeError("403")
        task = GoogleTask(raw={"id": "t1"}, task_list_id="list-a", is_incomplete=True)

        with self.assertRaises(RuntimeError):
            await update_task_notes(service, task, RUN_URL)


class TestTaskPastDueTime(unittest.TestCase):
    def test_due_comparisons(self):
        def task(due):
            raw = {"id": "t1"} if due is None else {"id": "t1", "due": due}
            return GoogleTask(raw=raw, task_list_id="list-a", is_incomplete=True)

        self.assertTrue(is_past_scheduled_time(task("2026-03-01T00:00:00.000Z"), NOW))
        self.assertFalse(is_past_scheduled_time(task("2026-03-02T00:00:00.000Z"), NOW))
        self.assertFalse(is_past_scheduled_time(task(None), NOW))


if __name__ == "__main__":
    unittest.main()
