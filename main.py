import asyncio
import logging
import os
import sys

import config
from dispatcher import DispatchResult, run_dispatch
from tools.github_dispatch import get_run_url
from tools.google_auth import build_services, get_credentials

log = logging.getLogger("calendar_dispatch")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
class ActionsFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands where one exists."""

    COMMANDS = {
        logging.DEBUG: "::debug::",
        logging.WARNING: "::warning::",
        logging.ERROR: "::error::",
        logging.CRITICAL: "::error::",
    }

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if not command:
            return text
        # workflow commands are single-line
        escaped = text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"{command}{escaped}"


def setup_logging() -> None:
    debug = os.getenv("RUNNER_DEBUG") == "1" or os.getenv("LOG_LEVEL", "").upper() == "DEBUG"
    handler = logging.StreamHandler(sys.stdout)
    if os.getenv("GITHUB_ACTIONS") == "true":
        handler.setFormatter(ActionsFormatter("%(name)s: %(message)s"))
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
        force=True,
    )
    # discovery/http chatter
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------
def write_outputs(result: DispatchResult) -> None:
    """Append counters to $GITHUB_OUTPUT when running inside Actions."""
    outputs = result.as_outputs()
    output_path = os.getenv("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
async def run() -> int:
    """Run one dispatch pass. Returns the process exit status."""
    result = DispatchResult()
    try:
        inputs = config.load_inputs()
        log.debug("Time range: %d minutes", inputs.time_range)
        log.debug("Calendar IDs: %s", ", ".join(inputs.calendar_ids))
        log.debug("Task list IDs: %s", ", ".join(inputs.task_list_ids))
        log.debug("Repository: %s", inputs.repository)
        log.debug("Default event type: %s", inputs.event_type)

        if not inputs.calendar_ids and not inputs.task_list_ids:
            log.warning("No calendar IDs or task list IDs provided. Nothing to process.")
            write_outputs(result)
            return 0

        log.info("Authenticating with Google APIs...")
        credentials = get_credentials(inputs.google_credentials)
        calendar_service, tasks_service = build_services(credentials)

        run_url = get_run_url()
        log.info("Run URL: %s", run_url)

        result = await run_dispatch(inputs, calendar_service, tasks_service, run_url)
    except Exception as e:
        log.error("%s", e)
        log.debug("Run failed", exc_info=True)
        return 1

    log.info("Processing complete!")
    log.info("Dispatched: %d", result.dispatched)
    log.info("Skipped: %d", result.skipped)
    log.info("Errors: %d", result.errors)
    write_outputs(result)
    return 0


def main() -> None:
    setup_logging()
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
