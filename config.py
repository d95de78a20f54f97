import logging as _logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_log = _logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Fatal problem with the run's inputs; nothing downstream executes."""


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    """Parse an integer env var with safe fallback on invalid input."""
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = default
    if minimum is not None:
        value = max(minimum, value)
    return value


def _input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, default: str = "") -> str:
    """Read an action input, falling back to its plain env alias.

    ``time-range`` is looked up as ``INPUT_TIME-RANGE`` (how GitHub Actions
    passes inputs) and then ``TIME_RANGE``.
    """
    for key in (_input_env_name(name), name.replace("-", "_").upper()):
        raw = os.getenv(key)
        if raw is not None and raw.strip():
            return raw.strip()
    return default


def split_ids(raw: str) -> list[str]:
    """Split a comma-separated id list, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def split_repository(repository: str) -> tuple[str, str]:
    """Split ``owner/repo`` on the first slash.

    Raises ValueError naming the offending value when either segment is empty
    or the repo segment has another slash.
    """
    owner, _, repo = (repository or "").partition("/")
    if not owner or not repo or "/" in repo:
        raise ValueError(f"Invalid repository format: {repository}. Expected owner/repo")
    return owner, repo


# Completion marker
MARKER_PREFIX = "--- google-calendar-dispatch-action"
RUN_LINK_LABEL = "GitHub Actions Run"

# Query window
BUFFER_MINUTES = 10  # fixed look-ahead, independent of time-range
DEFAULT_TIME_RANGE = 30  # minutes

# Dispatch
DEFAULT_EVENT_TYPE = "calendar-dispatch"
DISPATCH_TIMEOUT = _env_int("DISPATCH_TIMEOUT", 30, minimum=1)  # seconds
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_SERVER_URL = os.getenv("GITHUB_SERVER_URL", "https://github.com").rstrip("/")
GITHUB_API_VERSION = "2022-11-28"

# Google
GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/tasks",
]
GOOGLE_CREDENTIALS_ENV = "GOOGLE_APPLICATION_CREDENTIALS"

# Outputs
OUTPUT_DISPATCHED = "dispatched-count"
OUTPUT_SKIPPED = "skipped-count"
OUTPUT_ERRORS = "error-count"


@dataclass(frozen=True)
class ActionInputs:
    github_token: str
    repository: str
    time_range: int = DEFAULT_TIME_RANGE
    calendar_ids: list[str] = field(default_factory=list)
    task_list_ids: list[str] = field(default_factory=list)
    google_credentials: str | None = None
    event_type: str = DEFAULT_EVENT_TYPE


def load_inputs() -> ActionInputs:
    """Collect the run's inputs from the environment.

    Raises ConfigurationError for a missing token or a malformed target
    repository, before any provider is contacted.
    """
    token = get_input("github-token")
    if not token:
        raise ConfigurationError("Input required and not supplied: github-token")

    raw_range = get_input("time-range")
    try:
        time_range = int(raw_range) if raw_range else DEFAULT_TIME_RANGE
    except ValueError:
        _log.warning("Invalid time-range %r, using %d minutes", raw_range, DEFAULT_TIME_RANGE)
        time_range = DEFAULT_TIME_RANGE
    time_range = max(0, time_range)

    repository = get_input("repository") or os.getenv("TARGET_REPOSITORY", "").strip()
    if not repository:
        repository = os.getenv("GITHUB_REPOSITORY", "").strip()
    try:
        split_repository(repository)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return ActionInputs(
        github_token=token,
        repository=repository,
        time_range=time_range,
        calendar_ids=split_ids(get_input("calendar-ids")),
        task_list_ids=split_ids(get_input("task-list-ids")),
        google_credentials=get_input("google-credentials") or None,
        event_type=get_input("event-type", DEFAULT_EVENT_TYPE),
    )
