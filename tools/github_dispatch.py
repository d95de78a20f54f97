"""GitHub repository_dispatch sender."""

import logging
import os

import httpx

import config
from items import DispatchPayload

log = logging.getLogger(__name__)


def get_run_url() -> str:
    """URL of the current workflow run, from the Actions environment."""
    repository = os.getenv("GITHUB_REPOSITORY", "")
    run_id = os.getenv("GITHUB_RUN_ID", "")
    return f"{config.GITHUB_SERVER_URL}/{repository}/actions/runs/{run_id}"


async def send_dispatch(
    token: str,
    repository: str,
    event_type: str,
    payload: DispatchPayload,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """POST a repository_dispatch event carrying ``payload`` as client_payload.

    Raises ValueError for a malformed ``owner/repo`` before any request, and
    httpx.HTTPStatusError when GitHub rejects the call. Nothing is retried.
    """
    owner, repo = config.split_repository(repository)
    log.debug("Sending dispatch to %s/%s with event type: %s", owner, repo, event_type)

    url = f"{config.GITHUB_API_URL}/repos/{owner}/{repo}/dispatches"
    headers = {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": config.GITHUB_API_VERSION,
    }
    body = {"event_type": event_type, "client_payload": payload}

    async with httpx.AsyncClient(timeout=config.DISPATCH_TIMEOUT, transport=transport) as http:
        resp = await http.post(url, json=body, headers=headers)
        resp.raise_for_status()

    log.debug("Dispatch sent successfully")
