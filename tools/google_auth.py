"""Google service-account credentials and API services.

Credential sources, in priority order:
- Inline service-account JSON (the ``google-credentials`` input)
- The key file named by GOOGLE_APPLICATION_CREDENTIALS
"""

import json
import logging
import os
from pathlib import Path

from google.oauth2 import service_account
from googleapiclient.discovery import build

import config

log = logging.getLogger(__name__)


class CredentialsError(config.ConfigurationError):
    """No usable Google credentials."""


def get_credentials(inline_json: str | None = None) -> service_account.Credentials:
    """Load service-account credentials scoped for Calendar and Tasks."""
    if inline_json:
        log.debug("Using credentials from input parameter")
        try:
            info = json.loads(inline_json)
        except json.JSONDecodeError as e:
            raise CredentialsError(f"Failed to parse credentials JSON: {e}") from e
        try:
            return service_account.Credentials.from_service_account_info(
                info, scopes=config.GOOGLE_SCOPES
            )
        except (ValueError, KeyError, TypeError) as e:
            raise CredentialsError(f"Failed to parse credentials JSON: {e}") from e

    key_path = os.getenv(config.GOOGLE_CREDENTIALS_ENV, "").strip()
    if key_path:
        log.debug("Using credentials from %s: %s", config.GOOGLE_CREDENTIALS_ENV, key_path)
        if not Path(key_path).is_file():
            raise CredentialsError(f"Credentials file not found: {key_path}")
        try:
            return service_account.Credentials.from_service_account_file(
                key_path, scopes=config.GOOGLE_SCOPES
            )
        except (ValueError, KeyError, TypeError) as e:
            raise CredentialsError(f"Failed to load credentials file {key_path}: {e}") from e

    raise CredentialsError(
        "No Google credentials provided. Please provide credentials via the "
        "google-credentials input or set GOOGLE_APPLICATION_CREDENTIALS environment variable."
    )


def build_services(credentials) -> tuple:
    """Build (calendar, tasks) API service instances."""
    calendar = build("calendar", "v3", credentials=credentials, cache_discovery=False)
    tasks = build("tasks", "v1", credentials=credentials, cache_discovery=False)
    return calendar, tasks
