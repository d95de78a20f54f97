import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import config
from tools import google_auth
from tools.google_auth import CredentialsError, build_services, get_credentials

SA_INFO = '{"type": "service_account", "client_email": "bot@example.iam.gserviceaccount.com"}'


class TestGetCredentials(unittest.TestCase):
    def setUp(self):
        patcher = patch.dict(os.environ, {}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        os.environ.pop(config.GOOGLE_CREDENTIALS_ENV, None)

    def test_inline_json_takes_priority(self):
        os.environ[config.GOOGLE_CREDENTIALS_ENV] = "/does/not/matter.json"
        with patch.object(google_auth.service_account.Credentials,
                          "from_service_account_info", return_value="creds") as from_info:
            self.assertEqual(get_credentials(SA_INFO), "creds")

        args, kwargs = from_info.call_args
        self.assertEqual(args[0]["client_email"], "bot@example.iam.gserviceaccount.com")
        self.assertEqual(kwargs["scopes"], config.GOOGLE_SCOPES)

    def test_malformed_inline_json(self):
        with self.assertRaises(CredentialsError) as ctx:
            get_credentials("{not json")
        self.assertIn("Failed to parse credentials JSON", str(ctx.exception))

    def test_key_file_from_env(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            key = Path(tmpdir) / "key.json"
            key.write_text(SA_INFO)
            os.environ[config.GOOGLE_CREDENTIALS_ENV] = str(key)
            with patch.object(google_auth.service_account.Credentials,
                              "from_service_account_file", return_value="creds") as from_file:
                self.assertEqual(get_credentials(None), "creds")
        from_file.assert_called_once_with(str(key), scopes=config.GOOGLE_SCOPES)

    def test_missing_key_file(self):
        os.environ[config.GOOGLE_CREDENTIALS_ENV] = "/nonexistent/key.json"
        with self.assertRaises(CredentialsError) as ctx:
            get_credentials(None)
        self.assertIn("Credentials file not found: /nonexistent/key.json", str(ctx.exception))

    def test_no_credentials(self):
        with self.assertRaises(CredentialsError) as ctx:
            get_credentials(None)
        self.assertIn("No Google credentials provided", str(ctx.exception))

    def test_credentials_error_is_configuration_error(self):
        self.assertTrue(issubclass(CredentialsError, config.ConfigurationError))


class TestBuildServices(unittest.TestCase):
    def test_builds_calendar_and_tasks(self):
        with patch.object(google_auth, "build", side_effect=["cal", "tasks"]) as build:
            self.assertEqual(build_services("creds"), ("cal", "tasks"))

        self.assertEqual(build.call_args_list[0].args, ("calendar", "v3"))
        self.assertEqual(build.call_args_list[1].args, ("tasks", "v1"))
        self.assertEqual(build.call_args_list[0].kwargs["credentials"], "creds")


if __name__ == "__main__":
    unittest.main()
