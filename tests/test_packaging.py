import tomllib
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class TestPackaging(unittest.TestCase):
    def test_readme_is_project_readme(self):
        data = tomllib.loads((PROJECT_ROOT / "pyproject.toml").read_text())
        readme = data["project"]["readme"]
        self.assertEqual(readme, "README.md")
        self.assertTrue((PROJECT_ROOT / readme).is_file())

    def test_action_installs_into_own_venv(self):
        action = (PROJECT_ROOT / "action.yml").read_text()
        self.assertIn('python -m venv "$RUNNER_TEMP/calendar-dispatch-venv"', action)
        self.assertIn('"$RUNNER_TEMP/calendar-dispatch-venv/bin/pip" install', action)
        self.assertIn("calendar-dispatch-venv/bin/calendar-dispatch", action)
        self.assertNotIn("run: pip install", action)


if __name__ == "__main__":
    unittest.main()
