import os
import unittest
from unittest import mock

from campusportal.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, load_settings


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            s = load_settings(use_dotenv=False)
        self.assertEqual(s.api_url, DEFAULT_API_URL)
        self.assertEqual(s.timeout, DEFAULT_TIMEOUT)
        self.assertEqual(s.log_level, "WARNING")

    def test_environment_overrides(self) -> None:
        env = {
            "CAMPUSPORTAL_API_URL": "http://localhost:5000/api/",
            "CAMPUSPORTAL_TIMEOUT": "2.5",
            "CAMPUSPORTAL_LOG_LEVEL": "debug",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            s = load_settings(use_dotenv=False)
        self.assertEqual(s.api_url, "http://localhost:5000/api")
        self.assertEqual(s.timeout, 2.5)
        self.assertEqual(s.log_level, "DEBUG")

    def test_invalid_timeout_falls_back(self) -> None:
        for raw in ("soon", "-1", "0"):
            with mock.patch.dict(os.environ, {"CAMPUSPORTAL_TIMEOUT": raw}, clear=True):
                with self.assertLogs("campusportal.config", level="WARNING"):
                    s = load_settings(use_dotenv=False)
            self.assertEqual(s.timeout, DEFAULT_TIMEOUT)


if __name__ == "__main__":
    unittest.main()
