"""
Smoke tests for the interactive menu.

Prompts are fed from a list and rich output goes to an in-memory console.
"""

import io
import unittest
from unittest import mock

from rich.console import Console

from campusportal.errors import NotFoundError, TransportError
from campusportal.interactive import run_interactive


def _api() -> mock.Mock:
    api = mock.Mock()
    api.base_url = "https://backend.test/api"
    api.get_categories.return_value = [{"_id": "c1", "name": "Science"}]
    api.get_departments.return_value = [{"_id": "d1", "name": "Physics"}]
    api.get_courses.return_value = [
        {"_id": "k1", "name": "Mechanics", "categoryId": "c1", "departmentId": "d1"},
        {"_id": "k2", "name": "Optics", "categoryId": "c1", "departmentId": "d1"},
    ]
    api.get_faculty.return_value = []
    api.get_course_by_id.return_value = {"_id": "k1", "name": "Mechanics", "departmentId": "d1"}
    api.get_department_by_name.side_effect = TransportError("down")
    return api


class TestInteractive(unittest.TestCase):
    def _run(self, api: mock.Mock, answers: list) -> str:
        buf = io.StringIO()
        console = Console(file=buf, width=120)
        with mock.patch("campusportal.interactive.console", console), \
                mock.patch("campusportal.interactive._prompt", side_effect=answers):
            run_interactive(api)
        return buf.getvalue()

    def test_open_course_shows_related(self) -> None:
        out = self._run(_api(), ["2", "k1", "0"])
        self.assertIn("Mechanics", out)
        self.assertIn("Related courses", out)
        self.assertIn("Optics", out)

    def test_missing_course_message(self) -> None:
        api = _api()
        api.get_course_by_id.side_effect = NotFoundError("Course", "zz")
        out = self._run(api, ["2", "zz", "0"])
        self.assertIn("Course not found", out)

    def test_unknown_category_falls_back_to_listing(self) -> None:
        # "nope" is unknown -> listing opens; blank leaves it, then exit
        out = self._run(_api(), ["3", "nope", "", "0"])
        self.assertIn("Category not found", out)
        self.assertIn("Optics", out)

    def test_department_via_list_fallback(self) -> None:
        out = self._run(_api(), ["4", "physics", "0"])
        self.assertIn("Physics", out)
        self.assertIn("Mechanics", out)
        self.assertIn("No faculty listed", out)


if __name__ == "__main__":
    unittest.main()
