"""
Unit tests for the HTTP client.

requests.Session is replaced with a mock, so no network is used.
"""

import json
import unittest
from typing import Any, Optional
from unittest import mock

import requests

from campusportal.api import PublicAPI
from campusportal.config import Settings
from campusportal.errors import NotFoundError, TransportError


def _response(status: int, body: Any = None, raw: Optional[bytes] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = "OK" if status < 400 else "Error"
    resp._content = raw if raw is not None else json.dumps(body).encode("utf-8")
    return resp


class TestPublicAPI(unittest.TestCase):
    def setUp(self) -> None:
        self.session = mock.Mock(spec=requests.Session)
        self.session.headers = {}
        self.api = PublicAPI(Settings(api_url="https://backend.test/api/", timeout=3.0), session=self.session)

    def test_collections_accept_bare_list_and_envelope(self) -> None:
        self.session.get.return_value = _response(200, [{"_id": "c1"}])
        self.assertEqual(self.api.get_categories(), [{"_id": "c1"}])

        self.session.get.return_value = _response(200, {"success": True, "data": [{"_id": "k1"}]})
        self.assertEqual(self.api.get_courses(), [{"_id": "k1"}])

        url = self.session.get.call_args[0][0]
        self.assertEqual(url, "https://backend.test/api/public/courses")
        self.assertEqual(self.session.get.call_args[1]["timeout"], 3.0)

    def test_network_error_becomes_transport_error(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("refused")
        with self.assertLogs("campusportal.api", level="ERROR"):
            with self.assertRaises(TransportError) as ctx:
                self.api.get_faculty()
        self.assertEqual(ctx.exception.url, "https://backend.test/api/public/faculty")

    def test_server_error_uses_backend_message(self) -> None:
        self.session.get.return_value = _response(500, {"error": "Database unavailable"})
        with self.assertLogs("campusportal.api", level="ERROR"):
            with self.assertRaises(TransportError) as ctx:
                self.api.get_categories()
        self.assertEqual(ctx.exception.status, 500)
        self.assertIn("Database unavailable", str(ctx.exception))

    def test_invalid_json_is_transport_error(self) -> None:
        self.session.get.return_value = _response(200, raw=b"<html>sleeping</html>")
        with self.assertLogs("campusportal.api", level="ERROR"):
            with self.assertRaises(TransportError):
                self.api.get_courses()

    def test_course_by_id_404_and_empty_body(self) -> None:
        self.session.get.return_value = _response(404, {"error": "Course not found"})
        with self.assertRaises(NotFoundError):
            self.api.get_course_by_id("missing")

        self.session.get.return_value = _response(200, {"success": True, "data": None})
        with self.assertRaises(NotFoundError):
            self.api.get_course_by_id("missing")

    def test_course_by_id_unwraps_envelope(self) -> None:
        self.session.get.return_value = _response(200, {"success": True, "data": {"_id": "k1", "name": "Python"}})
        self.assertEqual(self.api.get_course_by_id("k1")["name"], "Python")

    def test_department_name_is_url_quoted(self) -> None:
        self.session.get.return_value = _response(200, {"_id": "d1", "name": "Arts & Design"})
        payload = self.api.get_department_by_name("Arts & Design/UX")
        self.assertEqual(payload["_id"], "d1")
        url = self.session.get.call_args[0][0]
        self.assertEqual(url, "https://backend.test/api/public/departments/Arts%20%26%20Design%2FUX")

    def test_health(self) -> None:
        self.assertEqual(self.api.health_url(), "https://backend.test/health")
        self.session.get.return_value = _response(200, {"status": "ok"})
        self.assertTrue(self.api.health())
        self.session.get.side_effect = requests.Timeout("slow")
        self.assertFalse(self.api.health())


if __name__ == "__main__":
    unittest.main()
