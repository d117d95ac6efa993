"""
HTTP client for the backend's public endpoints.

Every call goes through PublicAPI._send(), which maps all failures to
TransportError (or NotFoundError where a single record was requested).

Collection methods return the unwrapped list whether the route answered with
a bare list or with {"success": true, "data": [...]}.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from campusportal.config import Settings
from campusportal.errors import NotFoundError, TransportError
from campusportal.model import unwrap_list, unwrap_record


log = logging.getLogger(__name__)


def _error_message(resp: requests.Response) -> str:
    # backend sends {"error": "..."} on failures
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("error") or body.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return resp.reason or "Request failed"


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class PublicAPI:
    """
    Thin wrapper over requests.Session for /public/* routes.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.base_url = settings.api_url.rstrip("/")
        self.timeout = settings.timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PublicAPI":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, url: str) -> requests.Response:
        log.debug("GET %s", url)
        try:
            return self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            log.error("Request to %s failed: %s", url, exc)
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc

    def _decode(self, resp: requests.Response, url: str) -> Any:
        if not resp.ok:
            msg = _error_message(resp)
            log.error("GET %s returned %s: %s", url, resp.status_code, msg)
            raise TransportError(msg, url=url, status=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            log.error("GET %s returned invalid JSON", url)
            raise TransportError(f"Invalid JSON from {url}", url=url, status=resp.status_code) from exc

    def _get(self, path: str) -> Any:
        url = self._url(path)
        return self._decode(self._send(url), url)

    # -- collections --------------------------------------------------------

    def get_categories(self) -> list[Any]:
        return unwrap_list(self._get("/public/categories"))

    def get_courses(self) -> list[Any]:
        return unwrap_list(self._get("/public/courses"))

    def get_departments(self) -> list[Any]:
        return unwrap_list(self._get("/public/departments"))

    def get_faculty(self) -> list[Any]:
        return unwrap_list(self._get("/public/faculty"))

    # -- single records -----------------------------------------------------

    def get_course_by_id(self, course_id: str) -> dict[str, Any]:
        """
        Fetch one course. A 404 or an empty body means the course does not exist.
        """
        url = self._url(f"/public/courses/{quote(course_id, safe='')}")
        resp = self._send(url)
        if resp.status_code == 404:
            log.info("Course %r not found (404)", course_id)
            raise NotFoundError("Course", course_id)
        record = unwrap_record(self._decode(resp, url))
        if not record:
            raise NotFoundError("Course", course_id)
        return record

    def get_department_by_name(self, name: str) -> Any:
        """
        Return the raw response of the department route.

        Newer backends answer with {"success": true, "data": {"department",
        "courses", "faculty"}}, older ones with the bare department record.
        Interpreting the shape is the resolver's job.
        """
        url = self._url(f"/public/departments/{quote(name, safe='')}")
        resp = self._send(url)
        if resp.status_code == 404:
            log.info("Department %r not found (404)", name)
            raise NotFoundError("Department", name)
        return self._decode(resp, url)

    # -- misc ---------------------------------------------------------------

    def health_url(self) -> str:
        root = self.base_url
        if root.endswith("/api"):
            root = root[: -len("/api")]
        return f"{root}/health"

    def health(self) -> bool:
        """
        Ping the backend's /health route (it sleeps when idle and the first
        request wakes it up). Returns False instead of raising.
        """
        url = self.health_url()
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("Health check failed: %s", exc)
            return False
        return resp.ok
