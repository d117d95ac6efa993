"""
Error taxonomy shared by the API client, the resolver and the views.

- NotFoundError: the primary entity of a page does not exist
- TransportError: network/server failure or an unreadable response
"""

from __future__ import annotations

from typing import Optional


class PortalError(Exception):
    """Base class for all campusportal errors."""


class NotFoundError(PortalError):
    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} not found: {key!r}")
        self.entity = entity
        self.key = key


class TransportError(PortalError):
    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status

    def __str__(self) -> str:
        msg = super().__str__()
        if self.status is not None:
            return f"{msg} (HTTP {self.status})"
        return msg
