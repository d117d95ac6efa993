"""
Runtime settings.

Values come from the environment (a local .env file is loaded first):

    CAMPUSPORTAL_API_URL     base URL of the backend API (…/api)
    CAMPUSPORTAL_TIMEOUT     request timeout in seconds
    CAMPUSPORTAL_LOG_LEVEL   logging level name (DEBUG, INFO, WARNING, ...)

CLI flags override these (see cli.py).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


log = logging.getLogger(__name__)

DEFAULT_API_URL = "https://mycollegesitebackend.onrender.com/api"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        log.warning("Ignoring invalid CAMPUSPORTAL_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT
    if value <= 0:
        log.warning("Ignoring non-positive CAMPUSPORTAL_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT
    return value


def load_settings(use_dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    use_dotenv=False skips reading .env (tests set os.environ directly).
    """
    if use_dotenv:
        load_dotenv()

    api_url = (os.environ.get("CAMPUSPORTAL_API_URL") or "").strip() or DEFAULT_API_URL
    log_level = (os.environ.get("CAMPUSPORTAL_LOG_LEVEL") or "").strip().upper() or DEFAULT_LOG_LEVEL

    return Settings(
        api_url=api_url.rstrip("/"),
        timeout=_parse_timeout(os.environ.get("CAMPUSPORTAL_TIMEOUT")),
        log_level=log_level,
    )
