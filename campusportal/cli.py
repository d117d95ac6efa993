"""
CLI (Command Line Interface).

Quick terminal commands, one per page of the website:

    campusportal courses [--search TEXT] [--category ID] [--sort KEY] [--page N]
    campusportal category <category_id>
    campusportal course <course_id>
    campusportal department <name>
    campusportal ping
    campusportal interactive

Global options (--api-url, --timeout, --verbose) go before the command.

Note:
- The interactive UI lives in campusportal/interactive.py
- This CLI prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from campusportal.api import PublicAPI
from campusportal.catalog import ALL_CATEGORIES, SORT_KEYS, load_listing
from campusportal.config import Settings, load_settings
from campusportal.errors import NotFoundError, TransportError
from campusportal.render import render_category, render_course, render_department, render_listing
from campusportal.resolver import EntityResolver


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_settings()
    if args.api_url:
        settings = replace(settings, api_url=args.api_url.strip().rstrip("/"))
    if args.timeout is not None and args.timeout > 0:
        settings = replace(settings, timeout=args.timeout)
    if args.verbose:
        settings = replace(settings, log_level="DEBUG")
    return settings


def _configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s  %(message)s")


def _make_api(settings: Settings) -> PublicAPI:
    return PublicAPI(settings)


def _cmd_courses(args: argparse.Namespace, api: PublicAPI) -> int:
    """
    Show one page of the course listing.
    """
    listing = load_listing(
        api,
        search=args.search or "",
        category_id=args.category or ALL_CATEGORIES,
        sort_by=args.sort,
        page=args.page,
    )
    print(render_listing(listing))
    return 0


def _cmd_category(args: argparse.Namespace, api: PublicAPI) -> int:
    """
    Show a category and its courses. An unknown category (or a failed
    lookup) falls back to the full course listing.
    """
    resolver = EntityResolver(api)
    try:
        result = resolver.resolve_category_with_courses(args.category_id)
    except NotFoundError:
        print(f"Category not found: {args.category_id}. Showing all courses instead.\n")
        print(render_listing(load_listing(api)))
        return 0
    except TransportError as exc:
        print(f"Could not load category: {exc}. Showing all courses instead.\n")
        print(render_listing(load_listing(api)))
        return 1

    print(render_category(result))
    return 0


def _cmd_course(args: argparse.Namespace, api: PublicAPI) -> int:
    resolver = EntityResolver(api)
    try:
        result = resolver.resolve_course_with_related(args.course_id)
    except NotFoundError:
        print(f"Course not found: {args.course_id}")
        return 1
    except TransportError as exc:
        print(f"Failed to load course details: {exc}")
        return 1

    print(render_course(result))
    return 0


def _cmd_department(args: argparse.Namespace, api: PublicAPI) -> int:
    resolver = EntityResolver(api)
    try:
        result = resolver.resolve_department(args.name)
    except NotFoundError:
        print(f"Department not found: {args.name}")
        return 1

    print(render_department(result))
    return 0


def _cmd_ping(args: argparse.Namespace, api: PublicAPI) -> int:
    if api.health():
        print(f"Backend is up: {api.health_url()}")
        return 0
    print(f"Backend did not answer: {api.health_url()}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="campusportal", description="College website browser (CLI)")
    parser.add_argument("--api-url", type=str, default=None, help="Backend API base URL (…/api)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_courses = sub.add_parser("courses", help="List courses")
    p_courses.add_argument("--search", "-s", type=str, default="", help="Filter by course name")
    p_courses.add_argument("--category", "-c", type=str, default=ALL_CATEGORIES, help="Category id ('all' = any)")
    p_courses.add_argument("--sort", choices=SORT_KEYS, default="newest", help="Sort order")
    p_courses.add_argument("--page", "-p", type=int, default=1, help="Page number (8 courses per page)")

    p_category = sub.add_parser("category", help="Show a category and its courses")
    p_category.add_argument("category_id", type=str, help="Category id")

    p_course = sub.add_parser("course", help="Show a course and related courses")
    p_course.add_argument("course_id", type=str, help="Course id")

    p_department = sub.add_parser("department", help="Show a department with its courses and faculty")
    p_department.add_argument("name", type=str, help="Department name (e.g. 'Computer Science')")

    sub.add_parser("ping", help="Check that the backend is awake")
    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = _settings_from_args(args)
    _configure_logging(settings)

    handlers = {
        "courses": _cmd_courses,
        "category": _cmd_category,
        "course": _cmd_course,
        "department": _cmd_department,
        "ping": _cmd_ping,
    }

    with _make_api(settings) as api:
        if args.command in handlers:
            raise SystemExit(handlers[args.command](args, api))

        if args.command == "interactive":
            from campusportal.interactive import run_interactive

            run_interactive(api)
            raise SystemExit(0)

    raise SystemExit(2)
