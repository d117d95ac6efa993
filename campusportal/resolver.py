"""
Entity resolution for the detail pages.

Each page needs one focal entity plus the collections related to it. The
backend only offers flat collections (and, on newer versions, one composite
department route), so the joins happen here:

    category page    category + its courses
    course page      course + up to 3 related courses of the same department
    department page  department + its courses + its faculty

Failure rules:
- the focal entity missing            -> NotFoundError
- the focal lookup failing (network)  -> TransportError propagates
- a secondary collection failing      -> empty list, logged, never raised
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from campusportal.errors import NotFoundError, TransportError
from campusportal.model import (
    Category,
    Course,
    Department,
    Faculty,
    category_from_record,
    course_from_record,
    department_from_record,
    faculty_from_record,
    normalize_list,
    unwrap_record,
)

if TYPE_CHECKING:
    from campusportal.api import PublicAPI


log = logging.getLogger(__name__)

RELATED_COURSES_LIMIT = 3


# ---------------------------------------------------------------------------
# Page results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryPage:
    category: Category
    courses: list[Course] = field(default_factory=list)


@dataclass(frozen=True)
class CoursePage:
    course: Course
    related: list[Course] = field(default_factory=list)


@dataclass(frozen=True)
class DepartmentPage:
    department: Department
    courses: list[Course] = field(default_factory=list)
    faculty: list[Faculty] = field(default_factory=list)
    # "composite" when the pre-joined route answered, "fallback" otherwise
    source: str = "composite"


# ---------------------------------------------------------------------------
# Matching helpers
# ---------------------------------------------------------------------------


def courses_in_category(courses: list[Course], category_id: str) -> list[Course]:
    return [c for c in courses if c.category is not None and c.category.id == category_id]


def courses_in_department(courses: list[Course], department: Department) -> list[Course]:
    """
    Match on the department id, or on the embedded department name when the
    server sent one. Server order is kept.
    """
    out: list[Course] = []
    for c in courses:
        ref = c.department
        if ref is None:
            continue
        if department.id is not None and ref.id == department.id:
            out.append(c)
        elif department.name and ref.name == department.name:
            out.append(c)
    return out


def faculty_in_department(faculty: list[Faculty], department_name: str) -> list[Faculty]:
    # exact string match, that is how the backend links faculty to departments
    return [f for f in faculty if f.department is not None and f.department == department_name]


def related_courses(courses: list[Course], course: Course, limit: int = RELATED_COURSES_LIMIT) -> list[Course]:
    """
    First `limit` courses of the same department, excluding `course` itself.
    """
    if course.department is None or course.department.id is None:
        return []
    dept_id = course.department.id
    out: list[Course] = []
    for c in courses:
        if c.id == course.id:
            continue
        if c.department is not None and c.department.id == dept_id:
            out.append(c)
            if len(out) >= limit:
                break
    return out


def find_department(departments: list[Department], name: str) -> Optional[Department]:
    """
    Exact name match first, then case-insensitive.
    """
    for d in departments:
        if d.name == name:
            return d
    wanted = name.strip().casefold()
    for d in departments:
        if d.name.strip().casefold() == wanted:
            return d
    return None


def _composite_parts(payload: Any) -> Optional[dict[str, Any]]:
    """
    Return the "data" mapping of a composite success envelope, or None when
    the payload has any other shape.
    """
    if not isinstance(payload, dict) or not payload.get("success"):
        return None
    data = payload.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("department"), dict):
        return None
    return data


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class EntityResolver:
    """
    Resolves page entities against a PublicAPI-like object.

    The api object only needs the get_* methods; tests pass a stub.
    """

    def __init__(self, api: "PublicAPI") -> None:
        self.api = api

    # -- secondary fetches ---------------------------------------------------

    def _courses_or_empty(self, purpose: str) -> list[Course]:
        try:
            return normalize_list(self.api.get_courses(), course_from_record)
        except TransportError as exc:
            log.warning("Could not load courses for %s, continuing without: %s", purpose, exc)
            return []

    def _faculty_or_empty(self, purpose: str) -> list[Faculty]:
        try:
            return normalize_list(self.api.get_faculty(), faculty_from_record)
        except TransportError as exc:
            log.warning("Could not load faculty for %s, continuing without: %s", purpose, exc)
            return []

    # -- category ------------------------------------------------------------

    def resolve_category_with_courses(self, category_id: str) -> CategoryPage:
        """
        Resolve a category and all courses filed under it.

        Raises NotFoundError when no category has this id; the caller is
        expected to send the user back to the course listing. Transport
        errors propagate for the same reason.
        """
        key = (category_id or "").strip()
        if not key:
            raise NotFoundError("Category", category_id or "")

        categories = normalize_list(self.api.get_categories(), category_from_record)
        category = next((c for c in categories if c.id == key), None)
        if category is None:
            log.info("Category %r not in %d categories", key, len(categories))
            raise NotFoundError("Category", key)

        courses = normalize_list(self.api.get_courses(), course_from_record)
        return CategoryPage(category=category, courses=courses_in_category(courses, category.id))

    # -- course --------------------------------------------------------------

    def resolve_course_with_related(self, course_id: str) -> CoursePage:
        """
        Resolve a course plus up to 3 courses of the same department.
        """
        key = (course_id or "").strip()
        if not key:
            raise NotFoundError("Course", course_id or "")

        record = unwrap_record(self.api.get_course_by_id(key))
        course = course_from_record(record) if record else None
        if course is None:
            raise NotFoundError("Course", key)

        if course.department is None:
            return CoursePage(course=course, related=[])

        all_courses = self._courses_or_empty(f"course {course.id}")
        return CoursePage(course=course, related=related_courses(all_courses, course))

    # -- department ----------------------------------------------------------

    def resolve_department(self, name: str) -> DepartmentPage:
        """
        Resolve a department by display name.

        The composite route is tried first. If it is unreachable, 404s, or
        answers with the legacy shape (the department record, bare or in a
        {"success", "data"} envelope), the department is taken from that
        record, or looked up in the department list, and its courses and
        faculty are fetched and filtered here.
        """
        key = (name or "").strip()
        if not key:
            raise NotFoundError("Department", name or "")

        payload: Any = None
        try:
            payload = self.api.get_department_by_name(key)
        except (TransportError, NotFoundError) as exc:
            log.warning("Department route failed for %r, using fallback: %s", key, exc)

        parts = _composite_parts(payload)
        if parts is not None:
            department = department_from_record(parts["department"])
            if department is not None:
                return DepartmentPage(
                    department=department,
                    courses=normalize_list(parts.get("courses"), course_from_record),
                    faculty=normalize_list(parts.get("faculty"), faculty_from_record),
                    source="composite",
                )

        record = unwrap_record(payload)
        department = department_from_record(record) if record else None
        if department is None:
            department = self._lookup_department(key)
        if department is None:
            raise NotFoundError("Department", key)

        purpose = f"department {department.name or key!r}"
        courses = courses_in_department(self._courses_or_empty(purpose), department)
        faculty = faculty_in_department(self._faculty_or_empty(purpose), department.name)

        return DepartmentPage(department=department, courses=courses, faculty=faculty, source="fallback")

    def _lookup_department(self, name: str) -> Optional[Department]:
        try:
            departments = normalize_list(self.api.get_departments(), department_from_record)
        except TransportError as exc:
            log.error("Could not load department list: %s", exc)
            return None
        return find_department(departments, name)