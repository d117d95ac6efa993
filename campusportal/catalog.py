"""
Course listing: search, category filter, sorting and paging.

This is the "all courses" view and also where the category page sends the
user when a category cannot be resolved.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from campusportal.errors import TransportError
from campusportal.model import (
    Category,
    Course,
    Department,
    EntityRef,
    category_from_record,
    course_from_record,
    department_from_record,
    normalize_list,
)

if TYPE_CHECKING:
    from campusportal.api import PublicAPI


log = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
COURSES_PER_PAGE = 8

SORT_KEYS = ("newest", "oldest", "price-low", "price-high", "name-asc", "name-desc")


# ---------------------------------------------------------------------------
# Filter / sort / page
# ---------------------------------------------------------------------------


def filter_courses(courses: list[Course], search: str = "", category_id: str = ALL_CATEGORIES) -> list[Course]:
    """
    Keep courses whose name contains `search` (case-insensitive) and whose
    category matches `category_id` ("all" or blank = any category).
    """
    needle = (search or "").strip().lower()
    cat = (category_id or "").strip() or ALL_CATEGORIES

    out: list[Course] = []
    for c in courses:
        if needle and needle not in c.name.lower():
            continue
        if cat != ALL_CATEGORIES and (c.category is None or c.category.id != cat):
            continue
        out.append(c)
    return out


def _full_fee(c: Course) -> float:
    return c.fee_structure.full_fee or 0.0


def sort_courses(courses: list[Course], sort_by: str) -> list[Course]:
    """
    Return a sorted copy. Unknown keys keep server order.

    created_at is ISO 8601 from the backend, so string order is date order;
    courses without a date sort as oldest.
    """
    if sort_by == "newest":
        return sorted(courses, key=lambda c: c.created_at or "", reverse=True)
    if sort_by == "oldest":
        return sorted(courses, key=lambda c: c.created_at or "")
    if sort_by == "price-low":
        return sorted(courses, key=_full_fee)
    if sort_by == "price-high":
        return sorted(courses, key=_full_fee, reverse=True)
    if sort_by == "name-asc":
        return sorted(courses, key=lambda c: c.name.casefold())
    if sort_by == "name-desc":
        return sorted(courses, key=lambda c: c.name.casefold(), reverse=True)
    return list(courses)


@dataclass(frozen=True)
class Page:
    items: list[Course]
    page: int
    total_pages: int
    total: int


def paginate(items: list[Course], page: int = 1, per_page: int = COURSES_PER_PAGE) -> Page:
    """
    Slice one page out of `items`. page is clamped into [1, total_pages]
    and total_pages is never 0.
    """
    per_page = max(1, per_page)
    total = len(items)
    total_pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page
    return Page(items=items[start : start + per_page], page=page, total_pages=total_pages, total=total)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Listing:
    page: Page
    categories: list[Category] = field(default_factory=list)
    departments: list[Department] = field(default_factory=list)
    search: str = ""
    category_id: str = ALL_CATEGORIES
    sort_by: str = "newest"

    def category_name(self, ref: Optional[EntityRef]) -> str:
        if ref is None:
            return "Category"
        if ref.name:
            return ref.name
        for c in self.categories:
            if c.id == ref.id:
                return c.name
        return "Category"

    def department_name(self, ref: Optional[EntityRef]) -> str:
        if ref is None:
            return "Department"
        if ref.name:
            return ref.name
        for d in self.departments:
            if d.id is not None and d.id == ref.id:
                return d.name
        return "Department"


def build_listing(
    categories: list[Category],
    departments: list[Department],
    courses: list[Course],
    search: str = "",
    category_id: str = ALL_CATEGORIES,
    sort_by: str = "newest",
    page: int = 1,
) -> Listing:
    selected = filter_courses(courses, search=search, category_id=category_id)
    ordered = sort_courses(selected, sort_by)
    return Listing(
        page=paginate(ordered, page),
        categories=categories,
        departments=departments,
        search=search,
        category_id=category_id or ALL_CATEGORIES,
        sort_by=sort_by,
    )


def load_listing(
    api: "PublicAPI",
    search: str = "",
    category_id: str = ALL_CATEGORIES,
    sort_by: str = "newest",
    page: int = 1,
) -> Listing:
    """
    Fetch categories, departments and courses and build the listing.

    If any of the three fetches fails the listing is shown empty rather than
    failing the page.
    """
    try:
        categories = normalize_list(api.get_categories(), category_from_record)
        departments = normalize_list(api.get_departments(), department_from_record)
        courses = normalize_list(api.get_courses(), course_from_record)
    except TransportError as exc:
        log.error("Error fetching course listing: %s", exc)
        categories, departments, courses = [], [], []

    return build_listing(categories, departments, courses, search, category_id, sort_by, page)
