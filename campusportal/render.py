"""
Plain-text rendering of pages (used by the CLI).

Descriptions, syllabi and faculty bios are entered through the admin's rich
text editor and may contain HTML; html_to_text() flattens them.
"""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup

from campusportal.catalog import Listing
from campusportal.model import Course, Faculty
from campusportal.resolver import CategoryPage, CoursePage, DepartmentPage


def html_to_text(value: Optional[str]) -> str:
    """
    Convert an HTML fragment to plain text. Plain strings pass through.
    Runs of blank lines are collapsed to one.
    """
    if not value:
        return ""
    if "<" not in value:
        return value.strip()

    soup = BeautifulSoup(value, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    text = soup.get_text("\n")

    lines = [line.strip() for line in text.splitlines()]
    out: list[str] = []
    for line in lines:
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    return "\n".join(out).strip()


def format_fee(amount: Optional[float]) -> str:
    if amount is None:
        return "-"
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def _course_line(c: Course) -> str:
    bits = [c.id, c.name or "(no name)"]
    if c.department is not None and c.department.name:
        bits.append(c.department.name)
    bits.append(f"fee {format_fee(c.fee_structure.full_fee)}")
    return " | ".join(bits)


def _faculty_line(f: Faculty) -> str:
    bits = [f.name or "(no name)"]
    if f.designation:
        bits.append(f.designation)
    if f.email:
        bits.append(f.email)
    if f.phone:
        bits.append(f.phone)
    return " | ".join(bits)


def render_listing(listing: Listing) -> str:
    page = listing.page
    lines = [f"Courses ({page.total} found) - page {page.page}/{page.total_pages}"]
    if not page.items:
        lines.append("No courses found.")
        return "\n".join(lines)

    for c in page.items:
        cat = listing.category_name(c.category)
        dept = listing.department_name(c.department)
        lines.append(f"{c.id} | {c.name or '(no name)'} | {cat} | {dept} | fee {format_fee(c.fee_structure.full_fee)}")
    return "\n".join(lines)


def render_category(result: CategoryPage) -> str:
    cat = result.category
    lines = [f"=== {cat.name or cat.id} ==="]
    desc = html_to_text(cat.description)
    if desc:
        lines.append(desc)
    lines.append("")
    if not result.courses:
        lines.append("No courses in this category yet.")
    else:
        lines.append(f"Courses ({len(result.courses)}):")
        lines.extend(f"- {_course_line(c)}" for c in result.courses)
    return "\n".join(lines)


def render_course(result: CoursePage) -> str:
    c = result.course
    lines = [f"=== {c.name or c.id} ==="]
    if c.category is not None and c.category.name:
        lines.append(f"Category: {c.category.name}")
    if c.department is not None and c.department.name:
        lines.append(f"Department: {c.department.name}")
    if c.duration:
        lines.append(f"Duration: {c.duration}")
    if c.seats is not None:
        lines.append(f"Seats: {c.seats}")
    if c.schedule:
        lines.append(f"Schedule: {c.schedule}")
    lines.append(
        f"Registration fee: {format_fee(c.fee_structure.registration_fee)} | "
        f"Full fee: {format_fee(c.fee_structure.full_fee)}"
    )
    if c.form_url:
        lines.append(f"Application form: {c.form_url}")

    desc = html_to_text(c.description)
    if desc:
        lines.extend(["", desc])
    syllabus = html_to_text(c.syllabus)
    if syllabus:
        lines.extend(["", "Syllabus:", syllabus])

    if result.related:
        lines.extend(["", "Related courses:"])
        lines.extend(f"- {_course_line(r)}" for r in result.related)
    return "\n".join(lines)


def render_department(result: DepartmentPage) -> str:
    d = result.department
    lines = [f"=== {d.name or d.id} ==="]
    desc = html_to_text(d.description)
    if desc:
        lines.append(desc)

    lines.append("")
    if result.courses:
        lines.append(f"Courses ({len(result.courses)}):")
        lines.extend(f"- {_course_line(c)}" for c in result.courses)
    else:
        lines.append("No courses listed for this department.")

    lines.append("")
    if result.faculty:
        lines.append(f"Faculty ({len(result.faculty)}):")
        lines.extend(f"- {_faculty_line(f)}" for f in result.faculty)
    else:
        lines.append("No faculty listed for this department.")
    return "\n".join(lines)
