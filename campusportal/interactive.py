from __future__ import annotations

from typing import Any, Callable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from campusportal.api import PublicAPI
from campusportal.catalog import ALL_CATEGORIES, SORT_KEYS, Listing, build_listing
from campusportal.errors import NotFoundError, TransportError
from campusportal.loader import LoadState, ViewLoader
from campusportal.model import (
    Course,
    category_from_record,
    course_from_record,
    department_from_record,
    normalize_list,
)
from campusportal.render import format_fee, html_to_text
from campusportal.resolver import CategoryPage, CoursePage, DepartmentPage, EntityResolver

console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _load(loader: ViewLoader, key: str, fetch: Callable[[], Any]) -> Any:
    """
    Load one page through the view loader and wait for it.

    Returns the result, or the exception the fetch raised. Returns None if
    the load was superseded before it finished.
    """
    box_: dict[str, Any] = {}

    def on_done(result: Any) -> None:
        box_["result"] = result

    with console.status(f"Loading {key}…"):
        loader.mount(key, fetch, on_done).result()
    return box_.get("result")


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _course_table(title: str, courses: list[Course], listing: Optional[Listing] = None) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Id", style="bold cyan")
    table.add_column("Course")
    table.add_column("Category", style="green")
    table.add_column("Department", style="magenta")
    table.add_column("Fee", justify="right", style="yellow")

    for i, c in enumerate(courses, start=1):
        if listing is not None:
            cat = listing.category_name(c.category)
            dept = listing.department_name(c.department)
        else:
            cat = (c.category.name if c.category else None) or ""
            dept = (c.department.name if c.department else None) or ""
        table.add_row(str(i), c.id, c.name or "(no name)", cat, dept, format_fee(c.fee_structure.full_fee))
    return table


def _show_category(result: CategoryPage) -> None:
    cat = result.category
    desc = html_to_text(cat.description)
    console.print(Panel(desc or "(no description)", title=cat.name or cat.id))
    if result.courses:
        console.print(_course_table(f"Courses in {cat.name}", result.courses))
    else:
        _println("No courses in this category yet.")


def _show_course(result: CoursePage) -> None:
    c = result.course
    info = Table(box=box.SIMPLE, show_header=False)
    info.add_column("Field", style="bold")
    info.add_column("Value")
    if c.category is not None and c.category.name:
        info.add_row("Category", c.category.name)
    if c.department is not None and c.department.name:
        info.add_row("Department", c.department.name)
    if c.duration:
        info.add_row("Duration", c.duration)
    if c.seats is not None:
        info.add_row("Seats", str(c.seats))
    if c.schedule:
        info.add_row("Schedule", c.schedule)
    info.add_row("Registration fee", format_fee(c.fee_structure.registration_fee))
    info.add_row("Full fee", format_fee(c.fee_structure.full_fee))
    if c.form_url:
        info.add_row("Application form", c.form_url)

    console.print(Panel(info, title=c.name or c.id))
    desc = html_to_text(c.description)
    if desc:
        _println(desc)
    syllabus = html_to_text(c.syllabus)
    if syllabus:
        console.print(Panel(syllabus, title="Syllabus"))
    if result.related:
        console.print(_course_table("Related courses", result.related))


def _show_department(result: DepartmentPage) -> None:
    d = result.department
    desc = html_to_text(d.description)
    console.print(Panel(desc or "(no description)", title=d.name or str(d.id)))

    if result.courses:
        console.print(_course_table(f"Courses ({len(result.courses)})", result.courses))
    else:
        _println("No courses listed for this department.")

    if result.faculty:
        table = Table(title=f"Faculty ({len(result.faculty)})", box=box.SIMPLE)
        table.add_column("Name", style="bold")
        table.add_column("Designation")
        table.add_column("Email", style="cyan")
        table.add_column("Phone")
        for f in result.faculty:
            table.add_row(f.name, f.designation or "", f.email or "", f.phone or "")
        console.print(table)
    else:
        _println("No faculty listed for this department.")


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


class Session:
    """
    State of one interactive run: the API, the resolver and one loader
    per page type.
    """

    def __init__(self, api: PublicAPI) -> None:
        self.api = api
        self.resolver = EntityResolver(api)
        self.loaders = {name: ViewLoader(name) for name in ("listing", "category", "course", "department")}

    def close(self) -> None:
        for loader in self.loaders.values():
            loader.shutdown()


def _fetch_listing_data(api: PublicAPI) -> tuple[list, list, list]:
    return (
        normalize_list(api.get_categories(), category_from_record),
        normalize_list(api.get_departments(), department_from_record),
        normalize_list(api.get_courses(), course_from_record),
    )


def _flow_listing(session: Session) -> None:
    """
    Browse the listing. Data is fetched once per visit, then search,
    category, sort and paging work on it locally.
    """
    loader = session.loaders["listing"]
    data = _load(loader, "course listing", lambda: _fetch_listing_data(session.api))
    if isinstance(data, TransportError):
        _println(f"[red]Error fetching courses:[/] {data}")
        data = ([], [], [])
    elif isinstance(data, Exception) or data is None:
        _println("Could not load courses.")
        loader.unmount()
        return

    categories, departments, courses = data
    search, category_id, sort_by, page = "", ALL_CATEGORIES, "newest", 1

    while True:
        listing = build_listing(categories, departments, courses, search, category_id, sort_by, page)
        p = listing.page
        console.print(_course_table(f"Courses ({p.total}) – page {p.page}/{p.total_pages}", p.items, listing))

        choice = _prompt(
            "n = next, p = prev, s = search, c = category, o = order, number = open course (blank = back): "
        ).strip().lower()

        if not choice:
            loader.unmount()
            return
        if choice == "n":
            page = p.page + 1
        elif choice == "p":
            page = p.page - 1
        elif choice == "s":
            search = _prompt("Search by name (blank = clear): ").strip()
            page = 1
        elif choice == "c":
            for c in categories:
                _println(f"  {c.id} | {c.name}")
            category_id = _prompt("Category id (blank = all): ").strip() or ALL_CATEGORIES
            page = 1
        elif choice == "o":
            _println("Sort keys: " + ", ".join(SORT_KEYS))
            key = _prompt("Sort by: ").strip()
            if key in SORT_KEYS:
                sort_by = key
            else:
                _println("Unknown sort key.")
        elif choice.isdigit():
            i = int(choice)
            if not (1 <= i <= len(p.items)):
                _println("Out of range.")
                continue
            _flow_course(session, p.items[i - 1].id)
        else:
            _println("Invalid choice.")


def _flow_category(session: Session, category_id: Optional[str] = None) -> None:
    if category_id is None:
        category_id = _prompt("Category id (blank = back): ").strip()
        if not category_id:
            return

    loader = session.loaders["category"]
    result = _load(loader, f"category {category_id}", lambda: session.resolver.resolve_category_with_courses(category_id))
    state = loader.state
    loader.unmount()

    if state == LoadState.LOADED and isinstance(result, CategoryPage):
        _show_category(result)
        return

    # unknown category or failed lookup -> back to the listing
    if state == LoadState.NOT_FOUND:
        _println(f"Category not found: {category_id}")
    else:
        _println(f"[red]Error fetching category data:[/] {result}")
    _flow_listing(session)


def _flow_course(session: Session, course_id: Optional[str] = None) -> None:
    if course_id is None:
        course_id = _prompt("Course id (blank = back): ").strip()
        if not course_id:
            return

    loader = session.loaders["course"]
    result = _load(loader, f"course {course_id}", lambda: session.resolver.resolve_course_with_related(course_id))
    loader.unmount()

    if isinstance(result, CoursePage):
        _show_course(result)
    elif isinstance(result, NotFoundError):
        _println("Course not found")
    else:
        _println(f"[red]Failed to load course details:[/] {result}")


def _flow_department(session: Session) -> None:
    name = _prompt("Department name (blank = back): ").strip()
    if not name:
        return

    loader = session.loaders["department"]
    result = _load(loader, f"department {name}", lambda: session.resolver.resolve_department(name))
    loader.unmount()

    if isinstance(result, DepartmentPage):
        _show_department(result)
    elif isinstance(result, NotFoundError):
        _println("Department not found")
    else:
        _println(f"[red]Failed to load department details:[/] {result}")


def run_interactive(api: PublicAPI) -> None:
    """
    Interactive menu loop.
    """
    session = Session(api)
    try:
        while True:
            _println("\n=== Campus portal (interactive) ===")
            _println(f"Backend: {api.base_url}")
            choice = _prompt(
                "\n[1] Browse courses\n"
                "[2] Open course\n"
                "[3] Open category\n"
                "[4] Open department\n"
                "[5] Ping backend\n"
                "[0] Exit\n"
                "Select: "
            ).strip()

            if choice == "0":
                _println("Bye.")
                return

            if choice == "1":
                _flow_listing(session)
            elif choice == "2":
                _flow_course(session)
            elif choice == "3":
                _flow_category(session)
            elif choice == "4":
                _flow_department(session)
            elif choice == "5":
                ok = api.health()
                _println("Backend is up." if ok else "[red]Backend did not answer.[/]")
            else:
                _println("Invalid choice.")
    finally:
        session.close()
