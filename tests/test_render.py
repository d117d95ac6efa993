import unittest

from campusportal.model import category_from_record, course_from_record, department_from_record, faculty_from_record
from campusportal.render import format_fee, html_to_text, render_category, render_course, render_department
from campusportal.resolver import CategoryPage, CoursePage, DepartmentPage


class TestHtmlToText(unittest.TestCase):
    def test_plain_text_passes_through(self) -> None:
        self.assertEqual(html_to_text("  Intro to physics "), "Intro to physics")
        self.assertEqual(html_to_text(None), "")

    def test_html_is_flattened(self) -> None:
        text = html_to_text("<p>Week 1: <b>Basics</b></p><p></p><ul><li>Loops</li></ul>")
        self.assertNotIn("<", text)
        self.assertIn("Basics", text)
        self.assertIn("Loops", text)
        self.assertNotIn("\n\n\n", text)


class TestFormatFee(unittest.TestCase):
    def test_values(self) -> None:
        self.assertEqual(format_fee(None), "-")
        self.assertEqual(format_fee(12000.0), "12,000")
        self.assertEqual(format_fee(99.5), "99.50")


class TestPages(unittest.TestCase):
    def test_category_page(self) -> None:
        cat = category_from_record({"_id": "c1", "name": "Science"})
        text = render_category(CategoryPage(category=cat, courses=[]))
        self.assertIn("=== Science ===", text)
        self.assertIn("No courses in this category yet.", text)

    def test_course_page_lists_related(self) -> None:
        course = course_from_record(
            {"_id": "k1", "name": "Python", "departmentId": {"_id": "d1", "name": "CS"},
             "feeStructure": {"registrationFee": 500, "fullFee": 12000}, "description": "<p>Learn Python</p>"}
        )
        related = course_from_record({"_id": "k2", "name": "Django", "departmentId": "d1"})
        text = render_course(CoursePage(course=course, related=[related]))
        self.assertIn("Department: CS", text)
        self.assertIn("Registration fee: 500 | Full fee: 12,000", text)
        self.assertIn("Learn Python", text)
        self.assertIn("k2 | Django", text)

    def test_department_page(self) -> None:
        dept = department_from_record({"_id": "d1", "name": "Physics"})
        fac = faculty_from_record({"name": "Dr. Rao", "designation": "Professor", "department": "Physics"})
        text = render_department(DepartmentPage(department=dept, courses=[], faculty=[fac], source="fallback"))
        self.assertIn("No courses listed for this department.", text)
        self.assertIn("Dr. Rao | Professor", text)


if __name__ == "__main__":
    unittest.main()
