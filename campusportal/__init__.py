"""
campusportal – terminal client for the public API of a college website.

Resolves categories, courses, departments and faculty from the backend's
flat JSON responses and renders them as plain text or a rich menu.
"""

__version__ = "0.1.0"
