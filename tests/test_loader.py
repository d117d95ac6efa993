"""
Unit tests for ViewLoader (view-bound loading with a stale-update guard).

Rules:
- on_done only sees results of the latest mount() of a still-mounted view
- results arriving after unmount() are dropped
- the loader tracks loading/loaded/not_found/error
"""

import threading
import unittest

from campusportal.errors import NotFoundError, TransportError
from campusportal.loader import LoadState, ViewLoader


class TestViewLoader(unittest.TestCase):
    def setUp(self) -> None:
        self.loader = ViewLoader("test")

    def tearDown(self) -> None:
        self.loader.shutdown()

    def test_result_is_delivered(self) -> None:
        seen = []
        self.loader.mount("k1", lambda: "page", seen.append).result(timeout=5)
        self.assertEqual(seen, ["page"])
        self.assertEqual(self.loader.state, LoadState.LOADED)

    def test_not_found_and_error_states(self) -> None:
        seen = []

        def missing():
            raise NotFoundError("Course", "x")

        def broken():
            raise TransportError("down")

        self.loader.mount("x", missing, seen.append).result(timeout=5)
        self.assertEqual(self.loader.state, LoadState.NOT_FOUND)
        self.assertIsInstance(seen[-1], NotFoundError)

        self.loader.mount("y", broken, seen.append).result(timeout=5)
        self.assertEqual(self.loader.state, LoadState.ERROR)
        self.assertIsInstance(seen[-1], TransportError)

    def test_response_after_unmount_is_dropped(self) -> None:
        release = threading.Event()
        seen = []

        def slow():
            release.wait(5)
            return "late"

        future = self.loader.mount("k1", slow, seen.append)
        self.loader.unmount()
        release.set()
        future.result(timeout=5)

        self.assertEqual(seen, [])
        self.assertFalse(self.loader.mounted)
        self.assertEqual(self.loader.state, LoadState.IDLE)

    def test_newer_mount_supersedes_older(self) -> None:
        release = threading.Event()
        seen = []

        def slow():
            release.wait(5)
            return "old"

        old = self.loader.mount("k1", slow, seen.append)
        new = self.loader.mount("k2", lambda: "new", seen.append)
        new.result(timeout=5)
        release.set()
        old.result(timeout=5)

        self.assertEqual(seen, ["new"])
        self.assertEqual(self.loader.key, "k2")


if __name__ == "__main__":
    unittest.main()
