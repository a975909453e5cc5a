import io
import os
import sys
import tempfile
import time
import unittest
from contextlib import redirect_stdout
from unittest.mock import MagicMock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from hotbuild.watcher import ChangeEventHandler, WatchEventSource


class TestChangeEventHandler(unittest.TestCase):
    def setUp(self):
        self.received = []
        self.handler = ChangeEventHandler(self.received.append)

    def test_file_events_are_forwarded(self):
        self.handler.dispatch(FileModifiedEvent("/proj/main.go"))
        self.handler.dispatch(FileCreatedEvent("/proj/new.go"))
        self.handler.dispatch(FileDeletedEvent("/proj/old.go"))

        self.assertEqual([e.path for e in self.received], ["/proj/main.go", "/proj/new.go", "/proj/old.go"])
        self.assertEqual([e.kind for e in self.received], ["modified", "created", "deleted"])
        for event in self.received:
            self.assertAlmostEqual(event.observed_at, time.time(), delta=5)

    def test_moves_report_the_destination(self):
        self.handler.dispatch(FileMovedEvent("/proj/.main.go.swp", "/proj/main.go"))
        self.assertEqual(self.received[0].path, "/proj/main.go")
        self.assertEqual(self.received[0].kind, "moved")

    def test_directory_events_are_ignored(self):
        self.handler.dispatch(DirModifiedEvent("/proj/pkg"))
        self.assertEqual(self.received, [])

    def test_consumer_errors_are_logged(self):
        handler = ChangeEventHandler(MagicMock(side_effect=ValueError("bad event")))
        out = io.StringIO()
        with redirect_stdout(out):
            handler.dispatch(FileModifiedEvent("/proj/main.go"))
        self.assertIn("error:", out.getvalue())
        self.assertIn("bad event", out.getvalue())


class TestWatchEventSource(unittest.TestCase):
    def test_failed_directory_does_not_stop_the_others(self):
        observer = MagicMock()
        observer.schedule.side_effect = [None, FileNotFoundError("no such directory"), None]
        source = WatchEventSource(MagicMock(), observer_factory=lambda: observer)

        out = io.StringIO()
        with redirect_stdout(out):
            source.start(["/proj", "/proj/gone", "/proj/pkg"])

        observer.start.assert_called_once_with()
        self.assertEqual(observer.schedule.call_count, 3)
        for call in observer.schedule.call_args_list:
            self.assertIs(call.args[0], source.handler)
            self.assertEqual(call.kwargs, {"recursive": False})
        self.assertEqual(source.watched, ["/proj", "/proj/pkg"])
        self.assertIn("Failed to watch directory /proj/gone", out.getvalue())

        source.stop()
        observer.stop.assert_called_once_with()
        observer.join.assert_called_once_with()

    def test_real_observer_reports_changes(self):
        received = []
        with tempfile.TemporaryDirectory() as tmp, redirect_stdout(io.StringIO()):
            source = WatchEventSource(received.append).start([tmp])
            try:
                path = os.path.join(tmp, "main.go")
                deadline = time.monotonic() + 10
                while time.monotonic() < deadline:
                    with open(path, "w") as f:
                        f.write("package main\n")
                    time.sleep(0.1)
                    if any(os.path.basename(e.path) == "main.go" for e in received):
                        break
            finally:
                source.stop()

        self.assertTrue(any(os.path.basename(e.path) == "main.go" for e in received))


if __name__ == '__main__':
    unittest.main()
