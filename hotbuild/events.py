import os
import threading
import time
from typing import Callable, Dict, Iterable, NamedTuple, Optional

from . import console

DEFAULT_SOURCE_EXTENSIONS = (".go",)
DEFAULT_STATIC_EXTENSIONS = (".html", ".tpl", ".js", ".css")
DEFAULT_QUIET_WINDOW = 1.0


class ChangeEvent(NamedTuple):
    path: str
    observed_at: float
    kind: str = "modified"


def file_mod_time(path: str) -> int:
    """
    Read the modification time of a file in whole seconds.

    A file that cannot be stat'ed (deleted between the notification and the
    check, permissions, ...) gets the current wall-clock time instead so the
    change is still treated as new.
    """
    path = path.replace("\\", "/")
    try:
        return int(os.stat(path).st_mtime)
    except OSError as e:
        console.warn(f"Failed to get file stats for '{path}': {e}")
        return int(time.time())


class ModTimeDeduper:
    """Remembers the last processed modification time of every changed file."""

    def __init__(self):
        self._mod_times: Dict[str, int] = {}

    def should_process(self, path: str, mod_time: int) -> bool:
        if self._mod_times.get(path) == mod_time:
            return False
        self._mod_times[path] = mod_time
        return True

    def last_seen(self, path: str) -> Optional[int]:
        return self._mod_times.get(path)

    def __len__(self):
        return len(self._mod_times)


class FileFilter:
    def __init__(
            self,
            source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
            static_extensions: Iterable[str] = DEFAULT_STATIC_EXTENSIONS
    ):
        self.source_extensions = tuple(source_extensions)
        self.static_extensions = tuple(static_extensions)

    def is_static(self, path: str) -> bool:
        return path.endswith(self.static_extensions)

    def is_relevant(self, path: str) -> bool:
        # Static assets are excluded before the source extensions are consulted
        if self.is_static(path):
            return False
        return path.endswith(self.source_extensions)


class DebounceScheduler:
    """
    Turns relevant changes into delayed rebuild triggers.

    Every call arms its own timer; earlier timers are left running. The
    callback is expected to be single-flight, so a burst of changes costs at
    most a few serialized redundant builds.
    """

    def __init__(
            self,
            callback: Callable[[], object],
            quiet_window: float = DEFAULT_QUIET_WINDOW,
            timer_factory: Callable[..., threading.Timer] = threading.Timer
    ):
        self.callback = callback
        self.quiet_window = quiet_window
        self.timer_factory = timer_factory
        self.fire_at: Optional[float] = None

    def on_relevant_change(self) -> threading.Timer:
        fire_at = time.monotonic() + self.quiet_window
        self.fire_at = fire_at
        timer = self.timer_factory(max(0.0, fire_at - time.monotonic()), self.callback)
        timer.daemon = True
        timer.start()
        return timer


class ChangeProcessor:
    """Runs watch events through the filter and the deduper into the scheduler."""

    def __init__(self, file_filter: FileFilter, deduper: ModTimeDeduper, scheduler: DebounceScheduler,
                 mod_time: Callable[[str], int] = file_mod_time):
        self.file_filter = file_filter
        self.deduper = deduper
        self.scheduler = scheduler
        self.mod_time = mod_time

    def __call__(self, event: ChangeEvent) -> bool:
        if not self.file_filter.is_relevant(event.path):
            return False

        console.info(f"event: {event.kind} {event.path}")
        if not self.deduper.should_process(event.path, self.mod_time(event.path)):
            console.info("Build already scheduled for this modification time, skipping...")
            return False

        console.info("Rebuilding...")
        self.scheduler.on_relevant_change()
        return True
