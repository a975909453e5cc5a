import time
from typing import Callable, Iterable, List

from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from . import console
from .events import ChangeEvent

CHANGE_EVENT_TYPES = {
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_CLOSED,
}


def _as_str(path):
    if isinstance(path, bytes):
        return path.decode(errors="replace")
    return str(path)


class ChangeEventHandler(FileSystemEventHandler):
    """Forwards file changes reported by watchdog as ``ChangeEvent``s."""

    def __init__(self, consumer: Callable[[ChangeEvent], object]):
        self.consumer = consumer

    def to_change_event(self, event: FileSystemEvent):
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return None
        path = event.src_path
        if event.event_type == EVENT_TYPE_MOVED:
            path = event.dest_path
        return ChangeEvent(_as_str(path), time.time(), event.event_type)

    def on_any_event(self, event):
        try:
            change = self.to_change_event(event)
            if change is not None:
                self.consumer(change)
        except Exception as e:
            console.error(f"error: {e!r}")


class WatchEventSource:
    """Watches a fixed set of directories (non-recursively) with a watchdog observer."""

    def __init__(self, consumer: Callable[[ChangeEvent], object], observer_factory=Observer):
        self.handler = ChangeEventHandler(consumer)
        self.observer = observer_factory()
        self.watched: List[str] = []

    def start(self, directories: Iterable[str]):
        console.info("Initializing watcher...")
        self.observer.start()
        for directory in directories:
            console.info(f"Watching: {directory}")
            try:
                self.observer.schedule(self.handler, directory, recursive=False)
            except OSError as e:
                console.error(f"Failed to watch directory {directory}: {e}")
                continue
            self.watched.append(directory)
        return self

    def stop(self):
        self.observer.stop()
        self.observer.join()
