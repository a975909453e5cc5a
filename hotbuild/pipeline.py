import threading
import traceback
from typing import Optional

from . import console
from .builder import BuildOutcome, BuildRunner
from .supervisor import ProcessSupervisor


class FairLock:
    """A lock that hands itself out in the order it was requested."""

    def __init__(self):
        self._condition = threading.Condition()
        self._next_ticket = 0
        self._serving = 0

    def acquire(self):
        with self._condition:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._serving:
                self._condition.wait()

    def release(self):
        with self._condition:
            self._serving += 1
            self._condition.notify_all()

    @property
    def waiting(self):
        """Number of callers queued behind the current holder."""
        with self._condition:
            return max(0, self._next_ticket - self._serving - 1)

    def locked(self):
        with self._condition:
            return self._serving != self._next_ticket

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class BuildPipeline:
    """
    Build the entry point and, when the build succeeds, restart the child.

    Every execution holds one fair lock from the start of the build until the
    restart decision is made, so executions never overlap and run in the
    order they were requested.
    """

    def __init__(self, runner: BuildRunner, supervisor: ProcessSupervisor, entry_point: str, artifact: str):
        self.runner = runner
        self.supervisor = supervisor
        self.entry_point = entry_point
        self.artifact = artifact
        self.lock = FairLock()

    def run(self) -> Optional[BuildOutcome]:
        with self.lock:
            try:
                outcome = self.runner.build_and_capture(self.entry_point, self.artifact)
                if not outcome.success:
                    console.warn("Restart skipped, the previous process keeps running.")
                    return outcome

                self.supervisor.restart(self.artifact)
                return outcome
            except Exception as e:
                console.error(f"Build and restart failed: {e}\n{traceback.format_exc()}")
                return None
