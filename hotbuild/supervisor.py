import enum
import os
import re
import subprocess
import threading
from typing import Callable, List, Optional

from . import console

_RUN_ARG_PATTERN = re.compile(r"\"([^\"]*)\"|'([^']*)'|(\S+)")


def parse_run_args(text: Optional[str]) -> List[str]:
    """
    Split a run-argument string on whitespace, keeping quoted runs together.

    Quotes are only grouping markers: there is no escaping and no variable
    expansion. ``-conf "a b/app.toml" -v`` gives ``['-conf', 'a b/app.toml', '-v']``.
    """
    if not text:
        return []
    args = []
    for double, single, bare in _RUN_ARG_PATTERN.findall(text):
        args.append(bare or double or single)
    return args


def normalize_artifact_path(name: str) -> str:
    if os.path.isabs(name) or name.startswith(("./", "../", ".\\", "..\\")):
        return name
    return "./" + name


class ProcessState(enum.Enum):
    NOT_RUNNING = "not running"
    STARTING = "starting"
    RUNNING = "running"
    TERMINATING = "terminating"


class ProcessHandle:
    """
    A launched child process.

    Children are never waited on: the handle only offers a non-blocking
    ``poll`` and ``kill``.
    """

    def __init__(self, process: subprocess.Popen, args: List[str]):
        self._process = process
        self.args = args
        self.killed = False

    @property
    def pid(self):
        return self._process.pid

    def poll(self):
        return self._process.poll()

    def is_running(self):
        return self.poll() is None

    def kill(self):
        self.killed = True
        self._process.kill()


class ProcessSupervisor:
    """Owns the single child process running the built artifact."""

    def __init__(self, workdir: str, run_args: str = "",
                 popen: Callable[..., subprocess.Popen] = subprocess.Popen):
        self.workdir = workdir
        self.run_args = run_args
        self.popen = popen
        self._handle: Optional[ProcessHandle] = None
        self._starting = False
        self._lock = threading.RLock()

    @property
    def handle(self) -> Optional[ProcessHandle]:
        return self._handle

    @property
    def state(self) -> ProcessState:
        if self._starting:
            return ProcessState.STARTING
        handle = self._handle
        if handle is None or not handle.is_running():
            return ProcessState.NOT_RUNNING
        if handle.killed:
            return ProcessState.TERMINATING
        return ProcessState.RUNNING

    def kill(self):
        with self._lock:
            handle = self._handle
            if handle is None:
                return
            console.info(f"Killing running process (pid {handle.pid})")
            try:
                handle.kill()
            except OSError as e:
                console.warn(f"Error while killing process: {e}")
            except Exception as e:
                console.error(f"Kill recovered from unexpected error: {e!r}")

    def start(self, artifact: str) -> Optional[ProcessHandle]:
        with self._lock:
            executable = normalize_artifact_path(artifact)
            args = [executable] + parse_run_args(self.run_args)
            console.info(f"Starting '{executable}'...")

            self._starting = True
            try:
                # stdout, stderr and the environment are inherited; the child
                # is never waited on.
                process = self.popen(args, cwd=self.workdir, env=os.environ.copy())
            except OSError as e:
                console.error(f"Failed to start '{executable}': {e}")
                self._handle = None
                return None
            finally:
                self._starting = False

            self._handle = ProcessHandle(process, args)
            console.success(f"Started '{executable}' (pid {self._handle.pid})")
            return self._handle

    def restart(self, artifact: str) -> Optional[ProcessHandle]:
        self.kill()
        return self.start(artifact)
