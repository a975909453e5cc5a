import os
import subprocess
import sys
from typing import NamedTuple, Sequence

from . import console

DEFAULT_BUILD_COMMAND = ("go",)
DEFAULT_ARTIFACT_NAME = "go-app-debug"


class BuildOutcome(NamedTuple):
    success: bool
    diagnostics: str = ""


def artifact_name(name=DEFAULT_ARTIFACT_NAME, platform=None):
    """Apply the executable suffix of the platform to the artifact name."""
    platform = platform or sys.platform
    if platform.startswith("win") and not name.endswith(".exe"):
        name += ".exe"
    return name


class BuildRunner:
    """
    Runs ``<command> build -o <artifact> <entry point>`` inside the project root.

    Only the exit status and standard error of the build are observed.
    """

    def __init__(self, project_root: str, command: Sequence[str] = DEFAULT_BUILD_COMMAND):
        self.project_root = project_root
        self.command = list(command)

    def build_args(self, entry_point, artifact):
        return self.command + ["build", "-o", artifact, entry_point]

    def build_and_capture(self, entry_point: str, artifact: str) -> BuildOutcome:
        args = self.build_args(entry_point, artifact)
        console.info(f"Building {entry_point} in {self.project_root}...")

        try:
            result = subprocess.run(
                args,
                cwd=self.project_root,
                env=os.environ.copy(),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            console.error(f"Build failed: could not run {args[0]!r}: {e}")
            return BuildOutcome(False, str(e))

        if result.returncode != 0:
            console.error(f"Build failed: {result.stderr}")
            return BuildOutcome(False, result.stderr or "")

        console.success("Build succeeded!")
        return BuildOutcome(True, result.stderr or "")
