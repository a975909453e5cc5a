import os

from .builder import DEFAULT_ARTIFACT_NAME, DEFAULT_BUILD_COMMAND, artifact_name
from .events import DEFAULT_QUIET_WINDOW, DEFAULT_SOURCE_EXTENSIONS, DEFAULT_STATIC_EXTENSIONS
from .exceptions import StartupError
from .supervisor import parse_run_args


class Settings:
    """Configuration resolved once at startup."""

    def __init__(self, project_path, main_file_path, run_args, build_command=DEFAULT_BUILD_COMMAND,
                 artifact=DEFAULT_ARTIFACT_NAME, quiet_window=DEFAULT_QUIET_WINDOW,
                 source_extensions=DEFAULT_SOURCE_EXTENSIONS, static_extensions=DEFAULT_STATIC_EXTENSIONS):
        self.project_path = project_path
        self.main_file_path = main_file_path
        self.run_args = run_args
        self.build_command = tuple(build_command)
        self.artifact = artifact
        self.quiet_window = quiet_window
        self.source_extensions = tuple(source_extensions)
        self.static_extensions = tuple(static_extensions)

    @classmethod
    def resolve(cls, path=None, main_file_path=None, run_args=None, build_command=None, output=None,
                delay=DEFAULT_QUIET_WINDOW, extensions=None, static_extensions=None, getcwd=None,
                platform=None):
        source_extensions = tuple(_as_extension(e) for e in extensions) if extensions else DEFAULT_SOURCE_EXTENSIONS
        if static_extensions:
            static_extensions = tuple(_as_extension(e) for e in static_extensions)
        else:
            static_extensions = DEFAULT_STATIC_EXTENSIONS

        if not path or not os.path.isdir(path):
            try:
                path = (getcwd or os.getcwd)()
            except OSError as e:
                raise StartupError("Could not determine the project directory", e)

        if not main_file_path:
            main_file_path = f"{path}/main{source_extensions[0]}"

        if not run_args:
            run_args = f"-conf {path}/app.toml"

        command = parse_run_args(build_command) if build_command else DEFAULT_BUILD_COMMAND
        if not command:
            raise StartupError(f"Invalid build command: {build_command!r}")

        if delay < 0:
            raise StartupError(f"The rebuild delay must not be negative, got {delay}")

        return cls(
            project_path=path,
            main_file_path=main_file_path,
            run_args=run_args,
            build_command=command,
            artifact=artifact_name(output or DEFAULT_ARTIFACT_NAME, platform),
            quiet_window=delay,
            source_extensions=source_extensions,
            static_extensions=static_extensions,
        )

    def __repr__(self):
        return (f"Settings(project_path={self.project_path!r}, main_file_path={self.main_file_path!r}, "
                f"run_args={self.run_args!r}, build_command={self.build_command!r}, artifact={self.artifact!r})")


def _as_extension(value):
    return value if value.startswith(".") else "." + value
