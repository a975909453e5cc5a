import argparse
import sys
import time

from . import __version__, console
from .builder import BuildRunner
from .discovery import discover_watch_dirs
from .events import ChangeProcessor, DebounceScheduler, FileFilter, ModTimeDeduper
from .exceptions import StartupError
from .pipeline import BuildPipeline
from .settings import Settings
from .supervisor import ProcessSupervisor
from .watcher import WatchEventSource


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hotbuild",
        description="Rebuild and restart an application whenever its sources change",
    )
    parser.add_argument("--path", default="", help="Project directory, the build runs inside it")
    parser.add_argument("--main-file-path", "--main_file_path", dest="main_file_path", default="",
                        help="Entry point passed to the build (default: <path>/main.go)")
    parser.add_argument("--runargs", default="", help="Arguments for the application, e.g. -conf xxx/app.toml")
    parser.add_argument("--build-command", default="", help="Build tool invoked as '<tool> build' (default: go)")
    parser.add_argument("--output", default="", help="Name of the built executable")
    parser.add_argument("--delay", type=float, default=1.0, help="Seconds to wait after a change before building")
    parser.add_argument("--ext", action="append", dest="extensions", help="Watched source extension (repeatable)")
    parser.add_argument("--static-ext", action="append", dest="static_extensions",
                        help="Static asset extension that never triggers a build (repeatable)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


class App:
    """Every long lived component of one supervised project."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.runner = BuildRunner(settings.project_path, settings.build_command)
        self.supervisor = ProcessSupervisor(settings.project_path, settings.run_args)
        self.pipeline = BuildPipeline(self.runner, self.supervisor, settings.main_file_path, settings.artifact)
        self.scheduler = DebounceScheduler(self.pipeline.run, settings.quiet_window)
        self.processor = ChangeProcessor(
            FileFilter(settings.source_extensions, settings.static_extensions),
            ModTimeDeduper(),
            self.scheduler,
        )
        self.watcher = WatchEventSource(self.processor)

    def start(self):
        directories = discover_watch_dirs(self.settings.project_path, self.settings.source_extensions)
        self.watcher.start(directories)
        console.info("Initial build and run...")
        self.pipeline.run()

    def stop(self):
        self.watcher.stop()


def run(settings: Settings):
    app = App(settings)
    app.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        console.warn("Shutdown signal received. Stopping watcher...")
    finally:
        app.stop()


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.resolve(
            path=args.path,
            main_file_path=args.main_file_path,
            run_args=args.runargs,
            build_command=args.build_command,
            output=args.output,
            delay=args.delay,
            extensions=args.extensions,
            static_extensions=args.static_extensions,
        )
    except StartupError as e:
        console.error(f"Error: {e}")
        sys.exit(1)

    run(settings)
    sys.exit(0)


if __name__ == "__main__":
    main()
