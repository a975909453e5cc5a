import os

from .events import DEFAULT_SOURCE_EXTENSIONS


def discover_watch_dirs(root, source_extensions=DEFAULT_SOURCE_EXTENSIONS):
    """
    Collect every directory under ``root`` that directly holds a source file.

    Hidden directories (``.git``, ``.idea``, ...) and symlinks to directories
    are not descended into, and directories that cannot be listed are skipped.
    """
    paths = []
    _walk(root, tuple(source_extensions), paths)
    return paths


def _walk(directory, source_extensions, paths):
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError:
        return

    has_source = False
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue

        if is_dir:
            if not entry.name.startswith("."):
                _walk(os.path.join(directory, entry.name), source_extensions, paths)
            continue

        if not has_source and os.path.splitext(entry.name)[1] in source_extensions:
            paths.append(directory)
            has_source = True
