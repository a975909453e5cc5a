import os
import sys
import tempfile
import time
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from hotbuild.discovery import discover_watch_dirs


def touch(*parts):
    path = os.path.join(*parts)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write("")
    return path


class TestDiscoverWatchDirs(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = self.tmp.name

    def tearDown(self):
        self.tmp.cleanup()

    def test_one_entry_per_directory_with_sources(self):
        touch(self.root, "main.go")
        touch(self.root, "util.go")
        touch(self.root, "handlers", "user.go")
        touch(self.root, "handlers", "admin.go")
        touch(self.root, "handlers", "api", "v1.go")

        dirs = discover_watch_dirs(self.root)

        self.assertEqual(sorted(dirs), sorted([
            self.root,
            os.path.join(self.root, "handlers"),
            os.path.join(self.root, "handlers", "api"),
        ]))

    def test_directories_without_sources_are_skipped(self):
        touch(self.root, "main.go")
        touch(self.root, "static", "app.js")
        touch(self.root, "views", "index.html")
        touch(self.root, "docs", "empty", "README.md")

        self.assertEqual(discover_watch_dirs(self.root), [self.root])

    def test_hidden_directories_are_not_descended(self):
        touch(self.root, ".git", "hooks", "pre-commit.go")
        touch(self.root, ".cache", "x.go")
        touch(self.root, "pkg", "lib.go")

        self.assertEqual(discover_watch_dirs(self.root), [os.path.join(self.root, "pkg")])

    def test_custom_extensions(self):
        touch(self.root, "src", "main.rs")
        touch(self.root, "cmd", "main.go")

        self.assertEqual(discover_watch_dirs(self.root, (".rs",)), [os.path.join(self.root, "src")])

    @unittest.skipUnless(hasattr(os, "symlink") and os.name == "posix", "needs directory symlinks")
    def test_symlinked_directories_are_not_followed(self):
        touch(self.root, "main.go")
        touch(self.root, "pkg", "lib.go")
        os.symlink(self.root, os.path.join(self.root, "loop"))
        os.symlink(self.root, os.path.join(self.root, "pkg", "up"))

        self.assertEqual(sorted(discover_watch_dirs(self.root)), sorted([self.root, os.path.join(self.root, "pkg")]))

    @unittest.skipUnless(hasattr(os, "symlink") and os.name == "posix", "needs directory symlinks")
    def test_several_symlink_loops_return_promptly(self):
        touch(self.root, "main.go")
        for name in ("a", "b", "c"):
            os.symlink(self.root, os.path.join(self.root, name))

        start = time.monotonic()
        dirs = discover_watch_dirs(self.root)
        self.assertLess(time.monotonic() - start, 5)
        self.assertEqual(dirs, [self.root])

    def test_missing_root(self):
        self.assertEqual(discover_watch_dirs(os.path.join(self.root, "missing")), [])


if __name__ == '__main__':
    unittest.main()
