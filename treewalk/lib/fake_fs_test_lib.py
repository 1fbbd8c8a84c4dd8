"""An in-memory stand-in for os.scandir, for tests needing a fixed order."""

import os
from unittest import mock

FILE = "file"
LINK_TO_FILE = "link_to_file"
LINK_TO_DIR = "link_to_dir"
BROKEN_LINK = "broken_link"
FIFO = "fifo"


class FakeDirEntry:
    """Mimics the os.DirEntry type queries for one entry kind."""

    def __init__(self, parent, name, kind):
        self.name = name
        self.path = os.path.join(parent, name)
        self.kind = kind

    def is_dir(self, follow_symlinks=True):
        if self.kind == LINK_TO_DIR:
            return follow_symlinks
        return isinstance(self.kind, dict)

    def is_file(self, follow_symlinks=True):
        if self.kind == LINK_TO_FILE:
            return follow_symlinks
        return self.kind == FILE

    def is_symlink(self):
        return self.kind in (LINK_TO_FILE, LINK_TO_DIR, BROKEN_LINK)

    def __repr__(self):
        return f"<FakeDirEntry {self.name!r}>"


class FakeScandir:

    def __init__(self, entries):
        self.entries = entries
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def __iter__(self):
        return iter(self.entries)


class FakeTree:
    """A directory tree described by nested dicts.

    Keys are entry names, listed in insertion order. A dict value is a
    directory, anything else is one of the entry kinds above.

        tree = FakeTree(root, {"x": {"f1": FILE}, "f2": FILE})
        with tree.patch():
            ...
    """

    def __init__(self, root, layout):
        self.root = root
        self.listings = {}
        self.calls = []
        self.handles = []
        self.failures = set()
        self._add(root, layout)

    def _add(self, path, layout):
        self.listings[path] = [FakeDirEntry(path, name, kind)
                               for name, kind in layout.items()]
        for name, kind in layout.items():
            if isinstance(kind, dict):
                self._add(os.path.join(path, name), kind)

    def fail(self, *parts):
        """Make listing the directory root/parts raise PermissionError."""
        self.failures.add(os.path.join(self.root, *parts))

    def scandir(self, path):
        path = os.fspath(path)
        self.calls.append(path)
        if path in self.failures:
            raise PermissionError(13, "Permission denied", path)
        if path not in self.listings:
            raise FileNotFoundError(2, "No such file or directory", path)
        handle = FakeScandir(self.listings[path])
        self.handles.append(handle)
        return handle

    def patch(self):
        return mock.patch("os.scandir", self.scandir)
