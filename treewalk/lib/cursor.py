"""Cursor over the immediate entries of one directory."""

import os


class DirectoryCursor:
    """The entries of a single directory, read once, and a read position.

    The listing is taken eagerly in the constructor and the OS handle is
    closed before it returns. Entries keep the order the filesystem lists
    them in. Listing errors are not caught here.
    """

    def __init__(self, path):
        self.path = os.fspath(path)
        with os.scandir(self.path) as it:
            self.entries = tuple(it)
        self.index = 0

    def has_more(self) -> bool:
        return self.index < len(self.entries)

    def take_next(self) -> os.DirEntry:
        """Return the entry at the read position and advance past it.

        Raises:
            IndexError: if the cursor is exhausted.
        """
        if self.index >= len(self.entries):
            raise IndexError(f"cursor exhausted: {self.path}")
        entry = self.entries[self.index]
        self.index += 1
        return entry

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return f"DirectoryCursor({self.path!r}, {self.index}/{len(self.entries)})"
