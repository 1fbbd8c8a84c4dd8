"""Depth-first enumeration of the files in a directory tree.

The traversal keeps an explicit stack of DirectoryCursor objects instead of
recursing, so it can stop after every file and resume on the next request.
Its memory use grows with the depth of the tree, not with the number of
entries in it.

Usage:
    for path in DirectoryTreeEnumerator("/home/foo"):
        print(path)
"""

import os

from treewalk.lib.cursor import DirectoryCursor
from treewalk.lib.item_producer import ItemProducer, ProducerIterator


def is_produced(entry: os.DirEntry) -> bool:
    """Return True if a non-directory entry should be produced.

    Regular files and symlinks resolving to regular files are produced.
    Broken links, fifos, sockets and devices are skipped.
    """
    return entry.is_file()


class DirectoryTreeEnumerator(ItemProducer):
    """Produces the path of every file below a root directory.

    Files come out in pre-order: a directory's entries are visited in
    listing order and every subdirectory is finished before its next
    sibling. Symlinks to directories are not descended into.

    An instance is single use. Once produce() has returned None it keeps
    returning None.
    """

    def __init__(self, root):
        root = os.fspath(root)
        if not os.path.isdir(root):
            raise ValueError(f"Path is not a directory: {root}")

        self.root = root
        self._stack = []
        self._dir = DirectoryCursor(root)
        self._aborted = False

    @property
    def depth(self) -> int:
        """Number of suspended parent directories above the current one."""
        return len(self._stack)

    def produce(self):
        """Return the path of the next file, or None if no more items.

        Raises:
            OSError: if a subdirectory cannot be listed. The traversal is
                abandoned and later calls raise RuntimeError.
        """
        if self._aborted:
            raise RuntimeError(f"traversal of {self.root} was aborted")

        while True:
            # ascend past exhausted directories
            while self._dir is not None and not self._dir.has_more():
                self._dir = self._stack.pop() if self._stack else None

            # whole tree exhausted
            if self._dir is None:
                return None

            entry = self._dir.take_next()
            if entry.is_dir(follow_symlinks=False):
                self._descend(entry.path)
            elif is_produced(entry):
                return entry.path

    def _descend(self, path):
        self._stack.append(self._dir)
        try:
            self._dir = DirectoryCursor(path)
        except OSError:
            self._aborted = True
            raise

    def is_done(self) -> bool:
        """Return True if the whole tree has been enumerated."""
        return self._dir is None

    def __iter__(self):
        return ProducerIterator(self)
