"""Byte copying and hashing for files found by the enumerator."""

import hashlib

BLOCKSIZE = 65536


def pipe(src, dst, blocksize: int = BLOCKSIZE) -> int:
    """Copy all data from src to dst, then close both streams.

    Both streams are closed even if the copy fails.

    Returns:
        The number of bytes copied.
    """
    copied = 0
    try:
        while True:
            data = src.read(blocksize)
            if not data:
                break
            dst.write(data)
            copied += len(data)
        dst.flush()
    finally:
        try:
            src.close()
        finally:
            dst.close()
    return copied


class HashWriter:
    """Write-only stream that feeds everything written into a hash."""

    def __init__(self, algorithm: str):
        try:
            self.hash = hashlib.new(algorithm)
        except ValueError:
            raise ValueError(f"Unknown digest algorithm: {algorithm}")
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed HashWriter")
        self.hash.update(data)
        return len(data)

    def flush(self):
        pass

    def close(self):
        self.closed = True

    def hexdigest(self) -> str:
        return self.hash.hexdigest()


def file_digest(path, algorithm: str = "sha1") -> str:
    """Return the hex digest of the contents of the file at path."""
    out = HashWriter(algorithm)
    pipe(open(path, "rb"), out)
    return out.hexdigest()


def hash_string(data: str, algorithm: str = "sha1", encoding: str = "utf-8") -> str:
    """Return the hex digest of data encoded with encoding."""
    out = HashWriter(algorithm)
    out.write(data.encode(encoding))
    return out.hexdigest()
