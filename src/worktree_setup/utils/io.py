"""Small IO helpers for safe persistence.

Provides atomic_write_text() which writes to a temp file in the same
filesystem and atomically replaces the destination, then sets the
requested permissions.

Also provides cross-platform advisory file locking via shared_file_lock()
and exclusive_file_lock(), and append_line() built on the latter.
"""
from __future__ import annotations

import logging
import os
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)


@contextmanager
def _file_lock(file_handle: IO, exclusive: bool) -> Iterator[None]:
    locked = False

    try:
        if sys.platform == "win32":
            try:
                import msvcrt

                # Windows only offers a byte-range lock on the first byte
                mode = msvcrt.LK_LOCK if exclusive else msvcrt.LK_NBLCK
                msvcrt.locking(file_handle.fileno(), mode, 1)
                locked = True
            except OSError:
                pass
        else:
            try:
                import fcntl

                fcntl.flock(file_handle, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
                locked = True
            except OSError:
                pass

        yield

    finally:
        if locked:
            try:
                if sys.platform == "win32":
                    import msvcrt

                    msvcrt.locking(file_handle.fileno(), msvcrt.LK_UNLCK, 1)
                else:
                    import fcntl

                    fcntl.flock(file_handle, fcntl.LOCK_UN)
            except OSError:
                pass


@contextmanager
def shared_file_lock(file_handle: IO) -> Iterator[None]:
    """Cross-platform shared (read) file lock context manager.

    On Unix, uses fcntl.flock with LOCK_SH.
    On Windows, uses msvcrt.locking (non-blocking, best-effort).
    If locking is unavailable or fails, continues without locking.

    Usage:
        with open(path) as f:
            with shared_file_lock(f):
                data = f.read()
    """
    with _file_lock(file_handle, exclusive=False):
        yield


@contextmanager
def exclusive_file_lock(file_handle: IO) -> Iterator[None]:
    """Cross-platform exclusive (write) file lock context manager.

    Same fallbacks as shared_file_lock(): when locking is unavailable the
    body still runs, unlocked.
    """
    with _file_lock(file_handle, exclusive=True):
        yield


def append_line(path: str | Path, line: str) -> None:
    """Append a single line to path under an exclusive lock.

    The line is written with one unbuffered write on an append-mode
    descriptor, so readers and other appenders never observe half a line.
    Raises OSError if the file cannot be opened or written.
    """
    if not line.endswith("\n"):
        line += "\n"

    with open(path, "ab", buffering=0) as f:
        with exclusive_file_lock(f):
            f.write(line.encode("utf-8"))


def atomic_write_text(path: str | Path, data: str, perms: int = 0o600) -> None:
    """Atomically write text content to path with the given permissions.

    Steps:
    - Ensure parent directory exists
    - Write to a NamedTemporaryFile in the same directory
    - fsync the temp file
    - os.replace() to move into place atomically
    - chmod the target path to perms

    If os.replace() fails, the temp file is cleaned up before re-raising.
    """
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            dir=str(dest.parent),
            delete=False,
            encoding="utf-8",
            newline="\n",
        ) as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_name = tmp.name

        os.replace(tmp_name, dest)
        tmp_name = None  # Successfully replaced, no cleanup needed

        try:
            os.chmod(dest, perms)
        except PermissionError:
            logger.warning(
                f"Could not set permissions {oct(perms)} on {dest}. "
                f"File was written but permissions may be wrong."
            )
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
