"""Random-access reader and writer for .vsdx package archives.

A .vsdx file is a zip archive of XML parts. This module opens a package for
read or for update, lists its entries, and hands out scoped byte streams for
individual parts. Streams are independent of the archive: they hold a copy of
the part, and in update mode a written stream is staged and only committed to
disk when the package is closed without error.

Update mode takes an exclusive advisory lock on the package file for the
lifetime of the handle. A commit rebuilds the archive beside the original
(same entry order, names, timestamps and compression) and atomically swaps it
in, so a failure part way through never leaves a half-written package.
"""

import copy
import io
import logging
import os
import tempfile
import zipfile
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

# Import fcntl for POSIX file locking (not available on Windows)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

from .errors import (
    LockConflictError,
    MalformedPackageError,
    PackageError,
    PackageNotFoundError,
)
from .models import EntryRef

logger = logging.getLogger(__name__)

MODE_READ = "read"
MODE_UPDATE = "update"


class EntryStream(io.BytesIO):
    """In-memory byte stream over one package part.

    Read streams reject writes. Update streams track whether they were
    written so the owning handle knows which parts to commit.
    """

    def __init__(self, initial: bytes, writable: bool = False):
        super().__init__(initial)
        self._can_write = writable
        self.dirty = False

    def writable(self) -> bool:
        return self._can_write

    def write(self, data) -> int:
        if not self._can_write:
            raise io.UnsupportedOperation("entry stream is read-only")
        self.dirty = True
        return super().write(data)

    def truncate(self, size: Optional[int] = None) -> int:
        """Truncate to ``size`` or, by default, the current position."""
        if not self._can_write:
            raise io.UnsupportedOperation("entry stream is read-only")
        self.dirty = True
        return super().truncate(size)


class PackageHandle:
    """An open .vsdx package.

    Use open_for_read() or open_for_update() rather than constructing
    this directly. Handles are context managers; leaving the ``with`` block
    normally commits staged parts, leaving it with an exception discards them.

    Example:
        >>> with open_for_update("diagram.vsdx") as package:
        ...     with package.open_entry("visio/pages/page1.xml") as stream:
        ...         data = stream.read()
        ...         stream.seek(0)
        ...         stream.write(data.replace(b"old", b"new"))
        ...         stream.truncate()
    """

    def __init__(self, path: str, mode: str = MODE_READ):
        self.path = path
        self.mode = mode
        self._file = None
        self._zip: Optional[zipfile.ZipFile] = None
        self._locked = False
        self._staged: Dict[str, bytes] = {}
        self._closed = False
        self._open()

    def _open(self) -> None:
        if not os.path.isfile(self.path):
            raise PackageNotFoundError(self.path)

        file_mode = "r+b" if self.mode == MODE_UPDATE else "rb"
        try:
            self._file = open(self.path, file_mode)
        except PermissionError:
            raise PackageError(f"Permission denied opening {self.path}")
        except OSError as e:
            raise PackageError(f"Cannot open {self.path}: {e}") from e

        try:
            if self.mode == MODE_UPDATE:
                self._acquire_lock()
            self._zip = zipfile.ZipFile(self._file, "r")
        except zipfile.BadZipFile as e:
            self._release()
            raise MalformedPackageError(self.path, f"not a valid zip archive ({e})") from e
        except BaseException:
            self._release()
            raise

        logger.debug(f"Opened {self.path} for {self.mode}")

    def _acquire_lock(self) -> None:
        if not HAS_FCNTL:
            logger.warning(
                "File locking not available on this platform. "
                "Concurrent edits of the same package may cause corruption."
            )
            return

        try:
            fcntl.flock(self._file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            self._locked = True
            logger.debug(f"Exclusive lock acquired on {self.path}")
        except OSError:
            raise LockConflictError(self.path)

    def _release(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

        if self._file is not None:
            if HAS_FCNTL and self._locked:
                try:
                    fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
                    logger.debug(f"Lock released on {self.path}")
                except OSError as e:
                    logger.warning(f"Failed to release lock on {self.path}: {e}")
            self._locked = False
            self._file.close()
            self._file = None

    def __enter__(self) -> "PackageHandle":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close(commit=exc_type is None)

    def entries(self) -> List[EntryRef]:
        """List file entries in archive order (directory entries omitted)."""
        return [
            EntryRef(name=info.filename, size=info.file_size)
            for info in self._zip.infolist()
            if not info.is_dir()
        ]

    def has_entry(self, name: str) -> bool:
        return name in self._zip.NameToInfo

    def read_entry(self, name: str) -> bytes:
        """Return the current bytes of a part, including staged edits.

        Raises:
            MalformedPackageError: If the part is missing or unreadable
        """
        if name in self._staged:
            return self._staged[name]
        try:
            return self._zip.read(name)
        except KeyError:
            raise MalformedPackageError(self.path, "part not found", name)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise MalformedPackageError(self.path, f"cannot read part ({e})", name) from e

    @contextmanager
    def open_entry(self, entry) -> Iterator[EntryStream]:
        """Open a scoped stream over one part.

        Args:
            entry: EntryRef or full entry name

        Yields:
            EntryStream positioned at the start of the part. Writable only
            when the package was opened for update.
        """
        name = entry.name if isinstance(entry, EntryRef) else entry
        stream = EntryStream(self.read_entry(name), writable=self.mode == MODE_UPDATE)
        try:
            yield stream
            if stream.dirty:
                self._staged[name] = stream.getvalue()
                logger.debug(f"Staged {name} ({len(self._staged[name])} bytes)")
        finally:
            stream.close()

    @property
    def staged_parts(self) -> List[str]:
        return list(self._staged)

    def close(self, commit: bool = True) -> None:
        """Commit staged parts (update mode) and release the package."""
        if self._closed:
            return
        try:
            if commit and self._staged:
                self._commit()
            elif self._staged:
                logger.debug(f"Discarding {len(self._staged)} staged part(s) for {self.path}")
        finally:
            self._staged = {}
            self._release()
            self._closed = True

    def _commit(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".vsdx.tmp", dir=directory)
        except OSError as e:
            raise PackageError(f"Cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as tmp_file:
                with zipfile.ZipFile(tmp_file, "w") as out:
                    for info in self._zip.infolist():
                        data = self._staged.get(info.filename)
                        if data is None:
                            data = self._zip.read(info.filename)
                        out.writestr(copy.copy(info), data)
                    out.comment = self._zip.comment
            os.chmod(tmp_path, os.stat(self.path).st_mode & 0o7777)
            os.replace(tmp_path, self.path)
        except BaseException as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            if isinstance(e, OSError):
                raise PackageError(f"Cannot write {self.path}: {e}") from e
            raise

        logger.info(f"Committed {len(self._staged)} part(s) to {self.path}")


def open_for_read(path: str) -> PackageHandle:
    """Open a package for reading."""
    return PackageHandle(path, MODE_READ)


def open_for_update(path: str) -> PackageHandle:
    """Open a package for read/write with an exclusive lock.

    Raises:
        LockConflictError: If another process holds the file
    """
    return PackageHandle(path, MODE_UPDATE)
