"""
Read-only virtual filesystem over embedded data.

Generated modules build an :class:`Fs` from :class:`File` literals when they
are imported. File contents stay encoded until first read; the decode runs
at most once per file even when several threads race for it, and the
decoded bytes are shared by every handle opened on that file.

Usage:
    from myapp.assets import Assets

    data = Assets.read_bytes("/css/site.css")

    with Assets.open("/") as root:
        for info in root.readdir(0):
            print(info.name, info.size, info.mod_time)
"""

from __future__ import annotations

import io
import threading
from collections.abc import Iterator, Mapping
from datetime import datetime, timezone

from fsembed import FORMAT_VERSION, codec
from fsembed.errors import NotFoundError

# Permission bits reported for every entry
READ_ONLY_MODE = 0o444

SUPPORTED_FORMATS: frozenset[int] = frozenset({FORMAT_VERSION})


# -----------------------------------------------------------------------------
# File
# -----------------------------------------------------------------------------


class File:
    """
    One embedded file or directory.

    Doubles as the stat view returned by :meth:`Handle.stat`.

    Attributes:
        path: Virtual path (assigned by the owning Fs when omitted)
        name: Base name
        mod_time_unix: Modification time in seconds since the epoch
        is_dir: Whether this is a directory
        data: Encoded payload, None when empty
    """

    __slots__ = ("path", "name", "_size", "mod_time_unix", "is_dir", "data", "_value", "_done", "_lock")

    def __init__(
        self,
        name: str,
        mod_time: int = 0,
        size: int = 0,
        is_dir: bool = False,
        data: str | None = None,
        path: str | None = None,
    ) -> None:
        self.path = path
        self.name = name
        self._size = size
        self.mod_time_unix = mod_time
        self.is_dir = is_dir
        self.data = None if is_dir else data

        self._value = b""
        self._done = False
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        kind = "dir" if self.is_dir else f"{self._size} bytes"
        return f"File({self.path or self.name!r}, {kind})"

    # -- content --------------------------------------------------------------

    def prepare(self) -> bytes:
        """
        Decode the payload once and return the cached bytes.

        Raises:
            DecodeError: If the payload is corrupt. The next call retries.
        """
        if self._done:
            return self._value
        with self._lock:
            if not self._done:
                if self.data:
                    self._value = codec.decode(self.data)
                self._done = True
        return self._value

    def content(self) -> bytes:
        """Decoded content."""
        return self.prepare()

    def reset(self) -> None:
        """
        Drop the decoded bytes so they can be reclaimed.

        The next read decodes again. Must not race with an in-flight decode.
        """
        with self._lock:
            self._value = b""
            self._done = False

    # -- stat view ------------------------------------------------------------

    @property
    def size(self) -> int:
        """Length of the decoded content, 0 for directories."""
        return 0 if self.is_dir else self._size

    @property
    def mode(self) -> int:
        return READ_ONLY_MODE

    @property
    def mod_time(self) -> datetime:
        return datetime.fromtimestamp(self.mod_time_unix, tz=timezone.utc)

    def sys(self) -> File:
        return self


# -----------------------------------------------------------------------------
# Handle
# -----------------------------------------------------------------------------


class Handle:
    """
    A cursor over one file, returned by :meth:`Fs.open`.

    Not safe for concurrent use; open one handle per thread.
    """

    def __init__(self, fs: Fs, file: File) -> None:
        self._fs = fs
        self._file = file
        self._reader: io.BytesIO | None = None
        self._children: list[File] | None = None
        self._dir_pos = 0

    def __enter__(self) -> Handle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def name(self) -> str | None:
        return self._file.path

    def _cursor(self) -> io.BytesIO:
        # Decoding is deferred until content is actually needed
        if self._reader is None:
            self._reader = io.BytesIO(self._file.prepare())
        return self._reader

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the current offset (all if negative)."""
        return self._cursor().read(size)

    def readinto(self, buffer) -> int:
        """Fill a writable buffer; returns the number of bytes read."""
        return self._cursor().readinto(buffer)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the read offset. Positions past the end are allowed; negative ones raise ValueError."""
        return self._cursor().seek(offset, whence)

    def tell(self) -> int:
        if self._reader is None:
            return 0
        return self._reader.tell()

    def stat(self) -> File:
        return self._file

    def readdir(self, count: int = 0) -> list[File]:
        """
        List entries beneath this directory, sorted by name.

        Successive calls continue where the previous one stopped.

        Args:
            count: Maximum number of entries; 0 or less returns the rest

        Returns:
            Up to ``count`` entries, empty when exhausted or not a directory
        """
        if not self._file.is_dir:
            return []

        if self._children is None:
            self._children = self._fs.children(self._file.path or "/")

        remaining = self._children[self._dir_pos :]
        if count > 0:
            remaining = remaining[:count]
        self._dir_pos += len(remaining)
        return remaining

    def close(self) -> None:
        """No-op; embedded data is immutable."""
        return None


# -----------------------------------------------------------------------------
# Fs
# -----------------------------------------------------------------------------


class Fs(Mapping):
    """
    Mapping of virtual path to :class:`File`.

    Args:
        files: Entries keyed by virtual path
        format_version: Schema version the generator wrote

    Raises:
        ValueError: If the format version is not supported
    """

    def __init__(self, files: Mapping[str, File] | None = None, *, format_version: int = FORMAT_VERSION) -> None:
        if format_version not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported embedded format {format_version} "
                f"(supported: {sorted(SUPPORTED_FORMATS)})"
            )
        self.format_version = format_version
        self._files: dict[str, File] = {}
        for path, file in (files or {}).items():
            file.path = path
            self._files[path] = file

    def __getitem__(self, path: str) -> File:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"Fs({len(self._files)} entries)"

    def open(self, path: str) -> Handle:
        """
        Open a virtual path.

        Raises:
            NotFoundError: If the path is not embedded
        """
        file = self._files.get(path)
        if file is None:
            raise NotFoundError(path)
        return Handle(self, file)

    def read_bytes(self, path: str) -> bytes:
        """Open a path and read it fully."""
        with self.open(path) as handle:
            return handle.read()

    def read_text(self, path: str, encoding: str = "utf-8", errors: str = "strict") -> str:
        return self.read_bytes(path).decode(encoding, errors=errors)

    def children(self, directory: str) -> list[File]:
        """Every entry beneath a virtual directory, sorted by name then path."""
        prefix = directory.rstrip("/") + "/"
        found = [
            f for p, f in self._files.items()
            if p != directory and p.startswith(prefix)
        ]
        found.sort(key=lambda f: (f.name, f.path))
        return found

    def reset(self) -> None:
        """Drop every cached decode."""
        for file in self._files.values():
            file.reset()
