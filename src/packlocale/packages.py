"""Package and package-source infrastructure for PackageDataProvider.

A package is a releasable container of named binary entries. A package
source produces a fresh package for every load call. Both are Protocols
(structural typing), so zip readers, directory walkers and network clients
are interchangeable.

Components:
    Package - Protocol for a releasable container of named entries
    PackageSource - Protocol for asynchronously acquiring a package
    MemoryPackage / ZipPackage / DirectoryPackage - Package implementations
    StaticPackageSource / ZipFileSource / UrlPackageSource / DirectorySource
        - PackageSource implementations

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import io
import zipfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

import httpx

from packlocale.constants import DEFAULT_DOWNLOAD_TIMEOUT
from packlocale.errors import (
    AcquisitionError,
    ConfigurationError,
    EntryReadError,
    PackageReleasedError,
)

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocols
    "Package",
    "PackageSource",
    # Packages
    "MemoryPackage",
    "ZipPackage",
    "DirectoryPackage",
    # Sources
    "StaticPackageSource",
    "ZipFileSource",
    "UrlPackageSource",
    "DirectorySource",
]


class Package(Protocol):
    """Protocol for a releasable container of named binary entries.

    A package is owned by exactly one load call. After release() every
    other method raises PackageReleasedError.
    """

    def list_entry_names(self) -> Sequence[str]:
        """Return the names of all entries in the package."""

    def read_entry(self, name: str, *, max_size: int | None = None) -> bytes:
        """Return the raw bytes of one entry.

        Args:
            name: Entry name as listed by list_entry_names()
            max_size: Largest entry in bytes to materialize. Larger entries
                raise EntryReadError without being read in full.

        Raises:
            EntryReadError: If the entry is missing, unreadable or too large
            PackageReleasedError: If the package was released
        """

    def release(self) -> None:
        """Free the package's resources. Idempotent."""


class PackageSource(Protocol):
    """Protocol for acquiring a package asynchronously.

    Each call to acquire() must return a new package instance; the caller
    takes ownership and releases it.

    Example:
        >>> class BytesSource:
        ...     def __init__(self, data: bytes) -> None:
        ...         self.data = data
        ...     async def acquire(self) -> Package:
        ...         return ZipPackage(self.data)
    """

    async def acquire(self) -> Package:
        """Fetch and open a package.

        Raises:
            AcquisitionError: If the package cannot be fetched or opened
        """


class _ReleasablePackage:
    """Release bookkeeping shared by the bundled packages."""

    __slots__ = ("_released",)

    def __init__(self) -> None:
        self._released = False

    @property
    def released(self) -> bool:
        """Check if release() has been called."""
        return self._released

    def _check_open(self) -> None:
        if self._released:
            msg = f"{type(self).__name__} accessed after release"
            raise PackageReleasedError(msg)

    @staticmethod
    def _check_size(name: str, size: int, max_size: int | None) -> None:
        if max_size is not None and size > max_size:
            msg = f"Entry '{name}' is {size} bytes, limit is {max_size}"
            raise EntryReadError(msg, entry_name=name)

    def release(self) -> None:
        """Mark the package released. Idempotent."""
        self._released = True


class MemoryPackage(_ReleasablePackage):
    """Package backed by an in-memory mapping of entry name to bytes.

    The mapping is copied at construction; later changes to the caller's
    mapping do not affect the package.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, bytes]) -> None:
        super().__init__()
        self._entries: dict[str, bytes] = dict(entries)

    def list_entry_names(self) -> list[str]:
        self._check_open()
        return list(self._entries)

    def read_entry(self, name: str, *, max_size: int | None = None) -> bytes:
        self._check_open()
        try:
            data = self._entries[name]
        except KeyError:
            msg = f"Entry not found: '{name}'"
            raise EntryReadError(msg, entry_name=name) from None
        self._check_size(name, len(data), max_size)
        return data

    def release(self) -> None:
        self._entries = {}
        super().release()


class ZipPackage(_ReleasablePackage):
    """Package backed by a zip archive held in memory.

    Directory members are not listed as entries.

    Raises:
        zipfile.BadZipFile: If data is not a zip archive
    """

    __slots__ = ("_archive",)

    def __init__(self, data: bytes) -> None:
        super().__init__()
        self._archive = zipfile.ZipFile(io.BytesIO(data))

    def list_entry_names(self) -> list[str]:
        self._check_open()
        return [info.filename for info in self._archive.infolist() if not info.is_dir()]

    def read_entry(self, name: str, *, max_size: int | None = None) -> bytes:
        """Decompress one member.

        With max_size set, the declared size is checked before inflating and
        at most max_size + 1 bytes are decompressed, so a member whose header
        understates its size is still rejected without being inflated in full.
        """
        self._check_open()
        try:
            info = self._archive.getinfo(name)
        except KeyError:
            msg = f"Entry not found: '{name}'"
            raise EntryReadError(msg, entry_name=name) from None
        self._check_size(name, info.file_size, max_size)
        try:
            with self._archive.open(info) as member:
                data = member.read() if max_size is None else member.read(max_size + 1)
        except (zipfile.BadZipFile, OSError, RuntimeError) as e:
            # RuntimeError: encrypted member without a password
            msg = f"Cannot read entry '{name}': {e}"
            raise EntryReadError(msg, entry_name=name) from e
        self._check_size(name, len(data), max_size)
        return data

    def release(self) -> None:
        if not self._released:
            self._archive.close()
        super().release()


class DirectoryPackage(_ReleasablePackage):
    """Package backed by a directory tree on disk.

    Entry names are POSIX paths prefixed by the directory's own name, so a
    tree rooted at ``locales/`` yields ``locales/default/main.json``. The
    prefix keeps the first level of the tree addressable by the delimited
    segment test (``/default/``).

    Entry names are snapshotted at construction.

    Security:
        Entry names containing ".." or absolute paths are rejected, and all
        resolved paths are validated against the root directory.
    """

    __slots__ = ("_names", "_prefix", "_root")

    def __init__(self, root: str | Path) -> None:
        super().__init__()
        self._root = Path(root).resolve()
        if not self._root.is_dir():
            msg = f"Not a directory: '{root}'"
            raise NotADirectoryError(msg)
        self._prefix = f"{self._root.name}/"
        self._names = sorted(
            self._prefix + path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        )

    @staticmethod
    def _is_safe_path(base_dir: Path, full_path: Path) -> bool:
        """Check if full_path is safely within base_dir."""
        try:
            full_path.resolve().relative_to(base_dir.resolve())
            return True
        except ValueError:
            return False

    def _resolve_entry(self, name: str) -> Path:
        if not name.startswith(self._prefix):
            msg = f"Entry not found: '{name}'"
            raise EntryReadError(msg, entry_name=name)
        relative = name[len(self._prefix) :]
        if ".." in relative or Path(relative).is_absolute():
            msg = f"Path traversal sequences not allowed in entry name: '{name}'"
            raise EntryReadError(msg, entry_name=name)
        full_path = self._root / relative
        if not self._is_safe_path(self._root, full_path):
            msg = f"Path traversal detected: entry '{name}' escapes package root"
            raise EntryReadError(msg, entry_name=name)
        return full_path

    def list_entry_names(self) -> list[str]:
        self._check_open()
        return list(self._names)

    def read_entry(self, name: str, *, max_size: int | None = None) -> bytes:
        self._check_open()
        path = self._resolve_entry(name)
        try:
            self._check_size(name, path.stat().st_size, max_size)
            with path.open("rb") as handle:
                data = handle.read() if max_size is None else handle.read(max_size + 1)
        except OSError as e:
            msg = f"Cannot read entry '{name}': {e}"
            raise EntryReadError(msg, entry_name=name) from e
        self._check_size(name, len(data), max_size)
        return data

    def release(self) -> None:
        self._names = []
        super().release()


class StaticPackageSource:
    """Source serving a fixed in-memory set of entries.

    Every acquire() returns a fresh MemoryPackage, so concurrent loads never
    share a package.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, bytes]) -> None:
        self._entries: dict[str, bytes] = dict(entries)

    async def acquire(self) -> MemoryPackage:
        return MemoryPackage(self._entries)


class ZipFileSource:
    """Source reading a zip archive from the local file system.

    File I/O runs in a worker thread so the event loop is never blocked.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        if not str(path):
            msg = "Archive path cannot be empty"
            raise ConfigurationError(msg)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def acquire(self) -> ZipPackage:
        try:
            data = await asyncio.to_thread(self._path.read_bytes)
            return ZipPackage(data)
        except (OSError, zipfile.BadZipFile) as e:
            msg = f"Cannot open archive '{self._path}': {e}"
            raise AcquisitionError(msg) from e


class UrlPackageSource:
    """Source downloading a zip archive over HTTP(S) with httpx.

    Non-2xx responses, transport errors and payloads that are not zip
    archives all fail acquisition. Local archives belong to ZipFileSource.

    Args:
        url: Archive URL
        timeout: Request timeout in seconds (default: DEFAULT_DOWNLOAD_TIMEOUT)
        transport: httpx transport override, e.g. httpx.MockTransport in tests
    """

    __slots__ = ("_timeout", "_transport", "_url")

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url or not url.strip():
            msg = "Archive URL cannot be empty"
            raise ConfigurationError(msg)
        if timeout is not None and timeout <= 0:
            msg = "timeout must be positive"
            raise ConfigurationError(msg)
        self._url = url
        self._timeout = timeout if timeout is not None else DEFAULT_DOWNLOAD_TIMEOUT
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    async def acquire(self) -> ZipPackage:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self._url)
                response.raise_for_status()
            return ZipPackage(response.content)
        except (httpx.HTTPError, httpx.InvalidURL, zipfile.BadZipFile) as e:
            msg = f"Cannot download archive '{self._url}': {e}"
            raise AcquisitionError(msg) from e


class DirectorySource:
    """Source exposing a directory tree as a package.

    Useful during development, before resources are packed into an archive.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        if not str(path):
            msg = "Directory path cannot be empty"
            raise ConfigurationError(msg)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def acquire(self) -> DirectoryPackage:
        try:
            return await asyncio.to_thread(DirectoryPackage, self._path)
        except OSError as e:
            msg = f"Cannot open directory '{self._path}': {e}"
            raise AcquisitionError(msg) from e
