"""Whole-document stores backing the catalog and follower caches.

Both caches keep a single document that is read and replaced as a unit.
Where that document lives is chosen once at startup:

- ``MemoryStore`` keeps it in process memory (serverless deployments).
- ``JsonFileStore`` keeps it as a JSON file, validated through a pydantic
  ``TypeAdapter`` on read.

A missing or unreadable file reads as ``None``, the same as an empty
cache; callers never see a decode error.
"""

import asyncio
from pathlib import Path
from typing import Generic, Literal, Protocol, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from coincompare.core.exceptions import ConfigurationError

log = structlog.get_logger(__name__)

T = TypeVar("T")


class DocumentStore(Protocol[T]):
    """Read/replace access to one cached document."""

    async def read(self) -> T | None: ...

    async def write(self, value: T) -> None: ...


class MemoryStore(Generic[T]):
    """Holds the document in process memory."""

    def __init__(self) -> None:
        self._value: T | None = None

    async def read(self) -> T | None:
        return self._value

    async def write(self, value: T) -> None:
        self._value = value


class JsonFileStore(Generic[T]):
    """Holds the document in a JSON file.

    The last parsed document is memoized against the file's mtime so
    repeated reads of an unchanged file skip decoding. Writes go to a
    temporary file that then replaces the target.
    """

    def __init__(self, path: Path, adapter: TypeAdapter[T]) -> None:
        self.path = path
        self._adapter = adapter
        self._memo: tuple[int, T] | None = None

    async def read(self) -> T | None:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, value: T) -> None:
        await asyncio.to_thread(self._write_sync, value)

    def _read_sync(self) -> T | None:
        try:
            mtime = self.path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

        if self._memo is not None and self._memo[0] == mtime:
            return self._memo[1]

        try:
            value = self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            log.warning("store_read_failed", path=str(self.path), error=str(e))
            return None

        self._memo = (mtime, value)
        return value

    def _write_sync(self, value: T) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = self._adapter.dump_json(value, by_alias=True, indent=2)

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(self.path)

        self._memo = (self.path.stat().st_mtime_ns, value)
        log.debug("store_written", path=str(self.path), size=len(data))


def build_store(
    backend: Literal["file", "memory"],
    path: Path,
    adapter: TypeAdapter[T],
) -> DocumentStore[T]:
    """Create the store for the configured backend.

    Raises:
        ConfigurationError: If the backend name is unknown.
    """
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        return JsonFileStore(path, adapter)
    raise ConfigurationError(f"Unknown cache backend: {backend}")
