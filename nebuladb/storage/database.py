"""Database store tying storage settings to write-ahead log settings."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable

from nebuladb.core import NebulaError
from nebuladb.storage.config import StorageConfig
from nebuladb.wal.config import WalConfig

__all__ = ["DatabaseStore"]


class DatabaseStore:
    """A database directory with its storage and WAL configuration."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        storage_config: StorageConfig | None = None,
        wal_config: WalConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path)
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise NebulaError(f"Failed to create directory: {exc!r}") from exc
        self.storage_config = storage_config if storage_config is not None else StorageConfig()
        self.wal_config = wal_config if wal_config is not None else WalConfig()
        self._clock = clock
        self._start_time = clock()
        self._collections: dict[str, str] = {}

    def uptime_secs(self) -> int:
        """Whole seconds since the store was opened."""
        return int(self._clock() - self._start_time)

    def collection_count(self) -> int:
        """Number of open collections."""
        return len(self._collections)

    def close(self) -> None:
        """Forget every open collection."""
        self._collections.clear()

    def __enter__(self) -> DatabaseStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()