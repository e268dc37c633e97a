"""The storage engine: a directory of collections."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from nebuladb.storage.collection import Collection
from nebuladb.storage.config import StorageConfig

__all__ = ["Storage"]


class Storage:
    """Opens, closes and drops the collections under one base directory."""

    def __init__(self, path: Path, config: StorageConfig) -> None:
        self.path = path
        self.config = config
        self._collections: dict[str, Collection] = {}

    @classmethod
    def open(
        cls,
        path: str | os.PathLike[str],
        config: StorageConfig | None = None,
    ) -> Storage:
        """Open a storage engine at ``path``, creating the directory if needed."""
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return cls(path, config if config is not None else StorageConfig())

    def open_collection(self, name: str) -> Collection:
        """Return the open collection ``name``, opening it if necessary."""
        collection = self._collections.get(name)
        if collection is None:
            collection = Collection.open(name, self.path, self.config)
            self._collections[name] = collection
        return collection

    def close_collection(self, name: str) -> None:
        """Flush and forget an open collection; unknown names are ignored."""
        collection = self._collections.pop(name, None)
        if collection is not None:
            collection.close()

    def drop_collection(self, name: str) -> None:
        """Close a collection and delete its directory."""
        self.close_collection(name)
        path = self.path / name
        if path.exists():
            shutil.rmtree(path)

    def close(self) -> None:
        """Close every open collection."""
        for name in list(self._collections):
            self.close_collection(name)

    def __contains__(self, name: object) -> bool:
        return name in self._collections

    def __len__(self) -> int:
        return len(self._collections)

    def __enter__(self) -> Storage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()