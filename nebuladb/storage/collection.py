"""Collections: named sets of documents stored in blocks."""

from __future__ import annotations

import os
import time
from pathlib import Path

from nebuladb.storage.config import StorageConfig
from nebuladb.storage.manager import BlockManager

__all__ = ["Collection"]


def _tombstone_id(doc_id: bytes) -> bytes:
    return b"_" + bytes(doc_id) + b"_"


class Collection:
    """A named collection of documents backed by a block manager."""

    def __init__(self, name: str, path: Path, block_manager: BlockManager) -> None:
        self.name = name
        self.path = path
        self.block_manager = block_manager

    @classmethod
    def open(
        cls,
        name: str,
        base_path: str | os.PathLike[str],
        config: StorageConfig,
    ) -> Collection:
        """Open a collection under ``base_path``, creating its directory if needed."""
        path = Path(base_path) / name
        path.mkdir(parents=True, exist_ok=True)
        return cls(name, path, BlockManager(name, path, config))

    def insert(self, doc_id: bytes, data: bytes) -> None:
        """Store a document."""
        self.block_manager.insert(doc_id, data)

    def scan(self) -> list[bytes]:
        """List the ids of the stored documents."""
        return self.block_manager.scan_document_ids()

    def get(self, doc_id: bytes) -> bytes | None:
        """Return a document's data, or ``None`` if it is missing or deleted."""
        data = self.block_manager.find_document(doc_id)
        if data is None:
            return None
        if self.block_manager.find_document(_tombstone_id(doc_id)) is not None:
            return None
        return data

    def delete(self, doc_id: bytes) -> bool:
        """Mark a document as deleted; return False if it was not found.

        The document itself stays on disk; a tombstone entry hides it.
        """
        if self.get(doc_id) is None:
            return False
        tombstone = (
            '{"_deleted": true, "_id": "%s", "_deleted_at": %d}'
            % (bytes(doc_id).decode("utf-8", "replace"), int(time.time()))
        ).encode("utf-8")
        self.block_manager.insert(_tombstone_id(doc_id), tombstone)
        return True

    def close(self) -> None:
        """Flush pending documents to disk."""
        self.block_manager.flush()

    def __enter__(self) -> Collection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Collection(name={self.name!r}, path={str(self.path)!r})"