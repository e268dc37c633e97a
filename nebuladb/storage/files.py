"""Layout of collection directories and files under a data directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

__all__ = ["FileManager"]


class FileManager:
    """Creates, opens and removes collection files under one data directory."""

    def __init__(self, data_dir: str | os.PathLike[str]) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def collection_path(self, collection_name: str) -> Path:
        """Directory that holds a collection's files."""
        return self.data_dir / collection_name

    def create_collection(self, collection_name: str) -> None:
        """Create a collection directory if it is missing."""
        self.collection_path(collection_name).mkdir(parents=True, exist_ok=True)

    def collection_exists(self, collection_name: str) -> bool:
        """True if the collection directory exists."""
        return self.collection_path(collection_name).is_dir()

    def list_collections(self) -> list[str]:
        """Names of all collection directories, sorted."""
        return sorted(entry.name for entry in self.data_dir.iterdir() if entry.is_dir())

    def _file_path(self, collection_name: str, file_name: str) -> Path:
        return self.collection_path(collection_name) / file_name

    def create_file(self, collection_name: str, file_name: str) -> BinaryIO:
        """Create or truncate a file and return it open for writing."""
        path = self._file_path(collection_name, file_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        return open(path, "wb")

    def open_file(self, collection_name: str, file_name: str) -> BinaryIO:
        """Open an existing file for reading."""
        return open(self._file_path(collection_name, file_name), "rb")

    def delete_file(self, collection_name: str, file_name: str) -> None:
        """Remove a file."""
        self._file_path(collection_name, file_name).unlink()