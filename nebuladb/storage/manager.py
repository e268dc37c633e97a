"""Block manager: packs a collection's documents into blocks on disk."""

from __future__ import annotations

import logging
import os
import string
import struct
from pathlib import Path
from typing import BinaryIO, Iterator

from nebuladb.core import NebulaError
from nebuladb.storage.block import Block, BlockFooter, BlockHeader, DocumentEntry
from nebuladb.storage.config import StorageConfig

__all__ = ["BlockManager", "MAX_BLOCK_SIZE", "BLOCKS_FILE_NAME"]

log = logging.getLogger(__name__)

MAX_BLOCK_SIZE = 4
"""Maximum size of blocks in MiB."""

BLOCKS_FILE_NAME = "blocks.bin"

_ID_LEN = struct.Struct("<H")
_DATA_LEN = struct.Struct("<I")
_MIN_ENTRY_SIZE = _ID_LEN.size + _DATA_LEN.size
_ID_BYTES = frozenset(
    (string.ascii_letters + string.digits + string.punctuation + " \t\n\x0c\r").encode(
        "ascii"
    )
)


def _is_tombstone_id(doc_id: bytes) -> bool:
    return doc_id.startswith(b"_") and doc_id.endswith(b"_")


def _iter_entries(data: bytes) -> Iterator[tuple[bytes, bytes | None]]:
    """Yield ``(id, payload)`` for each entry packed in ``data``.

    When an entry's id is present but its payload is cut short, it is
    yielded with ``None`` as payload and iteration stops.
    """
    offset = 0
    while offset + _ID_LEN.size <= len(data):
        (id_len,) = _ID_LEN.unpack_from(data, offset)
        id_end = offset + _ID_LEN.size + id_len
        if id_end > len(data):
            return
        entry_id = bytes(data[offset + _ID_LEN.size : id_end])
        if id_end + _DATA_LEN.size > len(data):
            yield entry_id, None
            return
        (data_len,) = _DATA_LEN.unpack_from(data, id_end)
        payload_start = id_end + _DATA_LEN.size
        payload_end = payload_start + data_len
        if payload_end > len(data):
            yield entry_id, None
            return
        yield entry_id, bytes(data[payload_start:payload_end])
        offset = payload_end


def _read_exact(file: BinaryIO, count: int, what: str) -> bytes:
    chunk = file.read(count)
    if len(chunk) < count:
        raise NebulaError(f"Failed to read {what}: unexpected end of file")
    return chunk


class BlockManager:
    """Buffers documents in an active block and writes full blocks to disk."""

    def __init__(self, name: str, path: str | os.PathLike[str], config: StorageConfig) -> None:
        self.name = name
        self.path = Path(path)
        self.config = config
        self.active_block: Block | None = None
        self.current_block_idx = 0
        self.base_file_path = self.path / BLOCKS_FILE_NAME

    def _empty_block_size(self) -> int:
        return Block.create(self.config.compression).size()

    def _ensure_active_block(self) -> Block:
        if self.active_block is None:
            if self.base_file_path.exists():
                self.current_block_idx = self._find_next_block_idx()
            self.active_block = Block.create(self.config.compression)
        return self.active_block

    def _flush_if_needed(self) -> None:
        if self.active_block is not None and self.active_block.size() >= self.config.flush_threshold:
            self.flush()

    def flush(self) -> None:
        """Write the active block to disk and start a new one."""
        block = self.active_block
        if block is None:
            return
        mode = "r+b" if self.base_file_path.exists() else "w+b"
        try:
            file = open(self.base_file_path, mode)
        except OSError as exc:
            raise NebulaError(f"Failed to open file: {exc}") from exc
        with file:
            position = self.current_block_idx * block.size()
            try:
                file.seek(position)
                file.write(block.to_bytes())
            except OSError as exc:
                raise NebulaError(f"Failed to write block: {exc}") from exc

            self.current_block_idx += 1
            self.active_block = Block.create(self.config.compression)

            try:
                file.flush()
                os.fsync(file.fileno())
            except OSError as exc:
                raise NebulaError(f"Failed to sync file: {exc}") from exc

    def _find_next_block_idx(self) -> int:
        try:
            file_size = self.base_file_path.stat().st_size
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise NebulaError(f"Failed to get metadata: {exc}") from exc
        if file_size == 0:
            return 0
        # Every block is assumed to have the size of an empty one.
        return file_size // self._empty_block_size()

    def insert(self, doc_id: bytes, data: bytes) -> None:
        """Add a document to the active block, flushing when it is full."""
        block = self._ensure_active_block()
        block.add_document(DocumentEntry(doc_id=doc_id, data=data))
        self._flush_if_needed()

    def read_document(self, block_index: int, offset: int) -> bytes:
        """Read the data of the entry at ``offset`` within a stored block."""
        try:
            file = open(self.base_file_path, "rb")
        except OSError as exc:
            raise NebulaError(f"Failed to open file: {exc}") from exc
        with file:
            position = block_index * self._empty_block_size()
            file.seek(position)
            _read_exact(file, BlockHeader.SIZE, "header")
            file.seek(position + BlockHeader.SIZE + offset)
            (id_len,) = _ID_LEN.unpack(_read_exact(file, _ID_LEN.size, "ID length"))
            file.seek(id_len, os.SEEK_CUR)
            (data_len,) = _DATA_LEN.unpack(_read_exact(file, _DATA_LEN.size, "data length"))
            return _read_exact(file, data_len, "data")

    def find_document(self, doc_id: bytes) -> bytes | None:
        """Return the data of a document, or ``None`` if it is not found."""
        doc_id = bytes(doc_id)
        if not self.base_file_path.exists():
            return None

        if self.active_block is not None:
            found = self._search_block(self.active_block, doc_id)
            if found is not None:
                return found

        try:
            file = open(self.base_file_path, "rb")
        except OSError as exc:
            raise NebulaError(f"Failed to open file: {exc}") from exc
        with file:
            file_size = os.fstat(file.fileno()).st_size
            if file_size == 0:
                return None
            block_size = self._empty_block_size()
            # Newest blocks first.
            for block_idx in reversed(range(self.current_block_idx)):
                position = block_idx * block_size
                if position >= file_size:
                    continue
                file.seek(position)
                raw = file.read(block_size)
                if len(raw) < BlockHeader.SIZE:
                    continue
                try:
                    block = Block.from_bytes(raw)
                except NebulaError:
                    continue
                found = self._search_block(block, doc_id)
                if found is not None:
                    return found
        return None

    @staticmethod
    def _search_block(block: Block, doc_id: bytes) -> bytes | None:
        for entry_id, payload in _iter_entries(block.data):
            if entry_id == doc_id:
                return payload
        return None

    def scan_document_ids(self) -> list[bytes]:
        """List the ids of all documents, tombstones excluded."""
        document_ids: list[bytes] = []
        if self.active_block is not None:
            document_ids.extend(
                entry_id
                for entry_id, _ in _iter_entries(self.active_block.data)
                if not _is_tombstone_id(entry_id)
            )

        if not self.base_file_path.exists():
            return document_ids
        try:
            content = self.base_file_path.read_bytes()
        except OSError as exc:
            raise NebulaError(f"Failed to read blocks file: {exc}") from exc
        log.debug("scanning %d bytes of %s", len(content), self.base_file_path)

        position = 0
        while position < len(content) - 4:
            if content[position : position + 4] == BlockHeader.MAGIC:
                document_ids.extend(self._ids_in_raw_block(content[position:]))
                position += 4
            else:
                position += 1
        return document_ids

    @staticmethod
    def _ids_in_raw_block(raw: bytes) -> Iterator[bytes]:
        """Heuristically pick document ids out of a raw block."""
        if len(raw) < BlockHeader.SIZE:
            return
        offset = BlockHeader.SIZE
        while offset < len(raw) - _MIN_ENTRY_SIZE:
            (id_len,) = _ID_LEN.unpack_from(raw, offset)
            id_end = offset + _ID_LEN.size + id_len
            if id_len == 0 or id_end > len(raw):
                offset += 1
                continue
            entry_id = bytes(raw[offset + _ID_LEN.size : id_end])
            if _is_tombstone_id(entry_id) or not all(b in _ID_BYTES for b in entry_id):
                offset += 1
                continue
            yield entry_id
            if id_end + _DATA_LEN.size <= len(raw):
                (data_len,) = _DATA_LEN.unpack_from(raw, id_end)
                offset = id_end + _DATA_LEN.size + data_len
            else:
                offset = id_end

    def __repr__(self) -> str:
        return (
            f"BlockManager(name={self.name!r}, path={str(self.path)!r}, "
            f"current_block_idx={self.current_block_idx})"
        )