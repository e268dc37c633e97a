"""Entries of the write-ahead log and their binary encoding."""

from __future__ import annotations

import enum
import struct
import time
from dataclasses import dataclass
from typing import ClassVar

from nebuladb.core import NebulaError

__all__ = ["checksum", "EntryType", "EntryHeader", "WalEntry"]

_ENTRY_MAGIC = b"NBWL"
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

# magic, entry type, collection id, transaction id, document id length
_PREFIX = struct.Struct("<4sBQQH")
# data size, checksum, timestamp
_SUFFIX = struct.Struct("<IIQ")


def checksum(data: bytes) -> int:
    """Return the 32-bit wrapping sum of the bytes of ``data``."""
    return sum(data) & _U32_MAX


def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range (0..{upper}): {value}")


class EntryType(enum.IntEnum):
    """Kinds of log entry; the value is the byte stored on disk."""

    NOOP = 0
    INSERT = 1
    UPDATE = 2
    DELETE = 3
    BEGIN_TX = 4
    COMMIT_TX = 5
    ABORT_TX = 6
    CHECKPOINT = 7

    @classmethod
    def from_byte(cls, byte: int) -> EntryType:
        """Decode an entry type, raising ``NebulaError`` for unknown bytes."""
        try:
            return cls(byte)
        except ValueError:
            raise NebulaError(f"Invalid WAL entry type: {byte}") from None


@dataclass
class EntryHeader:
    """Header that precedes the data of every log entry."""

    FIXED_SIZE: ClassVar[int] = _PREFIX.size + _SUFFIX.size
    MAGIC: ClassVar[bytes] = _ENTRY_MAGIC

    entry_type: EntryType
    collection_id: int
    transaction_id: int
    document_id: bytes
    data_size: int
    checksum: int
    timestamp: int
    magic: bytes = _ENTRY_MAGIC

    def __post_init__(self) -> None:
        self.entry_type = EntryType(self.entry_type)
        self.document_id = bytes(self.document_id)
        self.magic = bytes(self.magic)
        if len(self.magic) != 4:
            raise ValueError(f"magic must be 4 bytes long: {self.magic!r}")
        _check_range("collection_id", self.collection_id, _U64_MAX)
        _check_range("transaction_id", self.transaction_id, _U64_MAX)
        _check_range("document_id length", len(self.document_id), _U16_MAX)
        _check_range("data_size", self.data_size, _U32_MAX)
        _check_range("checksum", self.checksum, _U32_MAX)
        _check_range("timestamp", self.timestamp, _U64_MAX)

    @classmethod
    def create(
        cls,
        entry_type: EntryType,
        collection_id: int,
        transaction_id: int,
        document_id: bytes,
        data_size: int,
        checksum: int,
    ) -> EntryHeader:
        """Build a header stamped with the current time."""
        return cls(
            entry_type=entry_type,
            collection_id=collection_id,
            transaction_id=transaction_id,
            document_id=document_id,
            data_size=data_size,
            checksum=checksum,
            timestamp=int(time.time()),
        )

    def size(self) -> int:
        """Encoded size of the header, document id included."""
        return self.FIXED_SIZE + len(self.document_id)

    def to_bytes(self) -> bytes:
        """Encode the header."""
        return b"".join(
            (
                _PREFIX.pack(
                    self.magic,
                    self.entry_type,
                    self.collection_id,
                    self.transaction_id,
                    len(self.document_id),
                ),
                self.document_id,
                _SUFFIX.pack(self.data_size, self.checksum, self.timestamp),
            )
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> tuple[EntryHeader, int]:
        """Decode a header; return it with the number of bytes it used."""
        if len(data) < cls.FIXED_SIZE - 2:
            raise NebulaError("Invalid WAL entry header: too short")

        magic, type_byte, collection_id, transaction_id, doc_id_len = (
            _PREFIX.unpack_from(data, 0)
        )
        if magic != cls.MAGIC:
            raise NebulaError("Invalid WAL entry header: wrong magic number")
        entry_type = EntryType.from_byte(type_byte)

        offset = _PREFIX.size
        if len(data) < offset + doc_id_len + _SUFFIX.size:
            raise NebulaError("Invalid WAL entry header: too short for document ID")

        document_id = bytes(data[offset : offset + doc_id_len])
        offset += doc_id_len
        data_size, entry_checksum, timestamp = _SUFFIX.unpack_from(data, offset)
        offset += _SUFFIX.size

        header = cls(
            entry_type=entry_type,
            collection_id=collection_id,
            transaction_id=transaction_id,
            document_id=document_id,
            data_size=data_size,
            checksum=entry_checksum,
            timestamp=timestamp,
            magic=magic,
        )
        return header, offset


@dataclass
class WalEntry:
    """A complete log entry: header followed by data."""

    header: EntryHeader
    data: bytes

    def __post_init__(self) -> None:
        self.data = bytes(self.data)

    @classmethod
    def create(
        cls,
        entry_type: EntryType,
        collection_id: int,
        transaction_id: int,
        document_id: bytes,
        data: bytes,
    ) -> WalEntry:
        """Build an entry, computing its size and checksum."""
        data = bytes(data)
        header = EntryHeader.create(
            entry_type,
            collection_id,
            transaction_id,
            document_id,
            len(data),
            checksum(data),
        )
        return cls(header=header, data=data)

    @classmethod
    def checkpoint(cls, collection_id: int) -> WalEntry:
        """Build a checkpoint marker for a collection."""
        return cls.create(EntryType.CHECKPOINT, collection_id, 0, b"", b"")

    @classmethod
    def begin_tx(cls, transaction_id: int) -> WalEntry:
        """Build a transaction-begin marker."""
        return cls.create(EntryType.BEGIN_TX, 0, transaction_id, b"", b"")

    @classmethod
    def commit_tx(cls, transaction_id: int) -> WalEntry:
        """Build a transaction-commit marker."""
        return cls.create(EntryType.COMMIT_TX, 0, transaction_id, b"", b"")

    @classmethod
    def abort_tx(cls, transaction_id: int) -> WalEntry:
        """Build a transaction-abort marker."""
        return cls.create(EntryType.ABORT_TX, 0, transaction_id, b"", b"")

    def size(self) -> int:
        """Encoded size of the whole entry."""
        return self.header.size() + len(self.data)

    def to_bytes(self) -> bytes:
        """Encode the entry."""
        return self.header.to_bytes() + self.data

    @classmethod
    def from_bytes(cls, data: bytes) -> tuple[WalEntry, int]:
        """Decode an entry; return it with the number of bytes it used."""
        header, offset = EntryHeader.from_bytes(data)
        end = offset + header.data_size
        if len(data) < end:
            raise NebulaError("Invalid WAL entry: data too short")

        payload = bytes(data[offset:end])
        if checksum(payload) != header.checksum:
            raise NebulaError("Invalid WAL entry: checksum mismatch")
        return cls(header=header, data=payload), end