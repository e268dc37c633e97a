"""Storage blocks and the document entries packed inside them."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass, field
from typing import ClassVar

from nebuladb.core import NebulaError
from nebuladb.storage.config import CompressionType

__all__ = ["BlockHeader", "BlockFooter", "DocumentEntry", "Block"]

_BLOCK_MAGIC = b"NBLD"
_BLOCK_VERSION = 1
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

# magic, version, compression, doc count, uncompressed, compressed, created at
_HEADER = struct.Struct("<4sBBIQQQ")
# checksum, magic
_FOOTER = struct.Struct("<I4s")
_ID_LEN = struct.Struct("<H")
_DATA_LEN = struct.Struct("<I")


def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range (0..{upper}): {value}")


def _split64(value: int) -> int:
    return (value & _U32_MAX) + (value >> 32)


@dataclass
class BlockHeader:
    """Header at the start of every data block."""

    SIZE: ClassVar[int] = _HEADER.size
    MAGIC: ClassVar[bytes] = _BLOCK_MAGIC
    VERSION: ClassVar[int] = _BLOCK_VERSION

    compression: CompressionType
    doc_count: int
    uncompressed_size: int
    compressed_size: int
    created_at: int
    magic: bytes = _BLOCK_MAGIC
    version: int = _BLOCK_VERSION

    def __post_init__(self) -> None:
        self.compression = CompressionType(self.compression)
        self.magic = bytes(self.magic)
        if len(self.magic) != 4:
            raise ValueError(f"magic must be 4 bytes long: {self.magic!r}")
        _check_range("version", self.version, 0xFF)
        _check_range("doc_count", self.doc_count, _U32_MAX)
        _check_range("uncompressed_size", self.uncompressed_size, _U64_MAX)
        _check_range("compressed_size", self.compressed_size, _U64_MAX)
        _check_range("created_at", self.created_at, _U64_MAX)

    @classmethod
    def create(
        cls,
        compression: CompressionType,
        doc_count: int,
        uncompressed_size: int,
        compressed_size: int,
    ) -> BlockHeader:
        """Build a header stamped with the current time."""
        return cls(
            compression=compression,
            doc_count=doc_count,
            uncompressed_size=uncompressed_size,
            compressed_size=compressed_size,
            created_at=int(time.time()),
        )


@dataclass
class BlockFooter:
    """Footer at the end of every data block."""

    SIZE: ClassVar[int] = _FOOTER.size

    checksum: int
    magic: bytes = _BLOCK_MAGIC

    def __post_init__(self) -> None:
        self.magic = bytes(self.magic)
        if len(self.magic) != 4:
            raise ValueError(f"magic must be 4 bytes long: {self.magic!r}")
        _check_range("checksum", self.checksum, _U32_MAX)


@dataclass
class DocumentEntry:
    """A document stored in a block.

    Encoded as ``[id length (2)][id][data length (4)][data]``, little endian.
    """

    doc_id: bytes
    data: bytes
    offset: int = 0

    def __post_init__(self) -> None:
        self.doc_id = bytes(self.doc_id)
        self.data = bytes(self.data)
        _check_range("document id length", len(self.doc_id), _U16_MAX)
        _check_range("document data length", len(self.data), _U32_MAX)

    def size(self) -> int:
        """Encoded size of the entry."""
        return _ID_LEN.size + len(self.doc_id) + _DATA_LEN.size + len(self.data)

    def to_bytes(self) -> bytes:
        """Encode the entry."""
        return b"".join(
            (
                _ID_LEN.pack(len(self.doc_id)),
                self.doc_id,
                _DATA_LEN.pack(len(self.data)),
                self.data,
            )
        )

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> DocumentEntry:
        """Decode an entry from the start of ``data``.

        ``offset`` records where the entry sits within its block.
        """
        if len(data) < _ID_LEN.size + _DATA_LEN.size:
            raise NebulaError("Invalid document entry: too short")
        (id_len,) = _ID_LEN.unpack_from(data, 0)
        data_start = _ID_LEN.size + id_len
        if len(data) < data_start + _DATA_LEN.size:
            raise NebulaError("Invalid document entry: too short for ID")
        (data_len,) = _DATA_LEN.unpack_from(data, data_start)
        payload_start = data_start + _DATA_LEN.size
        if len(data) < payload_start + data_len:
            raise NebulaError("Invalid document entry: too short for data")
        return cls(
            doc_id=bytes(data[_ID_LEN.size : data_start]),
            data=bytes(data[payload_start : payload_start + data_len]),
            offset=offset,
        )


@dataclass
class Block:
    """A block of document entries framed by a header and a footer."""

    header: BlockHeader
    data: bytearray = field(default_factory=bytearray)
    footer: BlockFooter = field(default_factory=lambda: BlockFooter(0))

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)

    @classmethod
    def create(cls, compression: CompressionType) -> Block:
        """Build an empty block."""
        return cls(
            header=BlockHeader.create(compression, 0, 0, 0),
            data=bytearray(),
            footer=BlockFooter(0),
        )

    def add_document(self, doc: DocumentEntry) -> None:
        """Append a document, updating its offset, the header and the checksum."""
        doc.offset = len(self.data)
        encoded = doc.to_bytes()
        self.data.extend(encoded)
        self.header.doc_count += 1
        self.header.uncompressed_size += len(encoded)
        self.footer.checksum = self.compute_checksum()

    def doc_count(self) -> int:
        """Number of documents in the block."""
        return self.header.doc_count

    def size(self) -> int:
        """Encoded size of the whole block."""
        return BlockHeader.SIZE + len(self.data) + BlockFooter.SIZE

    def to_bytes(self) -> bytes:
        """Encode the block."""
        h = self.header
        return b"".join(
            (
                _HEADER.pack(
                    h.magic,
                    h.version,
                    h.compression,
                    h.doc_count,
                    h.uncompressed_size,
                    h.compressed_size,
                    h.created_at,
                ),
                bytes(self.data),
                _FOOTER.pack(self.footer.checksum, self.footer.magic),
            )
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Block:
        """Decode a block that fills the whole of ``data``."""
        if len(data) < BlockHeader.SIZE + BlockFooter.SIZE:
            raise NebulaError("Invalid block: too short")
        (
            magic,
            version,
            compression_byte,
            doc_count,
            uncompressed_size,
            compressed_size,
            created_at,
        ) = _HEADER.unpack_from(data, 0)
        if magic != BlockHeader.MAGIC:
            raise NebulaError("Invalid block: wrong magic number")
        try:
            compression = CompressionType(compression_byte)
        except ValueError:
            raise NebulaError("Invalid compression type") from None

        data_end = len(data) - BlockFooter.SIZE
        payload = bytearray(data[BlockHeader.SIZE : data_end])
        checksum, footer_magic = _FOOTER.unpack_from(data, data_end)
        if footer_magic != BlockHeader.MAGIC:
            raise NebulaError("Invalid block: wrong footer magic number")

        header = BlockHeader(
            compression=compression,
            doc_count=doc_count,
            uncompressed_size=uncompressed_size,
            compressed_size=compressed_size,
            created_at=created_at,
            magic=magic,
            version=version,
        )
        return cls(header=header, data=payload, footer=BlockFooter(checksum, footer_magic))

    def compute_checksum(self) -> int:
        """32-bit wrapping sum over the header fields and the data bytes."""
        h = self.header
        total = (
            sum(h.magic)
            + h.version
            + int(h.compression)
            + h.doc_count
            + _split64(h.uncompressed_size)
            + _split64(h.compressed_size)
            + _split64(h.created_at)
            + sum(self.data)
        )
        return total & _U32_MAX