"""Block compression.

Every algorithm currently stores data unchanged, so blocks written with
any compression type can be read back with any other.
"""

from __future__ import annotations

from nebuladb.storage.config import CompressionType

__all__ = ["compress", "decompress"]


def compress(data: bytes, compression_type: CompressionType) -> bytes:
    """Compress ``data`` with the given algorithm."""
    CompressionType(compression_type)
    return bytes(data)


def decompress(data: bytes, compression_type: CompressionType) -> bytes:
    """Decompress ``data`` with the given algorithm."""
    CompressionType(compression_type)
    return bytes(data)