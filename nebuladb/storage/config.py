"""Configuration of the storage engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from nebuladb.core import Config

__all__ = ["CompressionType", "StorageConfig"]


class CompressionType(enum.IntEnum):
    """Compression algorithms; the value is the byte stored on disk."""

    NONE = 0
    SNAPPY = 1
    ZSTD = 2
    LZ4 = 3


@dataclass
class StorageConfig:
    """Settings for the storage engine."""

    base: Config = field(default_factory=Config)
    block_size: int = 4 * 1024 * 1024
    compression: CompressionType = CompressionType.ZSTD
    flush_threshold: int = 1000

    def __post_init__(self) -> None:
        self.compression = CompressionType(self.compression)
        if self.block_size < 0:
            raise ValueError(f"block_size must not be negative: {self.block_size}")
        if self.flush_threshold < 0:
            raise ValueError(
                f"flush_threshold must not be negative: {self.flush_threshold}"
            )