"""Configuration of the write-ahead log."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["WalConfig"]


@dataclass
class WalConfig:
    """Settings for write-ahead logging."""

    dir_path: str = "wal"
    max_file_size: int = 64 * 1024 * 1024
    sync_on_write: bool = True
    checkpoint_interval: int = 300

    def __post_init__(self) -> None:
        if self.max_file_size < 0:
            raise ValueError(f"max_file_size must not be negative: {self.max_file_size}")
        if self.checkpoint_interval < 0:
            raise ValueError(
                f"checkpoint_interval must not be negative: {self.checkpoint_interval}"
            )