"""Core types shared by every part of the database."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["NebulaError", "Config", "add"]

DEFAULT_DATA_DIR = "/tmp/nebuladb"
DEFAULT_MAX_SIZE = 1024 * 1024 * 1024  # 1 GiB


class NebulaError(Exception):
    """Base class for errors raised by the database.

    Failures of the operating system surface as ``OSError`` and are
    not wrapped; everything else is reported through this class.
    """


@dataclass
class Config:
    """Core configuration for the database."""

    data_dir: str = DEFAULT_DATA_DIR
    max_size: int = DEFAULT_MAX_SIZE

    def __post_init__(self) -> None:
        if self.max_size < 0:
            raise ValueError(f"max_size must not be negative: {self.max_size}")


def add(left: int, right: int) -> int:
    """Return the sum of two sizes."""
    return left + right