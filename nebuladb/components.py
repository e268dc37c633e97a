"""Configuration of the archive, graph, index and query components."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ArchiveConfig", "GraphConfig", "IndexConfig", "QueryConfig"]

_U8_MAX = 0xFF
_U32_MAX = 0xFFFF_FFFF


def _check_range(name: str, value: int, upper: int | None = None) -> None:
    if value < 0 or (upper is not None and value > upper):
        limit = f"0..{upper}" if upper is not None else "non-negative"
        raise ValueError(f"{name} out of range ({limit}): {value}")


@dataclass
class ArchiveConfig:
    """Settings for archiving cold data."""

    compression_level: int = 6
    max_size_mb: int = 1024

    def __post_init__(self) -> None:
        _check_range("compression_level", self.compression_level, _U8_MAX)
        _check_range("max_size_mb", self.max_size_mb, _U32_MAX)


@dataclass
class GraphConfig:
    """Settings for graph traversal."""

    max_depth: int = 10
    max_traversal_nodes: int = 1000

    def __post_init__(self) -> None:
        _check_range("max_depth", self.max_depth, _U8_MAX)
        _check_range("max_traversal_nodes", self.max_traversal_nodes, _U32_MAX)


@dataclass
class IndexConfig:
    """Settings for document indexing."""

    max_cache_size_mb: int = 64
    b_tree_order: int = 16

    def __post_init__(self) -> None:
        _check_range("max_cache_size_mb", self.max_cache_size_mb, _U32_MAX)
        _check_range("b_tree_order", self.b_tree_order, _U8_MAX)


@dataclass
class QueryConfig:
    """Settings for the query engine."""

    max_results: int = 1000
    timeout_ms: int = 30000

    def __post_init__(self) -> None:
        _check_range("max_results", self.max_results)
        _check_range("timeout_ms", self.timeout_ms)